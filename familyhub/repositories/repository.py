from sqlalchemy import inspect, select
from sqlalchemy.orm import Session
from typing import Generic, Type, TypeVar, List, Optional, Dict, Any, Iterable
from familyhub.models.base import BaseModel

T = TypeVar("T", bound=BaseModel)


class BaseRepository(Generic[T]):
    """
    Common persistence operations for one model.

    Writes commit by default. With ``commit=False`` they only flush, so
    generated ids are available while the caller still owns the transaction.
    """

    def __init__(self, model: Type[T], db: Session):
        self.model = model
        self.db = db

    def get(self, id: int) -> Optional[T]:
        return self.db.get(self.model, id)

    def exists(self, id: int) -> bool:
        stmt = select(self.model.id).where(self.model.id == id).limit(1)
        return self.db.execute(stmt).first() is not None

    def create(self, obj: T, commit: bool = True) -> T:
        self.db.add(obj)
        self._persist(commit)
        self.db.refresh(obj)
        return obj

    def create_many(self, objs: Iterable[T], commit: bool = True) -> List[T]:
        objs = list(objs)
        self.db.add_all(objs)
        self._persist(commit)
        return objs

    def update(self, id: int, data: Dict[str, Any], commit: bool = True) -> Optional[T]:
        """
        Set the given column values on a row.

        Keys that are not columns of the model are ignored.

        Returns:
            The refreshed row, or None if no row has that id
        """
        obj = self.get(id)
        if obj is None:
            return None

        columns = inspect(self.model).columns.keys()
        for key, value in data.items():
            if key in columns:
                setattr(obj, key, value)

        self._persist(commit)
        self.db.refresh(obj)
        return obj

    def _persist(self, commit: bool) -> None:
        if commit:
            self.db.commit()
        else:
            self.db.flush()
