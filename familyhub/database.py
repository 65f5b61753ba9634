from typing import Any, Dict

from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from .config import settings


def engine_options(url: str) -> Dict[str, Any]:
    """Keyword arguments for ``create_engine`` suited to the backend in ``url``."""
    if url.startswith("sqlite"):
        # Request handlers may run on a different thread than the one that
        # opened the connection
        return {"connect_args": {"check_same_thread": False}, "echo": settings.DEBUG}

    return {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": 10,
        "max_overflow": 20,
        "echo": settings.DEBUG,
    }


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Request-scoped session; closed once the response is sent."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """Create any missing tables."""
    from .models import Base

    Base.metadata.create_all(bind=engine)
