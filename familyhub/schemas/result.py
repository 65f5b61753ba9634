from enum import Enum
from pydantic import BaseModel, ConfigDict
from typing import Generic, TypeVar, Optional

T = TypeVar("T")


class ErrorCategory(Enum):
    VALIDATION = "Validation"
    NOT_FOUND = "Not Found"
    AUTHENTICATION = "Authentication"
    AUTHORIZATION = "Authorization"
    INTERNAL = "Internal Server Error"
    BAD_REQUEST = "Bad Request"
    RESOURCE_CONFLICT = "Resource Conflict"
    CUSTOM = "Custom Error"


class Error(BaseModel):
    message: str
    status_code: int
    category: ErrorCategory

    model_config = ConfigDict(use_enum_values=True)


class Result(BaseModel, Generic[T]):
    """Envelope for every API response: ``{status, data, error}``."""

    status: bool
    error: Optional[Error] = None
    data: Optional[T] = None

    @classmethod
    def successful(cls, data: Optional[T] = None):
        return cls(status=True, data=data)

    @classmethod
    def failure(cls, error: Error):
        return cls(status=False, error=error)
