from fastapi import HTTPException
from typing import Any, Optional
from familyhub.schemas.result import ErrorCategory


class CustomException(HTTPException):
    """
    Base for errors the API reports on purpose.

    Subclasses pin the HTTP status and the error category; the message ends
    up in ``error.message`` of the response envelope.
    """

    status: int = 500
    category: ErrorCategory = ErrorCategory.CUSTOM
    default_message: str = "The request could not be completed."

    def __init__(
        self,
        message: Optional[str] = None,
        status_code: Optional[int] = None,
        headers: Optional[dict] = None,
    ):
        super().__init__(
            status_code=status_code or self.status,
            detail=message or self.default_message,
            headers=headers,
        )

    def __str__(self) -> str:
        return str(self.detail)


class ResourceNotFoundException(CustomException):
    """A family, member, category, template or user that does not exist"""

    status = 404
    category = ErrorCategory.NOT_FOUND

    def __init__(
        self,
        resource_name: str,
        resource_id: Optional[Any] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            suffix = f" {resource_id}" if resource_id is not None else ""
            message = f"{resource_name}{suffix} not found"
        super().__init__(message)


class AuthenticationException(CustomException):
    """Missing, invalid or expired credentials"""

    status = 401
    category = ErrorCategory.AUTHENTICATION
    default_message = "Not authenticated"

    def __init__(self, message: Optional[str] = None):
        super().__init__(message, headers={"WWW-Authenticate": "Bearer"})


class AuthorizationException(CustomException):
    """Authenticated, but not allowed to touch the resource"""

    status = 403
    category = ErrorCategory.AUTHORIZATION
    default_message = "Forbidden"


class DuplicateResourceException(CustomException):
    """
    A unique value is already taken.

    Categories report 409; accounts keep the 400 clients already handle,
    so the status can be overridden per call.
    """

    status = 409
    category = ErrorCategory.RESOURCE_CONFLICT

    def __init__(
        self,
        resource_name: str,
        identifier: Optional[str] = None,
        status_code: Optional[int] = None,
        message: Optional[str] = None,
    ):
        if message is None:
            message = f"{resource_name} already exists"
            if identifier:
                message = f"{resource_name} '{identifier}' already exists"
        super().__init__(message, status_code=status_code)


class ValidationException(CustomException):
    """Input that passed schema checks but is still unusable"""

    status = 400
    category = ErrorCategory.VALIDATION

    def __init__(self, message: str, field: Optional[str] = None):
        if field:
            message = f"Invalid {field}: {message}"
        super().__init__(message)


class BadRequestException(CustomException):
    status = 400
    category = ErrorCategory.BAD_REQUEST
    default_message = "Bad request"


class InternalServerException(CustomException):
    """Server-side failure; details stay in the logs"""

    status = 500
    category = ErrorCategory.INTERNAL
    default_message = "Internal server error"
