from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
import logging
from typing import Sequence, Any

from familyhub.schemas.result import Error, Result, ErrorCategory
from familyhub.core.exception import CustomException

logger = logging.getLogger(__name__)


def create_error_response(error: Error, headers: dict | None = None) -> JSONResponse:
    """Create standardized JSON error response"""
    return JSONResponse(
        status_code=error.status_code,
        content=Result.failure(error).model_dump(),
        headers=headers,
    )


def format_validation_error(errors: Sequence[Any]) -> str:
    """One `field: problem` entry per failing field, e.g. `email: value is not a valid email address`."""
    messages = []
    for error in errors:
        # Drop the request part ("body", "query", ...) FastAPI puts first
        loc = [str(part) for part in error.get("loc", ())]
        if len(loc) > 1 and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        field = ".".join(loc) or "request"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")

    return "; ".join(messages) if messages else "Validation failed"


STATUS_CATEGORIES = {
    400: ErrorCategory.BAD_REQUEST,
    401: ErrorCategory.AUTHENTICATION,
    403: ErrorCategory.AUTHORIZATION,
    404: ErrorCategory.NOT_FOUND,
    409: ErrorCategory.RESOURCE_CONFLICT,
}


def infer_category_from_status(status_code: int) -> ErrorCategory:
    if status_code in STATUS_CATEGORIES:
        return STATUS_CATEGORIES[status_code]
    if status_code >= 500:
        return ErrorCategory.INTERNAL
    if status_code >= 400:
        return ErrorCategory.BAD_REQUEST
    return ErrorCategory.CUSTOM


async def handle_custom_exception(request: Request, ex: CustomException) -> JSONResponse:
    """Handle custom application exceptions"""
    if ex.status_code >= 500:
        logger.error(
            f"{ex.category.value} on {request.method} {request.url.path}: {ex.detail}"
        )
    error = Error(message=ex.detail, status_code=ex.status_code, category=ex.category)
    return create_error_response(error, headers=ex.headers)


async def handle_validation_error(
    request: Request,
    ex: ValidationError | RequestValidationError | ResponseValidationError,
) -> JSONResponse:
    """Handle Pydantic validation errors. Malformed input is a 400."""
    if isinstance(ex, ResponseValidationError):
        logger.error(
            f"Response validation failed on {request.method} {request.url.path}: {ex.errors()}"
        )
        error = Error(
            message="An unexpected error occurred. Please try again later.",
            status_code=500,
            category=ErrorCategory.INTERNAL,
        )
        return create_error_response(error)

    error = Error(
        message=format_validation_error(ex.errors()),
        status_code=400,
        category=ErrorCategory.VALIDATION,
    )
    return create_error_response(error)


async def handle_http_exception(request: Request, ex: StarletteHTTPException) -> JSONResponse:
    """Handle FastAPI/Starlette HTTP exceptions (404 routes, 405 methods, ...)"""
    error = Error(
        message=ex.detail if isinstance(ex.detail, str) else str(ex.detail),
        status_code=ex.status_code,
        category=infer_category_from_status(ex.status_code),
    )
    return create_error_response(error, headers=getattr(ex, "headers", None))


async def handle_unhandled_exception(
    request: Request, ex: Exception, log_internal_errors: bool = True
) -> JSONResponse:
    """Handle unexpected exceptions"""
    if log_internal_errors:
        logger.error(
            f"Unhandled exception on {request.method} {request.url.path}",
            exc_info=ex,
            extra={
                "path": request.url.path,
                "method": request.method,
                "client": request.client.host if request.client else None,
            },
        )

    # Don't expose internal error details
    error = Error(
        message="An unexpected error occurred. Please try again later.",
        status_code=500,
        category=ErrorCategory.INTERNAL,
    )
    return create_error_response(error)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Install the handlers on the app itself. FastAPI resolves HTTPException
    and RequestValidationError before any middleware sees them.
    """
    app.add_exception_handler(CustomException, handle_custom_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(ResponseValidationError, handle_validation_error)
    app.add_exception_handler(ValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """
    Catch-all for exceptions that no registered handler claimed.
    Transforms them into standardized Result objects.
    """

    def __init__(self, app, log_internal_errors: bool = True):
        super().__init__(app)
        self.log_internal_errors = log_internal_errors
        self._register_handlers()

    def _register_handlers(self):
        """Register exception type to handler method mappings"""
        self.EXCEPTION_HANDLERS = {
            CustomException: handle_custom_exception,
            ValidationError: handle_validation_error,
            RequestValidationError: handle_validation_error,
            ResponseValidationError: handle_validation_error,
            StarletteHTTPException: handle_http_exception,
        }

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as ex:
            return await self._handle_exception(ex, request)

    async def _handle_exception(self, ex: Exception, request: Request) -> JSONResponse:
        for exc_type, handler in self.EXCEPTION_HANDLERS.items():
            if isinstance(ex, exc_type):
                return await handler(request, ex)

        # Default to internal server error
        return await handle_unhandled_exception(
            request, ex, log_internal_errors=self.log_internal_errors
        )
