"""
Global exception handlers and custom exception classes.
"""
from typing import Any, Dict, List, Optional
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
import logging

# Set up logging
logger = logging.getLogger(__name__)

class AppException(Exception):
    """
    Base exception class for application-specific exceptions.
    """
    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class AuthenticationError(AppException):
    """Raised when an operation needs a signed-in identity and none is present."""
    def __init__(self, detail: str = "No user logged in"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, detail)


class ProfileValidationError(AppException):
    """
    Raised when profile data does not have the expected shape.

    Used both by the required-field gate in front of the store and by the
    store boundary when a persisted row cannot be parsed into a Profile.
    """
    def __init__(self, detail: str = "Invalid profile data", errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(status.HTTP_422_UNPROCESSABLE_ENTITY, detail)
        self.errors = errors or []


class ProfileNotFoundError(AppException):
    """Raised when no profile row matches the requested id."""
    def __init__(self, detail: str = "Profile not found or inaccessible"):
        super().__init__(status.HTTP_404_NOT_FOUND, detail)


class StoreReadError(AppException):
    """Raised when the profile store fails to read a row."""
    def __init__(self, detail: str):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


class StoreWriteError(AppException):
    """Raised when the profile store rejects an upsert. The detail is the store's message."""
    def __init__(self, detail: str):
        super().__init__(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)


async def app_exception_handler(request: Request, exc: AppException):
    """
    Handler for application-specific exceptions.

    Args:
        request: The request that caused the exception
        exc: The exception instance

    Returns:
        JSONResponse: Standardized error response
    """
    logger.error(f"Application error: {exc.detail}")
    content = {"detail": exc.detail}
    if isinstance(exc, ProfileValidationError) and exc.errors:
        content["errors"] = exc.errors
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationError) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=headers
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Handler for request validation exceptions.

    Args:
        request: The request that caused the exception
        exc: The validation exception instance

    Returns:
        JSONResponse: Standardized error response with validation details
    """
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "detail": "Validation error",
            "errors": jsonable_errors(exc.errors())
        }
    )


def jsonable_errors(errors) -> List[Dict[str, Any]]:
    """
    Reduce pydantic error entries to JSON-safe location/message pairs.

    Pydantic v2 puts the raw exception object under ``ctx`` for custom
    validators, which the JSON encoder cannot serialize.
    """
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg", ""), "type": error.get("type", "")}
        for error in errors
    ]


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
