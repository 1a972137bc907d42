"""
Global exception handlers and custom exception classes.
"""
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from typing import List, Optional
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

class ResourceNotFoundException(AppException):
    """Exception raised when a referenced record does not exist."""
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

class PermissionDeniedException(AppException):
    """Exception raised when the acting user may not touch a record."""
    def __init__(self, detail: str = "Permission denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)

class StoreUnavailableException(AppException):
    """Exception raised when the persistence layer rejects a call."""
    def __init__(self, detail: str = "Data store unavailable"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

class SchedulingValidationException(AppException):
    """Exception raised when scheduling fields are missing or inconsistent."""
    def __init__(self, detail: str = "Invalid scheduling data"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class InvalidTransitionException(AppException):
    """Exception raised when a status change is not allowed from the current state."""
    def __init__(self, current_status: str, target_status: str, detail: Optional[str] = None):
        message = detail or f"Cannot move from '{current_status}' to '{target_status}'"
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=message)

class SlotUnavailableException(AppException):
    """Exception raised when a requested start time is no longer bookable."""
    def __init__(self, detail: str = "The selected time slot is no longer available"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class UnsupportedRecurrenceException(AppException):
    """Exception raised for recurrence types whose next date cannot be computed."""
    def __init__(self, recurrence_type: str):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Unsupported recurrence type '{recurrence_type}'"
        )
        self.recurrence_type = recurrence_type

class BulkOperationException(AppException):
    """Exception raised when some records of a bulk operation failed."""
    def __init__(self, action: str, failed_ids: List[int], total: int):
        super().__init__(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Bulk {action} failed for {len(failed_ids)} of {total} follow-ups"
        )
        self.action = action
        self.failed_ids = failed_ids
        self.total = total


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
    if isinstance(exc, BulkOperationException):
        content["failed_ids"] = exc.failed_ids
    return JSONResponse(
        status_code=exc.status_code,
        content=content
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
            "errors": jsonable_errors(exc)
        }
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    """Strip non-serializable context (e.g. raised ValueErrors) from validation errors."""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


# Register exception handlers with FastAPI app
def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI application.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
