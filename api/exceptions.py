"""Centralized exception handlers for the API."""
from fastapi import Request
from fastapi.responses import JSONResponse

from companion_policy.exceptions import BaseAppException
from api.error_codes import get_http_status
from api.models.responses import APIResponse
from utils import get_logger

logger = get_logger("api_exceptions")


def handle_app_exception(request: Request, exc: BaseAppException) -> JSONResponse:
    """
    Handle all application exceptions.

    Maps internal error codes to HTTP status codes and returns the
    standard error envelope.
    """
    status_code, default_message = get_http_status(exc.error_code)
    trace_id = getattr(request.state, "trace_id", None)

    logger.warning(
        "app_exception",
        extra={
            "trace_id": trace_id,
            "path": request.url.path,
            "error_code": exc.error_code.name,
            "error": exc.message
        }
    )

    details = {k: v for k, v in exc.details.items() if k != "original_error"} if exc.details else None

    return APIResponse.error(
        message=str(exc) or default_message,
        error_code=exc.error_code.name,
        status_code=status_code,
        error_type=exc.__class__.__name__,
        details=details,
        trace_id=trace_id
    )


def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle exceptions that weren't caught by the application handler.

    Logs the full exception and returns a generic error to the client.
    """
    trace_id = getattr(request.state, "trace_id", "unknown")

    logger.exception(
        "Unexpected exception in API",
        extra={
            "trace_id": trace_id,
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
            "exception_message": str(exc)
        }
    )

    return APIResponse.error(
        message="An unexpected error occurred",
        error_code="INTERNAL_ERROR",
        status_code=500,
        error_type="InternalServerError",
        trace_id=trace_id
    )


def register_exception_handlers(app):
    """
    Register all exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(BaseAppException, handle_app_exception)
    app.add_exception_handler(Exception, handle_unexpected_exception)
