"""Centralized error code to HTTP status mapping."""
from companion_policy.exceptions import ErrorCode

# Map internal error codes to HTTP status codes and user-friendly messages
ERROR_CODE_MAP = {
    ErrorCode.VALIDATION_ERROR: {
        "status": 422,
        "message": "Validation failed"
    },
    ErrorCode.INPUT_VALIDATION_ERROR: {
        "status": 422,
        "message": "Invalid input"
    },
    ErrorCode.RESOURCE_NOT_FOUND: {
        "status": 404,
        "message": "Resource not found"
    },
    ErrorCode.DATABASE_ERROR: {
        "status": 500,
        "message": "Database operation failed"
    },
    ErrorCode.DATABASE_CONNECTION_ERROR: {
        "status": 503,
        "message": "Database unavailable"
    },
    ErrorCode.CONFIGURATION_ERROR: {
        "status": 500,
        "message": "Service misconfigured"
    },
    ErrorCode.INTERNAL_ERROR: {
        "status": 500,
        "message": "Internal server error"
    },
}


def get_http_status(error_code: ErrorCode) -> tuple[int, str]:
    """
    Get HTTP status code and message for an error code.

    Args:
        error_code: Internal error code

    Returns:
        Tuple of (status_code, message)
    """
    mapping = ERROR_CODE_MAP.get(error_code, {
        "status": 500,
        "message": "Internal server error"
    })

    return mapping["status"], mapping["message"]
