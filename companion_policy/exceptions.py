"""
Exception definitions for the companion policy service.

The policy functions themselves are total over their inputs; these exceptions
cover the surrounding layers (configuration, persisted state, API validation).
"""
from enum import Enum
from typing import Optional, Dict, Any
import traceback


class ErrorCode(Enum):
    """Standardized error codes for application exceptions."""
    # Validation errors (1000-1999)
    VALIDATION_ERROR = 1000
    INPUT_VALIDATION_ERROR = 1002

    # Resource errors (2000-2999)
    RESOURCE_NOT_FOUND = 2000

    # Database errors (4000-4999)
    DATABASE_ERROR = 4000
    DATABASE_CONNECTION_ERROR = 4001

    # Configuration errors (7000-7999)
    CONFIGURATION_ERROR = 7000

    # System errors (9000-9999)
    INTERNAL_ERROR = 9000


class BaseAppException(Exception):
    """Base exception for all application exceptions."""
    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        original_exception: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
        **kwargs
    ):
        self.message = message
        self.error_code = error_code
        self.original_exception = original_exception
        self.details = details or {}
        self.stack_trace = traceback.format_exc() if original_exception else None

        for key, value in kwargs.items():
            self.details[key] = value

        if original_exception:
            self.details["original_error"] = str(original_exception)

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        result = {
            "error_code": self.error_code.value,
            "error_type": self.error_code.name,
            "message": self.message
        }

        if self.details:
            result["details"] = self.details

        # Only for debugging; stripped before reaching clients
        if self.stack_trace:
            result["stack_trace"] = self.stack_trace

        return result


class ValidationError(BaseAppException):
    """Exception raised for validation errors."""
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        error_code: ErrorCode = ErrorCode.VALIDATION_ERROR,
        **kwargs
    ):
        details = kwargs.pop("details", {}) or {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class StateStoreError(BaseAppException):
    """Exception raised when the generation state store cannot be read or written."""
    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.DATABASE_ERROR,
        **kwargs
    ):
        details = kwargs.pop("details", {}) or {}
        if operation:
            details["operation"] = operation

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            **kwargs
        )


class ConfigurationError(BaseAppException):
    """Exception raised for invalid environment configuration."""
    def __init__(
        self,
        message: str,
        setting: Optional[str] = None,
        error_code: ErrorCode = ErrorCode.CONFIGURATION_ERROR,
        **kwargs
    ):
        details = kwargs.pop("details", {}) or {}
        if setting:
            details["setting"] = setting

        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            **kwargs
        )
