"""
Custom exception classes for the options chain codec.
"""

from datetime import datetime, timezone
from typing import Optional, Dict, Any, TYPE_CHECKING
from enum import Enum

if TYPE_CHECKING:
    from ...data.validators.results import ValidationReport


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Error categories for classification."""
    MALFORMED_INPUT = "malformed_input"
    VALIDATION_ERROR = "validation_error"
    ENCODING_ERROR = "encoding_error"
    CONFIGURATION_ERROR = "configuration_error"
    SYSTEM_ERROR = "system_error"


class ChainCodecError(Exception):
    """Base exception class for the options chain codec."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        category: ErrorCategory = ErrorCategory.SYSTEM_ERROR,
        context: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.severity = severity
        self.category = category
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)
        self.error_id = f"{self.category.value}_{self.timestamp.strftime('%Y%m%d_%H%M%S')}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_id": self.error_id,
            "message": self.message,
            "error_code": self.error_code,
            "severity": self.severity.value,
            "category": self.category.value,
            "context": self.context,
            "timestamp": self.timestamp.isoformat()
        }


class MalformedInputError(ChainCodecError):
    """Raised when the input is not well-formed JSON text."""

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        context.update({
            "offset": offset,
            "line": line,
            "column": column
        })

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", "MALFORMED_INPUT"),
            category=ErrorCategory.MALFORMED_INPUT,
            severity=ErrorSeverity.HIGH,
            context=context,
            **kwargs
        )
        self.offset = offset
        self.line = line
        self.column = column


class ChainValidationError(ChainCodecError):
    """Raised when a well-formed document violates the options chain structure."""

    def __init__(self, report: "ValidationReport", symbol: Optional[str] = None, **kwargs):
        errors = report.errors()
        message = kwargs.pop("message", None) or (
            f"Options chain failed validation with {len(errors)} error(s)"
        )
        if errors:
            message = f"{message}; first: {errors[0]}"

        context = kwargs.pop("context", {})
        context.update({
            "symbol": symbol,
            "error_count": len(errors),
            "issues": [issue.to_dict() for issue in errors]
        })

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", "INVALID_CHAIN"),
            category=ErrorCategory.VALIDATION_ERROR,
            severity=ErrorSeverity.LOW,
            context=context,
            **kwargs
        )
        self.report = report

    @property
    def issues(self):
        """Structural errors that caused the rejection."""
        return self.report.errors()


class EncodingError(ChainCodecError):
    """Raised when a value cannot be encoded as an options chain document."""

    def __init__(self, message: str, value_type: Optional[str] = None, **kwargs):
        context = kwargs.pop("context", {})
        context.update({"value_type": value_type})

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", "ENCODING_FAILED"),
            category=ErrorCategory.ENCODING_ERROR,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            **kwargs
        )


class ConfigurationError(ChainCodecError):
    """Raised when configuration is invalid or missing."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Any = None,
        **kwargs
    ):
        context = kwargs.pop("context", {})
        context.update({
            "config_key": config_key,
            "config_value": str(config_value) if config_value is not None else None
        })

        super().__init__(
            message=message,
            error_code=kwargs.pop("error_code", "BAD_CONFIG"),
            category=ErrorCategory.CONFIGURATION_ERROR,
            severity=ErrorSeverity.HIGH,
            context=context,
            **kwargs
        )
