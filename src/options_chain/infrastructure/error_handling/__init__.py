"""
Error handling infrastructure package.
"""

from .exceptions import (
    ChainCodecError,
    ErrorSeverity,
    ErrorCategory,
    MalformedInputError,
    ChainValidationError,
    EncodingError,
    ConfigurationError
)

__all__ = [
    "ChainCodecError",
    "ErrorSeverity",
    "ErrorCategory",
    "MalformedInputError",
    "ChainValidationError",
    "EncodingError",
    "ConfigurationError"
]
