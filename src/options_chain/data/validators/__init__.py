"""
Validation for options chain data.

- primitives: scalar checks used while decoding raw JSON values
- results: issue/report containers keyed by field path
- sanity: opt-in domain plausibility checks on decoded chains
"""

from .results import (
    ErrorKind,
    FieldPath,
    ValidationIssue,
    ValidationReport,
    ValidationSeverity,
    format_path,
)
from .primitives import (
    PrimitiveError,
    require_string,
    require_finite_number,
    require_non_negative_integer,
    require_date,
    require_datetime,
)
from .sanity import OrderingPolicy, SanityChecker, check_sanity

__all__ = [
    "ErrorKind", "FieldPath", "ValidationIssue", "ValidationReport", "ValidationSeverity", "format_path",
    "PrimitiveError", "require_string", "require_finite_number", "require_non_negative_integer",
    "require_date", "require_datetime",
    "OrderingPolicy", "SanityChecker", "check_sanity",
]
