"""
Validation issue containers shared by the decoder and the sanity pass.

Every issue is anchored at a field path: a tuple of object keys and array
indexes leading from the document root to the offending value. Paths render
as ``expirations[2].options[5].call.greeks.delta``; the root renders as ``$``.
"""

from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

PathSegment = Union[str, int]
FieldPath = Tuple[PathSegment, ...]

ROOT_PATH: FieldPath = ()
ROOT_LABEL = "$"


def _tree_node() -> Dict[str, Any]:
    return {"issues": [], "children": {}}


def format_path(path: FieldPath) -> str:
    """Render a field path in dotted/bracketed notation."""
    if not path:
        return ROOT_LABEL

    parts: List[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


class ErrorKind(str, Enum):
    """Issue taxonomy."""
    MALFORMED_INPUT = "MalformedInput"
    MISSING_FIELD = "MissingField"
    TYPE_MISMATCH = "TypeMismatch"
    INVALID_VALUE = "InvalidValue"
    SANITY = "Sanity"


class ValidationSeverity(str, Enum):
    """Validation issue severity levels."""
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ValidationIssue:
    """Represents a single defect found at a field path."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        path: FieldPath = ROOT_PATH,
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ):
        self.kind = kind
        self.message = message
        self.path = tuple(path)
        self.severity = severity

    @property
    def field(self) -> str:
        return format_path(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.field,
            "kind": self.kind.value,
            "severity": self.severity.value,
            "message": self.message,
        }

    def __eq__(self, other):
        if not isinstance(other, ValidationIssue):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.path == other.path
            and self.severity == other.severity
            and self.message == other.message
        )

    def __hash__(self):
        return hash((self.kind, self.path, self.severity, self.message))

    def __repr__(self):
        return f"ValidationIssue({self.kind.value}, {self.field!r}, {self.message!r})"

    def __str__(self):
        return f"{self.severity.value.upper()} {self.kind.value} at {self.field}: {self.message}"


class ValidationReport:
    """Ordered accumulator of validation issues."""

    def __init__(self, issues: Optional[List[ValidationIssue]] = None):
        self.issues: List[ValidationIssue] = list(issues or [])

    def add_issue(
        self,
        kind: ErrorKind,
        message: str,
        path: FieldPath = ROOT_PATH,
        severity: ValidationSeverity = ValidationSeverity.ERROR
    ) -> ValidationIssue:
        """Record an issue and return it."""
        issue = ValidationIssue(kind, message, path, severity)
        self.issues.append(issue)
        return issue

    def add_error(self, kind: ErrorKind, message: str, path: FieldPath = ROOT_PATH) -> ValidationIssue:
        return self.add_issue(kind, message, path, ValidationSeverity.ERROR)

    def add_warning(self, kind: ErrorKind, message: str, path: FieldPath = ROOT_PATH) -> ValidationIssue:
        return self.add_issue(kind, message, path, ValidationSeverity.WARNING)

    def add_info(self, kind: ErrorKind, message: str, path: FieldPath = ROOT_PATH) -> ValidationIssue:
        return self.add_issue(kind, message, path, ValidationSeverity.INFO)

    def extend(self, other: "ValidationReport") -> None:
        """Merge another report's issues, preserving their order."""
        self.issues.extend(other.issues)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors()

    def errors(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == ValidationSeverity.ERROR]

    def warnings(self) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == ValidationSeverity.WARNING]

    def has_errors(self) -> bool:
        return any(issue.severity == ValidationSeverity.ERROR for issue in self.issues)

    def has_warnings(self) -> bool:
        return any(issue.severity == ValidationSeverity.WARNING for issue in self.issues)

    def at(self, path: Union[str, FieldPath]) -> List[ValidationIssue]:
        """Issues recorded exactly at ``path`` (tuple or rendered string)."""
        if isinstance(path, str):
            return [issue for issue in self.issues if issue.field == path]
        target = tuple(path)
        return [issue for issue in self.issues if issue.path == target]

    def by_path(self) -> Dict[str, List[ValidationIssue]]:
        """Issues grouped by rendered path, in first-seen order."""
        grouped: Dict[str, List[ValidationIssue]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.field, []).append(issue)
        return grouped

    def as_tree(self) -> Dict[str, Any]:
        """
        Nest issues by path segment.

        Every node is ``{"issues": [...], "children": {...}}``. Children are
        keyed by object key or array index, so a document key never lands
        in the same mapping as an issue list.
        """
        tree = _tree_node()
        for issue in self.issues:
            node = tree
            for segment in issue.path:
                node = node["children"].setdefault(segment, _tree_node())
            node["issues"].append(issue.to_dict())
        return tree

    def promote_warnings(self) -> None:
        """Treat warnings as errors (strict mode)."""
        for issue in self.issues:
            if issue.severity == ValidationSeverity.WARNING:
                issue.severity = ValidationSeverity.ERROR

    def summary(self) -> str:
        """Get summary of validation results."""
        error_count = len(self.errors())
        warning_count = len(self.warnings())

        if self.is_valid:
            if warning_count > 0:
                return f"Valid with {warning_count} warnings"
            return "Valid"
        return f"Invalid: {error_count} errors, {warning_count} warnings"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.is_valid,
            "summary": self.summary(),
            "issues": [issue.to_dict() for issue in self.issues],
        }

    def __iter__(self) -> Iterator[ValidationIssue]:
        return iter(self.issues)

    def __len__(self) -> int:
        return len(self.issues)

    def __bool__(self) -> bool:
        # Truthy even when empty; use is_valid for the verdict.
        return True

    def __repr__(self):
        return f"ValidationReport({self.summary()})"
