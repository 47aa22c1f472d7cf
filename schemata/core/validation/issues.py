"""Validation Issues

One Issue per failed check, located by a path of field names and indices.
Issues are plain immutable records; grouping and formatting for display
lives in ``result.flatten_issues``.

Serialized path format (shared by flattening and error messages):
    ()                          -> "$"
    ("user", "email")           -> "user.email"
    ("addresses", 0, "street")  -> "addresses[0].street"
    (0, "name")                 -> "[0].name"
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from schemata.core.errors import ErrorCode

PathSegment = str | int
Path = tuple[PathSegment, ...]

ROOT_PATH = "$"


class IssueCode(str, Enum):
    """Kinds of validation failure."""
    TYPE_MISMATCH = "type_mismatch"
    TOO_SMALL = "too_small"
    TOO_LARGE = "too_large"
    INVALID_FORMAT = "invalid_format"
    INVALID_LITERAL = "invalid_literal"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_UNION = "invalid_union"
    REQUIRED = "required"
    CUSTOM = "custom"
    UNRECOGNIZED_KEYS = "unrecognized_keys"

    @property
    def error_code(self) -> ErrorCode:
        """Map to the library-wide error taxonomy."""
        return _ERROR_CODES.get(self, ErrorCode.E2000_VALIDATION_GENERIC)


_ERROR_CODES = {
    IssueCode.TYPE_MISMATCH: ErrorCode.E2004_INVALID_TYPE,
    IssueCode.TOO_SMALL: ErrorCode.E2003_OUT_OF_RANGE,
    IssueCode.TOO_LARGE: ErrorCode.E2003_OUT_OF_RANGE,
    IssueCode.INVALID_FORMAT: ErrorCode.E2002_INVALID_FORMAT,
    IssueCode.INVALID_LITERAL: ErrorCode.E2005_CONSTRAINT_VIOLATION,
    IssueCode.INVALID_ENUM_VALUE: ErrorCode.E2005_CONSTRAINT_VIOLATION,
    IssueCode.REQUIRED: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    IssueCode.UNRECOGNIZED_KEYS: ErrorCode.E2005_CONSTRAINT_VIOLATION,
}


@dataclass(frozen=True, slots=True)
class Issue:
    """A single validation failure.

    - code: kind of failure
    - message: human-readable message (custom messages from the schema win)
    - path: location of the offending value inside the input
    - expected / received: short descriptions for type and value mismatches
    - union_errors: for ``invalid_union``, the issues of every alternative in order
    """
    code: IssueCode
    message: str
    path: Path = ()
    expected: str | None = None
    received: str | None = None
    union_errors: tuple[tuple[Issue, ...], ...] = ()

    @property
    def field_path(self) -> str:
        return format_path(self.path)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for transport."""
        result: dict[str, Any] = {"code": self.code.value, "path": list(self.path), "message": self.message}
        if self.expected is not None: result["expected"] = self.expected
        if self.received is not None: result["received"] = self.received
        if self.union_errors:
            result["union_errors"] = [[issue.to_dict() for issue in branch] for branch in self.union_errors]
        return result


def format_path(path: Sequence[PathSegment]) -> str:
    """Format a path tuple as a dot/bracket path."""
    if not path: return ROOT_PATH
    parts = []
    for segment in path:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)
