"""Validator Engine

Walks a schema tree depth-first against an input value. Every schema node
implements ``_parse(value, ctx)``, returning the typed output or ``INVALID``
after recording issues on the context. The engine never raises for bad
input: a call always ends in ``Success`` or a non-empty ``Failure``.

Input values are classified by explicit runtime checks into a closed set of
shapes: absent (``MISSING``), null (``None``), boolean, number, string,
date, sequence and mapping.

Contexts are call-local, so one schema can be used from many threads at once.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date
from typing import TYPE_CHECKING, Any

from .issues import Issue, IssueCode, Path, PathSegment

if TYPE_CHECKING:
    from .result import ValidationResult
    from .schema import Schema


class _Missing:
    """Marker for an absent value (distinct from ``None``)."""
    __slots__ = ()
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str: return "MISSING"

    def __bool__(self) -> bool: return False

    def __reduce__(self) -> str: return "MISSING"


class _Invalid:
    __slots__ = ()

    def __repr__(self) -> str: return "INVALID"


MISSING: Any = _Missing()
INVALID: Any = _Invalid()


class ParseContext:
    """Call-local state: the current path and the shared issue list."""

    __slots__ = ("path", "issues")

    def __init__(self, path: Path = (), issues: list[Issue] | None = None):
        self.path = path
        self.issues = issues if issues is not None else []

    def at(self, segment: PathSegment) -> ParseContext:
        """Child context one level deeper, sharing the issue list."""
        return ParseContext(self.path + (segment,), self.issues)

    def isolated(self) -> ParseContext:
        """Same path, private issue list (used to trial union alternatives)."""
        return ParseContext(self.path, [])

    def add_issue(
        self,
        code: IssueCode,
        message: str,
        *,
        path: Path = (),
        expected: str | None = None,
        received: str | None = None,
        union_errors: tuple[tuple[Issue, ...], ...] = (),
    ) -> Any:
        """Record an issue at the current path (plus ``path``) and return ``INVALID``."""
        self.issues.append(Issue(
            code=code, message=message, path=self.path + tuple(path),
            expected=expected, received=received, union_errors=union_errors,
        ))
        return INVALID

    @property
    def has_issues(self) -> bool: return bool(self.issues)


def is_absent(value: Any) -> bool:
    return value is MISSING


def is_number(value: Any) -> bool:
    """int or float, excluding bool (a subclass of int) and non-finite floats."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not (isinstance(value, float) and not math.isfinite(value))


def is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def describe(value: Any) -> str:
    """Short, value-free description of an input's shape for messages."""
    if value is MISSING: return "undefined"
    if value is None: return "null"
    if isinstance(value, bool): return "boolean"
    if isinstance(value, float) and math.isnan(value): return "NaN"
    if isinstance(value, float) and math.isinf(value): return "Infinity"
    if isinstance(value, (int, float)): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, date): return "date"
    if is_sequence(value): return "array"
    if is_mapping(value): return "object"
    return type(value).__name__


def run(schema: Schema, value: Any) -> ValidationResult:
    """Validate ``value`` against ``schema`` and collect every issue in one pass."""
    from .result import Failure, Success

    ctx = ParseContext()
    output = schema._parse(value, ctx)
    if ctx.has_issues:
        return Failure(tuple(ctx.issues))
    return Success(output)
