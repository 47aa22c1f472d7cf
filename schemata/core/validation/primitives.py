"""Primitive Schemas

Leaf schemas with a strict kind check followed by refinements:

    string()   str
    number()   int or float (never bool, never NaN or infinity)
    integer()  int (never bool)
    boolean()  bool
    date()     datetime.date / datetime.datetime

A value of the wrong kind produces exactly one ``type_mismatch`` issue and no
refinement runs. Otherwise every refinement runs in declaration order and
every failure is reported at the same path.

Literal, enum, unknown and void schemas live here too.
"""
from __future__ import annotations

import re
from abc import abstractmethod
from dataclasses import dataclass, replace
from datetime import date as Date
from enum import Enum
from typing import Any, ClassVar, Iterable

from schemata.core.errors import SchemaDefinitionError, empty_choices, invalid_argument, invalid_bounds

from .engine import INVALID, MISSING, ParseContext, describe, is_number
from .issues import IssueCode
from .refinements import (
    EmailFormat,
    EndsWith,
    ExactLength,
    Includes,
    Integral,
    LowerBound,
    MaxLength,
    MinLength,
    MultipleOf,
    Pattern,
    Refinement,
    StartsWith,
    UpperBound,
    URLFormat,
    UUIDFormat,
    align_dates,
)
from .schema import Schema


# =============================================================================
# Bound consistency (checked at build time)
# =============================================================================

def check_length_bounds(refinements: Iterable[Refinement], origin: str) -> None:
    """Raise when the combined length refinements can never be satisfied."""
    lower: int | None = None
    upper: int | None = None
    for r in refinements:
        match r:
            case MinLength(minimum=n):
                lower = n if lower is None else max(lower, n)
            case MaxLength(maximum=n):
                upper = n if upper is None else min(upper, n)
            case ExactLength(length=n):
                lower = n if lower is None else max(lower, n)
                upper = n if upper is None else min(upper, n)
    if lower is not None and upper is not None and lower > upper:
        raise SchemaDefinitionError(invalid_bounds("length", lower, upper, origin=origin))


def _compare_bounds(a: Any, b: Any) -> int:
    # date and datetime bounds may be mixed on one schema
    a = align_dates(a, b)
    return (a > b) - (a < b)


def check_range_bounds(refinements: Iterable[Refinement], origin: str) -> None:
    """Raise when the combined range refinements leave no admissible value."""
    lower: LowerBound | None = None
    upper: UpperBound | None = None
    for r in refinements:
        if isinstance(r, LowerBound):
            if lower is None or (c := _compare_bounds(r.bound, lower.bound)) > 0 or (c == 0 and r.exclusive):
                lower = r
        elif isinstance(r, UpperBound):
            if upper is None or (c := _compare_bounds(r.bound, upper.bound)) < 0 or (c == 0 and r.exclusive):
                upper = r
    if lower is None or upper is None:
        return
    c = _compare_bounds(lower.bound, upper.bound)
    if c > 0 or (c == 0 and (lower.exclusive or upper.exclusive)):
        raise SchemaDefinitionError(invalid_bounds("range", lower.bound, upper.bound, origin=origin))


def require_length(n: Any, name: str) -> int:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise SchemaDefinitionError(invalid_argument(f"{name}() expects a non-negative integer, got {n!r}", origin="schema"))
    return n


# =============================================================================
# Primitive base
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class PrimitiveSchema(Schema):
    """Kind check plus an ordered tuple of refinements."""
    refinements: tuple[Refinement, ...] = ()
    type_message: str | None = None

    kind: ClassVar[str] = "value"

    @abstractmethod
    def accepts(self, value: Any) -> bool:
        """Kind check run before any refinement."""

    def _refined(self, refinement: Refinement) -> Any:
        refinements = self.refinements + (refinement,)
        self._check_bounds(refinements)
        return replace(self, refinements=refinements)

    def _check_bounds(self, refinements: tuple[Refinement, ...]) -> None:
        pass

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.type_message or "Required", expected=self.kind, received="undefined")
        if not self.accepts(value):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH,
                self.type_message or f"Expected {self.kind}, received {describe(value)}",
                expected=self.kind, received=describe(value),
            )
        passed = True
        for refinement in self.refinements:
            passed = refinement.apply(value, ctx) and passed
        return value if passed else INVALID


# =============================================================================
# String
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class StringSchema(PrimitiveSchema):
    kind: ClassVar[str] = "string"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, str)

    def _check_bounds(self, refinements: tuple[Refinement, ...]) -> None:
        check_length_bounds(refinements, origin="string")

    def min(self, length: int, message: str | None = None) -> StringSchema:
        return self._refined(MinLength(require_length(length, "min"), message))

    def max(self, length: int, message: str | None = None) -> StringSchema:
        return self._refined(MaxLength(require_length(length, "max"), message))

    def length(self, length: int, message: str | None = None) -> StringSchema:
        return self._refined(ExactLength(require_length(length, "length"), message))

    def non_empty(self, message: str | None = None) -> StringSchema:
        return self._refined(MinLength(1, message or "String must not be empty"))

    def regex(self, pattern: str | re.Pattern, message: str | None = None) -> StringSchema:
        try:
            compiled = re.compile(pattern)
        except re.error as e:
            raise SchemaDefinitionError(invalid_argument(f"Invalid regex {pattern!r}: {e}", origin="string")) from e
        return self._refined(Pattern(compiled, message))

    def email(self, message: str | None = None) -> StringSchema:
        return self._refined(EmailFormat(message))

    def url(self, message: str | None = None, *, schemes: Iterable[str] | None = None) -> StringSchema:
        return self._refined(URLFormat(message, frozenset(schemes) if schemes is not None else None))

    def uuid(self, message: str | None = None) -> StringSchema:
        return self._refined(UUIDFormat(message))

    def starts_with(self, prefix: str, message: str | None = None) -> StringSchema:
        return self._refined(StartsWith(prefix, message))

    def ends_with(self, suffix: str, message: str | None = None) -> StringSchema:
        return self._refined(EndsWith(suffix, message))

    def includes(self, fragment: str, message: str | None = None) -> StringSchema:
        return self._refined(Includes(fragment, message))


# =============================================================================
# Numbers
# =============================================================================

def _require_number(n: Any, name: str) -> int | float:
    if not is_number(n):
        raise SchemaDefinitionError(invalid_argument(f"{name}() expects a finite number, got {n!r}", origin="number"))
    return n


@dataclass(frozen=True, slots=True, eq=False)
class NumberSchema(PrimitiveSchema):
    kind: ClassVar[str] = "number"

    def accepts(self, value: Any) -> bool:
        return is_number(value)

    def _check_bounds(self, refinements: tuple[Refinement, ...]) -> None:
        check_range_bounds(refinements, origin=self.kind)

    def gte(self, value: int | float, message: str | None = None) -> Any:
        return self._refined(LowerBound(_require_number(value, "min"), False, message))

    def lte(self, value: int | float, message: str | None = None) -> Any:
        return self._refined(UpperBound(_require_number(value, "max"), False, message))

    min = gte
    max = lte

    def gt(self, value: int | float, message: str | None = None) -> Any:
        return self._refined(LowerBound(_require_number(value, "gt"), True, message))

    def lt(self, value: int | float, message: str | None = None) -> Any:
        return self._refined(UpperBound(_require_number(value, "lt"), True, message))

    def positive(self, message: str | None = None) -> Any:
        return self._refined(LowerBound(0, True, message))

    def nonnegative(self, message: str | None = None) -> Any:
        return self._refined(LowerBound(0, False, message))

    def negative(self, message: str | None = None) -> Any:
        return self._refined(UpperBound(0, True, message))

    def nonpositive(self, message: str | None = None) -> Any:
        return self._refined(UpperBound(0, False, message))

    def int(self, message: str | None = None) -> Any:
        return self._refined(Integral(message))

    def multiple_of(self, factor: int | float, message: str | None = None) -> Any:
        if not is_number(factor) or factor == 0:
            raise SchemaDefinitionError(invalid_argument(f"multiple_of() expects a non-zero number, got {factor!r}", origin="number"))
        return self._refined(MultipleOf(factor, message))


@dataclass(frozen=True, slots=True, eq=False)
class IntegerSchema(NumberSchema):
    kind: ClassVar[str] = "integer"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Boolean and Date
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class BooleanSchema(PrimitiveSchema):
    kind: ClassVar[str] = "boolean"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, bool)


@dataclass(frozen=True, slots=True, eq=False)
class DateSchema(PrimitiveSchema):
    kind: ClassVar[str] = "date"

    def accepts(self, value: Any) -> bool:
        return isinstance(value, Date)

    def _check_bounds(self, refinements: tuple[Refinement, ...]) -> None:
        check_range_bounds(refinements, origin="date")

    def min(self, value: Date, message: str | None = None) -> DateSchema:
        return self._refined(LowerBound(_require_date(value, "min"), False, message))

    def max(self, value: Date, message: str | None = None) -> DateSchema:
        return self._refined(UpperBound(_require_date(value, "max"), False, message))


def _require_date(value: Any, name: str) -> Date:
    if not isinstance(value, Date):
        raise SchemaDefinitionError(invalid_argument(f"{name}() expects a date, got {value!r}", origin="date"))
    return value


# =============================================================================
# Literal and Enum
# =============================================================================

LiteralValue = str | int | float | bool | None


def literal_equal(expected: Any, value: Any) -> bool:
    """Exact match that does not conflate booleans with numbers."""
    if expected is None or value is None:
        return expected is value
    if isinstance(expected, bool) or isinstance(value, bool):
        return isinstance(expected, bool) and isinstance(value, bool) and expected == value
    if isinstance(expected, (int, float)):
        return is_number(value) and value == expected
    return isinstance(value, type(expected)) and value == expected


@dataclass(frozen=True, slots=True, eq=False)
class LiteralSchema(Schema):
    value: LiteralValue
    message: str | None = None

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.message or "Required", expected=repr(self.value), received="undefined")
        if not literal_equal(self.value, value):
            return ctx.add_issue(
                IssueCode.INVALID_LITERAL,
                self.message or f"Invalid literal value, expected {self.value!r}",
                expected=repr(self.value), received=describe(value),
            )
        return self.value


@dataclass(frozen=True, slots=True, eq=False)
class EnumSchema(Schema):
    """One of a fixed set of values, or the members of an ``enum.Enum`` class."""
    values: tuple[LiteralValue, ...]
    enum_class: type[Enum] | None = None
    message: str | None = None

    def __post_init__(self):
        if not self.values:
            raise SchemaDefinitionError(empty_choices("enum", origin="enum"))
        for i, v in enumerate(self.values):
            if any(literal_equal(v, other) for other in self.values[:i]):
                raise SchemaDefinitionError(invalid_argument(f"Enum value {v!r} is listed more than once", origin="enum", value=repr(v)))

    @property
    def options(self) -> tuple[Any, ...]:
        return tuple(self.enum_class) if self.enum_class is not None else self.values

    @property
    def _expected(self) -> str:
        return " | ".join(repr(v) for v in self.values)

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.message or "Required", expected=self._expected, received="undefined")
        if self.enum_class is not None and isinstance(value, self.enum_class):
            return value
        for candidate in self.values:
            if literal_equal(candidate, value):
                return self.enum_class(candidate) if self.enum_class is not None else candidate
        return ctx.add_issue(
            IssueCode.INVALID_ENUM_VALUE,
            self.message or f"Invalid enum value. Expected {self._expected}, received {value!r}",
            expected=self._expected, received=describe(value),
        )


# =============================================================================
# Unknown and Void
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class UnknownSchema(Schema):
    """Accepts any value, including absence."""

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        return value


@dataclass(frozen=True, slots=True, eq=False)
class VoidSchema(Schema):
    """Absent or None; outputs None."""
    message: str | None = None

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING or value is None:
            return None
        return ctx.add_issue(
            IssueCode.TYPE_MISMATCH, self.message or f"Expected void, received {describe(value)}",
            expected="void", received=describe(value),
        )
