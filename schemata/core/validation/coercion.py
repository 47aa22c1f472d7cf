"""Explicit Opt-in Coercion

Coercion is explicit and opt-in, NEVER implicit: plain ``number()`` rejects
the string ``"42"``; ``coerce.number()`` converts it first and then
validates the result with an ordinary number schema.

Each rule returns a Result, so a failed conversion is data rather than an
exception. A failed conversion becomes one ``type_mismatch`` issue.

Usage:
    age = coerce.number("Age must be a valid number").int().min(13)
    age.parse("21")            # 21
    coerced(string(), str.strip).parse("  ada ")   # "ada"
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Callable, Generic, TypeVar

from schemata.core.errors import AppError, ErrorCode, Ok, Err, Result, SchemaDefinitionError, invalid_argument

from .engine import is_mapping, is_number, is_sequence
from .primitives import BooleanSchema, DateSchema, IntegerSchema, NumberSchema, StringSchema
from .schema import CoercedSchema, Schema

T = TypeVar("T")
S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class CoercionRule(ABC, Generic[S, T]):
    """Base class for coercion rules.

    Each rule names its target type and implements the conversion,
    returning a Result. Values of the target kind pass through unchanged.
    """

    @property
    @abstractmethod
    def target_type(self) -> type:
        """Type this rule coerces to."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def can_coerce(self, value: Any) -> bool:
        return self.coerce(value).is_ok()

    def _wrong_source(self, value: Any) -> Err[AppError]:
        return Err(AppError(
            code=ErrorCode.E2004_INVALID_TYPE,
            message=f"Cannot coerce {type(value).__name__} to {self.target_type.__name__}",
            metadata={"source_type": type(value).__name__, "target_type": self.target_type.__name__},
        ))

    def __call__(self, value: Any) -> Result[T, AppError]:
        return self.coerce(value)


@dataclass(frozen=True, slots=True)
class ToNumber(CoercionRule[str, float]):
    """Numbers pass through; numeric strings become int or float."""

    @property
    def target_type(self) -> type:
        return float

    def coerce(self, value: Any) -> Result[int | float, AppError]:
        if is_number(value):
            return Ok(value)
        if not isinstance(value, str):
            return self._wrong_source(value)

        stripped = value.strip()
        try:
            number = int(stripped)
        except ValueError:
            try:
                number = float(stripped)
            except ValueError as e:
                return Err(AppError(
                    code=ErrorCode.E2002_INVALID_FORMAT,
                    message=f"Cannot coerce '{value}' to number: {e}",
                    metadata={"target": "number"},
                ))
        if isinstance(number, float) and not math.isfinite(number):
            return Err(AppError(
                code=ErrorCode.E2002_INVALID_FORMAT,
                message=f"Cannot coerce '{value}' to a finite number",
                metadata={"target": "number"},
            ))
        return Ok(number)


@dataclass(frozen=True, slots=True)
class StringToInt(CoercionRule[str, int]):
    """Integers pass through; integral floats and integer strings become int."""
    allow_float_strings: bool = False

    @property
    def target_type(self) -> type:
        return int

    def coerce(self, value: Any) -> Result[int, AppError]:
        if isinstance(value, int) and not isinstance(value, bool):
            return Ok(value)
        if is_number(value) and float(value).is_integer():
            return Ok(int(value))
        if not isinstance(value, str):
            return self._wrong_source(value)

        try:
            stripped = value.strip()
            if self.allow_float_strings:
                as_float = float(stripped)
                if not as_float.is_integer():
                    raise ValueError(f"{stripped} has a fractional part")
                return Ok(int(as_float))
            return Ok(int(stripped))
        except (ValueError, OverflowError) as e:
            return Err(AppError(
                code=ErrorCode.E2002_INVALID_FORMAT,
                message=f"Cannot coerce '{value}' to int: {e}",
                metadata={"target": "int"},
            ))


@dataclass(frozen=True, slots=True)
class ToString(CoercionRule[Any, str]):
    """Scalars become their text form; None and containers are rejected."""

    @property
    def target_type(self) -> type:
        return str

    def coerce(self, value: Any) -> Result[str, AppError]:
        if isinstance(value, str):
            return Ok(value)
        if isinstance(value, bool):
            return Ok("true" if value else "false")
        if isinstance(value, date):
            return Ok(value.isoformat())
        if value is None or is_mapping(value) or is_sequence(value):
            return self._wrong_source(value)
        if isinstance(value, (int, float)):
            return Ok(str(value))
        return self._wrong_source(value)


@dataclass(frozen=True, slots=True)
class StringToBool(CoercionRule[str, bool]):
    """Coerce string to boolean.

    Truthy: "true", "1", "yes", "on", "y"
    Falsy: "false", "0", "no", "off", "n"
    """
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on", "y"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off", "n"})

    @property
    def target_type(self) -> type:
        return bool

    def coerce(self, value: Any) -> Result[bool, AppError]:
        if isinstance(value, bool):
            return Ok(value)
        if is_number(value) and value in (0, 1):
            return Ok(bool(value))
        if not isinstance(value, str):
            return self._wrong_source(value)

        lower = value.strip().lower()
        if lower in self.true_values:
            return Ok(True)
        if lower in self.false_values:
            return Ok(False)

        return Err(AppError(
            code=ErrorCode.E2002_INVALID_FORMAT,
            message=f"Cannot coerce '{value}' to bool. Valid values: {sorted(self.true_values | self.false_values)}",
        ))


@dataclass(frozen=True, slots=True)
class ISO8601ToDate(CoercionRule[str, date]):
    """ISO 8601 strings become ``date`` (date only) or ``datetime`` (with a time part).

    A trailing ``Z`` is read as UTC. Numbers are read as POSIX timestamps in UTC.
    """
    default_timezone: timezone | None = None

    @property
    def target_type(self) -> type:
        return date

    def _parse(self, value: str) -> date:
        stripped = value.strip()
        if len(stripped) == 10:
            return date.fromisoformat(stripped)
        dt = datetime.fromisoformat(stripped.replace("Z", "+00:00"))
        if dt.tzinfo is None and self.default_timezone:
            dt = dt.replace(tzinfo=self.default_timezone)
        return dt

    def coerce(self, value: Any) -> Result[date, AppError]:
        if isinstance(value, date):
            return Ok(value)
        try:
            if is_number(value):
                return Ok(datetime.fromtimestamp(value, tz=timezone.utc))
            if isinstance(value, str):
                return Ok(self._parse(value))
        except (ValueError, OverflowError, OSError) as e:
            return Err(AppError(
                code=ErrorCode.E2012_INVALID_DATE,
                message=f"Cannot coerce '{value}' to date: {e}",
                metadata={"target": "date", "format": "ISO8601"},
            ))
        return self._wrong_source(value)


# ============================================================================
# Coercing schema constructors
# ============================================================================

class Coercions:
    """Namespace of coercing constructors, used through the ``coerce`` instance.

    Each returns a ``CoercedSchema`` wrapping an ordinary primitive, so the
    primitive's refinements stay available: ``coerce.number().positive()``.
    """

    def number(self, message: str | None = None) -> CoercedSchema:
        return CoercedSchema(NumberSchema(type_message=message), ToNumber(), "number")

    def integer(self, message: str | None = None) -> CoercedSchema:
        return CoercedSchema(IntegerSchema(type_message=message), StringToInt(), "integer")

    def string(self, message: str | None = None) -> CoercedSchema:
        return CoercedSchema(StringSchema(type_message=message), ToString(), "string")

    def boolean(self, message: str | None = None) -> CoercedSchema:
        return CoercedSchema(BooleanSchema(type_message=message), StringToBool(), "boolean")

    def date(self, message: str | None = None) -> CoercedSchema:
        return CoercedSchema(DateSchema(type_message=message), ISO8601ToDate(), "date")


coerce = Coercions()


def coerced(inner: Schema, fn: Callable[[Any], Any], target: str | None = None) -> CoercedSchema:
    """Run ``fn`` on present input, then validate its return value with ``inner``.

    ``fn`` may return a plain value or a Result; an exception it raises is
    reported as a ``type_mismatch`` issue.
    """
    if not isinstance(inner, Schema):
        raise SchemaDefinitionError(invalid_argument("coerced() needs a schema to validate the converted value", origin="coercion"))
    if not callable(fn):
        raise SchemaDefinitionError(invalid_argument("coerced() needs a callable conversion", origin="coercion"))
    return CoercedSchema(inner, fn, target or getattr(inner, "kind", "value"))
