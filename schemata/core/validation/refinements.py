"""Refinements

Frozen predicate+message checks attached to primitive and array schemas.
A schema runs its refinements in declaration order against a value that has
already passed the type check, and every failing refinement records its own
issue at the same path.

Features:
- Frozen dataclass refinements for immutability
- Compiled regex held on the refinement
- Constraint names for ``Issue.expected``
- Custom messages override the default wording
"""
from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any
from urllib.parse import urlparse
from uuid import UUID as StdUUID

from .engine import ParseContext
from .issues import IssueCode

# RFC 5322 simplified pattern
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


class Refinement(ABC):
    """Base class for refinements."""

    __slots__ = ()

    code: IssueCode = IssueCode.CUSTOM

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Short constraint description used as ``Issue.expected``."""

    @abstractmethod
    def is_satisfied(self, value: Any) -> bool:
        """Check a value that already has the right type."""

    @abstractmethod
    def default_message(self, value: Any) -> str:
        """Message used when no custom message was given."""

    def apply(self, value: Any, ctx: ParseContext) -> bool:
        """Record an issue when unsatisfied. Returns True when the value passed."""
        if self.is_satisfied(value): return True
        ctx.add_issue(self.code, self.message or self.default_message(value), expected=self.constraint_name)
        return False


# ============================================================================
# Length Refinements (strings and arrays)
# ============================================================================

@dataclass(frozen=True, slots=True)
class MinLength(Refinement):
    """len(value) >= minimum."""
    minimum: int
    message: str | None = None
    unit: str = "character"
    code = IssueCode.TOO_SMALL

    @property
    def constraint_name(self) -> str:
        return f"min_length[{self.minimum}]"

    def is_satisfied(self, value: Any) -> bool:
        return len(value) >= self.minimum

    def default_message(self, value: Any) -> str:
        return f"Must contain at least {self.minimum} {self.unit}(s)"


@dataclass(frozen=True, slots=True)
class MaxLength(Refinement):
    """len(value) <= maximum."""
    maximum: int
    message: str | None = None
    unit: str = "character"
    code = IssueCode.TOO_LARGE

    @property
    def constraint_name(self) -> str:
        return f"max_length[{self.maximum}]"

    def is_satisfied(self, value: Any) -> bool:
        return len(value) <= self.maximum

    def default_message(self, value: Any) -> str:
        return f"Must contain at most {self.maximum} {self.unit}(s)"


@dataclass(frozen=True, slots=True)
class ExactLength(Refinement):
    """len(value) == length; too short and too long report different codes."""
    length: int
    message: str | None = None
    unit: str = "character"

    @property
    def constraint_name(self) -> str:
        return f"length[{self.length}]"

    def is_satisfied(self, value: Any) -> bool:
        return len(value) == self.length

    def default_message(self, value: Any) -> str:
        return f"Must contain exactly {self.length} {self.unit}(s)"

    def apply(self, value: Any, ctx: ParseContext) -> bool:
        if self.is_satisfied(value): return True
        code = IssueCode.TOO_SMALL if len(value) < self.length else IssueCode.TOO_LARGE
        ctx.add_issue(code, self.message or self.default_message(value), expected=self.constraint_name)
        return False


# ============================================================================
# String Format Refinements
# ============================================================================

@dataclass(frozen=True, slots=True)
class Pattern(Refinement):
    """Validate string against a compiled regex (``search`` semantics)."""
    regex: re.Pattern
    message: str | None = None
    description: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.regex.pattern}]"

    def is_satisfied(self, value: Any) -> bool:
        return self.regex.search(value) is not None

    def default_message(self, value: Any) -> str:
        return f"Invalid format: must match {self.description or self.regex.pattern}"


@dataclass(frozen=True, slots=True)
class EmailFormat(Refinement):
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return "email"

    def is_satisfied(self, value: Any) -> bool:
        return EMAIL_PATTERN.match(value) is not None

    def default_message(self, value: Any) -> str:
        return "Invalid email address"


@dataclass(frozen=True, slots=True)
class URLFormat(Refinement):
    """Absolute URL with a scheme and a host."""
    message: str | None = None
    allowed_schemes: frozenset[str] | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        if self.allowed_schemes: return f"url[{', '.join(sorted(self.allowed_schemes))}]"
        return "url"

    def is_satisfied(self, value: Any) -> bool:
        try:
            parsed = urlparse(value)
        except ValueError:
            return False
        if not parsed.scheme or not parsed.netloc:
            return False
        return self.allowed_schemes is None or parsed.scheme in self.allowed_schemes

    def default_message(self, value: Any) -> str:
        return "Invalid URL"


@dataclass(frozen=True, slots=True)
class UUIDFormat(Refinement):
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return "uuid"

    def is_satisfied(self, value: Any) -> bool:
        try:
            StdUUID(value)
            return True
        except ValueError:
            return False

    def default_message(self, value: Any) -> str:
        return "Invalid UUID"


@dataclass(frozen=True, slots=True)
class StartsWith(Refinement):
    prefix: str
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return f"starts_with[{self.prefix}]"

    def is_satisfied(self, value: Any) -> bool:
        return value.startswith(self.prefix)

    def default_message(self, value: Any) -> str:
        return f"Invalid input: must start with \"{self.prefix}\""


@dataclass(frozen=True, slots=True)
class EndsWith(Refinement):
    suffix: str
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return f"ends_with[{self.suffix}]"

    def is_satisfied(self, value: Any) -> bool:
        return value.endswith(self.suffix)

    def default_message(self, value: Any) -> str:
        return f"Invalid input: must end with \"{self.suffix}\""


@dataclass(frozen=True, slots=True)
class Includes(Refinement):
    fragment: str
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return f"includes[{self.fragment}]"

    def is_satisfied(self, value: Any) -> bool:
        return self.fragment in value

    def default_message(self, value: Any) -> str:
        return f"Invalid input: must include \"{self.fragment}\""


# ============================================================================
# Range Refinements (numbers and dates)
# ============================================================================

def _format_bound(bound: float | int | date) -> str:
    return bound.isoformat() if isinstance(bound, date) else str(bound)


def align_dates(value: Any, bound: Any) -> Any:
    """Make a date/datetime input comparable with a date/datetime bound."""
    if not isinstance(bound, date) or not isinstance(value, date):
        return value
    if isinstance(bound, datetime):
        if not isinstance(value, datetime):
            value = datetime(value.year, value.month, value.day)
        if (value.tzinfo is None) != (bound.tzinfo is None):
            value = value.replace(tzinfo=bound.tzinfo)
        return value
    return value.date() if isinstance(value, datetime) else value


@dataclass(frozen=True, slots=True)
class LowerBound(Refinement):
    """value >= bound (or > bound when exclusive)."""
    bound: float | int | date
    exclusive: bool = False
    message: str | None = None
    code = IssueCode.TOO_SMALL

    @property
    def constraint_name(self) -> str:
        return f"{'>' if self.exclusive else '>='}{_format_bound(self.bound)}"

    def is_satisfied(self, value: Any) -> bool:
        value = align_dates(value, self.bound)
        return value > self.bound if self.exclusive else value >= self.bound

    def default_message(self, value: Any) -> str:
        if isinstance(self.bound, date):
            return f"Date must be {'after' if self.exclusive else 'on or after'} {_format_bound(self.bound)}"
        return f"Number must be {'greater than' if self.exclusive else 'greater than or equal to'} {self.bound}"


@dataclass(frozen=True, slots=True)
class UpperBound(Refinement):
    """value <= bound (or < bound when exclusive)."""
    bound: float | int | date
    exclusive: bool = False
    message: str | None = None
    code = IssueCode.TOO_LARGE

    @property
    def constraint_name(self) -> str:
        return f"{'<' if self.exclusive else '<='}{_format_bound(self.bound)}"

    def is_satisfied(self, value: Any) -> bool:
        value = align_dates(value, self.bound)
        return value < self.bound if self.exclusive else value <= self.bound

    def default_message(self, value: Any) -> str:
        if isinstance(self.bound, date):
            return f"Date must be {'before' if self.exclusive else 'on or before'} {_format_bound(self.bound)}"
        return f"Number must be {'less than' if self.exclusive else 'less than or equal to'} {self.bound}"


@dataclass(frozen=True, slots=True)
class Integral(Refinement):
    """Number has no fractional part."""
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return "int"

    def is_satisfied(self, value: Any) -> bool:
        return isinstance(value, int) or float(value).is_integer()

    def default_message(self, value: Any) -> str:
        return "Expected integer, received float"


@dataclass(frozen=True, slots=True)
class MultipleOf(Refinement):
    factor: float | int
    message: str | None = None
    code = IssueCode.INVALID_FORMAT

    @property
    def constraint_name(self) -> str:
        return f"multiple_of[{self.factor}]"

    def is_satisfied(self, value: Any) -> bool:
        if isinstance(value, int) and isinstance(self.factor, int):
            return value % self.factor == 0
        remainder = abs(float(value) % float(self.factor))
        return remainder < 1e-9 or abs(remainder - abs(float(self.factor))) < 1e-9

    def default_message(self, value: Any) -> str:
        return f"Number must be a multiple of {self.factor}"
