"""Validation Results and Entry Points

Two entry points over the engine:

    safe_parse(schema, data)  -> Success(value) | Failure(issues)   never raises
    parse(schema, data)       -> value, or raises ValidationError

``parse`` is a thin wrapper over ``safe_parse``; validation logic lives only
in the engine. ``flatten_issues`` groups issues by serialized path for
per-field display:

    {
        "$": ["Passwords do not match"],
        "name": ["Name must be at least 2 characters"],
        "address.city": ["Expected string, received number"],
    }
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, Iterator, NoReturn, TypeVar, Union, final

from schemata.core.errors import AppError, ErrorCode, ErrorContext
from schemata.core.logging import validation_logger

from .engine import MISSING, run
from .issues import Issue, format_path

if TYPE_CHECKING:
    from .schema import Schema

T = TypeVar("T")
U = TypeVar("U")

log = validation_logger()


def flatten_issues(issues: tuple[Issue, ...] | list[Issue]) -> dict[str, list[str]]:
    """Map each serialized path to all of its messages, in first-seen order.

    Issues with an empty path land in the ``"$"`` bucket, which only exists
    when there is at least one such issue.
    """
    flattened: dict[str, list[str]] = {}
    for issue in issues:
        flattened.setdefault(format_path(issue.path), []).append(issue.message)
    return flattened


@dataclass(eq=False)
class ValidationError(Exception):
    """Raised by the throwing entry point; carries every issue found.

    Catching code can re-derive per-field messages from ``issues`` or use
    ``field_errors`` / ``flatten()`` directly.
    """
    issues: tuple[Issue, ...]
    message: str = "Validation failed"

    def __post_init__(self):
        self.issues = tuple(self.issues)
        super().__init__(self.message)

    def __str__(self) -> str:
        if not self.issues: return self.message
        if len(self.issues) == 1: return f"{(i := self.issues[0]).field_path}: {i.message}"
        return f"{self.message} ({len(self.issues)} issues)"

    @property
    def field_errors(self) -> dict[str, list[Issue]]:
        """Group issues by serialized path."""
        result: dict[str, list[Issue]] = {}
        for issue in self.issues: result.setdefault(issue.field_path, []).append(issue)
        return result

    @property
    def first_issue(self) -> Issue | None: return self.issues[0] if self.issues else None

    def get_issues_for_path(self, field_path: str) -> list[Issue]:
        return [i for i in self.issues if i.field_path == field_path]

    def flatten(self) -> dict[str, list[str]]: return flatten_issues(self.issues)

    def to_app_error(self, origin: str = "validation") -> AppError:
        """Convert to AppError for the error handling system."""
        if len(self.issues) == 1:
            i = self.issues[0]
            return AppError(code=i.code.error_code, message=f"{i.field_path}: {i.message}",
                context=ErrorContext(origin=origin),
                metadata={"field": i.field_path, "issue_code": i.code.value, "issues": [i.to_dict()]})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC,
            message=f"{self.message}: {len(self.issues)} issues", context=ErrorContext(origin=origin),
            metadata={"issue_count": len(self.issues), "issues": [i.to_dict() for i in self.issues]})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for transport."""
        return {"error": {"type": "validation_error", "message": self.message,
            "issue_count": len(self.issues), "issues": [i.to_dict() for i in self.issues],
            "field_errors": self.flatten()}}


@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Validation succeeded; ``value`` is the typed output."""
    value: T

    @property
    def success(self) -> bool: return True

    def is_ok(self) -> bool: return True

    def is_err(self) -> bool: return False

    def unwrap(self) -> T: return self.value

    def unwrap_or(self, default: T) -> T: return self.value

    def map(self, f: Callable[[T], U]) -> ValidationResult[U]: return Success(f(self.value))

    def match(self, ok: Callable[[T], U], err: Callable[[tuple[Issue, ...]], U]) -> U: return ok(self.value)

    def __iter__(self) -> Iterator[T]:
        yield self.value


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Validation failed; ``issues`` is never empty."""
    issues: tuple[Issue, ...]

    @property
    def success(self) -> bool: return False

    @property
    def error(self) -> ValidationError:
        return ValidationError(self.issues)

    def is_ok(self) -> bool: return False

    def is_err(self) -> bool: return True

    def unwrap(self) -> NoReturn:
        """Raises the ValidationError this failure describes."""
        raise self.error

    def unwrap_or(self, default: T) -> T: return default

    def map(self, f: Callable[[Any], U]) -> ValidationResult[U]: return self

    def match(self, ok: Callable[[Any], U], err: Callable[[tuple[Issue, ...]], U]) -> U: return err(self.issues)

    def flatten(self) -> dict[str, list[str]]: return flatten_issues(self.issues)

    def __iter__(self) -> Iterator:
        return iter([])


ValidationResult = Union[Success[T], Failure]


def safe_parse(schema: Schema, data: Any = MISSING) -> ValidationResult[Any]:
    """Validate without raising; the caller branches on the result."""
    return run(schema, data)


def parse(schema: Schema, data: Any = MISSING) -> Any:
    """Validate and return the typed value, or raise ValidationError."""
    match safe_parse(schema, data):
        case Success(value):
            return value
        case Failure(issues):
            log.debug(
                "validation_failed",
                schema=type(schema).__name__,
                issue_count=len(issues),
                paths=[format_path(i.path) for i in issues],
            )
            raise ValidationError(issues)
