"""Result Types and Error Taxonomy

``Ok``/``Err`` carry the outcome of the operations that sit around schema
validation: coercion rules, procedure calls, boundary and batch parsing.
Validation itself reports through ``Success``/``Failure`` in
``schemata.core.validation.result``, which converts to an ``AppError`` on
demand.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Generic, NoReturn, TypeVar, Union, final
from uuid import uuid4

if TYPE_CHECKING:
    from collections.abc import Awaitable

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound="AppError")


class ErrorCode(Enum):
    """Numbered error codes; the thousands digit is the category.

    E1xxx  a schema or declaration that can never work (raised at build time)
    E2xxx  input that failed validation or coercion
    E3xxx  environment variables
    E4xxx  procedures and routers
    E9xxx  anything unexpected
    """
    E1000_SCHEMA_GENERIC = 1000
    E1001_INVALID_BOUNDS = 1001
    E1002_DUPLICATE_FIELD = 1002
    E1003_EMPTY_CHOICES = 1003
    E1004_INVALID_ARGUMENT = 1004
    E1010_ENV_DECLARATION = 1010

    E2000_VALIDATION_GENERIC = 2000
    E2001_REQUIRED_FIELD_MISSING = 2001
    E2002_INVALID_FORMAT = 2002
    E2003_OUT_OF_RANGE = 2003
    E2004_INVALID_TYPE = 2004
    E2005_CONSTRAINT_VIOLATION = 2005
    E2010_COERCION_FAILED = 2010
    E2012_INVALID_DATE = 2012

    E3000_ENV_GENERIC = 3000
    E3001_ENV_INVALID = 3001

    E4000_PROCEDURE_GENERIC = 4000
    E4001_PROCEDURE_INPUT_INVALID = 4001
    E4002_PROCEDURE_OUTPUT_INVALID = 4002
    E4003_HANDLER_FAILED = 4003
    E4010_PROCEDURE_NOT_FOUND = 4010

    E9000_INTERNAL_GENERIC = 9000
    E9001_UNEXPECTED_ERROR = 9001

    @property
    def category(self) -> str:
        return _CATEGORIES.get(self.value // 1000, "internal")


_CATEGORIES = {1: "schema", 2: "validation", 3: "environment", 4: "procedure"}


@dataclass(frozen=True, slots=True)
class ErrorContext:
    """Where and when an error was produced."""
    correlation_id: str = field(default_factory=lambda: str(uuid4())[:8])
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    origin: str = ""


@dataclass(frozen=True, slots=True)
class AppError:
    """A typed error value: code, message, metadata and an optional cause.

    Instances are immutable; ``with_context`` and ``with_metadata`` return
    enriched copies.
    """
    code: ErrorCode
    message: str
    context: ErrorContext = field(default_factory=ErrorContext)
    metadata: dict = field(default_factory=dict)
    cause: Exception | None = None

    def with_context(self, **changes: Any) -> AppError:
        return replace(self, context=replace(self.context, **changes))

    def with_metadata(self, **extra: Any) -> AppError:
        return replace(self, metadata={**self.metadata, **extra})

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code.name,
                "code_num": self.code.value,
                "message": self.message,
                "category": self.code.category,
                "correlation_id": self.context.correlation_id,
                "timestamp": self.context.timestamp.isoformat(),
                "metadata": self.metadata,
            }
        }

    def __str__(self) -> str:
        return f"[{self.code.name}] {self.message} (correlation_id={self.context.correlation_id})"


@final
@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def map(self, f: Callable[[T], U]) -> Result[U, AppError]:
        return Ok(f(self.value))

    def and_then(self, f: Callable[[T], Result[U, AppError]]) -> Result[U, AppError]:
        return f(self.value)

    def match(self, ok: Callable[[T], U], err: Callable[[AppError], U]) -> U:
        return ok(self.value)

    async def map_async(self, f: Callable[[T], Awaitable[U]]) -> Result[U, AppError]:
        return Ok(await f(self.value))


@final
@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: T) -> T:
        return default

    def unwrap_err(self) -> E:
        return self.error

    # The value-side operations leave an Err untouched.

    def map(self, f: Callable[[T], U]) -> Result[U, E]:
        return self  # type: ignore

    def and_then(self, f: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return self  # type: ignore

    def match(self, ok: Callable[[T], U], err: Callable[[E], U]) -> U:
        return err(self.error)

    async def map_async(self, f: Callable[[T], Awaitable[U]]) -> Result[U, E]:
        return self  # type: ignore


Result = Union[Ok[T], Err[E]]


def from_exception(
    exc: Exception,
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    message: str | None = None,
    origin: str = "",
    **metadata: Any,
) -> Err[AppError]:
    """Wrap a caught exception as an ``Err``, keeping it as the cause."""
    return Err(AppError(code, message or str(exc), ErrorContext(origin=origin), metadata, exc))


def try_result(
    f: Callable[[], T],
    code: ErrorCode = ErrorCode.E9001_UNEXPECTED_ERROR,
    origin: str = "",
) -> Result[T, AppError]:
    """Call ``f`` and return its value as ``Ok``, or the exception it raised as ``Err``."""
    try:
        return Ok(f())
    except Exception as e:
        return from_exception(e, code=code, origin=origin)


def collect_results(results: list[Result[T, AppError]]) -> Result[list[T], list[AppError]]:
    """All values when every result is Ok, otherwise every error."""
    values: list[T] = []
    errors: list[AppError] = []
    for r in results:
        match r:
            case Ok(v):
                values.append(v)
            case Err(e):
                errors.append(e)
    return Err(errors) if errors else Ok(values)  # type: ignore
