"""Schema Nodes

Abstract ``Schema`` base plus the wrapper nodes every schema can be wrapped
in. Schemas are immutable values: each builder method returns a new node and
never mutates its receiver, so one schema can be shared freely.

Wrappers:
    OptionalSchema   absent accepted (absent is not null)
    NullableSchema   None accepted
    NullishSchema    absent or None accepted
    DefaultSchema    absent replaced by a default, which is then validated
    RefinedSchema    extra predicate evaluated after the inner schema passed
    CoercedSchema    input converted before the inner schema sees it
"""
from __future__ import annotations

import copy
import functools
from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable

from schemata.core.errors import AppError, ErrorCode, Ok, Err, Result, SchemaDefinitionError, invalid_argument, try_result

from .engine import INVALID, MISSING, ParseContext, describe
from .issues import IssueCode, Path
from .result import ValidationResult, parse, safe_parse

if TYPE_CHECKING:
    from .composites import UnionSchema


class Schema(ABC):
    """Base class of every schema node."""

    __slots__ = ()

    @abstractmethod
    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        """Return the typed output, or INVALID after recording issues on ``ctx``."""

    # =========================================================================
    # Entry points
    # =========================================================================

    def parse(self, data: Any = MISSING) -> Any:
        return parse(self, data)

    def safe_parse(self, data: Any = MISSING) -> ValidationResult[Any]:
        return safe_parse(self, data)

    def is_valid(self, data: Any = MISSING) -> bool:
        return safe_parse(self, data).success

    # =========================================================================
    # Modifiers
    # =========================================================================

    def optional(self) -> OptionalSchema:
        return OptionalSchema(self)

    def nullable(self) -> NullableSchema:
        return NullableSchema(self)

    def nullish(self) -> NullishSchema:
        return NullishSchema(self)

    def default(self, value: Any = MISSING, *, factory: Callable[[], Any] | None = None) -> DefaultSchema:
        """Replace absent input with ``value`` (or ``factory()``) before validating."""
        if (value is MISSING) == (factory is None):
            raise SchemaDefinitionError(invalid_argument("default() takes exactly one of value or factory", origin="schema"))
        return DefaultSchema(self, value, factory)

    def or_(self, *others: Schema) -> UnionSchema:
        from .composites import UnionSchema
        return UnionSchema((self, *others))

    def __or__(self, other: Schema) -> UnionSchema:
        if not isinstance(other, Schema): return NotImplemented
        return self.or_(other)

    def refine(self, check: Callable[[Any], bool], message: str = "Invalid input", *, path: Path = ()) -> RefinedSchema:
        """Add a predicate over the validated output.

        Failure records a ``custom`` issue at the schema's path extended by
        ``path`` (e.g. ``("confirm_password",)`` for cross-field checks).
        """
        if not callable(check):
            raise SchemaDefinitionError(invalid_argument("refine() needs a callable predicate", origin="schema"))
        return RefinedSchema(self, check, message, tuple(path))


# =============================================================================
# Wrapper Nodes
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class OptionalSchema(Schema):
    inner: Schema

    def unwrap(self) -> Schema: return self.inner

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING: return MISSING
        return self.inner._parse(value, ctx)


@dataclass(frozen=True, slots=True, eq=False)
class NullableSchema(Schema):
    inner: Schema

    def unwrap(self) -> Schema: return self.inner

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is None: return None
        return self.inner._parse(value, ctx)


@dataclass(frozen=True, slots=True, eq=False)
class NullishSchema(Schema):
    inner: Schema

    def unwrap(self) -> Schema: return self.inner

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING or value is None: return value
        return self.inner._parse(value, ctx)


@dataclass(frozen=True, slots=True, eq=False)
class DefaultSchema(Schema):
    inner: Schema
    value: Any = MISSING
    factory: Callable[[], Any] | None = None

    def unwrap(self) -> Schema: return self.inner

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            # each parse gets its own copy of a mutable default
            value = self.factory() if self.factory is not None else copy.deepcopy(self.value)
        return self.inner._parse(value, ctx)


@dataclass(frozen=True, slots=True, eq=False)
class RefinedSchema(Schema):
    inner: Schema
    check: Callable[[Any], bool]
    message: str = "Invalid input"
    path: Path = ()

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        before = len(ctx.issues)
        output = self.inner._parse(value, ctx)
        # predicate only sees values the inner schema accepted
        if output is INVALID or len(ctx.issues) > before or output is MISSING:
            return output
        try:
            passed = bool(self.check(output))
        except Exception as e:
            return ctx.add_issue(IssueCode.CUSTOM, f"Validation error: {e}", path=self.path)
        if not passed:
            return ctx.add_issue(IssueCode.CUSTOM, self.message, path=self.path)
        return output


@dataclass(frozen=True, slots=True, eq=False)
class CoercedSchema(Schema):
    """Converts input before validating it with ``inner``.

    ``coercion`` is either a rule returning ``Result`` or a plain function;
    a plain function that raises counts as a failed coercion. Absent input is
    passed through untouched so ``required`` is still reported.

    Refinement methods of the inner schema are reachable directly and keep
    the coercion in place: ``coerce.number().int().min(13)``.
    """
    inner: Schema
    coercion: Callable[[Any], Any]
    target: str = "value"

    def _coerce(self, value: Any) -> Result[Any, AppError]:
        outcome = try_result(lambda: self.coercion(value), code=ErrorCode.E2010_COERCION_FAILED, origin="coercion")
        match outcome:
            case Ok(Ok() | Err() as result):
                return result
            case _:
                return outcome

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return self.inner._parse(value, ctx)
        match self._coerce(value):
            case Ok(converted):
                return self.inner._parse(converted, ctx)
            case Err(error):
                message = getattr(self.inner, "type_message", None) or error.message
                return ctx.add_issue(IssueCode.TYPE_MISMATCH, message, expected=self.target, received=describe(value))

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_") or name in ("inner", "coercion", "target"):
            raise AttributeError(name)
        attr = getattr(self.inner, name)
        if not callable(attr):
            return attr

        @functools.wraps(attr)
        def delegate(*args, **kwargs):
            result = attr(*args, **kwargs)
            return replace(self, inner=result) if isinstance(result, Schema) else result

        return delegate
