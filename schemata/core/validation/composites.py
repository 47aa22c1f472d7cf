"""Composite Schemas

Objects, arrays, tuples, records and unions. Composites extend the path for
every child they check and keep going after a child fails, so one pass
reports every problem in the input.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from schemata.core.errors import SchemaDefinitionError, duplicate_field, empty_choices, invalid_argument

from .engine import INVALID, MISSING, ParseContext, describe, is_mapping, is_sequence
from .issues import Issue, IssueCode, PathSegment
from .primitives import require_length, check_length_bounds
from .refinements import ExactLength, MaxLength, MinLength, Refinement
from .schema import OptionalSchema, Schema


class UnknownKeys(str, Enum):
    """What an object does with keys it does not declare."""
    STRIP = "strip"
    STRICT = "strict"
    PASSTHROUGH = "passthrough"


def _require_schema(value: Any, where: str) -> Schema:
    if not isinstance(value, Schema):
        raise SchemaDefinitionError(invalid_argument(f"{where} must be a schema, got {type(value).__name__}", origin="schema"))
    return value


# =============================================================================
# Object
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class ObjectSchema(Schema):
    """Ordered named fields over a mapping input.

    Missing required fields report ``required`` at their own path. Absent
    optional fields are left out of the output.
    """
    fields: tuple[tuple[str, Schema], ...]
    unknown_keys: UnknownKeys = UnknownKeys.STRIP
    type_message: str | None = None
    _names: frozenset[str] = field(init=False, repr=False)

    def __post_init__(self):
        seen: set[str] = set()
        for name, schema in self.fields:
            if not isinstance(name, str):
                raise SchemaDefinitionError(invalid_argument(f"Field names must be strings, got {name!r}", origin="object"))
            if name in seen:
                raise SchemaDefinitionError(duplicate_field(name, origin="object"))
            _require_schema(schema, f"Field '{name}'")
            seen.add(name)
        object.__setattr__(self, "_names", frozenset(seen))

    @property
    def shape(self) -> Mapping[str, Schema]:
        return MappingProxyType(dict(self.fields))

    def keys(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.fields)

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.type_message or "Required", expected="object", received="undefined")
        if not is_mapping(value):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH, self.type_message or f"Expected object, received {describe(value)}",
                expected="object", received=describe(value),
            )

        before = len(ctx.issues)
        output: dict[str, Any] = {}
        for name, schema in self.fields:
            parsed = schema._parse(value.get(name, MISSING), ctx.at(name))
            if parsed is not MISSING and parsed is not INVALID:
                output[name] = parsed

        if self.unknown_keys is not UnknownKeys.STRIP:
            extra = [key for key in value if key not in self._names]
            if extra and self.unknown_keys is UnknownKeys.STRICT:
                ctx.add_issue(
                    IssueCode.UNRECOGNIZED_KEYS,
                    "Unrecognized key(s) in object: " + ", ".join(repr(k) for k in extra),
                    expected="known keys",
                )
            elif extra:
                output.update((key, value[key]) for key in extra)

        return output if len(ctx.issues) == before else INVALID

    # =========================================================================
    # Unknown-key modes
    # =========================================================================

    def strict(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.STRICT)

    def strip(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.STRIP)

    def passthrough(self) -> ObjectSchema:
        return replace(self, unknown_keys=UnknownKeys.PASSTHROUGH)

    # =========================================================================
    # Shape helpers
    # =========================================================================

    def extend(self, shape: Mapping[str, Schema] | None = None, /, **fields: Schema) -> ObjectSchema:
        """New object with extra fields; redeclared names replace the old schema in place."""
        added = {**(shape or {}), **fields}
        merged = [(name, added.pop(name, schema)) for name, schema in self.fields]
        merged.extend(added.items())
        return replace(self, fields=tuple(merged))

    def pick(self, *names: str) -> ObjectSchema:
        self._require_known(names)
        return replace(self, fields=tuple((n, s) for n, s in self.fields if n in names))

    def omit(self, *names: str) -> ObjectSchema:
        self._require_known(names)
        return replace(self, fields=tuple((n, s) for n, s in self.fields if n not in names))

    def partial(self) -> ObjectSchema:
        """Every field becomes optional."""
        return replace(self, fields=tuple(
            (n, s if isinstance(s, OptionalSchema) else OptionalSchema(s)) for n, s in self.fields
        ))

    def _require_known(self, names: Iterable[str]) -> None:
        unknown = [n for n in names if n not in self._names]
        if unknown:
            raise SchemaDefinitionError(invalid_argument(f"Unknown field(s): {', '.join(unknown)}", origin="object", fields=unknown))


# =============================================================================
# Arrays
# =============================================================================

def _positional(parsed: Any) -> Any:
    # positions are kept, so an absent element reads as None
    return None if parsed is MISSING else parsed


@dataclass(frozen=True, slots=True, eq=False)
class ArraySchema(Schema):
    """Homogeneous list; every element is checked with its index in the path.

    An element whose schema yields absence (``optional()``, ``unknown()``)
    comes out as ``None``.
    """
    element: Schema
    refinements: tuple[Refinement, ...] = ()
    type_message: str | None = None

    def __post_init__(self):
        _require_schema(self.element, "Array element")

    def _check_size(self, value: Any, ctx: ParseContext) -> bool:
        passed = True
        for refinement in self.refinements:
            passed = refinement.apply(value, ctx) and passed
        return passed

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.type_message or "Required", expected="array", received="undefined")
        if not is_sequence(value):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH, self.type_message or f"Expected array, received {describe(value)}",
                expected="array", received=describe(value),
            )
        before = len(ctx.issues)
        self._check_size(value, ctx)
        output = [_positional(self.element._parse(item, ctx.at(i))) for i, item in enumerate(value)]
        return output if len(ctx.issues) == before else INVALID

    def _refined(self, refinement: Refinement) -> ArraySchema:
        refinements = self.refinements + (refinement,)
        check_length_bounds(refinements, origin="array")
        return replace(self, refinements=refinements)

    def min(self, length: int, message: str | None = None) -> ArraySchema:
        return self._refined(MinLength(require_length(length, "min"), message, unit="element"))

    def max(self, length: int, message: str | None = None) -> ArraySchema:
        return self._refined(MaxLength(require_length(length, "max"), message, unit="element"))

    def length(self, length: int, message: str | None = None) -> ArraySchema:
        return self._refined(ExactLength(require_length(length, "length"), message, unit="element"))

    def nonempty(self, message: str | None = None) -> NonEmptyArraySchema:
        return NonEmptyArraySchema(self.element, self.refinements, self.type_message, message)


@dataclass(frozen=True, slots=True, eq=False)
class NonEmptyArraySchema(ArraySchema):
    """Array with at least one element; the length is checked before the elements."""
    nonempty_message: str | None = None

    def _check_size(self, value: Any, ctx: ParseContext) -> bool:
        if not value:
            ctx.add_issue(
                IssueCode.TOO_SMALL, self.nonempty_message or "Array must contain at least 1 element(s)",
                expected="min_length[1]",
            )
            return False
        return ArraySchema._check_size(self, value, ctx)

    def _refined(self, refinement: Refinement) -> NonEmptyArraySchema:
        refinements = self.refinements + (refinement,)
        check_length_bounds((MinLength(1), *refinements), origin="array")
        return replace(self, refinements=refinements)


# =============================================================================
# Tuple and Record
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class TupleSchema(Schema):
    """Fixed arity, one schema per position."""
    items: tuple[Schema, ...]
    type_message: str | None = None

    def __post_init__(self):
        for i, item in enumerate(self.items):
            _require_schema(item, f"Tuple item {i}")

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        expected = f"tuple[{len(self.items)}]"
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.type_message or "Required", expected=expected, received="undefined")
        if not is_sequence(value):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH, self.type_message or f"Expected array, received {describe(value)}",
                expected=expected, received=describe(value),
            )
        if len(value) != len(self.items):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH,
                self.type_message or f"Expected tuple of {len(self.items)} item(s), received {len(value)}",
                expected=expected, received=f"tuple[{len(value)}]",
            )
        before = len(ctx.issues)
        output = tuple(_positional(schema._parse(item, ctx.at(i))) for i, (schema, item) in enumerate(zip(self.items, value)))
        return output if len(ctx.issues) == before else INVALID


def _key_segment(key: Any) -> PathSegment:
    return key if isinstance(key, (str, int)) and not isinstance(key, bool) else str(key)


@dataclass(frozen=True, slots=True, eq=False)
class RecordSchema(Schema):
    """Mapping with arbitrary keys; keys and values each have one schema."""
    key: Schema
    value: Schema
    type_message: str | None = None

    def __post_init__(self):
        _require_schema(self.key, "Record key")
        _require_schema(self.value, "Record value")

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        if value is MISSING:
            return ctx.add_issue(IssueCode.REQUIRED, self.type_message or "Required", expected="record", received="undefined")
        if not is_mapping(value):
            return ctx.add_issue(
                IssueCode.TYPE_MISMATCH, self.type_message or f"Expected object, received {describe(value)}",
                expected="record", received=describe(value),
            )
        before = len(ctx.issues)
        output: dict[Any, Any] = {}
        for raw_key, raw_value in value.items():
            child = ctx.at(_key_segment(raw_key))
            parsed_key = self.key._parse(raw_key, child)
            parsed_value = self.value._parse(raw_value, child)
            if parsed_value is not MISSING:
                output[parsed_key] = parsed_value
        return output if len(ctx.issues) == before else INVALID


# =============================================================================
# Union
# =============================================================================

@dataclass(frozen=True, slots=True, eq=False)
class UnionSchema(Schema):
    """Ordered alternatives; the first one that succeeds completely wins.

    Each alternative is tried against a private issue list, so the issues of
    failed alternatives never leak. When every alternative fails, a single
    ``invalid_union`` issue carries each alternative's issues in order.
    """
    options: tuple[Schema, ...]
    message: str | None = None

    def __post_init__(self):
        if not self.options:
            raise SchemaDefinitionError(empty_choices("union", origin="union"))
        for i, option in enumerate(self.options):
            _require_schema(option, f"Union option {i}")

    def or_(self, *others: Schema) -> UnionSchema:
        return replace(self, options=self.options + others)

    def _parse(self, value: Any, ctx: ParseContext) -> Any:
        branches: list[tuple[Issue, ...]] = []
        for option in self.options:
            trial = ctx.isolated()
            output = option._parse(value, trial)
            if not trial.has_issues:
                return output
            branches.append(tuple(trial.issues))
        return ctx.add_issue(
            IssueCode.INVALID_UNION, self.message or "Invalid input",
            received=describe(value), union_errors=tuple(branches),
        )
