"""Schema Constructors

The public building blocks. Every function returns a new immutable schema;
malformed definitions raise ``SchemaDefinitionError`` right here, at build
time, never during validation.

    UserSchema = object_(
        name=string().min(2, "Name must be at least 2 characters"),
        email=email("Invalid email address"),
        age=number().int().positive().optional(),
        role=enum("admin", "user", "guest"),
        tags=array(string()).default(list),
    )
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Mapping

from schemata.core.config import get_settings
from schemata.core.errors import SchemaDefinitionError, duplicate_field, invalid_argument

from .composites import ArraySchema, ObjectSchema, RecordSchema, TupleSchema, UnionSchema, UnknownKeys
from .primitives import (
    BooleanSchema,
    DateSchema,
    EnumSchema,
    IntegerSchema,
    LiteralSchema,
    LiteralValue,
    NumberSchema,
    StringSchema,
    UnknownSchema,
    VoidSchema,
)
from .schema import NullableSchema, NullishSchema, OptionalSchema, Schema


# =============================================================================
# Primitives
# =============================================================================

def string(message: str | None = None) -> StringSchema:
    return StringSchema(type_message=message)


def number(message: str | None = None) -> NumberSchema:
    return NumberSchema(type_message=message)


def integer(message: str | None = None) -> IntegerSchema:
    return IntegerSchema(type_message=message)


def boolean(message: str | None = None) -> BooleanSchema:
    return BooleanSchema(type_message=message)


def date(message: str | None = None) -> DateSchema:
    return DateSchema(type_message=message)


def email(message: str | None = None) -> StringSchema:
    """String in email format; ``message`` applies to both type and format failures."""
    return StringSchema(type_message=message).email(message)


def url(message: str | None = None) -> StringSchema:
    return StringSchema(type_message=message).url(message)


def uuid(message: str | None = None) -> StringSchema:
    return StringSchema(type_message=message).uuid(message)


def unknown() -> UnknownSchema:
    return UnknownSchema()


def void(message: str | None = None) -> VoidSchema:
    return VoidSchema(message)


# =============================================================================
# Literals and enums
# =============================================================================

_LITERAL_TYPES = (str, int, float, bool, type(None))


def literal(value: LiteralValue, message: str | None = None) -> LiteralSchema:
    if not isinstance(value, _LITERAL_TYPES):
        raise SchemaDefinitionError(invalid_argument(
            f"literal() expects str, int, float, bool or None, got {type(value).__name__}", origin="literal",
        ))
    return LiteralSchema(value, message)


def enum(*values: Any, message: str | None = None) -> EnumSchema:
    """Enum of literal values, given inline, as one iterable, or as an Enum class.

        enum("admin", "user", "guest")
        enum(["admin", "user", "guest"])
        enum(Role)
    """
    if len(values) == 1 and isinstance(values[0], type) and issubclass(values[0], Enum):
        enum_class = values[0]
        return EnumSchema(tuple(member.value for member in enum_class), enum_class, message)
    if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
        values = tuple(values[0])
    for v in values:
        if not isinstance(v, _LITERAL_TYPES):
            raise SchemaDefinitionError(invalid_argument(
                f"enum() values must be literals, got {type(v).__name__}", origin="enum",
            ))
    return EnumSchema(tuple(values), None, message)


# =============================================================================
# Composites
# =============================================================================

def object_(
    shape: Mapping[str, Schema] | Iterable[tuple[str, Schema]] | None = None,
    /,
    *,
    message: str | None = None,
    unknown_keys: UnknownKeys | str | None = None,
    **fields: Schema,
) -> ObjectSchema:
    """Object schema from a mapping, ``(name, schema)`` pairs, keyword fields, or a mix.

    A name given twice raises ``SchemaDefinitionError``. ``unknown_keys``
    defaults to the configured ``SCHEMATA_UNKNOWN_KEYS`` policy.
    """
    pairs: list[tuple[str, Schema]] = []
    if isinstance(shape, Mapping):
        pairs.extend(shape.items())
    elif shape is not None:
        pairs.extend(shape)
    declared = {name for name, _ in pairs}
    for name, schema in fields.items():
        if name in declared:
            raise SchemaDefinitionError(duplicate_field(name, origin="object"))
        pairs.append((name, schema))
    mode = UnknownKeys(unknown_keys or get_settings().SCHEMATA_UNKNOWN_KEYS)
    return ObjectSchema(tuple(pairs), mode, message)


def array(element: Schema, message: str | None = None) -> ArraySchema:
    return ArraySchema(element, type_message=message)


def tuple_(*items: Schema, message: str | None = None) -> TupleSchema:
    return TupleSchema(tuple(items), message)


def record(key: Schema, value: Schema | None = None, message: str | None = None) -> RecordSchema:
    """``record(value)`` uses string keys; ``record(key, value)`` sets both."""
    if value is None:
        key, value = StringSchema(), key
    return RecordSchema(key, value, message)


def union(*options: Schema, message: str | None = None) -> UnionSchema:
    if len(options) == 1 and isinstance(options[0], (list, tuple)):
        options = tuple(options[0])
    return UnionSchema(tuple(options), message)


# =============================================================================
# Modifiers as functions
# =============================================================================

def optional(schema: Schema) -> OptionalSchema:
    return schema.optional()


def nullable(schema: Schema) -> NullableSchema:
    return schema.nullable()


def nullish(schema: Schema) -> NullishSchema:
    return schema.nullish()
