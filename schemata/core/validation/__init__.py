"""Declarative Validation System

Schemas are immutable values built from small constructors. One schema
describes the shape of untrusted data and turns it into typed output, or
into a complete list of issues, each located by a path.

Key Features:
- Primitive, literal, enum, object, array, tuple, record and union schemas
- Refinements with custom messages (lengths, ranges, formats, predicates)
- Optional / nullable / nullish / default modifiers
- Explicit opt-in coercion with Result-returning rules
- Collect-all validation: every issue in one pass
- Per-field flattening for forms
- Boundary helpers: procedures, routers, batch parsing

Usage:
    from schemata.core.validation import object_, string, email, number, ValidationError

    UserSchema = object_(
        name=string().min(2, "Name must be at least 2 characters"),
        email=email("Invalid email address"),
        age=number().positive("Age must be positive"),
    )

    result = UserSchema.safe_parse(data)
    if not result.success:
        errors = result.flatten()      # {"email": ["Invalid email address"]}
    user = UserSchema.parse(data)      # raises ValidationError
"""

# Engine and issues
from .engine import MISSING, ParseContext, describe
from .issues import Issue, IssueCode, Path, PathSegment, ROOT_PATH, format_path

# Results and entry points
from .result import (
    Failure,
    Success,
    ValidationError,
    ValidationResult,
    flatten_issues,
    parse,
    safe_parse,
)

# Schema nodes
from .schema import (
    CoercedSchema,
    DefaultSchema,
    NullableSchema,
    NullishSchema,
    OptionalSchema,
    RefinedSchema,
    Schema,
)
from .primitives import (
    BooleanSchema,
    DateSchema,
    EnumSchema,
    IntegerSchema,
    LiteralSchema,
    NumberSchema,
    PrimitiveSchema,
    StringSchema,
    UnknownSchema,
    VoidSchema,
)
from .composites import (
    ArraySchema,
    NonEmptyArraySchema,
    ObjectSchema,
    RecordSchema,
    TupleSchema,
    UnionSchema,
    UnknownKeys,
)

# Refinements
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
)

# Constructors
from .constructors import (
    array,
    boolean,
    date,
    email,
    enum,
    integer,
    literal,
    nullable,
    nullish,
    number,
    object_,
    optional,
    record,
    string,
    tuple_,
    union,
    unknown,
    url,
    uuid,
    void,
)

# Coercion
from .coercion import (
    CoercionRule,
    Coercions,
    ISO8601ToDate,
    StringToBool,
    StringToInt,
    ToNumber,
    ToString,
    coerce,
    coerced,
)

# Forms
from .forms import FormState, FormValidator

# Boundaries
from .boundaries import (
    BoundaryValidator,
    Procedure,
    ProcedureBuilder,
    RouteMeta,
    Router,
    parse_batch,
    procedure,
    router,
)

__all__ = [
    # Engine and issues
    "MISSING",
    "ParseContext",
    "describe",
    "Issue",
    "IssueCode",
    "Path",
    "PathSegment",
    "ROOT_PATH",
    "format_path",
    # Results
    "Failure",
    "Success",
    "ValidationError",
    "ValidationResult",
    "flatten_issues",
    "parse",
    "safe_parse",
    # Schema nodes
    "Schema",
    "OptionalSchema",
    "NullableSchema",
    "NullishSchema",
    "DefaultSchema",
    "RefinedSchema",
    "CoercedSchema",
    "PrimitiveSchema",
    "StringSchema",
    "NumberSchema",
    "IntegerSchema",
    "BooleanSchema",
    "DateSchema",
    "LiteralSchema",
    "EnumSchema",
    "UnknownSchema",
    "VoidSchema",
    "ObjectSchema",
    "ArraySchema",
    "NonEmptyArraySchema",
    "TupleSchema",
    "RecordSchema",
    "UnionSchema",
    "UnknownKeys",
    # Refinements
    "Refinement",
    "MinLength",
    "MaxLength",
    "ExactLength",
    "Pattern",
    "EmailFormat",
    "URLFormat",
    "UUIDFormat",
    "StartsWith",
    "EndsWith",
    "Includes",
    "LowerBound",
    "UpperBound",
    "Integral",
    "MultipleOf",
    # Constructors
    "string",
    "number",
    "integer",
    "boolean",
    "date",
    "email",
    "url",
    "uuid",
    "literal",
    "enum",
    "object_",
    "array",
    "tuple_",
    "record",
    "union",
    "unknown",
    "void",
    "optional",
    "nullable",
    "nullish",
    # Coercion
    "CoercionRule",
    "ToNumber",
    "StringToInt",
    "ToString",
    "StringToBool",
    "ISO8601ToDate",
    "Coercions",
    "coerce",
    "coerced",
    # Forms
    "FormState",
    "FormValidator",
    # Boundaries
    "BoundaryValidator",
    "RouteMeta",
    "Procedure",
    "ProcedureBuilder",
    "Router",
    "procedure",
    "router",
    "parse_batch",
]
