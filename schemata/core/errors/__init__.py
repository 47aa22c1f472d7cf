"""Monadic Error Handling System

Type-safe error handling for everything around schema validation: coercion
rules, environment loading, procedures and batch parsing.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- Builder functions: Ergonomic error construction
- AppErrorException: bridge for code that raises instead of returning

Usage:
    from schemata.core.errors import Ok, Err, Result, AppError, procedure_not_found

    def lookup(name: str) -> Result[Procedure, AppError]:
        proc = registry.get(name)
        if proc is None:
            return Err(procedure_not_found(name))
        return Ok(proc)

    match lookup("users.create"):
        case Ok(proc):
            ...
        case Err(error):
            log.error(error.message, code=error.code.name)
"""
from .types import (
    # Core types
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    # Constructors
    from_exception,
    try_result,
    # Combinators
    collect_results,
)

from .builders import (
    # Schema definition (E1xxx)
    schema_error,
    invalid_bounds,
    duplicate_field,
    empty_choices,
    invalid_argument,
    # Validation (E2xxx)
    validation_error,
    coercion_failed,
    # Procedures (E4xxx)
    procedure_not_found,
    handler_failed,
)

from .exceptions import (
    AppErrorException,
    SchemaDefinitionError,
    raise_error,
    raise_result,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Constructors
    "from_exception",
    "try_result",
    # Combinators
    "collect_results",
    # Schema definition (E1xxx)
    "schema_error",
    "invalid_bounds",
    "duplicate_field",
    "empty_choices",
    "invalid_argument",
    # Validation (E2xxx)
    "validation_error",
    "coercion_failed",
    # Procedures (E4xxx)
    "procedure_not_found",
    "handler_failed",
    # Exceptions
    "AppErrorException",
    "SchemaDefinitionError",
    "raise_error",
    "raise_result",
]
