"""Domain-Specific Error Builders

Ergonomic constructors for typed errors across the library's domains.
Each builder creates an AppError with the appropriate code and context.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext, Err


# =============================================================================
# Schema Definition Errors (E1xxx)
# =============================================================================

def schema_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E1000_SCHEMA_GENERIC,
    origin: str = "",
    **metadata,
) -> AppError:
    """Create a schema definition error (a programming mistake, never bad data)."""
    return AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in metadata.items() if v is not None},
    )


def invalid_bounds(
    constraint: str, minimum: Any, maximum: Any, origin: str = ""
) -> AppError:
    return schema_error(
        f"Inconsistent {constraint} bounds: minimum {minimum!r} is greater than maximum {maximum!r}",
        code=ErrorCode.E1001_INVALID_BOUNDS,
        origin=origin,
        constraint=constraint,
        minimum=minimum,
        maximum=maximum,
    )


def duplicate_field(field: str, origin: str = "") -> AppError:
    return schema_error(
        f"Field '{field}' is declared more than once",
        code=ErrorCode.E1002_DUPLICATE_FIELD,
        origin=origin,
        field=field,
    )


def empty_choices(kind: str, origin: str = "") -> AppError:
    return schema_error(
        f"{kind} requires at least one option",
        code=ErrorCode.E1003_EMPTY_CHOICES,
        origin=origin,
        kind=kind,
    )


def invalid_argument(message: str, origin: str = "", **metadata) -> AppError:
    return schema_error(
        message,
        code=ErrorCode.E1004_INVALID_ARGUMENT,
        origin=origin,
        **metadata,
    )


# =============================================================================
# Validation Errors (E2xxx)
# =============================================================================

def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def coercion_failed(
    value: Any, target: str, reason: str = "", origin: str = "coercion"
) -> Err[AppError]:
    msg = f"Cannot coerce {type(value).__name__} to {target}"
    if reason:
        msg += f": {reason}"
    return validation_error(
        msg,
        code=ErrorCode.E2010_COERCION_FAILED,
        origin=origin,
        target=target,
    )


# =============================================================================
# Procedure Errors (E4xxx)
# =============================================================================

def procedure_not_found(name: str, origin: str = "router") -> AppError:
    return AppError(
        code=ErrorCode.E4010_PROCEDURE_NOT_FOUND,
        message=f"No procedure registered under '{name}'",
        context=ErrorContext(origin=origin),
        metadata={"procedure": name},
    )


def handler_failed(name: str, exc: Exception, origin: str = "procedure") -> AppError:
    return AppError(
        code=ErrorCode.E4003_HANDLER_FAILED,
        message=f"Procedure '{name}' handler raised {type(exc).__name__}: {exc}",
        context=ErrorContext(origin=origin),
        metadata={"procedure": name, "error_type": type(exc).__name__},
        cause=exc,
    )
