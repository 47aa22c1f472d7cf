"""Exception Bridges

Converts AppErrors into raised exceptions for code that does not use the
Result monad (throwing entry points, startup checks, schema construction).
"""
from __future__ import annotations

from .types import AppError, ErrorCode, ErrorContext


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when an AppError has to unwind through code that doesn't
    use the Result monad.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class SchemaDefinitionError(AppErrorException):
    """A schema was built with an invalid definition.

    Raised immediately by the builder call that introduced the problem
    (inverted bounds, duplicate field names, empty enums). It signals a
    programming error and is never produced while validating input.
    """

    def __init__(self, error: AppError | str):
        if isinstance(error, str):
            error = AppError(
                code=ErrorCode.E1000_SCHEMA_GENERIC,
                message=error,
                context=ErrorContext(origin="schema"),
            )
        super().__init__(error)


def raise_error(error: AppError) -> None:
    """Raise AppError as exception.

    Usage:
        if name not in registry:
            raise_error(procedure_not_found(name))
    """
    raise AppErrorException(error)


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return.

    Usage:
        result = await proc.safe_call(payload)
        raise_result(result)  # Raises if Err
    """
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
