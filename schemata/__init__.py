"""schemata: declarative schema validation.

Describe the shape of untrusted data once and get typed values or a complete,
path-addressed list of issues back. Around the core sit the boundary
collaborators that consume it: typed environment variables, form validation
and validated RPC procedures.

    import schemata as s

    UserSchema = s.object_(
        name=s.string().min(2, "Name must be at least 2 characters"),
        email=s.email("Invalid email address"),
        age=s.number().positive("Age must be positive"),
    )

    match UserSchema.safe_parse(payload):
        case s.Success(user):
            ...
        case s.Failure(issues):
            errors = s.flatten_issues(issues)
"""
__version__ = "0.1.0"

from schemata.core.errors import (
    AppError,
    AppErrorException,
    Err,
    ErrorCode,
    Ok,
    Result,
    SchemaDefinitionError,
)
from schemata.core.validation import *  # noqa: F403
from schemata.core.validation import __all__ as _validation_all
from schemata.core.env import Env, EnvValidationError, create_env

__all__ = [
    "__version__",
    "AppError",
    "AppErrorException",
    "Err",
    "ErrorCode",
    "Ok",
    "Result",
    "SchemaDefinitionError",
    "Env",
    "EnvValidationError",
    "create_env",
    *_validation_all,
]
