"""Typed Environment Variables

Validates process environment variables once, at startup, against schemas
declared per variable. A misconfigured process fails fast with every bad
variable listed, instead of failing later on first use.

    env = create_env(
        server={"DATABASE_URL": url(), "NODE_ENV": enum("development", "production").default("development")},
        client={"PUBLIC_APP_URL": url().optional()},
    )
    env.DATABASE_URL

Server variables must not carry the client prefix and client variables
must. Declaration mistakes raise ``SchemaDefinitionError``; invalid values
raise ``EnvValidationError``. Only variable names are ever logged.
"""
from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator

from dotenv import dotenv_values

from schemata.core.errors import ErrorCode, SchemaDefinitionError, schema_error
from schemata.core.logging import env_logger
from schemata.core.validation.composites import ObjectSchema, UnknownKeys
from schemata.core.validation.engine import MISSING
from schemata.core.validation.result import Failure, Success, ValidationError, safe_parse
from schemata.core.validation.schema import Schema

log = env_logger()


@dataclass(eq=False)
class EnvValidationError(ValidationError):
    """One or more environment variables failed validation."""
    message: str = "Invalid environment variables"

    @property
    def variables(self) -> tuple[str, ...]:
        """Names of the offending variables, in declaration order of the issues."""
        return tuple(dict.fromkeys(str(i.path[0]) for i in self.issues if i.path))


class Env(Mapping[str, Any]):
    """Immutable validated environment with attribute and item access.

    Declared variables that were absent (and optional) read as ``None``;
    undeclared names raise ``AttributeError`` / ``KeyError``.
    """

    __slots__ = ("_values", "_declared")

    def __init__(self, values: Mapping[str, Any], declared: tuple[str, ...]):
        object.__setattr__(self, "_values", MappingProxyType(dict(values)))
        object.__setattr__(self, "_declared", declared)

    def __getitem__(self, name: str) -> Any:
        if name in self._values:
            return self._values[name]
        if name in self._declared:
            return None
        raise KeyError(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError(f"Environment variable '{name}' is not declared") from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Env is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("Env is read-only")

    def __iter__(self) -> Iterator[str]:
        return iter(self._declared)

    def __len__(self) -> int:
        return len(self._declared)

    def __contains__(self, name: object) -> bool:
        return name in self._declared

    def __repr__(self) -> str:
        return f"Env({', '.join(self._declared)})"


def _declaration_error(message: str, variable: str) -> SchemaDefinitionError:
    return SchemaDefinitionError(schema_error(
        message, code=ErrorCode.E1010_ENV_DECLARATION, origin="env", variable=variable,
    ))


def _check_declarations(server: Mapping[str, Schema], client: Mapping[str, Schema], client_prefix: str) -> None:
    for name, schema in {**server, **client}.items():
        if not isinstance(schema, Schema):
            raise _declaration_error(f"Environment variable '{name}' must be declared with a schema", name)
    for name in server:
        if client_prefix and name.startswith(client_prefix):
            raise _declaration_error(
                f"Server variable '{name}' must not start with the client prefix '{client_prefix}'", name,
            )
        if name in client:
            raise _declaration_error(f"Environment variable '{name}' is declared as both server and client", name)
    for name in client:
        if not name.startswith(client_prefix):
            raise _declaration_error(f"Client variable '{name}' must start with '{client_prefix}'", name)


def _read_source(runtime_env: Mapping[str, str | None] | None, env_file: str | Path | None) -> dict[str, str]:
    """Merge the dotenv file (lower priority) with the runtime environment."""
    source: dict[str, str] = {}
    if env_file is not None:
        source.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
    runtime = os.environ if runtime_env is None else runtime_env
    source.update({k: v for k, v in runtime.items() if v is not None})
    return source


def create_env(
    *,
    server: Mapping[str, Schema],
    client: Mapping[str, Schema] | None = None,
    client_prefix: str = "PUBLIC_",
    runtime_env: Mapping[str, str | None] | None = None,
    env_file: str | Path | None = None,
    empty_string_as_undefined: bool = True,
    skip_validation: bool = False,
) -> Env:
    """Validate the declared variables and return them as an immutable ``Env``.

    ``runtime_env`` defaults to ``os.environ``. Empty strings count as absent
    unless ``empty_string_as_undefined`` is False, so ``.default()`` and
    ``.optional()`` apply to variables set to ``""``.
    """
    client = client or {}
    _check_declarations(server, client, client_prefix)
    declared = (*server, *client)

    source = _read_source(runtime_env, env_file)
    raw: dict[str, Any] = {}
    for name in declared:
        value = source.get(name, MISSING)
        if empty_string_as_undefined and value == "":
            value = MISSING
        if value is not MISSING:
            raw[name] = value

    if skip_validation:
        log.warning("env_validation_skipped", variables=list(declared))
        return Env(raw, declared)

    shape = ObjectSchema(tuple({**server, **client}.items()), UnknownKeys.STRIP)
    match safe_parse(shape, raw):
        case Success(values):
            log.info("env_loaded", server=len(server), client=len(client))
            return Env(values, declared)
        case Failure(issues):
            error = EnvValidationError(issues)
            log.error("env_invalid", variables=list(error.variables), issue_count=len(issues))
            raise error
