"""Validation at System Boundaries

Parse-don't-validate at the points where data enters or leaves a program:

- Procedures: typed RPC endpoints whose input (and optionally output) is
  validated against schemas around a sync or async handler
- Routers: nested namespaces of procedures addressed by dotted names
- Batches: many items against one schema, errors keyed by index

No transport is involved: callers hand raw values in and get typed values,
``ValidationError`` or ``AppErrorException`` (``call``) or a ``Result``
(``safe_call``) back.

    get_posts = (
        procedure()
        .route(method="GET", path="/posts", summary="Get all posts", tags=["posts"])
        .input(void())
        .output(void())
        .handler(list_posts)
    )
    api = router({"post": {"get_posts": get_posts}})
    await api.call("post.get_posts")
"""
from __future__ import annotations

import inspect
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterator, Mapping, Union

import structlog
from pydantic import BaseModel, ConfigDict

from schemata.core.errors import (
    AppError,
    AppErrorException,
    Err,
    ErrorCode,
    Ok,
    Result,
    SchemaDefinitionError,
    handler_failed,
    invalid_argument,
    procedure_not_found,
    raise_error,
)
from schemata.core.logging import generate_correlation_id, rpc_logger

from .engine import MISSING
from .result import Failure, Success, ValidationError, safe_parse
from .schema import Schema

log = rpc_logger()

Handler = Callable[[Any], Union[Any, Awaitable[Any]]]


# ============================================================================
# Boundary Validator
# ============================================================================

class BoundaryValidator:
    """Stateless validator that reports through ``Result`` instead of raising.

    Usage:
        user_validator = BoundaryValidator(UserSchema, origin="signup")
        result = user_validator.parse_ingress(request_data)
    """

    __slots__ = ("schema", "origin")

    def __init__(self, schema: Schema, origin: str = "ingress"):
        self.schema, self.origin = schema, origin

    def parse_ingress(self, data: Any) -> Result[Any, AppError]:
        """Validate data entering the system."""
        match safe_parse(self.schema, data):
            case Success(value):
                return Ok(value)
            case Failure() as failure:
                return Err(failure.error.to_app_error(origin=self.origin))

    def parse_egress(self, data: Any) -> Result[Any, AppError]:
        """Validate data leaving the system; failures carry the output error code."""
        match safe_parse(self.schema, data):
            case Success(value):
                return Ok(value)
            case Failure() as failure:
                details = failure.error.to_app_error(origin=self.origin)
                return Err(AppError(
                    code=ErrorCode.E4002_PROCEDURE_OUTPUT_INVALID,
                    message=f"Output failed validation: {details.message}",
                    context=details.context,
                    metadata=details.metadata,
                ))


# ============================================================================
# Batch Validation
# ============================================================================

def parse_batch(
    schema: Schema,
    items: list[Any],
    *,
    max_errors: int = 50,
) -> Result[list[Any], list[tuple[int, AppError]]]:
    """Parse and validate a batch of items.

    Returns Ok with all valid items or Err with (index, error) pairs. Stops
    collecting after ``max_errors`` failures.

    Usage:
        match parse_batch(PostSchema, rows):
            case Ok(posts):
                ...
            case Err(errors):
                for idx, err in errors:
                    log.error("batch_item_invalid", index=idx, error=err.message)
    """
    validator = BoundaryValidator(schema, origin="batch")
    valid: list[Any] = []
    errors: list[tuple[int, AppError]] = []

    for idx, item in enumerate(items):
        if len(errors) >= max_errors:
            break
        match validator.parse_ingress(item):
            case Ok(value):
                valid.append(value)
            case Err(error):
                errors.append((idx, error.with_metadata(batch_index=idx)))

    if errors:
        return Err(errors)
    return Ok(valid)


# ============================================================================
# Procedures
# ============================================================================

class RouteMeta(BaseModel):
    """Opaque route metadata for whatever transport exposes the procedure."""
    model_config = ConfigDict(frozen=True)

    method: str = "POST"
    path: str | None = None
    summary: str | None = None
    description: str | None = None
    tags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, eq=False)
class Procedure:
    """Validated handler. Build with ``procedure()``."""
    fn: Handler
    input_schema: Schema | None = None
    output_schema: Schema | None = None
    route_meta: RouteMeta = RouteMeta()
    name: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.route_meta.path or getattr(self.fn, "__name__", "procedure")

    def named(self, name: str) -> Procedure:
        return replace(self, name=name)

    async def call(self, raw_input: Any = MISSING) -> Any:
        """Validate input, run the handler, validate output.

        Raises ``ValidationError`` for bad input and ``AppErrorException``
        (E4002) when the handler returns something the output schema rejects.
        Exceptions from the handler propagate unchanged.
        """
        with structlog.contextvars.bound_contextvars(procedure=self.label, correlation_id=generate_correlation_id()):
            data = raw_input
            if self.input_schema is not None:
                match safe_parse(self.input_schema, raw_input):
                    case Success(value):
                        data = value
                    case Failure(issues) as failure:
                        log.warning("procedure_input_invalid", issue_count=len(issues))
                        raise failure.error

            result = self.fn(data)
            if inspect.isawaitable(result):
                result = await result

            if self.output_schema is None:
                return result
            match BoundaryValidator(self.output_schema, origin=f"procedure:{self.label}").parse_egress(result):
                case Ok(value):
                    log.debug("procedure_completed")
                    return value
                case Err(error):
                    log.error("procedure_output_invalid", error=error.message)
                    raise_error(error.with_metadata(procedure=self.label))

    async def safe_call(self, raw_input: Any = MISSING) -> Result[Any, AppError]:
        """Like ``call`` but every failure comes back as ``Err``."""
        try:
            return Ok(await self.call(raw_input))
        except ValidationError as e:
            details = e.to_app_error(origin=f"procedure:{self.label}")
            return Err(AppError(
                code=ErrorCode.E4001_PROCEDURE_INPUT_INVALID,
                message=f"Invalid input for procedure '{self.label}': {details.message}",
                context=details.context,
                metadata={**details.metadata, "procedure": self.label},
            ))
        except AppErrorException as e:
            return Err(e.error)
        except Exception as e:
            log.exception("procedure_handler_failed", procedure=self.label)
            return Err(handler_failed(self.label, e))


@dataclass(frozen=True, slots=True)
class ProcedureBuilder:
    """Immutable builder; every step returns a new builder."""
    route_meta: RouteMeta = RouteMeta()
    input_schema: Schema | None = None
    output_schema: Schema | None = None

    def route(self, **meta: Any) -> ProcedureBuilder:
        merged = {**self.route_meta.model_dump(), **meta}
        return replace(self, route_meta=RouteMeta(**merged))

    def input(self, schema: Schema) -> ProcedureBuilder:
        return replace(self, input_schema=_require_schema(schema, "input"))

    def output(self, schema: Schema) -> ProcedureBuilder:
        return replace(self, output_schema=_require_schema(schema, "output"))

    def handler(self, fn: Handler) -> Procedure:
        if not callable(fn):
            raise SchemaDefinitionError(invalid_argument("handler() needs a callable", origin="procedure"))
        return Procedure(fn, self.input_schema, self.output_schema, self.route_meta)


def _require_schema(schema: Any, where: str) -> Schema:
    if not isinstance(schema, Schema):
        raise SchemaDefinitionError(invalid_argument(f"{where}() needs a schema, got {type(schema).__name__}", origin="procedure"))
    return schema


def procedure() -> ProcedureBuilder:
    return ProcedureBuilder()


# ============================================================================
# Router
# ============================================================================

RouterTree = Mapping[str, Union[Procedure, "RouterTree"]]


class Router:
    """Procedures addressed by dotted names (``"post.get_posts"``)."""

    __slots__ = ("_procedures",)

    def __init__(self, procedures: Mapping[str, Procedure]):
        self._procedures = MappingProxyType(dict(procedures))

    def resolve(self, name: str) -> Procedure:
        proc = self._procedures.get(name)
        if proc is None:
            raise_error(procedure_not_found(name))
        return proc

    def __iter__(self) -> Iterator[str]:
        return iter(self._procedures)

    def __len__(self) -> int:
        return len(self._procedures)

    def __contains__(self, name: object) -> bool:
        return name in self._procedures

    async def call(self, name: str, raw_input: Any = MISSING) -> Any:
        return await self.resolve(name).call(raw_input)

    async def safe_call(self, name: str, raw_input: Any = MISSING) -> Result[Any, AppError]:
        proc = self._procedures.get(name)
        if proc is None:
            return Err(procedure_not_found(name))
        return await proc.safe_call(raw_input)


def _flatten_tree(tree: RouterTree, prefix: str = "") -> Iterator[tuple[str, Procedure]]:
    for key, node in tree.items():
        if not isinstance(key, str) or not key or "." in key:
            raise SchemaDefinitionError(invalid_argument(f"Invalid router key {key!r}", origin="router"))
        name = f"{prefix}{key}"
        if isinstance(node, Procedure):
            yield name, node.named(name)
        elif isinstance(node, Mapping):
            yield from _flatten_tree(node, f"{name}.")
        else:
            raise SchemaDefinitionError(invalid_argument(
                f"Router entry '{name}' must be a procedure or a namespace", origin="router",
            ))


def router(tree: RouterTree) -> Router:
    """Build a router from nested mappings of procedures."""
    procedures = dict(_flatten_tree(tree))
    log.debug("router_built", procedures=list(procedures))
    return Router(procedures)
