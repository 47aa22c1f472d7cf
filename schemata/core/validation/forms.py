"""Form Validation

Turns an object schema into per-field error messages for form UIs. The
validator holds no state between calls; the caller decides when to validate
(on blur, on change, on submit) and keeps the current values.

    form = FormValidator(UserFormSchema, defaults={"name": "", "email": "", "age": 0, "bio": ""})
    state = form.validate({"name": "A"})
    state.field_errors["name"]    # ("Name must be at least 2 characters",)
    form.validate_field("email", values)
    form.submit(values, on_valid=save)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping

from schemata.core.logging import validation_logger

from .issues import ROOT_PATH
from .result import Failure, Success, ValidationResult, flatten_issues, safe_parse
from .schema import Schema

log = validation_logger()


def _empty() -> Mapping[str, Any]:
    return MappingProxyType({})


@dataclass(frozen=True, slots=True)
class FormState:
    """Snapshot of one validation pass over a form's values.

    ``field_errors`` maps serialized field paths to their messages;
    ``form_errors`` holds messages that belong to the form as a whole.
    """
    values: Mapping[str, Any] = field(default_factory=_empty)
    field_errors: Mapping[str, tuple[str, ...]] = field(default_factory=_empty)
    form_errors: tuple[str, ...] = ()
    data: Any = field(default=None, repr=False)

    @property
    def is_valid(self) -> bool:
        return not self.field_errors and not self.form_errors

    def error_for(self, name: str) -> str | None:
        """First message for a field, the one a form shows under its input."""
        messages = self.field_errors.get(name)
        return messages[0] if messages else None


def _belongs_to(path: str, name: str) -> bool:
    return path == name or path.startswith(f"{name}.") or path.startswith(f"{name}[")


class FormValidator:
    """Stateless bridge between a schema and a form's values."""

    __slots__ = ("schema", "defaults")

    def __init__(self, schema: Schema, defaults: Mapping[str, Any] | None = None):
        self.schema = schema
        self.defaults = MappingProxyType(dict(defaults or {}))

    def initial_state(self) -> FormState:
        return FormState(values=self.defaults)

    def _merge(self, values: Mapping[str, Any] | None) -> dict[str, Any]:
        return {**self.defaults, **(values or {})}

    def validate(self, values: Mapping[str, Any] | None = None) -> FormState:
        """Validate the whole form; missing values fall back to the defaults."""
        merged = self._merge(values)
        match safe_parse(self.schema, merged):
            case Success(data):
                return FormState(values=MappingProxyType(merged), data=data)
            case Failure(issues):
                flattened = flatten_issues(issues)
                form_errors = tuple(flattened.pop(ROOT_PATH, ()))
                return FormState(
                    values=MappingProxyType(merged),
                    field_errors=MappingProxyType({k: tuple(v) for k, v in flattened.items()}),
                    form_errors=form_errors,
                )

    def validate_field(self, name: str, values: Mapping[str, Any] | None = None) -> tuple[str, ...]:
        """Messages for one field and anything nested under it."""
        state = self.validate(values)
        return tuple(
            message
            for path, messages in state.field_errors.items() if _belongs_to(path, name)
            for message in messages
        )

    def submit(
        self,
        values: Mapping[str, Any] | None,
        on_valid: Callable[[Any], Any],
    ) -> ValidationResult[Any]:
        """Call ``on_valid`` with the typed data only when the form is valid."""
        result = safe_parse(self.schema, self._merge(values))
        match result:
            case Success(data):
                on_valid(data)
            case Failure(issues):
                log.debug("form_submit_rejected", fields=list(flatten_issues(issues)))
        return result
