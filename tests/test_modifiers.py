"""
Unit Tests: Modifiers

Tests:
    - optional / nullable / nullish distinguish absent from null
    - default values and factories
    - refine predicates (skipped on failure, cross-field paths, raising predicates)
    - Immutability of schemas under modification
"""
import pytest

from schemata.core.errors import SchemaDefinitionError
from schemata.core.validation import (
    MISSING,
    DefaultSchema,
    IssueCode,
    NullableSchema,
    OptionalSchema,
    array,
    nullable,
    nullish,
    number,
    object_,
    optional,
    string,
    unknown,
)

from .conftest import codes, paths


class TestAbsentVersusNull:
    """Absent and null are different inputs."""

    def test_optional_accepts_absent_only(self):
        schema = string().optional()
        assert schema.parse() is MISSING
        assert codes(schema.safe_parse(None)) == ["type_mismatch"]

    def test_nullable_accepts_null_only(self):
        schema = string().nullable()
        assert schema.parse(None) is None
        assert codes(schema.safe_parse()) == ["required"]

    def test_nullish_accepts_both(self):
        schema = string().nullish()
        assert schema.parse(None) is None
        assert schema.is_valid()
        assert schema.parse("x") == "x"

    def test_present_values_still_validated(self):
        assert codes(string().min(3).optional().safe_parse("ab")) == ["too_small"]

    def test_object_fields(self):
        schema = object_(
            bio=string().optional(),
            avatar=string().nullable(),
            nickname=string().nullish(),
        )
        assert schema.parse({"avatar": None}) == {"avatar": None}
        assert schema.parse({"avatar": None, "nickname": None}) == {"avatar": None, "nickname": None}
        result = schema.safe_parse({"bio": None})
        assert paths(result) == ["bio", "avatar"]
        assert codes(result) == ["type_mismatch", "required"]

    def test_function_forms(self):
        assert isinstance(optional(string()), OptionalSchema)
        assert isinstance(nullable(string()), NullableSchema)
        assert nullish(number()).is_valid(None)

    def test_unwrap(self):
        inner = string()
        assert inner.optional().unwrap() is inner
        assert inner.default("x").unwrap() is inner


class TestDefault:

    def test_absent_becomes_default(self):
        schema = object_(theme=string().default("light"))
        assert schema.parse({}) == {"theme": "light"}
        assert schema.parse({"theme": "dark"}) == {"theme": "dark"}

    def test_null_is_not_replaced(self):
        assert codes(string().default("light").safe_parse(None)) == ["type_mismatch"]

    def test_default_is_validated(self):
        assert codes(string().min(10).default("short").safe_parse()) == ["too_small"]

    def test_factory_gives_fresh_values(self):
        schema = array(string()).default(factory=list)
        first, second = schema.parse(), schema.parse()
        assert first == [] and second == []
        assert first is not second

    def test_mutable_default_is_copied_per_parse(self):
        schema = unknown().default([])
        first = schema.parse()
        first.append("x")
        assert schema.parse() == []
        assert schema.parse() is not schema.parse()

    def test_exactly_one_of_value_or_factory(self):
        with pytest.raises(SchemaDefinitionError):
            string().default()
        with pytest.raises(SchemaDefinitionError):
            string().default("x", factory=str)

    def test_is_a_default_schema(self):
        assert isinstance(string().default(""), DefaultSchema)


class TestRefine:

    def test_predicate_runs_on_valid_output(self):
        schema = string().refine(lambda s: s == s.lower(), "Must be lowercase")
        assert schema.parse("abc") == "abc"
        result = schema.safe_parse("ABC")
        assert codes(result) == ["custom"]
        assert result.issues[0].message == "Must be lowercase"

    def test_predicate_skipped_when_inner_fails(self):
        calls = []
        schema = string().min(5).refine(lambda s: calls.append(s) or True)
        result = schema.safe_parse("ab")
        assert codes(result) == ["too_small"]
        assert calls == []

    def test_predicate_skipped_for_absent_optional(self):
        schema = string().optional().refine(lambda s: len(s) > 0)
        assert schema.parse() is MISSING

    def test_cross_field_refinement_path(self):
        schema = object_(
            password=string().min(8),
            confirm_password=string(),
        ).refine(
            lambda v: v["password"] == v["confirm_password"],
            "Passwords do not match",
            path=("confirm_password",),
        )
        assert schema.is_valid({"password": "secret123", "confirm_password": "secret123"})
        result = schema.safe_parse({"password": "secret123", "confirm_password": "other"})
        assert result.flatten() == {"confirm_password": ["Passwords do not match"]}

    def test_root_refinement_lands_in_root_bucket(self):
        schema = object_(a=number(), b=number()).refine(lambda v: v["a"] < v["b"], "a must be below b")
        assert schema.safe_parse({"a": 2, "b": 1}).flatten() == {"$": ["a must be below b"]}

    def test_raising_predicate_becomes_custom_issue(self):
        schema = number().refine(lambda n: 1 / n > 0)
        issue = schema.safe_parse(0).issues[0]
        assert issue.code is IssueCode.CUSTOM
        assert issue.message.startswith("Validation error:")

    def test_refine_needs_callable(self):
        with pytest.raises(SchemaDefinitionError):
            string().refine("not callable")


class TestImmutability:
    """Every modifier returns a new schema; the receiver is unchanged."""

    def test_modifiers_do_not_touch_receiver(self):
        base = string().min(2)
        base.optional()
        base.nullable()
        base.default("xx")
        base.refine(lambda s: False)
        assert base.parse("ab") == "ab"
        assert codes(base.safe_parse()) == ["required"]

    def test_schemas_are_frozen(self):
        schema = string()
        with pytest.raises(AttributeError):
            schema.refinements = ()
