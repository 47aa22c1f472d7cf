"""
Unit Tests: Composite Schemas

Tests:
    - Object fields, paths, unknown-key modes and shape helpers
    - Arrays, non-empty arrays, tuples and records
    - Unions: first full success wins, isolated branch issues
"""
import pytest

from schemata.core.errors import ErrorCode, SchemaDefinitionError
from schemata.core.validation import (
    MISSING,
    IssueCode,
    UnknownKeys,
    array,
    boolean,
    email,
    literal,
    number,
    object_,
    record,
    string,
    tuple_,
    union,
    unknown,
)

from .conftest import codes, paths


class TestObject:
    """Named fields over a mapping input."""

    @pytest.fixture
    def user(self):
        return object_(
            name=string().min(2),
            email=email(),
            age=number().positive().optional(),
        )

    def test_valid_object(self, user):
        data = {"name": "Ada", "email": "ada@example.com", "age": 36}
        assert user.parse(data) == data

    def test_missing_fields_are_required_at_their_path(self, user):
        result = user.safe_parse({})
        assert codes(result) == ["required", "required"]
        assert paths(result) == ["name", "email"]

    def test_absent_optional_field_is_omitted(self, user):
        out = user.parse({"name": "Ada", "email": "ada@example.com"})
        assert "age" not in out

    def test_every_field_is_checked(self, user):
        result = user.safe_parse({"name": "a", "email": "bad", "age": -5})
        assert paths(result) == ["name", "email", "age"]

    @pytest.mark.parametrize("value", [None, [], "x", 3])
    def test_non_mapping_input(self, user, value):
        assert codes(user.safe_parse(value)) == ["type_mismatch"]

    def test_nested_paths(self):
        schema = object_(address=object_(city=string(), zip_code=string().optional()))
        result = schema.safe_parse({"address": {"city": 42}})
        assert result.issues[0].path == ("address", "city")
        assert result.issues[0].field_path == "address.city"

    def test_mapping_shape_and_keyword_fields(self):
        schema = object_({"a": string()}, b=number())
        assert schema.keys() == ("a", "b")
        assert set(schema.shape) == {"a", "b"}

    def test_duplicate_field_names(self):
        with pytest.raises(SchemaDefinitionError) as exc:
            object_({"a": string()}, a=number())
        assert exc.value.code is ErrorCode.E1002_DUPLICATE_FIELD

    def test_field_must_be_a_schema(self):
        with pytest.raises(SchemaDefinitionError):
            object_(a="string")


class TestUnknownKeys:
    """Unknown keys are stripped by default; strict and passthrough on request."""

    def test_strip_is_the_default(self):
        schema = object_(name=string())
        assert schema.unknown_keys is UnknownKeys.STRIP
        assert schema.parse({"name": "x", "extra": 1}) == {"name": "x"}

    def test_strict_reports_every_unknown_key_once(self):
        schema = object_(name=string()).strict()
        result = schema.safe_parse({"name": "x", "a": 1, "b": 2})
        assert codes(result) == ["unrecognized_keys"]
        assert result.issues[0].message == "Unrecognized key(s) in object: 'a', 'b'"
        assert result.issues[0].path == ()

    def test_passthrough_keeps_unknown_keys(self):
        schema = object_(name=string()).passthrough()
        assert schema.parse({"name": "x", "extra": 1}) == {"name": "x", "extra": 1}

    def test_modes_return_new_schemas(self):
        base = object_(name=string())
        assert base.strict().strip().unknown_keys is UnknownKeys.STRIP
        assert base.unknown_keys is UnknownKeys.STRIP

    def test_configured_policy(self, unknown_keys_policy):
        unknown_keys_policy("strict")
        schema = object_(name=string())
        assert schema.unknown_keys is UnknownKeys.STRICT
        assert not schema.is_valid({"name": "x", "extra": 1})

    def test_explicit_mode_wins_over_policy(self, unknown_keys_policy):
        unknown_keys_policy("strict")
        assert object_(name=string(), unknown_keys="passthrough").unknown_keys is UnknownKeys.PASSTHROUGH


class TestShapeHelpers:

    @pytest.fixture
    def base(self):
        return object_(name=string(), email=email(), age=number())

    def test_extend_appends_and_replaces(self, base):
        extended = base.extend(age=number().optional(), role=string())
        assert extended.keys() == ("name", "email", "age", "role")
        assert extended.is_valid({"name": "a", "email": "a@b.co", "role": "x"})

    def test_pick_and_omit(self, base):
        assert base.pick("name").keys() == ("name",)
        assert base.omit("age").keys() == ("name", "email")

    def test_unknown_names(self, base):
        with pytest.raises(SchemaDefinitionError):
            base.pick("nope")
        with pytest.raises(SchemaDefinitionError):
            base.omit("nope")

    def test_partial(self, base):
        assert base.partial().parse({}) == {}
        assert not base.partial().is_valid({"age": "old"})


class TestArray:

    def test_elements_are_checked_with_index_paths(self):
        result = array(number()).safe_parse([1, "two", 3, None])
        assert [i.path for i in result.issues] == [(1,), (3,)]

    def test_tuple_input_is_accepted_and_output_is_a_list(self):
        assert array(number()).parse((1, 2)) == [1, 2]

    def test_size_refinements(self):
        schema = array(string()).min(1).max(2)
        assert schema.is_valid(["a"])
        assert codes(schema.safe_parse([])) == ["too_small"]
        assert codes(schema.safe_parse(["a", "b", "c"])) == ["too_large"]
        assert codes(array(string()).length(2).safe_parse(["a"])) == ["too_small"]

    def test_inverted_size_bounds(self):
        with pytest.raises(SchemaDefinitionError):
            array(string()).min(3).max(1)

    def test_nonempty(self):
        schema = array(number()).nonempty()
        assert schema.parse([1]) == [1]
        result = schema.safe_parse([])
        assert codes(result) == ["too_small"]
        assert result.issues[0].message == "Array must contain at least 1 element(s)"

    def test_nonempty_reports_size_before_elements(self):
        schema = array(number()).nonempty().min(3)
        result = schema.safe_parse(["x"])
        assert codes(result) == ["too_small", "type_mismatch"]
        assert paths(result) == ["$", "[0]"]

    def test_nonempty_rejects_max_zero(self):
        with pytest.raises(SchemaDefinitionError):
            array(number()).nonempty().max(0)

    def test_absent_elements_read_as_none(self):
        assert array(string().optional()).parse(["a", MISSING]) == ["a", None]
        assert array(unknown()).parse([MISSING, 1]) == [None, 1]

    def test_strings_are_not_arrays(self):
        assert codes(array(string()).safe_parse("abc")) == ["type_mismatch"]


class TestTuple:

    def test_positional_items(self):
        schema = tuple_(number(), number())
        assert schema.parse([1.5, 2]) == (1.5, 2)
        result = schema.safe_parse([1, "2"])
        assert [i.path for i in result.issues] == [(1,)]

    def test_absent_item_reads_as_none(self):
        assert tuple_(number(), string().optional()).parse([1, MISSING]) == (1, None)

    @pytest.mark.parametrize("value", [[1], [1, 2, 3]])
    def test_arity_mismatch_is_a_single_issue(self, value):
        result = tuple_(number(), number()).safe_parse(value)
        assert codes(result) == ["type_mismatch"]
        assert result.issues[0].message == f"Expected tuple of 2 item(s), received {len(value)}"


class TestRecord:

    def test_values_checked_with_key_paths(self):
        schema = record(number())
        assert schema.parse({"a": 1, "b": 2}) == {"a": 1, "b": 2}
        result = schema.safe_parse({"a": 1, "b": "x"})
        assert paths(result) == ["b"]

    def test_key_schema(self):
        schema = record(string().min(2), boolean())
        result = schema.safe_parse({"x": True})
        assert codes(result) == ["too_small"]

    def test_record_of_unknown(self):
        assert record(string(), unknown()).parse({"k": [1, {"v": None}]}) == {"k": [1, {"v": None}]}


class TestUnion:

    def test_first_success_wins(self):
        schema = union(string(), number())
        assert schema.parse("a") == "a"
        assert schema.parse(1) == 1

    def test_union_of_literals(self):
        schema = union(literal("email"), literal("phone"), literal("mail"))
        assert schema.parse("phone") == "phone"
        result = schema.safe_parse("fax")
        assert codes(result) == ["invalid_union"]
        assert result.issues[0].message == "Invalid input"
        assert len(result.issues[0].union_errors) == 3

    def test_branch_issues_do_not_leak(self):
        schema = object_(contact=union(email(), number()))
        result = schema.safe_parse({"contact": "nope"})
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.code is IssueCode.INVALID_UNION
        assert issue.path == ("contact",)
        assert [b[0].code for b in issue.union_errors] == [IssueCode.INVALID_FORMAT, IssueCode.TYPE_MISMATCH]
        assert issue.union_errors[0][0].path == ("contact",)

    def test_or_operator_and_method(self):
        schema = string() | number()
        assert schema.or_(boolean()).is_valid(True)
        assert not schema.is_valid(True)

    def test_custom_message(self):
        schema = union([string(), number()], message="Pick one")
        assert schema.safe_parse(None).issues[0].message == "Pick one"

    def test_empty_union(self):
        with pytest.raises(SchemaDefinitionError) as exc:
            union()
        assert exc.value.code is ErrorCode.E1003_EMPTY_CHOICES
