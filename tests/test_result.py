"""
Unit Tests: Entry Points and Results

Tests:
    - parse vs safe_parse agree on every input
    - Issues collected in one pass, located by path
    - Flattening into per-field messages
    - ValidationError serialization and AppError bridge
    - Idempotence and concurrent use of one schema
"""
from concurrent.futures import ThreadPoolExecutor

import pytest

from schemata.core.errors import ErrorCode
from schemata.core.validation import (
    Failure,
    Issue,
    IssueCode,
    Success,
    ValidationError,
    array,
    email,
    flatten_issues,
    format_path,
    number,
    object_,
    parse,
    safe_parse,
    string,
)

from .conftest import codes, paths


@pytest.fixture
def user_schema():
    return object_(
        name=string().min(2, "Name must be at least 2 characters"),
        email=email("Invalid email address"),
        age=number().positive("Age must be positive"),
    )


class TestEntryPoints:
    """parse and safe_parse share one engine."""

    def test_success(self, user_schema):
        data = {"name": "John", "email": "john@example.com", "age": 25}
        result = safe_parse(user_schema, data)
        assert isinstance(result, Success)
        assert result.success and result.is_ok()
        assert result.value == data
        assert parse(user_schema, data) == data

    def test_every_issue_in_one_pass(self, user_schema):
        result = user_schema.safe_parse({"name": "a", "email": "bad", "age": -5})
        assert isinstance(result, Failure)
        assert paths(result) == ["name", "email", "age"]
        assert [i.message for i in result.issues] == [
            "Name must be at least 2 characters",
            "Invalid email address",
            "Age must be positive",
        ]

    def test_parse_raises_with_the_same_issues(self, user_schema):
        data = {"name": "a", "email": "bad", "age": -5}
        with pytest.raises(ValidationError) as exc:
            user_schema.parse(data)
        assert exc.value.issues == user_schema.safe_parse(data).issues

    def test_parse_is_idempotent(self, user_schema):
        data = {"name": "John", "email": "john@example.com", "age": 25, "extra": True}
        once = user_schema.parse(data)
        assert user_schema.parse(once) == once

    def test_input_is_not_mutated(self, user_schema):
        data = {"name": "John", "email": "john@example.com", "age": 25, "extra": True}
        user_schema.parse(data)
        assert data["extra"] is True

    def test_result_helpers(self):
        ok, bad = string().safe_parse("x"), string().safe_parse(1)
        assert ok.unwrap() == "x" and ok.unwrap_or("y") == "x"
        assert bad.unwrap_or("y") == "y"
        assert ok.map(str.upper).value == "X"
        assert bad.map(str.upper) is bad
        assert bad.match(lambda v: v, lambda issues: len(issues)) == 1
        with pytest.raises(ValidationError):
            bad.unwrap()

    def test_results_destructure_in_match(self):
        match number().safe_parse(3):
            case Success(value):
                assert value == 3
            case Failure():
                pytest.fail("expected success")


class TestFlatten:

    def test_groups_by_path_in_first_seen_order(self):
        schema = object_(
            password=string().min(8, "Too short").regex(r"\d", "Needs a digit"),
            tags=array(string()),
        )
        result = schema.safe_parse({"password": "abc", "tags": ["ok", 2]})
        assert result.flatten() == {
            "password": ["Too short", "Needs a digit"],
            "tags[1]": ["Expected string, received number"],
        }

    def test_root_bucket_only_when_needed(self):
        assert "$" not in object_(a=string().min(3)).safe_parse({"a": "ab"}).flatten()
        assert string().safe_parse(1).flatten() == {"$": ["Expected string, received number"]}

    def test_flatten_issues_function(self):
        issues = (
            Issue(IssueCode.CUSTOM, "a", ("x", 0, "y")),
            Issue(IssueCode.CUSTOM, "b", ()),
        )
        assert flatten_issues(issues) == {"x[0].y": ["a"], "$": ["b"]}

    @pytest.mark.parametrize("path, expected", [
        ((), "$"),
        (("user", "email"), "user.email"),
        (("addresses", 0, "street"), "addresses[0].street"),
        ((0, "name"), "[0].name"),
    ])
    def test_format_path(self, path, expected):
        assert format_path(path) == expected


class TestValidationError:

    def test_str(self, user_schema):
        single = ValidationError(string().safe_parse(1).issues)
        assert str(single) == "$: Expected string, received number"
        many = user_schema.safe_parse({}).error
        assert str(many) == "Validation failed (3 issues)"

    def test_field_errors_and_lookup(self, user_schema):
        error = user_schema.safe_parse({"name": "a", "email": "x", "age": 1}).error
        assert set(error.field_errors) == {"name", "email"}
        assert error.first_issue.field_path == "name"
        assert [i.code for i in error.get_issues_for_path("email")] == [IssueCode.INVALID_FORMAT]

    def test_to_dict(self, user_schema):
        payload = user_schema.safe_parse({"name": "a"}).error.to_dict()["error"]
        assert payload["type"] == "validation_error"
        assert payload["issue_count"] == 3
        assert payload["issues"][0] == {
            "code": "too_small",
            "path": ["name"],
            "message": "Name must be at least 2 characters",
            "expected": "min_length[2]",
        }
        assert payload["field_errors"]["email"] == ["Invalid email address"]

    def test_to_app_error(self, user_schema):
        single = user_schema.safe_parse({"name": "John", "email": "john@example.com", "age": 0}).error
        app_error = single.to_app_error(origin="signup")
        assert app_error.code is ErrorCode.E2003_OUT_OF_RANGE
        assert app_error.metadata["field"] == "age"
        assert app_error.context.origin == "signup"

        many = user_schema.safe_parse({}).error.to_app_error()
        assert many.code is ErrorCode.E2000_VALIDATION_GENERIC
        assert many.metadata["issue_count"] == 3


class TestConcurrency:
    """One schema shared across threads gives per-call results."""

    def test_parallel_parses(self, user_schema):
        inputs = [
            {"name": f"user{i}", "email": f"u{i}@example.com", "age": i + 1} if i % 2 else {"name": "x", "age": -i}
            for i in range(200)
        ]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(user_schema.safe_parse, inputs))

        for i, result in enumerate(results):
            if i % 2:
                assert result.success and result.value["name"] == f"user{i}"
            else:
                assert codes(result)[:2] == ["too_small", "required"]
