"""
Rule validation engine acceptance tests.

Usage:
    pytest domain_kits/rule_validation/tests
"""

import copy

import pytest

from domain_kits.rule_validation.engine import evaluate, parse_request, parse_index, resolve_field
from domain_kits.rule_validation.outcomes import Completed, EarlyAbort, ValidatedRequest


VALID_RULE = {"field": "length", "condition": "eq", "condition_value": 2}
VALID_DATA = {"length": 2}

CREW = ["The Nauvoo", "The Razorback", "The Roci", "Tycho"]

HOLDEN = {
    "name": "James Holden",
    "crew": "Rocinante",
    "age": 34,
    "position": "Captain",
    "missions": {"count": 45, "successful": 44, "failed": 1},
}


def _abort(request):
    result = evaluate(request)
    assert isinstance(result, EarlyAbort), f"Expected an early abort, got {result!r}"
    return result.type, result.value


# --- request shape ---------------------------------------------------------

@pytest.mark.parametrize(
    "request_body, expected_value",
    [
        ({}, "rule is required."),
        ({"rule": VALID_RULE}, "data is required."),
        ({"data": VALID_DATA}, "rule is required."),
        ({"rule": "", }, "data is required."),
    ],
)
def test_missing_required_request_fields(request_body, expected_value):
    assert _abort(request_body) == ("missing_required_field", expected_value)


@pytest.mark.parametrize("payload", ["'", 1, 2.5, True, None, ["rule", "data"]])
def test_non_object_payload_is_invalid_schema(payload):
    assert _abort(payload) == ("invalid_schema", "Invalid JSON payload passed.")


def test_rule_must_be_object():
    assert _abort({"rule": "", "data": VALID_DATA}) == ("type_error", "rule should be an object.")
    assert _abort({"rule": None, "data": VALID_DATA}) == ("type_error", "rule should be an object.")
    assert _abort({"rule": [VALID_RULE], "data": VALID_DATA}) == ("type_error", "rule should be an object.")


@pytest.mark.parametrize("data", [1, 0.5, True, None])
def test_data_must_be_array_object_or_string(data):
    assert _abort({"rule": VALID_RULE, "data": data}) == (
        "type_error",
        "data should be an array, an object, or a string.",
    )


@pytest.mark.parametrize(
    "rule, expected",
    [
        ({"condition": "eq", "condition_value": 2}, ("missing_required_field", "rule.field is required")),
        ({"field": 3, "condition": "eq", "condition_value": 2}, ("type_error", "rule.field should be a string")),
        ({"field": "", "condition": "eq", "condition_value": 2}, ("type_error", "\"rule.field\" is not allowed to be empty")),
        ({"field": "length", "condition_value": 2}, ("missing_required_field", "rule.condition is required")),
        ({"field": "length", "condition": "eq"}, ("missing_required_field", "rule.condition_value is required")),
        ({**VALID_RULE, "priority": 1}, ("type_error", "\"rule.priority\" is not allowed")),
    ],
)
def test_rule_member_defects(rule, expected):
    assert _abort({"rule": rule, "data": VALID_DATA}) == expected


@pytest.mark.parametrize("condition", ["invalid", "EQ", "lt", "", 5, None])
def test_unknown_condition_lists_valid_set(condition):
    request = {"rule": {"field": "5", "condition": condition, "condition_value": "rocinante"}, "data": CREW}
    assert _abort(request) == (
        "type_error",
        "rule.condition must be one of eq, neq, gt, gte, or contains",
    )


def test_only_first_violation_is_reported():
    """Field defect wins over condition and data defects."""
    request = {"rule": {"field": 1, "condition": "between"}, "data": 1}
    assert _abort(request) == ("type_error", "rule.field should be a string")


def test_unknown_top_level_key_is_rejected():
    request = {"rule": VALID_RULE, "data": VALID_DATA, "extra": True}
    assert _abort(request) == ("type_error", "\"extra\" is not allowed")


def test_null_condition_value_counts_as_present():
    result = evaluate({"rule": {"field": "x", "condition": "eq", "condition_value": None}, "data": {"x": None}})
    assert isinstance(result, Completed)
    assert result.value.error is False


def test_parse_request_returns_typed_request():
    parsed = parse_request({"rule": VALID_RULE, "data": VALID_DATA})
    assert isinstance(parsed, ValidatedRequest)
    assert parsed.rule.field == "length"
    assert parsed.rule.condition == "eq"
    assert parsed.rule.condition_value == 2
    assert parsed.data == VALID_DATA


# --- field resolution ------------------------------------------------------

def test_missing_top_level_field():
    assert _abort({"rule": VALID_RULE, "data": {}}) == (
        "missing_data_field",
        "field length is missing from data.",
    )


def test_missing_nested_field():
    request = {"rule": {**VALID_RULE, "field": "person.age"}, "data": {}}
    assert _abort(request) == ("missing_data_field", "field person.age is missing from data.")


def test_path_through_scalar_is_missing():
    request = {"rule": {**VALID_RULE, "field": "age.years"}, "data": HOLDEN}
    assert _abort(request) == ("missing_data_field", "field age.years is missing from data.")


@pytest.mark.parametrize("path", ["missions.count", ".missions.count", "missions..count", "missions.count.", " .missions.count"])
def test_blank_segments_are_ignored(path):
    assert resolve_field(HOLDEN, path) == (True, 45)


def test_resolver_indexes_lists_and_strings_on_the_way():
    data = {"ships": [{"name": "Rocinante"}], "code": "MCRN"}
    assert resolve_field(data, "ships.0.name") == (True, "Rocinante")
    assert resolve_field(data, "code.1") == (True, "C")
    assert resolve_field(data, "ships.1.name") == (False, None)
    assert resolve_field(data, "ships.first") == (False, None)


def test_resolver_on_arrays_and_strings_uses_numeric_index():
    assert resolve_field(CREW, "2") == (True, "The Roci")
    assert resolve_field(CREW, "7") == (False, None)
    assert resolve_field(CREW, "-1") == (False, None)
    assert resolve_field("damien-marley", "0") == (True, "d")
    assert resolve_field("damien-marley", "first") == (False, None)


def test_present_null_is_found():
    assert resolve_field({"a": {"b": None}}, "a.b") == (True, None)


@pytest.mark.parametrize(
    "field, expected",
    [("5", 5), (" 12", 12), ("-3", -3), ("+4", 4), ("5abc", 5), ("abc", None), ("", None), ("1.9", 1)],
)
def test_parse_index_is_best_effort(field, expected):
    assert parse_index(field) == expected


# --- completed outcomes ----------------------------------------------------

def test_single_top_level_field():
    result = evaluate({"rule": VALID_RULE, "data": VALID_DATA})
    assert result.to_dict() == {
        "type": "completed",
        "value": {
            "error": False,
            "field": "length",
            "field_value": 2,
            "condition": "eq",
            "condition_value": 2,
        },
    }


def test_nested_field():
    request = {"rule": {"field": "missions.count", "condition": "gte", "condition_value": 30}, "data": HOLDEN}
    result = evaluate(request)
    assert result.type == "completed"
    assert result.value.error is False
    assert result.value.field_value == 45


def test_unequal_string_value_compares_whole_string():
    request = {"rule": {"field": "0", "condition": "eq", "condition_value": "a"}, "data": "damien-marley"}
    result = evaluate(request)
    assert result.to_dict()["value"] == {
        "error": True,
        "field": "0",
        "field_value": "damien-marley",
        "condition": "eq",
        "condition_value": "a",
    }


def test_contains_out_of_range_index_completes_with_error():
    request = {"rule": {"field": "5", "condition": "contains", "condition_value": "rocinante"}, "data": CREW}
    result = evaluate(request)
    assert result.type == "completed", "Out-of-range contains on an array must not abort"
    assert result.value.error is True
    assert result.value.field_value == CREW


def test_contains_with_numeric_field_is_positional():
    hit = evaluate({"rule": {"field": "2", "condition": "contains", "condition_value": "The Roci"}, "data": CREW})
    miss = evaluate({"rule": {"field": "1", "condition": "contains", "condition_value": "The Roci"}, "data": CREW})
    assert hit.value.error is False
    assert miss.value.error is True

    char = evaluate({"rule": {"field": "7", "condition": "contains", "condition_value": "m"}, "data": "damien-marley"})
    assert char.value.error is False


def test_contains_without_numeric_field_is_membership():
    member = evaluate({"rule": {"field": "crew", "condition": "contains", "condition_value": "Tycho"}, "data": CREW})
    substring = evaluate({"rule": {"field": "any", "condition": "contains", "condition_value": "marl"}, "data": "damien-marley"})
    assert member.value.error is False
    assert substring.value.error is False


def test_contains_on_resolved_object_field():
    data = {"ship": {"crew": ["Holden", "Naomi", "Amos", "Alex"]}}
    result = evaluate({"rule": {"field": "ship.crew", "condition": "contains", "condition_value": "Amos"}, "data": data})
    assert result.value.error is False


def test_array_data_with_non_numeric_field_compares_whole_array():
    result = evaluate({"rule": {"field": "crew", "condition": "eq", "condition_value": list(CREW)}, "data": CREW})
    assert result.value.error is False


@pytest.mark.parametrize(
    "condition, condition_value, expected_error",
    [
        ("eq", 34, False),
        ("neq", 34, True),
        ("gt", 30, False),
        ("gt", 34, True),
        ("gte", 34, False),
        ("gte", 35, True),
        ("gt", "30", True),
    ],
)
def test_numeric_conditions_on_object_field(condition, condition_value, expected_error):
    result = evaluate({"rule": {"field": "age", "condition": condition, "condition_value": condition_value}, "data": HOLDEN})
    assert result.value.error is expected_error


def test_evaluate_is_idempotent_and_does_not_mutate_input():
    request = {"rule": {"field": "missions.count", "condition": "gte", "condition_value": 30}, "data": HOLDEN}
    snapshot = copy.deepcopy(request)
    first = evaluate(request)
    second = evaluate(request)
    assert first == second
    assert request == snapshot
