from __future__ import annotations

from typing import Any, List, Optional, Tuple, Union
import re

from .conditions import CONDITIONS, describe_conditions
from .outcomes import (
    INVALID_SCHEMA,
    MISSING_DATA_FIELD,
    MISSING_REQUIRED_FIELD,
    TYPE_ERROR,
    Completed,
    CompletedValue,
    EarlyAbort,
    Rule,
    ValidatedRequest,
    ValidationOutcome,
)


INVALID_PAYLOAD_MESSAGE = "Invalid JSON payload passed."

_RULE_KEYS = ("field", "condition", "condition_value")
_REQUEST_KEYS = ("rule", "data")

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _split_path(path: str) -> List[str]:
    return [p for p in (path or "").split(".") if p.strip()]


def parse_index(field: str) -> Optional[int]:
    """Best-effort base-10 parse: leading digits win, ``"5abc"`` -> 5.

    Returns None when ``field`` does not start with an integer.
    """
    match = _LEADING_INT.match(field or "")
    if not match:
        return None
    return int(match.group(1))


def _index_into(container: Union[list, str], index: Optional[int]) -> Tuple[bool, Any]:
    if index is None or index < 0 or index >= len(container):
        return False, None
    return True, container[index]


def _get_path_value(obj: Any, path: str) -> Tuple[bool, Any]:
    """Return (found, value) for a dotted path.

    Objects are walked by key. Lists and strings met along the way accept a
    numeric segment as a position. A present ``None`` counts as found.
    """
    cur = obj
    for key in _split_path(path):
        if isinstance(cur, dict):
            if key not in cur:
                return False, None
            cur = cur[key]
        elif isinstance(cur, (list, str)):
            if not key.isdecimal():
                return False, None
            found, cur = _index_into(cur, int(key))
            if not found:
                return False, None
        else:
            return False, None
    return True, cur


def resolve_field(data: Any, field: str) -> Tuple[bool, Any]:
    """Locate ``field`` inside ``data``.

    Objects take a dotted path; arrays and strings take a numeric index.
    """
    if isinstance(data, dict):
        return _get_path_value(data, field)
    if isinstance(data, (list, str)):
        return _index_into(data, parse_index(field))
    return False, None


def _is_data(value: Any) -> bool:
    return isinstance(value, (dict, list, str))


def _abort(reason: str, message: str) -> EarlyAbort:
    return EarlyAbort(type=reason, value=message)


def _check_rule(rule: Any) -> Optional[EarlyAbort]:
    if not isinstance(rule, dict):
        return _abort(TYPE_ERROR, "rule should be an object.")

    if "field" not in rule:
        return _abort(MISSING_REQUIRED_FIELD, "rule.field is required")
    if not isinstance(rule["field"], str):
        return _abort(TYPE_ERROR, "rule.field should be a string")
    if rule["field"] == "":
        return _abort(TYPE_ERROR, "\"rule.field\" is not allowed to be empty")

    if "condition" not in rule:
        return _abort(MISSING_REQUIRED_FIELD, "rule.condition is required")
    condition = rule["condition"]
    if not isinstance(condition, str) or condition not in CONDITIONS:
        return _abort(TYPE_ERROR, f"rule.condition must be one of {describe_conditions()}")

    if "condition_value" not in rule:
        return _abort(MISSING_REQUIRED_FIELD, "rule.condition_value is required")

    for key in rule:
        if key not in _RULE_KEYS:
            return _abort(TYPE_ERROR, f"\"rule.{key}\" is not allowed")
    return None


def parse_request(raw: Any) -> Union[ValidatedRequest, EarlyAbort]:
    """Check the ``{rule, data}`` shape, reporting only the first violation."""
    if not isinstance(raw, dict):
        return _abort(INVALID_SCHEMA, INVALID_PAYLOAD_MESSAGE)

    for key in _REQUEST_KEYS:
        if key not in raw:
            return _abort(MISSING_REQUIRED_FIELD, f"{key} is required.")

    rule_abort = _check_rule(raw["rule"])
    if rule_abort is not None:
        return rule_abort

    if not _is_data(raw["data"]):
        return _abort(TYPE_ERROR, "data should be an array, an object, or a string.")

    for key in raw:
        if key not in _REQUEST_KEYS:
            return _abort(TYPE_ERROR, f"\"{key}\" is not allowed")

    rule = raw["rule"]
    return ValidatedRequest(
        rule=Rule(
            field=rule["field"],
            condition=rule["condition"],
            condition_value=rule["condition_value"],
        ),
        data=raw["data"],
    )


def evaluate(raw: Any) -> ValidationOutcome:
    """Evaluate a ``{rule, data}`` request.

    Input shape (JSON-decoded):

    {
      "rule": {"field": "missions.count", "condition": "gte", "condition_value": 30},
      "data": {"missions": {"count": 45}}
    }

    Returns an EarlyAbort when the request cannot be evaluated, otherwise a
    Completed outcome whose ``error`` flag is True when the comparison fails.
    Never raises for JSON-decoded input.
    """
    parsed = parse_request(raw)
    if isinstance(parsed, EarlyAbort):
        return parsed

    rule = parsed.rule
    data = parsed.data
    predicate = CONDITIONS[rule.condition]

    if isinstance(data, (list, str)):
        # Arrays and strings are compared whole; only contains is positional.
        field_value = data
        index = parse_index(rule.field) if rule.condition == "contains" else None
        satisfied = predicate(field_value, rule.condition_value, index)
    else:
        found, field_value = resolve_field(data, rule.field)
        if not found:
            return _abort(MISSING_DATA_FIELD, f"field {rule.field} is missing from data.")
        satisfied = predicate(field_value, rule.condition_value)

    return Completed(
        value=CompletedValue(
            error=not satisfied,
            field=rule.field,
            field_value=field_value,
            condition=rule.condition,
            condition_value=rule.condition_value,
        )
    )
