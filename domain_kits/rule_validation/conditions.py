"""
Condition registry

Named binary predicates applied to a resolved field value and the
rule-supplied ``condition_value``. The registry is closed: a new condition
exists only once it is added to ``CONDITIONS``.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional


Predicate = Callable[..., bool]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def strict_equal(value: Any, other: Any) -> bool:
    """JSON-strict equality.

    Booleans never equal numbers (Python would say ``True == 1``), ints and
    floats compare numerically, lists and objects compare element-wise under
    the same rules.
    """
    if isinstance(value, bool) or isinstance(other, bool):
        return isinstance(value, bool) and isinstance(other, bool) and value == other
    if _is_number(value) and _is_number(other):
        return value == other
    if isinstance(value, list) and isinstance(other, list):
        return len(value) == len(other) and all(
            strict_equal(a, b) for a, b in zip(value, other)
        )
    if isinstance(value, dict) and isinstance(other, dict):
        return value.keys() == other.keys() and all(
            strict_equal(value[k], other[k]) for k in value
        )
    if type(value) is not type(other):
        return False
    return value == other


def _comparable(value: Any, other: Any) -> bool:
    if _is_number(value) and _is_number(other):
        return True
    return isinstance(value, str) and isinstance(other, str)


def eq(value: Any, other: Any, index: Optional[int] = None) -> bool:
    return strict_equal(value, other)


def neq(value: Any, other: Any, index: Optional[int] = None) -> bool:
    return not strict_equal(value, other)


def gt(value: Any, other: Any, index: Optional[int] = None) -> bool:
    # Mismatched operand types are unsatisfied, never coerced.
    return _comparable(value, other) and value > other


def gte(value: Any, other: Any, index: Optional[int] = None) -> bool:
    return _comparable(value, other) and value >= other


def contains(value: Any, element: Any, index: Optional[int] = None) -> bool:
    """Positional or membership check on a list or string.

    With an index, compares the item at that position of the container
    itself. Without one, checks list membership or substring presence.
    """
    if not isinstance(value, (list, str)):
        return False
    if index is not None:
        if index < 0 or index >= len(value):
            return False
        return strict_equal(value[index], element)
    if isinstance(value, str):
        return isinstance(element, str) and element in value
    return any(strict_equal(item, element) for item in value)


CONDITIONS: Dict[str, Predicate] = {
    "eq": eq,
    "neq": neq,
    "gt": gt,
    "gte": gte,
    "contains": contains,
}


def condition_names() -> List[str]:
    """Registered condition names, in registration order."""
    return list(CONDITIONS.keys())


def describe_conditions() -> str:
    """Human-readable enumeration, e.g. ``eq, neq, gt, gte, or contains``."""
    names = condition_names()
    if len(names) == 1:
        return names[0]
    return ", ".join(names[:-1]) + ", or " + names[-1]
