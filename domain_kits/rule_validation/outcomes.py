from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Union


INVALID_SCHEMA = "invalid_schema"
TYPE_ERROR = "type_error"
MISSING_REQUIRED_FIELD = "missing_required_field"
MISSING_DATA_FIELD = "missing_data_field"
COMPLETED = "completed"

ABORT_REASONS = (INVALID_SCHEMA, TYPE_ERROR, MISSING_REQUIRED_FIELD, MISSING_DATA_FIELD)


@dataclass(frozen=True)
class Rule:
    field: str
    condition: str
    condition_value: Any


@dataclass(frozen=True)
class ValidatedRequest:
    """A request that passed shape validation."""

    rule: Rule
    data: Any


@dataclass(frozen=True)
class EarlyAbort:
    """Evaluation could not proceed; ``value`` is the human-readable reason."""

    type: str
    value: str

    def __post_init__(self) -> None:
        if self.type not in ABORT_REASONS:
            raise ValueError(f"unknown abort reason: {self.type}")

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value}


@dataclass(frozen=True)
class CompletedValue:
    error: bool
    field: str
    field_value: Any
    condition: str
    condition_value: Any

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "field": self.field,
            "field_value": self.field_value,
            "condition": self.condition,
            "condition_value": self.condition_value,
        }


@dataclass(frozen=True)
class Completed:
    """The comparison ran. ``value.error`` is True when it was not satisfied."""

    value: CompletedValue
    type: str = dataclasses.field(default=COMPLETED, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "value": self.value.to_dict()}


ValidationOutcome = Union[EarlyAbort, Completed]
