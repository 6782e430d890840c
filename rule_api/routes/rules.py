"""
Rule validation endpoints.

POST /validate-rule decodes the body, hands it to the engine untouched, and
translates the outcome into the {message, status, data} envelope:
- completed without error -> 200
- completed with error    -> 400 (the comparison failed)
- early abort             -> 400 (the request was defective)
"""
from fastapi import APIRouter, Request
from datetime import datetime
import json
import logging
import uuid
from typing import Any, Optional

from ..schemas import RuleValidationResponse, RuleValidationResult, AuthorProfile
from ..settings import settings

from domain_kits.rule_validation.engine import evaluate, INVALID_PAYLOAD_MESSAGE
from domain_kits.rule_validation.outcomes import Completed
from domain_kits.rule_validation.error_taxonomy import AbortTaxonomy

router = APIRouter(tags=["rules"])

# Audit logger (configured in main.py)
audit_logger = logging.getLogger("audit")


class FailedValidation(Exception):
    """Raised by handlers; main.py turns it into an error envelope."""

    def __init__(self, message: str, data: Any = None, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.data = data
        self.status_code = status_code

    def to_response(self) -> RuleValidationResponse:
        return RuleValidationResponse(message=self.message, status="error", data=self.data)


def _log_validation(
    request_id: str,
    outcome_type: str,
    status_code: int,
    field: Optional[str] = None,
    condition: Optional[str] = None,
):
    """Log one evaluation to the audit trail. Never logs data or condition_value."""
    log_entry = {
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "request_id": request_id,
        "endpoint": "/validate-rule",
        "http_method": "POST",
        "http_status": status_code,
        "result": outcome_type,
        "field": field,
        "condition": condition,
    }
    if outcome_type != "completed":
        log_entry["severity"] = AbortTaxonomy.severity_level(outcome_type)

    audit_logger.info(json.dumps(log_entry))


@router.get("/", response_model=RuleValidationResponse)
def index() -> RuleValidationResponse:
    return RuleValidationResponse(
        message="My Rule-Validation API",
        status="success",
        data=AuthorProfile(**settings.author_profile()).model_dump(),
    )


def _reject_constant(name: str):
    # NaN / Infinity / -Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


@router.post("/validate-rule", response_model=RuleValidationResponse)
async def validate_rule(request: Request) -> RuleValidationResponse:
    """
    Evaluate a single rule against the submitted data.

    The body is read raw so that shape defects (missing rule, wrong types,
    unknown condition) are reported by the engine, not by FastAPI.
    """
    # Same id the trace middleware returns in X-Request-ID
    request_id = getattr(request.state, "trace_id", None) or request.headers.get("X-Request-ID") or str(uuid.uuid4())

    raw = await request.body()
    try:
        payload = json.loads(raw, parse_constant=_reject_constant)
    except ValueError:
        _log_validation(request_id, "invalid_schema", 400)
        raise FailedValidation(INVALID_PAYLOAD_MESSAGE)

    outcome = evaluate(payload)

    if not isinstance(outcome, Completed):
        status_code = 400 if AbortTaxonomy.is_client_defect(outcome.type) else 500
        _log_validation(request_id, outcome.type, status_code)
        raise FailedValidation(outcome.value, status_code=status_code)

    result = outcome.value
    if result.error:
        _log_validation(request_id, outcome.type, 400, result.field, result.condition)
        raise FailedValidation(f"field {result.field} failed validation.", data=RuleValidationResult(**result.to_dict()).model_dump())

    _log_validation(request_id, outcome.type, 200, result.field, result.condition)
    return RuleValidationResponse(
        message=f"field {result.field} successfully validated.",
        status="success",
        data=RuleValidationResult(**result.to_dict()).model_dump(),
    )
