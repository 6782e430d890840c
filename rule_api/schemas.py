"""
Pydantic models for responses.
These define the exact contract between client and API.

Request bodies are deliberately not modelled here: /validate-rule accepts any
JSON value and lets the engine report shape defects in its own taxonomy.
"""
from pydantic import BaseModel, Field
from typing import Optional, Any, Literal
from datetime import datetime


class AuthorProfile(BaseModel):
    """Service author details shown on the index route."""
    name: Optional[str] = Field(None, description="Author name")
    github: Optional[str] = Field(None, description="GitHub handle")
    email: Optional[str] = Field(None, description="Contact email")
    mobile: Optional[str] = Field(None, description="Contact phone number")


class RuleValidationResult(BaseModel):
    """Echo of a completed evaluation."""
    error: bool = Field(..., description="True when the comparison was not satisfied")
    field: str = Field(..., description="rule.field as submitted")
    field_value: Any = Field(None, description="Value the rule was compared against")
    condition: str = Field(..., description="One of: eq, neq, gt, gte, contains")
    condition_value: Any = Field(None, description="rule.condition_value as submitted")


class RuleValidationResponse(BaseModel):
    """Envelope used by every endpoint, success or failure."""
    message: str = Field(..., description="Human-readable outcome")
    status: Literal["success", "error"] = Field(..., description="'success' or 'error'")
    data: Any = Field(None, description="Payload; null for early aborts and transport errors")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="'ok' if healthy")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    commit: str = Field(..., description="Git commit hash")
    timestamp: datetime = Field(..., description="Current time (ISO8601)")
