"""
Health check endpoint. Minimal, stable, no business logic.
"""
from fastapi import APIRouter
from datetime import datetime
import os
from rule_api.schemas import HealthResponse
from rule_api.settings import settings

router = APIRouter()

# Hosting platforms inject the deployed commit under their own names. Prefer those.
build_commit = (
    os.getenv("RENDER_GIT_COMMIT")
    or os.getenv("SOURCE_COMMIT")
    or settings.build_commit
)

@router.get("/health")
async def health_check() -> HealthResponse:
    """
    Simple health check. Returns service status, version, commit.
    No evaluation, just a heartbeat.
    """
    return HealthResponse(
        status="ok",
        service="rule-validation-api",
        version=settings.api_version,
        commit=build_commit,
        timestamp=datetime.utcnow().isoformat() + "Z"
    )
