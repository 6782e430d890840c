"""
Audit logging middleware for the rule validation API.

One JSON line per HTTP request on the ``audit`` logger:
request id, path, method, status, latency, body hash and error code.
Request bodies (rules and data) are hashed, never logged. Client-controlled
strings in the entry (request id, path) are redacted before writing.

Usage:
    app.add_middleware(AuditLoggingMiddleware)
"""

import json
import hashlib
import time
import logging
import re
from uuid import uuid4
from typing import Optional, Dict, Any
from datetime import datetime

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response


# Only the values a client can smuggle into an entry need scrubbing
REDACTIONS = (
    ("EMAIL", re.compile(r"[\w.+-]+@[\w-]+(\.[\w-]+)+")),
    ("BEARER", re.compile(r"bearer\s+[\w.\-~+/]+=*", re.IGNORECASE)),
    ("PHONE", re.compile(r"\+\d[\d\s().-]{7,}\d")),
)

# Entry fields whose value comes from the client
REDACTED_FIELDS = ("request_id", "endpoint")


def redact(text: str) -> str:
    for label, pattern in REDACTIONS:
        text = pattern.sub(f"[REDACTED_{label}]", text)
    return text


def body_digest(body: bytes) -> str:
    """Short SHA-256 of the request body, so identical requests can be matched."""
    if not body:
        return "sha256:empty"
    return "sha256:" + hashlib.sha256(body).hexdigest()[:16]


def error_code_for_status(status_code: int) -> Optional[str]:
    """Map an HTTP status to the audit error code (None for success)."""
    if status_code < 400:
        return None
    if status_code == 404:
        return "NOT_FOUND"
    if status_code == 405:
        return "METHOD_NOT_ALLOWED"
    if status_code >= 500:
        return "SERVER_ERROR"
    return "CLIENT_ERROR"


class AuditLogger:
    """Writes audit entries as JSON, redacting client-supplied values when enabled."""

    def __init__(self, name: str = "audit", enable_redaction: bool = True):
        self.logger = logging.getLogger(name)
        self.enable_redaction = enable_redaction

    def write(
        self,
        request: Request,
        request_id: str,
        http_status: int,
        started: float,
        payload_hash: str,
        error_code: Optional[str],
    ) -> Dict[str, Any]:
        entry = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "request_id": request_id,
            "endpoint": request.url.path,
            "http_method": request.method,
            "http_status": http_status,
            "latency_ms": round((time.perf_counter() - started) * 1000, 3),
            "payload_hash": payload_hash,
            "error_code": error_code,
        }
        if self.enable_redaction:
            for key in REDACTED_FIELDS:
                if isinstance(entry[key], str):
                    entry[key] = redact(entry[key])

        self.logger.info(json.dumps(entry))
        return entry


class AuditLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs every request after it is answered.

    Sits outside the trace middleware, so when the client sends no
    X-Request-ID the id is read back from the response header.
    """

    def __init__(self, app, enable_redaction: bool = True, enable_logging: bool = True):
        super().__init__(app)
        self.audit_logger = AuditLogger(enable_redaction=enable_redaction)
        self.enable_logging = enable_logging

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID")

        # Starlette caches the body, so the route can still read it
        payload_hash = body_digest(await request.body())
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            if self.enable_logging:
                self.audit_logger.write(
                    request, request_id or str(uuid4()), 500, started, payload_hash, "INTERNAL_ERROR"
                )
            raise

        if self.enable_logging:
            self.audit_logger.write(
                request,
                request_id or response.headers.get("X-Request-ID") or str(uuid4()),
                response.status_code,
                started,
                payload_hash,
                error_code_for_status(response.status_code),
            )
        return response
