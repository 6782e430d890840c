"""
FastAPI application for the rule validation API.

This is a thin transport wrapper. All evaluation logic lives in
domain_kits/rule_validation and never touches HTTP.

Features enabled:
- Trace ID per request (X-Request-ID, X-Process-Time headers)
- Audit logging (request ID, payload hash, latency, status)
- Request redaction in audit entries (removes PII, secrets)
- Uniform {message, status, data} envelope for every error
"""
from fastapi import FastAPI, status, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uuid
import time
from contextvars import ContextVar

from rule_api.routes import health, rules
from rule_api.routes.rules import FailedValidation
from rule_api.middleware.audit_logging import AuditLoggingMiddleware
from rule_api.settings import settings

# Context var for trace_id (used in logging)
trace_id_ctx: ContextVar[str] = ContextVar('trace_id', default='-')

# Logging filter to inject trace_id into all log records
class TraceIdFilter(logging.Filter):
    def filter(self, record):
        record.trace_id = trace_id_ctx.get()
        return True

# Configure logging (audit logs to stdout)
root_logger = logging.getLogger()
if not root_logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='[%(trace_id)s] %(message)s',
    )

# Add trace_id filter to root logger
for handler in logging.root.handlers:
    if not any(isinstance(f, TraceIdFilter) for f in handler.filters):
        handler.addFilter(TraceIdFilter())

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="Rule Validation API",
    description="Evaluate a single comparison rule against JSON data.",
    version=settings.api_version,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

# Trace ID middleware (sets request.state.trace_id and adds response headers)
@app.middleware("http")
async def add_trace_id_middleware(request: Request, call_next):
    trace_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
    request.state.trace_id = trace_id

    # Set context var for logging
    token = trace_id_ctx.set(trace_id)
    try:
        start = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start

        response.headers["X-Request-ID"] = trace_id
        response.headers["X-Process-Time"] = str(process_time)
        return response
    finally:
        # Reset context var after response
        trace_id_ctx.reset(token)

# Audit log wraps the trace middleware so it sees the final status
if settings.enable_audit_logging:
    app.add_middleware(AuditLoggingMiddleware, enable_redaction=settings.enable_redaction)


# Include routes
app.include_router(health.router)
app.include_router(rules.router)


def _error(status_code: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"message": message, "status": "error", "data": jsonable_encoder(data)},
    )


# FailedValidation handler (failed comparisons and early aborts)
@app.exception_handler(FailedValidation)
async def failed_validation_handler(request: Request, exc: FailedValidation):
    return JSONResponse(
        status_code=exc.status_code,
        content=jsonable_encoder(exc.to_response()),
    )

# HTTPException handler (unknown routes, wrong methods)
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        message = f"Route {request.method} {request.url.path} not found"
    elif isinstance(exc.detail, str):
        message = exc.detail
    else:
        message = str(exc.detail)
    return _error(exc.status_code, message)

# RequestValidationError handler (no route declares a body model, kept for path/query params)
@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(400, "Request validation failed", exc.errors())

# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "An unexpected error occurred.")


def run():
    import uvicorn
    uvicorn.run(
        "rule_api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development"
    )


if __name__ == "__main__":
    run()
