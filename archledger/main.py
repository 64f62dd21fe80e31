"""FastAPI application entry point."""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from archledger.api.middleware import RequestLoggingMiddleware, SecurityHeadersMiddleware
from archledger.api.routes import commits, components, decisions, metrics, projects, risks
from archledger.core.config import get_settings
from archledger.core.exceptions import ArchLedgerError
from archledger.core.structured_logging import log_json
from archledger.schemas.errors import ErrorResponse

logger = logging.getLogger(__name__)

settings = get_settings()
docs_enabled = settings.api_docs_enabled
if docs_enabled is None:
    docs_enabled = settings.environment != "production"

app = FastAPI(
    title="ArchLedger API",
    description="Architecture decision ledger and component risk analysis",
    version="1.0.0",
    docs_url="/api/docs" if docs_enabled else None,
    redoc_url="/api/redoc" if docs_enabled else None,
    openapi_url="/api/openapi.json" if docs_enabled else None,
)

# Middleware configuration (order matters - applied in reverse order)
# 1. Request logging (outermost - logs all requests)
app.add_middleware(RequestLoggingMiddleware)

# 2. Security headers
app.add_middleware(SecurityHeadersMiddleware)

# 3. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)


@app.exception_handler(ArchLedgerError)
async def archledger_error_handler(request: Request, exc: ArchLedgerError) -> JSONResponse:
    """Render domain errors as ErrorResponse bodies."""
    log_json(
        logger,
        logging.ERROR if exc.status_code >= 500 else logging.INFO,
        "domain_error",
        error=exc.error,
        message=exc.message,
        method=request.method,
        path=request.url.path,
    )
    body = ErrorResponse(error=exc.error, message=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "ok"}


app.include_router(projects.router, prefix="/api/projects", tags=["projects"])
app.include_router(risks.router, prefix="/api/projects", tags=["risks"])
app.include_router(components.router, prefix="/api/components", tags=["components"])
app.include_router(decisions.router, prefix="/api", tags=["decisions"])
app.include_router(commits.router, prefix="/api/commits", tags=["commits"])
app.include_router(metrics.router, prefix="/api", tags=["metrics"])
