"""
DomainScope FastAPI application entry point.

Creates and configures the FastAPI app with:
- CORS middleware
- Security headers middleware
- API v1 router
- ``InvalidDomainQuery`` mapped to 400 wherever it is raised
- Health check endpoint listing the registered signal sources
- Startup / shutdown lifecycle hooks
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from domainscope.api.v1.router import router as v1_router
from domainscope.config import get_rdap_routes, get_settings
from domainscope.core.logging import configure_logging, get_logger
from domainscope.core.validation import InvalidDomainQuery
from domainscope.modules.registry import AdapterRegistry

# ── Constants ────────────────────────────────────────────────────────────────

_HEALTH_CHECK_PATH: str = "/health"

_SECURITY_HEADERS: dict[str, str] = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), camera=(), microphone=()",
}


# ── Security Headers Middleware ──────────────────────────────────────────────

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware that injects security-related HTTP response headers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response: Response = await call_next(request)
        for header_name, header_value in _SECURITY_HEADERS.items():
            response.headers[header_name] = header_value
        return response


# ── Application Factory ─────────────────────────────────────────────────────

def create_app() -> FastAPI:
    """Build and return the configured FastAPI application instance.

    Returns:
        A fully configured ``FastAPI`` app ready to serve requests.
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Domain intelligence -- registration, DNS, hosting network, "
            "TLS and website signals aggregated into one report with "
            "correlation alerts."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json",
    )

    # ── Middleware (order matters: outermost first) ───────────────────────

    application.add_middleware(SecurityHeadersMiddleware)

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
        max_age=600,
    )

    # ── Routers ──────────────────────────────────────────────────────────

    application.include_router(v1_router, prefix=settings.API_V1_PREFIX)

    # ── Error Handlers ───────────────────────────────────────────────────

    @application.exception_handler(InvalidDomainQuery)
    async def invalid_domain_handler(
        request: Request, exc: InvalidDomainQuery
    ) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    # ── Health Check ─────────────────────────────────────────────────────

    @application.get(
        _HEALTH_CHECK_PATH,
        tags=["health"],
        summary="Application health check",
        response_class=JSONResponse,
    )
    async def health_check() -> dict[str, Any]:
        """Return the current health status of the application."""
        return {
            "status": "healthy",
            "app": settings.APP_NAME,
            "version": "1.0.0",
            "sources": sorted(AdapterRegistry.get_all()),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ── Lifecycle Events ─────────────────────────────────────────────────

    @application.on_event("startup")
    async def on_startup() -> None:
        """Configure logging and load the RDAP routing table once."""
        configure_logging()
        logger = get_logger(__name__)
        routes = get_rdap_routes()
        logger.info(
            "Application starting: sources=%s, %d RDAP routes",
            ",".join(sorted(AdapterRegistry.get_all())),
            len(routes),
            extra={"action": "startup", "target": settings.APP_NAME},
        )

    @application.on_event("shutdown")
    async def on_shutdown() -> None:
        logger = get_logger(__name__)
        logger.info(
            "Application shutting down",
            extra={"action": "shutdown", "target": settings.APP_NAME},
        )

    return application


# ── Module-Level App Instance ────────────────────────────────────────────────

app: FastAPI = create_app()
