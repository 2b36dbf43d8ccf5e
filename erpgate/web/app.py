"""FastAPI application factory."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from erpgate.access.gate import AccessGate
from erpgate.config.logging import setup_logging
from erpgate.config.settings import get_settings
from erpgate.exceptions import ConfigError
from erpgate.web.dependencies import create_gate
from erpgate.web.health import VERSION
from erpgate.web.middleware import RateLimit, RateLimitMiddleware, RequestIDMiddleware
from erpgate.web.routes.authz import router as authz_router

logger = structlog.get_logger(__name__)


def create_app(gate: AccessGate | None = None) -> FastAPI:
    """Create and configure the gate service.

    ``gate`` overrides the one built from settings (tests inject their own
    ownership lookup this way).
    """
    settings = get_settings()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title="erpgate",
        description="Host routing and role-based access decisions for the ERP front end",
        version=VERSION,
    )
    app.state.gate = gate or create_gate(settings)

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        logger.error("config_error", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content={"detail": "Gate misconfigured"})

    # Middleware: last added runs first
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "Authorization", "X-Request-ID"],
    )
    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limits={
                "auth": RateLimit(settings.rate_limit_auth, settings.rate_limit_auth_window),
                "api": RateLimit(settings.rate_limit_api, settings.rate_limit_api_window),
                "global": RateLimit(settings.rate_limit_global, settings.rate_limit_global_window),
            },
            trust_forwarded_for=settings.trust_forwarded_for,
        )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/api/health")
    async def health_check() -> dict[str, object]:
        from erpgate.web.health import check_health

        return await check_health()

    app.include_router(authz_router)

    logger.info("app_created", auth_mode=settings.auth_mode, ownership=settings.ownership_backend)
    return app
