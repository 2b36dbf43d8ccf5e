"""Health check endpoint logic."""

from __future__ import annotations

import httpx
import structlog

from erpgate.config.settings import get_settings

logger = structlog.get_logger(__name__)

VERSION = "0.1.0"


async def check_health() -> dict[str, object]:
    """Return service health with a data API probe when one is configured."""
    settings = get_settings()
    result: dict[str, object] = {
        "status": "healthy",
        "version": VERSION,
        "auth_mode": settings.auth_mode,
        "ownership_backend": settings.ownership_backend,
    }

    if settings.ownership_backend != "rest" or not settings.data_api_url:
        return result

    result["data_api"] = "connected"
    try:
        async with httpx.AsyncClient(timeout=settings.ownership_timeout_seconds) as client:
            resp = await client.get(settings.data_api_url.rstrip("/") + "/rest/v1/")
            if resp.status_code >= 500:
                result["data_api"] = "unavailable"
                result["status"] = "degraded"
    except httpx.HTTPError as exc:
        logger.warning("health_check_data_api_failed", error=str(exc))
        result["data_api"] = "unavailable"
        result["status"] = "degraded"

    return result
