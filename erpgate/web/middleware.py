"""FastAPI middleware: request ID injection and per-category rate limiting."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

if TYPE_CHECKING:
    from starlette.requests import Request
    from starlette.responses import Response

logger = structlog.get_logger(__name__)


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Adds a unique X-Request-ID header to every response."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        structlog.contextvars.bind_contextvars(request_id=request_id)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")
        response.headers["x-request-id"] = request_id
        return response


@dataclass(frozen=True, slots=True)
class RateLimit:
    max_requests: int
    window_seconds: int


DEFAULT_LIMITS: dict[str, RateLimit] = {
    "auth": RateLimit(max_requests=10, window_seconds=15 * 60),
    "api": RateLimit(max_requests=100, window_seconds=60),
    "global": RateLimit(max_requests=300, window_seconds=60),
}


def client_ip(request: Request, trust_forwarded_for: bool = False) -> str:
    """Address of the caller.

    X-Forwarded-For is client-controlled unless a trusted proxy sits in front.
    With ``trust_forwarded_for`` the right-most entry, the one appended by that
    proxy, is used.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("x-forwarded-for", "")
        hops = [hop.strip() for hop in forwarded.split(",") if hop.strip()]
        if hops:
            return hops[-1]
    return request.client.host if request.client else "unknown"


def target_path(request: Request) -> str:
    """Path the end user asked for; forward-auth calls carry it in X-Forwarded-Uri."""
    return request.headers.get("x-forwarded-uri") or request.url.path


def rate_limit_category(path: str) -> str:
    if path.startswith("/auth") or path.startswith("/sign-in") or path.startswith("/sign-up"):
        return "auth"
    if path.startswith("/api"):
        return "api"
    return "global"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """In-memory sliding-window rate limiter keyed by client IP and category.

    Sign-in, API and page traffic are counted in separate buckets. The path is
    taken from X-Forwarded-Uri when the request is a forward-auth check.
    """

    def __init__(
        self,
        app: object,
        limits: dict[str, RateLimit] | None = None,
        exempt_paths: tuple[str, ...] = ("/api/health",),
        trust_forwarded_for: bool = False,
        sweep_interval: float = 60.0,
    ) -> None:
        super().__init__(app)  # type: ignore[arg-type]
        self._limits = limits or DEFAULT_LIMITS
        self._exempt = exempt_paths
        self._trust_forwarded_for = trust_forwarded_for
        self._sweep_interval = sweep_interval
        self._last_sweep = time.monotonic()
        self._hits: dict[tuple[str, str], list[float]] = {}

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exempt:
            return await call_next(request)

        path = target_path(request)
        category = rate_limit_category(path)
        limit = self._limits.get(category)
        if limit is None:
            return await call_next(request)

        ip = client_ip(request, self._trust_forwarded_for)
        key = (ip, category)
        now = time.monotonic()
        if now - self._last_sweep >= self._sweep_interval:
            self._sweep(now)

        hits = [t for t in self._hits.get(key, ()) if now - t < limit.window_seconds]

        if len(hits) >= limit.max_requests:
            self._hits[key] = hits
            logger.warning("rate_limit_exceeded", ip=ip, path=path, category=category)
            return JSONResponse(
                {"detail": "Rate limit exceeded. Try again later."},
                status_code=429,
                headers={
                    "Retry-After": str(limit.window_seconds),
                    "X-RateLimit-Limit": str(limit.max_requests),
                },
            )

        hits.append(now)
        self._hits[key] = hits
        return await call_next(request)

    def _sweep(self, now: float) -> None:
        """Drop buckets with no hits left inside their window."""
        self._last_sweep = now
        for key in list(self._hits):
            limit = self._limits.get(key[1])
            window = limit.window_seconds if limit else 0
            recent = [t for t in self._hits[key] if now - t < window]
            if recent:
                self._hits[key] = recent
            else:
                del self._hits[key]
