"""Access decision API routes (forward-auth and JSON)."""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response
from pydantic import BaseModel

from erpgate.access.gate import AccessGate
from erpgate.audit.logger import audit_decision
from erpgate.config.settings import get_settings
from erpgate.models.domain import AccessDecision, Principal
from erpgate.types import Outcome
from erpgate.web.auth.identity import get_principal, require_principal
from erpgate.web.dependencies import get_gate
from erpgate.web.middleware import client_ip

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/authz", tags=["authz"])

REWRITE_PATH_HEADER = "x-rewrite-path"


class DecideRequest(BaseModel):
    host: str = ""
    path: str = "/"


class DashboardResponse(BaseModel):
    path: str
    role: str


def _audit(request: Request, decision: AccessDecision, principal: Principal | None) -> None:
    audit_decision(
        decision,
        principal,
        ip_address=client_ip(request, get_settings().trust_forwarded_for),
        user_agent=request.headers.get("user-agent", "unknown"),
        request_id=getattr(request.state, "request_id", ""),
    )


def _identity_headers(decision: AccessDecision, principal: Principal | None) -> dict[str, str]:
    headers = {REWRITE_PATH_HEADER: decision.canonical_path}
    if principal is None:
        return headers
    headers["x-user-id"] = principal.user_id
    headers["x-user-role"] = principal.role
    bindings = principal.bindings
    if bindings.company_id:
        headers["x-user-company-id"] = bindings.company_id
    if bindings.brand_id:
        headers["x-user-brand-id"] = bindings.brand_id
    if bindings.store_id:
        headers["x-user-store-id"] = bindings.store_id
    return headers


@router.get("/verify")
async def verify(
    request: Request,
    principal: Principal | None = Depends(get_principal),
    gate: AccessGate = Depends(get_gate),
) -> Response:
    """Forward-auth check for a reverse proxy.

    The proxy passes the original host and URI in X-Forwarded-Host and
    X-Forwarded-Uri. 200 lets the request through (to the path in
    X-Rewrite-Path), 307 sends the browser elsewhere, 403 refuses.
    """
    host = request.headers.get("x-forwarded-host") or request.headers.get("host", "")
    uri = request.headers.get("x-forwarded-uri", "/")

    decision = await gate.decide_async(host, uri, principal)
    _audit(request, decision, principal)

    if decision.outcome == Outcome.ALLOW:
        return Response(status_code=200, headers=_identity_headers(decision, principal))
    if decision.outcome == Outcome.REDIRECT and decision.location:
        return RedirectResponse(url=decision.location, status_code=307)
    return JSONResponse(
        status_code=403,
        content={"detail": "Forbidden", "reason": decision.reason},
    )


@router.post("/decide", response_model=AccessDecision)
async def decide(
    body: DecideRequest,
    request: Request,
    principal: Principal | None = Depends(get_principal),
    gate: AccessGate = Depends(get_gate),
) -> AccessDecision:
    decision = await gate.decide_async(body.host, body.path, principal)
    _audit(request, decision, principal)
    return decision


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    principal: Principal = Depends(require_principal),
    gate: AccessGate = Depends(get_gate),
) -> dict[str, Any]:
    return {"path": gate.dashboard_for(principal), "role": principal.role}
