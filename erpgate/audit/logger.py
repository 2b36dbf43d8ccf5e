"""Audit trail for access decisions.

Every decision on a protected route is written as one ``access_decision``
event to the ``erpgate.audit`` logger. Public and infrastructure traffic is not
audited. Details are sanitized (sensitive fields stripped, 10KB max).
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from erpgate.models.domain import AccessDecision, Principal

logger = structlog.get_logger("erpgate.audit")

_SENSITIVE_FIELDS = frozenset(
    {
        "password",
        "secret",
        "token",
        "api_key",
        "apikey",
        "authorization",
        "cookie",
        "session",
    }
)

_MAX_DETAILS_BYTES = 10_240  # 10KB

_ACTIONS: dict[str, str] = {
    "granted": "access_granted",
    "unauthenticated": "unauthorized_access_attempt",
    "invalid_role": "forbidden_access_attempt",
    "insufficient_role": "forbidden_access_attempt",
    "entity_forbidden": "forbidden_access_attempt",
    "forbidden": "forbidden_access_attempt",
    "already_signed_in": "redirect_authenticated_user",
}


def _sanitize_details(details: dict[str, Any]) -> str:
    """Strip sensitive fields and enforce size limit."""
    sanitized = {k: v for k, v in details.items() if k.lower() not in _SENSITIVE_FIELDS}
    encoded = json.dumps(sanitized, default=str)
    if len(encoded) > _MAX_DETAILS_BYTES:
        encoded = encoded[:_MAX_DETAILS_BYTES]
    return encoded


def audit_action(reason: str) -> str | None:
    """Audit action name for a decision reason, or None if not audited."""
    return _ACTIONS.get(reason)


def audit_decision(
    decision: AccessDecision,
    principal: Principal | None,
    *,
    ip_address: str = "",
    user_agent: str = "",
    request_id: str = "",
    details: dict[str, Any] | None = None,
) -> str | None:
    """Log an audit event for ``decision``; returns the action written."""
    action = audit_action(decision.reason)
    if action is None:
        return None

    logger.info(
        "access_decision",
        action=action,
        success=decision.allowed,
        outcome=decision.outcome.value,
        reason=decision.reason,
        resource=decision.canonical_path,
        domain=decision.domain.value,
        redirect_to=decision.location,
        user_id=principal.user_id if principal else None,
        role=principal.role if principal else None,
        ip_address=ip_address,
        user_agent=user_agent,
        request_id=request_id,
        details_json=_sanitize_details(details or {}),
    )
    return action
