"""Per-request access decision: host and path in, allow/redirect/deny out.

The gate runs the full routing pipeline in a fixed order:

1. classify the host and rewrite the path to its canonical route; the
   sign-in and sign-up pages keep their path on every host
2. pass infrastructure paths (assets, API routes) straight through
3. serve public paths, sending signed-in callers on the landing and sign-in
   pages to their dashboard
4. require a principal with a recognised role
5. check the role against the route's tier, then against the brand or store
   the route names

Denied callers are redirected to their own dashboard. When that dashboard is
the very route being denied, the decision is a plain deny.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote

import structlog

from erpgate.access.dashboard import default_dashboard_path
from erpgate.access.entity import has_entity_access, has_entity_access_async
from erpgate.access.hierarchy import can_access_hierarchy, extract_entity, resolve_tier
from erpgate.config.settings import DEFAULT_SIGN_IN_PATH
from erpgate.models.domain import AccessDecision, Principal
from erpgate.routing.domain import classify_domain
from erpgate.routing.public import is_infrastructure_path, is_public_path
from erpgate.routing.rewrite import normalize_path, rewrite_path, split_path
from erpgate.types import DomainType, EntityType, Outcome, Role, StoreOwnershipLookup, Tier

logger = structlog.get_logger(__name__)

_SIGN_UP_PATH = "/sign-up"


@dataclass(frozen=True, slots=True)
class _PendingEntityCheck:
    domain: DomainType
    canonical_path: str
    tier: Tier | None
    role: Role
    principal: Principal
    entity_type: EntityType
    entity_id: str


class AccessGate:
    """Composes the routing and access checks into one decision per request."""

    def __init__(
        self,
        ownership: StoreOwnershipLookup | None = None,
        sign_in_path: str = DEFAULT_SIGN_IN_PATH,
    ) -> None:
        self._ownership = ownership
        self._sign_in_path = sign_in_path

    @property
    def sign_in_path(self) -> str:
        return self._sign_in_path

    def dashboard_for(self, principal: Principal | None) -> str:
        if principal is None:
            return self._sign_in_path
        return default_dashboard_path(
            principal.role,
            principal.bindings.brand_id,
            principal.bindings.store_id,
            sign_in_path=self._sign_in_path,
        )

    def decide(self, host: str | None, path: str | None, principal: Principal | None) -> AccessDecision:
        """Decide with a synchronous ownership lookup (or none)."""
        step = self._route(host, path, principal)
        if isinstance(step, AccessDecision):
            return step
        allowed = has_entity_access(
            step.role,
            step.entity_type,
            step.entity_id,
            step.principal.bindings,
            self._ownership,
        )
        return self._entity_outcome(step, allowed)

    async def decide_async(
        self, host: str | None, path: str | None, principal: Principal | None
    ) -> AccessDecision:
        """Decide, awaiting the ownership lookup when it is asynchronous."""
        step = self._route(host, path, principal)
        if isinstance(step, AccessDecision):
            return step
        allowed = await has_entity_access_async(
            step.role,
            step.entity_type,
            step.entity_id,
            step.principal.bindings,
            self._ownership,
        )
        return self._entity_outcome(step, allowed)

    def _is_entry_page(self, path: str) -> bool:
        pages = (self._sign_in_path, _SIGN_UP_PATH)
        return any(path == page or path.startswith(page + "/") for page in pages)

    def _route(
        self, host: str | None, path: str | None, principal: Principal | None
    ) -> AccessDecision | _PendingEntityCheck:
        domain = classify_domain(host)
        requested, _, _ = split_path(path)
        # sign-in and sign-up are served unprefixed on every host
        entry_page = self._is_entry_page(requested)
        canonical = normalize_path(path) if entry_page else rewrite_path(path, domain)

        if is_infrastructure_path(canonical):
            return self._decision(Outcome.ALLOW, "infrastructure", domain, canonical)

        if entry_page or is_public_path(canonical):
            if principal is not None and principal.role_enum is not None:
                target, _, _ = split_path(canonical)
                if target in ("/", self._sign_in_path, _SIGN_UP_PATH):
                    return self._decision(
                        Outcome.REDIRECT,
                        "already_signed_in",
                        domain,
                        canonical,
                        location=self.dashboard_for(principal),
                    )
            return self._decision(Outcome.ALLOW, "public", domain, canonical)

        tier = resolve_tier(canonical)
        if principal is None:
            location = f"{self._sign_in_path}?redirect_url={quote(requested, safe='/')}"
            return self._decision(
                Outcome.REDIRECT, "unauthenticated", domain, canonical, tier=tier, location=location
            )

        role = principal.role_enum
        if role is None:
            logger.warning("invalid_role", user_id=principal.user_id, role=principal.role)
            return self._decision(
                Outcome.REDIRECT,
                "invalid_role",
                domain,
                canonical,
                tier=tier,
                location=self._sign_in_path,
            )

        if tier is not None and not can_access_hierarchy(role, tier):
            return self._refuse("insufficient_role", domain, canonical, tier, principal)

        entity = extract_entity(canonical) if tier is not None else None
        if entity is None:
            return self._decision(Outcome.ALLOW, "granted", domain, canonical, tier=tier)

        entity_type, entity_id = entity
        return _PendingEntityCheck(
            domain=domain,
            canonical_path=canonical,
            tier=tier,
            role=role,
            principal=principal,
            entity_type=entity_type,
            entity_id=entity_id,
        )

    def _entity_outcome(self, step: _PendingEntityCheck, allowed: bool) -> AccessDecision:
        if allowed:
            return self._decision(
                Outcome.ALLOW,
                "granted",
                step.domain,
                step.canonical_path,
                tier=step.tier,
                entity_type=step.entity_type,
                entity_id=step.entity_id,
            )
        return self._refuse(
            "entity_forbidden",
            step.domain,
            step.canonical_path,
            step.tier,
            step.principal,
            entity_type=step.entity_type,
            entity_id=step.entity_id,
        )

    def _refuse(
        self,
        reason: str,
        domain: DomainType,
        canonical: str,
        tier: Tier | None,
        principal: Principal,
        entity_type: EntityType | None = None,
        entity_id: str | None = None,
    ) -> AccessDecision:
        location = self.dashboard_for(principal)
        target, _, _ = split_path(canonical)
        if location == target:
            return self._decision(
                Outcome.DENY,
                "forbidden",
                domain,
                canonical,
                tier=tier,
                entity_type=entity_type,
                entity_id=entity_id,
            )
        return self._decision(
            Outcome.REDIRECT,
            reason,
            domain,
            canonical,
            tier=tier,
            location=location,
            entity_type=entity_type,
            entity_id=entity_id,
        )

    @staticmethod
    def _decision(
        outcome: Outcome,
        reason: str,
        domain: DomainType,
        canonical: str,
        *,
        tier: Tier | None = None,
        location: str | None = None,
        entity_type: EntityType | None = None,
        entity_id: str | None = None,
    ) -> AccessDecision:
        decision = AccessDecision(
            outcome=outcome,
            reason=reason,
            domain=domain,
            canonical_path=canonical,
            tier=tier,
            location=location,
            entity_type=entity_type,
            entity_id=entity_id,
        )
        logger.debug(
            "access_decided",
            outcome=outcome.value,
            reason=reason,
            domain=domain.value,
            path=canonical,
        )
        return decision
