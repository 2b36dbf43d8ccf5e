"""Tier resolution for canonical paths and role-to-tier reachability."""

from __future__ import annotations

from erpgate.access.roles import TIER_RANK, capability_of
from erpgate.routing.public import is_public_path
from erpgate.routing.rewrite import split_path
from erpgate.types import EntityType, Role, Tier

_TIER_PREFIXES: tuple[tuple[str, Tier], ...] = (
    ("/company", Tier.COMPANY),
    ("/brand", Tier.BRAND),
    ("/store", Tier.STORE),
)

_ENTITY_ROOTS: dict[str, EntityType] = {
    "brand": EntityType.BRAND,
    "store": EntityType.STORE,
}

# Second segments under /brand and /store that are pages, not entity ids
RESERVED_SEGMENTS = frozenset({"dashboard"})


def resolve_tier(path: str | None) -> Tier | None:
    """Return the organizational tier a canonical path belongs to.

    ``None`` means the path is tier-less (e.g. ``/dashboard``).
    """
    clean, _, _ = split_path(path)
    for prefix, tier in _TIER_PREFIXES:
        if clean.startswith(prefix):
            return tier
    return None


def extract_entity(path: str | None) -> tuple[EntityType, str] | None:
    """Return the brand or store a path addresses, e.g. ``/store/s1/sales``."""
    clean, _, _ = split_path(path)
    segments = clean.strip("/").split("/")
    if len(segments) < 2:
        return None
    entity_type = _ENTITY_ROOTS.get(segments[0])
    entity_id = segments[1]
    if entity_type is None or not entity_id or entity_id in RESERVED_SEGMENTS:
        return None
    return entity_type, entity_id


def can_access_hierarchy(role: Role | str | None, tier: Tier | str | None) -> bool:
    """True when ``role`` may reach routes of ``tier``.

    Company roles reach every tier, brand roles reach brand and store, store
    roles reach store only. Unknown roles and unknown or missing tiers deny.
    """
    capability = capability_of(role)
    if capability is None or tier is None:
        return False
    try:
        target = Tier(tier)
    except ValueError:
        return False
    return TIER_RANK[target] <= TIER_RANK[capability.tier]


def has_path_access(path: str | None, role: Role | str | None) -> bool:
    """Route-level check: public and tier-less paths are open to any role."""
    if is_public_path(path):
        return True
    tier = resolve_tier(path)
    if tier is None:
        return True
    return can_access_hierarchy(role, tier)
