"""Role capability table.

Every role fact used by the access checks (tier, admin sub-role, numeric
standing) is read from ``ROLE_CAPABILITIES``. Adding a role means adding one
row here and one ``Role`` member.
"""

from __future__ import annotations

from dataclasses import dataclass

from erpgate.types import Role, Tier


@dataclass(frozen=True, slots=True)
class RoleCapability:
    tier: Tier
    is_admin: bool
    level: int


ROLE_CAPABILITIES: dict[Role, RoleCapability] = {
    Role.SUPER_ADMIN: RoleCapability(tier=Tier.COMPANY, is_admin=True, level=100),
    Role.COMPANY_ADMIN: RoleCapability(tier=Tier.COMPANY, is_admin=True, level=80),
    Role.BRAND_ADMIN: RoleCapability(tier=Tier.BRAND, is_admin=True, level=60),
    Role.BRAND_STAFF: RoleCapability(tier=Tier.BRAND, is_admin=False, level=40),
    Role.STORE_MANAGER: RoleCapability(tier=Tier.STORE, is_admin=True, level=30),
    Role.STORE_STAFF: RoleCapability(tier=Tier.STORE, is_admin=False, level=10),
}

# Higher rank reaches every tier of equal or lower rank
TIER_RANK: dict[Tier, int] = {
    Tier.COMPANY: 3,
    Tier.BRAND: 2,
    Tier.STORE: 1,
}


def coerce_role(value: Role | str | None) -> Role | None:
    """Return the ``Role`` for a raw claim value, or None if unrecognised."""
    if value is None:
        return None
    try:
        return Role(value)
    except ValueError:
        return None


def is_valid_role(value: object) -> bool:
    return isinstance(value, str) and coerce_role(value) is not None


def capability_of(role: Role | str | None) -> RoleCapability | None:
    resolved = coerce_role(role)
    if resolved is None:
        return None
    return ROLE_CAPABILITIES[resolved]


def tier_of(role: Role | str | None) -> Tier | None:
    capability = capability_of(role)
    return capability.tier if capability else None


def roles_in_tier(tier: Tier) -> frozenset[Role]:
    return frozenset(r for r, cap in ROLE_CAPABILITIES.items() if cap.tier == tier)


def is_admin_subrole(role: Role | str | None) -> bool:
    capability = capability_of(role)
    return bool(capability and capability.is_admin)


def is_admin_level(role: Role | str | None) -> bool:
    """Admin sub-role at brand tier or above (manages brands or the company)."""
    capability = capability_of(role)
    if capability is None or not capability.is_admin:
        return False
    return TIER_RANK[capability.tier] >= TIER_RANK[Tier.BRAND]


def role_level(role: Role | str | None) -> int:
    capability = capability_of(role)
    return capability.level if capability else 0


def has_minimum_role(role: Role | str | None, minimum: Role | str) -> bool:
    required = capability_of(minimum)
    if required is None:
        return False
    return role_level(role) >= required.level
