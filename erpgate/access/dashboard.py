"""Default landing path per role, with a fallback chain for missing ids."""

from __future__ import annotations

from erpgate.access.roles import tier_of
from erpgate.config.settings import DEFAULT_SIGN_IN_PATH
from erpgate.types import Role, Tier

COMPANY_DASHBOARD = "/company/dashboard"
BRAND_SELECTION_DASHBOARD = "/brand/dashboard"
STORE_SELECTION_DASHBOARD = "/store/dashboard"


def default_dashboard_path(
    role: Role | str | None,
    brand_id: str | None = None,
    store_id: str | None = None,
    *,
    sign_in_path: str = DEFAULT_SIGN_IN_PATH,
) -> str:
    """Return where ``role`` lands after sign-in.

    Store roles without a store fall back to their brand, then to store
    selection. Unrecognised roles are sent to sign-in.
    """
    tier = tier_of(role)
    if tier is None:
        return sign_in_path
    if tier == Tier.COMPANY:
        return COMPANY_DASHBOARD
    if tier == Tier.BRAND:
        return f"/brand/{brand_id}/dashboard" if brand_id else BRAND_SELECTION_DASHBOARD
    if store_id:
        return f"/store/{store_id}/dashboard"
    if brand_id:
        return f"/brand/{brand_id}/dashboard"
    return STORE_SELECTION_DASHBOARD
