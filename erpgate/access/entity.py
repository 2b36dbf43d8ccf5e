"""Access checks against one specific brand or store."""

from __future__ import annotations

import inspect

import structlog

from erpgate.access.roles import capability_of
from erpgate.models.domain import OrgBindings
from erpgate.types import EntityType, Role, StoreOwnershipLookup, Tier

logger = structlog.get_logger(__name__)


def _bindings_decision(
    role: Role | str | None,
    entity_type: EntityType | str,
    entity_id: str,
    bindings: OrgBindings,
) -> bool | None:
    """Decide from the role and bindings alone.

    Returns None when the answer depends on whether the store belongs to the
    caller's brand, which only the ownership collaborator can tell.
    """
    capability = capability_of(role)
    if capability is None:
        return False
    if capability.tier == Tier.COMPANY:
        return True
    if not entity_id:
        return False
    try:
        target = EntityType(entity_type)
    except ValueError:
        return False

    if target == EntityType.BRAND:
        return capability.tier == Tier.BRAND and bindings.brand_id == entity_id

    if capability.tier == Tier.STORE:
        return bindings.store_id == entity_id
    if capability.tier == Tier.BRAND and bindings.brand_id:
        return None
    return False


def has_entity_access(
    role: Role | str | None,
    entity_type: EntityType | str,
    entity_id: str,
    bindings: OrgBindings,
    ownership: StoreOwnershipLookup | None = None,
) -> bool:
    """True when ``role`` with ``bindings`` may reach the given brand or store.

    Brand roles reach a store only when ``ownership`` confirms the store belongs
    to their brand. Without a lookup the store is denied. ``ownership`` must be
    synchronous here; use ``has_entity_access_async`` for awaitable lookups.
    """
    decision = _bindings_decision(role, entity_type, entity_id, bindings)
    if decision is not None:
        return decision

    brand_id = bindings.brand_id or ""
    if ownership is None:
        logger.info("store_ownership_unverified", brand_id=brand_id, store_id=entity_id)
        return False

    try:
        result = ownership(brand_id, entity_id)
    except Exception as exc:
        logger.warning(
            "store_ownership_lookup_failed",
            brand_id=brand_id,
            store_id=entity_id,
            error=str(exc),
        )
        return False

    if inspect.isawaitable(result):
        if inspect.iscoroutine(result):
            result.close()
        logger.warning("store_ownership_lookup_is_async", brand_id=brand_id, store_id=entity_id)
        return False
    return result is True


async def has_entity_access_async(
    role: Role | str | None,
    entity_type: EntityType | str,
    entity_id: str,
    bindings: OrgBindings,
    ownership: StoreOwnershipLookup | None = None,
) -> bool:
    """Same decision as ``has_entity_access``; awaits the lookup if it is async.

    The lookup is the only point where a decision may suspend. Callers own the
    timeout around it.
    """
    decision = _bindings_decision(role, entity_type, entity_id, bindings)
    if decision is not None:
        return decision

    brand_id = bindings.brand_id or ""
    if ownership is None:
        logger.info("store_ownership_unverified", brand_id=brand_id, store_id=entity_id)
        return False

    try:
        result = ownership(brand_id, entity_id)
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        logger.warning(
            "store_ownership_lookup_failed",
            brand_id=brand_id,
            store_id=entity_id,
            error=str(exc),
        )
        return False
    return result is True
