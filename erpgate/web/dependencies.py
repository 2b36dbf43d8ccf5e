"""FastAPI dependency wiring: the gate and its ownership collaborator."""

from __future__ import annotations

import asyncio
import inspect

import structlog
from fastapi import Request

from erpgate.access.gate import AccessGate
from erpgate.config.settings import Settings, get_settings
from erpgate.types import StoreOwnershipLookup

logger = structlog.get_logger(__name__)


def with_timeout(lookup: StoreOwnershipLookup, timeout: float) -> StoreOwnershipLookup:
    """Bound an ownership lookup; a timeout surfaces as an error, i.e. a denial."""

    async def bounded(brand_id: str, store_id: str) -> bool:
        result = lookup(brand_id, store_id)
        if inspect.isawaitable(result):
            return await asyncio.wait_for(result, timeout=timeout)
        return result

    return bounded


def create_ownership_lookup(settings: Settings) -> StoreOwnershipLookup | None:
    """Create the ownership lookup selected by OWNERSHIP_BACKEND."""
    if settings.ownership_backend == "memory":
        from erpgate.ownership.memory import InMemoryStoreOwnership

        return InMemoryStoreOwnership(settings.ownership_map)
    if settings.ownership_backend == "rest":
        from erpgate.ownership.rest import RestStoreOwnership

        return RestStoreOwnership(
            base_url=settings.data_api_url or "",
            api_key=settings.data_api_key,
            timeout=settings.ownership_timeout_seconds,
        )
    logger.info("store_ownership_disabled")
    return None


def create_gate(settings: Settings | None = None) -> AccessGate:
    settings = settings or get_settings()
    lookup = create_ownership_lookup(settings)
    if lookup is not None:
        lookup = with_timeout(lookup, settings.ownership_timeout_seconds)
    return AccessGate(ownership=lookup, sign_in_path=settings.sign_in_path)


def get_gate(request: Request) -> AccessGate:
    gate: AccessGate = request.app.state.gate
    return gate
