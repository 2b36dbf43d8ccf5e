"""Shared test fixtures."""

from __future__ import annotations

import pytest
from httpx import ASGITransport, AsyncClient

from erpgate.access.gate import AccessGate
from erpgate.config.settings import get_settings
from erpgate.models.domain import OrgBindings, Principal
from erpgate.ownership.memory import InMemoryStoreOwnership
from erpgate.web.app import create_app


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch: pytest.MonkeyPatch):
    """Isolate every test from the process environment and the settings cache."""
    for var in (
        "DEBUG",
        "LOG_LEVEL",
        "AUTH_MODE",
        "CLERK_JWKS_URL",
        "CLERK_ISSUER",
        "SIGN_IN_PATH",
        "OWNERSHIP_BACKEND",
        "OWNERSHIP_MAP",
        "DATA_API_URL",
        "RATE_LIMIT_ENABLED",
        "TRUST_FORWARDED_FOR",
    ):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def ownership() -> InMemoryStoreOwnership:
    return InMemoryStoreOwnership({"brand-1": ["store-1", "store-2"], "brand-2": ["store-9"]})


@pytest.fixture()
def gate(ownership: InMemoryStoreOwnership) -> AccessGate:
    return AccessGate(ownership=ownership)


@pytest.fixture()
def make_principal():
    def _make(
        role: str,
        brand_id: str | None = None,
        store_id: str | None = None,
        company_id: str | None = None,
        user_id: str = "user-1",
    ) -> Principal:
        return Principal(
            user_id=user_id,
            role=role,
            bindings=OrgBindings(company_id=company_id, brand_id=brand_id, store_id=store_id),
        )

    return _make


@pytest.fixture()
def app(gate: AccessGate):
    """Gate service wired to the in-memory ownership map."""
    return create_app(gate=gate)


@pytest.fixture()
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
