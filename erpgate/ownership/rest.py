"""Store ownership lookup against a PostgREST-style data API."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from erpgate.exceptions import OwnershipLookupError

logger = structlog.get_logger(__name__)

_STORES_RESOURCE = "/rest/v1/stores"


class RestStoreOwnership:
    """Asks the data API whether ``stores.brand_id`` matches for a store.

    Raises ``OwnershipLookupError`` when the API cannot answer; the access
    evaluator turns that into a denial.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + _STORES_RESOURCE
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._api_key:
            headers["apikey"] = self._api_key
            headers["Authorization"] = f"Bearer {self._api_key}"
        return headers

    async def __call__(self, brand_id: str, store_id: str) -> bool:
        params = {
            "select": "id",
            "id": f"eq.{store_id}",
            "brand_id": f"eq.{brand_id}",
            "limit": "1",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.get(self._url, params=params, headers=self._headers())
                resp.raise_for_status()
                rows: Any = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning(
                "store_ownership_request_failed",
                brand_id=brand_id,
                store_id=store_id,
                error=str(exc),
            )
            msg = f"ownership lookup failed for store {store_id}"
            raise OwnershipLookupError(msg) from exc

        if not isinstance(rows, list):
            msg = "unexpected ownership response shape"
            raise OwnershipLookupError(msg)
        owned = len(rows) > 0
        logger.debug("store_ownership_checked", brand_id=brand_id, store_id=store_id, owned=owned)
        return owned
