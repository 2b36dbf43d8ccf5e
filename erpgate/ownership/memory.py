"""In-memory store ownership lookup (static brand -> stores map)."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

import structlog

logger = structlog.get_logger(__name__)


class InMemoryStoreOwnership:
    """Answers "does this store belong to this brand" from a fixed map.

    Used for local development and tests; the REST lookup replaces it when a
    data API is configured.
    """

    def __init__(self, stores_by_brand: Mapping[str, Iterable[str]] | None = None) -> None:
        self._stores: dict[str, set[str]] = defaultdict(set)
        for brand_id, store_ids in (stores_by_brand or {}).items():
            self._stores[brand_id].update(store_ids)

    def __call__(self, brand_id: str, store_id: str) -> bool:
        owned = store_id in self._stores.get(brand_id, ())
        logger.debug("store_ownership_checked", brand_id=brand_id, store_id=store_id, owned=owned)
        return owned

    def add(self, brand_id: str, store_id: str) -> None:
        self._stores[brand_id].add(store_id)

    @property
    def brand_count(self) -> int:
        return len(self._stores)
