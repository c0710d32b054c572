"""TTL-bounded evidence cache keyed by normalized claim text."""

import json
import logging
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

from pydantic import BaseModel, ValidationError

from verify_evidence.cache.store import KeyValueStore
from verify_evidence.data import ScoredArticle
from verify_evidence.query.keywords import normalize_claim_key

logger = logging.getLogger(__name__)

CACHE_STORAGE_KEY = "verify_news_search_cache"
CACHE_TTL = timedelta(hours=24)


class CacheEntry(BaseModel):
    """Ranked results for one claim and when they were stored (epoch ms)."""

    timestamp: int
    results: list[ScoredArticle]


class EvidenceCache:
    """Cache ranked evidence per claim on top of a :class:`KeyValueStore`.

    All entries live in a single JSON document under *storage_key*. Entries
    older than *ttl* are ignored but left in place. Store failures never
    reach the caller: reads become misses and writes become no-ops.

    Args:
        store: Backing key-value store.
        ttl: How long an entry is honored.
        clock: Returns the current time in seconds since the epoch.
        storage_key: Store key holding the cache document.
    """

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl: timedelta = CACHE_TTL,
        clock: Callable[[], float] = time.time,
        storage_key: str = CACHE_STORAGE_KEY,
    ) -> None:
        self._store = store
        self._ttl_ms = int(ttl.total_seconds() * 1000)
        self._clock = clock
        self._storage_key = storage_key

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _load_document(self) -> dict[str, Any]:
        raw = self._store.get_item(self._storage_key)
        if not raw:
            return {}
        document = json.loads(raw)
        if not isinstance(document, dict):
            raise ValueError("cache document is not a JSON object")
        return document

    def get(self, claim: str) -> CacheEntry | None:
        """Return the fresh entry for *claim*, or None on a miss."""
        key = normalize_claim_key(claim)
        if not key:
            return None

        try:
            document = self._load_document()
        except Exception as e:
            logger.warning(f"Cache read failed: {e}")
            return None

        raw_entry = document.get(key)
        if raw_entry is None:
            return None

        try:
            entry = CacheEntry.model_validate(raw_entry)
        except ValidationError:
            logger.warning(f"Ignoring malformed cache entry for: {key[:50]!r}")
            return None

        age_ms = self._now_ms() - entry.timestamp
        if age_ms >= self._ttl_ms:
            logger.debug(f"Cache entry expired for: {key[:50]!r}")
            return None

        logger.info(f"Using cached results for: {key[:50]!r}")
        return entry

    def put(self, claim: str, results: list[ScoredArticle]) -> None:
        """Store *results* for *claim*. Degraded evidence is never stored."""
        key = normalize_claim_key(claim)
        if not key or not results or any(r.is_degraded for r in results):
            return

        entry = CacheEntry(timestamp=self._now_ms(), results=results)
        try:
            try:
                document = self._load_document()
            except ValueError:
                logger.warning("Discarding unreadable cache document")
                document = {}
            document[key] = entry.model_dump(mode="json")
            self._store.set_item(self._storage_key, json.dumps(document))
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")
