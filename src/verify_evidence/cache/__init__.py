from verify_evidence.cache.evidence import CACHE_STORAGE_KEY, CACHE_TTL, CacheEntry, EvidenceCache
from verify_evidence.cache.store import (
    JsonFileKeyValueStore,
    KeyValueStore,
    MemoryKeyValueStore,
)

__all__ = [
    "CACHE_STORAGE_KEY",
    "CACHE_TTL",
    "CacheEntry",
    "EvidenceCache",
    "JsonFileKeyValueStore",
    "KeyValueStore",
    "MemoryKeyValueStore",
]
