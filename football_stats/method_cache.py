"""Durable method-result cache backed by SQLite.

Rows survive process restarts; hit/miss counters do not.
"""
from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import METHOD_CACHE_SECONDS, setup_logger
from .constants import METHOD_CACHE_MINUTES
from .repositories import MethodCacheRepository

logger = setup_logger(__name__)


@dataclass(frozen=True)
class MethodCacheStats:
    hits: int
    misses: int
    valid_entries: int

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total * 100 if total > 0 else 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "valid_entries": self.valid_entries,
            "hit_rate": round(self.hit_rate, 2),
        }


class MethodCacheService:
    def __init__(
        self,
        repository: MethodCacheRepository,
        ttl_seconds: float = METHOD_CACHE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.repository = repository
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._hits = 0
        self._misses = 0
        self._stats_lock = threading.Lock()

    @staticmethod
    def generate_signature(method: str, *params: Any) -> str:
        """``generate_signature("compareTeams", "86", "65") -> "compareTeams:86:65"``."""
        if not params:
            return method
        return ":".join([method, *(str(p) for p in params)])

    def _count(self, hit: bool) -> None:
        with self._stats_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1

    def get_cached_result(self, signature: str) -> Optional[Any]:
        """Return the decoded cached value, or None on miss, expiry or bad payload."""
        row = self.repository.find_valid(signature, self._clock())
        if row is None:
            self._count(hit=False)
            logger.debug("Cache MISS for: %s", signature)
            return None

        try:
            result = json.loads(row.last_result)
        except ValueError as exc:
            self._count(hit=False)
            logger.error("Error deserializing cached result for %s: %s", signature, exc)
            return None

        self._count(hit=True)
        logger.debug("Cache HIT for: %s", signature)
        return result

    def cache_result(self, signature: str, result: Any) -> None:
        try:
            payload = json.dumps(result)
        except (TypeError, ValueError) as exc:
            logger.error("Error serializing result for %s: %s", signature, exc)
            return

        now = self._clock()
        existed = self.repository.find_by_signature(signature) is not None
        self.repository.upsert(signature, payload, now, now + self.ttl_seconds)
        logger.debug("%s cache for: %s", "Updated" if existed else "Created", signature)

    def cleanup_expired_entries(self) -> int:
        deleted = self.repository.delete_expired(self._clock())
        if deleted > 0:
            logger.info("Cleaned up %d expired cache entries", deleted)
        return deleted

    def get_statistics(self) -> MethodCacheStats:
        valid_entries = self.repository.count_valid(self._clock())
        with self._stats_lock:
            return MethodCacheStats(self._hits, self._misses, valid_entries)

    def reset_statistics(self) -> None:
        with self._stats_lock:
            self._hits = 0
            self._misses = 0

    def clear_all_cache(self) -> int:
        count = self.repository.count()
        self.repository.delete_all()
        logger.info("Cleared all %d method cache entries", count)
        return count

    def get_cache_stats(self) -> Dict[str, Any]:
        return {
            "total_entries": self.repository.count(),
            "cache_duration_minutes": METHOD_CACHE_MINUTES,
        }
