"""In-memory TTL cache for prediction/comparison and player performance results."""
from __future__ import annotations

import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from .config import TTL_CACHE_SECONDS, setup_logger
from .constants import (
    COMPARISON_KEY_PREFIX,
    PERFORMANCE_KEY_PREFIX,
    PERFORMANCE_NAMESPACE,
    PREDICTION_KEY_PREFIX,
    PREDICTION_NAMESPACE,
)

logger = setup_logger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    data: Any
    created_at: float
    expires_at: float

    @classmethod
    def create(cls, data: Any, now: float, ttl_seconds: float) -> "CacheEntry":
        return cls(data=data, created_at=now, expires_at=now + ttl_seconds)

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at

    def age_minutes(self, now: float) -> int:
        return int((now - self.created_at) // 60)


@dataclass(frozen=True)
class CacheStats:
    total_predictions: int
    total_performance: int
    active_predictions: int
    active_performance: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total_predictions": self.total_predictions,
            "total_performance": self.total_performance,
            "active_predictions": self.active_predictions,
            "active_performance": self.active_performance,
        }


def pair_key(team1_id: str, team2_id: str, prefix: str = PREDICTION_KEY_PREFIX) -> str:
    """Order-normalized key for a team pair: the numerically smaller id goes first."""

    id1 = int(team1_id)
    id2 = int(team2_id)
    if id1 <= id2:
        return f"{prefix}:{team1_id}:{team2_id}"
    return f"{prefix}:{team2_id}:{team1_id}"


def performance_key(player_id: str) -> str:
    return f"{PERFORMANCE_KEY_PREFIX}:{player_id}"


class _Namespace:
    def __init__(self, name: str) -> None:
        self.name = name
        self.entries: Dict[str, CacheEntry] = {}
        self.lock = threading.Lock()

    def evict_if_same(self, key: str, entry: CacheEntry) -> bool:
        """Remove ``key`` only while it still maps to ``entry``."""
        with self.lock:
            if self.entries.get(key) is entry:
                del self.entries[key]
                return True
            return False


class CacheService:
    """Thread-safe TTL cache with two independent namespaces.

    Expiry is lazy: ``get`` treats an expired entry as a miss and evicts it.
    ``clear_expired`` is a memory-hygiene sweep only. Both evict by entry
    identity, so an entry refreshed by a concurrent ``put`` is never removed.
    """

    def __init__(
        self,
        ttl_seconds: float = TTL_CACHE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._namespaces: Dict[str, _Namespace] = {
            PREDICTION_NAMESPACE: _Namespace(PREDICTION_NAMESPACE),
            PERFORMANCE_NAMESPACE: _Namespace(PERFORMANCE_NAMESPACE),
        }

    def _ns(self, namespace: str) -> _Namespace:
        try:
            return self._namespaces[namespace]
        except KeyError:
            raise ValueError(f"Unknown cache namespace: {namespace}") from None

    # -------- generic operations --------
    def get(self, namespace: str, key: str) -> Optional[Any]:
        ns = self._ns(namespace)
        with ns.lock:
            entry = ns.entries.get(key)

        if entry is None:
            logger.debug("%s cache MISS for key: %s", namespace, key)
            return None

        now = self._clock()
        if entry.is_expired(now):
            logger.debug("%s cache EXPIRED for key: %s", namespace, key)
            ns.evict_if_same(key, entry)
            return None

        logger.info(
            "%s cache HIT for key: %s (age: %d minutes)",
            namespace,
            key,
            entry.age_minutes(now),
        )
        return entry.data

    def put(self, namespace: str, key: str, value: Any) -> None:
        ns = self._ns(namespace)
        entry = CacheEntry.create(value, self._clock(), self.ttl_seconds)
        with ns.lock:
            ns.entries[key] = entry
        logger.info("%s cached for key: %s", namespace, key)

    def clear_expired(self) -> Dict[str, int]:
        """Sweep every namespace; returns removed counts per namespace."""

        removed: Dict[str, int] = {}
        for name, ns in self._namespaces.items():
            with ns.lock:
                snapshot = list(ns.entries.items())
            now = self._clock()
            count = 0
            for key, entry in snapshot:
                if entry.is_expired(now) and ns.evict_if_same(key, entry):
                    count += 1
            removed[name] = count

        if any(removed.values()):
            logger.info(
                "Cleared %d expired prediction(s) and %d expired performance(s)",
                removed.get(PREDICTION_NAMESPACE, 0),
                removed.get(PERFORMANCE_NAMESPACE, 0),
            )
        return removed

    def clear_all(self) -> None:
        for ns in self._namespaces.values():
            with ns.lock:
                ns.entries.clear()
        logger.info("All caches cleared")

    def _counts(self, namespace: str) -> tuple[int, int]:
        ns = self._ns(namespace)
        with ns.lock:
            entries = list(ns.entries.values())
        now = self._clock()
        active = sum(1 for entry in entries if not entry.is_expired(now))
        return len(entries), active

    def stats(self) -> CacheStats:
        total_pred, active_pred = self._counts(PREDICTION_NAMESPACE)
        total_perf, active_perf = self._counts(PERFORMANCE_NAMESPACE)
        return CacheStats(total_pred, total_perf, active_pred, active_perf)

    # -------- prediction / comparison --------
    def get_prediction(self, team1_id: str, team2_id: str) -> Optional[Dict[str, Any]]:
        return self.get(PREDICTION_NAMESPACE, pair_key(team1_id, team2_id))

    def cache_prediction(self, team1_id: str, team2_id: str, prediction: Dict[str, Any]) -> None:
        self.put(PREDICTION_NAMESPACE, pair_key(team1_id, team2_id), prediction)

    def get_comparison(self, team1_id: str, team2_id: str) -> Optional[Dict[str, Any]]:
        return self.get(
            PREDICTION_NAMESPACE, pair_key(team1_id, team2_id, COMPARISON_KEY_PREFIX)
        )

    def cache_comparison(self, team1_id: str, team2_id: str, comparison: Dict[str, Any]) -> None:
        self.put(
            PREDICTION_NAMESPACE,
            pair_key(team1_id, team2_id, COMPARISON_KEY_PREFIX),
            comparison,
        )

    # -------- performance --------
    def get_performance(self, player_id: str) -> Optional[Dict[str, Any]]:
        key = performance_key(player_id)
        cached = self.get(PERFORMANCE_NAMESPACE, key)
        if cached is None:
            return None

        # Hand out an independent document so callers cannot mutate the cached copy
        try:
            return json.loads(json.dumps(cached))
        except (TypeError, ValueError):
            logger.error("Error converting cached performance for key: %s", key, exc_info=True)
            return None

    def cache_performance(self, player_id: str, performance: Dict[str, Any]) -> None:
        key = performance_key(player_id)
        try:
            document = json.loads(json.dumps(performance))
        except (TypeError, ValueError):
            logger.error("Error caching performance data for key: %s", key, exc_info=True)
            return
        self.put(PERFORMANCE_NAMESPACE, key, document)
