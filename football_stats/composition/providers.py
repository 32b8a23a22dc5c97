from __future__ import annotations

from functools import lru_cache

from ..football_data_api import FootballDataClient
from ..method_cache import MethodCacheService
from ..repositories import HistoryRepository, MethodCacheRepository
from ..services.comparison import ComparisonService
from ..services.history import HistoryService
from ..services.performance import PerformanceService
from ..services.prediction import PredictionService
from ..settings import DATABASE_PATH
from ..ttl_cache import CacheService

# One instance of each per process; hit/miss counters live on these instances.


@lru_cache(maxsize=1)
def football_data_client() -> FootballDataClient:
    return FootballDataClient()


@lru_cache(maxsize=1)
def ttl_cache() -> CacheService:
    return CacheService()


@lru_cache(maxsize=1)
def method_cache() -> MethodCacheService:
    return MethodCacheService(MethodCacheRepository(DATABASE_PATH))


@lru_cache(maxsize=1)
def history_service() -> HistoryService:
    return HistoryService(HistoryRepository(DATABASE_PATH))


@lru_cache(maxsize=1)
def comparison_service() -> ComparisonService:
    return ComparisonService(football_data_client(), ttl_cache())


@lru_cache(maxsize=1)
def prediction_service() -> PredictionService:
    return PredictionService(football_data_client(), ttl_cache(), method_cache(), history_service())


@lru_cache(maxsize=1)
def performance_service() -> PerformanceService:
    return PerformanceService(football_data_client(), ttl_cache(), method_cache(), history_service())


def reset_providers() -> None:
    """Test helper: drop every cached instance."""
    for provider in (
        football_data_client,
        ttl_cache,
        method_cache,
        history_service,
        comparison_service,
        prediction_service,
        performance_service,
    ):
        provider.cache_clear()
