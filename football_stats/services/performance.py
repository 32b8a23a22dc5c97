"""Player performance lookup through competition top-scorer tables."""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..config import setup_logger
from ..constants import PRIORITY_COMPETITION_IDS, TOP_SCORERS_LIMIT, UNKNOWN_VALUE
from ..domain.contracts import PlayerPerformance
from ..errors import TransportError
from ..method_cache import MethodCacheService
from ..ports.football_data import FootballDataPort
from ..settings import API_CALL_DELAY_SECONDS, RATE_LIMIT_DELAY_SECONDS, TOP_SCORERS_SEASON
from ..ttl_cache import CacheService
from .history import HistoryService

logger = setup_logger(__name__)


def split_by_priority(
    competitions: List[Dict[str, Any]],
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """Major leagues first, everything else after, each in upstream order."""
    priority: List[Dict[str, Any]] = []
    others: List[Dict[str, Any]] = []
    for competition in competitions:
        if not isinstance(competition, dict):
            continue
        if str(competition.get("id")) in PRIORITY_COMPETITION_IDS:
            priority.append(competition)
        else:
            others.append(competition)
    return priority, others


def find_player_in_scorers(
    scorers_doc: Optional[Dict[str, Any]],
    player_id: str,
) -> Optional[PlayerPerformance]:
    scorers = (scorers_doc or {}).get("scorers")
    if not isinstance(scorers, list):
        return None

    for scorer in scorers:
        if not isinstance(scorer, dict):
            continue
        player = scorer.get("player") or {}
        if str(player.get("id")) != str(player_id):
            continue

        goals = scorer.get("goals") or 0
        matches = scorer.get("playedMatches")
        matches = 1 if matches is None else matches

        result: PlayerPerformance = {
            "id": player.get("id"),
            "name": player.get("name") or UNKNOWN_VALUE,
        }
        team = scorer.get("team")
        if isinstance(team, dict):
            result["team"] = team.get("name") or UNKNOWN_VALUE
        result["goals"] = goals
        result["matches"] = matches
        result["performance"] = goals / matches if matches > 0 else 0.0
        return result
    return None


class PerformanceService:
    def __init__(
        self,
        client: FootballDataPort,
        cache: CacheService,
        method_cache: MethodCacheService,
        history: HistoryService,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.cache = cache
        self.method_cache = method_cache
        self.history = history
        self._sleep = sleep

    def handle_performance(self, user_id: int, player_id: str) -> Dict[str, Any]:
        logger.info("Fetching performance data for user %s", user_id)
        signature = self.method_cache.generate_signature("handle_performance", player_id)

        cached = self.method_cache.get_cached_result(signature)
        if cached is not None:
            logger.info("Method cache HIT for player %s", player_id)
            self.history.record_performance(user_id, cached)
            return cached

        cached = self.cache.get_performance(player_id)
        if cached is not None:
            logger.info("Memory cache HIT for player %s, copying to method cache", player_id)
            self.method_cache.cache_result(signature, cached)
            self.history.record_performance(user_id, cached)
            return cached

        logger.info("Both caches MISS for player %s, searching top scorers", player_id)
        competitions = self._fetch_competitions()
        priority, others = split_by_priority(competitions)

        result = self._search(priority, player_id) or self._search(others, player_id)
        if result is None:
            result = self._basic_player_info(player_id)

        self.cache.cache_performance(player_id, result)
        self.method_cache.cache_result(signature, result)
        self.history.record_performance(user_id, result)
        return result

    def _fetch_competitions(self) -> List[Dict[str, Any]]:
        doc = self.client.get_competitions() or {}
        self._sleep(API_CALL_DELAY_SECONDS)
        competitions = doc.get("competitions")
        return competitions if isinstance(competitions, list) else []

    def _search(self, competitions: List[Dict[str, Any]], player_id: str) -> Optional[Dict[str, Any]]:
        for competition in competitions:
            competition_id = str(competition.get("id"))
            competition_name = competition.get("name") or UNKNOWN_VALUE
            logger.info("Checking competition: %s (ID: %s)", competition_name, competition_id)

            try:
                scorers = self.client.get_top_scorers(
                    competition_id, TOP_SCORERS_LIMIT, TOP_SCORERS_SEASON
                )
            except TransportError as exc:
                logger.warning(
                    "Failed to get scorers for competition %s: %s", competition_name, exc.message
                )
                if exc.status_code == 429:
                    logger.warning("Rate limit hit, waiting %.0f seconds...", RATE_LIMIT_DELAY_SECONDS)
                    self._sleep(RATE_LIMIT_DELAY_SECONDS)
                continue
            self._sleep(API_CALL_DELAY_SECONDS)

            found = find_player_in_scorers(scorers, player_id)
            if found is not None:
                logger.info("Player %s found in competition: %s", player_id, competition_name)
                found["competition"] = competition_name
                return dict(found)
        return None

    def _basic_player_info(self, player_id: str) -> Dict[str, Any]:
        logger.info("Player %s not in any top scorers table, fetching basic info", player_id)
        player = self.client.get_player(player_id) or {}
        name = player.get("name") or UNKNOWN_VALUE

        current_team = player.get("currentTeam")
        team = (current_team or {}).get("name") if isinstance(current_team, dict) else None

        return {
            "id": int(player_id),
            "name": name,
            "team": team or UNKNOWN_VALUE,
            "performance": f"Player {player_id} {name} performance is below average top players",
        }
