"""Win prediction for a team pair, built on the comparison statistics."""
from __future__ import annotations

from typing import Any, Dict, Optional

from ..config import setup_logger
from ..constants import (
    FACTOR_CAP,
    GOAL_DIFF_MULTIPLIER,
    GOAL_DIFF_WEIGHT,
    GOALS_MULTIPLIER,
    GOALS_WEIGHT,
    MIN_PROBABILITY,
    POINTS_MULTIPLIER,
    POINTS_WEIGHT,
    POSITION_PENALTY,
    POSITION_WEIGHT,
    WIN_RATE_PER_WIN,
    WIN_RATE_WEIGHT,
)
from ..domain.contracts import TeamComparisonStats
from ..method_cache import MethodCacheService
from ..ports.football_data import FootballDataPort
from ..ttl_cache import CacheService
from .comparison import TeamStatsBuilder
from .history import HistoryService

logger = setup_logger(__name__)


def calculate_probability(stats: TeamComparisonStats) -> float:
    """Weighted 0-100 strength score; never below MIN_PROBABILITY."""

    win_rate = stats.won_games * WIN_RATE_PER_WIN
    goal_score = min(stats.goals_scored * GOALS_MULTIPLIER, FACTOR_CAP)
    points_score = min(stats.total_points * POINTS_MULTIPLIER, FACTOR_CAP)
    position_score = max(0.0, FACTOR_CAP - stats.avg_position * POSITION_PENALTY)
    goal_diff_score = min(max(stats.goal_difference * GOAL_DIFF_MULTIPLIER, 0.0), FACTOR_CAP)

    probability = (
        win_rate * WIN_RATE_WEIGHT
        + goal_score * GOALS_WEIGHT
        + points_score * POINTS_WEIGHT
        + position_score * POSITION_WEIGHT
        + goal_diff_score * GOAL_DIFF_WEIGHT
    )
    return max(probability, MIN_PROBABILITY)


def build_prediction(stats1: TeamComparisonStats, stats2: TeamComparisonStats) -> Dict[str, Any]:
    prob1 = calculate_probability(stats1)
    prob2 = calculate_probability(stats2)

    total = prob1 + prob2
    prob1 = prob1 / total * 100
    prob2 = prob2 / total * 100

    winner = stats1.name if prob1 > prob2 else stats2.name
    winner_prob = max(prob1, prob2)

    response: Dict[str, Any] = {}
    response[f"probability_{stats1.name}"] = f"{prob1:.2f}%"
    response[f"probability_{stats2.name}"] = f"{prob2:.2f}%"
    response["prediction"] = f"{winner} with {winner_prob:.2f}%"
    return response


class PredictionService:
    def __init__(
        self,
        client: FootballDataPort,
        cache: CacheService,
        method_cache: MethodCacheService,
        history: HistoryService,
    ) -> None:
        self.client = client
        self.cache = cache
        self.method_cache = method_cache
        self.history = history
        self.builder = TeamStatsBuilder(client)

    def predict_winner(self, team1_id: str, team2_id: str, user_id: int) -> Dict[str, Any]:
        signature = self.method_cache.generate_signature("predict_winner", team1_id, team2_id)

        cached: Optional[Dict[str, Any]] = self.method_cache.get_cached_result(signature)
        if cached is not None:
            logger.info("Method cache HIT for prediction %s vs %s", team1_id, team2_id)
            self.history.record_prediction(user_id, cached)
            return cached

        cached = self.cache.get_prediction(team1_id, team2_id)
        if cached is not None:
            logger.info("Memory cache HIT for prediction %s vs %s", team1_id, team2_id)
            self.method_cache.cache_result(signature, cached)
            self.history.record_prediction(user_id, cached)
            return cached

        stats1 = self.builder.build(team1_id)
        stats2 = self.builder.build(team2_id)
        prediction = build_prediction(stats1, stats2)

        self.cache.cache_prediction(team1_id, team2_id, prediction)
        self.method_cache.cache_result(signature, prediction)
        self.history.record_prediction(user_id, prediction)
        return prediction
