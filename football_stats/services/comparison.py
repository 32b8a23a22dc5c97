"""Team comparison: fold recent matches and league standings into per-team stats."""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..config import setup_logger
from ..constants import RECENT_MATCHES_WINDOW, WINNER_AWAY, WINNER_HOME
from ..domain.contracts import ComparisonResult, StandingsFold, TeamComparisonStats, TeamStanding
from ..errors import AggregationError, TransportError
from ..ports.football_data import FootballDataPort
from ..ttl_cache import CacheService

logger = setup_logger(__name__)


def _as_int(value: Any, default: int = 0) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _id_text(node: Any) -> str:
    if not isinstance(node, dict):
        return ""
    value = node.get("id")
    return "" if value is None else str(value)


def _match_list(matches_doc: Optional[Dict[str, Any]]) -> List[Dict[str, Any]]:
    matches = (matches_doc or {}).get("matches")
    if not isinstance(matches, list):
        return []
    return [m for m in matches if isinstance(m, dict)]


def fold_matches(
    matches_doc: Optional[Dict[str, Any]],
    team_id: str,
    stats: TeamComparisonStats,
) -> TeamComparisonStats:
    """Accumulate results, goals and display name for ``team_id`` into ``stats``.

    Matches where the team is neither side, or without a full-time score, are skipped.
    """
    for match in _match_list(matches_doc):
        score = match.get("score")
        if not isinstance(score, dict):
            continue
        full_time = score.get("fullTime")
        if not isinstance(full_time, dict):
            continue

        home_team = match.get("homeTeam") or {}
        away_team = match.get("awayTeam") or {}
        home_goals = _as_int(full_time.get("home"))
        away_goals = _as_int(full_time.get("away"))
        winner = score.get("winner") or ""

        if _id_text(home_team) == team_id:
            side, scored, conceded, team_node = WINNER_HOME, home_goals, away_goals, home_team
        elif _id_text(away_team) == team_id:
            side, scored, conceded, team_node = WINNER_AWAY, away_goals, home_goals, away_team
        else:
            continue

        name = team_node.get("name") or ""
        if name:
            stats.name = name

        stats.matches_played += 1
        stats.goals_scored += scored
        stats.goals_conceded += conceded
        if winner == side:
            stats.won_games += 1
        elif winner in (WINNER_HOME, WINNER_AWAY):
            stats.lost_games += 1
        else:
            stats.drawn_games += 1

    return stats


def discover_leagues(matches_doc: Optional[Dict[str, Any]]) -> List[str]:
    """Distinct competition names referenced by the matches, in first-seen order."""
    leagues: Dict[str, None] = {}
    for match in _match_list(matches_doc):
        competition = match.get("competition") or {}
        name = competition.get("name") if isinstance(competition, dict) else None
        if name:
            leagues.setdefault(name, None)
    return list(leagues)


def extract_team_standing(
    standings_doc: Optional[Dict[str, Any]],
    team_id: str,
) -> Optional[TeamStanding]:
    """Find ``team_id`` in the first standings table; None when absent."""
    standings = (standings_doc or {}).get("standings")
    if not isinstance(standings, list) or not standings:
        return None
    first = standings[0] if isinstance(standings[0], dict) else {}
    table = first.get("table")
    if not isinstance(table, list):
        return None

    for entry in table:
        if not isinstance(entry, dict):
            continue
        if _id_text(entry.get("team")) == team_id:
            return {
                "position": _as_int(entry.get("position")),
                "points": _as_int(entry.get("points")),
                "goal_difference": _as_int(entry.get("goalDifference")),
            }
    return None


class TeamStatsBuilder:
    """Pulls one team's recent form and standings from the upstream client."""

    def __init__(self, client: FootballDataPort) -> None:
        self.client = client

    def build(self, team_id: str) -> TeamComparisonStats:
        stats = TeamComparisonStats(id=team_id)

        matches_doc = self.client.get_last_matches_finished(team_id, RECENT_MATCHES_WINDOW)
        fold_matches(matches_doc, team_id, stats)

        leagues = discover_leagues(matches_doc)
        stats.competitions = leagues

        fold = self.fold_standings(leagues, team_id)
        stats.total_points = fold.total_points
        stats.avg_position = fold.avg_position
        stats.goal_difference = fold.total_goal_difference
        stats.league_count = fold.league_count
        return stats

    def fold_standings(self, leagues: List[str], team_id: str) -> StandingsFold:
        fold = StandingsFold()
        for league_name in leagues:
            standing = self.resolve_league_standing(league_name, team_id)
            if standing is not None:
                fold.add(standing["position"], standing["points"], standing["goal_difference"])
        return fold

    def resolve_league_standing(self, league_name: str, team_id: str) -> Optional[TeamStanding]:
        try:
            competition_id = self.find_competition_id(league_name)
            if competition_id is None:
                logger.warning("league_unresolved: %s (team %s)", league_name, team_id)
                return None
            standings_doc = self.client.get_standings(competition_id)
        except TransportError as exc:
            raise AggregationError(
                f"Error fetching standings for: {league_name}", league=league_name
            ) from exc

        standing = extract_team_standing(standings_doc, team_id)
        if standing is None:
            logger.warning(
                "team_absent_from_standings: team %s in %s (competition %s)",
                team_id,
                league_name,
                competition_id,
            )
        return standing

    def find_competition_id(self, league_name: str) -> Optional[str]:
        """Exact, case-sensitive name match against the full competitions list."""
        competitions_doc = self.client.get_competitions() or {}
        competitions = competitions_doc.get("competitions")
        if not isinstance(competitions, list):
            return None

        for competition in competitions:
            if isinstance(competition, dict) and competition.get("name") == league_name:
                competition_id = competition.get("id")
                return None if competition_id is None else str(competition_id)
        return None


class ComparisonService:
    def __init__(self, client: FootballDataPort, cache: CacheService) -> None:
        self.client = client
        self.cache = cache
        self.builder = TeamStatsBuilder(client)

    def compare_teams(self, team1_id: str, team2_id: str) -> ComparisonResult:
        cached = self.cache.get_comparison(team1_id, team2_id)
        if cached is not None:
            logger.info("Returning cached comparison for teams %s and %s", team1_id, team2_id)
            return cached

        stats1 = self.builder.build(team1_id)
        stats2 = self.builder.build(team2_id)

        response: ComparisonResult = {
            "team1": stats1.to_dict(),
            "team2": stats2.to_dict(),
        }
        self.cache.cache_comparison(team1_id, team2_id, response)
        return response
