from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

from ..constants import DEFAULT_AVG_POSITION


@dataclass
class TeamComparisonStats:
    """Aggregate of one team's recent form and league standings."""

    id: str = ""
    name: str = ""
    matches_played: int = 0
    won_games: int = 0
    drawn_games: int = 0
    lost_games: int = 0
    goals_scored: int = 0
    goals_conceded: int = 0
    total_points: int = 0
    avg_position: float = float(DEFAULT_AVG_POSITION)
    goal_difference: int = 0
    league_count: int = 0
    competitions: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "matches_played": self.matches_played,
            "won_games": self.won_games,
            "drawn_games": self.drawn_games,
            "lost_games": self.lost_games,
            "goals_scored": self.goals_scored,
            "goals_conceded": self.goals_conceded,
            "total_points": self.total_points,
            "avg_position": self.avg_position,
            "goal_difference": self.goal_difference,
            "league_count": self.league_count,
            "competitions": list(self.competitions),
        }


@dataclass
class StandingsFold:
    """Running sums over every league whose standings resolved for the team."""

    total_points: int = 0
    total_position: int = 0
    total_goal_difference: int = 0
    league_count: int = 0

    def add(self, position: int, points: int, goal_difference: int) -> None:
        self.total_position += position
        self.total_points += points
        self.total_goal_difference += goal_difference
        self.league_count += 1

    @property
    def avg_position(self) -> float:
        if self.league_count > 0:
            return self.total_position / self.league_count
        return float(DEFAULT_AVG_POSITION)


class TeamStanding(TypedDict):
    position: int
    points: int
    goal_difference: int


class ComparisonResult(TypedDict):
    team1: Dict[str, Any]
    team2: Dict[str, Any]


class PlayerPerformance(TypedDict, total=False):
    id: int
    name: str
    team: str
    goals: int
    matches: int
    performance: Any           # goals per match, or a message for the fallback path
    competition: Optional[str]
