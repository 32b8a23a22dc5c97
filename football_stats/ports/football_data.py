from typing import Any, Dict, List, TypedDict


class TeamRef(TypedDict, total=False):
    id: int
    name: str


class FullTimeScore(TypedDict, total=False):
    home: int
    away: int


class Score(TypedDict, total=False):
    winner: str                # "HOME_TEAM" | "AWAY_TEAM" | "DRAW" | None
    fullTime: FullTimeScore


class Match(TypedDict, total=False):
    id: int
    homeTeam: TeamRef
    awayTeam: TeamRef
    score: Score
    competition: Dict[str, Any]


class MatchList(TypedDict, total=False):
    matches: List[Match]


class CompetitionList(TypedDict, total=False):
    competitions: List[Dict[str, Any]]


class StandingsTable(TypedDict, total=False):
    standings: List[Dict[str, Any]]


class FootballDataPort:
    def get_last_matches_finished(self, team_id: str, limit: int) -> MatchList: ...

    def get_competitions(self) -> CompetitionList: ...

    def get_standings(self, competition_id: str) -> StandingsTable: ...

    def get_top_scorers(self, competition_id: str, limit: int, season: str) -> Dict[str, Any]: ...

    def get_player(self, player_id: str) -> Dict[str, Any]: ...
