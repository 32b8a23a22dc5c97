"""Shared fakes and document builders for the football-data.org client."""

from collections import Counter


class FakeFootballData:
    def __init__(self, matches=None, competitions=None, standings=None, scorers=None, players=None):
        self.matches = matches or {}
        self.competitions = competitions if competitions is not None else {"competitions": []}
        self.standings = standings or {}
        self.scorers = scorers or {}
        self.players = players or {}
        self.errors = {}
        self.calls = []

    def _record(self, name, *args):
        self.calls.append((name, *args))
        error = self.errors.get(name)
        if isinstance(error, dict):
            error = error.get(args[0])
        if error is not None:
            raise error

    def count(self, name):
        return Counter(call[0] for call in self.calls)[name]

    def get_last_matches_finished(self, team_id, limit):
        self._record("get_last_matches_finished", team_id, limit)
        return self.matches.get(team_id, {"matches": []})

    def get_competitions(self):
        self._record("get_competitions")
        return self.competitions

    def get_standings(self, competition_id):
        self._record("get_standings", competition_id)
        return self.standings.get(competition_id, {"standings": []})

    def get_top_scorers(self, competition_id, limit, season):
        self._record("get_top_scorers", competition_id, limit, season)
        return self.scorers.get(competition_id, {"scorers": []})

    def get_player(self, player_id):
        self._record("get_player", player_id)
        return self.players.get(player_id, {})


def cyclic_matches(team_id, team_name, count=10, home=True, leagues=("Premier League", "UEFA Champions League")):
    """Scores cycle 3-1 (HOME_TEAM), 1-1 (DRAW), 1-3 (AWAY_TEAM) by index mod 3."""
    cycle = [(3, 1, "HOME_TEAM"), (1, 1, "DRAW"), (1, 3, "AWAY_TEAM")]
    matches = []
    for i in range(count):
        home_goals, away_goals, winner = cycle[i % 3]
        me = {"id": int(team_id), "name": team_name}
        other = {"id": 999, "name": "Other Team"}
        matches.append(
            {
                "id": 1000 + i,
                "homeTeam": me if home else other,
                "awayTeam": other if home else me,
                "score": {"winner": winner, "fullTime": {"home": home_goals, "away": away_goals}},
                "competition": {"name": leagues[i % len(leagues)]},
            }
        )
    return {"matches": matches}


def win_loss_matches(team_id, team_name, wins, total=10, league="Premier League"):
    matches = []
    for i in range(total):
        is_win = i < wins
        matches.append(
            {
                "id": 2000 + i,
                "homeTeam": {"id": int(team_id), "name": team_name},
                "awayTeam": {"id": 999, "name": "Other Team"},
                "score": {
                    "winner": "HOME_TEAM" if is_win else "AWAY_TEAM",
                    "fullTime": {"home": 3 if is_win else 1, "away": 1 if is_win else 3},
                },
                "competition": {"name": league},
            }
        )
    return {"matches": matches}


def competitions_doc(*pairs):
    return {"competitions": [{"id": int(cid), "name": name} for cid, name in pairs]}


def standings_doc(*rows):
    """rows: (team_id, team_name, position, points, goal_difference)."""
    table = [
        {
            "team": {"id": int(team_id), "name": name},
            "position": position,
            "points": points,
            "goalDifference": goal_diff,
        }
        for team_id, name, position, points, goal_diff in rows
    ]
    return {"standings": [{"type": "TOTAL", "table": table}]}


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds
