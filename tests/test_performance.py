import pytest

from football_stats.errors import PerformanceDataError, TransportError
from football_stats.method_cache import MethodCacheService
from football_stats.repositories import HistoryRepository, MethodCacheRepository
from football_stats.services.history import HistoryService
from football_stats.services.performance import (
    PerformanceService,
    find_player_in_scorers,
    split_by_priority,
)
from football_stats.ttl_cache import CacheService

from football_fakes import FakeClock, FakeFootballData, competitions_doc


def _scorers(*rows):
    """rows: (player_id, name, team, goals, played_matches)."""
    return {
        "scorers": [
            {
                "player": {"id": pid, "name": name},
                "team": {"name": team},
                "goals": goals,
                "playedMatches": played,
            }
            for pid, name, team, goals, played in rows
        ]
    }


@pytest.fixture
def deps(tmp_path):
    clock = FakeClock()
    db_path = tmp_path / "stats.db"
    return {
        "cache": CacheService(ttl_seconds=3600, clock=clock),
        "method_cache": MethodCacheService(MethodCacheRepository(db_path), ttl_seconds=300, clock=clock),
        "history": HistoryService(HistoryRepository(db_path)),
    }


@pytest.fixture
def sleeps():
    return []


def _service(client, deps, sleeps):
    return PerformanceService(
        client, deps["cache"], deps["method_cache"], deps["history"], sleep=sleeps.append
    )


def test_split_by_priority_keeps_upstream_order():
    competitions = competitions_doc((2001, "UEFA Champions League"), (2021, "Premier League"), (2002, "Bundesliga"))["competitions"]

    priority, others = split_by_priority(competitions)

    assert [c["id"] for c in priority] == [2021, 2002]
    assert [c["id"] for c in others] == [2001]


def test_find_player_in_scorers_computes_goals_per_match():
    found = find_player_in_scorers(_scorers((44, "Striker", "Club", 12, 8)), "44")

    assert found == {
        "id": 44,
        "name": "Striker",
        "team": "Club",
        "goals": 12,
        "matches": 8,
        "performance": 1.5,
    }


def test_find_player_defaults_missing_played_matches_to_one():
    doc = {"scorers": [{"player": {"id": 44, "name": "Striker"}, "goals": 3}]}

    found = find_player_in_scorers(doc, "44")

    assert found["matches"] == 1
    assert found["performance"] == 3.0
    assert "team" not in found


def test_find_player_zero_matches_has_zero_performance():
    found = find_player_in_scorers(_scorers((44, "Striker", "Club", 2, 0)), "44")
    assert found["performance"] == 0.0


def test_priority_competition_searched_first(deps, sleeps):
    client = FakeFootballData(
        competitions=competitions_doc((2001, "UEFA Champions League"), (2021, "Premier League")),
        scorers={
            "2021": _scorers((44, "Striker", "Club", 10, 10)),
            "2001": _scorers((44, "Striker", "Club", 4, 2)),
        },
    )

    result = _service(client, deps, sleeps).handle_performance(7, "44")

    assert result["competition"] == "Premier League"
    assert result["performance"] == 1.0
    assert [c[1] for c in client.calls if c[0] == "get_top_scorers"] == ["2021"]
    assert ("get_top_scorers", "2021", 200, "2024") in client.calls
    # one pause after the competitions call, one after the scorers call
    assert sleeps == [6.0, 6.0]


def test_falls_back_to_basic_player_info(deps, sleeps):
    client = FakeFootballData(
        competitions=competitions_doc((2021, "Premier League")),
        scorers={"2021": _scorers((99, "Someone Else", "Club", 10, 10))},
        players={"44": {"id": 44, "name": "Defender", "currentTeam": {"name": "Club FC"}}},
    )

    result = _service(client, deps, sleeps).handle_performance(7, "44")

    assert result == {
        "id": 44,
        "name": "Defender",
        "team": "Club FC",
        "performance": "Player 44 Defender performance is below average top players",
    }


def test_fallback_without_team_or_name(deps, sleeps):
    client = FakeFootballData(players={"44": {"id": 44}})

    result = _service(client, deps, sleeps).handle_performance(7, "44")

    assert result["name"] == "Unknown"
    assert result["team"] == "Unknown"


def test_failed_competition_is_skipped_and_rate_limit_waits(deps, sleeps):
    client = FakeFootballData(
        competitions=competitions_doc((2021, "Premier League"), (2014, "Primera Division")),
        scorers={"2014": _scorers((44, "Striker", "Club", 6, 3))},
    )
    client.errors["get_top_scorers"] = {
        "2021": TransportError("FootballData", "HTTP_429", "slow down", status_code=429)
    }

    result = _service(client, deps, sleeps).handle_performance(7, "44")

    assert result["competition"] == "Primera Division"
    assert sleeps == [6.0, 30.0, 6.0]


def test_cached_result_short_circuits_and_records_history(deps, sleeps):
    cached = {"id": 44, "name": "Striker", "performance": 1.2}
    deps["cache"].cache_performance("44", cached)
    client = FakeFootballData()

    first = _service(client, deps, sleeps).handle_performance(7, "44")
    second = _service(client, deps, sleeps).handle_performance(7, "44")

    assert first == second == cached
    assert client.calls == []
    assert deps["method_cache"].get_cached_result("handle_performance:44") == cached
    assert len(deps["history"].get_history(7)["performance"]) == 2


def test_fresh_result_stored_in_both_tiers(deps, sleeps):
    client = FakeFootballData(
        competitions=competitions_doc((2021, "Premier League")),
        scorers={"2021": _scorers((44, "Striker", "Club", 10, 5))},
    )

    result = _service(client, deps, sleeps).handle_performance(7, "44")

    assert deps["cache"].get_performance("44") == result
    assert deps["method_cache"].get_cached_result("handle_performance:44") == result
    assert deps["history"].get_history(7)["performance"] == [result]


def test_history_failure_raises_performance_data_error(deps, sleeps, monkeypatch):
    def broken_save(row):
        raise RuntimeError("disk full")

    monkeypatch.setattr(deps["history"].repository, "save", broken_save)
    deps["cache"].cache_performance("44", {"id": 44})

    with pytest.raises(PerformanceDataError):
        _service(FakeFootballData(), deps, sleeps).handle_performance(7, "44")
