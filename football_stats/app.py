from datetime import datetime, timezone

from flask import Flask, request

from . import settings
from .app_utils import make_error, make_ok
from .composition import providers
from .config import setup_logger
from .errors import AggregationError, PerformanceDataError, TransportError
from .validators import validate_player_id, validate_team_id, validate_user_id

app = Flask(__name__)

logger = setup_logger(__name__)

USER_ID_HEADER = "X-User-Id"


def _current_user_id() -> int:
    return validate_user_id(request.headers.get(USER_ID_HEADER))


@app.errorhandler(ValueError)
def _handle_validation_error(exc: ValueError):
    return make_error(str(exc), "Invalid request", status_code=400)


@app.errorhandler(TransportError)
def _handle_transport_error(exc: TransportError):
    logger.error("upstream_failure: %s (%s)", exc.message, exc.code)
    return make_error(exc, "Upstream data provider failed", status_code=500)


@app.errorhandler(AggregationError)
def _handle_aggregation_error(exc: AggregationError):
    logger.error("aggregation_failure: %s", exc.message)
    return make_error(exc, "Error computing team statistics", status_code=500)


@app.errorhandler(PerformanceDataError)
def _handle_performance_data_error(exc: PerformanceDataError):
    logger.error("performance_history_failure: %s", exc)
    return make_error(str(exc), "Error saving performance data", status_code=500)


@app.route("/health", methods=["GET"])
def health():
    return make_ok(
        {"ok": True, "ts": datetime.now(timezone.utc).isoformat()},
        "OK",
        status_code=200,
    )


@app.route("/api/compare/<team1_id>/<team2_id>", methods=["GET"])
def compare(team1_id: str, team2_id: str):
    """Side-by-side statistics for two teams."""
    team1_id = validate_team_id(team1_id)
    team2_id = validate_team_id(team2_id)
    comparison = providers.comparison_service().compare_teams(team1_id, team2_id)
    return make_ok(comparison)


@app.route("/api/predict/<team1_id>/<team2_id>", methods=["GET"])
def predict(team1_id: str, team2_id: str):
    user_id = _current_user_id()
    team1_id = validate_team_id(team1_id)
    team2_id = validate_team_id(team2_id)
    prediction = providers.prediction_service().predict_winner(team1_id, team2_id, user_id)
    return make_ok(prediction)


@app.route("/api/performance/<player_id>", methods=["GET"])
def performance(player_id: str):
    user_id = _current_user_id()
    player_id = validate_player_id(player_id)
    result = providers.performance_service().handle_performance(user_id, player_id)
    return make_ok(result)


@app.route("/api/history", methods=["GET"])
def history():
    user_id = _current_user_id()
    return make_ok(providers.history_service().get_history(user_id))


@app.route("/api/cache/stats", methods=["GET"])
def cache_stats():
    """Memory cache entry counts plus durable cache hit/miss statistics."""
    return make_ok(
        {
            "memory": providers.ttl_cache().stats().to_dict(),
            "durable": providers.method_cache().get_statistics().to_dict(),
        }
    )


@app.route("/api/cache/clear", methods=["DELETE"])
def cache_clear():
    providers.ttl_cache().clear_all()
    return make_ok(None, "All caches cleared successfully")


@app.route("/api/cache/clear-expired", methods=["DELETE"])
def cache_clear_expired():
    removed = providers.ttl_cache().clear_expired()
    return make_ok({"removed": removed}, "Expired cache entries cleared")


def run() -> None:
    if settings.CACHE_MAINTENANCE_ENABLED:
        from .scheduler import create_scheduler

        scheduler = create_scheduler(providers.ttl_cache(), providers.method_cache())
        scheduler.start()
        logger.info("cache_maintenance_scheduler: started")
    app.run(host="0.0.0.0", port=5000)


if __name__ == "__main__":
    run()
