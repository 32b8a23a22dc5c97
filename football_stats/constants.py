"""Centralized constants for the football statistics service."""

# ---- Cache lifetimes ----
TTL_CACHE_MINUTES = 60  # in-memory prediction/comparison and performance cache
METHOD_CACHE_MINUTES = 5  # durable method-result cache

# Cache namespaces
PREDICTION_NAMESPACE = "prediction"
PERFORMANCE_NAMESPACE = "performance"

# Key prefixes inside the namespaces
PREDICTION_KEY_PREFIX = "pred"
COMPARISON_KEY_PREFIX = "cmp"
PERFORMANCE_KEY_PREFIX = "perf"

# ---- Aggregation ----
RECENT_MATCHES_WINDOW = 10  # last N finished matches folded per team
DEFAULT_AVG_POSITION = 20  # used when no league standings resolve

WINNER_HOME = "HOME_TEAM"
WINNER_AWAY = "AWAY_TEAM"

# ---- Win probability weights ----
WIN_RATE_WEIGHT = 0.30
GOALS_WEIGHT = 0.20
POINTS_WEIGHT = 0.25
POSITION_WEIGHT = 0.15
GOAL_DIFF_WEIGHT = 0.10

WIN_RATE_PER_WIN = 10.0  # 10 wins -> 100
GOALS_MULTIPLIER = 2.0
POINTS_MULTIPLIER = 2.0
POSITION_PENALTY = 5.0
GOAL_DIFF_MULTIPLIER = 3.0
FACTOR_CAP = 100.0
MIN_PROBABILITY = 1.0

# ---- Player performance ----
# Premier League, Bundesliga, La Liga, Ligue 1, Serie A
PRIORITY_COMPETITION_IDS = ("2019", "2021", "2014", "2015", "2002")
TOP_SCORERS_LIMIT = 200
UNKNOWN_VALUE = "Unknown"
