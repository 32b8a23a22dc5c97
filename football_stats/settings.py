import os
from dotenv import load_dotenv

# Load .env from repo root (dotenv auto-walks up from CWD)
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return None


# --- football-data.org ---
FOOTBALL_DATA_TOKEN = os.getenv("FOOTBALL_DATA_TOKEN") or _read_secret_file(
    os.getenv("FOOTBALL_DATA_TOKEN_FILE")
)
FOOTBALL_DATA_BASE = os.getenv("FOOTBALL_DATA_BASE", "https://api.football-data.org/v4").rstrip("/")
FOOTBALL_DATA_TIMEOUT_MS = int(os.getenv("FOOTBALL_DATA_TIMEOUT_MS", "30000"))

# --- persistence ---
DATABASE_PATH = os.getenv("DATABASE_PATH", "./football_stats.db")

# --- cache maintenance ---
CACHE_MAINTENANCE_ENABLED = _get_bool("CACHE_MAINTENANCE_ENABLED", True)
TTL_CACHE_SWEEP_MINUTES = int(os.getenv("TTL_CACHE_SWEEP_MINUTES", "30"))
METHOD_CACHE_SWEEP_MINUTES = int(os.getenv("METHOD_CACHE_SWEEP_MINUTES", "10"))

# --- player performance lookup ---
TOP_SCORERS_SEASON = os.getenv("TOP_SCORERS_SEASON", "2024")
API_CALL_DELAY_SECONDS = float(os.getenv("API_CALL_DELAY_SECONDS", "6"))   # 10 requests/minute
RATE_LIMIT_DELAY_SECONDS = float(os.getenv("RATE_LIMIT_DELAY_SECONDS", "30"))
