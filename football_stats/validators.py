from typing import Optional

from .config import setup_logger

logger = setup_logger(__name__)


def _numeric_id(raw: Optional[str], field: str) -> str:
    value = (raw or "").strip()
    if not (value.isascii() and value.isdigit()):
        logger.warning("%s_invalid: %r", field, raw)
        raise ValueError(f"{field} must be a numeric id, got {raw!r}")
    return value


def validate_team_id(raw: Optional[str]) -> str:
    """Football-data team ids are numeric strings; returned stripped."""
    return _numeric_id(raw, "team_id")


def validate_player_id(raw: Optional[str]) -> str:
    return _numeric_id(raw, "player_id")


def validate_user_id(raw: Optional[str]) -> int:
    return int(_numeric_id(raw, "user_id"))
