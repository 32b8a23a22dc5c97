"""
football-data.org v4 client.

Returns the decoded JSON documents as plain dicts. Every failure (non-2xx
status, timeout, connection error, non-JSON body) is raised as TransportError;
nothing here retries.
"""

import re
from typing import Any, Dict, Optional

import requests

from .config import API_TIMEOUT_FOOTBALL_DATA, setup_logger
from .errors import TransportError
from .ports.football_data import CompetitionList, FootballDataPort, MatchList, StandingsTable
from .settings import FOOTBALL_DATA_BASE, FOOTBALL_DATA_TOKEN

logger = setup_logger(__name__)

SOURCE = "FootballData"


def sanitize_error_message(message):
    """
    Remove API keys from error messages to prevent security leaks.
    Handles patterns: apiKey=XXX, X-Auth-Token: XXX
    """
    if not message:
        return message

    sanitized = re.sub(r'apiKey=[A-Za-z0-9._-]+', 'apiKey=***', str(message))
    sanitized = re.sub(r'X-Auth-Token[:\s]+[A-Za-z0-9._-]+', 'X-Auth-Token: ***', sanitized)

    return sanitized


class FootballDataClient(FootballDataPort):
    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.token = token if token is not None else FOOTBALL_DATA_TOKEN
        self.base_url = (base_url or FOOTBALL_DATA_BASE).rstrip("/")
        self.timeout = timeout or API_TIMEOUT_FOOTBALL_DATA
        self.session = session or requests.Session()
        if not self.token:
            logger.warning("football_data_token_missing: set FOOTBALL_DATA_TOKEN")

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {"X-Auth-Token": self.token or ""}
        try:
            response = self.session.get(url, headers=headers, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            logger.error("❌ football-data.org request timed out for %s", path)
            raise TransportError(
                SOURCE, "TIMEOUT", f"football-data.org did not respond in time for {path}",
                sanitize_error_message(str(exc)),
            ) from exc
        except requests.RequestException as exc:
            error_msg = sanitize_error_message(str(exc))
            logger.error("❌ football-data.org connection error for %s: %s", path, error_msg)
            raise TransportError(
                SOURCE, "NETWORK_ERROR", f"A network error occurred for {path}", error_msg
            ) from exc

        status = response.status_code
        if status < 200 or status >= 300:
            body = sanitize_error_message(response.text[:500] if response.text else "")
            logger.error("❌ football-data.org error for %s: HTTP %s", path, status)
            raise TransportError(
                SOURCE,
                f"HTTP_{status}",
                f"Football-Data HTTP {status} for {path}",
                body or None,
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as exc:
            logger.error("❌ football-data.org returned a non-JSON body for %s", path)
            raise TransportError(
                SOURCE, "PARSE_ERROR", f"Failed to parse response for {path}", str(exc),
                status_code=status,
            ) from exc

    def get_last_matches_finished(self, team_id: str, limit: int) -> MatchList:
        return self._get(f"/teams/{team_id}/matches", {"status": "FINISHED", "limit": limit})

    def get_competitions(self) -> CompetitionList:
        return self._get("/competitions")

    def get_standings(self, competition_id: str) -> StandingsTable:
        return self._get(f"/competitions/{competition_id}/standings")

    def get_top_scorers(self, competition_id: str, limit: int, season: str) -> Dict[str, Any]:
        return self._get(
            f"/competitions/{competition_id}/scorers",
            {"limit": limit, "season": season},
        )

    def get_player(self, player_id: str) -> Dict[str, Any]:
        return self._get(f"/persons/{player_id}")
