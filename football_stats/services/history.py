"""Per-user history of predictions and player performance lookups."""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List

from ..config import setup_logger
from ..errors import PerformanceDataError
from ..ports.history import HistoryRow, HistoryStorePort

logger = setup_logger(__name__)

NO_DATA = "No data"
PARSE_ERROR = "Error parsing data"


def _load_array(raw: str | None) -> List[Any]:
    """Decode a stored JSON field into a list; a legacy single object becomes a one-item list."""
    if not raw:
        return []
    existing = json.loads(raw)
    if isinstance(existing, list):
        return existing
    return [existing]


class HistoryService:
    def __init__(self, repository: HistoryStorePort) -> None:
        self.repository = repository

    def _row_for(self, user_id: int) -> HistoryRow:
        return self.repository.find_by_user_id(user_id) or HistoryRow(user_id=user_id)

    def record_prediction(self, user_id: int, prediction: Dict[str, Any]) -> None:
        """Append a prediction to the user's history; failures are logged, not raised."""
        try:
            row = self._row_for(user_id)
            predictions = _load_array(row.predictions_json)
            entry = dict(prediction)
            entry["timestamp"] = datetime.now(timezone.utc).isoformat()
            predictions.append(entry)
            row.predictions_json = json.dumps(predictions)
            self.repository.save(row)
        except Exception:
            logger.exception("Error saving prediction history for user %s", user_id)

    def record_performance(self, user_id: int, performance: Dict[str, Any]) -> None:
        try:
            row = self._row_for(user_id)
            entries = _load_array(row.performance_json)
            entries.append(performance)
            row.performance_json = json.dumps(entries)
            self.repository.save(row)
        except Exception as exc:
            raise PerformanceDataError("Failed to save performance data") from exc
        logger.info("Saved performance data for user %s", user_id)

    def get_history(self, user_id: int) -> Dict[str, Any]:
        row = self.repository.find_by_user_id(user_id)
        if row is None:
            return {"predictions": NO_DATA, "performance": NO_DATA}

        try:
            predictions = json.loads(row.predictions_json) if row.predictions_json else NO_DATA
            performance = json.loads(row.performance_json) if row.performance_json else NO_DATA
        except ValueError:
            logger.error("Corrupt history JSON for user %s", user_id)
            return {"predictions": PARSE_ERROR, "performance": PARSE_ERROR}

        return {"predictions": predictions, "performance": performance}
