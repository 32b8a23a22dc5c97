from dataclasses import dataclass
from typing import Optional


@dataclass
class HistoryRow:
    user_id: int
    predictions_json: Optional[str] = None
    performance_json: Optional[str] = None
    id: Optional[int] = None


class HistoryStorePort:
    def find_by_user_id(self, user_id: int) -> Optional[HistoryRow]: ...

    def save(self, row: HistoryRow) -> HistoryRow: ...
