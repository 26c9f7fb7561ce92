from typing import Any, Dict, List, Optional, Sequence
from dataclasses import dataclass
from datetime import datetime


@dataclass
class AnalysisRecord:
    id: int
    user_id: Optional[int]
    analysis_data: str
    image_info: str
    stored_name: Optional[str]
    analysis_type: Optional[str]
    saved_at: datetime


class AnalysisRepository:
    def create(self, user_id: Optional[int], analysis: Dict[str, Any], image_info: Dict[str, Any], saved_at: datetime) -> AnalysisRecord:
        ...

    def find_recent(self, user_id: int, stored_name: str, since: datetime) -> Optional[AnalysisRecord]:
        ...

    def list_for_user(self, user_id: int, offset: int, limit: int, search: Optional[str] = None, analysis_type: Optional[str] = None) -> List[AnalysisRecord]:
        ...

    def count_for_user(self, user_id: int, search: Optional[str] = None, analysis_type: Optional[str] = None) -> int:
        ...

    def list_all_for_user(self, user_id: int) -> List[AnalysisRecord]:
        ...

    def count_since(self, user_id: int, since: datetime) -> int:
        ...

    def get_many(self, user_id: int, ids: Sequence[int]) -> List[AnalysisRecord]:
        ...

    def delete_many(self, user_id: int, ids: Sequence[int]) -> int:
        ...
