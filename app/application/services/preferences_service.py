from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..ports.preferences_repo import PreferencesRepository
from ...exceptions import ValidationError


@dataclass
class PreferencesService:
    repo: PreferencesRepository

    def save(self, user_id: int, preferences: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        if preferences is None:
            raise ValidationError("Preferences required")
        self.repo.upsert(user_id, preferences)
        return {"success": True}

    def get(self, user_id: int) -> Dict[str, Any]:
        return {"preferences": self.repo.get(user_id) or {}}
