from typing import Any, Dict, Optional, Protocol


class PreferencesRepository(Protocol):
    def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        ...

    def upsert(self, user_id: int, preferences: Dict[str, Any]) -> None:
        ...
