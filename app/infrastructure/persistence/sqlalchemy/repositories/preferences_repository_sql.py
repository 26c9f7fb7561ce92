import json
from typing import Any, Dict, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from .....db.models import UserPreferences
from .....exceptions import StorageError
from .....utils import utcnow
from .....application.ports.preferences_repo import PreferencesRepository


class SqlPreferencesRepository(PreferencesRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def get(self, user_id: int) -> Optional[Dict[str, Any]]:
        try:
            with Session(self.engine) as session:
                row = session.get(UserPreferences, user_id)
                return json.loads(row.preferences) if row and row.preferences else None
        except SQLAlchemyError as e:
            raise StorageError("Failed to load preferences") from e

    def upsert(self, user_id: int, preferences: Dict[str, Any]) -> None:
        with Session(self.engine) as session:
            try:
                row = session.get(UserPreferences, user_id)
                if row is None:
                    row = UserPreferences(user_id=user_id)
                row.preferences = json.dumps(preferences, ensure_ascii=False)
                row.updated_at = utcnow()
                session.add(row)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError("Failed to save preferences") from e
