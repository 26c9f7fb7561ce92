# app/db/models/users/preferences.py
from sqlmodel import SQLModel, Field
from datetime import datetime

from sqlalchemy import DateTime

from ....utils import utcnow


class UserPreferences(SQLModel, table=True):
    __tablename__ = "user_preferences"
    user_id: int = Field(foreign_key="users.id", primary_key=True)
    preferences: str = Field(default="{}")
    updated_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
