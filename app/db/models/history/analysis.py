# app/db/models/history/analysis.py
from typing import Optional
from sqlmodel import SQLModel, Field, Relationship
from datetime import datetime

from sqlalchemy import DateTime

from ....utils import utcnow


class UserAnalysis(SQLModel, table=True):
    __tablename__ = "user_analyses"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: Optional[int] = Field(default=None, foreign_key="users.id", index=True)
    analysis_data: str
    image_info: str
    # Denormalised copies used for dedup and type filtering
    stored_name: Optional[str] = Field(default=None, max_length=255, index=True)
    analysis_type: Optional[str] = Field(default=None, max_length=50, index=True)
    saved_at: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)

    # Relationships
    user: Optional["User"] = Relationship(back_populates="analyses")
