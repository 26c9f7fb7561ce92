# app/db/models/media/image.py
from typing import Optional
from sqlmodel import SQLModel, Field
from datetime import datetime

from sqlalchemy import DateTime

from ....utils import utcnow


class Image(SQLModel, table=True):
    """One row per successful upload, whether or not the uploader is signed in."""
    __tablename__ = "images"
    id: Optional[int] = Field(default=None, primary_key=True)
    filename: str = Field(max_length=255)
    upload_date: datetime = Field(default_factory=utcnow, sa_type=DateTime(timezone=True), index=True)
    objects_detected: str = Field(default="[]")
    text_extracted: str = Field(default="[]")
    faces_detected: str = Field(default="[]")
    image_path: str = Field(max_length=255)
    user_id: Optional[int] = Field(default=None, index=True)
