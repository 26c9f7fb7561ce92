import json
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select, col, or_

from .....db.models import Image
from .....exceptions import StorageError
from .....application.ports.image_repo import ImageRepository, ImageDto

logger = logging.getLogger(__name__)


def _load_list(raw: Optional[str]) -> list:
    try:
        value = json.loads(raw) if raw else []
    except ValueError:
        logger.warning("Skipping malformed JSON column value")
        return []
    return value if isinstance(value, list) else []


class SqlImageRepository(ImageRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def _to_dto(self, row: Image) -> ImageDto:
        return ImageDto(
            id=row.id,
            filename=row.filename,
            image_path=row.image_path,
            upload_date=row.upload_date,
            user_id=row.user_id,
            objects=_load_list(row.objects_detected),
            text=_load_list(row.text_extracted),
            faces=_load_list(row.faces_detected),
        )

    def create(self, filename: str, image_path: str, analysis: Dict[str, Any], user_id: Optional[int]) -> ImageDto:
        row = Image(
            filename=filename,
            image_path=image_path,
            objects_detected=json.dumps(analysis.get("objects", []), ensure_ascii=False),
            text_extracted=json.dumps(analysis.get("text", []), ensure_ascii=False),
            faces_detected=json.dumps(analysis.get("faces", []), ensure_ascii=False),
            user_id=user_id,
        )
        with Session(self.engine) as session:
            try:
                session.add(row)
                session.commit()
                session.refresh(row)
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError("Failed to record image") from e
            return self._to_dto(row)

    def list_all(self) -> List[ImageDto]:
        try:
            with Session(self.engine) as session:
                rows = session.exec(select(Image).order_by(col(Image.upload_date).desc())).all()
                return [self._to_dto(r) for r in rows]
        except SQLAlchemyError as e:
            raise StorageError("Database error") from e

    def search(self, term: str) -> List[ImageDto]:
        statement = select(Image).where(or_(
            col(Image.objects_detected).icontains(term, autoescape=True),
            col(Image.text_extracted).icontains(term, autoescape=True),
        ))
        try:
            with Session(self.engine) as session:
                return [self._to_dto(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError("Search failed") from e
