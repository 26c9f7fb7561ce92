import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select, col, or_

from .....db.models import UserAnalysis
from .....exceptions import StorageError
from .....application.ports.analysis_repo import AnalysisRepository, AnalysisRecord


class SqlAnalysisRepository(AnalysisRepository):
    def __init__(self, engine: Engine):
        self.engine = engine

    def _to_record(self, row: UserAnalysis) -> AnalysisRecord:
        return AnalysisRecord(
            id=row.id,
            user_id=row.user_id,
            analysis_data=row.analysis_data,
            image_info=row.image_info,
            stored_name=row.stored_name,
            analysis_type=row.analysis_type,
            saved_at=row.saved_at,
        )

    def _filtered(self, statement, user_id: int, search: Optional[str], analysis_type: Optional[str]):
        statement = statement.where(UserAnalysis.user_id == user_id)
        if search:
            statement = statement.where(or_(
                col(UserAnalysis.analysis_data).contains(search, autoescape=True),
                col(UserAnalysis.image_info).contains(search, autoescape=True),
            ))
        if analysis_type:
            statement = statement.where(col(UserAnalysis.analysis_type).contains(analysis_type, autoescape=True))
        return statement

    def create(self, user_id: Optional[int], analysis: Dict[str, Any], image_info: Dict[str, Any], saved_at: datetime) -> AnalysisRecord:
        entry = UserAnalysis(
            user_id=user_id,
            analysis_data=json.dumps(analysis, ensure_ascii=False),
            image_info=json.dumps(image_info, ensure_ascii=False),
            stored_name=(image_info or {}).get("storedName"),
            analysis_type=(analysis or {}).get("analysisType"),
            saved_at=saved_at,
        )
        with Session(self.engine) as session:
            try:
                session.add(entry)
                session.commit()
                session.refresh(entry)
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError("Failed to save analysis") from e
            return self._to_record(entry)

    def find_recent(self, user_id: int, stored_name: str, since: datetime) -> Optional[AnalysisRecord]:
        statement = (
            select(UserAnalysis)
            .where(UserAnalysis.user_id == user_id)
            .where(UserAnalysis.stored_name == stored_name)
            .where(UserAnalysis.saved_at > since)
            .limit(1)
        )
        try:
            with Session(self.engine) as session:
                row = session.exec(statement).first()
                return self._to_record(row) if row else None
        except SQLAlchemyError as e:
            raise StorageError("Failed to check recent analyses") from e

    def list_for_user(self, user_id: int, offset: int, limit: int, search: Optional[str] = None, analysis_type: Optional[str] = None) -> List[AnalysisRecord]:
        statement = self._filtered(select(UserAnalysis), user_id, search, analysis_type)
        statement = statement.order_by(col(UserAnalysis.saved_at).desc()).offset(offset).limit(limit)
        try:
            with Session(self.engine) as session:
                return [self._to_record(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch history") from e

    def count_for_user(self, user_id: int, search: Optional[str] = None, analysis_type: Optional[str] = None) -> int:
        statement = self._filtered(select(func.count()).select_from(UserAnalysis), user_id, search, analysis_type)
        try:
            with Session(self.engine) as session:
                return int(session.exec(statement).one())
        except SQLAlchemyError as e:
            raise StorageError("Failed to get count") from e

    def list_all_for_user(self, user_id: int) -> List[AnalysisRecord]:
        statement = select(UserAnalysis).where(UserAnalysis.user_id == user_id)
        try:
            with Session(self.engine) as session:
                return [self._to_record(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError("Failed to get statistics") from e

    def count_since(self, user_id: int, since: datetime) -> int:
        statement = (
            select(func.count())
            .select_from(UserAnalysis)
            .where(UserAnalysis.user_id == user_id)
            .where(UserAnalysis.saved_at > since)
        )
        try:
            with Session(self.engine) as session:
                return int(session.exec(statement).one())
        except SQLAlchemyError as e:
            raise StorageError("Failed to get statistics") from e

    def get_many(self, user_id: int, ids: Sequence[int]) -> List[AnalysisRecord]:
        if not ids:
            return []
        statement = (
            select(UserAnalysis)
            .where(UserAnalysis.user_id == user_id)
            .where(col(UserAnalysis.id).in_(list(ids)))
            .order_by(col(UserAnalysis.saved_at).desc())
        )
        try:
            with Session(self.engine) as session:
                return [self._to_record(r) for r in session.exec(statement).all()]
        except SQLAlchemyError as e:
            raise StorageError("Failed to fetch analyses for export") from e

    def delete_many(self, user_id: int, ids: Sequence[int]) -> int:
        # Ownership is part of the query, foreign ids are silently ignored
        statement = (
            select(UserAnalysis)
            .where(UserAnalysis.user_id == user_id)
            .where(col(UserAnalysis.id).in_(list(ids)))
        )
        with Session(self.engine) as session:
            try:
                rows = session.exec(statement).all()
                for row in rows:
                    session.delete(row)
                session.commit()
            except SQLAlchemyError as e:
                session.rollback()
                raise StorageError("Failed to delete analyses") from e
            return len(rows)
