import json
import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional, Sequence

from ..ports.analysis_repo import AnalysisRepository, AnalysisRecord
from ...exceptions import ValidationError
from ...utils import iso_utc, utcnow

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0"
SUPPORTED_BULK_FORMATS = ("json",)


def formatted_date(value: datetime) -> str:
    """e.g. "Oct 18, 2026, 03:45 PM" """
    return f"{value:%b} {value.day}, {value.year}, {value:%I:%M %p}"


def _loads(record: AnalysisRecord):
    return json.loads(record.analysis_data), json.loads(record.image_info)


@dataclass
class HistoryService:
    analysis_repo: AnalysisRepository
    source: str = "AI Image Recognition Service"
    default_limit: int = 20
    max_limit: int = 100
    clock: Callable[[], datetime] = field(default=utcnow)

    def _history_item(self, record: AnalysisRecord) -> Optional[Dict[str, Any]]:
        try:
            analysis, image_info = _loads(record)
        except (TypeError, ValueError) as e:
            logger.error(f"Error parsing analysis data for record {record.id}: {e}")
            return None
        return {
            "id": record.id,
            "analysis": analysis,
            "imageInfo": image_info,
            "savedAt": iso_utc(record.saved_at),
            "formattedDate": formatted_date(record.saved_at),
            "quickInfo": {
                "analysisType": analysis.get("analysisType"),
                "objectCount": len(analysis.get("objects") or []),
                "textCount": len(analysis.get("text") or []),
                "faceCount": len(analysis.get("faces") or []),
            },
        }

    def list_history(self, user_id: int, page: Optional[int] = None, limit: Optional[int] = None,
                     search: Optional[str] = None, analysis_type: Optional[str] = None) -> Dict[str, Any]:
        page = page if page and page > 0 else 1
        limit = limit if limit and limit > 0 else self.default_limit
        limit = min(limit, self.max_limit)
        offset = (page - 1) * limit

        records = self.analysis_repo.list_for_user(user_id, offset, limit, search or None, analysis_type or None)
        total = self.analysis_repo.count_for_user(user_id, search or None, analysis_type or None)

        history = [item for item in (self._history_item(r) for r in records) if item is not None]
        return {
            "history": history,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": math.ceil(total / limit),
            },
        }

    def save_analysis(self, user_id: int, analysis: Dict[str, Any], image_info: Dict[str, Any]) -> Dict[str, Any]:
        """Explicit save from the client. No duplicate suppression here."""
        if analysis is None or image_info is None:
            raise ValidationError("Analysis data and image info required")
        record = self.analysis_repo.create(user_id, analysis, image_info, saved_at=self.clock())
        return {"success": True, "savedId": record.id}

    def bulk_delete(self, user_id: int, analysis_ids: Optional[Sequence[int]]) -> Dict[str, Any]:
        if not analysis_ids:
            raise ValidationError("Analysis IDs array required")
        deleted = self.analysis_repo.delete_many(user_id, analysis_ids)
        logger.info(f"User {user_id} deleted {deleted} of {len(analysis_ids)} requested analyses")
        return {
            "success": True,
            "deletedCount": deleted,
            "message": f"Successfully deleted {deleted} analyses",
        }

    def export(self, user_id: int, analysis_ids: Optional[Sequence[int]], export_format: str = "json") -> Dict[str, Any]:
        if analysis_ids is None:
            raise ValidationError("Analysis IDs array required")
        if export_format not in SUPPORTED_BULK_FORMATS:
            raise ValidationError("Unsupported export format")

        analyses: List[Dict[str, Any]] = []
        for record in self.analysis_repo.get_many(user_id, analysis_ids):
            try:
                analysis, image_info = _loads(record)
            except (TypeError, ValueError) as e:
                logger.error(f"Skipping unreadable record {record.id} in export: {e}")
                continue
            analyses.append({
                "id": record.id,
                "savedAt": iso_utc(record.saved_at),
                "analysis": analysis,
                "imageInfo": image_info,
            })

        return {
            "exportInfo": {
                "exportedAt": iso_utc(self.clock()),
                "version": EXPORT_VERSION,
                "source": self.source,
                "totalAnalyses": len(analyses),
                "exportFormat": export_format,
            },
            "analyses": analyses,
        }

    def statistics(self, user_id: int) -> Dict[str, Any]:
        records = self.analysis_repo.list_all_for_user(user_id)
        recent = self.analysis_repo.count_since(user_id, self.clock() - timedelta(days=7))

        type_counts: Dict[str, int] = {}
        for record in records:
            try:
                analysis = json.loads(record.analysis_data)
            except (TypeError, ValueError):
                continue
            analysis_type = analysis.get("analysisType") or "general"
            type_counts[analysis_type] = type_counts.get(analysis_type, 0) + 1

        return {
            "totalAnalyses": len(records),
            "recentActivity": recent,
            "analysesByType": type_counts,
            "averagePerWeek": math.floor(recent / 7 * 10 + 0.5) / 10,
        }
