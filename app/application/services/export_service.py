import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple

from ...exceptions import ValidationError
from ...utils import iso_utc, utcnow
from ...infrastructure.export.csv_renderer import render_analysis_csv
from ...infrastructure.export.pdf_renderer import render_analysis_pdf
from .history_service import EXPORT_VERSION

logger = logging.getLogger(__name__)

LIST_FIELDS = ("objects", "text", "faces")


@dataclass
class ExportedFile:
    content: bytes
    media_type: str
    filename: str


@dataclass
class ExportService:
    source: str = "AI Image Recognition Service"
    clock: Callable[[], datetime] = field(default=utcnow)

    def _parse(self, analysis_data: Optional[str], image_info: Optional[str]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        if not analysis_data or not image_info:
            raise ValidationError("Analysis data and image info required")
        try:
            analysis = json.loads(analysis_data)
            info = json.loads(image_info)
        except ValueError:
            raise ValidationError("Analysis data and image info must be valid JSON")
        if not isinstance(analysis, dict) or not isinstance(info, dict):
            raise ValidationError("Analysis data and image info must be JSON objects")
        for key in LIST_FIELDS:
            if not isinstance(analysis.get(key) or [], list):
                raise ValidationError(f"Analysis {key} must be a list")
        if not all(isinstance(face, dict) for face in analysis.get("faces") or []):
            raise ValidationError("Analysis faces must be JSON objects")
        return analysis, info

    def _filename(self, ext: str) -> str:
        return f"ai-analysis-{int(self.clock().timestamp() * 1000)}.{ext}"

    def to_json(self, analysis_data: Optional[str], image_info: Optional[str]) -> ExportedFile:
        analysis, info = self._parse(analysis_data, image_info)
        document = {
            "exportInfo": {"exportedAt": iso_utc(self.clock()), "version": EXPORT_VERSION, "source": self.source},
            "imageInfo": info,
            "analysis": analysis,
        }
        return ExportedFile(json.dumps(document).encode("utf-8"), "application/json", self._filename("json"))

    def to_csv(self, analysis_data: Optional[str], image_info: Optional[str]) -> ExportedFile:
        analysis, info = self._parse(analysis_data, image_info)
        return ExportedFile(render_analysis_csv(analysis, info).encode("utf-8"), "text/csv", self._filename("csv"))

    def to_pdf(self, analysis_data: Optional[str], image_info: Optional[str]) -> ExportedFile:
        analysis, info = self._parse(analysis_data, image_info)
        pdf = render_analysis_pdf(analysis, info, source=self.source)
        logger.info(f"Rendered PDF export ({len(pdf)} bytes)")
        return ExportedFile(pdf, "application/pdf", self._filename("pdf"))
