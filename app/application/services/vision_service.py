import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from ..ports.vision_provider import VisionProvider
from ...exceptions import UpstreamError
from ...utils import iso_utc, utcnow

logger = logging.getLogger(__name__)

# Checked in order, first match wins
TYPE_TAG_RULES = [
    ("landscape", {"mountain", "sky", "nature", "outdoor"}),
    ("urban", {"building", "city", "urban"}),
    ("food", {"food", "meal"}),
    ("animal", {"animal", "pet", "cat", "dog"}),
    ("document", {"text", "document"}),
]


def _names(items: Optional[List[Dict[str, Any]]], key: str = "name") -> List[str]:
    return [str(item.get(key)) for item in items or [] if isinstance(item, dict) and item.get(key) is not None]


def _fixed(value: Any, digits: int = 2) -> Optional[str]:
    try:
        return f"{float(value):.{digits}f}"
    except (TypeError, ValueError):
        return None


def classify_analysis_type(raw: Dict[str, Any]) -> str:
    categories = _names(raw.get("categories"))
    tags = set(_names(raw.get("tags")))

    if any("people_" in category for category in categories):
        return "portrait"
    for analysis_type, keywords in TYPE_TAG_RULES:
        if tags & keywords:
            return analysis_type
    return "general"


def normalize_analysis(raw: Dict[str, Any], now: Optional[datetime] = None) -> Dict[str, Any]:
    """Map a raw image-understanding payload onto the internal analysis shape."""
    now = now or utcnow()
    captions = (raw.get("description") or {}).get("captions") or []

    faces = []
    for face in raw.get("faces") or []:
        gender = str(face.get("gender") or "")
        faces.append({
            "age": f"{face.get('age')}",
            "gender": gender[:1].upper() + gender[1:],
        })

    confidence = _fixed(captions[0].get("confidence")) if captions else None

    return {
        "objects": _names(raw.get("objects"), key="object"),
        "text": _names(captions, key="text"),
        "faces": faces,
        "analysisType": classify_analysis_type(raw),
        "confidence": confidence or "0.85",
        "processingTime": "Real AI",
        "timestamp": iso_utc(now),
        "categories": [
            {"name": c.get("name"), "score": _fixed(c.get("score"))}
            for c in raw.get("categories") or []
        ],
        "tags": [
            {"name": t.get("name"), "confidence": _fixed(t.get("confidence"))}
            for t in raw.get("tags") or []
        ],
        "colors": raw.get("color") or {},
        "imageType": raw.get("imageType") or {},
        "brands": _names(raw.get("brands")),
    }


@dataclass
class VisionService:
    provider: VisionProvider
    timeout_seconds: float = 30.0
    clock: Callable[[], datetime] = field(default=utcnow)

    async def analyze(self, image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self.provider.analyze, image_bytes, mime_type),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Vision analysis timed out after {self.timeout_seconds}s")
            raise UpstreamError() from e
        except UpstreamError:
            raise
        except Exception as e:
            logger.error(f"Vision analysis failed: {e}", exc_info=True)
            raise UpstreamError() from e

        analysis = normalize_analysis(raw, now=self.clock())
        logger.info(f"Vision analysis completed: type={analysis['analysisType']} objects={len(analysis['objects'])}")
        return analysis
