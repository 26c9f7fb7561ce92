import io
from typing import Any, Dict, List

import pytest
from PIL import Image as PILImage

from app.config import Settings


RAW_CAT = {
    "objects": [{"object": "cat", "confidence": 0.93}],
    "description": {"captions": [{"text": "a cat sitting on a sofa", "confidence": 0.8734}]},
    "faces": [],
    "categories": [{"name": "animal_cat", "score": 0.9512}],
    "tags": [{"name": "cat", "confidence": 0.99}, {"name": "indoor", "confidence": 0.95}],
    "color": {"dominantColorForeground": "White"},
    "imageType": {"clipArtType": 0},
    "brands": [],
}


class FakeVision:
    def __init__(self, raw: Dict[str, Any] = None, error: Exception = None):
        self.raw = raw or RAW_CAT
        self.error = error
        self.calls: List[str] = []

    def analyze(self, image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
        self.calls.append(mime_type)
        if self.error:
            raise self.error
        return self.raw


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    PILImage.new("RGB", (320, 240), color=(200, 120, 40)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        JWT_SECRET_KEY="test-secret-key",
        DATABASE_URL=f"sqlite:///{tmp_path / 'test.db'}",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        RATE_LIMIT_PER_MINUTE=10_000,
        REDIS_URL=None,
        LOG_LEVEL="WARNING",
    )
