import time
from datetime import datetime

import pytest

from app.application.services.vision_service import VisionService, classify_analysis_type, normalize_analysis
from app.exceptions import UpstreamError

from conftest import FakeVision, RAW_CAT


def test_normalize_maps_raw_payload():
    now = datetime(2026, 10, 18, 9, 30)
    analysis = normalize_analysis(RAW_CAT, now=now)

    assert analysis["objects"] == ["cat"]
    assert analysis["text"] == ["a cat sitting on a sofa"]
    assert analysis["confidence"] == "0.87"
    assert analysis["analysisType"] == "animal"
    assert analysis["processingTime"] == "Real AI"
    assert analysis["timestamp"] == "2026-10-18T09:30:00Z"
    assert analysis["categories"] == [{"name": "animal_cat", "score": "0.95"}]
    assert analysis["tags"][0] == {"name": "cat", "confidence": "0.99"}
    assert analysis["colors"] == {"dominantColorForeground": "White"}


def test_normalize_handles_empty_payload():
    analysis = normalize_analysis({})
    assert analysis["objects"] == []
    assert analysis["text"] == []
    assert analysis["faces"] == []
    assert analysis["confidence"] == "0.85"
    assert analysis["analysisType"] == "general"


def test_faces_get_capitalised_gender():
    analysis = normalize_analysis({"faces": [{"age": 31, "gender": "female"}]})
    assert analysis["faces"] == [{"age": "31", "gender": "Female"}]


@pytest.mark.parametrize("raw,expected", [
    ({"categories": [{"name": "people_portrait"}], "tags": [{"name": "cat"}]}, "portrait"),
    ({"tags": [{"name": "sky"}, {"name": "building"}]}, "landscape"),
    ({"tags": [{"name": "city"}]}, "urban"),
    ({"tags": [{"name": "meal"}]}, "food"),
    ({"tags": [{"name": "dog"}]}, "animal"),
    ({"tags": [{"name": "document"}]}, "document"),
    ({"tags": [{"name": "chair"}]}, "general"),
])
def test_classify_analysis_type(raw, expected):
    assert classify_analysis_type(raw) == expected


@pytest.mark.asyncio
async def test_service_returns_normalized_analysis():
    provider = FakeVision()
    svc = VisionService(provider, clock=lambda: datetime(2026, 1, 1))
    analysis = await svc.analyze(b"img", "image/png")
    assert analysis["objects"] == ["cat"]
    assert provider.calls == ["image/png"]


@pytest.mark.asyncio
async def test_provider_error_becomes_upstream_error():
    svc = VisionService(FakeVision(error=RuntimeError("quota exceeded")))
    with pytest.raises(UpstreamError) as exc:
        await svc.analyze(b"img", "image/png")
    assert exc.value.status_code == 500
    assert exc.value.detail == "Processing failed"


class SlowVision:
    def analyze(self, image_bytes, mime_type):
        time.sleep(0.5)
        return RAW_CAT


@pytest.mark.asyncio
async def test_slow_provider_times_out():
    svc = VisionService(SlowVision(), timeout_seconds=0.05)
    with pytest.raises(UpstreamError):
        await svc.analyze(b"img", "image/png")
