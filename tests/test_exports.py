import json
from datetime import datetime

import pytest

from app.application.services.export_service import ExportService
from app.exceptions import ValidationError
from app.infrastructure.export.csv_renderer import render_analysis_csv
from app.infrastructure.export.formatting import confidence_percent, size_in_mb

ANALYSIS = {
    "objects": ["cat", "sofa"],
    "text": ["a cat on a sofa"],
    "faces": [{"age": "31", "gender": "Female", "emotions": ["happy"], "pose": "frontal"}],
    "analysisType": "animal",
    "confidence": "0.87",
    "lighting": "soft daylight",
}
INFO = {"originalName": "cat.png", "storedName": "1-2.png", "size": 3 * 1024 * 1024}


def test_formatting_helpers():
    assert size_in_mb(INFO) == "3.00"
    assert size_in_mb({}) == "0.00"
    assert confidence_percent(ANALYSIS) == "87.0%"
    assert confidence_percent({}) == "N/A"


def test_csv_sections():
    out = render_analysis_csv(ANALYSIS, INFO)
    lines = out.splitlines()
    assert lines[0] == "AI Image Analysis Export"
    assert "File Name,cat.png" in lines
    assert "Confidence,87.0%" in lines
    assert "Text Found:" in lines
    assert "Subject 1,Female,31,happy,Pose: frontal" in lines


def test_csv_omits_empty_sections():
    out = render_analysis_csv({"objects": [], "analysisType": "general"}, INFO)
    assert "Text Found:" not in out
    assert "Faces Detected:" not in out


@pytest.fixture
def svc():
    return ExportService(source="Test Source", clock=lambda: datetime(2026, 10, 18, 12, 0))


def test_json_export(svc):
    exported = svc.to_json(json.dumps(ANALYSIS), json.dumps(INFO))
    doc = json.loads(exported.content)
    assert doc["exportInfo"]["source"] == "Test Source"
    assert doc["exportInfo"]["exportedAt"] == "2026-10-18T12:00:00Z"
    assert doc["imageInfo"] == INFO
    assert exported.filename.startswith("ai-analysis-") and exported.filename.endswith(".json")


def test_pdf_export(svc):
    exported = svc.to_pdf(json.dumps(ANALYSIS), json.dumps(INFO))
    assert exported.media_type == "application/pdf"
    assert exported.content.startswith(b"%PDF")


def test_pdf_escapes_markup(svc):
    hostile = dict(ANALYSIS, objects=["<b>bold & broken"])
    assert svc.to_pdf(json.dumps(hostile), json.dumps(INFO)).content.startswith(b"%PDF")


@pytest.mark.parametrize("analysis_data,image_info", [
    (None, json.dumps(INFO)),
    (json.dumps(ANALYSIS), ""),
    ("{broken", json.dumps(INFO)),
    ("[1, 2]", json.dumps(INFO)),
])
def test_bad_input_rejected(svc, analysis_data, image_info):
    with pytest.raises(ValidationError):
        svc.to_csv(analysis_data, image_info)


def test_non_string_emotions_are_rendered(svc):
    analysis = dict(ANALYSIS, faces=[{"age": 30, "gender": "Male", "emotions": [0.9, None, "calm"]}])
    csv_out = svc.to_csv(json.dumps(analysis), json.dumps(INFO)).content.decode("utf-8")
    assert "Subject 1,Male,30,0.9; None; calm," in csv_out
    assert svc.to_pdf(json.dumps(analysis), json.dumps(INFO)).content.startswith(b"%PDF")


def test_scalar_emotion_is_rendered():
    analysis = dict(ANALYSIS, faces=[{"gender": "Female", "emotions": "happy"}])
    assert "Subject 1,Female,,happy," in render_analysis_csv(analysis, INFO)


@pytest.mark.parametrize("field,value", [
    ("faces", ["a face"]),
    ("faces", {"age": 3}),
    ("objects", 42),
    ("text", "loose string"),
])
def test_malformed_analysis_fields_rejected(svc, field, value):
    analysis = dict(ANALYSIS, **{field: value})
    with pytest.raises(ValidationError):
        svc.to_pdf(json.dumps(analysis), json.dumps(INFO))
