from typing import Any, Dict, List


def size_in_mb(image_info: Dict[str, Any]) -> str:
    try:
        return f"{float(image_info.get('size') or 0) / 1024 / 1024:.2f}"
    except (TypeError, ValueError):
        return "0.00"


def confidence_percent(analysis: Dict[str, Any]) -> str:
    try:
        return f"{float(analysis.get('confidence')) * 100:.1f}%"
    except (TypeError, ValueError):
        return "N/A"


def face_emotions(face: Dict[str, Any]) -> List[str]:
    emotions = face.get("emotions")
    if not emotions:
        return []
    if not isinstance(emotions, list):
        emotions = [emotions]
    return [str(emotion) for emotion in emotions]


def face_details(face: Dict[str, Any]) -> List[str]:
    """Optional per-face attributes some providers return beyond age and gender."""
    details = []
    for key in ("smile", "glasses"):
        if face.get(key):
            details.append(str(face[key]))
    for key in ("pose", "expression"):
        if face.get(key):
            details.append(f"{key.capitalize()}: {face[key]}")
    return details


ADDITIONAL_FIELDS = ["lighting", "quality", "environment", "activity", "type", "appeal", "setting"]
