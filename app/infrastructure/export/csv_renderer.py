import csv
import io
from typing import Any, Dict

from .formatting import confidence_percent, face_details, face_emotions, size_in_mb


def render_analysis_csv(analysis: Dict[str, Any], image_info: Dict[str, Any]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")

    writer.writerow(["AI Image Analysis Export"])
    writer.writerow([])
    writer.writerow(["Basic Information:"])
    writer.writerow(["File Name", image_info.get("originalName", "")])
    writer.writerow(["File Size (MB)", size_in_mb(image_info)])
    writer.writerow(["Analysis Type", analysis.get("analysisType", "")])
    writer.writerow(["Confidence", confidence_percent(analysis)])
    writer.writerow([])

    writer.writerow(["Objects Detected:"])
    for obj in analysis.get("objects") or []:
        writer.writerow([obj])
    writer.writerow([])

    text = analysis.get("text") or []
    if text:
        writer.writerow(["Text Found:"])
        for line in text:
            writer.writerow([line])
        writer.writerow([])

    faces = analysis.get("faces") or []
    if faces:
        writer.writerow(["Faces Detected:"])
        writer.writerow(["Subject", "Gender", "Age", "Emotions", "Additional"])
        for index, face in enumerate(faces, start=1):
            writer.writerow([
                f"Subject {index}",
                face.get("gender") or "",
                face.get("age", ""),
                "; ".join(face_emotions(face)),
                "; ".join(face_details(face)),
            ])

    return buf.getvalue()
