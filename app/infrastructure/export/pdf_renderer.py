import io
from typing import Any, Dict
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer

from .formatting import ADDITIONAL_FIELDS, confidence_percent, face_details, face_emotions, size_in_mb
from ...utils import utcnow


def render_analysis_pdf(analysis: Dict[str, Any], image_info: Dict[str, Any], source: str) -> bytes:
    """
    Creates a one-record PDF report.

    Args:
        analysis: normalized analysis payload
        image_info: upload metadata (originalName, size, ...)
        source: service name printed in the footer line

    Returns:
        PDF bytes
    """
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=72, leftMargin=72, topMargin=72, bottomMargin=72)

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        'ReportTitle',
        parent=styles['Heading1'],
        fontSize=20,
        spaceAfter=20,
        textColor=colors.darkblue
    )
    heading_style = ParagraphStyle(
        'ReportHeading',
        parent=styles['Heading2'],
        fontSize=14,
        spaceBefore=12,
        spaceAfter=8,
    )
    normal_style = ParagraphStyle('ReportNormal', parent=styles['Normal'], fontSize=12, spaceAfter=4)
    footer_style = ParagraphStyle('ReportFooter', parent=styles['Normal'], fontSize=10, textColor=colors.grey)

    def line(text: Any) -> Paragraph:
        return Paragraph(escape(str(text)), normal_style)

    story = [Paragraph("AI Image Analysis Report", title_style)]

    story.append(Paragraph("Basic Information:", heading_style))
    story.append(line(f"File Name: {image_info.get('originalName', 'N/A')}"))
    story.append(line(f"File Size: {size_in_mb(image_info)} MB"))
    story.append(line(f"Analysis Type: {analysis.get('analysisType', 'N/A')}"))
    story.append(line(f"Confidence: {confidence_percent(analysis)}"))

    objects = analysis.get("objects") or []
    if objects:
        story.append(Paragraph("Objects Detected:", heading_style))
        story.extend(line(f"• {obj}") for obj in objects)

    text = analysis.get("text") or []
    if text:
        story.append(Paragraph("Text Found:", heading_style))
        story.extend(line(f"• \"{txt}\"") for txt in text)

    faces = analysis.get("faces") or []
    if faces:
        story.append(Paragraph("Faces Detected:", heading_style))
        for index, face in enumerate(faces, start=1):
            story.append(line(f"Subject {index}:"))
            story.append(line(f"Gender: {face.get('gender') or 'Unknown'}"))
            story.append(line(f"Age: {face.get('age', 'Unknown')}"))
            emotions = face_emotions(face)
            if emotions:
                story.append(line(f"Emotions: {', '.join(emotions)}"))
            story.extend(line(detail) for detail in face_details(face))

    additional = [field for field in ADDITIONAL_FIELDS if analysis.get(field)]
    if additional:
        story.append(Paragraph("Additional Insights:", heading_style))
        story.extend(line(f"• {field.capitalize()}: {analysis[field]}") for field in additional)

    story.append(Spacer(1, 30))
    story.append(Paragraph(escape(f"Generated by {source} on {utcnow().strftime('%Y-%m-%d %H:%M:%S')} UTC"), footer_style))

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes
