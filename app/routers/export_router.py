from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from ..container import Container
from ..dependencies import get_container
from ..application.services.export_service import ExportedFile

router = APIRouter(prefix="/api/export", tags=["Export"])


def _attachment(exported: ExportedFile) -> Response:
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/pdf")
def export_pdf(
    analysisData: Optional[str] = Query(None),
    imageInfo: Optional[str] = Query(None),
    container: Container = Depends(get_container),
):
    return _attachment(container.exports.to_pdf(analysisData, imageInfo))


@router.get("/json")
def export_json(
    analysisData: Optional[str] = Query(None),
    imageInfo: Optional[str] = Query(None),
    container: Container = Depends(get_container),
):
    return _attachment(container.exports.to_json(analysisData, imageInfo))


@router.get("/csv")
def export_csv(
    analysisData: Optional[str] = Query(None),
    imageInfo: Optional[str] = Query(None),
    container: Container = Depends(get_container),
):
    return _attachment(container.exports.to_csv(analysisData, imageInfo))
