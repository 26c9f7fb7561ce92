import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..container import Container
from ..dependencies import get_container, optional_user
from ..schemas import AnalyzeResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


@router.post(
    "/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(
    image: Optional[UploadFile] = File(None),
    current_user: Optional[int] = Depends(optional_user),
    container: Container = Depends(get_container),
):
    """
    Analyze one uploaded image.

    Works without an account. With a valid bearer token the result is also
    queued for auto-save into the caller's history; `autoSaved` reports that
    the save was queued, not that it committed.
    """
    return await container.upload.analyze_upload(image, current_user)
