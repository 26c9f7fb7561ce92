import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..container import Container
from ..dependencies import get_container, require_user
from ..schemas import (
    SaveAnalysisRequest, BulkDeleteRequest, BulkExportRequest, PreferencesRequest,
    HistoryResponse, BulkDeleteResponse, StatisticsResponse, SuccessResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/user", tags=["History"])


@router.get("/history", response_model=HistoryResponse)
def get_history(
    page: Optional[int] = Query(None),
    limit: Optional[int] = Query(None),
    search: Optional[str] = Query(None),
    type: Optional[str] = Query(None, description="Analysis type filter"),
    current_user: int = Depends(require_user),
    container: Container = Depends(get_container),
):
    return container.history.list_history(current_user, page, limit, search, type)


@router.post("/save-analysis")
def save_analysis(
    payload: SaveAnalysisRequest,
    current_user: int = Depends(require_user),
    container: Container = Depends(get_container),
):
    return container.history.save_analysis(current_user, payload.analysisData, payload.imageInfo)


@router.delete("/history/bulk", response_model=BulkDeleteResponse)
def bulk_delete(
    payload: BulkDeleteRequest,
    current_user: int = Depends(require_user),
    container: Container = Depends(get_container),
):
    return container.history.bulk_delete(current_user, payload.analysisIds)


@router.post("/history/export")
def bulk_export(
    payload: BulkExportRequest,
    current_user: int = Depends(require_user),
    container: Container = Depends(get_container),
):
    document = container.history.export(current_user, payload.analysisIds, payload.format)
    stamp = document["exportInfo"]["exportedAt"].replace(":", "-")
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="ai-analyses-bulk-{stamp}.json"'},
    )


@router.get("/statistics", response_model=StatisticsResponse)
def statistics(current_user: int = Depends(require_user), container: Container = Depends(get_container)):
    return container.history.statistics(current_user)


@router.post("/preferences", response_model=SuccessResponse)
def save_preferences(
    payload: PreferencesRequest,
    current_user: int = Depends(require_user),
    container: Container = Depends(get_container),
):
    return container.preferences.save(current_user, payload.preferences)


@router.get("/preferences")
def get_preferences(current_user: int = Depends(require_user), container: Container = Depends(get_container)):
    return container.preferences.get(current_user)
