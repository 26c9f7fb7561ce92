# app/schemas/history/history.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class SaveAnalysisRequest(BaseModel):
    analysisData: Optional[Dict[str, Any]] = None
    imageInfo: Optional[Dict[str, Any]] = None


class BulkDeleteRequest(BaseModel):
    analysisIds: Optional[List[int]] = None


class BulkExportRequest(BaseModel):
    analysisIds: Optional[List[int]] = None
    format: str = Field(default="json", description="Only json is supported")


class PreferencesRequest(BaseModel):
    preferences: Optional[Dict[str, Any]] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    totalPages: int


class QuickInfo(BaseModel):
    analysisType: Optional[str] = None
    objectCount: int = 0
    textCount: int = 0
    faceCount: int = 0


class HistoryItem(BaseModel):
    id: int
    analysis: Dict[str, Any]
    imageInfo: Dict[str, Any]
    savedAt: str
    formattedDate: str
    quickInfo: QuickInfo


class HistoryResponse(BaseModel):
    history: List[HistoryItem]
    pagination: Pagination


class BulkDeleteResponse(BaseModel):
    success: bool
    deletedCount: int
    message: str


class StatisticsResponse(BaseModel):
    totalAnalyses: int
    recentActivity: int
    analysesByType: Dict[str, int]
    averagePerWeek: float
