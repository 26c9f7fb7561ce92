# app/schemas/analysis/analysis.py
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class FaceInfo(BaseModel):
    age: str
    gender: str


class AnalysisResult(BaseModel):
    objects: List[str] = Field(default_factory=list)
    text: List[str] = Field(default_factory=list, description="Captions / extracted text")
    faces: List[FaceInfo] = Field(default_factory=list)
    analysisType: str
    confidence: str
    processingTime: str
    timestamp: str
    categories: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Dict[str, Any]] = Field(default_factory=list)
    colors: Dict[str, Any] = Field(default_factory=dict)
    imageType: Dict[str, Any] = Field(default_factory=dict)
    brands: List[str] = Field(default_factory=list)


class ImageInfo(BaseModel):
    originalName: str
    storedName: str
    size: int
    thumbnail: Optional[str] = None
    fullImage: str


class AnalyzeResponse(BaseModel):
    success: bool
    analysis: AnalysisResult
    imageInfo: ImageInfo
    autoSaved: bool
