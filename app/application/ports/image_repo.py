from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class ImageDto:
    id: int
    filename: str
    image_path: str
    upload_date: datetime
    user_id: Optional[int]
    objects: List[str] = field(default_factory=list)
    text: List[str] = field(default_factory=list)
    faces: List[Dict[str, Any]] = field(default_factory=list)


class ImageRepository:
    def create(self, filename: str, image_path: str, analysis: Dict[str, Any], user_id: Optional[int]) -> ImageDto:
        ...

    def list_all(self) -> List[ImageDto]:
        ...

    def search(self, term: str) -> List[ImageDto]:
        ...
