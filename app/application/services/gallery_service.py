from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..ports.image_repo import ImageRepository, ImageDto
from ...exceptions import ValidationError


@dataclass
class GalleryService:
    image_repo: ImageRepository

    def list_images(self) -> List[Dict[str, Any]]:
        return [
            {
                "id": img.id,
                "filename": img.filename,
                "objects": img.objects,
                "text": img.text,
                "uploadDate": img.upload_date.isoformat(),
                "thumbnail": f"/uploads/thumb-{img.image_path}",
                "fullImage": f"/uploads/{img.image_path}",
            }
            for img in self.image_repo.list_all()
        ]

    def search(self, q: Optional[str]) -> Dict[str, Any]:
        query = (q or "").strip().lower()
        if not query:
            raise ValidationError("Search query required")

        def matches(img: ImageDto) -> bool:
            return (any(query in str(obj).lower() for obj in img.objects)
                    or any(query in str(txt).lower() for txt in img.text))

        results = [
            {
                "id": img.id,
                "filename": img.filename,
                "objects": img.objects,
                "text": img.text,
                "faces": img.faces,
                "uploadDate": img.upload_date.isoformat(),
                "imagePath": img.image_path,
            }
            for img in self.image_repo.search(query)
            if matches(img)
        ]
        return {"query": query, "results": results, "count": len(results)}
