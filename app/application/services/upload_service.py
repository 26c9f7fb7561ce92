import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from fastapi import UploadFile

from ..ports.image_repo import ImageRepository
from ..ports.storage_repo import StorageRepository
from ..ports.task_runner import TaskRunner
from .auto_save_service import AutoSaveService
from .vision_service import VisionService
from ...exceptions import ValidationError, PayloadTooLargeError, StorageError
from ...media_utils import create_thumbnail

logger = logging.getLogger(__name__)


@dataclass
class UploadService:
    storage_repo: StorageRepository
    image_repo: ImageRepository
    vision: VisionService
    auto_save: AutoSaveService
    task_runner: TaskRunner
    max_file_size: int = 10 * 1024 * 1024
    thumbnail_size: Tuple[int, int] = (200, 200)
    thumbnail_quality: int = 80

    async def _read_validated(self, uploaded: Optional[UploadFile]) -> bytes:
        if uploaded is None or not uploaded.filename:
            raise ValidationError("No image file provided")
        if not (uploaded.content_type or "").startswith("image/"):
            raise ValidationError("Only image files allowed!")

        content = await uploaded.read()
        if not content:
            raise ValidationError("No image file provided")
        if len(content) > self.max_file_size:
            raise PayloadTooLargeError(f"File too large (max {self.max_file_size // (1024*1024)}MB)")
        return content

    def _thumbnail(self, stored_name: str, content: bytes) -> Optional[str]:
        thumb_bytes = create_thumbnail(content, self.thumbnail_size, self.thumbnail_quality)
        if thumb_bytes is None:
            return None
        try:
            return self.storage_repo.save_thumbnail(stored_name, thumb_bytes)
        except StorageError:
            logger.warning(f"Thumbnail for {stored_name} was not stored")
            return None

    def _record_image(self, original_name: str, stored_name: str, analysis: Dict[str, Any], user_id: Optional[int]) -> None:
        try:
            self.image_repo.create(original_name, stored_name, analysis, user_id)
        except StorageError as e:
            logger.warning(f"Could not record image {stored_name}: {e.detail}")

    async def analyze_upload(self, uploaded: Optional[UploadFile], user_id: Optional[int]) -> Dict[str, Any]:
        """
        Store, thumbnail and analyze one image, then hand it to auto-save when
        the request is authenticated. Auto-save is never awaited, so
        `autoSaved` only says a save was attempted.
        """
        content = await self._read_validated(uploaded)
        original_name = uploaded.filename

        # Disk writes, the resize and the SQL insert run off the event loop
        stored = await asyncio.to_thread(self.storage_repo.save_upload, original_name, content)
        thumbnail = await asyncio.to_thread(self._thumbnail, stored.stored_name, content)

        analysis = await self.vision.analyze(content, uploaded.content_type)

        await asyncio.to_thread(self._record_image, original_name, stored.stored_name, analysis, user_id)

        image_info = {
            "originalName": original_name,
            "storedName": stored.stored_name,
            "size": stored.size,
            "thumbnail": thumbnail,
            "fullImage": f"/uploads/{stored.stored_name}",
        }

        if user_id:
            self.task_runner.submit("Auto-save", self.auto_save.attempt, user_id, analysis, dict(image_info))

        return {
            "success": True,
            "analysis": analysis,
            "imageInfo": image_info,
            "autoSaved": bool(user_id),
        }
