import logging
import os
import secrets

from ...application.ports.storage_repo import StorageRepository, StoredFile
from ...exceptions import StorageError
from ...utils import utcnow

logger = logging.getLogger(__name__)


def generate_stored_name(original_name: str) -> str:
    """`<epoch-ms>-<9 random digits><ext>`, unique per physical upload."""
    ext = os.path.splitext(original_name or "")[1].lower()
    millis = int(utcnow().timestamp() * 1000)
    return f"{millis}-{secrets.randbelow(10**9)}{ext}"


class LocalStorageRepository(StorageRepository):
    def __init__(self, upload_dir: str) -> None:
        self.upload_dir = upload_dir
        os.makedirs(self.upload_dir, exist_ok=True)

    def _write(self, name: str, data: bytes) -> str:
        path = os.path.join(self.upload_dir, name)
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error(f"Error saving file {name}: {e}")
            raise StorageError("Failed to store file") from e
        return path

    def save_upload(self, original_name: str, data: bytes) -> StoredFile:
        stored_name = generate_stored_name(original_name)
        path = self._write(stored_name, data)
        return StoredFile(stored_name=stored_name, path=path, size=len(data))

    def save_thumbnail(self, stored_name: str, data: bytes) -> str:
        thumb_name = f"thumb-{stored_name}"
        self._write(thumb_name, data)
        return f"/uploads/{thumb_name}"
