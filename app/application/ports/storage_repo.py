from dataclasses import dataclass
from typing import Protocol


@dataclass
class StoredFile:
    stored_name: str
    path: str
    size: int


class StorageRepository(Protocol):
    def save_upload(self, original_name: str, data: bytes) -> StoredFile:
        ...

    def save_thumbnail(self, stored_name: str, data: bytes) -> str:
        ...
