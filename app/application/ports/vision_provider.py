from typing import Any, Dict, Protocol


class VisionProvider(Protocol):
    def analyze(self, image_bytes: bytes, mime_type: str) -> Dict[str, Any]:
        """Return the provider's raw payload; normalisation happens in the service layer."""
        ...
