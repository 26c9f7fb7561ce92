import io
import logging
from typing import Optional, Tuple
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


def create_thumbnail(image_data: bytes, thumbnail_size: Tuple[int, int], quality: int = 80) -> Optional[bytes]:
    """Center-cropped JPEG thumbnail of exactly `thumbnail_size`, or None if the bytes are not an image."""
    try:
        with Image.open(io.BytesIO(image_data)) as img:
            if img.mode in ('RGBA', 'LA', 'P'):
                img = img.convert('RGB')
            thumb = ImageOps.fit(img, thumbnail_size, Image.Resampling.LANCZOS)
            if thumb.mode != 'RGB':
                thumb = thumb.convert('RGB')
            buf = io.BytesIO()
            thumb.save(buf, format='JPEG', quality=quality, optimize=True)
            return buf.getvalue()
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"Error creating thumbnail: {e}")
        return None
