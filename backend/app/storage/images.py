"""
Thumbnail derivation with Pillow.
"""
import logging
from io import BytesIO
from typing import Tuple

from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)

THUMBNAIL_SIZE: Tuple[int, int] = (400, 400)
THUMBNAIL_QUALITY = 80
THUMBNAIL_CONTENT_TYPE = "image/webp"


class UnreadableImageError(ValueError):
    """The bytes could not be decoded as an image."""


def create_thumbnail(
    image_data: bytes,
    max_size: Tuple[int, int] = THUMBNAIL_SIZE,
    quality: int = THUMBNAIL_QUALITY
) -> bytes:
    """
    Create a WebP thumbnail from image bytes.

    The image is fitted inside ``max_size`` preserving aspect ratio and is
    never enlarged. EXIF orientation is applied first so phone photos keep
    their rotation. Animated images keep their first frame.

    :param image_data: Original image bytes
    :param max_size: Bounding box as (width, height)
    :param quality: WebP quality (1-100)
    :return: Thumbnail bytes (WebP)
    :raises UnreadableImageError: If Pillow cannot decode the bytes
    """
    try:
        with Image.open(BytesIO(image_data)) as img:
            img = ImageOps.exif_transpose(img)
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA" if "transparency" in img.info or img.mode in ("LA", "PA") else "RGB")

            # thumbnail() only ever shrinks
            img.thumbnail(max_size, Image.Resampling.LANCZOS)

            output = BytesIO()
            img.save(output, format="WEBP", quality=quality)
            return output.getvalue()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        raise UnreadableImageError(f"Unable to read image: {e}") from e
