"""
Optional WebP re-encoding for single-image uploads.
Reduces payload size before it reaches the object store.
"""
import io
import logging
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

DEFAULT_WEBP_QUALITY = 85  # Balance between quality and file size (0-100)
DEFAULT_WEBP_METHOD = 6    # Compression method (0-6, higher = better compression but slower)
MAX_DIMENSION = 3840       # Larger images are downscaled before encoding


def convert_to_webp(
    image_bytes: bytes,
    quality: int = DEFAULT_WEBP_QUALITY,
    method: int = DEFAULT_WEBP_METHOD,
    max_dimension: Optional[int] = MAX_DIMENSION,
) -> Tuple[bytes, bool]:
    """
    Convert image bytes to WebP.

    Returns:
        Tuple[bytes, bool]:
            - Converted bytes, or the original bytes when skipped or failed
            - True if the returned bytes are WebP, False if conversion failed
    """
    try:
        image = Image.open(io.BytesIO(image_bytes))

        if image.format == "WEBP":
            return image_bytes, True

        if image.mode == "P":
            image = image.convert("RGBA")
        elif image.mode not in ("RGB", "RGBA", "LA"):
            # CMYK, L, I;16 and friends
            image = image.convert("RGB")

        if max_dimension:
            image.thumbnail((max_dimension, max_dimension), Image.Resampling.LANCZOS)

        buffer = io.BytesIO()
        image.save(buffer, format="WEBP", quality=quality, method=method, lossless=quality == 100)
        webp_bytes = buffer.getvalue()

        logger.info(f"Converted image to WebP: {len(image_bytes):,} bytes -> {len(webp_bytes):,} bytes")
        return webp_bytes, True

    except UnidentifiedImageError as e:
        logger.warning(f"Cannot identify image format: {str(e)}")
        return image_bytes, False

    except (OSError, ValueError) as e:
        logger.error(f"Error converting image to WebP: {str(e)}", exc_info=True)
        return image_bytes, False


def prepare_upload(image_bytes: bytes, enabled: bool) -> bytes:
    """Bytes to hand to the image orchestrator: WebP when enabled and smaller, else the original."""
    if not enabled:
        return image_bytes

    converted, ok = convert_to_webp(image_bytes)
    if ok and len(converted) < len(image_bytes):
        return converted

    logger.debug("WebP conversion skipped or did not reduce size, using original")
    return image_bytes
