"""Image inspection and preview utilities for gallery uploads"""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional

import requests
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger("ImageProcessor")

MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
    "GIF": "image/gif",
}


@dataclass
class ImageMetadata:
    format: str
    mime_type: str
    width: int
    height: int
    bytes_size: int


def fetch_asset_bytes(asset_url: str, timeout: int = 30) -> bytes:
    """Fetch image bytes from a download URL"""
    try:
        response = requests.get(asset_url, timeout=timeout)
        response.raise_for_status()
        return response.content
    except requests.RequestException as e:
        logger.error(f"Failed to fetch asset from {asset_url}: {e}")
        raise


def get_image_metadata(image_bytes: bytes) -> ImageMetadata:
    """Identify an uploaded payload.

    Raises:
        ValueError: If the bytes are not an image Pillow can read, or the
            format is not one the gallery serves
    """
    try:
        with Image.open(BytesIO(image_bytes)) as img:
            image_format = img.format or ""
            width, height = img.size
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Payload is not a readable image: {e}")

    mime_type = MIME_TYPES.get(image_format)
    if mime_type is None:
        raise ValueError(f"Unsupported image format '{image_format}'. Supported: {', '.join(MIME_TYPES)}")

    return ImageMetadata(
        format=image_format,
        mime_type=mime_type,
        width=width,
        height=height,
        bytes_size=len(image_bytes),
    )


def create_thumbnail(
    image_bytes: bytes,
    max_dim: int = 512,
    quality: int = 75,
    format: str = "JPEG"
) -> bytes:
    """Create downscaled thumbnail, re-encode as JPEG"""
    with Image.open(BytesIO(image_bytes)) as img:
        # JPEG has no alpha channel; flatten onto white
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode == "P":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            img = background
        elif img.mode != "RGB":
            img = img.convert("RGB")

        img.thumbnail((max_dim, max_dim), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format=format, quality=quality, optimize=True)
        return output.getvalue()


def guess_filename(filename: Optional[str], metadata: ImageMetadata) -> str:
    """Fall back to a generic name with the detected extension"""
    if filename:
        return filename
    extension = "jpg" if metadata.format == "JPEG" else metadata.format.lower()
    return f"image.{extension}"
