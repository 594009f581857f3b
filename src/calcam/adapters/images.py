"""Pillow-based decoding of uploaded photos into RGBA bitmaps."""

import io

from PIL import Image, UnidentifiedImageError

from calcam.domain.errors import InvalidImage
from calcam.domain.vision import Bitmap

MAX_UPLOAD_BYTES = 5 * 1024 * 1024
MAX_DIMENSION = 640
MAX_PIXELS = 50_000_000
ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP"}


def validate_image_upload(image_bytes: bytes) -> str:
    """Check upload size and format, returning the detected format name."""
    if not image_bytes:
        raise InvalidImage("Image payload is empty", size=0)
    if len(image_bytes) > MAX_UPLOAD_BYTES:
        raise InvalidImage(
            "Image must not exceed 5MB",
            size=len(image_bytes),
            limit=MAX_UPLOAD_BYTES,
        )
    image_format = _detect_format(image_bytes)
    if image_format not in ALLOWED_FORMATS:
        raise InvalidImage(
            "Only JPEG, PNG and WebP images are supported", format=image_format
        )
    return image_format


def decode_image(
    image_bytes: bytes,
    max_dimension: int | None = MAX_DIMENSION,
    max_pixels: int = MAX_PIXELS,
) -> Bitmap:
    """Decode image bytes into an RGBA bitmap, downscaling large photos.

    Images above ``max_pixels`` are rejected from their header, before any
    pixel data is decoded.
    """
    try:
        with Image.open(io.BytesIO(image_bytes)) as image:
            width, height = image.size
            if width * height > max_pixels:
                raise InvalidImage(
                    "Image has too many pixels",
                    width=width,
                    height=height,
                    limit=max_pixels,
                )
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise InvalidImage("Image could not be decoded", size=len(image_bytes)) from exc

    if max_dimension is not None:
        width, height = rgba.size
        ratio = min(max_dimension / width, max_dimension / height, 1)
        if ratio < 1:
            new_size = (max(1, round(width * ratio)), max(1, round(height * ratio)))
            rgba = rgba.resize(new_size, Image.Resampling.LANCZOS)

    return Bitmap(width=rgba.width, height=rgba.height, pixels=rgba.tobytes())


def _detect_format(image_bytes: bytes) -> str | None:
    """Infer the image format from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "JPEG"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "PNG"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "WEBP"
    return None
