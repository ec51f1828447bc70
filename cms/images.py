"""
Image checks and transforms applied before uploads are stored.
"""

from __future__ import annotations

import io
import logging
import re
import time
import uuid
from typing import Optional

from PIL import Image, ImageOps, UnidentifiedImageError

from cms.errors import ImageValidationError

logger = logging.getLogger(__name__)

MIN_IMAGE_BYTES = 100
MAX_UPLOAD_BYTES = 50 * 1024 * 1024

SUPPORTED_FORMATS = ("jpeg", "png", "webp")
HEIC_BRANDS = (b"heic", b"heix", b"hevc", b"mif1")

_PIL_FORMATS = {"jpeg": "JPEG", "jpg": "JPEG", "png": "PNG", "webp": "WEBP"}


def sniff_format(data: bytes) -> Optional[str]:
    """Identify an image by its leading bytes."""
    if data[:3] == b"\xff\xd8\xff":
        return "jpeg"
    if data[:4] == b"\x89PNG":
        return "png"
    if data[8:12] == b"WEBP":
        return "webp"
    if data[:3] == b"GIF":
        return "gif"
    if data[:2] == b"BM":
        return "bmp"
    if data[:4] in (b"II*\x00", b"MM\x00*"):
        return "tiff"
    return None


def validate_image_bytes(data: bytes) -> str:
    """Return the sniffed format, or raise ImageValidationError."""
    if len(data) < MIN_IMAGE_BYTES:
        raise ImageValidationError("File too small to be a valid image")
    if len(data) > MAX_UPLOAD_BYTES:
        raise ImageValidationError("File too large (max 50MB)")
    image_format = sniff_format(data)
    if image_format:
        return image_format
    if data[4:8] == b"ftyp" and data[8:12] in HEIC_BRANDS:
        raise ImageValidationError(
            "HEIC/HEIF format not supported. Please convert to JPEG or PNG first."
        )
    raise ImageValidationError("Unrecognized image format")


def _open(data: bytes) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(data))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageValidationError(
            "Unable to process this image. Please try a different image file."
        ) from exc
    return image


def convert_to_supported_format(data: bytes) -> tuple[bytes, str]:
    """
    Pass JPEG, PNG and WebP through untouched; re-encode anything else as a
    progressive JPEG after applying the EXIF orientation.
    """
    image = _open(data)
    image_format = (image.format or "").lower()
    if image_format in SUPPORTED_FORMATS:
        return data, image_format

    logger.info("Converting image from %s to jpeg", image_format or "unknown")
    rotated = ImageOps.exif_transpose(image).convert("RGB")
    out = io.BytesIO()
    rotated.save(out, format="JPEG", quality=85, progressive=True)
    return out.getvalue(), "jpeg"


def optimize_image(
    data: bytes,
    max_width: int = 1200,
    max_height: int = 1200,
    quality: int = 85,
    format: str = "jpeg",
) -> bytes:
    """Shrink to fit inside max_width x max_height and re-encode."""
    pil_format = _PIL_FORMATS.get(format.lower())
    if pil_format is None:
        raise ImageValidationError(f"Unsupported output format: {format}")

    image = ImageOps.exif_transpose(_open(data))
    # thumbnail() only ever shrinks.
    image.thumbnail((max_width, max_height))
    if pil_format == "JPEG" and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    out = io.BytesIO()
    if pil_format == "PNG":
        image.save(out, format="PNG", optimize=True)
    else:
        image.save(out, format=pil_format, quality=quality)
    return out.getvalue()


def mime_type_for(image_format: str) -> str:
    if image_format == "png":
        return "image/png"
    if image_format == "webp":
        return "image/webp"
    return "image/jpeg"


def generate_file_name(original_name: str, prefix: Optional[str] = None) -> str:
    timestamp = int(time.time() * 1000)
    short_uuid = uuid.uuid4().hex[:8]
    extension = original_name.rsplit(".", 1)[-1].lower() if "." in original_name else ""
    base_name = re.sub(r"\.[^/.]+$", "", re.sub(r"[^a-zA-Z0-9.-]", "_", original_name))
    name = f"{timestamp}-{short_uuid}-{base_name}.{extension}"
    return f"{prefix}-{name}" if prefix else name
