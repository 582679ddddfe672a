"""Shrink oversized uploads before they are sent to vision backends."""

from __future__ import annotations

from io import BytesIO
from typing import Iterable, Optional, Tuple

from PIL import Image, ImageOps

from common.logging import get_logger

from ..models import AnalysisResult, CompressionSummary

LOGGER = get_logger(__name__)

DEFAULT_THRESHOLD_BYTES = 500 * 1024
DEFAULT_MAX_WIDTH = 1920
DEFAULT_MAX_HEIGHT = 1080
DEFAULT_QUALITY = 80
DEFAULT_RETRY_QUALITY = 70

SUPPORTED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/webp"}


class ImageCompressionError(RuntimeError):
    """Raised when an image cannot be decoded or re-encoded."""


def is_valid_image_type(content_type: Optional[str]) -> bool:
    return (content_type or "").lower() in SUPPORTED_CONTENT_TYPES


def fit_within(width: int, height: int, max_width: int, max_height: int) -> Tuple[int, int]:
    """Scale (width, height) down to fit the box, keeping aspect ratio.

    Images already inside the box are returned unchanged.
    """

    if width <= 0 or height <= 0:
        raise ValueError("Image dimensions must be positive")
    if width <= max_width and height <= max_height:
        return width, height
    if width * max_height > height * max_width:
        return max_width, max(1, round(height * max_width / width))
    return max(1, round(width * max_height / height)), max_height


def _encode_jpeg(image: Image.Image, quality: int) -> bytes:
    buffer = BytesIO()
    image.save(buffer, format="JPEG", quality=quality, progressive=True, optimize=True)
    return buffer.getvalue()


def _reencode(
    data: bytes,
    threshold: int,
    max_width: int,
    max_height: int,
    quality: int,
    retry_quality: int,
) -> bytes:
    try:
        with Image.open(BytesIO(data)) as opened:
            image = ImageOps.exif_transpose(opened)
            if image.mode not in ("RGB", "L"):
                image = image.convert("RGB")
            target = fit_within(image.width, image.height, max_width, max_height)
            if target != image.size:
                image = image.resize(target, Image.Resampling.LANCZOS)
            encoded = _encode_jpeg(image, quality)
            if len(encoded) > threshold and retry_quality < quality:
                encoded = _encode_jpeg(image, retry_quality)
    except Exception as exc:  # noqa: BLE001
        raise ImageCompressionError(f"Failed to compress image: {exc}") from exc
    return encoded


def compress_image(
    data: bytes,
    threshold: int = DEFAULT_THRESHOLD_BYTES,
    max_width: int = DEFAULT_MAX_WIDTH,
    max_height: int = DEFAULT_MAX_HEIGHT,
    quality: int = DEFAULT_QUALITY,
    retry_quality: int = DEFAULT_RETRY_QUALITY,
) -> bytes:
    """Return a JPEG that fits the pixel box, or ``data`` untouched.

    Inputs at or under ``threshold`` bytes are passed through. Decode or encode
    failures and outputs that would not be smaller also return the original.
    """

    if len(data) <= threshold:
        return data

    try:
        compressed = _reencode(data, threshold, max_width, max_height, quality, retry_quality)
    except ImageCompressionError as exc:
        LOGGER.warning("Image compression failed; using original", error=str(exc), size=len(data))
        return data

    if len(compressed) >= len(data):
        LOGGER.info("Compression did not reduce size", original=len(data), compressed=len(compressed))
        return data

    LOGGER.info("Image compressed", original=len(data), compressed=len(compressed))
    return compressed


def format_file_size(size: int) -> str:
    """Human readable size using 1024 steps, e.g. ``1.5 KB``."""

    if size <= 0:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB"]
    index = 0
    value = float(size)
    while value >= 1024 and index < len(units) - 1:
        value /= 1024
        index += 1
    return f"{round(value, 2):g} {units[index]}"


def summarize_compression(results: Iterable[AnalysisResult]) -> CompressionSummary:
    original = 0
    compressed = 0
    for result in results:
        original += result.original_size
        compressed += result.compressed_size
    return CompressionSummary(original_bytes=original, compressed_bytes=compressed)


__all__ = [
    "ImageCompressionError",
    "compress_image",
    "fit_within",
    "format_file_size",
    "is_valid_image_type",
    "summarize_compression",
]
