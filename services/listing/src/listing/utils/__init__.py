"""Utility helpers for the listing service."""

from .image_compression import (
    ImageCompressionError,
    compress_image,
    fit_within,
    format_file_size,
    is_valid_image_type,
    summarize_compression,
)

__all__ = [
    "ImageCompressionError",
    "compress_image",
    "fit_within",
    "format_file_size",
    "is_valid_image_type",
    "summarize_compression",
]
