"""Vision backends used for per-image feature extraction."""

from .extractor import (
    ERROR_FEATURES,
    UNCONFIGURED_FEATURES,
    FeatureExtractor,
    UnconfiguredVisionBackend,
    VisionNotConfiguredError,
)
from .google_client import GoogleVisionClient, VisionAnnotation, VisionLabel

__all__ = [
    "ERROR_FEATURES",
    "FeatureExtractor",
    "GoogleVisionClient",
    "UNCONFIGURED_FEATURES",
    "UnconfiguredVisionBackend",
    "VisionAnnotation",
    "VisionLabel",
    "VisionNotConfiguredError",
]
