"""Per-image feature extraction with a placeholder fallback."""

from __future__ import annotations

from typing import List, Protocol

from common.logging import get_logger

from ..models import DetectedFeatures
from .google_client import VisionAnnotation

LOGGER = get_logger(__name__)

UNCONFIGURED_FEATURES: List[str] = ["house", "building", "property", "real estate"]
ERROR_FEATURES: List[str] = ["house", "building", "property"]


class VisionBackend(Protocol):
    configured: bool

    async def annotate(self, image: bytes) -> VisionAnnotation:  # pragma: no cover - protocol
        ...


class VisionNotConfiguredError(RuntimeError):
    """Raised when an unconfigured vision backend is asked to annotate."""


class UnconfiguredVisionBackend:
    """Stand-in for the vision service when no API key is set."""

    configured = False

    def __init__(self, reason: str) -> None:
        self.reason = reason

    async def annotate(self, image: bytes) -> VisionAnnotation:
        raise VisionNotConfiguredError(self.reason)


class FeatureExtractor:
    """Turns vision annotations into a filtered feature list.

    When no vision backend is configured, or a call fails, a fixed placeholder
    list is returned so the rest of the pipeline can still run.
    """

    def __init__(self, backend: VisionBackend, min_confidence: float = 0.7) -> None:
        self._backend = backend
        self._min_confidence = min_confidence

    @property
    def configured(self) -> bool:
        return self._backend.configured

    async def extract(self, image: bytes, filename: str = "") -> DetectedFeatures:
        if not self._backend.configured:
            LOGGER.info("Vision backend not configured; using placeholder features", filename=filename)
            return DetectedFeatures(features=list(UNCONFIGURED_FEATURES), detected_text="")

        try:
            annotation = await self._backend.annotate(image)
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Vision API error; using placeholder features", filename=filename, error=str(exc))
            return DetectedFeatures(features=list(ERROR_FEATURES), detected_text="")

        features = [
            label.description
            for label in annotation.labels
            if label.score > self._min_confidence and label.description
        ]
        return DetectedFeatures(features=features, detected_text=annotation.text)


__all__ = [
    "ERROR_FEATURES",
    "FeatureExtractor",
    "UNCONFIGURED_FEATURES",
    "UnconfiguredVisionBackend",
    "VisionBackend",
    "VisionNotConfiguredError",
]
