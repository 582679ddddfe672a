"""Shared data models for the listing service."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


class Backend(str, Enum):
    """Generation backends a request can target."""

    OPENAI = "openai"
    OLLAMA = "ollama"

    @classmethod
    def parse(cls, value: Optional[str], default: "Backend") -> "Backend":
        if not value:
            return default
        return cls(value.strip().lower())


class OutputFormat(str, Enum):
    TEXT = "text"
    HTML = "html"

    @classmethod
    def parse(cls, value: Optional[str], default: "OutputFormat") -> "OutputFormat":
        if not value:
            return default
        return cls(value.strip().lower())


class FeatureSource(str, Enum):
    USER = "user"
    DETECTED = "detected"


class GenerationState(str, Enum):
    """Lifecycle of a single analyze request."""

    UNSTARTED = "unstarted"
    PREPROCESSING = "preprocessing"
    EXTRACTING_FEATURES = "extracting_features"
    CATEGORIZING = "categorizing"
    USER_FEATURES = "user_features"
    GENERATING = "generating"
    DONE = "done"
    FAILED = "failed"


@dataclass(slots=True)
class UploadedImage:
    """Raw upload as received from the multipart form."""

    data: bytes
    filename: str
    content_type: Optional[str] = None

    @property
    def original_size(self) -> int:
        return len(self.data)


@dataclass(slots=True)
class DetectedFeatures:
    """Output of a single feature-extraction call."""

    features: List[str]
    detected_text: str = ""


@dataclass(slots=True)
class AnalysisResult:
    """Per-image analysis outcome."""

    features: List[str]
    detected_text: str
    filename: str
    original_size: int
    compressed_size: int
    data: bytes = field(default=b"", repr=False)

    def to_payload(self) -> Dict[str, object]:
        return {
            "features": list(self.features),
            "detectedText": self.detected_text,
            "filename": self.filename,
            "originalSize": self.original_size,
            "compressedSize": self.compressed_size,
        }


@dataclass(slots=True)
class CategorizedFeatures:
    """Features partitioned into the buckets used for prompt assembly."""

    structural: List[str] = field(default_factory=list)
    interior: List[str] = field(default_factory=list)
    exterior: List[str] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    architectural: List[str] = field(default_factory=list)
    location: List[str] = field(default_factory=list)

    def buckets(self) -> Dict[str, List[str]]:
        return {
            "structural": self.structural,
            "interior": self.interior,
            "exterior": self.exterior,
            "materials": self.materials,
            "architectural": self.architectural,
            "location": self.location,
        }

    def is_empty(self) -> bool:
        return not any(self.buckets().values())


@dataclass(slots=True)
class CustomizationOptions:
    target_audience: str = "general buyers"
    price_range: str = ""
    marketing_style: str = "professional"
    property_type: str = ""
    backend: Backend = Backend.OLLAMA
    features: str = ""
    output_format: OutputFormat = OutputFormat.HTML

    @property
    def has_user_features(self) -> bool:
        return bool(self.features.strip())


@dataclass(slots=True)
class FeatureBundle:
    """Everything the generator may draw on for one request."""

    features: List[str]
    detected_text: str
    images: List[bytes]
    categorized: Optional[CategorizedFeatures] = None


@dataclass(slots=True)
class GenerationResult:
    description: str
    used_features: str
    feature_source: FeatureSource


@dataclass(slots=True)
class CompressionSummary:
    original_bytes: int
    compressed_bytes: int

    @property
    def saved_bytes(self) -> int:
        return max(0, self.original_bytes - self.compressed_bytes)

    @property
    def percent_saved(self) -> float:
        if self.original_bytes <= 0:
            return 0.0
        return round(self.saved_bytes / self.original_bytes * 100, 1)

    def to_payload(self) -> Dict[str, object]:
        return {
            "originalBytes": self.original_bytes,
            "compressedBytes": self.compressed_bytes,
            "savedBytes": self.saved_bytes,
            "percentSaved": self.percent_saved,
        }


__all__ = [
    "AnalysisResult",
    "Backend",
    "CategorizedFeatures",
    "CompressionSummary",
    "CustomizationOptions",
    "DetectedFeatures",
    "FeatureBundle",
    "FeatureSource",
    "GenerationResult",
    "GenerationState",
    "OutputFormat",
    "UploadedImage",
]
