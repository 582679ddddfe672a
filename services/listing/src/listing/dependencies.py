"""Dependency wiring for the listing service."""

from __future__ import annotations

from functools import lru_cache, partial

from common.config import settings
from common.logging import get_logger

from .generator import CloudGenerator, DescriptionGenerator, LocalGenerator, UnconfiguredGenerator
from .models import Backend
from .orchestrator import ListingOrchestrator
from .providers.ollama_client import OllamaVisionClient
from .providers.openai_client import OpenAIChatClient
from .utils.image_compression import compress_image
from .vision.extractor import FeatureExtractor, UnconfiguredVisionBackend, VisionBackend
from .vision.google_client import GoogleVisionClient

LOGGER = get_logger(__name__)


@lru_cache(maxsize=1)
def get_vision_client() -> VisionBackend:
    if settings.google_vision_api_key:
        return GoogleVisionClient()
    LOGGER.info("GOOGLE_VISION_API_KEY not set; feature extraction will use placeholders")
    return UnconfiguredVisionBackend(
        "Google Vision is not configured. Set GOOGLE_VISION_API_KEY to detect features."
    )


@lru_cache(maxsize=1)
def get_feature_extractor() -> FeatureExtractor:
    return FeatureExtractor(get_vision_client(), min_confidence=settings.vision_confidence_threshold)


@lru_cache(maxsize=1)
def get_ollama_client() -> OllamaVisionClient:
    return OllamaVisionClient()


@lru_cache(maxsize=1)
def get_cloud_generator() -> DescriptionGenerator:
    if not settings.openai_api_key:
        return UnconfiguredGenerator(
            Backend.OPENAI,
            "OpenAI service is not configured. Set OPENAI_API_KEY to use this backend.",
        )
    return CloudGenerator(OpenAIChatClient())


@lru_cache(maxsize=1)
def get_local_generator() -> DescriptionGenerator:
    return LocalGenerator(get_ollama_client(), host=settings.ollama_host)


@lru_cache(maxsize=1)
def get_orchestrator() -> ListingOrchestrator:
    compressor = partial(
        compress_image,
        threshold=settings.compression_threshold_bytes,
        max_width=settings.compression_max_width,
        max_height=settings.compression_max_height,
        quality=settings.compression_quality,
        retry_quality=settings.compression_retry_quality,
    )
    return ListingOrchestrator(
        extractor=get_feature_extractor(),
        generators={
            Backend.OPENAI: get_cloud_generator(),
            Backend.OLLAMA: get_local_generator(),
        },
        compressor=compressor,
    )


__all__ = [
    "get_cloud_generator",
    "get_feature_extractor",
    "get_local_generator",
    "get_ollama_client",
    "get_orchestrator",
    "get_vision_client",
]
