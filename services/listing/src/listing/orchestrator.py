"""Analyze-images orchestrator."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence
from uuid import uuid4

from common.logging import get_logger

from .categorizer import categorize_features
from .errors import BackendError, ListingError, ValidationError
from .generator import DescriptionGenerator
from .models import (
    AnalysisResult,
    Backend,
    CategorizedFeatures,
    CustomizationOptions,
    FeatureBundle,
    GenerationResult,
    GenerationState,
    UploadedImage,
)
from .utils.image_compression import compress_image, summarize_compression
from .vision.extractor import FeatureExtractor

LOGGER = get_logger(__name__)


def merge_features(feature_lists: Iterable[Sequence[str]]) -> List[str]:
    """Flatten per-image features, keeping the first occurrence of each."""

    merged: List[str] = []
    seen = set()
    for features in feature_lists:
        for feature in features:
            if feature not in seen:
                seen.add(feature)
                merged.append(feature)
    return merged


def join_detected_text(texts: Iterable[str]) -> str:
    return " ".join(text for text in texts if text)


@dataclass
class AnalysisOutcome:
    """Everything produced for one request, including partial results on failure."""

    request_id: str
    state: GenerationState = GenerationState.UNSTARTED
    history: List[GenerationState] = field(default_factory=list)
    analysis_results: List[AnalysisResult] = field(default_factory=list)
    features: List[str] = field(default_factory=list)
    detected_text: str = ""
    categorized: Optional[CategorizedFeatures] = None
    generation: Optional[GenerationResult] = None
    error: Optional[ListingError] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "features": list(self.features),
            "detectedText": self.detected_text,
            "analysisResults": [result.to_payload() for result in self.analysis_results],
            "compression": summarize_compression(self.analysis_results).to_payload(),
        }
        if self.generation is not None:
            payload["description"] = self.generation.description
            payload["usedFeatures"] = self.generation.used_features
            payload["featureSource"] = self.generation.feature_source.value
        if self.error is not None:
            payload["error"] = self.error.message
            payload["errorKind"] = self.error.kind.value
        return payload


class ListingOrchestrator:
    """Preprocess -> extract -> categorize -> generate, one request at a time."""

    def __init__(
        self,
        extractor: FeatureExtractor,
        generators: Mapping[Backend, DescriptionGenerator],
        compressor: Optional[Callable[[bytes], bytes]] = None,
    ) -> None:
        self._extractor = extractor
        self._generators = dict(generators)
        self._compress = compressor or compress_image

    def _advance(self, outcome: AnalysisOutcome, state: GenerationState, **fields: Any) -> None:
        outcome.state = state
        outcome.history.append(state)
        LOGGER.info("Analysis state changed", request_id=outcome.request_id, state=state.value, **fields)

    async def _preprocess(self, image: UploadedImage) -> AnalysisResult:
        data = await asyncio.to_thread(self._compress, image.data)
        return AnalysisResult(
            features=[],
            detected_text="",
            filename=image.filename,
            original_size=image.original_size,
            compressed_size=len(data),
            data=data,
        )

    async def _extract(self, result: AnalysisResult) -> AnalysisResult:
        detected = await self._extractor.extract(result.data, result.filename)
        result.features = detected.features
        result.detected_text = detected.detected_text
        return result

    async def run(
        self, images: Sequence[UploadedImage], options: CustomizationOptions
    ) -> AnalysisOutcome:
        outcome = AnalysisOutcome(request_id=uuid4().hex)
        if not images:
            raise ValidationError("No images provided")

        generator = self._generators.get(options.backend)
        if generator is None:
            raise ValidationError(f"Unsupported API service: {options.backend.value}")

        try:
            self._advance(outcome, GenerationState.PREPROCESSING, images=len(images))
            outcome.analysis_results = list(
                await asyncio.gather(*(self._preprocess(image) for image in images))
            )

            self._advance(outcome, GenerationState.EXTRACTING_FEATURES)
            await asyncio.gather(*(self._extract(result) for result in outcome.analysis_results))
            outcome.features = merge_features(result.features for result in outcome.analysis_results)
            outcome.detected_text = join_detected_text(
                result.detected_text for result in outcome.analysis_results
            )

            if options.has_user_features:
                self._advance(outcome, GenerationState.USER_FEATURES)
            elif options.backend is Backend.OPENAI:
                self._advance(outcome, GenerationState.CATEGORIZING)
                outcome.categorized = categorize_features(outcome.features)

            self._advance(outcome, GenerationState.GENERATING, backend=options.backend.value)
            bundle = FeatureBundle(
                features=outcome.features,
                detected_text=outcome.detected_text,
                images=[result.data for result in outcome.analysis_results],
                categorized=outcome.categorized,
            )
            try:
                outcome.generation = await generator.generate(bundle, options)
            except BackendError as exc:
                outcome.error = exc
                self._advance(outcome, GenerationState.FAILED, error_kind=exc.kind.value)
                return outcome
        except Exception:
            self._advance(outcome, GenerationState.FAILED, error_kind="internal")
            raise

        self._advance(outcome, GenerationState.DONE, source=outcome.generation.feature_source.value)
        return outcome


__all__ = ["AnalysisOutcome", "ListingOrchestrator", "join_detected_text", "merge_features"]
