"""Description generation strategies for the cloud and local backends."""

from __future__ import annotations

from typing import Protocol

import httpx

from common.logging import get_logger

from .categorizer import categorize_features
from .errors import ModelNotInstalledError, ServiceUnavailableError, UpstreamError
from .markup import outline_markup
from .models import (
    Backend,
    CustomizationOptions,
    FeatureBundle,
    FeatureSource,
    GenerationResult,
    OutputFormat,
)
from .prompts import (
    COPYWRITER_SYSTEM_PROMPT,
    FEATURE_ANALYST_SYSTEM_PROMPT,
    build_cloud_feature_prompt,
    build_description_prompt,
    build_local_feature_prompt,
    clean_generated_text,
    parse_feature_text,
    split_combined_response,
)
from .providers.ollama_client import OllamaVisionClient
from .providers.openai_client import OpenAIChatClient

LOGGER = get_logger(__name__)


class DescriptionGenerator(Protocol):
    backend: Backend

    async def generate(
        self, bundle: FeatureBundle, options: CustomizationOptions
    ) -> GenerationResult:  # pragma: no cover - protocol
        ...


def _finalize(text: str, options: CustomizationOptions) -> str:
    features, body = split_combined_response(text)
    if features:
        LOGGER.info("Dropped feature block from description reply", features=features)
    description = clean_generated_text(body)
    if options.output_format is OutputFormat.HTML:
        outline = outline_markup(description)
        if not outline.is_structured:
            LOGGER.warning(
                "Generated markup is missing sections",
                headings=len(outline.headings),
                list_items=len(outline.list_items),
            )
        LOGGER.info("Generated HTML description", words=outline.word_count)
    return description


def _join_features(text: str) -> str:
    return ", ".join(parse_feature_text(text))


class UnconfiguredGenerator:
    """Stand-in for a backend whose credentials or host are missing."""

    def __init__(self, backend: Backend, reason: str) -> None:
        self.backend = backend
        self.reason = reason

    async def generate(self, bundle: FeatureBundle, options: CustomizationOptions) -> GenerationResult:
        raise ServiceUnavailableError(self.reason)


class CloudGenerator:
    """Vision labels -> categorized prompt -> OpenAI chat completion."""

    backend = Backend.OPENAI

    def __init__(self, client: OpenAIChatClient) -> None:
        self._client = client

    async def _complete(self, system: str, prompt: str, phase: str) -> str:
        try:
            return await self._client.complete(system, prompt)
        except (httpx.HTTPError, RuntimeError, ValueError) as exc:
            LOGGER.error("OpenAI request failed", phase=phase, model=self._client.model, error=str(exc))
            raise UpstreamError(
                f"Failed to generate {phase} with OpenAI. Check the API key, quota and model settings."
            ) from exc

    async def generate_features(self, bundle: FeatureBundle, options: CustomizationOptions) -> str:
        categorized = bundle.categorized or categorize_features(bundle.features)
        prompt = build_cloud_feature_prompt(categorized, bundle.features, bundle.detected_text, options)
        curated = _join_features(await self._complete(FEATURE_ANALYST_SYSTEM_PROMPT, prompt, "features"))
        return curated or ", ".join(bundle.features)

    async def generate(self, bundle: FeatureBundle, options: CustomizationOptions) -> GenerationResult:
        if options.has_user_features:
            feature_text = options.features.strip()
            source = FeatureSource.USER
        else:
            feature_text = await self.generate_features(bundle, options)
            source = FeatureSource.DETECTED

        prompt = build_description_prompt(feature_text, options, detected_text=bundle.detected_text)
        raw = await self._complete(COPYWRITER_SYSTEM_PROMPT, prompt, "description")
        description = _finalize(raw, options)
        if not description:
            raise UpstreamError("OpenAI returned an empty description.")
        return GenerationResult(description=description, used_features=feature_text, feature_source=source)


class LocalGenerator:
    """Images -> Ollama vision model, with explicit readiness checks."""

    backend = Backend.OLLAMA

    def __init__(self, client: OllamaVisionClient, host: str = "") -> None:
        self._client = client
        self._host = host

    async def ensure_ready(self) -> None:
        if not await self._client.is_available():
            where = f" on {self._host}" if self._host else ""
            raise ServiceUnavailableError(
                f"Ollama service is not available. Please make sure Ollama is running{where}."
            )
        if not await self._client.has_model():
            raise ModelNotInstalledError(self._client.model)

    async def _generate(self, prompt: str, bundle: FeatureBundle, phase: str) -> str:
        try:
            return await self._client.generate(prompt, bundle.images)
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.error("Ollama request failed", phase=phase, model=self._client.model, error=str(exc))
            raise UpstreamError(f"Failed to generate {phase} with Ollama.") from exc

    async def generate_features(self, bundle: FeatureBundle, options: CustomizationOptions) -> str:
        raw = await self._generate(build_local_feature_prompt(options), bundle, "features")
        return _join_features(raw) or ", ".join(bundle.features)

    async def generate(self, bundle: FeatureBundle, options: CustomizationOptions) -> GenerationResult:
        await self.ensure_ready()

        if options.has_user_features:
            feature_text = options.features.strip()
            source = FeatureSource.USER
        else:
            feature_text = await self.generate_features(bundle, options)
            source = FeatureSource.DETECTED

        prompt = build_description_prompt(feature_text, options, with_images=True)
        description = _finalize(await self._generate(prompt, bundle, "description"), options)
        if not description:
            raise UpstreamError("Ollama returned an empty description.")
        return GenerationResult(description=description, used_features=feature_text, feature_source=source)


__all__ = [
    "CloudGenerator",
    "DescriptionGenerator",
    "LocalGenerator",
    "UnconfiguredGenerator",
]
