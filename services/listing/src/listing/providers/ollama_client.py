"""Async client for a local Ollama server running a vision model."""

from __future__ import annotations

import base64
from typing import Any, Dict, List, Optional, Sequence

import httpx

from common.config import settings
from common.http import http_client
from common.logging import get_logger

LOGGER = get_logger(__name__)


def _json_object(response: httpx.Response) -> Dict[str, Any]:
    data = response.json()
    if not isinstance(data, dict):
        raise ValueError(f"Unexpected Ollama payload type: {type(data).__name__}")
    return data


class OllamaVisionClient:
    """Liveness, model inventory and image-grounded generation against Ollama."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = (base_url or settings.ollama_host).rstrip("/")
        self.model = model or settings.ollama_model
        self._timeout = timeout or settings.ollama_timeout_s
        self._transport = transport

    async def list_models(self) -> List[str]:
        async with http_client(
            base_url=self._base_url, timeout=10.0, transport=self._transport
        ) as client:
            response = await client.get("/api/tags")
            response.raise_for_status()
            data = _json_object(response)
        return [item.get("name", "") for item in data.get("models", []) if isinstance(item, dict)]

    async def is_available(self) -> bool:
        try:
            await self.list_models()
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.info("Ollama not reachable", base_url=self._base_url, error=str(exc))
            return False
        return True

    async def has_model(self, model: Optional[str] = None) -> bool:
        wanted = model or self.model
        try:
            names = await self.list_models()
        except (httpx.HTTPError, ValueError):
            return False
        return wanted in names

    async def generate(self, prompt: str, images: Sequence[bytes] = ()) -> str:
        """Run a non-streaming generation with the images attached."""

        payload: Dict[str, Any] = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
        }
        if images:
            payload["images"] = [base64.b64encode(image).decode("ascii") for image in images]

        async with http_client(
            base_url=self._base_url, timeout=self._timeout, transport=self._transport
        ) as client:
            response = await client.post("/api/generate", json=payload)
            response.raise_for_status()
            data = _json_object(response)

        LOGGER.info(
            "Ollama generation finished",
            model=self.model,
            images=len(images),
            eval_count=data.get("eval_count"),
        )
        text = data.get("response") or ""
        if not isinstance(text, str):
            raise ValueError("Ollama response field is not text")
        return text.strip()


__all__ = ["OllamaVisionClient"]
