"""Client for OpenAI chat completions."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from common.config import settings
from common.http import http_client
from common.logging import get_logger

LOGGER = get_logger(__name__)


class OpenAIChatClient:
    """Minimal system + user chat completion wrapper."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or settings.openai_api_key
        if not self._api_key:
            raise RuntimeError("OPENAI_API_KEY not configured")
        self._base_url = (base_url or settings.openai_base_url).rstrip("/")
        self._model = model or settings.openai_model
        self._temperature = settings.openai_temperature if temperature is None else temperature
        self._max_tokens = max_tokens or settings.openai_max_tokens
        self._timeout = timeout or settings.request_timeout_s
        self._transport = transport

    @property
    def model(self) -> str:
        return self._model

    async def complete(self, system: str, prompt: str) -> str:
        """Return the assistant message content for a single exchange."""

        messages: List[Dict[str, str]] = [
            {"role": "system", "content": system},
            {"role": "user", "content": prompt},
        ]
        async with http_client(
            base_url=self._base_url,
            bearer_token=self._api_key,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(
                "/v1/chat/completions",
                json={
                    "model": self._model,
                    "messages": messages,
                    "max_tokens": self._max_tokens,
                    "temperature": self._temperature,
                },
            )
            response.raise_for_status()
            data: Dict[str, Any] = response.json()

        try:
            content = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            raise RuntimeError(f"Unexpected chat completion payload: {list(data)}") from exc

        usage = data.get("usage") or {}
        LOGGER.info(
            "Chat completion finished",
            model=self._model,
            prompt_tokens=usage.get("prompt_tokens"),
            completion_tokens=usage.get("completion_tokens"),
        )
        return content.strip()


__all__ = ["OpenAIChatClient"]
