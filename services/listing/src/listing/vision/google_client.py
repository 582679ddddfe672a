"""Google Cloud Vision client for label and text detection."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import httpx

from common.config import settings
from common.http import http_client
from common.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(slots=True)
class VisionLabel:
    description: str
    score: float


@dataclass(slots=True)
class VisionAnnotation:
    labels: List[VisionLabel]
    text: str = ""


class GoogleVisionClient:
    """Typed wrapper around the ``images:annotate`` REST endpoint."""

    configured = True

    def __init__(
        self,
        api_key: Optional[str] = None,
        endpoint: Optional[str] = None,
        max_labels: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key or settings.google_vision_api_key
        if not self._api_key:
            raise RuntimeError("GOOGLE_VISION_API_KEY not configured")
        self._endpoint = endpoint or settings.google_vision_endpoint
        self._max_labels = max_labels or settings.vision_max_labels
        self._timeout = timeout or settings.request_timeout_s
        self._transport = transport

    def _build_request(self, image: bytes) -> Dict[str, Any]:
        return {
            "requests": [
                {
                    "image": {"content": base64.b64encode(image).decode("ascii")},
                    "features": [
                        {"type": "LABEL_DETECTION", "maxResults": self._max_labels},
                        {"type": "TEXT_DETECTION"},
                    ],
                }
            ]
        }

    @staticmethod
    def _parse_response(payload: Dict[str, Any]) -> VisionAnnotation:
        responses = payload.get("responses") or [{}]
        first = responses[0] or {}
        error = first.get("error")
        if error:
            raise RuntimeError(f"Vision API error: {error.get('message', error)}")

        labels = [
            VisionLabel(
                description=(item.get("description") or "").strip(),
                score=float(item.get("score") or 0.0),
            )
            for item in first.get("labelAnnotations") or []
        ]
        text_annotations = first.get("textAnnotations") or []
        text = (text_annotations[0].get("description") or "").strip() if text_annotations else ""
        return VisionAnnotation(labels=labels, text=text)

    async def annotate(self, image: bytes) -> VisionAnnotation:
        """Run label and text detection on a single image."""

        async with http_client(
            api_key=self._api_key,
            timeout=self._timeout,
            transport=self._transport,
        ) as client:
            response = await client.post(self._endpoint, json=self._build_request(image))
            response.raise_for_status()
            payload = response.json()

        annotation = self._parse_response(payload)
        LOGGER.debug(
            "Vision annotation received",
            labels=len(annotation.labels),
            has_text=bool(annotation.text),
        )
        return annotation


__all__ = ["GoogleVisionClient", "VisionAnnotation", "VisionLabel"]
