"""Standard HTTP client helpers for external integrations."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx


def _build_headers(bearer_token: Optional[str], api_key: Optional[str]) -> Dict[str, str]:
    headers: Dict[str, str] = {"User-Agent": "listing-writer/1.0"}
    if bearer_token:
        headers["Authorization"] = f"Bearer {bearer_token}"
    if api_key:
        headers["x-goog-api-key"] = api_key
    return headers


@asynccontextmanager
async def http_client(
    base_url: Optional[str] = None,
    bearer_token: Optional[str] = None,
    api_key: Optional[str] = None,
    timeout: float = 30.0,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AsyncIterator[httpx.AsyncClient]:
    """Provide a configured async HTTP client."""

    headers = _build_headers(bearer_token, api_key)
    async with httpx.AsyncClient(
        base_url=base_url or "",
        timeout=timeout,
        headers=headers,
        transport=transport,
    ) as client:
        yield client


__all__ = ["http_client"]
