"""Shared fixtures for listing service unit tests."""

from __future__ import annotations

import os
from io import BytesIO
from typing import Callable

import pytest
from PIL import Image


def _noise_image(width: int, height: int, fmt: str = "PNG") -> bytes:
    image = Image.frombytes("RGB", (width, height), os.urandom(width * height * 3))
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


def _flat_image(width: int, height: int, fmt: str = "PNG") -> bytes:
    image = Image.new("RGB", (width, height), color=(120, 90, 60))
    buffer = BytesIO()
    image.save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def noise_image() -> Callable[..., bytes]:
    """Incompressible image bytes; large dimensions land well over 500 KiB."""

    return _noise_image


@pytest.fixture
def flat_image() -> Callable[..., bytes]:
    """Single-colour image bytes; tiny on disk whatever the dimensions."""

    return _flat_image
