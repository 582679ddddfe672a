"""Error kinds raised by the listing pipeline."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM_UNAVAILABLE = "upstream-unavailable"
    MODEL_MISSING = "model-missing"
    UPSTREAM_ERROR = "upstream-error"
    INTERNAL = "internal"


class ListingError(RuntimeError):
    """Base error carrying a kind and a message safe to show to clients."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ListingError):
    kind = ErrorKind.VALIDATION


class BackendError(ListingError):
    """Failure attributable to a generation backend."""


class ServiceUnavailableError(BackendError):
    kind = ErrorKind.UPSTREAM_UNAVAILABLE


class ModelNotInstalledError(BackendError):
    kind = ErrorKind.MODEL_MISSING

    def __init__(self, model: str) -> None:
        super().__init__(
            f"Model {model} is not available. Install it with: ollama pull {model}"
        )
        self.model = model


class UpstreamError(BackendError):
    kind = ErrorKind.UPSTREAM_ERROR


__all__ = [
    "BackendError",
    "ErrorKind",
    "ListingError",
    "ModelNotInstalledError",
    "ServiceUnavailableError",
    "UpstreamError",
    "ValidationError",
]
