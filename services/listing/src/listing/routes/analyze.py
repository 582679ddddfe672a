"""Property image analysis API."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from common.config import settings
from common.logging import get_logger

from ..dependencies import (
    get_cloud_generator,
    get_ollama_client,
    get_orchestrator,
    get_vision_client,
)
from ..errors import ValidationError
from ..generator import DescriptionGenerator, UnconfiguredGenerator
from ..models import Backend, CustomizationOptions, OutputFormat, UploadedImage
from ..orchestrator import ListingOrchestrator
from ..providers.ollama_client import OllamaVisionClient
from ..utils.image_compression import is_valid_image_type
from ..vision.extractor import VisionBackend

LOGGER = get_logger(__name__)

router = APIRouter(prefix="/api", tags=["listing"])

INTERNAL_ERROR_MESSAGE = "Failed to analyze images"


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def build_options(
    target_audience: Optional[str],
    price_range: Optional[str],
    marketing_style: Optional[str],
    property_type: Optional[str],
    api_service: Optional[str],
    features: Optional[str],
    output_format: Optional[str],
) -> CustomizationOptions:
    try:
        backend = Backend.parse(api_service, Backend(settings.default_backend))
    except ValueError as exc:
        raise ValidationError(f"Unsupported API service: {api_service}") from exc
    try:
        fmt = OutputFormat.parse(output_format, OutputFormat(settings.default_output_format))
    except ValueError as exc:
        raise ValidationError(f"Unsupported output format: {output_format}") from exc

    return CustomizationOptions(
        target_audience=(target_audience or "").strip() or "general buyers",
        price_range=(price_range or "").strip(),
        marketing_style=(marketing_style or "").strip() or "professional",
        property_type=(property_type or "").strip(),
        backend=backend,
        features=(features or "").strip(),
        output_format=fmt,
    )


async def _read_uploads(files: List[UploadFile]) -> List[UploadedImage]:
    uploads = []
    for item in files:
        if not is_valid_image_type(item.content_type):
            LOGGER.warning("Unexpected upload content type", filename=item.filename, content_type=item.content_type)
        data = await item.read()
        uploads.append(
            UploadedImage(data=data, filename=item.filename or "image", content_type=item.content_type)
        )
    return uploads


@router.post("/analyze-images")
async def analyze_images(
    images: Optional[List[UploadFile]] = File(default=None),
    target_audience: Optional[str] = Form(default=None, alias="targetAudience"),
    price_range: Optional[str] = Form(default=None, alias="priceRange"),
    marketing_style: Optional[str] = Form(default=None, alias="marketingStyle"),
    property_type: Optional[str] = Form(default=None, alias="propertyType"),
    api_service: Optional[str] = Form(default=None, alias="apiService"),
    features: Optional[str] = Form(default=None),
    output_format: Optional[str] = Form(default=None, alias="outputFormat"),
    orchestrator: ListingOrchestrator = Depends(get_orchestrator),
) -> JSONResponse:
    try:
        if not images:
            raise ValidationError("No images provided")
        options = build_options(
            target_audience,
            price_range,
            marketing_style,
            property_type,
            api_service,
            features,
            output_format,
        )
        uploads = await _read_uploads(images)
        outcome = await orchestrator.run(uploads, options)
    except ValidationError as exc:
        return _error(exc.message, 400)
    except Exception:  # noqa: BLE001
        LOGGER.exception("Image analysis failed")
        return _error(INTERNAL_ERROR_MESSAGE, 500)

    return JSONResponse(status_code=200, content=outcome.to_payload())


@router.get("/backends")
async def backend_status(
    vision: VisionBackend = Depends(get_vision_client),
    cloud: DescriptionGenerator = Depends(get_cloud_generator),
    ollama: OllamaVisionClient = Depends(get_ollama_client),
) -> dict:
    """Report which backends are usable right now."""

    reachable = await ollama.is_available()
    return {
        "defaultBackend": settings.default_backend,
        "vision": {"configured": vision.configured},
        "openai": {
            "configured": not isinstance(cloud, UnconfiguredGenerator),
            "model": settings.openai_model,
        },
        "ollama": {
            "host": settings.ollama_host,
            "available": reachable,
            "model": ollama.model,
            "modelInstalled": reachable and await ollama.has_model(),
        },
    }
