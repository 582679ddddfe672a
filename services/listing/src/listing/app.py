"""Listing writer FastAPI application."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from common.config import settings
from common.logging import configure_logging

from .routes.analyze import router as analyze_router

configure_logging(settings.log_level)

app = FastAPI(title="Listing Writer", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(analyze_router)


@app.get("/healthz")
async def health() -> dict[str, str]:
    return {"status": "ok"}
