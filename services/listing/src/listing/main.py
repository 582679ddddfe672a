"""
Main entry point for the listing writer service.

Runs the FastAPI application with uvicorn.
"""

import os

import uvicorn


def run() -> None:
    port = int(os.getenv("LISTING_PORT", "8600"))
    host = os.getenv("LISTING_HOST", "0.0.0.0")
    workers = int(os.getenv("LISTING_WORKERS", "1"))

    uvicorn.run(
        "listing.app:app",
        host=host,
        port=port,
        workers=workers,
        log_level="info",
    )


if __name__ == "__main__":
    run()
