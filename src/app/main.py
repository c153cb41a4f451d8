"""FIRMS-MAP - active fire map backend.

Main FastAPI application.
"""

import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers.firms import router as firms_router


def _configure_logging() -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if settings.debug else "INFO")


_configure_logging()

app = FastAPI(
    title=settings.app_name,
    description="NASA FIRMS active fire detections for map display",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(firms_router)


@app.get("/health")
async def health():
    return {"status": "ok", "app": settings.app_name}


def run() -> None:
    """Run the server with uvicorn."""
    import uvicorn

    logger.info(f"Starting {settings.app_name} on {settings.host}:{settings.port}")
    uvicorn.run("app.main:app", host=settings.host, port=settings.port, reload=settings.debug)


if __name__ == "__main__":
    run()
