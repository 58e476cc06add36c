from __future__ import annotations

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware

from src.infrastructure.config.settings import ResponsiveSettings

logger = logging.getLogger(__name__)


def add_default_middlewares(app: FastAPI, settings: ResponsiveSettings) -> None:
    # Browsers only need CORS for the JSON endpoints; /img is plain <img> traffic
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed_ms
        )
        return response
