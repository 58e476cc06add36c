from __future__ import annotations

from fastapi import FastAPI

from src.application.dtos.common_dto import HealthResponse, RootResponse
from src.infrastructure.api.middlewares import add_default_middlewares
from src.infrastructure.api.routes.asset_routes import router as asset_router
from src.infrastructure.api.routes.image_routes import router as image_router
from src.infrastructure.api.routes.responsive_routes import router as responsive_router
from src.infrastructure.config.settings import get_settings
from src.infrastructure.log_setup import configure_logging


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Responsive Images",
        version="0.1.0",
        description="""
        ## Responsive Images API

        Computes responsive breakpoint sets for stored images: candidate widths,
        per-format transformation URLs, srcset strings and tiny blurred
        placeholders. Variants are rendered on demand by the `/img` endpoint.

        ### Features
        - **Assets**: Upload originals and read their metadata
        - **Breakpoints**: Query breakpoints, sources and srcsets per asset
        - **Picture data**: Media queries, srcsets and placeholders for a renderer
        - **Image variants**: Deterministic, optionally signed transformation URLs

        ### Error Responses
        - **400 Bad Request**: Invalid parameters or dimensions
        - **403 Forbidden**: Invalid image URL signature
        - **404 Not Found**: Asset reference could not be resolved
        - **422 Unprocessable Entity**: Validation error or unrenderable image
        """,
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    add_default_middlewares(app, settings)

    @app.get(
        "/",
        response_model=RootResponse,
        summary="API Root",
        description="Get basic information about the API",
    )
    def root():
        """Get API root information."""
        return {"status": "ok", "service": "responsive-images", "version": app.version}

    @app.get(
        "/health",
        response_model=HealthResponse,
        summary="Health Check",
        description="Check if the API service is running and healthy",
    )
    def health():
        """Check API health status."""
        return {"status": "healthy"}

    app.include_router(asset_router)
    app.include_router(responsive_router)
    app.include_router(image_router)
    return app


app = create_app()
