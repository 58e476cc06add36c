from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, Request

from src.application.dtos.common_dto import ErrorResponse
from src.application.dtos.responsive_dto import BreakpointData, PictureData
from src.application.use_cases.build_picture import BuildPictureUseCase
from src.application.use_cases.query_responsive_image import QueryResponsiveImageUseCase
from src.domain.errors import AssetNotFoundError, InvalidDimensionError
from src.domain.services.context import ResponsiveContext
from src.infrastructure.api.dependencies import get_asset_repo, get_responsive_context
from src.infrastructure.database.repositories.asset_repository import AssetRepository

router = APIRouter(
    prefix="/responsive",
    tags=["Responsive Images"],
    responses={
        400: {"model": ErrorResponse, "description": "Bad Request - Invalid dimensions or parameters"},
        404: {"model": ErrorResponse, "description": "Not Found - Asset reference could not be resolved"},
    },
)


@router.get(
    "/picture",
    response_model=PictureData,
    summary="Picture Data",
    description="""
    Everything needed to render a `<picture>` element for an asset.

    `src` may be an asset id, a public URL or a storage path. All other query
    parameters form the flat parameter bag, for example `ratio=16/9`,
    `lg:ratio=1`, `glide:fit=fill`, `quality:webp=70`, `webp=false`,
    `placeholder=true` or `glide:width=800`.
    """,
    response_description="Fallback image, sizes and per-breakpoint srcsets",
)
async def picture(
    request: Request,
    src: str = Query(..., description="Asset id, public URL or storage path"),
    assets: AssetRepository = Depends(get_asset_repo),
    context: ResponsiveContext = Depends(get_responsive_context),
):
    """Build picture data from a flat parameter bag."""
    params = dict(request.query_params)
    uc = BuildPictureUseCase(assets=assets, public_url=assets.get_public_url, context=context)
    try:
        return uc.execute(src, params)
    except AssetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (InvalidDimensionError, ValueError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


@router.get(
    "/{asset_id}",
    response_model=list[BreakpointData],
    summary="Query Breakpoints",
    description="""
    Query-style access to the breakpoints of an asset.

    Besides the declared parameters, `<label>_ratio` is accepted for every
    configured breakpoint (e.g. `lg_ratio=1.5`). Only breakpoints that
    receive such an override are returned in addition to `default`.
    """,
    response_description="Breakpoints in ascending minimum width",
)
async def query_breakpoints(
    asset_id: str,
    request: Request,
    ratio: str | None = Query(None, description="Aspect ratio, e.g. 1.5 or 16/9"),
    width: int | None = Query(None, description="Maximum width of the image", gt=0),
    webp: bool | None = Query(None, description="Whether to generate WEBP images"),
    avif: bool | None = Query(None, description="Whether to generate AVIF images"),
    placeholder: bool | None = Query(None, description="Whether to output placeholders"),
    assets: AssetRepository = Depends(get_asset_repo),
    context: ResponsiveContext = Depends(get_responsive_context),
):
    """Resolve all breakpoints of an asset."""
    args: dict[str, object] = {
        "ratio": ratio,
        "width": width,
        "webp": webp,
        "avif": avif,
        "placeholder": placeholder,
    }
    for label in context.config.breakpoints:
        key = f"{label}_ratio"
        if key in request.query_params:
            args[key] = request.query_params[key]

    uc = QueryResponsiveImageUseCase(assets=assets, context=context)
    try:
        return uc.execute(asset_id, args)
    except AssetNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except InvalidDimensionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
