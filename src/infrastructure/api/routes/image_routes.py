from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import Response

from src.domain.errors import TransformError
from src.infrastructure.api.dependencies import get_asset_repo, get_storage, get_transformer
from src.infrastructure.database.repositories.asset_repository import AssetRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage
from src.infrastructure.transform.glide_transformer import GlideTransformer

router = APIRouter(
    tags=["Images"],
    responses={404: {"description": "Not Found - No asset stored at this path"}},
)


@router.get(
    "/img/{path:path}",
    summary="Render Image Variant",
    description="""
    Render a variant of an asset with the parameters carried in the query
    string (`w`, `h`, `fm`, `q`, `fit`, `blur`). These are the URLs that
    appear in responsive srcsets.

    When a sign key is configured the `s` parameter must match.
    """,
    response_description="Binary image data in the requested format",
    responses={
        200: {"content": {"image/*": {}}, "description": "Rendered image"},
        403: {"description": "Forbidden - Signature missing or invalid"},
        422: {"description": "Unprocessable - The image could not be rendered"},
    },
)
async def render_image(
    path: str,
    request: Request,
    assets: AssetRepository = Depends(get_asset_repo),
    transformer: GlideTransformer = Depends(get_transformer),
):
    """Render a manipulated variant of a stored asset."""
    params = list(request.query_params.multi_items())
    if not transformer.verify_signature(path, params):
        raise HTTPException(status_code=403, detail="Invalid signature")

    asset = assets.find_by_path(path)
    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")

    try:
        rendered = transformer.render(asset, {key: value for key, value in params if key != "s"})
    except TransformError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return Response(content=rendered.content, media_type=rendered.mime_type)


@router.get(
    "/local-storage/{path:path}",
    summary="Download Original (local mode)",
    response_description="Binary content of the original file",
    responses={200: {"content": {"image/*": {}}, "description": "Original file"}},
)
async def download_original(
    path: str,
    assets: AssetRepository = Depends(get_asset_repo),
    storage: SupabaseStorage = Depends(get_storage),
):
    """Serve an original file when running without Supabase."""
    asset = assets.find_by_path(path)
    if asset is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    try:
        data = storage.download_bytes(asset.path)
    except OSError as exc:
        raise HTTPException(status_code=404, detail="Asset file missing") from exc
    return Response(content=data, media_type=asset.mime_type)
