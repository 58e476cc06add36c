from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from src.application.dtos.asset_dto import AssetMetadata, ListAssetsResponse, UploadAssetResponse
from src.application.use_cases.upload_asset import UploadAssetUseCase
from src.domain.entities.asset import AssetEntity
from src.infrastructure.api.dependencies import get_asset_repo, get_storage
from src.infrastructure.database.repositories.asset_repository import AssetRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage

router = APIRouter(
    prefix="/assets",
    tags=["Assets"],
    responses={
        404: {"description": "Not Found - Asset does not exist"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


def _to_metadata(entity: AssetEntity, assets: AssetRepository) -> AssetMetadata:
    return AssetMetadata(
        id=entity.id,
        path=entity.path,
        width=entity.width,
        height=entity.height,
        mime_type=entity.mime_type,
        file_size=entity.file_size,
        focus=entity.focus,
        original_filename=entity.original_filename,
        created_at=entity.created_at,
        url=assets.get_public_url(entity.path),
    )


@router.post(
    "/upload",
    response_model=UploadAssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Asset",
    description="""
    Upload an original image that responsive variants will be derived from.

    **Supported formats**: anything Pillow can identify (JPEG, PNG, GIF, WEBP, ...)

    The natural width, height and MIME type are read from the file. An
    optional `focus` ("<x>-<y>[-<zoom>]", percentages) sets the crop focus.
    """,
    response_description="Metadata of the uploaded asset",
    responses={400: {"description": "Bad Request - Invalid image file"}},
)
async def upload_asset(
    file: UploadFile = File(..., description="Image file to upload"),
    focus: str | None = Form(None, description="Crop focus, e.g. '29-71' or '29-71-3.6'"),
    storage: SupabaseStorage = Depends(get_storage),
    assets: AssetRepository = Depends(get_asset_repo),
):
    """Upload an original image and register it as an asset."""
    data = await file.read()
    filename = file.filename or "uploaded_image.png"
    uc = UploadAssetUseCase(storage=storage, asset_repo=assets)
    try:
        entity = uc.execute(data, filename, focus=focus)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return UploadAssetResponse(asset=_to_metadata(entity, assets))


@router.get(
    "",
    response_model=ListAssetsResponse,
    summary="List Assets",
    response_description="All registered assets",
)
async def list_assets(assets: AssetRepository = Depends(get_asset_repo)):
    """List every registered asset."""
    items = assets.list_all()
    return ListAssetsResponse(assets=[_to_metadata(it, assets) for it in items], total=len(items))


@router.get(
    "/{asset_id}",
    response_model=AssetMetadata,
    summary="Get Asset Metadata",
    response_description="Metadata for the requested asset",
)
async def get_asset(asset_id: str, assets: AssetRepository = Depends(get_asset_repo)):
    """Get metadata for a specific asset."""
    entity = assets.get(asset_id)
    if entity is None:
        raise HTTPException(status_code=404, detail="Asset not found")
    return _to_metadata(entity, assets)
