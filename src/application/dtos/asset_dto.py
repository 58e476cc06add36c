from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AssetMetadata(BaseModel):
    """Metadata of a stored source asset."""
    id: str = Field(..., description="Unique identifier of the asset", example="asset_1")
    path: str = Field(..., description="Storage path of the original file", example="assets/3f2a.jpg")
    width: int = Field(..., description="Natural width in pixels", example=1920, gt=0)
    height: int = Field(..., description="Natural height in pixels", example=1080, gt=0)
    mime_type: str = Field(..., description="MIME type of the original", example="image/jpeg")
    file_size: int | None = Field(None, description="Size of the original in bytes", example=2048576)
    focus: str | None = Field(None, description="Crop focus as '<x>-<y>[-<zoom>]' percentages", example="50-50")
    original_filename: str | None = Field(None, description="Filename when uploaded", example="photo.jpg")
    created_at: datetime | None = Field(None, description="When the asset was uploaded")
    url: str | None = Field(None, description="Public URL of the original file")


class UploadAssetResponse(BaseModel):
    """Response model for a successful asset upload."""
    asset: AssetMetadata = Field(..., description="Metadata of the uploaded asset")


class ListAssetsResponse(BaseModel):
    """Response model for listing assets."""
    assets: list[AssetMetadata] = Field(..., description="List of asset metadata objects")
    total: int = Field(..., description="Total number of assets", example=12, ge=0)
