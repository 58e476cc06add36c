from __future__ import annotations

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from src.domain.entities.asset import AssetEntity, FocusPoint
from src.infrastructure.database.repositories.asset_repository import AssetRepository
from src.infrastructure.storage.supabase_storage import SupabaseStorage


@dataclass
class UploadAssetUseCase:
    storage: SupabaseStorage
    asset_repo: AssetRepository

    def execute(self, data: bytes, original_filename: str, *, focus: str | None = None) -> AssetEntity:
        """
        Store an original image and register it as an asset.

        The natural size and MIME type are read from the file itself.
        Raises ValueError for unreadable images.
        """
        try:
            with Image.open(BytesIO(data)) as img:
                width, height = img.size
                mime_type = Image.MIME.get(img.format or "", "application/octet-stream")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Invalid image file: {exc}") from exc

        ext = original_filename.rsplit(".", 1)[-1].lower() if "." in original_filename else "png"
        stored = self.storage.upload_bytes(data, ext=ext, content_type=mime_type)

        return self.asset_repo.create(
            path=stored.path,
            width=width,
            height=height,
            mime_type=mime_type,
            file_size=stored.size,
            # Normalise so the stored value is always "<x>-<y>[-<zoom>]"
            focus=str(FocusPoint.parse(focus)) if focus else None,
            original_filename=original_filename,
        )
