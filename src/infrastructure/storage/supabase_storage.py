from __future__ import annotations

import os
import uuid
from dataclasses import dataclass
from pathlib import Path

from supabase import Client


@dataclass
class StorageResult:
    path: str
    content_type: str
    size: int


class SupabaseStorage:
    """Storage adapter for Supabase Storage with a local fake fallback."""

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.bucket = os.getenv("SUPABASE_STORAGE_BUCKET", "assets")
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.local_dir = Path(os.getenv("SUPABASE_STORAGE_LOCAL_DIR", ".local_storage"))
        if self.disabled:
            self.local_dir.mkdir(parents=True, exist_ok=True)

    @property
    def _local(self) -> bool:
        return self.disabled or self.client is None

    def upload_bytes(self, data: bytes, ext: str, content_type: str, folder: str = "assets") -> StorageResult:
        ext = ext.lower().lstrip(".")
        storage_path = f"{folder}/{uuid.uuid4()}.{ext}"
        if self._local:
            full_path = self.local_dir / storage_path
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
            return StorageResult(path=storage_path, content_type=content_type, size=len(data))
        try:  # pragma: no cover - network
            self.client.storage.from_(self.bucket).upload(  # type: ignore[attr-defined]
                path=storage_path,
                file=data,
                file_options={"content-type": content_type},
            )
            return StorageResult(path=storage_path, content_type=content_type, size=len(data))
        except Exception as exc:  # pragma: no cover
            raise RuntimeError(f"Storage upload failed: {exc}") from exc

    def download_bytes(self, path: str) -> bytes:
        """Read an object; raises ``OSError`` when it cannot be read."""
        if self._local:
            full_path = self.local_dir / path
            return full_path.read_bytes()
        try:  # pragma: no cover - network
            return self.client.storage.from_(self.bucket).download(path)  # type: ignore[attr-defined]
        except Exception as exc:  # pragma: no cover
            raise OSError(f"Storage download failed: {exc}") from exc
