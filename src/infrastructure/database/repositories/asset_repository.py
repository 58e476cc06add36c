from __future__ import annotations

import os
from dataclasses import asdict
from datetime import UTC, datetime
from typing import Any, Mapping
from urllib.parse import urlparse

from supabase import Client

from src.domain.entities.asset import AssetEntity
from src.domain.errors import AssetNotFoundError

LOCAL_URL_PREFIX = "/local-storage/"

# module-level in-memory store for disabled mode
_MEM_ASSETS: dict[str, AssetEntity] = {}


class AssetRepository:
    """Asset metadata store.

    Uses the Supabase ``assets`` table, or a module-level dict when
    ``SUPABASE_DISABLED=1`` or no client is configured.
    """

    def __init__(self, client: Client | None) -> None:
        self.client = client
        self.disabled = os.getenv("SUPABASE_DISABLED", "0") == "1"
        self.bucket = os.getenv("SUPABASE_STORAGE_BUCKET", "assets")

    @property
    def _in_memory(self) -> bool:
        return self.disabled or self.client is None

    def _row_to_entity(self, row: Mapping[str, Any]) -> AssetEntity:
        # Supabase returns timestamps as ISO strings
        created_at = row.get("created_at")
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return AssetEntity(
            id=str(row["id"]),
            path=row.get("storage_path", row.get("path", "")),
            width=row["width"],
            height=row["height"],
            mime_type=row["mime_type"],
            file_size=row.get("file_size"),
            focus=row.get("focus"),
            original_filename=row.get("original_filename"),
            created_at=created_at,
        )

    def create(
        self,
        path: str,
        width: int,
        height: int,
        mime_type: str,
        file_size: int | None = None,
        focus: str | None = None,
        original_filename: str | None = None,
    ) -> AssetEntity:
        now = datetime.now(UTC)

        if self._in_memory:
            entity = AssetEntity(
                id=f"asset_{len(_MEM_ASSETS) + 1}",
                path=path,
                width=width,
                height=height,
                mime_type=mime_type,
                file_size=file_size,
                focus=focus,
                original_filename=original_filename,
                created_at=now,
            )
            _MEM_ASSETS[entity.id] = entity
            return entity

        try:  # pragma: no cover - network
            data = asdict(
                AssetEntity(
                    id="",
                    path=path,
                    width=width,
                    height=height,
                    mime_type=mime_type,
                    file_size=file_size,
                    focus=focus,
                    original_filename=original_filename,
                    created_at=now,
                )
            )
            data.pop("id")
            data["created_at"] = now.isoformat()
            # map to DB columns: storage_path instead of path
            data["storage_path"] = data.pop("path")
            res = self.client.table("assets").insert(data).execute()
            return self._row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert asset failed: {exc}") from exc

    def get(self, asset_id: str) -> AssetEntity | None:
        if self._in_memory:
            return _MEM_ASSETS.get(asset_id)

        try:  # pragma: no cover - network
            res = self.client.table("assets").select("*").eq("id", asset_id).limit(1).execute()
            rows = res.data or []
            return self._row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB get asset failed: {exc}") from exc

    def find_by_path(self, path: str) -> AssetEntity | None:
        path = path.lstrip("/")
        if self._in_memory:
            return next((a for a in _MEM_ASSETS.values() if a.path == path), None)

        try:  # pragma: no cover - network
            res = self.client.table("assets").select("*").eq("storage_path", path).limit(1).execute()
            rows = res.data or []
            return self._row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB find asset failed: {exc}") from exc

    def find_by_url(self, url: str) -> AssetEntity | None:
        path = self.path_from_url(url)
        return self.find_by_path(path) if path else None

    def list_all(self) -> list[AssetEntity]:
        if self._in_memory:
            return list(_MEM_ASSETS.values())

        try:  # pragma: no cover - network
            res = self.client.table("assets").select("*").order("created_at", desc=True).execute()
            return [self._row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list assets failed: {exc}") from exc

    def resolve(self, reference: Any) -> AssetEntity:
        """Look a reference up by id, then public URL, then storage path."""
        if isinstance(reference, AssetEntity):
            return reference
        ref = str(reference or "").strip()
        if ref:
            asset = self.get(ref) or self.find_by_url(ref) or self.find_by_path(ref)
            if asset is not None:
                return asset
        raise AssetNotFoundError(reference)

    def get_public_url(self, storage_path: str) -> str:
        if self._in_memory:
            return f"{LOCAL_URL_PREFIX}{storage_path}"

        # pragma: no cover - network
        return self.client.storage.from_(self.bucket).get_public_url(storage_path)  # type: ignore[attr-defined]

    def path_from_url(self, url: str) -> str | None:
        parsed = urlparse(url)
        path = parsed.path
        if path.startswith(LOCAL_URL_PREFIX):
            return path[len(LOCAL_URL_PREFIX) :]
        marker = f"/object/public/{self.bucket}/"
        if marker in path:
            return path.split(marker, 1)[1]
        return None
