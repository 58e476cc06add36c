from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePosixPath

DEFAULT_FOCUS = "50-50"


@dataclass(frozen=True)
class FocusPoint:
    x: float = 50.0
    y: float = 50.0
    zoom: float | None = None

    @classmethod
    def parse(cls, value: str | None) -> FocusPoint:
        """Parse stored focus metadata such as ``"29-71-3.6"``.

        Malformed values fall back to the image center.
        """
        if not value:
            return cls()
        parts = str(value).split("-")
        try:
            x = float(parts[0])
            y = float(parts[1]) if len(parts) > 1 else 50.0
            zoom = float(parts[2]) if len(parts) > 2 else None
        except ValueError:
            return cls()
        return cls(x=x, y=y, zoom=zoom)

    def __str__(self) -> str:
        text = f"{self.x:g}-{self.y:g}"
        if self.zoom is not None:
            text += f"-{self.zoom:g}"
        return text


@dataclass(frozen=True)
class AssetEntity:
    id: str
    path: str  # storage path, e.g. "assets/{uuid}.jpg"
    width: int
    height: int
    mime_type: str
    file_size: int | None = None  # bytes
    focus: str | None = None  # stored focus metadata "<x>-<y>[-<zoom>]"
    original_filename: str | None = None
    created_at: datetime | None = None

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".").lower()

    @property
    def focus_point(self) -> FocusPoint:
        return FocusPoint.parse(self.focus)

    @property
    def focus_value(self) -> str:
        """Focus exactly as stored, or the center when none is set."""
        return self.focus or DEFAULT_FOCUS

    @property
    def aspect_ratio(self) -> float | None:
        if self.width <= 0 or self.height <= 0:
            return None
        return self.width / self.height
