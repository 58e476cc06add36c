from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping


def _default_breakpoints() -> dict[str, int]:
    return {"sm": 640, "md": 768, "lg": 1024, "xl": 1280, "2xl": 1536}


def _default_quality() -> dict[str, int]:
    return {"jpg": 90, "webp": 90, "avif": 45}


@dataclass(frozen=True)
class ResponsiveConfig:
    """Snapshot of every setting the core reads.

    Passed explicitly into the components; nothing in the domain reads
    environment variables on its own.
    """

    breakpoints: Mapping[str, int] = field(default_factory=_default_breakpoints)
    breakpoint_unit: str = "px"
    webp: bool = True
    avif: bool = False
    placeholder: bool = True
    quality: Mapping[str, int] = field(default_factory=_default_quality)
    max_width: int | None = None
    auto_crop: bool = True
    # Dimension calculator constants
    size_step: float = 0.7
    min_file_size: int = 10 * 1024
    min_width: int = 20
    placeholder_width: int = 32
    placeholder_blur: int = 5
    # URL generation
    force_absolute_urls: bool = False
    app_url: str = ""
    sign_key: str | None = None
    debug: bool = False

    def format_enabled(self, fmt: str) -> bool:
        if fmt == "webp":
            return self.webp
        if fmt == "avif":
            return self.avif
        return False

    def quality_for(self, fmt: str) -> int | None:
        value = self.quality.get(fmt)
        return int(value) if value is not None else None
