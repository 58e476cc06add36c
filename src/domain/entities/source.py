from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from src.domain.entities.dimensions import Dimensions
from src.domain.errors import TransformError

if TYPE_CHECKING:
    from src.domain.entities.breakpoint import Breakpoint

logger = logging.getLogger(__name__)

# Order matters: renderers pick the first source the browser supports.
FORMATS = ("avif", "webp", "original")


class Source:
    """The variants of one output format for a breakpoint."""

    def __init__(self, breakpoint: Breakpoint, fmt: str = "original") -> None:
        if fmt not in FORMATS:
            raise ValueError(f"Unsupported source format: {fmt}")
        self.breakpoint = breakpoint
        self.format = fmt

    def __repr__(self) -> str:
        return f"Source(breakpoint={self.breakpoint.label!r}, format={self.format!r})"

    @property
    def mime_type(self) -> str:
        if self.format == "original":
            return self.breakpoint.asset.mime_type
        return f"image/{self.format}"

    @property
    def media_string(self) -> str:
        return self.breakpoint.get_media_string()

    def get_dimensions(self) -> list[Dimensions]:
        return self.breakpoint.context.calculator.calculate_for_breakpoint(self)

    def get_widths(self) -> list[int]:
        return [d.width for d in self.get_dimensions()]

    def build_srcset_entry(self, dimensions: Dimensions) -> str:
        try:
            url = self.breakpoint.build_image_url(dimensions.width, dimensions.height, self.format)
        except TransformError as exc:
            if self.breakpoint.context.config.debug:
                raise
            logger.error(
                "Skipping %spx %s variant of asset %s: %s",
                dimensions.width,
                self.format,
                self.breakpoint.asset.id,
                exc,
            )
            return ""
        return f"{url} {dimensions.width}w"

    def get_srcset(self, include_placeholder: bool | None = None) -> str:
        """Srcset candidates, led by the placeholder when it is enabled.

        ``include_placeholder`` defaults to the breakpoint's own setting.
        """
        entries = [self.build_srcset_entry(d) for d in self.get_dimensions()]
        entries = [entry for entry in entries if entry]

        if include_placeholder is None:
            include_placeholder = self.breakpoint.placeholder_enabled()
        if include_placeholder:
            placeholder_src = self.breakpoint.placeholder_src()
            if placeholder_src:
                entries.insert(0, placeholder_src)

        return ", ".join(entries)

    def to_dict(self, include_placeholder: bool | None = None) -> dict[str, Any]:
        return {
            "format": self.format,
            "mime_type": self.mime_type,
            "min_width": self.breakpoint.min_width,
            "media_width_unit": self.breakpoint.width_unit,
            "media_string": self.media_string,
            "srcset": self.get_srcset(include_placeholder),
        }
