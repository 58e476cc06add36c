from __future__ import annotations

import base64
import logging
from typing import Any, Mapping

from src.domain.entities.asset import AssetEntity
from src.domain.entities.source import FORMATS, Source
from src.domain.errors import InvalidDimensionError, TransformError
from src.domain.services.context import ResponsiveContext
from src.domain.services.params_builder import (
    BreakpointOverrides,
    TransformParams,
    build_transform_params,
)

logger = logging.getLogger(__name__)

PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" xmlns:xlink="http://www.w3.org/1999/xlink" '
    'width="{width}" height="{height}" viewBox="0 0 {width} {height}">'
    '<filter id="b" color-interpolation-filters="sRGB">'
    '<feGaussianBlur stdDeviation="1"/>'
    '<feComponentTransfer><feFuncA type="discrete" tableValues="1 1"/></feComponentTransfer>'
    "</filter>"
    '<image filter="url(#b)" x="0" y="0" width="100%" height="100%" '
    'preserveAspectRatio="none" href="{image}"/>'
    "</svg>"
)


class Breakpoint:
    """One named viewport breakpoint of an asset.

    ``params`` are the raw, namespaced overrides for this breakpoint
    (``glide:*``, ``quality:<format>``, ``ratio``, ``webp``, ``avif``, ...).
    """

    def __init__(
        self,
        asset: AssetEntity,
        label: str,
        min_width: int,
        params: Mapping[str, Any],
        context: ResponsiveContext,
    ) -> None:
        self.asset = asset
        self.label = label
        self.min_width = int(min_width)
        self.params = dict(params)
        self.overrides = BreakpointOverrides.from_params(self.params)
        self.context = context
        self.width_unit = context.config.breakpoint_unit

    def __repr__(self) -> str:
        return f"Breakpoint(label={self.label!r}, min_width={self.min_width})"

    @property
    def ratio(self) -> float:
        """Explicit ratio override, or the asset's natural aspect ratio."""
        if self.overrides.ratio is not None:
            return self.overrides.ratio
        natural = self.asset.aspect_ratio
        if natural is None:
            raise InvalidDimensionError(
                f"Asset {self.asset.id} has invalid size {self.asset.width}x{self.asset.height}"
            )
        return natural

    def format_enabled(self, fmt: str) -> bool:
        if fmt == "original":
            return True
        if fmt in self.overrides.formats:
            return self.overrides.formats[fmt]
        return self.context.config.format_enabled(fmt)

    def placeholder_enabled(self) -> bool:
        if self.overrides.placeholder is not None:
            return self.overrides.placeholder
        return self.context.config.placeholder

    def get_sources(self) -> list[Source]:
        return [Source(self, fmt) for fmt in FORMATS if self.format_enabled(fmt)]

    def get_media_string(self) -> str:
        if self.min_width == 0:
            return ""
        return f"(min-width: {self.min_width}{self.width_unit})"

    def build_params(
        self, width: int | None = None, height: int | None = None, fmt: str | None = None
    ) -> TransformParams:
        return build_transform_params(
            self.overrides, self.asset, self.context.config, width=width, height=height, fmt=fmt
        )

    def build_image_url(self, width: int, height: int | None = None, fmt: str | None = None) -> str:
        return self.context.transformer.build_url(self.asset, self.build_params(width, height, fmt))

    def get_srcset(self, include_placeholder: bool | None = None, fmt: str = "original") -> str:
        return Source(self, fmt).get_srcset(include_placeholder)

    def placeholder(self) -> str:
        dimensions = self.context.calculator.calculate_for_placeholder(self.asset, self)
        cache_key = f"placeholder-{self.asset.id}-{dimensions.width}-{dimensions.height}"

        cached = self.context.placeholder_cache.get(cache_key)
        if cached is not None:
            return cached

        params = {
            "width": dimensions.width,
            "height": dimensions.height,
            "blur": self.context.config.placeholder_blur,
        }
        try:
            rendered = self.context.transformer.render(self.asset, params)
        except TransformError as exc:
            if self.context.config.debug:
                raise
            logger.error("Placeholder for asset %s could not be generated: %s", self.asset.id, exc)
            return ""

        image = f"data:{rendered.mime_type};base64,{base64.b64encode(rendered.content).decode('ascii')}"
        svg = PLACEHOLDER_SVG.format(width=dimensions.width, height=dimensions.height, image=image)
        placeholder = "data:image/svg+xml;base64," + base64.b64encode(svg.encode("utf-8")).decode("ascii")

        self.context.placeholder_cache.set(cache_key, placeholder)
        return placeholder

    def placeholder_src(self) -> str:
        placeholder = self.placeholder()
        if not placeholder:
            return ""
        return f"{placeholder} {self.context.config.placeholder_width}w"

    def to_dict(self) -> dict[str, Any]:
        return {
            "asset_id": self.asset.id,
            "label": self.label,
            "min_width": self.min_width,
            "width_unit": self.width_unit,
            "parameters": self.params,
        }
