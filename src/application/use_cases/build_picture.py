from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from src.application.dtos.responsive_dto import PictureData, PictureSourceData
from src.domain.entities.breakpoint import Breakpoint
from src.domain.entities.dimensions import round_half_up
from src.domain.interfaces import AssetSource
from src.domain.services.context import ResponsiveContext
from src.domain.services.responsive import Responsive

# Formats that are passed through untouched
PASSTHROUGH_EXTENSIONS = ("svg", "gif")


@dataclass
class BuildPictureUseCase:
    """
    Collect what a renderer needs for a <picture> of one asset.

    No markup is produced here; media queries, srcsets and placeholders are
    returned as data. Raises AssetNotFoundError when ``src`` cannot be
    resolved, which callers usually turn into "render nothing".
    """

    assets: AssetSource
    public_url: Callable[[str], str]
    context: ResponsiveContext

    def execute(self, src: Any, params: Mapping[str, Any]) -> PictureData:
        responsive = Responsive(src, params, self.context, self.assets)
        asset = responsive.asset
        transformer = self.context.transformer

        width = asset.width
        height = responsive.asset_height()
        url = self.public_url(asset.path)

        max_width = int(params.get("glide:width") or 0)
        if 0 < max_width < asset.width:
            width = max_width
            height = round_half_up(width / responsive.default_breakpoint().ratio)
            url = transformer.build_url(asset, {"width": width, "height": height})

        if asset.extension in PASSTHROUGH_EXTENSIONS:
            return PictureData(asset_id=asset.id, src=url, width=width, height=height)

        include_placeholder = responsive.default_breakpoint().placeholder_enabled()

        sources: list[PictureSourceData] = []
        for breakpoint in responsive.breakpoints():
            with_placeholder = breakpoint.placeholder_enabled()
            sources.append(
                PictureSourceData(
                    label=breakpoint.label,
                    media=breakpoint.get_media_string(),
                    srcset=breakpoint.get_srcset(with_placeholder),
                    srcset_webp=self._srcset(breakpoint, "webp", with_placeholder),
                    srcset_avif=self._srcset(breakpoint, "avif", with_placeholder),
                    placeholder=breakpoint.placeholder() if with_placeholder else "",
                )
            )

        # The largest breakpoint's placeholder backs the fallback <img>
        return PictureData(
            asset_id=asset.id,
            src=url,
            width=width,
            height=height,
            include_placeholder=include_placeholder,
            placeholder=sources[-1].placeholder,
            sources=sources,
        )

    @staticmethod
    def _srcset(breakpoint: Breakpoint, fmt: str, include_placeholder: bool) -> str | None:
        if not breakpoint.format_enabled(fmt):
            return None
        return breakpoint.get_srcset(include_placeholder, fmt)
