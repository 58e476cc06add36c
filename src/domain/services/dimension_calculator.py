from __future__ import annotations

import math
from typing import TYPE_CHECKING

from src.domain.config import ResponsiveConfig
from src.domain.entities.asset import AssetEntity
from src.domain.entities.dimensions import Dimensions, round_half_up
from src.domain.errors import InvalidDimensionError

if TYPE_CHECKING:
    from src.domain.entities.breakpoint import Breakpoint
    from src.domain.entities.source import Source


class ResponsiveDimensionCalculator:
    """Default calculator: widths chosen by predicted file size.

    Every step assumes the encoded file shrinks by ``size_step`` and derives
    the width that would produce that file at the asset's price per pixel.
    With the default 0.7 each width is roughly 0.837 of the previous one.
    """

    def __init__(self, config: ResponsiveConfig) -> None:
        self.config = config

    def calculate_for_breakpoint(self, source: Source) -> list[Dimensions]:
        breakpoint = source.breakpoint
        asset = breakpoint.asset
        ratio = breakpoint.overrides.ratio
        max_width = self._max_width(breakpoint)

        dimensions = [
            Dimensions.from_ratio(width, ratio)
            for width in self.calculate_widths(asset.file_size or 0, asset.width, asset.height)
        ]

        if max_width is None:
            return dimensions

        filtered = [d for d in dimensions if d.width < max_width]
        if not filtered:
            return [Dimensions.from_ratio(max_width, ratio)]
        return filtered

    def calculate_widths(self, file_size: int, width: int, height: int) -> list[int]:
        if width <= 0 or height <= 0:
            raise InvalidDimensionError(f"Asset has invalid size {width}x{height}")

        widths = [width]

        ratio_for_size = height / width
        area = height * width
        predicted_size = file_size
        pixel_price = predicted_size / area

        while True:
            predicted_size *= self.config.size_step
            if predicted_size < self.config.min_file_size:
                return widths

            new_width = int(math.floor(math.sqrt((predicted_size / pixel_price) / ratio_for_size)))
            if new_width < self.config.min_width:
                return widths

            widths.append(new_width)

    def calculate_for_img_tag(self, breakpoint: Breakpoint) -> Dimensions:
        asset = breakpoint.asset
        return Dimensions(asset.width, self._height(asset.width, self.breakpoint_ratio(breakpoint)))

    def calculate_for_placeholder(self, asset: AssetEntity, breakpoint: Breakpoint) -> Dimensions:
        width = self.config.placeholder_width
        return Dimensions(width, self._height(width, self.breakpoint_ratio(breakpoint)))

    def breakpoint_ratio(self, breakpoint: Breakpoint) -> float:
        return breakpoint.ratio

    def _max_width(self, breakpoint: Breakpoint) -> int | None:
        max_width = breakpoint.overrides.max_width
        if max_width is None:
            max_width = self.config.max_width
        if max_width is None:
            return None
        if max_width <= 0:
            raise InvalidDimensionError(f"Maximum width must be positive, got {max_width}")
        return max_width

    @staticmethod
    def _height(width: int, ratio: float) -> int:
        return max(1, round_half_up(width / ratio))
