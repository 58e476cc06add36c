from __future__ import annotations

import math
from dataclasses import dataclass


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(frozen=True, order=True)
class Dimensions:
    """Output size of one image variant.

    ``height`` is ``None`` when the transform engine should infer it from the
    natural aspect ratio of the asset.
    """

    width: int
    height: int | None = None

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("width must be > 0")
        if self.height is not None and self.height <= 0:
            raise ValueError("height must be > 0")

    @classmethod
    def from_ratio(cls, width: int, ratio: float | None) -> Dimensions:
        if not ratio or ratio <= 0:
            return cls(width)
        return cls(width, max(1, round_half_up(width / ratio)))
