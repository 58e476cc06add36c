from __future__ import annotations

from dataclasses import dataclass, field

from src.domain.config import ResponsiveConfig
from src.domain.interfaces import Cache, DimensionCalculator, TransformEngine
from src.domain.services.dimension_calculator import ResponsiveDimensionCalculator


class NullCache:
    """Cache that never remembers anything."""

    def get(self, key: str) -> str | None:
        return None

    def set(self, key: str, value: str) -> None:
        return None


@dataclass(frozen=True)
class ResponsiveContext:
    """Collaborators shared by every breakpoint of a request.

    The calculator defaults to ``ResponsiveDimensionCalculator``; pass any
    object with the three ``calculate_for_*`` methods to substitute it.
    """

    config: ResponsiveConfig
    transformer: TransformEngine
    calculator: DimensionCalculator | None = None
    placeholder_cache: Cache[str] = field(default_factory=NullCache)

    def __post_init__(self) -> None:
        if self.calculator is None:
            object.__setattr__(self, "calculator", ResponsiveDimensionCalculator(self.config))
