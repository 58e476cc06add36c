"""Contracts between the core and the collaborators it delegates I/O to."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Mapping, Protocol, TypeVar

from src.domain.entities.asset import AssetEntity
from src.domain.entities.dimensions import Dimensions

if TYPE_CHECKING:
    from src.domain.entities.breakpoint import Breakpoint
    from src.domain.entities.source import Source

T = TypeVar("T")


@dataclass(frozen=True)
class RenderedImage:
    content: bytes
    mime_type: str


class AssetSource(Protocol):
    def resolve(self, reference: Any) -> AssetEntity:
        """Return the asset or raise ``AssetNotFoundError``."""
        ...


class TransformEngine(Protocol):
    """External image engine; both methods raise ``TransformError`` on failure."""

    def build_url(self, asset: AssetEntity, params: Mapping[str, Any]) -> str: ...

    def render(self, asset: AssetEntity, params: Mapping[str, Any]) -> RenderedImage: ...


class DimensionCalculator(Protocol):
    def calculate_for_breakpoint(self, source: Source) -> list[Dimensions]: ...

    def calculate_for_img_tag(self, breakpoint: Breakpoint) -> Dimensions: ...

    def calculate_for_placeholder(self, asset: AssetEntity, breakpoint: Breakpoint) -> Dimensions: ...


class Cache(Protocol[T]):
    def get(self, key: str) -> T | None: ...

    def set(self, key: str, value: T) -> None: ...
