from __future__ import annotations

from pydantic import BaseModel, Field


class SourceData(BaseModel):
    """One output format of a breakpoint."""
    format: str = Field(..., description="Output format", example="webp", pattern="^(avif|webp|original)$")
    mime_type: str = Field(..., description="MIME type of the variants", example="image/webp")
    min_width: int = Field(..., description="Minimum viewport width of the breakpoint", example=1024, ge=0)
    media_width_unit: str = Field(..., description="Unit of the minimum width", example="px")
    media_string: str = Field(..., description="CSS media query, empty for the default breakpoint", example="(min-width: 1024px)")
    srcset: str = Field(..., description="Comma separated '<url> <width>w' candidates")


class BreakpointData(BaseModel):
    """A breakpoint as returned by the query endpoint."""
    asset_id: str = Field(..., description="ID of the source asset")
    label: str = Field(..., description="Breakpoint label", example="lg")
    min_width: int = Field(..., description="Minimum viewport width", example=1024, ge=0)
    width_unit: str = Field(..., description="Unit of the minimum width", example="px")
    sources: list[SourceData] = Field(..., description="Sources in avif, webp, original order")
    placeholder: str | None = Field(None, description="Inline SVG data URL of the blurred placeholder")
    ratio: float | None = Field(None, description="Aspect ratio used for this breakpoint", example=1.7778)


class PictureSourceData(BaseModel):
    """Everything a renderer needs for one <source> group."""
    label: str = Field(..., description="Breakpoint label", example="default")
    media: str = Field(..., description="CSS media query, empty for the default breakpoint")
    srcset: str = Field(..., description="Srcset of the original format")
    srcset_webp: str | None = Field(None, description="Srcset in WEBP, when enabled")
    srcset_avif: str | None = Field(None, description="Srcset in AVIF, when enabled")
    placeholder: str = Field("", description="Inline SVG data URL of the blurred placeholder")


class PictureData(BaseModel):
    """Data for rendering a responsive picture of one asset."""
    asset_id: str = Field(..., description="ID of the source asset")
    src: str = Field(..., description="Fallback image URL")
    width: int = Field(..., description="Width for the img tag", gt=0)
    height: int | None = Field(None, description="Height for the img tag")
    include_placeholder: bool = Field(False, description="Whether srcsets start with the placeholder")
    placeholder: str = Field("", description="Placeholder of the default breakpoint")
    sources: list[PictureSourceData] = Field(default_factory=list, description="Sources in ascending breakpoint order")
