from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from src.domain.config import ResponsiveConfig
from src.domain.entities.asset import AssetEntity

GLIDE_PREFIX = "glide:"
QUALITY_PREFIX = "quality:"
TOGGLEABLE_FORMATS = ("avif", "webp")
CROP_FOCAL = "crop_focal"

TransformParams = dict[str, Any]


def parse_ratio(value: Any) -> float | None:
    """Accept ``1.5``, ``"1.5"`` or ``"16/9"``; anything unusable is ``None``."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    try:
        if isinstance(value, str) and "/" in value:
            numerator, denominator = value.split("/", 1)
            ratio = float(numerator) / float(denominator)
        else:
            ratio = float(value)
    except (ValueError, ZeroDivisionError):
        return None
    return ratio if ratio > 0 else None


def parse_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


@dataclass(frozen=True)
class BreakpointOverrides:
    """Typed view over the string-namespaced parameters of one breakpoint."""

    glide: Mapping[str, Any] = field(default_factory=dict)
    quality: Mapping[str, int] = field(default_factory=dict)
    formats: Mapping[str, bool] = field(default_factory=dict)
    ratio: float | None = None
    placeholder: bool | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> BreakpointOverrides:
        glide: dict[str, Any] = {}
        quality: dict[str, int] = {}
        formats: dict[str, bool] = {}
        for key, value in params.items():
            if key.startswith(GLIDE_PREFIX):
                glide[key[len(GLIDE_PREFIX) :]] = value
            elif key.startswith(QUALITY_PREFIX) and value is not None:
                quality[key[len(QUALITY_PREFIX) :]] = int(value)
            elif key in TOGGLEABLE_FORMATS and value is not None:
                formats[key] = parse_bool(value)
        placeholder = params.get("placeholder")
        return cls(
            glide=glide,
            quality=quality,
            formats=formats,
            ratio=parse_ratio(params.get("ratio")),
            placeholder=None if placeholder is None else parse_bool(placeholder),
        )

    @property
    def glide_quality(self) -> int | None:
        value = self.glide.get("quality")
        if value is None:
            value = self.glide.get("q")
        return int(value) if value else None

    @property
    def max_width(self) -> int | None:
        value = self.glide.get("width", self.glide.get("w"))
        return None if value is None or value == "" else int(value)


def resolve_quality(
    overrides: BreakpointOverrides,
    asset: AssetEntity,
    config: ResponsiveConfig,
    fmt: str | None,
) -> int | None:
    """glide quality, then ``quality:<format>``, then config, else nothing."""
    glide_quality = overrides.glide_quality
    if glide_quality:
        return glide_quality
    if fmt is None or fmt == "original":
        fmt = asset.extension
    if fmt == "jpeg":
        fmt = "jpg"
    if fmt in overrides.quality:
        return overrides.quality[fmt]
    return config.quality_for(fmt)


def resolve_crop_focus(
    params: Mapping[str, Any], asset: AssetEntity, config: ResponsiveConfig
) -> str | None:
    if not config.auto_crop:
        return None
    if "fit" in params and params["fit"] != CROP_FOCAL:
        return None
    return f"crop-{asset.focus_value}"


def merge_params(*layers: Mapping[str, Any]) -> TransformParams:
    """Merge parameter layers left to right; later layers win.

    The builder feeds them as: glide overrides, format, quality, crop focus,
    canonical size keys, explicit call arguments.
    """
    merged: TransformParams = {}
    for layer in layers:
        for key, value in layer.items():
            merged[key] = value
    return merged


def _canonical_size(glide: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split glide params into (passthrough, size) with ``w``/``h`` renamed."""
    passthrough = {k: v for k, v in glide.items() if k not in ("w", "h", "width", "height", "quality")}
    size: dict[str, Any] = {}
    for canonical, alias in (("width", "w"), ("height", "h")):
        if canonical in glide:
            size[canonical] = glide[canonical]
        elif alias in glide:
            size[canonical] = glide[alias]
    return passthrough, size


def build_transform_params(
    overrides: BreakpointOverrides,
    asset: AssetEntity,
    config: ResponsiveConfig,
    width: int | None = None,
    height: int | None = None,
    fmt: str | None = None,
) -> TransformParams:
    passthrough, size = _canonical_size(overrides.glide)

    format_layer = {"fm": fmt} if fmt and fmt != "original" else {}

    quality = resolve_quality(overrides, asset, config, fmt)
    quality_layer = {"q": quality} if quality else {}

    crop = resolve_crop_focus(passthrough, asset, config)
    crop_layer = {"fit": crop} if crop else {}

    explicit: dict[str, Any] = {}
    if width is not None:
        explicit["width"] = width
    if height is not None:
        explicit["height"] = height

    return merge_params(passthrough, format_layer, quality_layer, crop_layer, size, explicit)
