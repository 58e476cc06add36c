"""Environment-driven settings for the responsive image service."""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.domain.config import ResponsiveConfig


class ResponsiveSettings(BaseSettings):
    """
    Settings model read from ``RESPONSIVE_*`` environment variables
    or a local ``.env`` file.

    Mappings are given as JSON, e.g.
    ``RESPONSIVE_BREAKPOINTS='{"sm": 640, "lg": 1024}'``.
    """

    breakpoints: dict[str, int] = Field(
        default_factory=lambda: {"sm": 640, "md": 768, "lg": 1024, "xl": 1280, "2xl": 1536}
    )
    breakpoint_unit: str = "px"
    webp: bool = True
    avif: bool = False
    placeholder: bool = True
    quality: dict[str, int] = Field(default_factory=lambda: {"jpg": 90, "webp": 90, "avif": 45})
    max_width: Optional[int] = None
    auto_crop: bool = True

    size_step: float = Field(0.7, gt=0.0, lt=1.0)
    min_file_size: int = Field(10 * 1024, ge=1)
    min_width: int = Field(20, ge=1)
    placeholder_width: int = Field(32, ge=1)
    placeholder_blur: int = Field(5, ge=0)

    force_absolute_urls: bool = False
    app_url: str = "http://localhost:8000"
    sign_key: Optional[str] = None
    debug: bool = False

    log_level: str = "INFO"
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://localhost:5173"]
    )

    model_config = SettingsConfigDict(
        env_prefix="RESPONSIVE_",
        env_file=".env",
        extra="ignore",
    )

    def to_config(self) -> ResponsiveConfig:
        return ResponsiveConfig(
            breakpoints=dict(self.breakpoints),
            breakpoint_unit=self.breakpoint_unit,
            webp=self.webp,
            avif=self.avif,
            placeholder=self.placeholder,
            quality=dict(self.quality),
            max_width=self.max_width,
            auto_crop=self.auto_crop,
            size_step=self.size_step,
            min_file_size=self.min_file_size,
            min_width=self.min_width,
            placeholder_width=self.placeholder_width,
            placeholder_blur=self.placeholder_blur,
            force_absolute_urls=self.force_absolute_urls,
            app_url=self.app_url.rstrip("/"),
            sign_key=self.sign_key,
            debug=self.debug,
        )


@lru_cache(maxsize=1)
def get_settings() -> ResponsiveSettings:
    return ResponsiveSettings()
