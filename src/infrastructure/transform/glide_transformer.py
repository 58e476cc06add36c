from __future__ import annotations

import hashlib
import logging
from io import BytesIO
from typing import Any, Mapping
from urllib.parse import urlencode

from PIL import Image, ImageFilter, ImageOps

from src.domain.config import ResponsiveConfig
from src.domain.entities.asset import AssetEntity, FocusPoint
from src.domain.entities.dimensions import round_half_up
from src.domain.errors import TransformError
from src.domain.interfaces import RenderedImage
from src.infrastructure.storage.supabase_storage import SupabaseStorage

logger = logging.getLogger(__name__)

IMAGE_ROUTE = "/img"

# Canonical parameter names are shortened in URLs
_URL_ALIASES = {"width": "w", "height": "h"}

_PIL_FORMATS = {
    "jpg": "JPEG",
    "jpeg": "JPEG",
    "pjpg": "JPEG",
    "png": "PNG",
    "gif": "GIF",
    "webp": "WEBP",
    "avif": "AVIF",
}


def sign(sign_key: str, path: str, query: str) -> str:
    return hashlib.md5(f"{sign_key}:{path.lstrip('/')}?{query}".encode("utf-8")).hexdigest()


class GlideTransformer:
    """Glide-style transform engine.

    ``build_url`` produces deterministic ``/img/<path>?w=..`` URLs served by the
    image route; ``render`` performs the manipulation with Pillow.
    """

    def __init__(self, storage: SupabaseStorage, config: ResponsiveConfig) -> None:
        self.storage = storage
        self.config = config

    # --------- URLs ---------
    def build_url(self, asset: AssetEntity, params: Mapping[str, Any]) -> str:
        path = asset.path.lstrip("/")
        query = urlencode(
            [(_URL_ALIASES.get(key, key), value) for key, value in params.items() if value is not None]
        )
        if self.config.sign_key:
            signature = sign(self.config.sign_key, path, query)
            query = f"{query}&s={signature}" if query else f"s={signature}"

        base = self.config.app_url if self.config.force_absolute_urls else ""
        url = f"{base}{IMAGE_ROUTE}/{path}"
        return f"{url}?{query}" if query else url

    def verify_signature(self, path: str, params: list[tuple[str, str]]) -> bool:
        if not self.config.sign_key:
            return True
        provided = next((value for key, value in params if key == "s"), None)
        query = urlencode([(key, value) for key, value in params if key != "s"])
        return provided == sign(self.config.sign_key, path, query)

    # --------- rendering ---------
    def render(self, asset: AssetEntity, params: Mapping[str, Any]) -> RenderedImage:
        try:
            data = self.storage.download_bytes(asset.path)
            with Image.open(BytesIO(data)) as source:
                source.load()
                image = self._manipulate(ImageOps.exif_transpose(source), params)
                content, mime_type = self._encode(image, asset, params)
        except (OSError, ValueError, KeyError) as exc:
            raise TransformError(f"Could not render {asset.path}: {exc}") from exc
        logger.debug("Rendered %s with %s (%d bytes)", asset.path, dict(params), len(content))
        return RenderedImage(content=content, mime_type=mime_type)

    def _manipulate(self, image: Image.Image, params: Mapping[str, Any]) -> Image.Image:
        width = _int_param(params, "width", "w")
        height = _int_param(params, "height", "h")

        if width or height:
            if not height:
                height = max(1, round_half_up(width * image.height / image.width))
            if not width:
                width = max(1, round_half_up(height * image.width / image.height))
            image = self._resize(image, width, height, str(params.get("fit") or "contain"))

        blur = params.get("blur")
        if blur:
            image = image.filter(ImageFilter.GaussianBlur(float(blur)))
        return image

    @staticmethod
    def _resize(image: Image.Image, width: int, height: int, fit: str) -> Image.Image:
        size = (width, height)
        if fit.startswith("crop"):
            focus = FocusPoint.parse(fit[len("crop-") :]) if fit.startswith("crop-") else FocusPoint()
            if focus.zoom and focus.zoom > 1:
                image = _zoom(image, focus)
            centering = (min(max(focus.x / 100, 0.0), 1.0), min(max(focus.y / 100, 0.0), 1.0))
            return ImageOps.fit(image, size, Image.Resampling.LANCZOS, centering=centering)
        if fit == "fill":
            return ImageOps.pad(image, size, Image.Resampling.LANCZOS)
        if fit == "stretch":
            return image.resize(size, Image.Resampling.LANCZOS)
        if fit == "max":
            image = image.copy()
            image.thumbnail(size, Image.Resampling.LANCZOS)
            return image
        return ImageOps.contain(image, size, Image.Resampling.LANCZOS)

    @staticmethod
    def _encode(image: Image.Image, asset: AssetEntity, params: Mapping[str, Any]) -> tuple[bytes, str]:
        fm = str(params.get("fm") or asset.extension).lower()
        pil_format = _PIL_FORMATS.get(fm)
        if pil_format is None:
            raise ValueError(f"Unsupported output format: {fm}")

        if pil_format == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        options: dict[str, Any] = {}
        quality = params.get("q") or params.get("quality")
        if quality and pil_format in ("JPEG", "WEBP", "AVIF"):
            options["quality"] = int(quality)

        buf = BytesIO()
        image.save(buf, format=pil_format, **options)
        mime_type = Image.MIME.get(pil_format) or f"image/{fm}"
        return buf.getvalue(), mime_type


def _int_param(params: Mapping[str, Any], *names: str) -> int | None:
    for name in names:
        value = params.get(name)
        if value not in (None, ""):
            return int(float(value))
    return None


def _zoom(image: Image.Image, focus: FocusPoint) -> Image.Image:
    """Crop a 1/zoom sized window around the focal point."""
    crop_w = max(1, round_half_up(image.width / focus.zoom))
    crop_h = max(1, round_half_up(image.height / focus.zoom))
    center_x = image.width * focus.x / 100
    center_y = image.height * focus.y / 100
    left = int(min(max(center_x - crop_w / 2, 0), image.width - crop_w))
    top = int(min(max(center_y - crop_h / 2, 0), image.height - crop_h))
    return image.crop((left, top, left + crop_w, top + crop_h))
