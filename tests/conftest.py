import os
import sys
import tempfile
from pathlib import Path
from urllib.parse import urlencode

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'src' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("SUPABASE_STORAGE_LOCAL_DIR", tempfile.mkdtemp(prefix="responsive-storage-"))

from src.domain.config import ResponsiveConfig  # noqa: E402
from src.domain.entities.asset import AssetEntity  # noqa: E402
from src.domain.errors import TransformError  # noqa: E402
from src.domain.interfaces import RenderedImage  # noqa: E402
from src.domain.services.context import NullCache, ResponsiveContext  # noqa: E402


class FakeTransformer:
    """Records every call; URLs are the params urlencoded in order."""

    def __init__(self) -> None:
        self.url_calls: list[dict] = []
        self.render_calls: list[dict] = []
        self.failing_widths: set[int] = set()
        self.fail_render = False

    def build_url(self, asset, params):
        self.url_calls.append(dict(params))
        if params.get("width") in self.failing_widths:
            raise TransformError("cache unreadable")
        return f"/img/{asset.path}?{urlencode(list(params.items()))}"

    def render(self, asset, params):
        self.render_calls.append(dict(params))
        if self.fail_render:
            raise TransformError("cache unreadable")
        return RenderedImage(content=b"tiny", mime_type="image/jpeg")


@pytest.fixture
def transformer() -> FakeTransformer:
    return FakeTransformer()


@pytest.fixture
def make_asset():
    def _make(width=300, height=200, file_size=300 * 1024, path="assets/test.jpg", focus=None, asset_id="asset_1"):
        return AssetEntity(
            id=asset_id,
            path=path,
            width=width,
            height=height,
            mime_type="image/jpeg",
            file_size=file_size,
            focus=focus,
        )

    return _make


@pytest.fixture
def make_context(transformer):
    def _make(cache=None, calculator=None, **config):
        return ResponsiveContext(
            config=ResponsiveConfig(**config),
            transformer=transformer,
            calculator=calculator,
            placeholder_cache=cache if cache is not None else NullCache(),
        )

    return _make


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from src.main import create_app

    app = create_app()
    return TestClient(app)
