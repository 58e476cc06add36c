import base64

import pytest

from src.domain.entities.breakpoint import Breakpoint
from src.domain.errors import InvalidDimensionError, TransformError
from src.infrastructure.cache.memory_cache import MemoryCache


def _formats(breakpoint):
    return [source.format for source in breakpoint.get_sources()]


def test_sources_follow_config(make_asset, make_context):
    asset = make_asset()
    assert _formats(Breakpoint(asset, "default", 0, {}, make_context())) == ["webp", "original"]
    assert _formats(Breakpoint(asset, "default", 0, {}, make_context(avif=True))) == ["avif", "webp", "original"]
    assert _formats(Breakpoint(asset, "default", 0, {}, make_context(webp=False))) == ["original"]


def test_sources_follow_overrides(make_asset, make_context):
    asset = make_asset()
    context = make_context()
    assert _formats(Breakpoint(asset, "lg", 1024, {"avif": True}, context)) == ["avif", "webp", "original"]
    assert _formats(Breakpoint(asset, "lg", 1024, {"webp": "false"}, context)) == ["original"]


def test_media_string(make_asset, make_context):
    asset = make_asset()
    assert Breakpoint(asset, "default", 0, {}, make_context()).get_media_string() == ""
    assert Breakpoint(asset, "lg", 1024, {}, make_context()).get_media_string() == "(min-width: 1024px)"
    assert Breakpoint(asset, "md", 48, {}, make_context(breakpoint_unit="em")).get_media_string() == "(min-width: 48em)"


def test_ratio_defaults_to_natural(make_asset, make_context):
    context = make_context()
    assert Breakpoint(make_asset(300, 200), "default", 0, {}, context).ratio == 1.5
    assert Breakpoint(make_asset(300, 200), "default", 0, {"ratio": "16/9"}, context).ratio == 16 / 9
    with pytest.raises(InvalidDimensionError):
        Breakpoint(make_asset(300, 0), "default", 0, {}, context).ratio


def test_null_ratio_srcset_has_no_heights(make_asset, make_context, transformer):
    breakpoint = Breakpoint(make_asset(), "default", 0, {"ratio": None}, make_context())
    srcset = breakpoint.get_srcset(include_placeholder=False)
    assert srcset.startswith("/img/assets/test.jpg?q=90&fit=crop-50-50&width=300 300w, ")
    assert all("height" not in call for call in transformer.url_calls)


def test_placeholder_is_svg_data_uri(make_asset, make_context):
    breakpoint = Breakpoint(make_asset(300, 200), "default", 0, {}, make_context())
    placeholder = breakpoint.placeholder()
    assert placeholder.startswith("data:image/svg+xml;base64,")

    svg = base64.b64decode(placeholder.split(",", 1)[1]).decode("utf-8")
    assert 'width="32" height="21"' in svg
    assert "data:image/jpeg;base64," + base64.b64encode(b"tiny").decode("ascii") in svg

    assert breakpoint.placeholder_src() == f"{placeholder} 32w"


def test_placeholder_render_params(make_asset, make_context, transformer):
    Breakpoint(make_asset(300, 200), "default", 0, {"ratio": 1}, make_context()).placeholder()
    assert transformer.render_calls == [{"width": 32, "height": 32, "blur": 5}]


def test_placeholder_is_memoised(make_asset, make_context, transformer):
    cache = MemoryCache()
    context = make_context(cache=cache)
    asset = make_asset()

    first = Breakpoint(asset, "default", 0, {}, context).placeholder()
    second = Breakpoint(asset, "lg", 1024, {}, context).placeholder()

    assert first == second
    assert len(transformer.render_calls) == 1
    assert cache.get(f"placeholder-{asset.id}-32-21") == first


def test_placeholder_cache_key_includes_dimensions(make_asset, make_context, transformer):
    context = make_context(cache=MemoryCache())
    asset = make_asset()
    Breakpoint(asset, "default", 0, {}, context).placeholder()
    Breakpoint(asset, "lg", 1024, {"ratio": 1}, context).placeholder()
    assert len(transformer.render_calls) == 2


def test_placeholder_failure_degrades(make_asset, make_context, transformer, caplog):
    cache = MemoryCache()
    transformer.fail_render = True
    breakpoint = Breakpoint(make_asset(), "default", 0, {}, make_context(cache=cache))

    assert breakpoint.placeholder() == ""
    assert breakpoint.placeholder_src() == ""
    assert "could not be generated" in caplog.text
    assert len(cache) == 0

    transformer.fail_render = False
    assert breakpoint.placeholder().startswith("data:image/svg+xml;base64,")


def test_placeholder_failure_raises_in_debug(make_asset, make_context, transformer):
    transformer.fail_render = True
    breakpoint = Breakpoint(make_asset(), "default", 0, {}, make_context(debug=True))
    with pytest.raises(TransformError):
        breakpoint.placeholder()


def test_to_dict(make_asset, make_context):
    data = Breakpoint(make_asset(), "lg", 1024, {"ratio": 2}, make_context()).to_dict()
    assert data == {
        "asset_id": "asset_1",
        "label": "lg",
        "min_width": 1024,
        "width_unit": "px",
        "parameters": {"ratio": 2},
    }


def test_placeholder_enabled_prefers_override(make_asset, make_context):
    asset = make_asset()
    assert Breakpoint(asset, "default", 0, {}, make_context()).placeholder_enabled() is True
    assert Breakpoint(asset, "default", 0, {}, make_context(placeholder=False)).placeholder_enabled() is False
    assert Breakpoint(asset, "lg", 1024, {"placeholder": "false"}, make_context()).placeholder_enabled() is False
    assert Breakpoint(asset, "lg", 1024, {"placeholder": True}, make_context(placeholder=False)).placeholder_enabled() is True


def test_srcset_follows_breakpoint_placeholder(make_asset, make_context, transformer):
    breakpoint = Breakpoint(make_asset(), "lg", 1024, {"placeholder": False}, make_context())
    assert breakpoint.get_srcset().startswith("/img/")
    assert breakpoint.get_srcset(include_placeholder=True).startswith("data:image/svg+xml;base64,")
    assert len(transformer.render_calls) == 1
