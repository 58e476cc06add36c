import pytest

from src.domain.entities.asset import FocusPoint
from src.domain.errors import AssetNotFoundError
from src.infrastructure.cache.memory_cache import MemoryCache
from src.infrastructure.database.repositories.asset_repository import AssetRepository


@pytest.fixture
def repo(monkeypatch):
    monkeypatch.setenv("SUPABASE_DISABLED", "1")
    return AssetRepository(None)


def test_create_and_resolve(repo):
    asset = repo.create(path="assets/repo-test.jpg", width=640, height=480, mime_type="image/jpeg", file_size=1000)

    assert repo.get(asset.id) == asset
    assert repo.resolve(asset.id) == asset
    assert repo.resolve("assets/repo-test.jpg") == asset
    assert repo.resolve("/local-storage/assets/repo-test.jpg") == asset
    assert repo.resolve(asset) is asset
    assert asset in repo.list_all()


@pytest.mark.parametrize("reference", ["nope", "", None, "/local-storage/assets/nope.jpg"])
def test_resolve_missing(repo, reference):
    with pytest.raises(AssetNotFoundError) as excinfo:
        repo.resolve(reference)
    assert excinfo.value.reference == reference


def test_public_url_round_trip(repo):
    url = repo.get_public_url("assets/a.png")
    assert url == "/local-storage/assets/a.png"
    assert repo.path_from_url(url) == "assets/a.png"
    assert repo.path_from_url("https://x.supabase.co/storage/v1/object/public/assets/assets/a.png") == "assets/a.png"
    assert repo.path_from_url("https://example.com/a.png") is None


def test_asset_properties(make_asset):
    asset = make_asset(300, 0, path="assets/Photo.JPG")
    assert asset.extension == "jpg"
    assert asset.aspect_ratio is None
    assert asset.focus_value == "50-50"
    assert make_asset(focus="29-71-3.6").focus_point == FocusPoint(29, 71, 3.6)


@pytest.mark.parametrize("value,expected", [("29-71-3.6", "29-71-3.6"), ("30", "30-50"), ("bad-focus", "50-50"), (None, "50-50")])
def test_focus_parse(value, expected):
    assert str(FocusPoint.parse(value)) == expected


def test_memory_cache():
    cache = MemoryCache()
    assert cache.get("k") is None
    cache.set("k", "v")
    assert cache.get("k") == "v"
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0
