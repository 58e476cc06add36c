import base64
import io

from PIL import Image


def make_png_bytes(w=400, h=300) -> bytes:
    # noise keeps the PNG large enough for several srcset widths
    img = Image.effect_noise((w, h), 64).convert("RGB")
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


essentials = {}


def test_root_and_health(client):
    assert client.get("/").json()["status"] == "ok"
    assert client.get("/health").json() == {"status": "healthy"}


def test_upload_and_list(client):
    png = make_png_bytes()
    files = {"file": ("sample.png", png, "image/png")}
    r = client.post("/assets/upload", files=files, data={"focus": "25-75"})
    assert r.status_code == 201, r.text
    data = r.json()["asset"]
    assert (data["width"], data["height"]) == (400, 300)
    assert data["mime_type"] == "image/png"
    assert data["focus"] == "25-75"
    assert data["url"] == f"/local-storage/{data['path']}"
    essentials["asset_id"] = data["id"]
    essentials["path"] = data["path"]

    r2 = client.get("/assets")
    assert r2.status_code == 200
    assets = r2.json()["assets"]
    assert any(a["id"] == essentials["asset_id"] for a in assets)


def test_upload_rejects_non_image(client):
    files = {"file": ("notes.txt", b"hello", "text/plain")}
    r = client.post("/assets/upload", files=files)
    assert r.status_code == 400


def test_get_asset(client):
    r = client.get(f"/assets/{essentials['asset_id']}")
    assert r.status_code == 200
    assert r.json()["path"] == essentials["path"]

    assert client.get("/assets/does-not-exist").status_code == 404


def test_download_original(client):
    r = client.get(f"/local-storage/{essentials['path']}")
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/png"


def test_query_breakpoints(client):
    r = client.get(f"/responsive/{essentials['asset_id']}", params={"placeholder": "false", "lg_ratio": "2"})
    assert r.status_code == 200, r.text
    breakpoints = r.json()
    assert [bp["label"] for bp in breakpoints] == ["default", "lg"]

    default, lg = breakpoints
    assert default["ratio"] == 400 / 300
    assert default["placeholder"] is None
    assert [s["format"] for s in default["sources"]] == ["webp", "original"]

    srcset = default["sources"][0]["srcset"]
    first = srcset.split(", ")[0]
    assert first.startswith(f"/img/{essentials['path']}?fm=webp&q=90&fit=crop-25-75&w=400")
    assert first.endswith(" 400w")
    essentials["variant_url"] = first.rsplit(" ", 1)[0]

    assert lg["sources"][0]["media_string"] == "(min-width: 1024px)"
    assert "&h=200 400w" in lg["sources"][0]["srcset"]


def test_query_width_cap(client):
    r = client.get(f"/responsive/{essentials['asset_id']}", params={"placeholder": "false", "width": 300})
    assert r.status_code == 200
    widths = [int(entry.rsplit(" ", 1)[1][:-1]) for entry in r.json()[0]["sources"][-1]["srcset"].split(", ")]
    assert widths and all(w < 300 for w in widths)


def test_query_placeholder(client):
    r = client.get(f"/responsive/{essentials['asset_id']}", params={"placeholder": "true"})
    assert r.status_code == 200
    default = r.json()[0]
    assert default["placeholder"].startswith("data:image/svg+xml;base64,")
    svg = base64.b64decode(default["placeholder"].split(",", 1)[1]).decode("utf-8")
    assert 'width="32" height="24"' in svg
    assert default["sources"][0]["srcset"].startswith(default["placeholder"] + " 32w, ")


def test_query_unknown_asset(client):
    r = client.get("/responsive/does-not-exist")
    assert r.status_code == 404


def test_render_variant(client):
    r = client.get(essentials["variant_url"])
    assert r.status_code == 200
    assert r.headers["content-type"] == "image/webp"
    with Image.open(io.BytesIO(r.content)) as img:
        assert img.size == (400, 300)

    r = client.get(f"/img/{essentials['path']}", params={"w": 100, "h": 100, "fit": "crop-25-75"})
    assert r.status_code == 200
    with Image.open(io.BytesIO(r.content)) as img:
        assert img.size == (100, 100)

    assert client.get("/img/assets/missing.png?w=100").status_code == 404


def test_picture(client):
    r = client.get(
        "/responsive/picture",
        params={"src": essentials["asset_id"], "glide:width": "200", "placeholder": "false", "avif": "false"},
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert (data["width"], data["height"]) == (200, 150)
    assert data["src"].startswith(f"/img/{essentials['path']}?w=200&h=150")
    assert data["sources"][0]["media"] == ""
    assert data["sources"][0]["srcset_avif"] is None
    first_webp = data["sources"][0]["srcset_webp"].split(", ")[0]
    assert int(first_webp.rsplit(" ", 1)[1][:-1]) < 200


def test_picture_by_url(client):
    r = client.get("/responsive/picture", params={"src": f"/local-storage/{essentials['path']}"})
    assert r.status_code == 200
    assert r.json()["asset_id"] == essentials["asset_id"]


def test_picture_unknown_src(client):
    r = client.get("/responsive/picture", params={"src": "missing"})
    assert r.status_code == 404
