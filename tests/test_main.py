import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_index(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]


def test_presets(client):
    resp = client.get("/presets")
    assert resp.status_code == 200
    presets = resp.json()
    assert len(presets) == 12
    assert presets[0] == {"id": 1, "name": "Fractal Tree", "iterations": 7, "max_iterations": 7, "angle": 30}


def test_drawfractal_png(client):
    resp = client.get("/drawfractal", params={"fractal": 2, "iterations": 4, "width": 100, "height": 80})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"
    assert Image.open(io.BytesIO(resp.content)).size == (100, 80)


def test_drawfractal_jpeg(client):
    resp = client.get("/drawfractal", params={"fractal": 4, "iterations": 2, "width": 64, "height": 64, "format": "jpeg"})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/jpeg"


@pytest.mark.parametrize("params,status", [
    ({"fractal": 99}, 404),
    ({"fractal": 2, "iterations": 99}, 413),
    ({"fractal": 2, "iterations": -1}, 400),
    ({"fractal": 2, "iterations": 2, "color1": "not-a-color"}, 400),
    ({"fractal": 2, "format": "gif"}, 400),
])
def test_drawfractal_errors(client, params, status):
    resp = client.get("/drawfractal", params=params)
    assert resp.status_code == status
    assert resp.json()["success"] is False


def test_fractal_steps(client):
    resp = client.get("/fractal_steps", params={"fractal": 2, "iterations": 2})
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Dragon Curve"
    assert data["segments"] == 4
    assert data["steps"][0]["type"] == "move"


CUSTOM = {
    "variables": "F",
    "constants": "+-[]",
    "angle": 25,
    "axiom": "F",
    "rules": ["F=F[+F]F[-F]F"],
    "iterations": 2,
}


def test_drawcustom(client):
    resp = client.post("/drawcustom", json={"config": CUSTOM, "width": 64, "height": 64})
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/png"


def test_drawcustom_iteration_override(client):
    resp = client.post("/drawcustom", json={"config": {**CUSTOM, "max_iterations": 3}, "iterations": 4})
    assert resp.status_code == 413


def test_drawcustom_unbalanced(client):
    config = {**CUSTOM, "axiom": "]F", "iterations": 0}
    resp = client.post("/drawcustom", json={"config": config})
    assert resp.status_code == 422


@pytest.mark.parametrize("body", [
    {},
    {"config": {**CUSTOM, "rules": ["FF=F"]}},
    {"config": {**CUSTOM, "axiom": ""}},
    {"config": CUSTOM, "width": 5},
    {"config": CUSTOM, "format": "bmp"},
])
def test_drawcustom_bad_requests(client, body):
    resp = client.post("/drawcustom", json=body)
    assert resp.status_code == 400


@pytest.mark.parametrize("number", ["NaN", "Infinity", "-Infinity"])
@pytest.mark.parametrize("key", ["angle", "length"])
def test_drawcustom_non_finite_numbers(client, key, number):
    body = '{"config": {"variables": "F", "constants": "+-[]", "axiom": "F", "rules": ["F=F+F"], "angle": 90, "%s": %s}}' % (key, number)
    resp = client.post("/drawcustom", content=body, headers={"content-type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_drawcustom_logs_undefined_symbols(client, capsys):
    config = {**CUSTOM, "rules": ["F=F[+F]Q"]}
    resp = client.post("/drawcustom", json={"config": config, "width": 32, "height": 32})
    assert resp.status_code == 200
    assert "undefined symbols 'Q'" in capsys.readouterr().out


def test_drawfractal_smallest_size_is_drawn(client):
    resp = client.get("/drawfractal", params={"fractal": 2, "iterations": 4, "width": 16, "height": 16})
    assert resp.status_code == 200
    img = Image.open(io.BytesIO(resp.content)).convert("RGB")
    assert img.getbbox() is not None


def test_index_reports_validation_details(client):
    html = client.get("/").text
    assert "data.detail" in html
