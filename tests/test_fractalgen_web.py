import io

import pytest
from PIL import Image

from draw_sinks import RecordingSink
from fractal_errors import ResourceLimitExceeded
from fractal_presets import select_preset
from fractalgen_web import (
    canvas_origin,
    draw_fractal,
    generate_drawing_steps,
    render_fractal,
    render_fractal_bytes,
)


def test_canvas_origin():
    assert canvas_origin(select_preset(1), (800, 600)) == pytest.approx((400, 600))
    assert canvas_origin(select_preset(3), (100, 100)) == pytest.approx((50, 20))


def test_draw_fractal_walks_the_expansion():
    sink = RecordingSink()
    run = draw_fractal(select_preset(2, 2), sink)
    # FX+YF++-FX-YF+ has four F's
    assert run.segments == 4
    assert len(sink.segments) == 4


def test_draw_fractal_streaming_matches_expanded_walk():
    expanded, streamed = RecordingSink(), RecordingSink()
    run = draw_fractal(select_preset(1, 3), expanded)
    streamed_run = draw_fractal(select_preset(1, 3), streamed, stream=True)
    assert streamed.ops == expanded.ops
    assert streamed_run.segments == run.segments


def test_render_fractal_draws_something():
    img = render_fractal(select_preset(4, 2), img_size=(200, 150))
    assert img.size == (200, 150)
    assert img.getbbox() is not None


def test_render_fractal_smallest_image():
    img = render_fractal(select_preset(2, 4), img_size=(16, 16))
    assert img.getbbox() is not None


def test_render_fractal_limit():
    with pytest.raises(ResourceLimitExceeded):
        render_fractal(select_preset(2), max_length=100)


def test_render_png_bytes():
    data = render_fractal_bytes(select_preset(2, 4), img_size=(120, 120))
    assert data.startswith(b"\x89PNG")
    assert Image.open(io.BytesIO(data)).size == (120, 120)


def test_render_jpeg_bytes():
    data = render_fractal_bytes(select_preset(2, 4), fmt="jpeg", img_size=(64, 48))
    assert data[:2] == b"\xff\xd8"
    assert Image.open(io.BytesIO(data)).size == (64, 48)


def test_unknown_format():
    with pytest.raises(ValueError):
        render_fractal_bytes(select_preset(2, 2), fmt="gif")


def test_drawing_steps():
    config = select_preset(1, 2)
    steps = generate_drawing_steps(config, canvas_size=(300, 200), color1="#ff0000", color2="#0000ff")

    assert steps[0]["type"] == "move"
    lines = [s for s in steps if s["type"] == "line"]
    run = draw_fractal(config, RecordingSink())
    assert len(lines) == run.segments
    assert lines[0]["color"] == "#ff0000"
    assert lines[-1]["color"] == "#0000ff"

    for step in lines:
        for point in (step["start"], step["end"]):
            assert 50 - 1e-6 <= point["x"] <= 250 + 1e-6
            assert 50 - 1e-6 <= point["y"] <= 150 + 1e-6


def test_drawing_steps_branches_move_back():
    steps = generate_drawing_steps(select_preset(4, 1))
    # F=FF-[-F+F+F]+[+F-F-F] pops twice, plus the initial move
    assert sum(1 for s in steps if s["type"] == "move") == 3
