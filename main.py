import os
from typing import Optional
from fastapi import Body, FastAPI, Query, Response
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from app_config import get_static_dir
from fractal_config import config_from_dict, undefined_symbols
from fractal_errors import InvalidConfig, MalformedSequence, ResourceLimitExceeded
from fractal_presets import apply_iterations, list_presets, select_preset
from fractalgen_web import generate_drawing_steps, render_fractal_bytes
from utils import IMAGE_FORMATS

app = FastAPI()

STATIC_DIR = get_static_dir()
os.makedirs(STATIC_DIR, exist_ok=True)

app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


def error_response(message, status_code):
    print(f"[fractalgen] {status_code}: {message}")
    return JSONResponse({"error": message, "success": False}, status_code=status_code)


def render_error(err):
    """Map a render failure to an HTTP response; the server keeps running."""
    if isinstance(err, KeyError):
        return error_response(str(err.args[0]) if err.args else "Unknown fractal", 404)
    if isinstance(err, ResourceLimitExceeded):
        return error_response(str(err), 413)
    if isinstance(err, MalformedSequence):
        return error_response(str(err), 422)
    return error_response(str(err), 400)


RENDER_ERRORS = (KeyError, InvalidConfig, ResourceLimitExceeded, MalformedSequence)


@app.get("/", response_class=HTMLResponse)
def index():
    index_path = os.path.join(STATIC_DIR, "index.html")
    return FileResponse(index_path, headers={"Cache-Control": "no-store"})


@app.get("/presets")
def presets():
    return JSONResponse(list_presets())


@app.get("/drawfractal")
def drawfractal(
    fractal: int = Query(1, description="Preset id, see /presets"),
    iterations: Optional[int] = Query(None, description="Override the preset's iteration count"),
    color1: Optional[str] = None,
    color2: Optional[str] = None,
    width: int = Query(800, ge=16, le=4096),
    height: int = Query(800, ge=16, le=4096),
    fit: bool = True,
    format: str = Query("png", description="png or jpeg"),
):
    """Render a preset fractal as an image."""
    if format.lower() not in IMAGE_FORMATS:
        return error_response(f"Unsupported format {format!r}", 400)
    try:
        config = select_preset(fractal, iterations)
        img_bytes = render_fractal_bytes(
            config, fmt=format, color1=color1, color2=color2, img_size=(width, height), fit=fit
        )
    except RENDER_ERRORS as err:
        return render_error(err)
    print(f"[fractalgen] {config.name} x{config.iterations} -> {len(img_bytes)} bytes")
    return Response(content=img_bytes, media_type=IMAGE_FORMATS[format.lower()])


@app.get("/fractal_steps")
def fractal_steps(
    fractal: int = 1,
    iterations: Optional[int] = None,
    color1: Optional[str] = None,
    color2: Optional[str] = None,
    width: int = Query(800, ge=16, le=4096),
    height: int = Query(600, ge=16, le=4096),
    fit: bool = True,
):
    """Canvas drawing steps for the browser to replay."""
    try:
        config = select_preset(fractal, iterations)
        steps = generate_drawing_steps(
            config, canvas_size=(width, height), color1=color1, color2=color2, fit=fit
        )
    except RENDER_ERRORS as err:
        return render_error(err)
    segments = sum(1 for s in steps if s["type"] == "line")
    return JSONResponse({"name": config.name, "iterations": config.iterations, "segments": segments, "steps": steps})


@app.post("/drawcustom")
def drawcustom(payload: dict = Body(...)):
    """Render a user defined L-system: {"config": {...}, "iterations", "color1", "color2", "width", "height", "format"}."""
    data = payload.get("config")
    if not isinstance(data, dict):
        return error_response("Body must contain a 'config' object", 400)
    fmt = str(payload.get("format", "png")).lower()
    if fmt not in IMAGE_FORMATS:
        return error_response(f"Unsupported format {fmt!r}", 400)
    width = payload.get("width", 800)
    height = payload.get("height", 800)
    if not all(isinstance(v, int) and 16 <= v <= 4096 for v in (width, height)):
        return error_response("width and height must be integers between 16 and 4096", 400)
    iterations = payload.get("iterations")
    if iterations is not None and (isinstance(iterations, bool) or not isinstance(iterations, int)):
        return error_response("iterations must be an integer", 400)

    try:
        config = apply_iterations(config_from_dict(data), iterations)
        unknown = undefined_symbols(config)
        if unknown:
            print(f"[fractalgen] {config.name}: undefined symbols {''.join(unknown)!r} are drawn as no-ops")
        img_bytes = render_fractal_bytes(
            config,
            fmt=fmt,
            color1=payload.get("color1"),
            color2=payload.get("color2"),
            img_size=(width, height),
            fit=bool(payload.get("fit", True)),
        )
    except RENDER_ERRORS as err:
        return render_error(err)
    return Response(content=img_bytes, media_type=IMAGE_FORMATS[fmt])
