"""
Render glue between the L-system core and the outside world.

config -> expand (lsystem) -> interpret (turtle_interpreter) -> sink -> image / steps
"""

from app_config import get_default_colors
from draw_sinks import ImageSink, RecordingSink, gradient_colors
from lsystem import expand, stream_expand
from turtle_interpreter import interpret, step_length
from utils import encode_image


def canvas_origin(config, img_size):
    """Pixel position of the turtle origin when the drawing is not fitted."""
    width, height = img_size
    return (config.canvas_anchor_x * width, (1.0 - config.canvas_offset) * height)


def draw_fractal(config, sink, max_length=None, cancel=None, stream=False):
    """Expand config and walk the result into sink. Returns the TurtleRun.

    stream=True feeds the turtle symbol by symbol instead of building the
    whole sequence first.
    """
    if stream:
        sequence = stream_expand(config, max_length=max_length)
    else:
        sequence = expand(config, max_length=max_length)
    return interpret(sequence, config, sink, step=step_length(config), cancel=cancel)


def render_fractal(config, color1=None, color2=None, img_size=(800, 800), padding=50,
                   fit=True, background="black", line_width=1, max_length=None):
    default1, default2 = get_default_colors()
    sink = ImageSink(size=img_size)
    draw_fractal(config, sink, max_length=max_length)
    return sink.render(
        color1=color1 or default1,
        color2=color2 or default2,
        background=background,
        line_width=line_width,
        padding=padding,
        fit=fit,
        origin=canvas_origin(config, img_size),
    )


def render_fractal_bytes(config, fmt="png", **kwargs):
    """
    Render a fractal and return encoded image bytes (for the web API / CLI).
    fmt is "png" or "jpeg".
    """
    img = render_fractal(config, **kwargs)
    return encode_image(img, fmt)


def generate_drawing_steps(config, canvas_size=(800, 600), color1=None, color2=None,
                           padding=50, fit=True, max_length=None):
    """
    Drawing instructions for a browser canvas to replay in order.
    Each step is {'type': 'move', 'x', 'y'} or
    {'type': 'line', 'start': {x, y}, 'end': {x, y}, 'color'}.
    """
    default1, default2 = get_default_colors()
    recorder = RecordingSink()
    draw_fractal(config, recorder, max_length=max_length)

    # Reuse the image sink's fit so the canvas and the PNG agree
    layout = ImageSink(size=canvas_size)
    layout.path_segments = recorder.segments
    scale, offset_x, offset_y = layout.transform(padding, fit, canvas_origin(config, canvas_size))

    def transform_point(x, y):
        return {'x': x * scale + offset_x, 'y': y * scale + offset_y}

    colors = gradient_colors(color1 or default1, color2 or default2, len(recorder.segments))
    color_iter = iter(colors)

    drawing_steps = []
    pos = (0.0, 0.0)
    for op in recorder.ops:
        if op[0] == "move_to":
            pos = (op[1], op[2])
            drawing_steps.append({'type': 'move', **transform_point(*pos)})
        elif op[0] == "line_to":
            end = (op[1], op[2])
            r, g, b = next(color_iter)
            drawing_steps.append({
                'type': 'line',
                'start': transform_point(*pos),
                'end': transform_point(*end),
                'color': f"#{r:02x}{g:02x}{b:02x}",
            })
            pos = end
    return drawing_steps
