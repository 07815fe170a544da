"""
Draw an L-system fractal on the desktop or to an image file.

  python fractaldraw.py --list
  python fractaldraw.py --fractal 2 --iterations 10
  python fractaldraw.py --fractal 1 --out tree.png --color1 "#4DFE44" --color2 "#FF44AA"
  python fractaldraw.py --config my_system.json --out custom.jpg

Without --out a tkinter window opens and a turtle traces the fractal.
"""

import argparse
import os
import sys

from app_config import get_default_colors
from draw_sinks import DrawSink, ImageSink, gradient_colors
from fractal_config import load_config
from fractal_errors import FractalError
from fractal_presets import apply_iterations, list_presets, select_preset
from fractalgen_web import canvas_origin, draw_fractal, render_fractal
from utils import encode_image


class TurtleSink(DrawSink):
    """Drives a turtle.RawTurtle. Turtle space is y-up, the sink is y-down."""

    def __init__(self, t, origin=(0.0, 0.0), scale=1.0, colors=None):
        self.t = t
        self.origin = origin
        self.scale = scale
        self.colors = list(colors or [])
        self._stroked = 0

    def _to_turtle(self, x, y):
        return (self.origin[0] + x * self.scale, self.origin[1] - y * self.scale)

    def move_to(self, x, y):
        self.t.penup()
        self.t.goto(*self._to_turtle(x, y))
        self.t.pendown()

    def line_to(self, x, y):
        if self._stroked < len(self.colors):
            self.t.pencolor(self.colors[self._stroked])
        self.t.goto(*self._to_turtle(x, y))

    def stroke(self):
        self._stroked += 1


def make_canvas(width=800, height=800, background="black"):
    import tkinter as tk
    import turtle

    root = tk.Tk()
    root.title("L-System Fractals")

    canvas = tk.Canvas(root, width=width, height=height, background=background)
    canvas.pack(fill=tk.BOTH, expand=True)

    # Turtle setup
    t = turtle.RawTurtle(canvas)
    t.speed(0)
    t.hideturtle()
    t.pensize(1)
    t.getscreen().colormode(255)
    t.getscreen().tracer(0, 0)  # fast drawing

    return root, t


def parse_size(text):
    try:
        w, h = (int(v) for v in text.lower().split("x"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"size must look like 800x600, got {text!r}")
    if w < 16 or h < 16:
        raise argparse.ArgumentTypeError("size must be at least 16x16")
    return (w, h)


def build_parser():
    ap = argparse.ArgumentParser(description="Render L-system fractals")
    ap.add_argument("--fractal", type=int, default=1, help="preset id (see --list)")
    ap.add_argument("--iterations", type=int, default=None, help="override the preset's iteration count")
    ap.add_argument("--config", help="JSON file describing a custom L-system")
    ap.add_argument("--color1")
    ap.add_argument("--color2")
    ap.add_argument("--size", type=parse_size, default=(800, 800))
    ap.add_argument("--out", help="write an image (.png, .jpg) instead of opening a window")
    ap.add_argument("--no-fit", dest="fit", action="store_false",
                    help="keep the preset's canvas origin instead of fitting the drawing")
    ap.add_argument("--list", action="store_true", help="list the bundled fractals")
    return ap


def show_window(config, size, color1, color2, fit):
    # Lay the drawing out once off-screen so the window can fit it
    layout = ImageSink(size=size)
    run = draw_fractal(config, layout)
    scale, offset_x, offset_y = layout.transform(fit=fit, origin=canvas_origin(config, size))

    root, t = make_canvas(*size)
    # tkinter turtle puts (0, 0) at the centre of the canvas
    origin = (offset_x - size[0] / 2, size[1] / 2 - offset_y)
    colors = gradient_colors(color1, color2, run.segments)
    draw_fractal(config, TurtleSink(t, origin=origin, scale=scale, colors=colors), stream=True)
    t.getscreen().update()
    root.mainloop()


def main(argv=None):
    args = build_parser().parse_args(argv)

    if args.list:
        for preset in list_presets():
            print(f"{preset['id']:>2}  {preset['name']:<22} iterations={preset['iterations']} (max {preset['max_iterations']})")
        return 0

    default1, default2 = get_default_colors()
    color1 = args.color1 or default1
    color2 = args.color2 or default2

    try:
        if args.config:
            config = apply_iterations(load_config(args.config), args.iterations)
        else:
            config = select_preset(args.fractal, args.iterations)

        if args.out:
            fmt = os.path.splitext(args.out)[1].lstrip(".").lower() or "png"
            img = render_fractal(config, color1=color1, color2=color2, img_size=args.size, fit=args.fit)
            data = encode_image(img, fmt)
            with open(args.out, "wb") as f:
                f.write(data)
            print(f"[fractalgen] Saved {config.name} ({config.iterations} iterations) to {args.out}")
        else:
            show_window(config, args.size, color1, color2, args.fit)
    except KeyError as e:
        print(f"error: {e.args[0]}", file=sys.stderr)
        return 2
    except (FractalError, ValueError, OSError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
