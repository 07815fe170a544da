"""
Drawing surfaces for the turtle interpreter.

A sink is anything with move_to(x, y), line_to(x, y) and stroke(), the same
immediate-mode calls a browser canvas exposes. line_to extends the pending
path; stroke() commits it.
"""

import numpy as np
from PIL import Image, ImageColor, ImageDraw

from fractal_errors import InvalidConfig


def parse_color(value):
    """Return an (r, g, b) tuple for a CSS color name, '#RGB', '#RRGGBB' or bare 'RRGGBB'."""
    if not isinstance(value, str) or not value.strip():
        raise InvalidConfig(f"Invalid color {value!r}")
    text = value.strip()
    if len(text) in (3, 6) and all(c in "0123456789abcdefABCDEF" for c in text):
        text = "#" + text
    try:
        return ImageColor.getrgb(text)[:3]
    except ValueError:
        raise InvalidConfig(f"Invalid color {value!r}") from None


def gradient_colors(color1, color2, count):
    """count colors going linearly from color1 (first) to color2 (last)."""
    if count <= 0:
        return []
    c1 = np.array(parse_color(color1), dtype=float)
    c2 = np.array(parse_color(color2), dtype=float)
    if count == 1:
        return [tuple(int(v) for v in c2)]
    steps = np.linspace(0.0, 1.0, count)[:, None]
    colors = np.rint(c1 + (c2 - c1) * steps).astype(np.uint8)
    return [tuple(int(v) for v in row) for row in colors]


class DrawSink:
    """Base drawing surface. size is (width, height), or None when unbounded."""

    size = None

    def move_to(self, x, y):
        raise NotImplementedError

    def line_to(self, x, y):
        raise NotImplementedError

    def stroke(self):
        raise NotImplementedError


class RecordingSink(DrawSink):
    """Keeps every call in order; used for canvas replay and tests."""

    def __init__(self):
        self.ops = []
        self.segments = []  # committed ((x0, y0), (x1, y1)) pairs
        self._pending = []
        self._pos = (0.0, 0.0)

    def move_to(self, x, y):
        self.ops.append(("move_to", x, y))
        self._pos = (x, y)

    def line_to(self, x, y):
        self.ops.append(("line_to", x, y))
        self._pending.append((self._pos, (x, y)))
        self._pos = (x, y)

    def stroke(self):
        self.ops.append(("stroke",))
        self.segments.extend(self._pending)
        self._pending = []


class ImageSink(DrawSink):
    """Collects stroked segments and renders them with Pillow."""

    def __init__(self, size=(800, 800)):
        self.size = size
        self.x = 0.0
        self.y = 0.0
        self.path_segments = []
        self._pending = []

    def move_to(self, x, y):
        self.x = x
        self.y = y

    def line_to(self, x, y):
        self._pending.append(((self.x, self.y), (x, y)))
        self.x = x
        self.y = y

    def stroke(self):
        self.path_segments.extend(self._pending)
        self._pending = []

    def transform(self, padding=50, fit=True, origin=(0.0, 0.0)):
        """Return (scale, offset_x, offset_y) mapping turtle to image coordinates.

        fit scales and centres the drawing inside the padded image; otherwise
        the turtle origin is placed at origin (image pixels) at scale 1.
        """
        if not fit or not self.path_segments:
            return 1.0, origin[0], origin[1]

        pts = np.array([p for segment in self.path_segments for p in segment], dtype=float)
        min_x, min_y = pts.min(axis=0)
        max_x, max_y = pts.max(axis=0)
        width = max_x - min_x
        height = max_y - min_y
        img_w, img_h = self.size
        # Keep at least one pixel of drawing area on tiny images
        padding = max(0, min(padding, (min(img_w, img_h) - 1) // 2))

        if width == 0 and height == 0:
            scale = 1.0
        else:
            scale_x = (img_w - 2 * padding) / width if width > 0 else float("inf")
            scale_y = (img_h - 2 * padding) / height if height > 0 else float("inf")
            scale = min(scale_x, scale_y)

        # Centre the drawing
        offset_x = padding - min_x * scale + (img_w - 2 * padding - width * scale) / 2
        offset_y = padding - min_y * scale + (img_h - 2 * padding - height * scale) / 2
        return float(scale), float(offset_x), float(offset_y)

    def render(self, color1="#4DFE44", color2="#FF44AA", background="black",
               line_width=1, padding=50, fit=True, origin=(0.0, 0.0)):
        img = Image.new("RGB", self.size, parse_color(background))
        if not self.path_segments:
            return img

        scale, offset_x, offset_y = self.transform(padding, fit, origin)
        colors = gradient_colors(color1, color2, len(self.path_segments))
        draw = ImageDraw.Draw(img)

        for (start, end), color in zip(self.path_segments, colors):
            draw.line(
                [
                    (start[0] * scale + offset_x, start[1] * scale + offset_y),
                    (end[0] * scale + offset_x, end[1] * scale + offset_y),
                ],
                fill=color,
                width=line_width,
            )
        return img


__all__ = ["parse_color", "gradient_colors", "DrawSink", "RecordingSink", "ImageSink"]
