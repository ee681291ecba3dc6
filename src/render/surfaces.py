"""
Raster surfaces for the bandwidth chart.

- BrailleSurface: 2x4 dots per terminal cell, rendered to a Rich Text
- ImageSurface: Pillow RGBA image, saved as PNG

Both report ``width``/``height`` as the largest pixel coordinate, so a
point at (width, height) is the bottom-right pixel.
"""

import math
from typing import Dict, Optional, Sequence, Tuple

from PIL import Image, ImageChops, ImageColor, ImageDraw
from rich.text import Text

from .chart import Gradient

DEFAULT_BACKGROUND = "#0d1117"

BRAILLE_BLANK = '\u2800'
BRAILLE_BASE = 0x2800

# Dot bits indexed [row][column] within a 2x4 braille cell
BRAILLE_DOTS = (
    (0x01, 0x08),
    (0x02, 0x10),
    (0x04, 0x20),
    (0x40, 0x80),
)

# Strokes win over fills when both touch a cell
FILL_LAYER = 0
STROKE_LAYER = 1


def _hex(rgb: Sequence[int]) -> str:
    return "#{:02x}{:02x}{:02x}".format(*rgb[:3])


class BrailleSurface:
    """Dot raster for terminal output.

    A terminal cell holds one braille glyph and one foreground color, so each
    cell takes the color of its most important dot: the latest stroke if any,
    otherwise the latest fill. Translucent fills are blended against the
    background; ``fill_gain`` brightens them since a dot covers far less of
    a cell than a filled pixel.
    """

    def __init__(self, columns: int, rows: int, background: str = DEFAULT_BACKGROUND,
                 fill_gain: float = 2.5):
        if columns < 1 or rows < 1:
            raise ValueError("Surface needs at least one column and one row")
        self.columns = columns
        self.rows = rows
        self.pixel_width = columns * 2
        self.pixel_height = rows * 4
        self.width = self.pixel_width - 1
        self.height = self.pixel_height - 1
        self.fill_gain = fill_gain
        self._background = ImageColor.getrgb(background)
        self._dots: Dict[Tuple[int, int], Tuple[int, int, str]] = {}
        self._order = 0

    def clear(self):
        self._dots = {}
        self._order = 0

    def dot(self, x: int, y: int) -> Optional[str]:
        """Color of the dot at (x, y), or None when unset."""
        entry = self._dots.get((x, y))
        return entry[2] if entry else None

    def _plot(self, x: int, y: int, color: str, layer: int):
        if not (0 <= x < self.pixel_width and 0 <= y < self.pixel_height):
            return
        existing = self._dots.get((x, y))
        if existing is not None and existing[0] > layer:
            return
        self._order += 1
        self._dots[(x, y)] = (layer, self._order, color)

    def _blend(self, color: str, alpha: float) -> str:
        opacity = min(1.0, max(alpha, 0.04) * self.fill_gain)
        rgb = ImageColor.getrgb(color)
        return _hex([
            round(bg + (fg - bg) * opacity)
            for fg, bg in zip(rgb, self._background)
        ])

    def fill_polygon(self, points: Sequence[Tuple[float, float]], gradient: Gradient):
        """Even-odd scanline fill, one pass per dot row."""
        if len(points) < 3:
            return
        edges = list(zip(points, list(points[1:]) + [points[0]]))

        for py in range(self.pixel_height):
            # The baseline row sits exactly on the polygon's bottom edge
            sy = min(py, self.height - 1e-6)
            crossings = []
            for (x1, y1), (x2, y2) in edges:
                if (y1 <= sy < y2) or (y2 <= sy < y1):
                    crossings.append(x1 + (sy - y1) * (x2 - x1) / (y2 - y1))
            if not crossings:
                continue
            crossings.sort()
            color = self._blend(gradient.color, gradient.alpha_at(py, self.height))
            for left, right in zip(crossings[0::2], crossings[1::2]):
                for px in range(math.ceil(left - 1e-9), math.floor(right + 1e-9) + 1):
                    self._plot(px, py, color, FILL_LAYER)

    def stroke_polyline(self, points: Sequence[Tuple[float, float]], color: str, width: int = 1):
        """Draw connected segments. Dots are one pixel wide whatever ``width`` says."""
        pixels = [(int(round(x)), int(round(y))) for x, y in points]
        if len(pixels) == 1:
            self._plot(pixels[0][0], pixels[0][1], color, STROKE_LAYER)
            return
        for start, end in zip(pixels, pixels[1:]):
            self._line(start, end, color)

    def _line(self, start: Tuple[int, int], end: Tuple[int, int], color: str):
        # Bresenham
        x0, y0 = start
        x1, y1 = end
        dx = abs(x1 - x0)
        dy = -abs(y1 - y0)
        sx = 1 if x0 < x1 else -1
        sy = 1 if y0 < y1 else -1
        err = dx + dy
        while True:
            self._plot(x0, y0, color, STROKE_LAYER)
            if x0 == x1 and y0 == y1:
                break
            e2 = 2 * err
            if e2 >= dy:
                err += dy
                x0 += sx
            if e2 <= dx:
                err += dx
                y0 += sy

    def to_text(self) -> Text:
        """Compose the dots into one Rich Text, a line per cell row."""
        text = Text(no_wrap=True, overflow="crop")
        for row in range(self.rows):
            if row:
                text.append("\n")
            for column in range(self.columns):
                bits = 0
                best = None
                for dy in range(4):
                    for dx in range(2):
                        entry = self._dots.get((column * 2 + dx, row * 4 + dy))
                        if entry is None:
                            continue
                        bits |= BRAILLE_DOTS[dy][dx]
                        if best is None or entry[:2] > best[:2]:
                            best = entry
                if bits:
                    text.append(chr(BRAILLE_BASE + bits), style=best[2])
                else:
                    text.append(BRAILLE_BLANK)
        return text


class ImageSurface:
    """Pillow-backed RGBA raster."""

    def __init__(self, width: int, height: int, background: Optional[str] = DEFAULT_BACKGROUND):
        if width < 2 or height < 2:
            raise ValueError("Image must be at least 2x2 pixels")
        self.size = (width, height)
        self.width = width - 1
        self.height = height - 1
        self.background = background
        self.image = self._blank()

    def _blank(self) -> Image.Image:
        if self.background is None:
            return Image.new("RGBA", self.size, (0, 0, 0, 0))
        return Image.new("RGBA", self.size, ImageColor.getrgb(self.background)[:3] + (255,))

    def clear(self):
        self.image = self._blank()

    def fill_polygon(self, points: Sequence[Tuple[float, float]], gradient: Gradient):
        mask = Image.new("L", self.size, 0)
        ImageDraw.Draw(mask).polygon([tuple(point) for point in points], fill=255)

        # linear_gradient runs black at the top to white at the bottom
        top, bottom = gradient.top_alpha, gradient.bottom_alpha
        ramp = Image.linear_gradient("L").resize(self.size)
        alpha = ramp.point(lambda v: int(round(255 * (top + (bottom - top) * v / 255))))

        layer = Image.new("RGBA", self.size, ImageColor.getrgb(gradient.color)[:3] + (255,))
        layer.putalpha(ImageChops.multiply(alpha, mask))
        self.image.alpha_composite(layer)

    def stroke_polyline(self, points: Sequence[Tuple[float, float]], color: str, width: int = 1):
        draw = ImageDraw.Draw(self.image)
        draw.line([tuple(point) for point in points], fill=color, width=width, joint="curve")

    def save(self, path):
        self.image.save(path, format="PNG")
