#!/usr/bin/env python3
"""
SPIRAL_SURFACES.PY - Drawing surfaces for the spiral renderer

Contains:
- DrawingSurface: Interface the renderer paints on (all coordinates in mm)
- RasterSurface: Pillow image, converts mm to pixels at draw time
- VectorSurface: svgwrite drawing with a millimeter viewBox

Colors are (r, g, b, alpha) tuples with alpha in 0.0-1.0.
"""

from typing import List, Optional, Sequence, Tuple

import svgwrite
from PIL import Image, ImageDraw, ImageFont

from spiral_math import mm_to_pixels

Color = Tuple[int, int, int, float]
Point = Tuple[float, float]

WHITE: Color = (255, 255, 255, 1.0)

# Two-letter anchors as used by Pillow: horizontal (l/m/r) + vertical (a/t/m/s/b)
SVG_TEXT_ANCHOR = {"l": "start", "m": "middle", "r": "end"}
SVG_BASELINE = {
    "a": "text-before-edge",
    "t": "hanging",
    "m": "central",
    "s": "alphabetic",
    "b": "text-after-edge",
}


class SurfaceUnavailableError(RuntimeError):
    """The drawing surface could not be created."""


class DrawingSurface:
    """Abstract 2D surface measured in millimeters, origin top-left, +y down."""

    def __init__(self, width_mm: float, height_mm: float):
        self.width_mm = width_mm
        self.height_mm = height_mm

    def begin_layer(self, name: str):
        """Start a named group of primitives (no-op unless the format has groups)."""

    def fill_background(self, color: Color = WHITE):
        raise NotImplementedError

    def stroke_line(self, start: Point, end: Point, color: Color, width_mm: float):
        raise NotImplementedError

    def stroke_polyline(self, points: Sequence[Point], color: Color, width_mm: float):
        raise NotImplementedError

    def stroke_circle(self, center: Point, radius_mm: float, color: Color, width_mm: float):
        raise NotImplementedError

    def fill_circle(self, center: Point, radius_mm: float, color: Color):
        raise NotImplementedError

    def stroke_rect(self, origin: Point, size: Tuple[float, float], color: Color, width_mm: float):
        raise NotImplementedError

    def draw_text(self, position: Point, text: str, size_mm: float, color: Color,
                  anchor: str = "mt", bold: bool = False):
        raise NotImplementedError


# =============================================================================
# RASTER
# =============================================================================

class RasterSurface(DrawingSurface):
    """Draws into a white RGB Pillow image at the given DPI."""

    def __init__(self, width_mm: float, height_mm: float, dpi: float):
        super().__init__(width_mm, height_mm)
        self.dpi = dpi
        self.width_px = max(1, round(mm_to_pixels(width_mm, dpi)))
        self.height_px = max(1, round(mm_to_pixels(height_mm, dpi)))

        try:
            self.image = Image.new("RGB", (self.width_px, self.height_px), "white")
        except (MemoryError, ValueError) as e:
            raise SurfaceUnavailableError(
                f"Could not allocate {self.width_px} x {self.height_px} px image: {e}") from e

        # RGBA mode blends translucent colors onto the RGB image
        self.draw = ImageDraw.Draw(self.image, "RGBA")

    def _px(self, mm: float) -> float:
        return mm_to_pixels(mm, self.dpi)

    def _pt(self, point: Point) -> Tuple[float, float]:
        return self._px(point[0]), self._px(point[1])

    def _width(self, width_mm: float) -> int:
        return max(1, round(self._px(width_mm)))

    @staticmethod
    def _fill(color: Color) -> Tuple[int, int, int, int]:
        r, g, b, a = color
        return r, g, b, round(a * 255)

    def fill_background(self, color: Color = WHITE):
        self.draw.rectangle([0, 0, self.width_px, self.height_px], fill=self._fill(color))

    def stroke_line(self, start: Point, end: Point, color: Color, width_mm: float):
        self.draw.line([self._pt(start), self._pt(end)], fill=self._fill(color),
                       width=self._width(width_mm))

    def stroke_polyline(self, points: Sequence[Point], color: Color, width_mm: float):
        if len(points) < 2:
            return
        width = self._width(width_mm)
        fill = self._fill(color)
        pixels = [self._pt(p) for p in points]
        self.draw.line(pixels, fill=fill, width=width, joint="curve")

        # Round caps
        if width > 2:
            cap_r = width / 2
            for x, y in (pixels[0], pixels[-1]):
                self.draw.ellipse([x - cap_r, y - cap_r, x + cap_r, y + cap_r], fill=fill)

    def stroke_circle(self, center: Point, radius_mm: float, color: Color, width_mm: float):
        cx, cy = self._pt(center)
        r = self._px(radius_mm)
        self.draw.ellipse([cx - r, cy - r, cx + r, cy + r], outline=self._fill(color),
                          width=self._width(width_mm))

    def fill_circle(self, center: Point, radius_mm: float, color: Color):
        cx, cy = self._pt(center)
        r = self._px(radius_mm)
        self.draw.ellipse([cx - r, cy - r, cx + r, cy + r], fill=self._fill(color))

    def stroke_rect(self, origin: Point, size: Tuple[float, float], color: Color, width_mm: float):
        x0, y0 = self._pt(origin)
        x1, y1 = self._pt((origin[0] + size[0], origin[1] + size[1]))
        self.draw.rectangle([x0, y0, x1, y1], outline=self._fill(color),
                            width=self._width(width_mm))

    def draw_text(self, position: Point, text: str, size_mm: float, color: Color,
                  anchor: str = "mt", bold: bool = False):
        size_px = max(1, round(self._px(size_mm)))
        font = ImageFont.load_default(size=size_px)
        fill = self._fill(color)
        stroke = max(1, size_px // 20) if bold else 0
        self.draw.text(self._pt(position), text, fill=fill, font=font, anchor=anchor,
                       stroke_width=stroke, stroke_fill=fill)


# =============================================================================
# VECTOR
# =============================================================================

def _fmt(value: float) -> str:
    """Compact number for SVG attributes (1000.0 -> '1000')."""
    return f"{value:g}"


class VectorSurface(DrawingSurface):
    """Accumulates SVG primitives; the viewBox is in millimeters so
    coordinates pass through unchanged."""

    def __init__(self, width_mm: float, height_mm: float, filename: Optional[str] = None):
        super().__init__(width_mm, height_mm)
        self.drawing = svgwrite.Drawing(
            filename or "spiral.svg",
            size=(f"{_fmt(width_mm)}mm", f"{_fmt(height_mm)}mm"),
            viewBox=f"0 0 {_fmt(width_mm)} {_fmt(height_mm)}",
            debug=False,
        )
        self._container = self.drawing
        self.layers: List[str] = []

    @staticmethod
    def _stroke(color: Color, width_mm: float) -> dict:
        r, g, b, a = color
        attrs = {"stroke": f"rgb({r},{g},{b})", "stroke_width": round(width_mm, 4)}
        if a < 1.0:
            attrs["stroke_opacity"] = round(a, 3)
        return attrs

    @staticmethod
    def _fill(color: Color) -> dict:
        r, g, b, a = color
        attrs = {"fill": f"rgb({r},{g},{b})"}
        if a < 1.0:
            attrs["fill_opacity"] = round(a, 3)
        return attrs

    def begin_layer(self, name: str):
        group = self.drawing.g(id=name)
        self.drawing.add(group)
        self._container = group
        self.layers.append(name)

    def fill_background(self, color: Color = WHITE):
        self._container.add(self.drawing.rect((0, 0), (self.width_mm, self.height_mm),
                                              **self._fill(color)))

    def stroke_line(self, start: Point, end: Point, color: Color, width_mm: float):
        self._container.add(self.drawing.line(
            (round(start[0], 4), round(start[1], 4)),
            (round(end[0], 4), round(end[1], 4)),
            **self._stroke(color, width_mm)))

    def stroke_polyline(self, points: Sequence[Point], color: Color, width_mm: float):
        if len(points) < 2:
            return
        path_data = f"M {points[0][0]:.4f} {points[0][1]:.4f}"
        path_data += "".join(f" L {x:.4f} {y:.4f}" for x, y in points[1:])
        self._container.add(self.drawing.path(
            d=path_data, fill="none", stroke_linecap="round", stroke_linejoin="round",
            **self._stroke(color, width_mm)))

    def stroke_circle(self, center: Point, radius_mm: float, color: Color, width_mm: float):
        self._container.add(self.drawing.circle(
            center=(round(center[0], 4), round(center[1], 4)), r=round(radius_mm, 4),
            fill="none", **self._stroke(color, width_mm)))

    def fill_circle(self, center: Point, radius_mm: float, color: Color):
        self._container.add(self.drawing.circle(
            center=(round(center[0], 4), round(center[1], 4)), r=round(radius_mm, 4),
            **self._fill(color)))

    def stroke_rect(self, origin: Point, size: Tuple[float, float], color: Color, width_mm: float):
        self._container.add(self.drawing.rect(
            (round(origin[0], 4), round(origin[1], 4)),
            (round(size[0], 4), round(size[1], 4)),
            fill="none", **self._stroke(color, width_mm)))

    def draw_text(self, position: Point, text: str, size_mm: float, color: Color,
                  anchor: str = "mt", bold: bool = False):
        attrs = dict(
            insert=(round(position[0], 4), round(position[1], 4)),
            font_family="Arial, sans-serif",
            font_size=size_mm,
            text_anchor=SVG_TEXT_ANCHOR.get(anchor[0], "start"),
            dominant_baseline=SVG_BASELINE.get(anchor[1], "alphabetic"),
            **self._fill(color),
        )
        if bold:
            attrs["font_weight"] = "bold"
        self._container.add(self.drawing.text(text, **attrs))

    def tostring(self) -> str:
        return self.drawing.tostring()

    def save(self, path: str):
        self.drawing.saveas(path)
