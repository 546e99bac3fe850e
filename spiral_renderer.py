#!/usr/bin/env python3
"""
SPIRAL_RENDERER.PY - Layered rendering of a spiral template

Contains:
- SpiralRenderer: Paints grid, radial lines, golden rectangles, guide
  circles, the spiral and the center mark onto a DrawingSurface
"""

import math
from typing import List, Tuple

from spiral_models import SpiralConfig, SpiralPoint, DrawResult
from spiral_math import (
    compute_geometry, generate_spiral_points, generate_guide_radii,
    generate_radial_lines, generate_fibonacci_squares, squares_bounding_box,
)
from spiral_surfaces import DrawingSurface, WHITE
from spiral_validation import require_valid_config, validate_geometry

# Variable-width strokes are grouped into runs of equal (quantized) width
WIDTH_STEP_MM = 0.05


class SpiralRenderer:
    """Renders one SpiralConfig onto raster or vector surfaces.

    Geometry is computed once in millimeters; surfaces only convert units,
    so every output of the same renderer shows identical geometry.
    """

    COLORS = {
        "grid": (200, 200, 200, 0.3),
        "crosshair": (150, 150, 150, 0.5),
        "grid_label": (100, 100, 100, 0.7),
        "radial": (180, 180, 180, 0.4),
        "rectangle": (212, 175, 55, 0.5),   # Gold
        "guide": (180, 180, 180, 0.4),
        "guide_dot": (0, 0, 0, 0.4),
        "spiral": (0, 0, 0, 1.0),
        "center": (0, 0, 0, 1.0),
    }

    # Stroke widths and sizes in mm
    GRID_WIDTH = 0.2
    CROSSHAIR_WIDTH = 0.4
    GRID_LABEL_SIZE = 3.0
    GUIDE_WIDTH = 0.25
    GUIDE_DOT_RADIUS = 0.6
    RADIAL_WIDTH = 0.25
    RECTANGLE_WIDTH = 0.3
    CENTER_DOT_RADIUS = 2.0
    CENTER_LABEL_SIZE = 6.0

    def __init__(self, config: SpiralConfig):
        self.warnings = require_valid_config(config)
        self.config = config
        self.width_mm, self.height_mm = config.paper_dimensions()
        self.cx = self.width_mm / 2
        self.cy = self.height_mm / 2

        self.geometry = compute_geometry(config)
        self.warnings += validate_geometry(config, self.geometry)

    def _t(self, x_mm: float, y_mm: float) -> Tuple[float, float]:
        """Spiral-relative mm to paper mm."""
        return self.cx + x_mm, self.cy + y_mm

    def points(self) -> List[SpiralPoint]:
        """Spiral samples relative to the center."""
        return generate_spiral_points(self.geometry.initial_radius_mm,
                                      self.geometry.max_theta,
                                      self.config.points_per_turn)

    def result(self) -> DrawResult:
        return DrawResult.from_geometry(self.geometry)

    def render(self, surface: DrawingSurface) -> DrawResult:
        """Draw all enabled layers, back to front."""
        config = self.config

        surface.begin_layer("background")
        surface.fill_background(WHITE)

        if config.show_grid:
            surface.begin_layer("grid")
            self._draw_grid(surface)

        if config.show_radial_lines and config.radial_line_count > 0:
            surface.begin_layer("radial-lines")
            self._draw_radial_lines(surface)

        if config.show_golden_rectangles and config.golden_square_count > 0:
            surface.begin_layer("golden-rectangles")
            self._draw_golden_rectangles(surface)

        if config.show_guide_circles:
            surface.begin_layer("guide-circles")
            self._draw_guide_circles(surface)

        surface.begin_layer("spiral")
        self._draw_spiral(surface)

        if config.show_center_mark:
            surface.begin_layer("center-mark")
            self._draw_center_mark(surface)

        return self.result()

    # -------------------------------------------------------------------------
    # Layers
    # -------------------------------------------------------------------------

    def _draw_grid(self, surface: DrawingSurface):
        """Alignment grid through the center with distance labels."""
        spacing = self.config.grid_spacing_mm
        w, h = self.width_mm, self.height_mm

        x = self.cx % spacing
        while x < w:
            surface.stroke_line((x, 0), (x, h), self.COLORS["grid"], self.GRID_WIDTH)
            x += spacing

        y = self.cy % spacing
        while y < h:
            surface.stroke_line((0, y), (w, y), self.COLORS["grid"], self.GRID_WIDTH)
            y += spacing

        # Center crosshairs
        surface.stroke_line((self.cx, 0), (self.cx, h), self.COLORS["crosshair"], self.CROSSHAIR_WIDTH)
        surface.stroke_line((0, self.cy), (w, self.cy), self.COLORS["crosshair"], self.CROSSHAIR_WIDTH)

        # Distances from center along the top and left edges
        max_dist = min(w, h) / 2
        step = 1
        while step * spacing <= max_dist:
            d = step * spacing
            label = f"{d:g}"
            if self.cx + d < w:
                surface.draw_text((self.cx + d, 1.0), label, self.GRID_LABEL_SIZE,
                                  self.COLORS["grid_label"], anchor="mt")
            if self.cy + d < h:
                surface.draw_text((1.0, self.cy + d), label, self.GRID_LABEL_SIZE,
                                  self.COLORS["grid_label"], anchor="lm")
            step += 1

    def _draw_radial_lines(self, surface: DrawingSurface):
        for line in generate_radial_lines(self.config.radial_line_count,
                                          self.geometry.final_radius_mm):
            ex, ey = line.end_point()
            surface.stroke_line((self.cx, self.cy), self._t(ex, ey),
                                self.COLORS["radial"], self.RADIAL_WIDTH)

    def _draw_golden_rectangles(self, surface: DrawingSurface):
        """Fibonacci square construction, long side spanning the final diameter."""
        squares = generate_fibonacci_squares(self.config.golden_square_count)
        min_x, min_y, max_x, max_y = squares_bounding_box(squares)
        box_w, box_h = max_x - min_x, max_y - min_y
        scale = 2 * self.geometry.final_radius_mm / max(box_w, box_h)

        # Center the construction's bounding box on the spiral center
        ox = self.cx - (min_x + box_w / 2) * scale
        oy = self.cy - (min_y + box_h / 2) * scale

        for s in squares:
            surface.stroke_rect((ox + s.x * scale, oy + s.y * scale),
                                (s.size * scale, s.size * scale),
                                self.COLORS["rectangle"], self.RECTANGLE_WIDTH)

    def _draw_guide_circles(self, surface: DrawingSurface):
        """Circles at φ intervals, each with 90° marker dots."""
        radii = generate_guide_radii(self.geometry.initial_radius_mm,
                                     self.geometry.final_radius_mm)
        for radius in radii:
            surface.stroke_circle((self.cx, self.cy), radius, self.COLORS["guide"], self.GUIDE_WIDTH)
            for angle in range(0, 360, 90):
                rad = math.radians(angle)
                dot = self._t(radius * math.cos(rad), radius * math.sin(rad))
                surface.fill_circle(dot, self.GUIDE_DOT_RADIUS, self.COLORS["guide_dot"])

    def _draw_spiral(self, surface: DrawingSurface):
        points = self.points()
        if self.config.variable_line_width:
            for width, run in self.stroke_runs(points):
                surface.stroke_polyline(run, self.COLORS["spiral"], width)
        else:
            surface.stroke_polyline([self._t(p.x, p.y) for p in points],
                                    self.COLORS["spiral"], self.config.line_width_mm)

    def _draw_center_mark(self, surface: DrawingSurface):
        surface.fill_circle((self.cx, self.cy), self.CENTER_DOT_RADIUS, self.COLORS["center"])
        if self.config.center_label:
            surface.draw_text((self.cx, self.cy + self.CENTER_DOT_RADIUS + 1.0),
                              self.config.center_label, self.CENTER_LABEL_SIZE,
                              self.COLORS["center"], anchor="mt", bold=True)

    # -------------------------------------------------------------------------
    # Variable width
    # -------------------------------------------------------------------------

    def segment_width(self, radius_mm: float) -> float:
        """Stroke width for a segment at `radius_mm`, quantized to WIDTH_STEP_MM."""
        config = self.config
        width = round(radius_mm * config.line_width_fraction / WIDTH_STEP_MM) * WIDTH_STEP_MM
        return max(config.min_line_width_mm, min(config.line_width_mm, width))

    def stroke_runs(self, points: List[SpiralPoint]) -> List[Tuple[float, List[Tuple[float, float]]]]:
        """Split the spiral into consecutive runs sharing one stroke width.

        Each segment's width comes from its mean radius; adjacent runs share
        their boundary point so the path stays continuous.
        """
        runs: List[Tuple[float, List[Tuple[float, float]]]] = []
        for a, b in zip(points, points[1:]):
            width = self.segment_width((a.radius + b.radius) / 2)
            end = self._t(b.x, b.y)
            if runs and runs[-1][0] == width:
                runs[-1][1].append(end)
            else:
                runs.append((width, [self._t(a.x, a.y), end]))
        return runs
