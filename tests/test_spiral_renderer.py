import pytest

from spiral_models import SpiralConfig
from spiral_math import generate_guide_radii
from spiral_renderer import SpiralRenderer
from spiral_surfaces import DrawingSurface
from spiral_validation import InvalidConfigError


class RecordingSurface(DrawingSurface):
    """Collects primitives per layer instead of drawing them."""

    def __init__(self, width_mm, height_mm):
        super().__init__(width_mm, height_mm)
        self.layers = []
        self.calls = []

    def begin_layer(self, name):
        self.layers.append(name)

    def _record(self, method, *args):
        self.calls.append((self.layers[-1] if self.layers else None, method, args))

    def fill_background(self, color=None):
        self._record("fill_background", color)

    def stroke_line(self, start, end, color, width_mm):
        self._record("stroke_line", start, end, width_mm)

    def stroke_polyline(self, points, color, width_mm):
        self._record("stroke_polyline", list(points), width_mm)

    def stroke_circle(self, center, radius_mm, color, width_mm):
        self._record("stroke_circle", center, radius_mm)

    def fill_circle(self, center, radius_mm, color):
        self._record("fill_circle", center, radius_mm)

    def stroke_rect(self, origin, size, color, width_mm):
        self._record("stroke_rect", origin, size)

    def draw_text(self, position, text, size_mm, color, anchor="mt", bold=False):
        self._record("draw_text", position, text, bold)

    def in_layer(self, layer, method):
        return [args for name, m, args in self.calls if name == layer and m == method]


def _render(config):
    renderer = SpiralRenderer(config)
    surface = RecordingSurface(renderer.width_mm, renderer.height_mm)
    result = renderer.render(surface)
    return renderer, surface, result


def test_layer_order_with_every_overlay():
    _, surface, _ = _render(SpiralConfig(show_grid=True))
    assert surface.layers == [
        "background", "grid", "radial-lines", "golden-rectangles",
        "guide-circles", "spiral", "center-mark",
    ]


def test_overlays_can_be_switched_off():
    config = SpiralConfig(show_radial_lines=False, show_golden_rectangles=False,
                          show_guide_circles=False)
    _, surface, _ = _render(config)
    assert surface.layers == ["background", "spiral", "center-mark"]


def test_result_matches_geometry():
    renderer, _, result = _render(SpiralConfig())
    assert result.path_length_mm == renderer.geometry.path_length_mm
    assert result.initial_radius_mm == renderer.geometry.initial_radius_mm
    assert result.final_radius_mm == pytest.approx(450.0)


def test_spiral_is_one_polyline_offset_by_center():
    renderer, surface, _ = _render(SpiralConfig())
    polylines = surface.in_layer("spiral", "stroke_polyline")
    assert len(polylines) == 1
    points, width = polylines[0]
    assert width == 2.0
    assert len(points) == len(renderer.points())
    assert points[0] == pytest.approx((500 + renderer.geometry.initial_radius_mm, 500))


def test_guide_circles_have_four_dots_each():
    renderer, surface, _ = _render(SpiralConfig())
    radii = generate_guide_radii(renderer.geometry.initial_radius_mm,
                                 renderer.geometry.final_radius_mm)
    assert len(surface.in_layer("guide-circles", "stroke_circle")) == len(radii)
    assert len(surface.in_layer("guide-circles", "fill_circle")) == 4 * len(radii)


def test_radial_lines_start_at_center():
    _, surface, _ = _render(SpiralConfig(radial_line_count=12))
    lines = surface.in_layer("radial-lines", "stroke_line")
    assert len(lines) == 12
    assert all(start == (500, 500) for start, _, _ in lines)


def test_golden_rectangles_span_final_diameter():
    renderer, surface, _ = _render(SpiralConfig(golden_square_count=6))
    rects = surface.in_layer("golden-rectangles", "stroke_rect")
    assert len(rects) == 6
    min_x = min(origin[0] for origin, _ in rects)
    max_x = max(origin[0] + size[0] for origin, size in rects)
    assert max_x - min_x == pytest.approx(2 * renderer.geometry.final_radius_mm)
    assert (min_x + max_x) / 2 == pytest.approx(500)


def test_center_label_is_bold():
    _, surface, _ = _render(SpiralConfig(center_label="X"))
    texts = surface.in_layer("center-mark", "draw_text")
    assert [(text, bold) for _, text, bold in texts] == [("X", True)]


def test_empty_center_label_draws_only_dot():
    _, surface, _ = _render(SpiralConfig(center_label=""))
    assert surface.in_layer("center-mark", "draw_text") == []
    assert len(surface.in_layer("center-mark", "fill_circle")) == 1


def test_grid_includes_crosshairs_through_center():
    _, surface, _ = _render(SpiralConfig(show_grid=True, paper_width_mm=200,
                                         paper_height_mm=100, grid_spacing_mm=50))
    lines = surface.in_layer("grid", "stroke_line")
    assert ((100, 0), (100, 100), SpiralRenderer.CROSSHAIR_WIDTH) in lines
    assert ((0, 50), (200, 50), SpiralRenderer.CROSSHAIR_WIDTH) in lines


def test_variable_width_runs():
    config = SpiralConfig(variable_line_width=True)
    renderer, surface, _ = _render(config)
    runs = surface.in_layer("spiral", "stroke_polyline")
    assert len(runs) > 1

    widths = [width for _, width in runs]
    assert all(config.min_line_width_mm <= w <= config.line_width_mm for w in widths)
    # Widths grow outward
    assert widths == sorted(widths)

    # Runs share their boundary point
    for (a, _), (b, _) in zip(runs, runs[1:]):
        assert a[-1] == b[0]
    total = sum(len(points) for points, _ in runs)
    assert total == len(renderer.points()) + len(runs) - 1


def test_segment_width_is_clamped():
    renderer = SpiralRenderer(SpiralConfig(variable_line_width=True))
    assert renderer.segment_width(0.001) == 0.25
    assert renderer.segment_width(10000) == 2.0
    assert renderer.segment_width(100) == pytest.approx(1.0)


def test_invalid_config_is_rejected():
    with pytest.raises(InvalidConfigError):
        SpiralRenderer(SpiralConfig(turns=0))
