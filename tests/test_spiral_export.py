import datetime
import xml.etree.ElementTree as ET

import pytest
from PIL import Image

import spiral_surfaces
from spiral_models import SpiralConfig, DrawResult
from spiral_export import (
    ExportError, export_png, export_svg, export_print_pdf, svg_string,
    generate_filename, print_draw_report, print_warnings, render_raster,
)
from spiral_renderer import SpiralRenderer
from spiral_surfaces import SurfaceUnavailableError

SVG_NS = "{http://www.w3.org/2000/svg}"


@pytest.fixture
def small_config():
    return SpiralConfig(paper_width_mm=100, paper_height_mm=50, dpi=150, turns=3)


def test_png_has_physical_size(tmp_path, small_config):
    path = tmp_path / "spiral.png"
    result = export_png(small_config, str(path))
    assert result.final_radius_mm == pytest.approx(22.5)

    with Image.open(path) as image:
        assert image.size == (591, 295)
        assert image.info["dpi"] == pytest.approx((150, 150), abs=0.1)
        rgb = image.convert("RGB")
        assert rgb.getpixel((295, 147)) == (0, 0, 0)
        assert rgb.getpixel((0, 0)) == (255, 255, 255)


def test_raster_dpi_override_keeps_geometry(small_config):
    image, result = render_raster(small_config, dpi=300)
    assert image.size == (1181, 591)
    _, preview = render_raster(small_config)
    assert result == preview


def test_svg_is_sized_in_millimeters(tmp_path, small_config):
    path = tmp_path / "spiral.svg"
    export_svg(small_config, str(path))
    root = ET.parse(path).getroot()
    assert root.get("width") == "100mm"
    assert root.get("height") == "50mm"
    assert root.get("viewBox") == "0 0 100 50"

    spiral = root.find(f".//{SVG_NS}g[@id='spiral']")
    paths = spiral.findall(f"{SVG_NS}path")
    assert len(paths) == 1
    assert paths[0].get("d").startswith("M ")
    assert root.find(f"{SVG_NS}title").text.startswith("Golden Ratio Spiral")


def test_svg_string_lists_layers(small_config):
    text = svg_string(small_config.patch(show_grid=True))
    for layer in ("background", "grid", "radial-lines", "golden-rectangles",
                  "guide-circles", "spiral", "center-mark"):
        assert f'id="{layer}"' in text


def test_print_pdf(tmp_path, small_config):
    path = tmp_path / "spiral.pdf"
    _, warnings = export_print_pdf(small_config, str(path), dpi=150)
    assert path.read_bytes().startswith(b"%PDF")
    assert any("100%" in w for w in warnings)


def test_print_warnings_name_paper_size():
    warnings = print_warnings(SpiralConfig(paper_size="A4"))
    assert "Paper size should be at least 297 x 210 mm" in warnings


def test_unwritable_path_raises_export_error(tmp_path, small_config):
    missing = tmp_path / "missing"
    with pytest.raises(ExportError):
        export_png(small_config, str(missing / "spiral.png"))
    with pytest.raises(ExportError):
        export_svg(small_config, str(missing / "spiral.svg"))


def test_unallocatable_raster(monkeypatch, small_config):
    def fail(*args, **kwargs):
        raise MemoryError("too big")

    monkeypatch.setattr(spiral_surfaces.Image, "new", fail)
    with pytest.raises(SurfaceUnavailableError):
        render_raster(small_config)


def test_generate_filename():
    result = DrawResult(2134.0, 5.0, 80.0, 7.0000000001)
    name = generate_filename(SpiralConfig(paper_size="A4"), result, "png",
                             date=datetime.date(2024, 5, 1))
    assert name == "golden-spiral_A4_7turns_2_13m_2024-05-01.png"


def test_solved_turns_name_the_export(capsys):
    # Fixed start radius: turns come from the solve, not the config
    config = SpiralConfig(mode="path_length", target_path_length_mm=20000,
                          initial_radius_mm=10)
    result = SpiralRenderer(config).result()
    assert result.turns == pytest.approx(10.4635, abs=1e-3)

    name = generate_filename(config, result, "png", date=datetime.date(2024, 1, 1))
    assert name == "golden-spiral_custom_10.46turns_20_00m_2024-01-01.png"

    print_draw_report(result, config)
    out = capsys.readouterr().out
    assert "Turns:       10.46" in out
    assert "Turns:       7" not in out
