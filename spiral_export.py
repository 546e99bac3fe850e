#!/usr/bin/env python3
"""
SPIRAL_EXPORT.PY - PNG, SVG and print output for spiral templates

Contains:
- render_raster / export_png: Pillow bitmap at the configured DPI
- build_svg / svg_string / export_svg: millimeter-unit SVG
- export_print_pdf: physical-size PDF page for 100% scale printing
- print_warnings: What to check in the print dialog
- generate_filename: Descriptive export filenames
- print_draw_report: Print the computed spiral values
"""

import datetime
from typing import List, Optional, Tuple

import svgwrite
from PIL import Image

from spiral_constants import PHI
from spiral_models import SpiralConfig, DrawResult
from spiral_renderer import SpiralRenderer
from spiral_surfaces import RasterSurface, VectorSurface

PRINT_DPI = 300


class ExportError(RuntimeError):
    """Writing an export failed; config and geometry are unaffected."""


# =============================================================================
# RASTER
# =============================================================================

def render_raster(config: SpiralConfig, dpi: Optional[float] = None) -> Tuple[Image.Image, DrawResult]:
    """Render the template into a new image.

    Args:
        config: Spiral configuration
        dpi: Override the output resolution (previews, print); geometry is
             unaffected since it is computed in mm

    Returns:
        (image, draw result)
    """
    renderer = SpiralRenderer(config)
    surface = RasterSurface(renderer.width_mm, renderer.height_mm, dpi or config.dpi)
    result = renderer.render(surface)
    return surface.image, result


def export_png(config: SpiralConfig, output_path: str) -> DrawResult:
    """Write the template as a PNG tagged with its DPI."""
    image, result = render_raster(config)
    try:
        image.save(output_path, "PNG", dpi=(config.dpi, config.dpi))
    except OSError as e:
        raise ExportError(f"Could not write PNG to {output_path}: {e}") from e

    print(f"PNG saved to {output_path} ({image.width} x {image.height} px at {config.dpi} DPI)")
    return result


# =============================================================================
# VECTOR
# =============================================================================

def build_svg(config: SpiralConfig, output_path: Optional[str] = None) -> Tuple[svgwrite.Drawing, DrawResult]:
    """Render the template into an svgwrite Drawing with title/desc metadata."""
    renderer = SpiralRenderer(config)
    surface = VectorSurface(renderer.width_mm, renderer.height_mm, filename=output_path)
    result = renderer.render(surface)

    width, height = renderer.width_mm, renderer.height_mm
    geometry = renderer.geometry
    surface.drawing.set_desc(
        title=f"Golden Ratio Spiral - {result.path_length_mm:.1f}mm path",
        desc=(
            f"Paper size: {width:g}x{height:g}mm\n"
            f"Initial radius: {result.initial_radius_mm:.2f}mm\n"
            f"Turns: {geometry.turns:g}\n"
            f"Final radius: {result.final_radius_mm:.2f}mm\n"
            f"Path length: {result.path_length_mm:.2f}mm\n"
            f"Golden ratio (phi): {PHI:.10f}"
        ),
    )
    return surface.drawing, result


def svg_string(config: SpiralConfig) -> str:
    drawing, _ = build_svg(config)
    return drawing.tostring()


def export_svg(config: SpiralConfig, output_path: str) -> DrawResult:
    """Write the template as an SVG sized in millimeters."""
    drawing, result = build_svg(config, output_path)
    try:
        drawing.saveas(output_path)
    except OSError as e:
        raise ExportError(f"Could not write SVG to {output_path}: {e}") from e

    print(f"SVG saved to {output_path}")
    return result


# =============================================================================
# PRINT
# =============================================================================

def print_warnings(config: SpiralConfig) -> List[str]:
    """Print dialog settings needed for true millimeter dimensions."""
    width, height = config.paper_dimensions()
    return [
        'Set scale to 100% (not "Fit to page")',
        f"Paper size should be at least {width:.0f} x {height:.0f} mm",
        "Disable headers and footers",
        'Use "Actual size" if available',
    ]


def export_print_pdf(config: SpiralConfig, output_path: str,
                     dpi: float = PRINT_DPI) -> Tuple[DrawResult, List[str]]:
    """Write a single-page PDF whose page is exactly the paper size.

    The page size comes from the raster's pixel size and DPI, so printing
    at 100% reproduces true millimeters. Returns the draw result and the
    print dialog warnings.
    """
    image, result = render_raster(config, dpi=dpi)
    try:
        image.save(output_path, "PDF", resolution=float(dpi))
    except OSError as e:
        raise ExportError(f"Could not write PDF to {output_path}: {e}") from e

    warnings = print_warnings(config)
    print(f"Print PDF saved to {output_path}")
    print("Important: in your print dialog:")
    for warning in warnings:
        print(f"  ⚠ {warning}")
    return result, warnings


# =============================================================================
# REPORTING
# =============================================================================

def _turns_label(turns: float) -> str:
    """7.0000000001 -> '7', 10.4635 -> '10.46'"""
    return f"{round(turns, 2):g}"


def generate_filename(config: SpiralConfig, result: DrawResult, extension: str,
                      date: Optional[datetime.date] = None) -> str:
    """e.g. golden-spiral_A4_7turns_2_13m_2024-05-01.png

    Turns and path length are taken from the drawn result, not the config.
    """
    date = date or datetime.date.today()
    path_meters = f"{result.path_length_mm / 1000:.2f}".replace(".", "_")
    return (f"golden-spiral_{config.paper_size}_{_turns_label(result.turns)}turns_"
            f"{path_meters}m_{date.isoformat()}.{extension}")


def print_draw_report(result: DrawResult, config: SpiralConfig):
    """Print the computed spiral values."""
    width, height = config.paper_dimensions()
    print("\n" + "="*60)
    print("GOLDEN SPIRAL")
    print("="*60)
    print(f"  Paper size:  {width:.0f} x {height:.0f} mm")
    print(f"  Path length: {result.path_length_mm:.1f} mm ({result.path_length_mm / 1000:.3f} m)")
    print(f"  Radius:      {result.initial_radius_mm:.2f} → {result.final_radius_mm:.2f} mm")
    print(f"  Turns:       {_turns_label(result.turns)}")
    print("="*60 + "\n")
