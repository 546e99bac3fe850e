#!/usr/bin/env python3
"""
SPIRAL_MODELS.PY - Data classes for spiral templates

Contains all the value objects passed between the math, renderer and export
layers:
- SpiralConfig, SpiralGeometry, DrawResult
- SpiralPoint, FibonacciSquare, RadialLine
- Paper size presets and supported DPI values
"""

import dataclasses
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from spiral_constants import DEFAULT_POINTS_PER_TURN, FULL_TURN, MARGIN_FRACTION


# =============================================================================
# PRESETS
# =============================================================================

@dataclass(frozen=True)
class PaperSize:
    """A named paper size in millimeters."""
    name: str
    width_mm: float
    height_mm: float


PAPER_SIZES: Dict[str, PaperSize] = {
    "A4": PaperSize("A4 (297 x 210 mm)", 297, 210),
    "A4_portrait": PaperSize("A4 Portrait (210 x 297 mm)", 210, 297),
    "A3": PaperSize("A3 (420 x 297 mm)", 420, 297),
    "A3_portrait": PaperSize("A3 Portrait (297 x 420 mm)", 297, 420),
    "A2": PaperSize("A2 (594 x 420 mm)", 594, 420),
    "A1": PaperSize("A1 (841 x 594 mm)", 841, 594),
    "A0": PaperSize("A0 (1189 x 841 mm)", 1189, 841),
    "Letter": PaperSize("Letter (279 x 216 mm)", 279, 216),
    "Legal": PaperSize("Legal (356 x 216 mm)", 356, 216),
    "Tabloid": PaperSize("Tabloid (432 x 279 mm)", 432, 279),
    "custom": PaperSize("Custom", 400, 400),
}

DPI_OPTIONS: Dict[int, str] = {
    150: "150 DPI (Draft)",
    300: "300 DPI (Standard)",
    600: "600 DPI (High Quality)",
}

MODE_TURNS = "turns"
MODE_PATH_LENGTH = "path_length"
MODES = (MODE_TURNS, MODE_PATH_LENGTH)

# Placement directions for the Fibonacci square construction
DIRECTIONS = ("right", "down", "left", "up")


# =============================================================================
# CONFIGURATION
# =============================================================================

@dataclass(frozen=True)
class SpiralConfig:
    """Everything needed to render one spiral template.

    Immutable for the duration of a render; use patch() to derive a
    changed copy.
    """
    paper_size: str = "custom"
    paper_width_mm: float = 1000.0
    paper_height_mm: float = 1000.0
    line_width_mm: float = 2.0

    # Independent variable: "turns" fits the spiral to the paper,
    # "path_length" solves for the radius (or angle) giving that length
    mode: str = MODE_TURNS
    turns: float = 7.0
    target_path_length_mm: Optional[float] = None
    initial_radius_mm: Optional[float] = None  # path_length mode only

    dpi: int = 300
    grid_spacing_mm: float = 50.0

    # Overlays
    show_grid: bool = False
    show_guide_circles: bool = True
    show_golden_rectangles: bool = True
    show_radial_lines: bool = True
    show_center_mark: bool = True
    center_label: str = "O"
    radial_line_count: int = 8
    golden_square_count: int = 10

    # Sampling / fit
    points_per_turn: int = DEFAULT_POINTS_PER_TURN
    margin_fraction: float = MARGIN_FRACTION

    # Variable stroke: width = clamp(radius × fraction, min, line_width)
    variable_line_width: bool = False
    line_width_fraction: float = 0.01
    min_line_width_mm: float = 0.25

    def paper_dimensions(self) -> Tuple[float, float]:
        """Effective (width, height) in mm; presets override the custom size."""
        if self.paper_size != "custom" and self.paper_size in PAPER_SIZES:
            paper = PAPER_SIZES[self.paper_size]
            return float(paper.width_mm), float(paper.height_mm)
        return float(self.paper_width_mm), float(self.paper_height_mm)

    def patch(self, **changes) -> 'SpiralConfig':
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict:
        return dataclasses.asdict(self)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls)]


# =============================================================================
# DERIVED GEOMETRY
# =============================================================================

@dataclass(frozen=True)
class SpiralGeometry:
    """Scalar description of one spiral, recomputed per render."""
    initial_radius_mm: float
    final_radius_mm: float
    max_theta: float
    path_length_mm: float

    @property
    def turns(self) -> float:
        return self.max_theta / FULL_TURN


@dataclass(frozen=True)
class SpiralPoint:
    """A sampled point relative to the spiral center (mm)."""
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class FibonacciSquare:
    """One square of the golden rectangle construction.

    (x, y) is the top-left corner in screen coordinates (+y down).
    direction is the side of the previous bounding box this square was
    placed against; None for the seed square.
    """
    x: float
    y: float
    size: float
    direction: Optional[str] = None

    def bounds(self) -> Tuple[float, float, float, float]:
        return self.x, self.y, self.x + self.size, self.y + self.size


@dataclass(frozen=True)
class RadialLine:
    """A reference line from the center at `angle` radians, `radius` mm long."""
    angle: float
    radius: float

    def end_point(self) -> Tuple[float, float]:
        return self.radius * math.cos(self.angle), self.radius * math.sin(self.angle)


@dataclass(frozen=True)
class DrawResult:
    """Values reported back to the caller after a render."""
    path_length_mm: float
    initial_radius_mm: float
    final_radius_mm: float
    turns: float  # as drawn; solved in path_length mode with a fixed radius

    @classmethod
    def from_geometry(cls, geometry: SpiralGeometry) -> 'DrawResult':
        return cls(
            path_length_mm=geometry.path_length_mm,
            initial_radius_mm=geometry.initial_radius_mm,
            final_radius_mm=geometry.final_radius_mm,
            turns=geometry.turns,
        )
