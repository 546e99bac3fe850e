#!/usr/bin/env python3
"""
SPIRAL_VALIDATION.PY - Configuration checks for spiral templates

Contains:
- ConfigViolation: Data class for a rejected or suspicious setting
- InvalidConfigError: Raised when a config has error-level violations
- validate_config: Check all configuration constraints
- validate_geometry: Check computed geometry against the paper
- require_valid_config: Raise on errors, return warnings
- print_validation_report: Print formatted validation report
"""

import math
from dataclasses import dataclass
from typing import List, Optional

from spiral_models import (
    SpiralConfig, SpiralGeometry, PAPER_SIZES, DPI_OPTIONS, MODES,
    MODE_PATH_LENGTH,
)
from spiral_math import mm_to_pixels


MIN_TURNS = 0.5
MAX_TURNS = 20.0
MAX_RASTER_PIXELS = 400_000_000   # Warn above ~400 megapixels


@dataclass
class ConfigViolation:
    """A constraint violation found during validation."""
    field: str
    message: str
    severity: str = "error"  # "error" or "warning"
    actual_value: Optional[object] = None
    expected_value: Optional[object] = None


class InvalidConfigError(ValueError):
    """A SpiralConfig failed validation."""

    def __init__(self, violations: List[ConfigViolation]):
        self.violations = violations
        errors = [v for v in violations if v.severity == "error"]
        summary = "; ".join(v.message for v in errors) or "invalid configuration"
        super().__init__(summary)


def _check_positive(violations: List[ConfigViolation], name: str, value) -> bool:
    """Append an error unless value is a finite number > 0."""
    if not isinstance(value, (int, float)) or isinstance(value, bool) \
            or not math.isfinite(value) or value <= 0:
        violations.append(ConfigViolation(
            field=name,
            message=f"{name} must be a positive number (got {value!r})",
            actual_value=value,
        ))
        return False
    return True


def validate_config(config: SpiralConfig) -> List[ConfigViolation]:
    """
    Validate a spiral configuration:
    1. Paper size exists and dimensions are positive
    2. Line width, grid spacing and turns are positive and in range
    3. DPI is one of the supported options
    4. Mode-specific inputs (path length, initial radius) are present
    5. Sampling and overlay counts are sane

    Returns list of violations (empty if all constraints pass).
    """
    violations: List[ConfigViolation] = []

    # ---------------------------------------------------------------------
    # 1. PAPER
    # ---------------------------------------------------------------------
    if config.paper_size not in PAPER_SIZES:
        violations.append(ConfigViolation(
            field="paper_size",
            message=f"Unknown paper size '{config.paper_size}'",
            actual_value=config.paper_size,
            expected_value=sorted(PAPER_SIZES),
        ))
    width, height = config.paper_dimensions()
    paper_ok = _check_positive(violations, "paper_width_mm", width)
    paper_ok = _check_positive(violations, "paper_height_mm", height) and paper_ok

    # ---------------------------------------------------------------------
    # 2. STROKE / GRID / TURNS
    # ---------------------------------------------------------------------
    _check_positive(violations, "line_width_mm", config.line_width_mm)
    _check_positive(violations, "grid_spacing_mm", config.grid_spacing_mm)

    if _check_positive(violations, "turns", config.turns):
        if not MIN_TURNS <= config.turns <= MAX_TURNS:
            violations.append(ConfigViolation(
                field="turns",
                message=f"Turns {config.turns} outside {MIN_TURNS}-{MAX_TURNS}",
                actual_value=config.turns,
                expected_value=(MIN_TURNS, MAX_TURNS),
            ))

    # ---------------------------------------------------------------------
    # 3. DPI
    # ---------------------------------------------------------------------
    if config.dpi not in DPI_OPTIONS:
        violations.append(ConfigViolation(
            field="dpi",
            message=f"Unsupported DPI {config.dpi!r} (use {', '.join(str(d) for d in DPI_OPTIONS)})",
            actual_value=config.dpi,
            expected_value=list(DPI_OPTIONS),
        ))
    elif paper_ok:
        pixels = mm_to_pixels(width, config.dpi) * mm_to_pixels(height, config.dpi)
        if pixels > MAX_RASTER_PIXELS:
            violations.append(ConfigViolation(
                field="dpi",
                message=f"Raster output is {pixels / 1e6:.0f} megapixels; consider a lower DPI",
                severity="warning",
                actual_value=pixels,
                expected_value=MAX_RASTER_PIXELS,
            ))

    # ---------------------------------------------------------------------
    # 4. MODE
    # ---------------------------------------------------------------------
    if config.mode not in MODES:
        violations.append(ConfigViolation(
            field="mode",
            message=f"Unknown mode '{config.mode}' (use {' or '.join(MODES)})",
            actual_value=config.mode,
            expected_value=list(MODES),
        ))
    elif config.mode == MODE_PATH_LENGTH:
        _check_positive(violations, "target_path_length_mm", config.target_path_length_mm)
        if config.initial_radius_mm is not None:
            _check_positive(violations, "initial_radius_mm", config.initial_radius_mm)

    # ---------------------------------------------------------------------
    # 5. SAMPLING / OVERLAYS
    # ---------------------------------------------------------------------
    if not isinstance(config.points_per_turn, int) or config.points_per_turn < 1:
        violations.append(ConfigViolation(
            field="points_per_turn",
            message=f"points_per_turn must be an integer >= 1 (got {config.points_per_turn!r})",
            actual_value=config.points_per_turn,
        ))

    if not (isinstance(config.margin_fraction, (int, float))
            and 0 <= config.margin_fraction < 0.5):
        violations.append(ConfigViolation(
            field="margin_fraction",
            message=f"margin_fraction must be in [0, 0.5) (got {config.margin_fraction!r})",
            actual_value=config.margin_fraction,
        ))

    for name in ("radial_line_count", "golden_square_count"):
        value = getattr(config, name)
        if not isinstance(value, int) or value < 0:
            violations.append(ConfigViolation(
                field=name,
                message=f"{name} must be a non-negative integer (got {value!r})",
                actual_value=value,
            ))

    if config.variable_line_width:
        _check_positive(violations, "line_width_fraction", config.line_width_fraction)
        if _check_positive(violations, "min_line_width_mm", config.min_line_width_mm) \
                and config.min_line_width_mm > config.line_width_mm:
            violations.append(ConfigViolation(
                field="min_line_width_mm",
                message="Minimum line width is larger than the line width",
                severity="warning",
                actual_value=config.min_line_width_mm,
                expected_value=config.line_width_mm,
            ))

    return violations


def validate_geometry(config: SpiralConfig, geometry: SpiralGeometry) -> List[ConfigViolation]:
    """Warnings about computed geometry that will print badly."""
    violations: List[ConfigViolation] = []
    width, height = config.paper_dimensions()

    if geometry.final_radius_mm > min(width, height) / 2:
        violations.append(ConfigViolation(
            field="target_path_length_mm",
            message=(f"Spiral radius {geometry.final_radius_mm:.1f}mm exceeds the paper "
                     f"({width:.0f} x {height:.0f} mm)"),
            severity="warning",
            actual_value=geometry.final_radius_mm,
            expected_value=min(width, height) / 2,
        ))

    if config.line_width_mm > geometry.initial_radius_mm:
        violations.append(ConfigViolation(
            field="line_width_mm",
            message=(f"Line width {config.line_width_mm}mm is wider than the initial radius "
                     f"{geometry.initial_radius_mm:.2f}mm; inner turns will merge"),
            severity="warning",
            actual_value=config.line_width_mm,
            expected_value=geometry.initial_radius_mm,
        ))

    return violations


def require_valid_config(config: SpiralConfig) -> List[ConfigViolation]:
    """Raise InvalidConfigError if the config has errors; return its warnings."""
    violations = validate_config(config)
    if any(v.severity == "error" for v in violations):
        raise InvalidConfigError(violations)
    return violations


def print_validation_report(violations: List[ConfigViolation], config: SpiralConfig):
    """Print a formatted validation report."""

    print("\n" + "="*60)
    print("SPIRAL CONFIGURATION REPORT")
    print("="*60)

    width, height = config.paper_dimensions()
    print(f"\nSettings:")
    print(f"  Paper: {config.paper_size} ({width:.0f} x {height:.0f} mm)")
    if config.mode == MODE_PATH_LENGTH:
        print(f"  Target path length: {config.target_path_length_mm} mm")
    else:
        print(f"  Turns: {config.turns}")
    print(f"  Line width: {config.line_width_mm} mm at {config.dpi} DPI")

    if not violations:
        print("\n✓ All checks PASSED")
        print("="*60 + "\n")
        return

    errors = [v for v in violations if v.severity == "error"]
    warnings = [v for v in violations if v.severity == "warning"]

    print(f"\n✗ Found {len(errors)} errors, {len(warnings)} warnings")

    by_field = {}
    for v in violations:
        by_field.setdefault(v.field, []).append(v)

    for name, vlist in by_field.items():
        print(f"\n--- {name.upper().replace('_', ' ')} ---")
        for v in vlist:
            marker = "✗" if v.severity == "error" else "⚠"
            print(f"  {marker} {v.message}")

    print("="*60 + "\n")
