#!/usr/bin/env python3
"""
SPIRAL_MATH.PY - Pure geometry for the golden spiral

Contains:
- radius_at_angle / arc_length: closed-form logarithmic spiral formulas
- solve_initial_radius_for_path_length / solve_max_theta_for_path_length:
  bisection inverses of arc_length
- fit_spiral_to_paper: derive radii from paper size and turns
- generate_spiral_points, generate_guide_radii, generate_radial_lines
- fibonacci_sequence, generate_fibonacci_squares: golden rectangle construction
- compute_geometry: SpiralConfig -> SpiralGeometry

Nothing here does I/O or keeps state. Inputs are assumed to have passed
spiral_validation already.
"""

import math
from typing import List, Tuple

import numpy as np

from spiral_constants import (
    PHI, GOLDEN_B, FULL_TURN, MM_PER_INCH, MARGIN_FRACTION,
    DEFAULT_POINTS_PER_TURN, GUIDE_OVERSHOOT, GUIDE_TOLERANCE_MM,
    MIN_SOLVER_RADIUS_MM, MAX_SOLVER_RADIUS_MM, MAX_SOLVER_THETA,
    SOLVER_MAX_ITERATIONS, SOLVER_RELATIVE_TOLERANCE,
)
from spiral_models import (
    SpiralConfig, SpiralGeometry, SpiralPoint, FibonacciSquare, RadialLine,
    DIRECTIONS, MODE_PATH_LENGTH,
)


# =============================================================================
# SPIRAL FORMULAS
# =============================================================================

def radius_at_angle(theta: float, initial_radius: float) -> float:
    """Radius of the golden spiral after `theta` radians.

    r(θ) = a × e^(b×θ) = a × φ^(θ/2π), so one full turn multiplies the
    radius by φ.
    """
    return initial_radius * math.exp(GOLDEN_B * theta)


def arc_length(initial_radius: float, max_theta: float) -> float:
    """Exact arc length from θ=0 to θ=max_theta.

    L = (a/b) × √(1 + b²) × (e^(b×θmax) - 1)
    """
    sqrt_factor = math.sqrt(1 + GOLDEN_B * GOLDEN_B)
    exp_factor = math.exp(GOLDEN_B * max_theta) - 1
    return (initial_radius / GOLDEN_B) * sqrt_factor * exp_factor


def turns_between_radii(initial_radius: float, final_radius: float) -> float:
    """Number of full turns needed to grow from one radius to another."""
    return math.log(final_radius / initial_radius) / (GOLDEN_B * FULL_TURN)


def mm_to_pixels(mm: float, dpi: float) -> float:
    return (mm / MM_PER_INCH) * dpi


# =============================================================================
# INVERSE SOLVES
# =============================================================================

def _bisect(func, target: float, lo: float, hi: float) -> float:
    """Find x in [lo, hi] with func(x) ≈ target for increasing func.

    Stops after SOLVER_MAX_ITERATIONS and returns the best estimate seen;
    non-convergence is not an error. Targets outside [func(lo), func(hi)]
    return the nearest bound.
    """
    if func(lo) >= target:
        return lo
    if func(hi) <= target:
        return hi

    tolerance = SOLVER_RELATIVE_TOLERANCE * abs(target)
    best, best_error = lo, math.inf

    for _ in range(SOLVER_MAX_ITERATIONS):
        mid = 0.5 * (lo + hi)
        if not lo < mid < hi:
            break  # bracket collapsed to adjacent floats

        value = func(mid)
        error = abs(value - target)
        if error < best_error:
            best, best_error = mid, error
        if error <= tolerance:
            break

        if value < target:
            lo = mid
        else:
            hi = mid

    return best


def solve_initial_radius_for_path_length(target_length: float, turns: float) -> float:
    """Initial radius whose spiral of `turns` full turns is `target_length` mm long."""
    max_theta = turns * FULL_TURN
    return _bisect(lambda r: arc_length(r, max_theta), target_length,
                   MIN_SOLVER_RADIUS_MM, MAX_SOLVER_RADIUS_MM)


def solve_max_theta_for_path_length(initial_radius: float, target_length: float) -> float:
    """Angle extent at which a spiral starting at `initial_radius` reaches `target_length` mm."""
    return _bisect(lambda t: arc_length(initial_radius, t), target_length,
                   0.0, MAX_SOLVER_THETA)


# =============================================================================
# PAPER FIT
# =============================================================================

def fit_spiral_to_paper(paper_width: float, paper_height: float, turns: float,
                        margin_fraction: float = MARGIN_FRACTION) -> Tuple[float, float, float]:
    """Derive (initial_radius, final_radius, max_theta) so the spiral fits the paper.

    The final radius is half the smaller paper dimension less the margin on
    both sides; the initial radius follows from inverting r(θ).
    """
    final_radius = 0.5 * min(paper_width, paper_height) * (1 - 2 * margin_fraction)
    max_theta = turns * FULL_TURN
    initial_radius = final_radius / math.exp(GOLDEN_B * max_theta)
    return initial_radius, final_radius, max_theta


def compute_geometry(config: SpiralConfig) -> SpiralGeometry:
    """Compute the spiral's scalar geometry from a (validated) config."""
    width, height = config.paper_dimensions()

    if config.mode == MODE_PATH_LENGTH:
        target = config.target_path_length_mm
        if config.initial_radius_mm is not None:
            # Fixed start radius: solve for the angle extent
            initial_radius = config.initial_radius_mm
            max_theta = solve_max_theta_for_path_length(initial_radius, target)
        else:
            # Fixed turns: solve for the start radius
            max_theta = config.turns * FULL_TURN
            initial_radius = solve_initial_radius_for_path_length(target, config.turns)
        final_radius = radius_at_angle(max_theta, initial_radius)
    else:
        initial_radius, final_radius, max_theta = fit_spiral_to_paper(
            width, height, config.turns, config.margin_fraction)

    return SpiralGeometry(
        initial_radius_mm=initial_radius,
        final_radius_mm=final_radius,
        max_theta=max_theta,
        path_length_mm=arc_length(initial_radius, max_theta),
    )


# =============================================================================
# SAMPLING
# =============================================================================

def generate_spiral_points(initial_radius: float, max_theta: float,
                           points_per_turn: int = DEFAULT_POINTS_PER_TURN) -> List[SpiralPoint]:
    """Sample the spiral clockwise from the 3 o'clock position.

    Returns ceil(max_theta / 2π × points_per_turn) + 1 points, both
    endpoints included. Coordinates are mm relative to the center.
    """
    steps = math.ceil((max_theta / FULL_TURN) * points_per_turn)
    if steps <= 0:
        return [SpiralPoint(initial_radius, 0.0, initial_radius)]

    theta = np.linspace(0.0, max_theta, steps + 1)
    radii = initial_radius * np.exp(GOLDEN_B * theta)

    # Negative angle: clockwise in standard math coordinates
    xs = radii * np.cos(-theta)
    ys = radii * np.sin(-theta)

    return [SpiralPoint(float(x), float(y), float(r)) for x, y, r in zip(xs, ys, radii)]


def generate_guide_radii(initial_radius: float, final_radius: float) -> List[float]:
    """Radii at successive powers of φ from the initial to the final radius.

    The 10% overshoot keeps a φ multiple that lands on the final radius
    despite rounding; anything past the final radius is clipped to it.
    """
    radii = []
    r = initial_radius
    while r <= final_radius * GUIDE_OVERSHOOT:
        radii.append(min(r, final_radius))
        r *= PHI

    if not any(abs(rad - final_radius) < GUIDE_TOLERANCE_MM for rad in radii):
        radii.append(final_radius)

    # Clipping can produce duplicates of the final radius
    unique = []
    for rad in sorted(radii):
        if not unique or rad > unique[-1]:
            unique.append(rad)
    return unique


def generate_radial_lines(num_lines: int, max_radius: float) -> List[RadialLine]:
    """Evenly spaced reference lines from the center, starting at angle 0."""
    return [RadialLine(angle=(i * FULL_TURN) / num_lines, radius=max_radius)
            for i in range(num_lines)]


# =============================================================================
# FIBONACCI / GOLDEN RECTANGLE CONSTRUCTION
# =============================================================================

def fibonacci_sequence(count: int) -> List[int]:
    """First `count` Fibonacci numbers starting 1, 1, 2, 3, ..."""
    sequence = []
    a, b = 1, 1
    for _ in range(count):
        sequence.append(a)
        a, b = b, a + b
    return sequence


def generate_fibonacci_squares(num_squares: int) -> List[FibonacciSquare]:
    """Build the classic nested-square construction.

    Square i (i >= 1) is placed flush against the bounding box of all
    previous squares, on the right, bottom, left, top side in turn. The
    bounding box side it touches always equals the new square's size, so
    every intermediate bounding box is a Fibonacci (near-golden) rectangle.
    """
    squares: List[FibonacciSquare] = []
    min_x = min_y = max_x = max_y = 0.0

    for i, size in enumerate(fibonacci_sequence(num_squares)):
        if i == 0:
            square = FibonacciSquare(0.0, 0.0, float(size))
        else:
            direction = DIRECTIONS[(i - 1) % 4]
            if direction == "right":
                x, y = max_x, min_y
            elif direction == "down":
                x, y = min_x, max_y
            elif direction == "left":
                x, y = min_x - size, min_y
            else:  # up
                x, y = min_x, min_y - size
            square = FibonacciSquare(x, y, float(size), direction)

        squares.append(square)
        x0, y0, x1, y1 = square.bounds()
        if i == 0:
            min_x, min_y, max_x, max_y = x0, y0, x1, y1
        else:
            min_x, min_y = min(min_x, x0), min(min_y, y0)
            max_x, max_y = max(max_x, x1), max(max_y, y1)

    return squares


def squares_bounding_box(squares: List[FibonacciSquare]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) over all squares."""
    return (
        min(s.x for s in squares),
        min(s.y for s in squares),
        max(s.x + s.size for s in squares),
        max(s.y + s.size for s in squares),
    )
