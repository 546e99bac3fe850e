#!/usr/bin/env python3
"""
SPIRAL_CONSTANTS.PY - Fixed numeric constants for golden spiral calculations

The spiral follows r(θ) = a × e^(b×θ). The radius multiplies by φ once per
GROWTH_PERIOD, which is one full turn (2π).
"""

import math


# =============================================================================
# GOLDEN RATIO
# =============================================================================

PHI = (1 + math.sqrt(5)) / 2          # ≈ 1.6180339887, positive root of x² = x + 1

GROWTH_PERIOD = 2 * math.pi           # Angle over which the radius grows by φ
FULL_TURN = 2 * math.pi

GOLDEN_B = math.log(PHI) / GROWTH_PERIOD   # ≈ 0.0766


# =============================================================================
# SAMPLING / UNITS
# =============================================================================

DEFAULT_POINTS_PER_TURN = 720
MM_PER_INCH = 25.4

# 5% of the smaller paper dimension on each side, 90% usable
MARGIN_FRACTION = 0.05


# =============================================================================
# SOLVER LIMITS
# =============================================================================

MIN_SOLVER_RADIUS_MM = 1e-6
MAX_SOLVER_RADIUS_MM = 1e6
MAX_SOLVER_THETA = 40 * math.pi
SOLVER_MAX_ITERATIONS = 200
SOLVER_RELATIVE_TOLERANCE = 1e-10

# Guide circle bookkeeping
GUIDE_OVERSHOOT = 1.1                 # Keep multiplying while r <= final × 1.1
GUIDE_TOLERANCE_MM = 1.0
