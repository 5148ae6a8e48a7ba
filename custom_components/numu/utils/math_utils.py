# File: utils/math_utils.py
"""Math and calculation utilities for Numu.

Pure Python math functions with ZERO Home Assistant dependencies.
All functions here can be unit tested without Home Assistant mocking.

⚠️ UTILS PURITY: NO `homeassistant.*` imports allowed.

Functions:
    - round_ratio: Consistent rounding for displayed ratios
    - clamp: Bound a value to a range
    - safe_ratio: Division with zero protection, bounded to [0, 1]
    - calculate_percentage: Progress percentage calculations
"""

from __future__ import annotations

import logging

# Module-level logger (no HA dependency)
_LOGGER = logging.getLogger(__name__)

# Default float precision for displayed ratios
DATA_FLOAT_PRECISION = 2


def round_ratio(value: float, precision: int = DATA_FLOAT_PRECISION) -> float:
    """Round a ratio or percentage to the configured precision."""
    return round(value, precision)


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
        clamp(50, 0, 100) → 50
    """
    return max(min_val, min(value, max_val))


def safe_ratio(numerator: float, denominator: float) -> float:
    """Return numerator / denominator bounded to [0.0, 1.0].

    Returns 0.0 when the denominator is zero or negative, so an entity with
    no expected activity never reports a NaN or a division error.

    Examples:
        safe_ratio(3, 4) → 0.75
        safe_ratio(5, 4) → 1.0
        safe_ratio(2, 0) → 0.0
    """
    if denominator <= 0:
        return 0.0
    return clamp(numerator / denominator, 0.0, 1.0)


def calculate_percentage(
    current: float,
    target: float,
    precision: int = DATA_FLOAT_PRECISION,
) -> float:
    """Calculate progress percentage with proper rounding.

    Returns:
        Percentage (0-100) with proper rounding, or 0.0 if target is 0

    Examples:
        calculate_percentage(50, 100) → 50.0
        calculate_percentage(1, 3) → 33.33
        calculate_percentage(5, 0) → 0.0
    """
    if target <= 0:
        return 0.0
    return round_ratio((current / target) * 100, precision)
