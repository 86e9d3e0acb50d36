"""
Custom validators for physics-specific constraints in latticekit.

This module provides specialized validation functions for accelerator
component parameters, ensuring physical correctness and reasonable value
ranges before a component is placed into a model.
"""

from typing import Optional
import math


def validate_magnetic_strength(value: Optional[float], max_strength: float = 1000.0) -> Optional[float]:
    """Reject normalized multipole strengths beyond +/- max_strength; None passes."""
    if value is not None and abs(value) > max_strength:
        raise ValueError(f"Magnetic strength {value} exceeds reasonable limit (±{max_strength})")
    return value


def validate_rf_frequency(frequency: float) -> float:
    """RF frequencies in Hz must lie between 1 MHz and 1 THz."""
    if not (1e6 <= frequency <= 1e12):
        raise ValueError(f"RF frequency {frequency} Hz outside reasonable range (1 MHz - 1 THz)")
    return frequency


def validate_bending_angle(angle: float) -> float:
    # a single magnet never bends by more than two full turns
    if abs(angle) > 4 * math.pi:
        raise ValueError(f"Bending angle {angle} rad seems unreasonably large (>{4*math.pi:.2f} rad)")
    return angle


def validate_momentum(momentum: float, max_momentum: float = 1e5) -> float:
    """
    Validate reference momentum in GeV/c.

    Raises:
        ValueError: If momentum is not positive or beyond max_momentum
    """
    if not (0.0 < momentum <= max_momentum):
        raise ValueError(f"Momentum {momentum} GeV/c outside reasonable range (0 - {max_momentum} GeV/c)")
    return momentum


def validate_element_name(name: str) -> str:
    """
    Validate element name follows accelerator naming conventions.

    Optics tables routinely carry names such as ``MB.A8R1.B1`` or
    ``IP1$START``, so dots and dollar signs are accepted.

    Args:
        name: Element name

    Returns:
        Validated name

    Raises:
        ValueError: If name doesn't follow conventions
    """
    if not name:
        raise ValueError("Element name cannot be empty")

    if len(name) > 64:
        raise ValueError(f"Element name '{name}' is too long (max 64 characters)")

    valid_chars = set('abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_-.$')
    if not all(c in valid_chars for c in name):
        raise ValueError(f"Element name '{name}' contains invalid characters")

    return name


LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG", "NOTSET")


def validate_log_level(level: str) -> str:
    """Normalise a logging level name to upper case and check it exists."""
    normalized = level.upper()
    if normalized not in LOG_LEVELS:
        raise ValueError(f"Unknown log level '{level}'. Allowed: {list(LOG_LEVELS)}")
    return normalized
