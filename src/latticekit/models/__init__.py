"""
latticekit Pydantic Models Package

This package contains the Pydantic base model and physics validators shared
by the frame tree, the accelerator components and the configuration objects.
"""

from .base import PhysicsBaseModel
from .entity import ModelEntity
from .validators import (
    validate_magnetic_strength, validate_rf_frequency, validate_bending_angle,
    validate_momentum, validate_element_name, validate_log_level
)

__all__ = [
    'PhysicsBaseModel',
    'ModelEntity',
    'validate_magnetic_strength',
    'validate_rf_frequency',
    'validate_bending_angle',
    'validate_momentum',
    'validate_element_name',
    'validate_log_level',
]
