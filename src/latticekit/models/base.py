"""
Base Pydantic models for the latticekit accelerator model framework.

This module provides the foundational Pydantic model class shared by every
model entity and configuration object, with physics-specific configuration
and serialization helpers.
"""

from pydantic import BaseModel, ConfigDict
from enum import Enum
from typing import Dict, Any
import numpy as np


class PhysicsBaseModel(BaseModel):
    """
    Base Pydantic model for all physics-related data structures in latticekit.

    This model provides:
    - Strict validation with assignment checking
    - Numpy scalar and array serialization support
    - Dictionary and YAML round-trip helpers

    Example:
        >>> class BeamParameters(PhysicsBaseModel):
        ...     momentum: float = Field(gt=0, description="Momentum in GeV/c")

        >>> params = BeamParameters(momentum=7000.0)
        >>> params.momentum
        7000.0
    """

    model_config = ConfigDict(
        # Validation settings
        validate_assignment=True,        # Validate on attribute assignment
        extra="forbid",                  # Reject unknown fields for safety
        use_enum_values=False,           # Keep enum members on the model

        # Type handling
        arbitrary_types_allowed=True,    # Allow numpy arrays and custom types
    )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]):
        """
        Create instance from dictionary.

        Args:
            data: Dictionary with model field values

        Returns:
            Instance of the model
        """
        return cls(**data)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert model to dictionary.

        Returns:
            Dictionary representation of the model
        """
        return self.model_dump()

    def to_yaml_dict(self) -> Dict[str, Any]:
        """
        Convert to YAML-compatible dictionary.

        Numpy scalars and arrays are converted to plain Python values and
        enum members to their values so the result can be passed to
        ``yaml.safe_dump`` directly.

        Returns:
            Dictionary suitable for YAML serialization
        """
        data = self.model_dump(mode="python")
        return convert_numpy_types(data)


def convert_numpy_types(obj):
    """Recursively convert numpy and enum values into plain Python types."""
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, Enum):
        return obj.value
    elif isinstance(obj, dict):
        return {k: convert_numpy_types(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [convert_numpy_types(item) for item in obj]
    return obj
