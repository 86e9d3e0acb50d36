# Implementation of the quadrupole component for the latticekit frame tree.
from latticekit.components.component import AcceleratorComponent
from latticekit.models.validators import validate_magnetic_strength
from pydantic import Field, field_validator
from typing import Optional
import warnings


class Quadrupole(AcceleratorComponent):
    """Quadrupole component.

    A quadrupole magnet provides focusing/defocusing forces in one transverse
    direction and opposite forces in the perpendicular direction. ``k1`` is the
    normalized gradient; ``field_gradient`` is the gradient in T/m once the
    reference rigidity is known.
    """
    type: str = Field(default='Quadrupole', description="Component type")
    k1: float = Field(default=0.0, description="Normalized gradient (1/m^2)")
    field_gradient: Optional[float] = Field(default=None, description="Field gradient (T/m)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Quadrupole':
            raise ValueError("Type of a quadrupole component must be 'Quadrupole'.")
        return v

    @field_validator('k1')
    @classmethod
    def validate_k1(cls, v):
        """Validate quadrupole strength is within reasonable limits."""
        validate_magnetic_strength(v, max_strength=1000.0)
        if abs(v) > 100.0:
            warnings.warn(f"Quadrupole strength k1={v} m^-2 is very high")
        return v
