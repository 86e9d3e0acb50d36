# Implementation of the sector bend component for the latticekit frame tree.
from latticekit.components.component import AcceleratorComponent
from latticekit.models.validators import validate_bending_angle
from pydantic import Field, field_validator
from typing import Optional


class SectorBend(AcceleratorComponent):
    """Sector bending magnet.

    Geometry follows the arc: ``length`` is the arc length and the bending
    radius is ``length / angle``. Rectangular bends are represented as sector
    bends whose length has been converted to arc length by the builder.
    """
    type: str = Field(default='SectorBend', description="Component type")
    angle: float = Field(default=0.0, description="Bending angle (radians)")
    k1: float = Field(default=0.0, description="Normalized gradient (1/m^2)")
    e1: float = Field(default=0.0, description="Entry pole face angle (radians)")
    e2: float = Field(default=0.0, description="Exit pole face angle (radians)")
    field: Optional[float] = Field(default=None, description="Dipole field (T)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'SectorBend':
            raise ValueError("Type of a bend component must be 'SectorBend'.")
        return v

    @field_validator('angle')
    @classmethod
    def validate_angle(cls, v):
        """Validate bending angle is reasonable."""
        return validate_bending_angle(v)

    def get_radius(self) -> Optional[float]:
        """Bending radius in meters, None for a straight magnet."""
        if self.angle == 0.0 or self.length == 0.0:
            return None
        return self.length / self.angle
