from .component import AcceleratorComponent
from pydantic import Field, field_validator
from typing import Optional


class Solenoid(AcceleratorComponent):
    """Solenoid component (ks is the normalized solenoid strength in 1/m)."""
    type: str = Field(default='Solenoid', description="Component type")
    ks: float = Field(default=0.0, description="Normalized solenoid strength (1/m)")
    field: Optional[float] = Field(default=None, description="Longitudinal field (T)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Solenoid':
            raise ValueError("Type of a solenoid component must be 'Solenoid'.")
        return v
