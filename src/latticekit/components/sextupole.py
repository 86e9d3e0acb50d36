from .component import AcceleratorComponent
from latticekit.models.validators import validate_magnetic_strength
from pydantic import Field, field_validator


class Sextupole(AcceleratorComponent):
    """Sextupole component (normalized strength k2 in 1/m^3)."""
    type: str = Field(default='Sextupole', description="Component type")
    k2: float = Field(default=0.0, description="Normalized sextupole strength (1/m^3)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Sextupole':
            raise ValueError("Type of a sextupole component must be 'Sextupole'.")
        return v

    @field_validator('k2')
    @classmethod
    def validate_k2(cls, v):
        return validate_magnetic_strength(v, max_strength=10000.0)
