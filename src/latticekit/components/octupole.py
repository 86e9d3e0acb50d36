from .component import AcceleratorComponent
from latticekit.models.validators import validate_magnetic_strength
from pydantic import Field, field_validator


class Octupole(AcceleratorComponent):
    """Octupole component (normalized strength k3 in 1/m^4)."""
    type: str = Field(default='Octupole', description="Component type")
    k3: float = Field(default=0.0, description="Normalized octupole strength (1/m^4)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Octupole':
            raise ValueError("Type of an octupole component must be 'Octupole'.")
        return v

    @field_validator('k3')
    @classmethod
    def validate_k3(cls, v):
        return validate_magnetic_strength(v, max_strength=100000.0)
