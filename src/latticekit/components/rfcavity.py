from .component import AcceleratorComponent
from latticekit.models.validators import validate_rf_frequency
from pydantic import Field, field_validator


class RFCavity(AcceleratorComponent):
    """RF Cavity component.

    An RF cavity accelerates particles by applying time-varying electromagnetic fields.
    Used for acceleration and longitudinal focusing in both linacs and rings.
    """
    type: str = Field(default='RFCavity', description="Component type")
    voltage: float = Field(default=0.0, description="Peak voltage (MV)")
    frequency: float = Field(default=1e8, description="RF frequency (Hz)")
    lag: float = Field(default=0.0, description="Phase lag (units of 2π)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'RFCavity':
            raise ValueError("Type of an RFCavity component must be 'RFCavity'.")
        return v

    @field_validator('frequency')
    @classmethod
    def validate_frequency(cls, v):
        return validate_rf_frequency(v)
