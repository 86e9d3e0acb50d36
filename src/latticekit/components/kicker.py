# Implementation of the orbit corrector (kicker) component.
from latticekit.components.component import AcceleratorComponent
from pydantic import Field, field_validator
import warnings


class Kicker(AcceleratorComponent):
    """Orbit corrector giving a fixed angular kick.

    HKICKER and VKICKER table rows both map onto this type with the unused
    plane left at zero.
    """
    type: str = Field(default='Kicker', description="Component type")
    hkick: float = Field(default=0.0, description="Horizontal kick (rad)")
    vkick: float = Field(default=0.0, description="Vertical kick (rad)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Kicker':
            raise ValueError("Type of a kicker component must be 'Kicker'.")
        return v

    @field_validator('hkick', 'vkick')
    @classmethod
    def validate_kick(cls, v):
        """Warn about kicks too large for an orbit corrector."""
        if abs(v) > 0.1:
            warnings.warn(f"Kicker kick {v} rad is very large")
        return v
