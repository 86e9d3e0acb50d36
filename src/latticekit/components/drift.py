# Implementation of the drift component for the latticekit frame tree.
from latticekit.components.component import AcceleratorComponent
from pydantic import Field, field_validator


class Drift(AcceleratorComponent):
    """Drift space component.

    A field-free region of the beamline. Zero-length drifts are accepted so
    that construction drivers can pass through degenerate table rows.
    """
    type: str = Field(default='Drift', description="Component type (always 'Drift')")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Drift':
            raise ValueError("Type of a drift component must be 'Drift'.")
        return v
