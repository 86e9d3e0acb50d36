# Implementation of the marker component for the latticekit frame tree.
from latticekit.components.component import AcceleratorComponent
from pydantic import Field, field_validator


class Marker(AcceleratorComponent):
    """Marker component.

    A marker is a zero-length component used to mark specific locations
    in the beamline for reference or measurement purposes.
    """
    type: str = Field(default='Marker', description="Component type")

    @field_validator('length')
    @classmethod
    def validate_length(cls, v):
        """Validate marker length is exactly zero."""
        if v != 0:
            raise ValueError("Length of a marker component must be zero.")
        return v

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Marker':
            raise ValueError("Type of a marker component must be 'Marker'.")
        return v
