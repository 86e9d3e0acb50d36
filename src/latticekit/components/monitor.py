from .component import AcceleratorComponent
from pydantic import Field, field_validator
from typing import Literal


class Monitor(AcceleratorComponent):
    """Monitor component.

    A beam position monitor (BPM) or other diagnostic used to measure beam
    properties. Typically has very small but non-zero length.
    """
    type: str = Field(default='Monitor', description="Component type")
    plane: Literal['both', 'horizontal', 'vertical'] = Field(default='both', description="Measured plane(s)")

    @field_validator('type')
    @classmethod
    def validate_type(cls, v):
        """Validate component type is correct."""
        if v != 'Monitor':
            raise ValueError("Type of a Monitor component must be 'Monitor'.")
        return v
