# define the accelerator components that occupy the leaves of the frame tree.
# A component only carries the data a consumer of the flat lattice needs to build
# its physics; its parameters are plain validated fields. The only fields shared
# by all components are the name, the type tag and the length.
# Current types:
## Drift : field-free space
## Marker : zero-length reference point
## Monitor : beam position monitor / diagnostic
## Quadrupole : normal quadrupole magnet (k1)
## SectorBend : dipole bending magnet (angle, k1)
## Sextupole : sextupole magnet (k2)
## Octupole : octupole magnet (k3)
## Kicker : orbit corrector (hkick, vkick)
## RFCavity : accelerating cavity (voltage, frequency, lag)
## Solenoid : solenoid magnet (ks)

from pydantic import Field, field_validator

from ..models.entity import ModelEntity


class AcceleratorComponent(ModelEntity):
    """Base class for accelerator components."""
    type: str = Field(..., min_length=1, description="Component type tag")
    length: float = Field(default=0.0, ge=0.0, description="Component length in meters")

    @field_validator('length')
    @classmethod
    def validate_physical_length(cls, v):
        """Validate length is physically reasonable."""
        if v > 10000:  # 10 km seems like a reasonable upper limit for a single component
            raise ValueError(f"Component length {v} m seems unreasonably large")
        return v

    def get_type(self) -> str:
        """Get the type tag of the component."""
        return self.type

    def get_length(self) -> float:
        """Get the length of the component."""
        return self.length

    def __str__(self):
        return f"{self.type}(name={self.name}, length={self.length})"
