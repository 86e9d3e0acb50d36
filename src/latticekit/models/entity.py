# Base class of everything that can be placed in, or owned by, an accelerator model.
# Frames and accelerator components are both model entities. An entity's type tag
# is what model statistics are grouped by; its identity (the Python object itself)
# is what the element repository deduplicates on. Entities are pydantic models and
# therefore compare structurally with ==, so identity must always be checked with id().

from pydantic import Field, field_validator

from .base import PhysicsBaseModel
from .validators import validate_element_name


class ModelEntity(PhysicsBaseModel):
    """Base class for every entity owned by an accelerator model."""
    name: str = Field(..., min_length=1, description="Entity name")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        return validate_element_name(v)

    def get_name(self) -> str:
        """Get the name of the entity."""
        return self.name

    def get_type(self) -> str:
        """Type tag used for model statistics."""
        return type(self).__name__

    def __str__(self):
        return f"{self.get_type()}(name={self.name})"

    def __repr__(self):
        return self.__str__()
