"""
Shared types for accelerator model construction.

This module defines the enumerations, configuration models, statistics
container and exception hierarchy used by the frame tree and the model
constructor.
"""

from enum import Enum
from typing import Dict
from pydantic import Field, field_validator

from ..models.base import PhysicsBaseModel
from ..models.validators import validate_log_level


class OriginPolicy(str, Enum):
    """Where a frame's local coordinate origin sits along its own length."""
    ENTRANCE = "entrance"
    CENTRE = "centre"
    EXIT = "exit"


class ConstructorState(str, Enum):
    """Lifecycle of an AcceleratorModelConstructor."""
    EMPTY = "empty"            # No model has been started
    BUILDING = "building"      # A model is in progress, stack depth >= 1
    FINALIZED = "finalized"    # Model handed to the caller by finish()


class ConstructorConfiguration(PhysicsBaseModel):
    """Configuration for the model constructor."""
    name: str = Field(default="default", min_length=1, description="Constructor name, used for logging")
    root_frame_name: str = Field(default="GLOBAL", min_length=1, description="Name of the root frame")
    root_origin: OriginPolicy = Field(default=OriginPolicy.ENTRANCE, description="Origin policy of the root frame")
    drift_name: str = Field(default="UNNAMED", min_length=1, description="Name given to anonymous drifts")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def check_log_level(cls, v):
        return validate_log_level(v)


class ModelStatistics(PhysicsBaseModel):
    """Summary numbers of an accelerator model."""
    arc_length: float = Field(description="Arc length of the beamline in meters")
    component_count: int = Field(ge=0, description="Number of entries in the flat lattice")
    element_count: int = Field(ge=0, description="Number of registered model entities")
    type_counts: Dict[str, int] = Field(default_factory=dict, description="Registered entities per type tag")


class ModelConstructionError(Exception):
    """Base exception class for model construction errors."""
    pass


class ConstructionStateError(ModelConstructionError):
    """Raised when a construction call violates the constructor's state or stack discipline."""
    pass


class FrameConsolidatedError(ModelConstructionError):
    """Raised when content is appended to a frame whose construction is consolidated."""
    pass


class ComponentTypeError(ModelConstructionError):
    """Raised when a component cannot be built from a table record."""
    pass
