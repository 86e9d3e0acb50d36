"""
latticekit - accelerator model construction

Builds hierarchical accelerator models (a frame tree, an entity repository
and a flat lattice in beamline order) incrementally or from optics tables.
"""

from .model import (
    AcceleratorModel,
    AcceleratorModelConstructor,
    ConstructorConfiguration,
    LatticeFrame,
    ComponentFrame,
    ModelConstructionError,
)
from .factory import TypeFactory, DriverConfiguration, OpticsTableModelBuilder

__version__ = "0.1.0"

__all__ = [
    'AcceleratorModel',
    'AcceleratorModelConstructor',
    'ConstructorConfiguration',
    'LatticeFrame',
    'ComponentFrame',
    'ModelConstructionError',
    'TypeFactory',
    'DriverConfiguration',
    'OpticsTableModelBuilder',
]

# Initialize logging for the package
import logging
logging.getLogger(__name__).addHandler(logging.NullHandler())
