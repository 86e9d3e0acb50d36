"""
latticekit model - frame tree, entity repository, flat lattice and model constructor
"""

from latticekit.model.types import (
    OriginPolicy,
    ConstructorState,
    ConstructorConfiguration,
    ModelStatistics,
    ModelConstructionError,
    ConstructionStateError,
    FrameConsolidatedError,
    ComponentTypeError,
)
from latticekit.model.frames import LatticeFrame, ComponentFrame
from latticekit.model.repository import ElementRepository, EntityHandle
from latticekit.model.flat_lattice import FlatLattice
from latticekit.model.traversal import FrameTraverser, ElementExtractor, collect_frames
from latticekit.model.accelerator_model import AcceleratorModel
from latticekit.model.constructor import AcceleratorModelConstructor

__all__ = [
    'OriginPolicy',
    'ConstructorState',
    'ConstructorConfiguration',
    'ModelStatistics',
    'ModelConstructionError',
    'ConstructionStateError',
    'FrameConsolidatedError',
    'ComponentTypeError',
    'LatticeFrame',
    'ComponentFrame',
    'ElementRepository',
    'EntityHandle',
    'FlatLattice',
    'FrameTraverser',
    'ElementExtractor',
    'collect_frames',
    'AcceleratorModel',
    'AcceleratorModelConstructor',
]
