"""
Frame traversal protocol.

A FrameTraverser is handed every frame of a sub-tree, in document order, by
LatticeFrame.traverse(). ElementExtractor is the traverser used when a whole
pre-built sub-tree is spliced into a model under construction: it registers
every frame it sees and extracts, in order, the component occurrences into the
model's flat lattice.
"""

from abc import ABC, abstractmethod
from typing import List
import logging

from .frames import LatticeFrame
from .repository import ElementRepository
from .flat_lattice import FlatLattice

logger = logging.getLogger(__name__)


class FrameTraverser(ABC):
    """Visitor applied to each frame of a sub-tree by LatticeFrame.traverse()."""

    @abstractmethod
    def act_on(self, frame: LatticeFrame):
        """Called once for every visited frame."""
        pass


class ElementExtractor(FrameTraverser):
    """
    Registers visited frames and collects component occurrences.

    Every visited frame is added to the repository. A frame that is a
    component occurrence additionally gets its component registered (when it
    carries one) and is appended to the flat lattice, which assigns its
    beamline index. Structural frames have no lattice effect.
    """

    def __init__(self, repository: ElementRepository, lattice: FlatLattice):
        self.repository = repository
        self.lattice = lattice
        self.frames_visited = 0
        self.occurrences_extracted = 0

    def act_on(self, frame: LatticeFrame):
        self.repository.add(frame)
        self.frames_visited += 1

        occurrence = frame.as_component_frame()
        if occurrence is None:
            return

        if occurrence.is_component():
            self.repository.add(occurrence.get_component())
        index = self.lattice.push_back(occurrence)
        self.occurrences_extracted += 1
        logger.debug(f"Extracted '{occurrence.name}' at beamline index {index}")


class FrameCollector(FrameTraverser):
    """Collects visited frames into a list."""

    def __init__(self):
        self.frames: List[LatticeFrame] = []

    def act_on(self, frame: LatticeFrame):
        self.frames.append(frame)


def collect_frames(frame: LatticeFrame) -> List[LatticeFrame]:
    """Return frame and every frame below it in traversal order."""
    collector = FrameCollector()
    frame.traverse(collector)
    return collector.frames
