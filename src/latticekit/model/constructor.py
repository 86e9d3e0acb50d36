"""
Accelerator model constructor.

The constructor builds an AcceleratorModel incrementally with a stack of open
frames. The root frame is opened when a model is started; client code opens
and closes nested frames and appends component occurrences or whole pre-built
sub-trees to whichever frame is on top. Every append keeps three things in
step: the element repository (each entity registered once), the flat lattice
(occurrences in beamline order with their index) and the frame tree
(structure and geometry). finish() closes the root, consolidates the tree and
hands the finished model to the caller.

Typical workflow:
    1. constructor = AcceleratorModelConstructor()
    2. constructor.append_drift(2.0)
    3. constructor.open_frame(LatticeFrame(name="CELL1"))
    4. constructor.append_component(Quadrupole(name="QF", length=0.5, k1=0.8))
    5. constructor.close_frame()
    6. model = constructor.finish()

Calls made outside their guard (no model in progress, closing more frames
than were opened, finishing with frames still open) raise
ConstructionStateError and leave the constructor untouched.
"""

import logging
import sys
from typing import List, Optional, TextIO

from ..components.component import AcceleratorComponent
from ..components.drift import Drift
from ..models.entity import ModelEntity
from .accelerator_model import AcceleratorModel
from .frames import LatticeFrame, ComponentFrame
from .traversal import ElementExtractor, collect_frames
from .types import (
    ConstructorConfiguration,
    ConstructorState,
    ConstructionStateError,
    FrameConsolidatedError,
)


class AcceleratorModelConstructor:
    """
    Stack-based builder of accelerator models.

    Args:
        config: Optional constructor configuration (root frame name and
                origin, anonymous drift name, log level).

    Example:
        >>> constructor = AcceleratorModelConstructor()
        >>> constructor.append_drift(2.0)
        0
        >>> model = constructor.finish()
        >>> model.get_arc_length()
        2.0
    """

    def __init__(self, config: Optional[ConstructorConfiguration] = None):
        self.config = config or ConstructorConfiguration()
        self.name = self.config.name

        self._current_model: Optional[AcceleratorModel] = None
        self._frame_stack: List[LatticeFrame] = []
        self._state = ConstructorState.EMPTY

        self.logger = logging.getLogger(f"{__name__}.{self.name}")
        self.logger.setLevel(getattr(logging, self.config.log_level))

        self.start_new_model()

    # === State ===

    @property
    def state(self) -> ConstructorState:
        return self._state

    @property
    def depth(self) -> int:
        """Number of currently open frames, root included."""
        return len(self._frame_stack)

    def has_model(self) -> bool:
        """True while a model is in progress."""
        return self._state == ConstructorState.BUILDING

    def get_current_frame(self) -> LatticeFrame:
        """Get the frame currently receiving appends."""
        self._require_model("get_current_frame")
        return self._frame_stack[-1]

    def get_current_model(self) -> AcceleratorModel:
        """Get the model in progress without finishing it (read-only use)."""
        self._require_model("get_current_model")
        return self._current_model

    def _require_model(self, operation: str):
        if self._state != ConstructorState.BUILDING or self._current_model is None:
            raise ConstructionStateError(
                f"{operation}() requires a model in progress (state: {self._state.value}). "
                f"Call start_new_model() first."
            )

    def _check_unplaced(self, occurrences: List[ComponentFrame]):
        for occurrence in occurrences:
            if occurrence.get_beamline_index() is not None:
                raise ConstructionStateError(
                    f"Occurrence '{occurrence.name}' is already placed at beamline index "
                    f"{occurrence.get_beamline_index()}."
                )

    def _target_frame(self) -> LatticeFrame:
        frame = self._frame_stack[-1]
        if frame.is_consolidated():
            raise FrameConsolidatedError(f"Frame '{frame.name}' is consolidated and cannot receive content.")
        return frame

    # === Model lifecycle ===

    def start_new_model(self):
        """Discard any model in progress and start a fresh one.

        The new model gets a root frame named after config.root_frame_name,
        which is registered and pushed as the only open frame.
        """
        if self._current_model is not None:
            self.logger.debug(
                f"Discarding model in progress ({self._current_model.elements.size()} elements, "
                f"{len(self._frame_stack)} open frames)"
            )
            self._current_model.lattice.release()
            self._current_model.elements.release()
            self._current_model = None
        self._frame_stack.clear()

        global_frame = LatticeFrame(name=self.config.root_frame_name, origin=self.config.root_origin)
        self._current_model = AcceleratorModel(global_frame=global_frame)
        self._current_model.elements.add(global_frame)
        self._frame_stack.append(global_frame)
        self._state = ConstructorState.BUILDING
        self.logger.debug(f"Started new model with root frame '{global_frame.name}'")

    def finish(self) -> AcceleratorModel:
        """Close the root frame and hand over the completed model.

        The root frame is consolidated, fixing the geometry of the whole
        tree. The constructor keeps no reference to the returned model.

        Raises:
            ConstructionStateError: If no model is in progress or frames
                                    other than the root are still open.
        """
        self._require_model("finish")
        if len(self._frame_stack) != 1:
            open_frames = [frame.name for frame in self._frame_stack[1:]]
            raise ConstructionStateError(
                f"finish() called with {len(open_frames)} unclosed frame(s): {open_frames}"
            )

        root = self._frame_stack.pop()
        if self._frame_stack or root is not self._current_model.global_frame:
            raise ConstructionStateError("Frame stack corrupted: root frame is not at the bottom.")

        root.consolidate_construction()

        model = self._current_model
        self._current_model = None
        self._state = ConstructorState.FINALIZED
        self.logger.info(
            f"Model '{root.name}' complete: arc length {root.get_geometry_length():.6g} m, "
            f"{model.lattice.size()} components, {model.elements.size()} elements"
        )
        return model

    # === Frames ===

    def open_frame(self, frame: LatticeFrame):
        """Register frame and make it the target of subsequent appends.

        Raises:
            TypeError: If frame is not a structural LatticeFrame.
            ConstructionStateError: If no model is in progress.
        """
        self._require_model("open_frame")
        if not isinstance(frame, LatticeFrame) or frame.as_component_frame() is not None:
            raise TypeError("open_frame() expects a structural LatticeFrame.")
        if frame.children:
            self.logger.warning(
                f"Frame '{frame.name}' already has {len(frame.children)} children; they are not "
                f"extracted into the lattice. Use append_frame() for pre-built frames."
            )
        if frame.is_consolidated():
            raise FrameConsolidatedError(f"Frame '{frame.name}' is consolidated and cannot be opened.")
        if any(open_frame is frame for open_frame in self._frame_stack):
            raise ConstructionStateError(f"Frame '{frame.name}' is already open.")
        self._current_model.elements.add(frame)
        self._frame_stack.append(frame)
        self.logger.debug(f"Opened frame '{frame.name}' (depth {len(self._frame_stack)})")

    def close_frame(self) -> LatticeFrame:
        """Close the top frame and append it to the frame beneath.

        Returns:
            The closed frame.

        Raises:
            ConstructionStateError: If only the root frame is open.
        """
        self._require_model("close_frame")
        if len(self._frame_stack) < 2:
            raise ConstructionStateError(
                "close_frame() called with no open frame above the root; "
                "the root frame is closed by finish()."
            )
        parent = self._frame_stack[-2]
        if parent.is_consolidated():
            raise FrameConsolidatedError(f"Frame '{parent.name}' is consolidated and cannot receive content.")
        frame = self._frame_stack.pop()
        parent.append_frame(frame)
        self.logger.debug(f"Closed frame '{frame.name}' into '{self._frame_stack[-1].name}'")
        return frame

    # === Content ===

    def append_drift(self, length: float) -> int:
        """Append an anonymous drift of the given length.

        Returns:
            Beamline index of the new drift occurrence.
        """
        drift = Drift(name=self.config.drift_name, length=length)
        return self.append_component_occurrence(ComponentFrame(component=drift))

    def append_component(self, component: AcceleratorComponent) -> int:
        """Place component in a new occurrence at the end of the current frame."""
        if not isinstance(component, AcceleratorComponent):
            raise TypeError("append_component() expects an AcceleratorComponent.")
        return self.append_component_occurrence(ComponentFrame(component=component))

    def append_component_occurrence(self, occurrence: ComponentFrame) -> int:
        """Append a component occurrence to the lattice and the current frame.

        The occurrence is registered, as is the component it carries (a
        component shared with earlier occurrences is registered only once).

        Returns:
            Beamline index assigned to the occurrence.

        Raises:
            TypeError: If occurrence is not a ComponentFrame.
            ConstructionStateError: If no model is in progress, or the
                                    occurrence is already placed.
        """
        self._require_model("append_component_occurrence")
        if not isinstance(occurrence, ComponentFrame):
            raise TypeError("append_component_occurrence() expects a ComponentFrame.")
        self._check_unplaced([occurrence])

        model = self._current_model
        self._target_frame().append_frame(occurrence)
        model.elements.add(occurrence)
        if occurrence.is_component():
            model.elements.add(occurrence.get_component())
        index = model.lattice.push_back(occurrence)
        self.logger.debug(f"Appended '{occurrence.name}' at beamline index {index}")
        return index

    def append_frame(self, frame: LatticeFrame):
        """Splice a pre-built frame sub-tree into the current frame.

        Every frame of the sub-tree is registered and its component
        occurrences are appended to the flat lattice in document order, as
        if they had been appended one by one. The sub-tree itself is then
        appended, unchanged, as a single child of the current frame.

        Raises:
            TypeError: If frame is not a LatticeFrame.
            ConstructionStateError: If no model is in progress, the sub-tree
                                    contains an open frame, or one of its
                                    occurrences is already placed.
        """
        self._require_model("append_frame")
        if not isinstance(frame, LatticeFrame):
            raise TypeError("append_frame() expects a LatticeFrame.")
        if frame.is_consolidated():
            self.logger.debug(f"Splicing consolidated frame '{frame.name}'")

        model = self._current_model
        target = self._target_frame()
        sub_tree = collect_frames(frame)
        open_ids = {id(open_frame) for open_frame in self._frame_stack}
        for member in sub_tree:
            if id(member) in open_ids:
                raise ConstructionStateError(
                    f"append_frame(): '{frame.name}' contains the open frame '{member.name}'."
                )
        self._check_unplaced(
            [member for member in sub_tree if member.as_component_frame() is not None]
        )

        extractor = ElementExtractor(model.elements, model.lattice)
        frame.traverse(extractor)
        target.append_frame(frame)
        self.logger.debug(
            f"Appended frame '{frame.name}': {extractor.frames_visited} frames, "
            f"{extractor.occurrences_extracted} occurrences"
        )

    def add_free_entity(self, entity: ModelEntity):
        """Register an entity that is not placed in the frame tree."""
        self._require_model("add_free_entity")
        self._current_model.elements.add(entity)

    # === Reporting ===

    def report_statistics(self, sink: Optional[TextIO] = None):
        """Write a summary of the model in progress to sink (default: stdout).

        The summary gives the arc length, the number of flat lattice entries
        ("components"), the number of registered entities ("elements") and
        the registered entities per type.
        """
        self._require_model("report_statistics")
        if sink is None:
            sink = sys.stdout
        stats = self._current_model.statistics()

        lines = [
            f"Arc length of beamline:     {stats.arc_length:g} meter",
            f"Total number of components: {stats.component_count}",
            f"Total number of elements:   {stats.element_count}",
            "",
            "Model Element statistics",
            "------------------------",
            "",
        ]
        for entity_type, count in stats.type_counts.items():
            lines.append(f"{entity_type:<20}{count:<4}")
        lines.append("")
        sink.write("\n".join(lines) + "\n")
