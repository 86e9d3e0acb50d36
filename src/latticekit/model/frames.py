"""
Frame tree of an accelerator model.

A frame is a named, nestable container that groups accelerator components
(girders, cells, sections, rings). Plain frames own an ordered list of child
frames; component frames are the leaves and each places one accelerator
component (or nothing, for a pure placeholder) in the tree. A frame can be
extended only until its construction is consolidated, after which its
cumulative geometry is fixed.
"""

from typing import Any, Dict, List, Optional, Tuple, TYPE_CHECKING

from pydantic import Field, PrivateAttr, model_validator

from ..components.component import AcceleratorComponent
from ..models.entity import ModelEntity
from .types import OriginPolicy, FrameConsolidatedError

if TYPE_CHECKING:
    from .traversal import FrameTraverser


class LatticeFrame(ModelEntity):
    """
    Structural frame holding an ordered sequence of child frames.

    The frame's geometric length is the sum of its children's lengths. The
    origin policy decides where position zero of the frame's local
    coordinate sits: at the entrance, the centre or the exit.

    Example:
        >>> cell = LatticeFrame(name="CELL1")
        >>> cell.append_frame(ComponentFrame(component=Drift(name="D1", length=2.0)))
        >>> cell.get_geometry_length()
        2.0
    """
    origin: OriginPolicy = Field(default=OriginPolicy.ENTRANCE, description="Origin of local coordinates")
    children: List['LatticeFrame'] = Field(default_factory=list, description="Ordered child frames")

    _consolidated: bool = PrivateAttr(default=False)
    _geometry_length: Optional[float] = PrivateAttr(default=None)

    def get_type(self) -> str:
        return "SequenceFrame"

    # === Capability checks ===

    def is_component(self) -> bool:
        """True if this frame carries an accelerator component."""
        return False

    def as_component_frame(self) -> Optional['ComponentFrame']:
        """Return this frame as a component occurrence, or None for structural frames."""
        return None

    # === Structure ===

    def append_frame(self, frame: 'LatticeFrame'):
        """Append a child frame at the end of this frame.

        Raises:
            TypeError: If frame is not a LatticeFrame, or is this frame itself.
            FrameConsolidatedError: If this frame's construction is consolidated.
        """
        if not isinstance(frame, LatticeFrame):
            raise TypeError("Child must be an instance of LatticeFrame.")
        if frame is self:
            raise TypeError(f"Frame '{self.name}' cannot be appended to itself.")
        if self._consolidated:
            raise FrameConsolidatedError(
                f"Frame '{self.name}' is consolidated; its content can no longer change."
            )
        self.children.append(frame)

    def get_children(self) -> List['LatticeFrame']:
        """Get the child frames in insertion order."""
        return list(self.children)

    def is_consolidated(self) -> bool:
        return self._consolidated

    def consolidate_construction(self):
        """Freeze this frame and every frame below it, fixing their geometry.

        Calling it again is a no-op.
        """
        if self._consolidated:
            return
        for child in self.children:
            child.consolidate_construction()
        self._geometry_length = self._compute_geometry_length()
        self._consolidated = True

    # === Geometry ===

    def _compute_geometry_length(self) -> float:
        return sum((child.get_geometry_length() for child in self.children), 0.0)

    def get_geometry_length(self) -> float:
        """Get the arc length spanned by this frame in meters."""
        if self._geometry_length is not None:
            return self._geometry_length
        return self._compute_geometry_length()

    def get_local_entrance(self) -> float:
        """Position of the frame entrance in the frame's local coordinate."""
        length = self.get_geometry_length()
        if self.origin == OriginPolicy.CENTRE:
            return -length / 2.0
        if self.origin == OriginPolicy.EXIT:
            return -length
        return 0.0

    def get_child_positions(self) -> List[Tuple['LatticeFrame', float, float]]:
        """Get the position information for all children.

        Returns:
            List of tuples (child, start_position, end_position) in the local
            coordinate of this frame, in insertion order.
        """
        positions = []
        current_position = self.get_local_entrance()
        for child in self.children:
            start_position = current_position
            end_position = current_position + child.get_geometry_length()
            positions.append((child, start_position, end_position))
            current_position = end_position
        return positions

    # === Traversal ===

    def traverse(self, traverser: 'FrameTraverser'):
        """Visit this frame and everything below it in document order.

        The frame itself is visited first, then each child in insertion
        order; a child's sub-tree is visited completely before its next
        sibling.
        """
        traverser.act_on(self)
        for child in self.children:
            child.traverse(traverser)

    # === Export ===

    def to_yaml_dict(self) -> Dict[str, Any]:
        """Convert the frame sub-tree to a nested dictionary.
        Format:
        name: frame_name
        type: SequenceFrame
        origin: entrance
        length: number
        children:
            - child dictionaries
        """
        return {
            'name': self.name,
            'type': self.get_type(),
            'origin': self.origin.value,
            'length': self.get_geometry_length(),
            'children': [child.to_yaml_dict() for child in self.children],
        }

    def __str__(self):
        return f"{self.get_type()}(name={self.name}, children={len(self.children)})"


class ComponentFrame(LatticeFrame):
    """
    Occurrence of an accelerator component in the frame tree.

    Several occurrences may share one component instance. The beamline
    index is assigned when the occurrence is placed in a flat lattice and
    stays None until then.
    """
    component: Optional[AcceleratorComponent] = Field(default=None, description="Placed component")
    beamline_index: Optional[int] = Field(default=None, ge=0, description="Position in the flat lattice")

    @model_validator(mode='before')
    @classmethod
    def default_name_from_component(cls, data: Any) -> Any:
        """Name the occurrence after its component unless a name is given."""
        if isinstance(data, dict) and not data.get('name'):
            component = data.get('component')
            if isinstance(component, AcceleratorComponent):
                data = dict(data)
                data['name'] = component.name
        return data

    @model_validator(mode='after')
    def validate_leaf(self):
        """Component frames are leaves of the tree."""
        if self.children:
            raise ValueError("A ComponentFrame cannot have child frames.")
        return self

    def get_type(self) -> str:
        return "ComponentFrame"

    def is_component(self) -> bool:
        return self.component is not None

    def as_component_frame(self) -> Optional['ComponentFrame']:
        return self

    def get_component(self) -> Optional[AcceleratorComponent]:
        """Get the placed component, None for an empty placeholder."""
        return self.component

    def set_beamline_index(self, index: int):
        self.beamline_index = index

    def get_beamline_index(self) -> Optional[int]:
        return self.beamline_index

    def append_frame(self, frame: LatticeFrame):
        raise TypeError(f"ComponentFrame '{self.name}' cannot contain child frames.")

    def _compute_geometry_length(self) -> float:
        if self.component is None:
            return 0.0
        return self.component.get_length()

    def to_yaml_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'name': self.name,
            'type': self.get_type(),
            'index': self.beamline_index,
            'length': self.get_geometry_length(),
        }
        if self.component is not None:
            result['component'] = self.component.to_yaml_dict()
        return result

    def __str__(self):
        return f"ComponentFrame(name={self.name}, index={self.beamline_index}, component={self.component})"
