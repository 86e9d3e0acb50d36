# Accelerator model: the result of a model construction.
# The model aggregates three views of the same beamline:
#   - the frame tree rooted at the global frame (structure and geometry),
#   - the element repository owning every entity created during construction,
#   - the flat lattice of component occurrences in beamline order (tracking).
# Models are produced by AcceleratorModelConstructor; the constructor hands a
# model over once, after which it is only queried.

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np
import pandas as pd

from ..components.component import AcceleratorComponent
from .frames import LatticeFrame, ComponentFrame
from .repository import ElementRepository
from .flat_lattice import FlatLattice
from .types import ModelStatistics


@dataclass
class AcceleratorModel:
    """Frame tree, entity repository and flat lattice of one beamline."""
    global_frame: LatticeFrame
    elements: ElementRepository = field(default_factory=ElementRepository)
    lattice: FlatLattice = field(default_factory=FlatLattice)

    def __post_init__(self):
        if not isinstance(self.global_frame, LatticeFrame):
            raise TypeError("The global frame must be an instance of LatticeFrame.")

    def get_global_frame(self) -> LatticeFrame:
        return self.global_frame

    def get_arc_length(self) -> float:
        """Total arc length of the beamline in meters."""
        return self.global_frame.get_geometry_length()

    def get_components(self, component_type: Optional[str] = None) -> List[AcceleratorComponent]:
        """Get the placed components in beamline order.

        Args:
            component_type: Only return components with this type tag
                           (e.g. 'Quadrupole'). If None, all are returned.

        Returns:
            Components of the flat lattice occurrences, skipping empty placeholders.
        """
        components = []
        for occurrence in self.lattice:
            component = occurrence.get_component()
            if component is None:
                continue
            if component_type is None or component.get_type() == component_type:
                components.append(component)
        return components

    def get_occurrences_of(self, component: AcceleratorComponent) -> List[ComponentFrame]:
        """Get every occurrence placing this very component instance."""
        return [occ for occ in self.lattice if occ.get_component() is component]

    def get_s_positions(self) -> np.ndarray:
        """Entrance position of each flat lattice entry along the beamline."""
        lengths = np.array([occ.get_geometry_length() for occ in self.lattice], dtype=float)
        if lengths.size == 0:
            return lengths
        return np.concatenate(([0.0], np.cumsum(lengths)[:-1]))

    def statistics(self) -> ModelStatistics:
        """Compute summary statistics of the model."""
        return ModelStatistics(
            arc_length=self.get_arc_length(),
            component_count=self.lattice.size(),
            element_count=self.elements.size(),
            type_counts=self.elements.count_by_type(),
        )

    def to_dataframe(self) -> pd.DataFrame:
        """Tabulate the flat lattice.

        Returns:
            DataFrame with one row per occurrence and the columns
            index, name, type, length, s_start and s_end.
        """
        columns = ['index', 'name', 'type', 'length', 's_start', 's_end']
        if self.lattice.size() == 0:
            return pd.DataFrame(columns=columns)

        s_start = self.get_s_positions()
        data = []
        for occurrence, start in zip(self.lattice, s_start):
            component = occurrence.get_component()
            length = occurrence.get_geometry_length()
            data.append({
                'index': occurrence.get_beamline_index(),
                'name': occurrence.name,
                'type': component.get_type() if component is not None else '',
                'length': length,
                's_start': float(start),
                's_end': float(start) + length,
            })
        return pd.DataFrame(data, columns=columns)

    def to_yaml_dict(self) -> dict:
        """Convert the model to a YAML-ready dictionary.
        Structure: summary statistics, then the nested frame tree."""
        stats = self.statistics()
        return {
            'name': self.global_frame.name,
            'statistics': stats.to_yaml_dict(),
            'frames': self.global_frame.to_yaml_dict(),
        }

    def __repr__(self):
        return (f"AcceleratorModel(global_frame={self.global_frame.name}, "
                f"elements={self.elements.size()}, lattice={self.lattice.size()})")
