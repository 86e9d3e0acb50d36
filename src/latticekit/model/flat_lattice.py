"""
Flat lattice: the ordered sequence of component occurrences used for tracking.

Occurrences are kept in the order they were appended, which for a model
built through the constructor is the physical beamline order. The beamline
index of an occurrence is fixed when it is appended and is never changed by
the lattice afterwards: there is no removal, insertion or reordering. An
occurrence is placed at most once; one that already carries an index is
rejected until the lattice holding it is released.
"""

from typing import Iterator, List, Optional

from .frames import ComponentFrame


class FlatLattice:
    """Append-only sequence of ComponentFrame references."""

    def __init__(self):
        self._occurrences: List[ComponentFrame] = []

    def push_back(self, occurrence: ComponentFrame) -> int:
        """Append an occurrence and stamp it with its beamline index.

        Returns:
            The index assigned to the occurrence.

        Raises:
            TypeError: If occurrence is not a ComponentFrame.
            ValueError: If occurrence already carries a beamline index.
        """
        if not isinstance(occurrence, ComponentFrame):
            raise TypeError("Only ComponentFrame instances can be placed in the flat lattice.")
        if occurrence.get_beamline_index() is not None:
            raise ValueError(
                f"Occurrence '{occurrence.name}' is already placed at beamline index "
                f"{occurrence.get_beamline_index()}."
            )
        self._occurrences.append(occurrence)
        index = len(self._occurrences) - 1
        occurrence.set_beamline_index(index)
        return index

    def release(self):
        """Drop every occurrence and clear its beamline index."""
        for occurrence in self._occurrences:
            occurrence.beamline_index = None
        self._occurrences.clear()

    def size(self) -> int:
        return len(self._occurrences)

    def index_of(self, occurrence: ComponentFrame) -> Optional[int]:
        """First position holding this very occurrence, None if absent."""
        for i, entry in enumerate(self._occurrences):
            if entry is occurrence:
                return i
        return None

    def __getitem__(self, index):
        return self._occurrences[index]

    def __len__(self) -> int:
        return len(self._occurrences)

    def __iter__(self) -> Iterator[ComponentFrame]:
        return iter(list(self._occurrences))

    def __repr__(self):
        return f"FlatLattice(size={len(self._occurrences)})"
