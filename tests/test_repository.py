"""
Test suite for the element repository and the flat lattice.
"""

import pytest

from latticekit.components import Drift, Quadrupole
from latticekit.model import (
    ElementRepository, FlatLattice, LatticeFrame, ComponentFrame, ElementExtractor,
)


class TestElementRepository:
    """Test identity-based registration of model entities."""

    def test_add_returns_stable_handles(self):
        repo = ElementRepository()
        d1 = Drift(name="D1", length=1.0)
        q1 = Quadrupole(name="Q1", length=0.5)
        assert repo.add(d1) == 0
        assert repo.add(q1) == 1
        assert repo.get(0) is d1
        assert repo.get(1) is q1
        assert repo.size() == 2

    def test_add_is_idempotent(self):
        repo = ElementRepository()
        q1 = Quadrupole(name="Q1", length=0.5)
        handle = repo.add(q1)
        assert repo.add(q1) == handle
        assert repo.size() == 1

    def test_dedup_by_identity_not_equality(self):
        """Two structurally equal components are two entities."""
        repo = ElementRepository()
        a = Drift(name="D1", length=1.0)
        b = Drift(name="D1", length=1.0)
        assert a == b
        repo.add(a)
        repo.add(b)
        assert repo.size() == 2
        assert repo.handle_of(a) == 0
        assert repo.handle_of(b) == 1

    def test_contains(self):
        repo = ElementRepository()
        a = Drift(name="D1", length=1.0)
        b = Drift(name="D1", length=1.0)
        repo.add(a)
        assert repo.contains(a)
        assert a in repo
        assert b not in repo
        assert repo.handle_of(b) is None

    def test_rejects_non_entities(self):
        repo = ElementRepository()
        with pytest.raises(TypeError):
            repo.add("D1")

    def test_get_invalid_handle(self):
        repo = ElementRepository()
        with pytest.raises(IndexError):
            repo.get(0)
        repo.add(Drift(name="D1", length=1.0))
        with pytest.raises(IndexError):
            repo.get(-1)

    def test_count_by_type(self):
        repo = ElementRepository()
        repo.add(LatticeFrame(name="CELL"))
        repo.add(Drift(name="D1", length=1.0))
        repo.add(Drift(name="D2", length=1.0))
        repo.add(Quadrupole(name="Q1", length=0.5))
        repo.add(ComponentFrame(name="SLOT"))
        counts = repo.count_by_type()
        assert counts == {"ComponentFrame": 1, "Drift": 2, "Quadrupole": 1, "SequenceFrame": 1}
        assert list(counts) == sorted(counts)

    def test_get_entities_by_type(self):
        repo = ElementRepository()
        d1 = Drift(name="D1", length=1.0)
        d2 = Drift(name="D2", length=2.0)
        repo.add(d1)
        repo.add(Quadrupole(name="Q1", length=0.5))
        repo.add(d2)
        drifts = repo.get_entities_by_type("Drift")
        assert len(drifts) == 2
        assert drifts[0] is d1
        assert drifts[1] is d2

    def test_release(self):
        repo = ElementRepository()
        d1 = Drift(name="D1", length=1.0)
        repo.add(d1)
        repo.release()
        assert len(repo) == 0
        assert d1 not in repo
        assert repo.add(d1) == 0

    def test_iteration_in_registration_order(self):
        repo = ElementRepository()
        entities = [Drift(name=f"D{i}", length=1.0) for i in range(3)]
        for entity in entities:
            repo.add(entity)
        assert all(a is b for a, b in zip(repo, entities))


class TestFlatLattice:
    """Test the ordered sequence of component occurrences."""

    def test_push_back_assigns_indices(self):
        lattice = FlatLattice()
        occurrences = [ComponentFrame(component=Drift(name=f"D{i}", length=1.0)) for i in range(3)]
        for expected, occurrence in enumerate(occurrences):
            assert lattice.push_back(occurrence) == expected
            assert occurrence.get_beamline_index() == expected
        assert lattice.size() == 3
        assert len(lattice) == 3

    def test_entries_keep_identity(self):
        lattice = FlatLattice()
        occurrence = ComponentFrame(component=Quadrupole(name="QF", length=0.5))
        lattice.push_back(occurrence)
        assert lattice[0] is occurrence
        assert lattice.index_of(occurrence) == 0

    def test_index_of_uses_identity(self):
        lattice = FlatLattice()
        lattice.push_back(ComponentFrame(component=Drift(name="D1", length=1.0)))
        twin = ComponentFrame(component=Drift(name="D1", length=1.0))
        assert lattice.index_of(twin) is None

    def test_rejects_structural_frames(self):
        lattice = FlatLattice()
        with pytest.raises(TypeError):
            lattice.push_back(LatticeFrame(name="CELL"))
        assert lattice.size() == 0

    def test_placeholder_occurrence(self):
        lattice = FlatLattice()
        assert lattice.push_back(ComponentFrame(name="SLOT")) == 0

    def test_occurrence_placed_once(self):
        lattice = FlatLattice()
        occurrence = ComponentFrame(component=Drift(name="D1", length=1.0))
        lattice.push_back(occurrence)
        with pytest.raises(ValueError, match="already placed"):
            lattice.push_back(occurrence)
        assert lattice.size() == 1
        assert occurrence.get_beamline_index() == 0

        other = FlatLattice()
        with pytest.raises(ValueError):
            other.push_back(occurrence)
        assert other.size() == 0

    def test_release(self):
        lattice = FlatLattice()
        occurrences = [ComponentFrame(component=Drift(name=f"D{i}", length=1.0)) for i in range(2)]
        for occurrence in occurrences:
            lattice.push_back(occurrence)
        lattice.release()
        assert lattice.size() == 0
        assert all(occurrence.get_beamline_index() is None for occurrence in occurrences)

        other = FlatLattice()
        assert other.push_back(occurrences[1]) == 0


class TestElementExtractor:
    """Test extraction of a pre-built sub-tree."""

    def test_extracts_in_document_order(self):
        repo = ElementRepository()
        lattice = FlatLattice()
        quad = Quadrupole(name="QF", length=0.5)

        cell = LatticeFrame(name="CELL")
        inner = LatticeFrame(name="INNER")
        inner.append_frame(ComponentFrame(component=quad))
        cell.append_frame(ComponentFrame(component=Drift(name="D1", length=1.0)))
        cell.append_frame(inner)
        cell.append_frame(ComponentFrame(component=quad))

        extractor = ElementExtractor(repo, lattice)
        cell.traverse(extractor)

        assert extractor.frames_visited == 5
        assert extractor.occurrences_extracted == 3
        assert [occ.name for occ in lattice] == ["D1", "QF", "QF"]
        assert [occ.get_beamline_index() for occ in lattice] == [0, 1, 2]
        # 2 frames, 3 occurrences, drift and the shared quadrupole
        assert repo.size() == 7
        assert repo.count_by_type()["Quadrupole"] == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
