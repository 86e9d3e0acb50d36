"""
Element repository of an accelerator model.

The repository is the append-only owner of every distinct entity created
while a model is built: frames, component occurrences and components. Each
entity occupies one slot, addressed by a stable integer handle, and is
registered at most once. Deduplication is by object identity, never by
structural equality.
"""

from typing import Dict, Iterator, List, Optional

from ..models.entity import ModelEntity

EntityHandle = int


class ElementRepository:
    """
    Append-only store of model entities.

    Example:
        >>> repo = ElementRepository()
        >>> q = Quadrupole(name="Q1", length=0.5)
        >>> repo.add(q) == repo.add(q)
        True
        >>> repo.size()
        1
    """

    def __init__(self):
        self._entities: List[ModelEntity] = []
        self._handles: Dict[int, EntityHandle] = {}

    def add(self, entity: ModelEntity) -> EntityHandle:
        """Register an entity and return its handle.

        Registering an entity that is already present returns its existing
        handle and changes nothing.

        Raises:
            TypeError: If entity is not a ModelEntity.
        """
        if not isinstance(entity, ModelEntity):
            raise TypeError(f"Only ModelEntity instances can be registered, got {type(entity).__name__}.")
        handle = self._handles.get(id(entity))
        if handle is not None:
            return handle
        handle = len(self._entities)
        self._entities.append(entity)
        self._handles[id(entity)] = handle
        return handle

    def contains(self, entity: ModelEntity) -> bool:
        return id(entity) in self._handles

    def handle_of(self, entity: ModelEntity) -> Optional[EntityHandle]:
        """Get the handle of a registered entity, None if it is not registered."""
        return self._handles.get(id(entity))

    def get(self, handle: EntityHandle) -> ModelEntity:
        """Get an entity by handle.

        Raises:
            IndexError: If no entity occupies the handle.
        """
        if not 0 <= handle < len(self._entities):
            raise IndexError(f"No entity registered under handle {handle}.")
        return self._entities[handle]

    def size(self) -> int:
        return len(self._entities)

    def count_by_type(self) -> Dict[str, int]:
        """Count registered entities per type tag, sorted by type tag."""
        stats: Dict[str, int] = {}
        for entity in self._entities:
            entity_type = entity.get_type()
            stats[entity_type] = stats.get(entity_type, 0) + 1
        return dict(sorted(stats.items()))

    def get_entities_by_type(self, entity_type: str) -> List[ModelEntity]:
        """Get registered entities with the given type tag in registration order."""
        return [entity for entity in self._entities if entity.get_type() == entity_type]

    def release(self):
        """Drop every entity owned by the repository."""
        self._entities.clear()
        self._handles.clear()

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[ModelEntity]:
        return iter(list(self._entities))

    def __contains__(self, entity) -> bool:
        return self.contains(entity)

    def __repr__(self):
        return f"ElementRepository(size={len(self._entities)})"
