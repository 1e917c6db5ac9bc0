"""
Entity Registry
================
Integer entity handles with one insertion-ordered component table per
component type.

Queries yield entities in creation order, so "first match" scans are
deterministic (the oldest pursuer wins).
"""

from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Type, TypeVar


C = TypeVar('C')


class World:
    """
    Owns every live entity and its components.

    Destruction is deferred: destroy_entity() marks an entity, and
    process_dead_entities() removes it together with its components.
    Marked entities are already invisible to queries.
    """

    def __init__(self):
        self._next_entity_id: int = 0
        self._entities: Dict[int, None] = {}
        self._components: Dict[Type, Dict[int, Any]] = {}
        self._dead_entities: Set[int] = set()

    def create_entity(self, *components: Any) -> int:
        """Create a new entity, attach the given components, return its handle."""
        entity_id = self._next_entity_id
        self._next_entity_id += 1
        self._entities[entity_id] = None
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        """Mark an entity for removal at the next process_dead_entities()."""
        if entity_id in self._entities:
            self._dead_entities.add(entity_id)

    def process_dead_entities(self) -> List[int]:
        """Remove marked entities. Returns the removed handles."""
        removed = []
        for entity_id in sorted(self._dead_entities):
            del self._entities[entity_id]
            for store in self._components.values():
                store.pop(entity_id, None)
            removed.append(entity_id)
        self._dead_entities.clear()
        return removed

    def add_component(self, entity_id: int, component: Any) -> None:
        self._components.setdefault(type(component), {})[entity_id] = component

    def remove_component(self, entity_id: int, component_type: Type[C]) -> None:
        store = self._components.get(component_type)
        if store is not None:
            store.pop(entity_id, None)

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        store = self._components.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def has_component(self, entity_id: int, component_type: Type) -> bool:
        store = self._components.get(component_type)
        return store is not None and entity_id in store

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Iterate entities that have ALL of the given component types.

        Yields (entity_id, component1, component2, ...) in creation order.
        """
        if not component_types:
            return

        stores = []
        for component_type in component_types:
            store = self._components.get(component_type)
            if not store:
                return
            stores.append(store)

        # Snapshot the keys so systems may add/remove components mid-iteration
        for entity_id in list(stores[0]):
            if entity_id in self._dead_entities:
                continue
            if not all(entity_id in store for store in stores[1:]):
                continue
            yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def get_entities_with(self, *component_types: Type) -> List[int]:
        """All live entity IDs that have every given component."""
        return [result[0] for result in self.query(*component_types)]

    def first(self, *component_types: Type) -> Optional[Tuple[Any, ...]]:
        """First query match, or None."""
        for result in self.query(*component_types):
            return result
        return None

    def entity_count(self) -> int:
        """Number of live entities (marked entities excluded)."""
        return len(self._entities) - len(self._dead_entities)

    def is_alive(self, entity_id: int) -> bool:
        return entity_id in self._entities and entity_id not in self._dead_entities
