"""
Entity Store
=============
Minimal ECS: integer entity ids, one component dict per component type.
"""

from typing import Dict, Set, Type, TypeVar, Optional, Iterator, Tuple, Any


C = TypeVar('C')


class World:
    """
    Holds every entity of a game session.

    Destruction is deferred: destroyed ids are skipped by queries right
    away and purged by process_dead_entities() at the end of a tick.
    """

    def __init__(self):
        self._next_id: int = 0
        self._entities: Set[int] = set()
        self._stores: Dict[Type, Dict[int, Any]] = {}
        self._pending_removal: Set[int] = set()

    def create_entity(self, *components: Any) -> int:
        """Create an entity, optionally attaching components, and return its id."""
        entity_id = self._next_id
        self._next_id += 1
        self._entities.add(entity_id)
        for component in components:
            self.add_component(entity_id, component)
        return entity_id

    def destroy_entity(self, entity_id: int) -> None:
        self._pending_removal.add(entity_id)

    def destroy_all(self, component_type: Type) -> int:
        """Mark every entity carrying component_type for removal."""
        doomed = list(self._stores.get(component_type, {}))
        for entity_id in doomed:
            self.destroy_entity(entity_id)
        return len(doomed)

    def process_dead_entities(self) -> None:
        """Drop all entities marked for removal together with their components."""
        for entity_id in self._pending_removal:
            self._entities.discard(entity_id)
            for store in self._stores.values():
                store.pop(entity_id, None)
        self._pending_removal.clear()

    def add_component(self, entity_id: int, component: Any) -> None:
        self._stores.setdefault(type(component), {})[entity_id] = component

    def get_component(self, entity_id: int, component_type: Type[C]) -> Optional[C]:
        """Get a component for an entity, or None if not found."""
        store = self._stores.get(component_type)
        if store is None:
            return None
        return store.get(entity_id)

    def query(self, *component_types: Type) -> Iterator[Tuple[Any, ...]]:
        """
        Iterate entities that have ALL of component_types.

        Yields (entity_id, component1, component2, ...) in creation order,
        skipping entities already marked for removal.
        """
        if not component_types:
            return
        stores = [self._stores.get(ct) for ct in component_types]
        if any(store is None for store in stores):
            return

        smallest = min(stores, key=len)
        for entity_id in sorted(smallest):
            if entity_id in self._pending_removal:
                continue
            if all(entity_id in store for store in stores):
                yield (entity_id,) + tuple(store[entity_id] for store in stores)

    def query_one(self, *component_types: Type) -> Optional[Tuple[Any, ...]]:
        """First match of query(), or None."""
        for row in self.query(*component_types):
            return row
        return None

    def count(self, *component_types: Type) -> int:
        return sum(1 for _ in self.query(*component_types))

    def entity_count(self) -> int:
        """Return the number of live entities."""
        return len(self._entities - self._pending_removal)

    def is_alive(self, entity_id: int) -> bool:
        return entity_id in self._entities and entity_id not in self._pending_removal
