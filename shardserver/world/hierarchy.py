"""A small entity store and recursive removal of entities with their contents."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional, TypeVar

from shardserver.world.entity import Character, Container

__all__ = ["World", "despawn_recursive"]

C = TypeVar("C")


class World:
    """Entities identified by integers, each holding at most one component per type."""

    def __init__(self) -> None:
        self._next_entity = 0
        self._entities: dict[int, dict[type, object]] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[int]:
        return iter(list(self._entities))

    def spawn(self, *args: object) -> int:
        """Create an entity holding the given components and return its id."""
        entity = self._next_entity
        self._next_entity += 1
        self._entities[entity] = {}
        self.insert(entity, *args)
        return entity

    def insert(self, entity: int, *args: object) -> None:
        """Add components to an entity, replacing any of the same type."""
        try:
            components = self._entities[entity]
        except KeyError:
            raise KeyError(f"entity {entity} does not exist") from None
        for component in args:
            components[type(component)] = component

    def get(self, entity: int, component_type: type[C]) -> Optional[C]:
        """Return the entity's component of the given type, or None."""
        components = self._entities.get(entity)
        if components is None:
            return None
        return components.get(component_type)  # type: ignore[return-value]

    def has(self, entity: int, component_type: type) -> bool:
        """True when the entity exists and has a component of the given type."""
        components = self._entities.get(entity)
        return components is not None and component_type in components

    def contains(self, entity: int) -> bool:
        """True when the entity exists."""
        return entity in self._entities

    def despawn(self, entity: int) -> bool:
        """Remove the entity; return whether it existed."""
        return self._entities.pop(entity, None) is not None


def despawn_recursive(world: World, entity: int) -> None:
    """Remove an entity along with everything it contains or has equipped."""
    container = world.get(entity, Container)
    if container is not None:
        items, container.items = container.items, []
        for child in items:
            despawn_recursive(world, child)

    character = world.get(entity, Character)
    if character is not None:
        equipment, character.equipment = character.equipment, []
        for equipped in equipment:
            despawn_recursive(world, equipped.entity)

    world.despawn(entity)