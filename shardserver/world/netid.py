"""Network identifiers for entities and the mapping between the two id spaces."""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Hashable
from dataclasses import dataclass
from typing import Optional

from shardserver.world.entity import Character, Container
from shardserver.world.hierarchy import World

__all__ = [
    "NetEntity",
    "NetOwner",
    "NetEntityAllocator",
    "NetEntityLookup",
    "assign_network_id",
]

_U32_MASK = 0xFFFFFFFF


@dataclass(frozen=True)
class NetEntity:
    """The network id under which an entity is known to clients."""

    id: int


@dataclass(frozen=True)
class NetOwner:
    """Marks an entity as controlled by a connected client."""

    client_entity: Hashable


class NetEntityAllocator:
    """Hands out network ids: characters from 1, items from 0x40000001."""

    FIRST_CHARACTER_ID = 1
    FIRST_ITEM_ID = 0x40000001

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._next_character = self.FIRST_CHARACTER_ID
        self._next_item = self.FIRST_ITEM_ID

    def allocate_character(self) -> int:
        """Return the next unused character id."""
        with self._lock:
            allocated = self._next_character
            self._next_character = (allocated + 1) & _U32_MASK
        return allocated

    def allocate_item(self) -> int:
        """Return the next unused item id."""
        with self._lock:
            allocated = self._next_item
            self._next_item = (allocated + 1) & _U32_MASK
        return allocated


class NetEntityLookup:
    """Two-way map between local entities and their network ids."""

    def __init__(self) -> None:
        self._net_to_ecs: dict[int, Hashable] = {}
        self._ecs_to_net: dict[Hashable, int] = {}

    def __len__(self) -> int:
        return len(self._ecs_to_net)

    def net_to_ecs(self, net_id: int) -> Optional[Hashable]:
        """Return the entity with the given network id, if any."""
        return self._net_to_ecs.get(net_id)

    def ecs_to_net(self, entity: Hashable) -> Optional[int]:
        """Return the network id of the given entity, if any."""
        return self._ecs_to_net.get(entity)

    def insert(self, entity: Hashable, net_id: int) -> None:
        """Record ``net_id`` for ``entity``, dropping any id it had before."""
        old_id = self._ecs_to_net.get(entity)
        if old_id is not None:
            if old_id == net_id:
                return
            self._net_to_ecs.pop(old_id, None)
        self._net_to_ecs[net_id] = entity
        self._ecs_to_net[entity] = net_id

    def remove(self, entity: Hashable) -> None:
        """Forget the entity and its network id."""
        net_id = self._ecs_to_net.pop(entity, None)
        if net_id is not None:
            self._net_to_ecs.pop(net_id, None)


def assign_network_id(world: World, entity: int, allocator: NetEntityAllocator) -> None:
    """Give ``entity`` and everything it holds or wears a fresh network id.

    Entities are visited breadth first; characters draw from the character
    range and everything else from the item range.
    """
    queue: deque[int] = deque([entity])
    while queue:
        current = queue.popleft()

        container = world.get(current, Container)
        if container is not None:
            queue.extend(container.items)

        character = world.get(current, Character)
        if character is not None:
            queue.extend(equipped.entity for equipped in character.equipment)

        if not world.contains(current):
            raise KeyError(f"entity {current} does not exist")

        if character is not None:
            net_id = allocator.allocate_character()
        else:
            net_id = allocator.allocate_item()
        world.insert(current, NetEntity(id=net_id))