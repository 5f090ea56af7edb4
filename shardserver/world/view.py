"""Turning a client's view state into the updates that client has to receive."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import Optional

from shardserver.world.entity import (
    Direction,
    EquippedBy,
    ParentContainer,
    Stats,
)
from shardserver.world.ghosts import (
    CharacterDirty,
    CharacterGhost,
    ItemDirty,
    ItemGhost,
    ViewState,
    WorldItemPosition,
)
from shardserver.world.netid import NetEntityLookup

__all__ = [
    "DeleteEntity",
    "UpsertCharacter",
    "UpdateCharacter",
    "StatsUpdate",
    "UpsertLocalPlayer",
    "UpsertWorldItem",
    "UpsertContainedItem",
    "UpsertEquippedItem",
    "TooltipVersion",
    "collect_updates",
    "container_contents",
]

Entity = Hashable


@dataclass(frozen=True)
class DeleteEntity:
    """The client should forget an entity."""

    id: int


@dataclass(frozen=True)
class UpsertEquippedItem:
    """An item worn by a character."""

    id: int
    parent_id: int
    slot: int
    graphic_id: int
    hue: int


@dataclass(frozen=True)
class UpsertCharacter:
    """Full description of a character, including what it wears."""

    id: int
    body_type: int
    position: tuple[int, int, int]
    direction: Direction
    hue: int
    flags: int
    notoriety: int
    equipment: tuple[UpsertEquippedItem, ...] = ()


@dataclass(frozen=True)
class UpdateCharacter:
    """Changed appearance or position of a character the client already knows."""

    id: int
    body_type: int
    position: tuple[int, int, int]
    direction: Direction
    hue: int
    flags: int
    notoriety: int


@dataclass(frozen=True)
class StatsUpdate:
    """A character's statistics; full detail is given only to its owner."""

    id: int
    stats: Stats = field(default_factory=Stats)
    owned: bool = False

    @property
    def max_info_level(self) -> int:
        return 8 if self.owned else 0

    @property
    def allow_name_change(self) -> bool:
        return self.owned


@dataclass(frozen=True)
class UpsertLocalPlayer:
    """Describes the character the client itself controls."""

    id: int
    body_type: int
    hue: int
    flags: int
    position: tuple[int, int, int]
    direction: Direction
    server_id: int = 0


@dataclass(frozen=True)
class UpsertWorldItem:
    """An item lying in the world."""

    id: int
    graphic_id: int
    direction: Direction
    quantity: int
    position: tuple[int, int, int]
    hue: int
    flags: int
    graphic_inc: int = 0


@dataclass(frozen=True)
class UpsertContainedItem:
    """An item inside a container."""

    id: int
    graphic_id: int
    quantity: int
    position: tuple[int, int]
    grid_index: int
    parent_id: int
    hue: int
    graphic_inc: int = 0


@dataclass(frozen=True)
class TooltipVersion:
    """Announces a new revision of an item's tooltip."""

    id: int
    revision: int


def _equipment(
    view_state: ViewState, entity: Entity, parent_id: int, lookup: NetEntityLookup
) -> tuple[UpsertEquippedItem, ...]:
    equipment = []
    for child in view_state.children_of(entity):
        item = view_state.ghost(child)
        if not isinstance(item, ItemGhost) or not isinstance(item.position, EquippedBy):
            continue
        child_id = lookup.ecs_to_net(child)
        if child_id is None:
            continue
        equipment.append(
            UpsertEquippedItem(
                id=child_id,
                parent_id=parent_id,
                slot=item.position.slot,
                graphic_id=item.graphic.id,
                hue=item.graphic.hue,
            )
        )
    return tuple(equipment)


def _character_updates(
    view_state: ViewState,
    entity: Entity,
    net_id: int,
    character: CharacterGhost,
    lookup: NetEntityLookup,
) -> list[object]:
    dirty, character.dirty_flags = character.dirty_flags, CharacterDirty.NONE
    location = character.location
    owned = entity == view_state.possessed
    updates: list[object] = []

    if dirty & CharacterDirty.UPSERT:
        updates.append(
            UpsertCharacter(
                id=net_id,
                body_type=character.body_type,
                position=location.position,
                direction=location.direction,
                hue=character.hue,
                flags=character.flags,
                notoriety=character.notoriety,
                equipment=_equipment(view_state, entity, net_id, lookup),
            )
        )
    elif dirty & CharacterDirty.UPDATE:
        updates.append(
            UpdateCharacter(
                id=net_id,
                body_type=character.body_type,
                position=location.position,
                direction=location.direction,
                hue=character.hue,
                flags=character.flags,
                notoriety=character.notoriety,
            )
        )

    if dirty & CharacterDirty.STATS:
        updates.append(StatsUpdate(id=net_id, stats=character.stats, owned=owned))

    if owned and dirty & CharacterDirty.UPSERT:
        updates.append(
            UpsertLocalPlayer(
                id=net_id,
                body_type=character.body_type,
                hue=character.hue,
                flags=character.flags,
                position=location.position,
                direction=location.direction,
            )
        )
    return updates


def _contained(item: ItemGhost, net_id: int, parent_id: int) -> UpsertContainedItem:
    position = item.position
    assert isinstance(position, ParentContainer)
    return UpsertContainedItem(
        id=net_id,
        graphic_id=item.graphic.id,
        quantity=item.quantity,
        position=position.position,
        grid_index=position.grid_index,
        parent_id=parent_id,
        hue=item.graphic.hue,
    )


def _item_updates(net_id: int, item: ItemGhost, lookup: NetEntityLookup) -> list[object]:
    dirty, item.dirty_flags = item.dirty_flags, ItemDirty.NONE
    position = item.position
    updates: list[object] = []

    if isinstance(position, WorldItemPosition):
        if dirty:
            updates.append(
                UpsertWorldItem(
                    id=net_id,
                    graphic_id=item.graphic.id,
                    direction=position.location.direction,
                    quantity=item.quantity,
                    position=position.location.position,
                    hue=item.graphic.hue,
                    flags=position.flags,
                )
            )
    elif isinstance(position, ParentContainer):
        # Contained items are re-sent whenever the view is flushed.
        parent_id = lookup.ecs_to_net(position.parent)
        if parent_id is not None:
            updates.append(_contained(item, net_id, parent_id))
    elif dirty:
        parent_id = lookup.ecs_to_net(position.parent)
        if parent_id is not None:
            updates.append(
                UpsertEquippedItem(
                    id=net_id,
                    parent_id=parent_id,
                    slot=position.slot,
                    graphic_id=item.graphic.id,
                    hue=item.graphic.hue,
                )
            )

    if dirty & ItemDirty.TOOLTIP and item.tooltip_version > 0:
        updates.append(TooltipVersion(id=net_id, revision=item.tooltip_version))
    return updates


def collect_updates(view_state: ViewState, lookup: NetEntityLookup) -> list[object]:
    """Return the packets that bring the client up to date with its view.

    Nothing is returned unless the view is dirty. Removals come first, then
    every ghost in parent-before-child order; pending flags are cleared.
    Entities without a network id are skipped.
    """
    if not view_state.dirty:
        return []
    view_state.dirty = False

    updates: list[object] = []
    for entity, _ in view_state.take_removals():
        net_id = lookup.ecs_to_net(entity)
        if net_id is not None:
            updates.append(DeleteEntity(id=net_id))

    for entity, state in view_state.iter_ghosts():
        net_id = lookup.ecs_to_net(entity)
        if net_id is None:
            continue
        if isinstance(state, CharacterGhost):
            updates.extend(_character_updates(view_state, entity, net_id, state, lookup))
        else:
            updates.extend(_item_updates(net_id, state, lookup))
    return updates


def container_contents(
    view_state: ViewState, container: Entity, lookup: NetEntityLookup
) -> Optional[tuple[int, list[UpsertContainedItem]]]:
    """Return the gump id and visible contents of an opened container.

    Returns None when the container has no network id, is not a known item
    or is not a container.
    """
    container_id = lookup.ecs_to_net(container)
    if container_id is None:
        return None
    state = view_state.ghost(container)
    if not isinstance(state, ItemGhost) or state.container_gump is None:
        return None

    contents = []
    for child in view_state.children_of(container):
        item = view_state.ghost(child)
        if not isinstance(item, ItemGhost) or not isinstance(item.position, ParentContainer):
            continue
        child_id = lookup.ecs_to_net(child)
        if child_id is None:
            continue
        contents.append(_contained(item, child_id, container_id))
    return state.container_gump, contents