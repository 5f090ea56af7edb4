"""Per-client record of what each client has been shown of the world."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Optional, Union

from shardserver.world.entity import (
    EquippedBy,
    Graphic,
    Location,
    ParentContainer,
    Stats,
    Tooltip,
)

__all__ = [
    "CharacterDirty",
    "ItemDirty",
    "CharacterGhost",
    "WorldItemPosition",
    "ItemGhost",
    "ViewState",
]

Entity = Hashable

NO_MAP = 0xFF


class CharacterDirty(IntFlag):
    """What about a character still has to be sent to the client."""

    NONE = 0
    UPSERT = 1 << 0
    UPDATE = 1 << 1
    STATS = 1 << 2


class ItemDirty(IntFlag):
    """What about an item still has to be sent to the client."""

    NONE = 0
    UPSERT = 1 << 0
    TOOLTIP = 1 << 1


@dataclass
class CharacterGhost:
    """The last known state of a character as seen by a client."""

    location: Location
    body_type: int = 0
    hue: int = 0
    notoriety: int = 0
    stats: Stats = field(default_factory=Stats)
    flags: int = 0
    dirty_flags: CharacterDirty = CharacterDirty.NONE

    def parent(self) -> Optional[Entity]:
        """Characters never have a parent."""
        return None

    def is_dirty(self) -> bool:
        return self.dirty_flags != CharacterDirty.NONE


@dataclass(frozen=True)
class WorldItemPosition:
    """An item lying loose in the world."""

    location: Location
    flags: int = 0


ItemPosition = Union[WorldItemPosition, EquippedBy, ParentContainer]


@dataclass
class ItemGhost:
    """The last known state of an item as seen by a client."""

    graphic: Graphic
    position: ItemPosition
    quantity: int = 1
    container_gump: Optional[int] = None
    tooltip: Tooltip = field(default_factory=Tooltip)
    tooltip_version: int = 0
    dirty_flags: ItemDirty = ItemDirty.NONE

    def parent(self) -> Optional[Entity]:
        """The character wearing or container holding the item, if any."""
        if isinstance(self.position, WorldItemPosition):
            return None
        return self.position.parent

    def is_dirty(self) -> bool:
        return self.dirty_flags != ItemDirty.NONE


Ghost = Union[CharacterGhost, ItemGhost]


def _copy_tooltip(tooltip: Tooltip) -> Tooltip:
    return Tooltip(entries=dict(tooltip.entries))


class ViewState:
    """Ghosts of the entities a client can see, and what is pending for each."""

    def __init__(self) -> None:
        self.ghosts: dict[Entity, Ghost] = {}
        self._children: dict[Entity, set[Entity]] = {}
        self._to_remove: set[Entity] = set()
        self.map_id: int = NO_MAP
        self.possessed: Optional[Entity] = None
        self.dirty: bool = False

    def __len__(self) -> int:
        return len(self.ghosts)

    def __contains__(self, entity: object) -> bool:
        return entity in self.ghosts

    def flush(self) -> None:
        """Forget every ghost, as after a map change."""
        self.ghosts.clear()
        self._children.clear()
        self._to_remove.clear()
        self.dirty = False

    def mark_unseen(self) -> None:
        """Schedule every ghost for removal unless it is observed again."""
        self._to_remove.update(self.ghosts)

    def ghost(self, entity: Entity) -> Optional[Ghost]:
        """Return the ghost for ``entity``, if the client knows it."""
        return self.ghosts.get(entity)

    def children_of(self, parent: Entity) -> frozenset[Entity]:
        """Entities whose ghosts are worn by or contained in ``parent``."""
        return frozenset(self._children.get(parent, ()))

    def _add_child(self, parent: Entity, child: Entity) -> None:
        self._children.setdefault(parent, set()).add(child)

    def _remove_child(self, parent: Entity, child: Entity) -> None:
        kids = self._children.get(parent)
        if kids is None:
            return
        kids.discard(child)
        if not kids:
            del self._children[parent]

    def upsert_ghost(self, entity: Entity, state: Ghost) -> None:
        """Record a fresh observation of ``entity`` and work out what changed."""
        previous = self.ghosts.pop(entity, None)
        previous_parent = previous.parent() if previous is not None else None
        self._to_remove.discard(entity)

        if isinstance(state, CharacterGhost):
            if isinstance(previous, CharacterGhost):
                if (
                    previous.body_type != state.body_type
                    or previous.hue != state.hue
                    or previous.flags != state.flags
                    or previous.notoriety != state.notoriety
                    or previous.location != state.location
                ):
                    state.dirty_flags |= CharacterDirty.UPDATE
                if previous.stats != state.stats:
                    state.dirty_flags |= CharacterDirty.STATS
            else:
                state.dirty_flags = CharacterDirty.UPSERT | CharacterDirty.STATS
        else:
            if isinstance(previous, ItemGhost):
                # The tooltip is maintained separately by set_tooltip.
                state.tooltip = previous.tooltip
                state.tooltip_version = previous.tooltip_version
                state.dirty_flags = previous.dirty_flags
                if (
                    state.quantity != previous.quantity
                    or state.graphic != previous.graphic
                    or state.position != previous.position
                ):
                    state.dirty_flags = ItemDirty.UPSERT
            else:
                state.dirty_flags = ItemDirty.UPSERT | ItemDirty.TOOLTIP

        if state.is_dirty():
            self.dirty = True

        parent = state.parent()
        if previous_parent != parent:
            if previous_parent is not None:
                self._remove_child(previous_parent, entity)
            if parent is not None:
                self._add_child(parent, entity)

        self.ghosts[entity] = state

    def set_tooltip(self, entity: Entity, tooltip: Tooltip) -> bool:
        """Replace an item ghost's tooltip and bump its version.

        Returns False when ``entity`` is not a known item.
        """
        item = self.ghosts.get(entity)
        if not isinstance(item, ItemGhost):
            return False
        item.tooltip = tooltip
        item.tooltip_version += 1
        item.dirty_flags |= ItemDirty.TOOLTIP
        self.dirty = True
        return True

    def update_tooltip(self, entity: Entity, tooltip: Tooltip) -> bool:
        """Set the tooltip only if it differs; return whether it was set."""
        item = self.ghosts.get(entity)
        if not isinstance(item, ItemGhost) or item.tooltip == tooltip:
            return False
        return self.set_tooltip(entity, _copy_tooltip(tooltip))

    def take_removals(self) -> list[tuple[Entity, Ghost]]:
        """Drop every ghost still marked unseen and return them."""
        pending, self._to_remove = self._to_remove, set()
        removed: list[tuple[Entity, Ghost]] = []
        for entity in pending:
            state = self.ghosts.pop(entity, None)
            if state is None:
                continue
            parent = state.parent()
            if parent is not None:
                self._remove_child(parent, entity)
            removed.append((entity, state))
        return removed

    def iter_ghosts(self) -> Iterator[tuple[Entity, Ghost]]:
        """Yield ghosts depth first, each parent before its children."""
        stack = [entity for entity, ghost in self.ghosts.items() if ghost.parent() is None]
        while stack:
            entity = stack.pop()
            state = self.ghosts.get(entity)
            if state is None:
                continue
            yield entity, state
            stack.extend(self._children.get(entity, ()))