"""Components that describe characters, items and their relationships."""

from __future__ import annotations

from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional

from shardserver.math import manhattan_distance as _manhattan_distance

__all__ = [
    "MapEntitiesError",
    "Direction",
    "Location",
    "Graphic",
    "Quantity",
    "Multi",
    "CharacterEquipped",
    "Character",
    "EquippedBy",
    "Container",
    "ParentContainer",
    "Stats",
    "TooltipLine",
    "Tooltip",
    "AttackTarget",
]

Entity = Hashable

LOCALISED_TEXT_ID = 1042971


class MapEntitiesError(LookupError):
    """Raised when an entity reference has no counterpart in an entity map."""

    def __init__(self, entity: Entity) -> None:
        super().__init__(f"entity {entity!r} has no mapping")
        self.entity = entity


def _map(entity_map: Mapping[Entity, Entity], entity: Entity) -> Entity:
    try:
        return entity_map[entity]
    except KeyError:
        raise MapEntitiesError(entity) from None


class Direction(IntEnum):
    """The eight compass directions a character can face or step in."""

    NORTH = 0
    NORTH_EAST = 1
    EAST = 2
    SOUTH_EAST = 3
    SOUTH = 4
    SOUTH_WEST = 5
    WEST = 6
    NORTH_WEST = 7

    def as_vec2(self) -> tuple[int, int]:
        """Return the single grid step taken when moving in this direction."""
        return _DIRECTION_VECTORS[self]


_DIRECTION_VECTORS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.NORTH_EAST: (1, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH_EAST: (1, 1),
    Direction.SOUTH: (0, 1),
    Direction.SOUTH_WEST: (-1, 1),
    Direction.WEST: (-1, 0),
    Direction.NORTH_WEST: (-1, -1),
}


@dataclass(frozen=True)
class Location:
    """A position on a particular map, with a facing direction."""

    position: tuple[int, int, int] = (0, 0, 0)
    map_id: int = 0
    direction: Direction = Direction.NORTH

    def __post_init__(self) -> None:
        position = tuple(self.position)
        if len(position) != 3:
            raise ValueError(f"location position must have 3 components, got {position!r}")
        object.__setattr__(self, "position", position)

    def manhattan_distance(self, other: Location) -> Optional[int]:
        """Ground-plane Manhattan distance, or None when on different maps."""
        if self.map_id != other.map_id:
            return None
        return _manhattan_distance(self.position[:2], other.position[:2])

    def in_range(self, other: Location, range_: int) -> bool:
        """True when ``other`` is on the same map and within ``range_``."""
        distance = self.manhattan_distance(other)
        return distance is not None and distance <= range_


@dataclass(frozen=True)
class Graphic:
    """Artwork id and colour hue of an item."""

    id: int = 0
    hue: int = 0


@dataclass
class Quantity:
    """Stack size of an item."""

    quantity: int = 1


@dataclass
class Multi:
    """Marks an entity as a multi-tile structure."""

    id: int = 0


@dataclass
class CharacterEquipped:
    """An item worn by a character in a given slot."""

    entity: Entity
    slot: int = 0


@dataclass
class Character:
    """A mobile's body, hue and worn equipment."""

    body_type: int = 0
    hue: int = 0
    equipment: list[CharacterEquipped] = field(default_factory=list)

    def map_entities(self, entity_map: Mapping[Entity, Entity]) -> None:
        """Rewrite equipment references through ``entity_map``."""
        for equipped in self.equipment:
            equipped.entity = _map(entity_map, equipped.entity)


@dataclass
class EquippedBy:
    """Back-reference from an equipped item to the character wearing it."""

    parent: Entity
    slot: int = 0

    def map_entities(self, entity_map: Mapping[Entity, Entity]) -> None:
        """Rewrite the parent reference through ``entity_map``."""
        self.parent = _map(entity_map, self.parent)


@dataclass
class Container:
    """An item that holds other items."""

    gump_id: int = 0
    items: list[Entity] = field(default_factory=list)

    def map_entities(self, entity_map: Mapping[Entity, Entity]) -> None:
        """Rewrite item references through ``entity_map``."""
        self.items = [_map(entity_map, item) for item in self.items]


@dataclass
class ParentContainer:
    """Back-reference from a contained item to its container."""

    parent: Entity
    position: tuple[int, int] = (0, 0)
    grid_index: int = 0

    def __post_init__(self) -> None:
        self.position = tuple(self.position)

    def map_entities(self, entity_map: Mapping[Entity, Entity]) -> None:
        """Rewrite the parent reference through ``entity_map``."""
        self.parent = _map(entity_map, self.parent)


@dataclass
class Stats:
    """Character statistics as shown on the status bar."""

    name: str = ""
    female: bool = False
    race: int = 0
    hp: int = 0
    max_hp: int = 0
    str: int = 0
    dex: int = 0
    int: int = 0
    stamina: int = 0
    max_stamina: int = 0
    mana: int = 0
    max_mana: int = 0
    gold: int = 0
    armor: int = 0
    weight: int = 0
    max_weight: int = 0
    stats_cap: int = 0
    pet_count: int = 0
    max_pets: int = 0
    fire_resist: int = 0
    cold_resist: int = 0
    poison_resist: int = 0
    energy_resist: int = 0
    luck: int = 0
    damage_min: int = 0
    damage_max: int = 0
    tithing: int = 0
    hit_chance_bonus: int = 0
    swing_speed_bonus: int = 0
    damage_chance_bonus: int = 0
    reagent_cost_bonus: int = 0
    hp_regen: int = 0
    stamina_regen: int = 0
    mana_regen: int = 0
    damage_reflect: int = 0
    potion_bonus: int = 0
    defence_chance_bonus: int = 0
    spell_damage_bonus: int = 0
    cooldown_bonus: int = 0
    cast_time_bonus: int = 0
    mana_cost_bonus: int = 0
    str_bonus: int = 0
    dex_bonus: int = 0
    int_bonus: int = 0
    hp_bonus: int = 0
    stamina_bonus: int = 0
    mana_bonus: int = 0
    max_hp_bonus: int = 0
    max_stamina_bonus: int = 0
    max_mana_bonus: int = 0


@dataclass(frozen=True, eq=True)
class TooltipLine:
    """One line of an item tooltip; lines sort by their text id."""

    text_id: int
    arguments: str = ""
    priority: int = 0

    @classmethod
    def from_static(cls, text_id: int, priority: int) -> TooltipLine:
        """A line showing a localised string with no arguments."""
        return cls(text_id=text_id, arguments="", priority=priority)

    @classmethod
    def from_text(cls, text: str, priority: int) -> TooltipLine:
        """A line showing arbitrary text."""
        return cls(text_id=LOCALISED_TEXT_ID, arguments=text, priority=priority)

    def __lt__(self, other: TooltipLine) -> bool:
        if not isinstance(other, TooltipLine):
            return NotImplemented
        return self.text_id < other.text_id


@dataclass
class Tooltip:
    """Named tooltip lines attached to an item."""

    entries: dict[str, TooltipLine] = field(default_factory=dict)

    def contains(self, key: str, line: TooltipLine) -> bool:
        """True when ``key`` is present and holds exactly ``line``."""
        return self.entries.get(key) == line

    def push(self, key: str, line: TooltipLine) -> None:
        """Set the line stored under ``key``."""
        self.entries[key] = line

    def push_if_changed(self, key: str, line: TooltipLine) -> bool:
        """Store ``line`` unless it is already present; return whether it changed."""
        if self.contains(key, line):
            return False
        self.push(key, line)
        return True


@dataclass
class AttackTarget:
    """The entity a character is currently attacking."""

    target: Entity

    def map_entities(self, entity_map: Mapping[Entity, Entity]) -> None:
        """Rewrite the target reference through ``entity_map``."""
        self.target = _map(entity_map, self.target)