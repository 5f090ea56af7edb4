"""Per-map spatial indexes of entities keyed by axis-aligned boxes."""

from __future__ import annotations

from collections.abc import Hashable, Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar

__all__ = [
    "BoundingBox",
    "SpatialEntityTree",
    "ChunkSurface",
    "ItemSurface",
    "Extents",
    "EntitySurfaces",
    "EntityPositions",
    "NetClientPositions",
    "view_aabb",
]

Entity = Hashable
Vec2 = tuple[int, int]
T = TypeVar("T")


def _vec2(value: Sequence[int]) -> Vec2:
    x, y = value
    return int(x), int(y)


def _half(value: int) -> int:
    """Integer halving that rounds toward zero."""
    return -((-value) // 2) if value < 0 else value // 2


@dataclass(frozen=True)
class BoundingBox:
    """A half-open integer box: ``min`` is inside, ``max`` is just outside."""

    min: Vec2 = (0, 0)
    max: Vec2 = (0, 0)

    def __post_init__(self) -> None:
        object.__setattr__(self, "min", _vec2(self.min))
        object.__setattr__(self, "max", _vec2(self.max))

    def is_empty(self) -> bool:
        """True when the box has no extent along either axis."""
        return self.min[0] >= self.max[0] and self.min[1] >= self.max[1]

    @classmethod
    def empty(cls) -> BoundingBox:
        """The box at the origin with no extent."""
        return cls()

    @classmethod
    def from_point(cls, point: Sequence[int]) -> BoundingBox:
        """The unit box covering a single grid cell."""
        x, y = _vec2(point)
        return cls((x, y), (x + 1, y + 1))

    @classmethod
    def from_bounds(cls, min_: Sequence[int], max_: Sequence[int]) -> BoundingBox:
        """The box spanning two corners, given in either order."""
        ax, ay = _vec2(min_)
        bx, by = _vec2(max_)
        return cls((min(ax, bx), min(ay, by)), (max(ax, bx), max(ay, by)))

    def contains_point(self, point: Sequence[int]) -> bool:
        """True when the grid cell ``point`` lies inside the box."""
        x, y = _vec2(point)
        return self.min[0] <= x < self.max[0] and self.min[1] <= y < self.max[1]

    def contains_box(self, other: BoundingBox) -> bool:
        """True when ``other`` lies entirely inside this box."""
        return (
            other.min[0] >= self.min[0]
            and other.min[1] >= self.min[1]
            and other.max[0] <= self.max[0]
            and other.max[1] <= self.max[1]
        )

    def merged(self, other: BoundingBox) -> BoundingBox:
        """The smallest box containing both boxes."""
        return BoundingBox(
            (min(self.min[0], other.min[0]), min(self.min[1], other.min[1])),
            (max(self.max[0], other.max[0]), max(self.max[1], other.max[1])),
        )

    def intersects(self, other: BoundingBox) -> bool:
        """True when the two boxes share at least one grid cell."""
        return (
            self.min[0] < other.max[0]
            and other.min[0] < self.max[0]
            and self.min[1] < other.max[1]
            and other.min[1] < self.max[1]
        )

    def area(self) -> int:
        """Number of cells covered by the box."""
        return (self.max[0] - self.min[0]) * (self.max[1] - self.min[1])

    def center(self) -> Vec2:
        """The midpoint of the box, rounded toward zero."""
        return (
            _half(self.min[0] + self.max[0]),
            _half(self.min[1] + self.max[1]),
        )


def _clamp_point(point: Vec2, box: BoundingBox) -> Vec2:
    x, y = point
    return (
        min(max(x, box.min[0]), box.max[0] - 1),
        min(max(y, box.min[1]), box.max[1] - 1),
    )


def _line_crosses_box(start: Vec2, end: Vec2, box: BoundingBox) -> bool:
    clamped_start = _clamp_point(start, box)
    clamped_end = _clamp_point(end, box)
    return clamped_start != clamped_end or clamped_start != start


@dataclass
class _Entry(Generic[T]):
    entity: Entity
    metadata: T
    box: BoundingBox


class SpatialEntityTree(Generic[T]):
    """Entities with attached metadata, indexed per map by their bounding box."""

    def __init__(self) -> None:
        self._maps: dict[int, dict[Entity, _Entry[T]]] = {}
        self._entities: dict[Entity, tuple[int, BoundingBox]] = {}

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, entity: object) -> bool:
        return entity in self._entities

    def _insert(self, entity: Entity, metadata: T, map_id: int, box: BoundingBox) -> None:
        if box.is_empty():
            return

        current = self._entities.get(entity)
        if current is not None:
            if current == (map_id, box):
                return
            self.remove(entity)

        self._maps.setdefault(map_id, {})[entity] = _Entry(entity, metadata, box)
        self._entities[entity] = (map_id, box)

    def insert_aabb(
        self, entity: Entity, metadata: T, map_id: int,
        min_: Sequence[int], max_: Sequence[int],
    ) -> None:
        """Place ``entity`` over the box between two corners.

        An entity already stored with the same map and box is left untouched.
        """
        self._insert(entity, metadata, map_id, BoundingBox.from_bounds(min_, max_))

    def insert_point(
        self, entity: Entity, metadata: T, map_id: int, position: Sequence[int]
    ) -> None:
        """Place ``entity`` on a single grid cell."""
        self._insert(entity, metadata, map_id, BoundingBox.from_point(position))

    def remove(self, entity: Entity) -> None:
        """Drop ``entity`` from the index if present."""
        placement = self._entities.pop(entity, None)
        if placement is None:
            return
        entries = self._maps.get(placement[0])
        if entries is not None:
            entries.pop(entity, None)

    def iter(self, map_id: int) -> Iterator[tuple[Entity, T, Vec2, Vec2]]:
        """Yield ``(entity, metadata, min, max)`` for every entry on a map.

        Raises KeyError for a map that has never held an entry.
        """
        entries = list(self._maps[map_id].values())
        return ((e.entity, e.metadata, e.box.min, e.box.max) for e in entries)

    def _select(self, map_id: int, predicate: Any) -> Iterator[tuple[Entity, T]]:
        entries = self._maps.get(map_id)
        if not entries:
            return
        for entry in list(entries.values()):
            if predicate(entry.box):
                yield entry.entity, entry.metadata

    def iter_aabb(
        self, map_id: int, min_: Sequence[int], max_: Sequence[int]
    ) -> Iterator[tuple[Entity, T]]:
        """Yield ``(entity, metadata)`` for entries overlapping the given box."""
        query = BoundingBox.from_bounds(min_, max_)
        return self._select(map_id, query.intersects)

    def iter_line(
        self, map_id: int, start: Sequence[int], end: Sequence[int]
    ) -> Iterator[tuple[Entity, T]]:
        """Yield ``(entity, metadata)`` for entries the line start→end crosses."""
        start_point = _vec2(start)
        end_point = _vec2(end)
        return self._select(
            map_id, lambda box: _line_crosses_box(start_point, end_point, box)
        )

    def iter_at_point(
        self, map_id: int, position: Sequence[int]
    ) -> Iterator[tuple[Entity, T]]:
        """Yield ``(entity, metadata)`` for entries covering a grid cell."""
        point = _vec2(position)
        return self._select(map_id, lambda box: box.contains_point(point))


@dataclass(frozen=True)
class ChunkSurface:
    """A block of land tiles; ``chunk.get(x, y)`` returns ``(tile_id, z)``."""

    position: Vec2
    chunk: Any


@dataclass(frozen=True)
class ItemSurface:
    """An item that can be stood on or that blocks movement."""

    position: Vec2
    tile_id: int
    impassable: bool
    min_z: int
    max_z: int


@dataclass(frozen=True)
class Extents:
    """How far an entity reaches from its position, below and above."""

    min: tuple[int, int, int] = (0, 0, 0)
    max: tuple[int, int, int] = (1, 1, 1)


Extents.ONE = Extents()  # type: ignore[attr-defined]


@dataclass
class EntitySurfaces:
    """Index of walkable and blocking surfaces."""

    tree: SpatialEntityTree[Any] = field(default_factory=SpatialEntityTree)


@dataclass
class EntityPositions:
    """Index of where every located entity sits."""

    tree: SpatialEntityTree[Any] = field(default_factory=SpatialEntityTree)


@dataclass
class NetClientPositions:
    """Index of the area each connected client can see."""

    tree: SpatialEntityTree[Any] = field(default_factory=SpatialEntityTree)


def view_aabb(position: Sequence[int], range_: int) -> tuple[Vec2, Vec2]:
    """Corners of the box seen from ``position`` at view distance ``range_``."""
    x, y = _vec2(position)
    return (x - range_, y - range_), (x + range_ + 1, y + range_ + 1)