"""Stepping a character across land and item surfaces."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Optional

from shardserver.world.entity import Direction, Location
from shardserver.world.spatial import ChunkSurface, EntitySurfaces, ItemSurface

__all__ = ["MoveError", "Impassable", "Obstructed", "try_move_in_direction"]

STEP_HEIGHT = 10


class MoveError(Exception):
    """A step could not be taken."""


class Impassable(MoveError):
    """There is nothing to stand on at the destination."""

    def __init__(self) -> None:
        super().__init__("destination is impassable")


class Obstructed(MoveError):
    """An impassable item blocks the destination."""

    def __init__(self, entity: Hashable) -> None:
        super().__init__(f"destination is obstructed by {entity!r}")
        self.entity = entity


def try_move_in_direction(
    surfaces: EntitySurfaces,
    land_tiles: Sequence[bool],
    location: Location,
    direction: Direction,
    ignore: Optional[Hashable] = None,
) -> Location:
    """Return where one step in ``direction`` lands.

    The step rises up to ten units and then drops onto the highest surface
    below that. ``land_tiles[tile_id]`` tells whether a land tile is
    impassable. Raises Obstructed or Impassable when the step cannot be made.
    """
    dx, dy = Direction(direction).as_vec2()
    x, y, z = location.position
    test_x, test_y, test_z = x + dx, y + dy, z + STEP_HEIGHT
    new_z = -1

    for entity, kind in surfaces.tree.iter_at_point(location.map_id, (test_x, test_y)):
        if ignore is not None and entity == ignore:
            continue

        if isinstance(kind, ChunkSurface):
            cx, cy = kind.position
            tile_id, land_z = kind.chunk.get(test_x - cx, test_y - cy)
            if not land_tiles[tile_id]:
                land_z = int(land_z)
                if land_z <= test_z:
                    new_z = max(new_z, land_z)
        elif isinstance(kind, ItemSurface):
            if kind.impassable:
                if kind.min_z <= test_z <= kind.max_z:
                    raise Obstructed(entity)
            elif kind.max_z <= test_z:
                new_z = max(new_z, kind.max_z)

    if new_z < 0:
        raise Impassable()

    return Location(
        position=(test_x, test_y, new_z), map_id=location.map_id, direction=direction
    )