# shardserver

Building blocks for the world side of a role-playing game shard server,
in plain Python with no runtime dependencies.

## Modules

- `shardserver.math`: Manhattan-metric helpers for integer vectors of any
  dimension (`manhattan_magnitude`, `manhattan_distance`, `in_range`).
  `manhattan_distance` raises `ValueError` when the vectors differ in length.
- `shardserver.gump_builder`: `GumpBuilder` collects gump layout commands
  such as `{ gumppic x y id }` and `{ button ... }`. Every method returns the
  builder, so calls can be chained. `GumpText.intern` stores a string and
  returns its index. `GumpBuilder.into_layout(text)` produces a `GumpLayout`
  that holds the layout string and the text list.
- `shardserver.world.entity`: component dataclasses. `Location` is a
  position, a map id and a `Direction`. `Location.manhattan_distance` returns
  `None` across maps. The module also has `Graphic`, `Quantity`, `Multi`,
  `Character`, `CharacterEquipped`, `EquippedBy`, `Container`,
  `ParentContainer`, `Stats`, `TooltipLine`, `Tooltip` and `AttackTarget`.
  The `map_entities` methods rewrite entity references through a mapping and
  raise `MapEntitiesError` when a reference is missing from it.
- `shardserver.world.hierarchy`: `World` is a minimal entity store. Entities
  are integer ids with at most one component of each type, managed with
  `spawn`, `insert`, `get`, `has`, `contains` and `despawn`.
  `despawn_recursive` removes an entity together with its container contents
  and its equipment.
- `shardserver.world.netid`: `NetEntityAllocator` hands out network ids,
  from 1 for characters and from `0x40000001` for items.
  `NetEntityLookup` maps entities to network ids in both directions.
  `assign_network_id(world, entity, allocator)` gives an entity and
  everything it holds or wears a `NetEntity` id, breadth first.
- `shardserver.world.spatial`: `BoundingBox` is a half-open integer box.
  `SpatialEntityTree` is a per-map index that answers box queries
  (`iter_aabb`), line queries (`iter_line`) and point queries
  (`iter_at_point`). The module also has the surface kinds `ChunkSurface` and
  `ItemSurface`, the `Extents` dataclass, the index holders `EntitySurfaces`,
  `EntityPositions` and `NetClientPositions`, and `view_aabb`.
- `shardserver.world.navigation`: `try_move_in_direction` takes one step. It
  rises up to ten units and then drops onto the highest walkable surface. It
  raises `Obstructed` (carrying the blocking entity) or `Impassable`, both
  subclasses of `MoveError`.
- `shardserver.world.ghosts`: `ViewState` is the per-client record of
  character and item ghosts, together with the dirty flags that are still
  pending (`CharacterDirty`, `ItemDirty`). It also tracks parent/child links
  and the ghosts scheduled for removal.
- `shardserver.world.view`: `collect_updates(view_state, lookup)` returns
  the update messages a client needs, such as `DeleteEntity`,
  `UpsertCharacter`, `UpdateCharacter`, `StatsUpdate`, `UpsertLocalPlayer`,
  `UpsertWorldItem`, `UpsertContainedItem`, `UpsertEquippedItem` and
  `TooltipVersion`. It clears the pending flags as it goes.
  `container_contents` returns the gump id and the visible items of an opened
  container.

## Installing

    pip install .

To install and run the tests:

    pip install ".[test]"
    pytest

## Example

    from shardserver.gump_builder import GumpBuilder, GumpText

    text = GumpText()
    greeting = text.intern("Welcome, traveller")

    builder = GumpBuilder()
    builder.mark_no_close().add_page(0).add_text(greeting, 0, (20, 20))
    layout = builder.into_layout(text)

    print(layout.layout)  # { noclose }{ page 0 }{ text 20 20 0 0 }
    print(layout.text)    # ['Welcome, traveller']

## What this package does not do

The package has no server and no command to run:

- It does not accept connections.
- It does not encode or decode packets or handle login.
- It does not read map, statics or tile data files.

The update messages from `shardserver.world.view` are plain dataclasses. Sending them to a client, and filling the spatial indexes from game data, is left to the application that uses the package.