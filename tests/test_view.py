import pytest

from shardserver.world.entity import (
    Direction,
    EquippedBy,
    Graphic,
    Location,
    ParentContainer,
    Stats,
    Tooltip,
    TooltipLine,
)
from shardserver.world.ghosts import CharacterGhost, ItemGhost, ViewState, WorldItemPosition
from shardserver.world.netid import NetEntityLookup
from shardserver.world.view import (
    DeleteEntity,
    StatsUpdate,
    TooltipVersion,
    UpdateCharacter,
    UpsertCharacter,
    UpsertContainedItem,
    UpsertEquippedItem,
    UpsertLocalPlayer,
    UpsertWorldItem,
    collect_updates,
    container_contents,
)


@pytest.fixture
def lookup():
    table = NetEntityLookup()
    table.insert("hero", 1)
    table.insert("orc", 2)
    table.insert("sword", 0x40000001)
    table.insert("bag", 0x40000002)
    table.insert("coin", 0x40000003)
    return table


def character(hue=0):
    return CharacterGhost(
        location=Location((10, 20, 0), 0, Direction.EAST),
        body_type=400,
        hue=hue,
        stats=Stats(name="Hero"),
    )


def world_item(gump=None):
    return ItemGhost(
        graphic=Graphic(id=0xE75, hue=0),
        position=WorldItemPosition(Location((11, 20, 0), 0)),
        container_gump=gump,
    )


def test_new_character_sends_upsert_and_stats(lookup):
    view = ViewState()
    view.upsert_ghost("orc", character())
    updates = collect_updates(view, lookup)
    assert len(updates) == 2
    upsert, stats = updates
    assert isinstance(upsert, UpsertCharacter)
    assert upsert.id == 2
    assert upsert.position == (10, 20, 0)
    assert upsert.direction == Direction.EAST
    assert stats == StatsUpdate(id=2, stats=Stats(name="Hero"), owned=False)
    assert stats.max_info_level == 0


def test_possessed_character_gets_local_player(lookup):
    view = ViewState()
    view.possessed = "hero"
    view.upsert_ghost("hero", character())
    updates = collect_updates(view, lookup)
    stats = next(u for u in updates if isinstance(u, StatsUpdate))
    assert stats.owned and stats.allow_name_change
    assert stats.max_info_level == 8
    local = [u for u in updates if isinstance(u, UpsertLocalPlayer)]
    assert len(local) == 1
    assert local[0].server_id == 0
    assert local[0].id == 1


def test_clean_view_sends_nothing(lookup):
    view = ViewState()
    view.upsert_ghost("orc", character())
    collect_updates(view, lookup)
    assert collect_updates(view, lookup) == []
    view.upsert_ghost("orc", character())
    assert collect_updates(view, lookup) == []


def test_changed_character_sends_update(lookup):
    view = ViewState()
    view.upsert_ghost("orc", character())
    collect_updates(view, lookup)
    view.upsert_ghost("orc", character(hue=33))
    updates = collect_updates(view, lookup)
    assert len(updates) == 1
    assert isinstance(updates[0], UpdateCharacter)
    assert updates[0].hue == 33


def test_removal_sent_with_next_dirty_update(lookup):
    view = ViewState()
    view.upsert_ghost("orc", character())
    view.upsert_ghost("hero", character())
    collect_updates(view, lookup)
    view.mark_unseen()
    view.upsert_ghost("hero", character(hue=5))
    updates = collect_updates(view, lookup)
    assert updates[0] == DeleteEntity(id=2)
    assert isinstance(updates[1], UpdateCharacter)
    assert "orc" not in view


def test_equipment_included_and_ordered_after_parent(lookup):
    view = ViewState()
    view.upsert_ghost("hero", character())
    view.upsert_ghost(
        "sword",
        ItemGhost(graphic=Graphic(id=0xF61, hue=2), position=EquippedBy("hero", 1)),
    )
    updates = collect_updates(view, lookup)
    upsert = next(u for u in updates if isinstance(u, UpsertCharacter))
    equipped = UpsertEquippedItem(id=0x40000001, parent_id=1, slot=1, graphic_id=0xF61, hue=2)
    assert upsert.equipment == (equipped,)
    assert equipped in updates
    assert updates.index(upsert) < updates.index(equipped)


def test_entities_without_net_id_are_skipped(lookup):
    view = ViewState()
    view.upsert_ghost("ghost", character())
    assert collect_updates(view, lookup) == []
    assert view.dirty is False


def test_container_contents(lookup):
    view = ViewState()
    view.upsert_ghost("bag", world_item(gump=0x3C))
    view.upsert_ghost(
        "coin",
        ItemGhost(graphic=Graphic(id=0xEED), position=ParentContainer("bag", (30, 40), 2), quantity=7),
    )
    updates = collect_updates(view, lookup)
    contained = [u for u in updates if isinstance(u, UpsertContainedItem)]
    assert len(contained) == 1
    assert contained[0].parent_id == 0x40000002

    result = container_contents(view, "bag", lookup)
    assert result is not None
    gump, contents = result
    assert gump == 0x3C
    assert contents == [
        UpsertContainedItem(
            id=0x40000003, graphic_id=0xEED, quantity=7, position=(30, 40),
            grid_index=2, parent_id=0x40000002, hue=0,
        )
    ]


def test_container_contents_requires_container(lookup):
    view = ViewState()
    view.upsert_ghost("sword", world_item())
    assert container_contents(view, "sword", lookup) is None
    assert container_contents(view, "bag", lookup) is None
    assert container_contents(view, "unknown", lookup) is None