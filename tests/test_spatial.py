import pytest

from shardserver.world.spatial import (
    BoundingBox,
    ChunkSurface,
    EntityPositions,
    Extents,
    ItemSurface,
    SpatialEntityTree,
    view_aabb,
)


def test_from_bounds_normalises_corner_order():
    a = BoundingBox.from_bounds((5, 1), (1, 5))
    b = BoundingBox.from_bounds((1, 5), (5, 1))
    assert a == b
    assert a.min == (1, 1)
    assert a.max == (5, 5)


def test_from_point_covers_only_that_cell():
    box = BoundingBox.from_point((3, 4))
    assert box.contains_point((3, 4))
    assert not box.contains_point((4, 4))
    assert not box.contains_point((3, 5))
    assert not box.contains_point((2, 4))
    assert box.area() == 1


def test_empty_box():
    assert BoundingBox.empty().is_empty()
    assert BoundingBox.empty().area() == 0
    assert not BoundingBox.from_point((0, 0)).is_empty()


def test_zero_width_box_with_height_is_not_empty():
    assert not BoundingBox.from_bounds((0, 0), (0, 5)).is_empty()


def test_area():
    assert BoundingBox.from_bounds((0, 0), (3, 4)).area() == 12


def test_merged_contains_both():
    a = BoundingBox.from_bounds((0, 0), (2, 2))
    b = BoundingBox.from_bounds((5, -3), (7, 1))
    merged = a.merged(b)
    assert merged.contains_box(a)
    assert merged.contains_box(b)
    assert merged == b.merged(a)


def test_contains_box():
    outer = BoundingBox.from_bounds((0, 0), (10, 10))
    inner = BoundingBox.from_bounds((2, 2), (4, 4))
    assert outer.contains_box(inner)
    assert not inner.contains_box(outer)


def test_intersects_is_symmetric():
    a = BoundingBox.from_bounds((0, 0), (4, 4))
    b = BoundingBox.from_bounds((3, 3), (6, 6))
    c = BoundingBox.from_bounds((4, 0), (6, 4))
    assert a.intersects(b) and b.intersects(a)
    assert not a.intersects(c) and not c.intersects(a)


def test_center_is_inside_box():
    box = BoundingBox.from_bounds((-7, -3), (5, 9))
    assert box.contains_point(box.center())


def test_insert_point_and_query_at_point():
    tree = SpatialEntityTree()
    tree.insert_point("a", "meta", 1, (3, 3))
    assert list(tree.iter_at_point(1, (3, 3))) == [("a", "meta")]
    assert list(tree.iter_at_point(1, (4, 3))) == []
    assert list(tree.iter_at_point(2, (3, 3))) == []


def test_remove():
    tree = SpatialEntityTree()
    tree.insert_point("a", None, 0, (1, 1))
    tree.remove("a")
    assert list(tree.iter_at_point(0, (1, 1))) == []
    assert "a" not in tree
    tree.remove("a")
    assert len(tree) == 0


def test_reinsert_moves_entity():
    tree = SpatialEntityTree()
    tree.insert_point("a", None, 0, (1, 1))
    tree.insert_point("a", None, 1, (5, 5))
    assert list(tree.iter_at_point(0, (1, 1))) == []
    assert list(tree.iter_at_point(1, (5, 5))) == [("a", None)]
    assert len(tree) == 1


def test_same_placement_keeps_old_metadata():
    tree = SpatialEntityTree()
    tree.insert_point("a", "first", 0, (1, 1))
    tree.insert_point("a", "second", 0, (1, 1))
    assert list(tree.iter_at_point(0, (1, 1))) == [("a", "first")]


def test_empty_box_is_not_inserted():
    tree = SpatialEntityTree()
    tree.insert_aabb("a", None, 0, (2, 2), (2, 2))
    assert "a" not in tree


def test_iter_reports_bounds():
    tree = SpatialEntityTree()
    tree.insert_aabb("a", 7, 0, (4, 4), (0, 0))
    assert list(tree.iter(0)) == [("a", 7, (0, 0), (4, 4))]


def test_iter_unknown_map_raises():
    tree = SpatialEntityTree()
    with pytest.raises(KeyError):
        tree.iter(3)


def test_iter_aabb_finds_overlapping_entries():
    tree = SpatialEntityTree()
    tree.insert_point("near", None, 0, (10, 10))
    tree.insert_point("far", None, 0, (50, 50))
    tree.insert_aabb("wide", None, 0, (0, 0), (11, 11))
    found = {entity for entity, _ in tree.iter_aabb(0, (8, 8), (12, 12))}
    assert found == {"near", "wide"}
    assert list(tree.iter_aabb(9, (8, 8), (12, 12))) == []


def test_iter_line():
    tree = SpatialEntityTree()
    tree.insert_aabb("box", None, 0, (0, 0), (4, 4))
    assert [e for e, _ in tree.iter_line(0, (-2, 1), (2, 1))] == ["box"]
    assert [e for e, _ in tree.iter_line(0, (1, 1), (3, 3))] == ["box"]
    assert list(tree.iter_line(0, (1, 1), (1, 1))) == []
    assert list(tree.iter_line(5, (-2, 1), (2, 1))) == []


def test_view_aabb_covers_range_exactly():
    position = (10, 10)
    min_, max_ = view_aabb(position, 2)
    box = BoundingBox.from_bounds(min_, max_)
    assert box.contains_point((8, 8))
    assert box.contains_point((12, 12))
    assert not box.contains_point((13, 10))
    assert not box.contains_point((10, 7))
    assert box.center() == position


def test_extents_default_is_one():
    assert Extents() == Extents.ONE
    assert Extents().max == (1, 1, 1)


def test_position_index_holds_surface_metadata():
    positions = EntityPositions()
    chunk = ChunkSurface(position=(0, 0), chunk=None)
    item = ItemSurface(position=(1, 1), tile_id=5, impassable=True, min_z=0, max_z=3)
    positions.tree.insert_aabb("chunk", chunk, 0, (0, 0), (8, 8))
    positions.tree.insert_point("item", item, 0, (1, 1))
    found = dict(positions.tree.iter_at_point(0, (1, 1)))
    assert found == {"chunk": chunk, "item": item}