import pytest

from shardserver.math import in_range, manhattan_distance, manhattan_magnitude


def test_magnitude_of_2d_vector():
    assert manhattan_magnitude((3, -4)) == 7


def test_magnitude_of_3d_vector_counts_every_axis():
    assert manhattan_magnitude((1, -2, 3)) == manhattan_magnitude((1, 2)) + 3


@pytest.mark.parametrize("value", [-9, 0, 5, 123])
def test_magnitude_of_single_axis_is_absolute_value(value):
    assert manhattan_magnitude((value, 0)) == abs(value)
    assert manhattan_magnitude((0, 0, value)) == abs(value)


def test_distance_to_self_is_zero():
    assert manhattan_distance((4, -7), (4, -7)) == 0
    assert manhattan_distance((4, -7, 2), (4, -7, 2)) == 0


@pytest.mark.parametrize(
    "a, b",
    [((0, 0), (5, -5)), ((-3, 8), (10, 2)), ((1, 2, 3), (-4, 5, -6))],
)
def test_distance_is_symmetric(a, b):
    assert manhattan_distance(a, b) == manhattan_distance(b, a)


def test_distance_matches_magnitude_of_difference():
    a, b = (12, -3, 4), (-1, 6, 9)
    diff = tuple(x - y for x, y in zip(a, b))
    assert manhattan_distance(a, b) == manhattan_magnitude(diff)


def test_distance_known_value():
    assert manhattan_distance((1, 1), (4, 5)) == 7


def test_distance_rejects_mismatched_dimensions():
    with pytest.raises(ValueError):
        manhattan_distance((1, 2), (1, 2, 3))


def test_in_range_boundary_is_inclusive():
    a, b = (0, 0), (3, -2)
    distance = manhattan_distance(a, b)
    assert in_range(a, b, distance) is True
    assert in_range(a, b, distance - 1) is False
    assert in_range(a, b, distance + 1) is True


def test_in_range_with_negative_range_never_matches():
    assert in_range((2, 2), (2, 2), -1) is False
    assert in_range((2, 2), (2, 2), 0) is True