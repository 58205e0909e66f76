import pytest

from pipeline.linking.coordinates import (
    ParsePolicy,
    footprint_is_valid,
    format_coordinates,
    normalize_coordinate_order,
    parse_coordinate_or_numeric_list,
    point_in_polygon,
    value_range,
)

SQUARE = [(0, 0), (0, 10), (10, 10), (10, 0)]
# L-förmiges, nicht konvexes Polygon
L_SHAPE = [(0, 0), (10, 0), (10, 4), (4, 4), (4, 10), (0, 10)]

def test_triples_drop_elevation():
    """Test: Koordinatentripel verlieren ihre Höhe und werden gepaart."""
    assert parse_coordinate_or_numeric_list("10 20 5 30 40 6") == [(10, 20), (30, 40)]

def test_pairs_drop_dangling_value():
    """Test: Ein überzähliger letzter Wert wird verworfen."""
    assert parse_coordinate_or_numeric_list("1 2 3 4 5 6 7") == [(1, 2), (3, 4), (5, 6)]

def test_comma_and_whitespace_separators():
    assert parse_coordinate_or_numeric_list("1,2, 3\n4") == [(1, 2), (3, 4)]

def test_iterable_input():
    assert parse_coordinate_or_numeric_list([10, 20, 5, 30, 40, 6]) == [(10, 20), (30, 40)]

def test_raw_numbers_keep_all_values():
    """Test: RAW_NUMBERS entfernt keine Höhenwerte."""
    assert parse_coordinate_or_numeric_list("10 20 5", ParsePolicy.RAW_NUMBERS) == [10, 20, 5]

def test_pair_sums():
    values = parse_coordinate_or_numeric_list("0 0 0 0 10 0 10 10 0", ParsePolicy.PAIR_SUMS)
    assert values == [0, 10, 20]

def test_non_numeric_token_raises():
    with pytest.raises(ValueError):
        parse_coordinate_or_numeric_list("10 abc 20")

def test_value_range():
    assert value_range([3, 1, 2]) == (1, 3)
    assert value_range([1]) is None

def test_centroid_is_inside():
    assert point_in_polygon((5, 5), SQUARE)

def test_point_outside_hull():
    assert not point_in_polygon((15, 5), SQUARE)
    assert not point_in_polygon((-1, -1), SQUARE)

@pytest.mark.parametrize("shift", range(len(L_SHAPE)))
def test_rotation_invariance(shift):
    """Test: Zyklisches Verschieben der Eckpunkte ändert das Ergebnis nicht."""
    rotated = L_SHAPE[shift:] + L_SHAPE[:shift]
    assert point_in_polygon((2, 2), rotated)
    assert point_in_polygon((2, 8), rotated)
    assert not point_in_polygon((7, 7), rotated)

def test_degenerate_polygon():
    """Test: Weniger als drei Eckpunkte enthalten keinen Punkt."""
    assert not point_in_polygon((0, 0), [(0, 0), (1, 1)])
    assert not point_in_polygon((0, 0), [])

def test_normalize_coordinate_order():
    assert normalize_coordinate_order((139.7, 35.6)) == (35.6, 139.7)
    assert normalize_coordinate_order((35.6, 139.7)) == (35.6, 139.7)
    assert normalize_coordinate_order((500.0, 20.0)) == (500.0, 20.0)

def test_footprint_is_valid():
    assert footprint_is_valid(SQUARE)
    # Selbstüberschneidende "Fliege"
    assert not footprint_is_valid([(0, 0), (10, 10), (10, 0), (0, 10)])

def test_format_coordinates():
    assert format_coordinates([(0.0, 1.5), (10.0, 2.0)]) == "0 1.5 10 2"
