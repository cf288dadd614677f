import numpy as np
import pytest

from j2kprog.precincts import (
    TileComponent,
    constant_precinct_count,
    max_decomposition_levels,
    number_of_precincts,
    parse_size,
    precinct_count_from_components,
    precinct_count_from_table,
    precinct_grid,
    precinct_table,
    preset_maximal_precincts,
    preset_uniform_precincts,
    resolution_rect,
    uniform_components,
)


def test_resolution_rect_halves_per_level():
    tc = TileComponent(0, 0, 64, 48, 3)
    assert (resolution_rect(tc, 3).w, resolution_rect(tc, 3).h) == (64, 48)
    assert (resolution_rect(tc, 1).w, resolution_rect(tc, 1).h) == (16, 12)
    assert (resolution_rect(tc, 0).w, resolution_rect(tc, 0).h) == (8, 6)


def test_resolution_rect_rounds_up_offsets():
    tc = TileComponent(5, 0, 21, 4, 1)
    rect = resolution_rect(tc, 0)
    assert (rect.x0, rect.x1) == (3, 11)


def test_maximal_precincts_give_one_per_resolution():
    tc = TileComponent(0, 0, 64, 64, 3, preset_maximal_precincts(3))
    assert [number_of_precincts(tc, r) for r in range(4)] == [1, 1, 1, 1]


def test_uniform_precincts():
    tc = TileComponent(0, 0, 64, 64, 3, preset_uniform_precincts(3, 4, 4))
    assert [precinct_grid(tc, r) for r in range(4)] == [(1, 1), (1, 1), (2, 2), (4, 4)]
    assert number_of_precincts(tc, 3) == 16


def test_offset_component_precincts():
    tc = TileComponent(5, 0, 21, 4, 1, preset_uniform_precincts(1, 2, 2))
    assert number_of_precincts(tc, 0) == 3
    assert number_of_precincts(tc, 1) == 5


def test_empty_and_out_of_range_resolutions():
    assert number_of_precincts(TileComponent(4, 4, 4, 8, 2), 2) == 0
    tc = TileComponent(0, 0, 16, 16, 1)
    assert number_of_precincts(tc, 2) == 0
    assert number_of_precincts(tc, -1) == 0


def test_negative_exponent_rejected():
    tc = TileComponent(0, 0, 16, 16, 1, {0: (-1, 3)})
    with pytest.raises(ValueError):
        number_of_precincts(tc, 0)
    with pytest.raises(ValueError):
        preset_uniform_precincts(2, -1, 0)


def test_precinct_table_pads_short_components():
    comps = [
        TileComponent(0, 0, 64, 64, 2, preset_uniform_precincts(2, 4, 4)),
        TileComponent(0, 0, 32, 32, 1, preset_uniform_precincts(1, 4, 4)),
    ]
    table = precinct_table(comps)
    assert table.shape == (3, 2)
    np.testing.assert_array_equal(table, np.array([[1, 1], [4, 4], [16, 0]]))


def test_precinct_count_from_table_bounds():
    pc = precinct_count_from_table(np.array([[1, 2], [3, 4]]))
    assert pc(1, 0) == 3
    assert pc(2, 0) == 0
    assert pc(0, 5) == 0
    assert isinstance(pc(1, 1), int)
    with pytest.raises(ValueError):
        precinct_count_from_table(np.zeros(3))


def test_precinct_count_from_components():
    comps = uniform_components(64, 64, [2, 1], preset_uniform_precincts(2, 4, 4))
    assert max_decomposition_levels(comps) == 2
    pc = precinct_count_from_components(comps)
    assert pc(2, 0) == 16
    assert pc(2, 1) == 0
    assert pc(1, 1) == 16


def test_constant_precinct_count():
    pc = constant_precinct_count(3)
    assert pc(0, 0) == pc(7, 9) == 3


def test_parse_size():
    assert parse_size("64x32") == (64, 32)
    assert parse_size("8X8") == (8, 8)
    with pytest.raises(ValueError):
        parse_size("64")
    with pytest.raises(ValueError):
        parse_size("-1x4")


def test_resolution_rect_rejects_levels_past_component():
    tc = TileComponent(0, 0, 16, 16, 1)
    with pytest.raises(ValueError, match="outside 0..1"):
        resolution_rect(tc, 2)
    with pytest.raises(ValueError):
        resolution_rect(tc, -1)


def test_tile_component_is_hashable():
    a = TileComponent(0, 0, 64, 64, 2, preset_uniform_precincts(2, 4, 4))
    b = TileComponent(0, 0, 64, 64, 2, {2: (4, 4), 0: (4, 4), 1: (4, 4)})
    assert a == b
    assert hash(a) == hash(b)
    assert len({a, b}) == 1
    assert a.precinct_exponents(1) == (4, 4)
    assert TileComponent(0, 0, 8, 8, 1).precinct_exponents(0) == (15, 15)
