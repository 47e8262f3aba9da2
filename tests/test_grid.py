"""Tests for the lattice grid model."""

import numpy as np
import pytest

from cubepath.core.grid import (
    DIRECTION_NAMES,
    Cell,
    Grid,
    build_grid,
    direction_index,
    parse_cell,
)
from cubepath.errors import InvalidDimension


class TestBuildGrid:
    def test_cell_count(self):
        grid = build_grid(2, 3, 4)
        assert grid.size == 24
        assert len(grid.cells) == 24
        assert len(set(grid.cells)) == 24

    def test_single_int_is_cube(self):
        assert build_grid(4).dims == (4, 4, 4)

    def test_sequence(self):
        assert build_grid((2, 5, 3)).dims == (2, 5, 3)

    @pytest.mark.parametrize("dims", [(1, 3, 3), (3, 9, 3), (3, 3, 0), (3, 3, -2)])
    def test_rejects_out_of_range(self, dims):
        with pytest.raises(InvalidDimension):
            build_grid(*dims)

    def test_rejects_non_integer(self):
        with pytest.raises(InvalidDimension):
            build_grid(3, 3.5, 3)

    def test_invalid_dimension_is_value_error(self):
        with pytest.raises(ValueError):
            build_grid(9)

    def test_bounds_inclusive(self):
        assert build_grid(2, 8, 2).size == 32

    def test_flat_index_order(self):
        grid = build_grid(3, 4, 5)
        for x, y, z in [(0, 0, 0), (2, 3, 4), (1, 2, 3)]:
            idx = grid.index(x, y, z)
            assert grid.cells[idx] == Cell(x, y, z)
            assert grid.index_of((x, y, z)) == idx


class TestAdjacency:
    @pytest.mark.parametrize("cell,expected", [
        ((0, 0, 0), 3),
        ((1, 0, 0), 4),
        ((1, 1, 0), 5),
        ((1, 1, 1), 6),
    ])
    def test_neighbor_counts(self, cube3, cell, expected):
        assert len(cube3.neighbors(cell)) == expected

    def test_neighbors_are_unit_steps(self):
        grid = build_grid(2, 3, 4)
        for cell in grid:
            for nb in grid.neighbors(cell):
                assert sum(abs(a - b) for a, b in zip(cell, nb)) == 1

    def test_adjacency_is_symmetric(self):
        grid = build_grid(3, 2, 4)
        for cell in grid:
            for nb in grid.neighbors(cell):
                assert cell in grid.neighbors(nb)

    def test_cell_at_out_of_range(self, cube3):
        assert cube3.cell_at(3, 0, 0) is None
        assert cube3.cell_at(0, -1, 0) is None
        assert cube3.cell_at(2, 2, 2) == Cell(2, 2, 2)

    def test_neighbor_by_direction(self, cube3):
        assert cube3.neighbor((1, 1, 1), "x+") == Cell(2, 1, 1)
        assert cube3.neighbor((1, 1, 1), "z-") == Cell(1, 1, 0)
        assert cube3.neighbor((0, 0, 0), "y-") is None
        assert cube3.neighbor((0, 0, 0), 2) == Cell(0, 1, 0)

    def test_directional_table_matches_names(self, cube3):
        idx = cube3.index(0, 1, 2)
        table = cube3.directional_indices(idx)
        for d, name in enumerate(DIRECTION_NAMES):
            nb = cube3.neighbor((0, 1, 2), name)
            if nb is None:
                assert table[d] == -1
            else:
                assert cube3.cells[table[d]] == nb

    def test_non_cubic_bounds(self):
        grid = build_grid(2, 5, 3)
        assert grid.cell_at(1, 4, 2) is not None
        assert grid.cell_at(2, 0, 0) is None
        assert grid.cell_at(0, 0, 3) is None
        assert len(grid.neighbors((1, 4, 2))) == 3


class TestGeometry:
    def test_center_cell_at_origin(self, cube3):
        np.testing.assert_allclose(cube3.position((1, 1, 1)), [0.0, 0.0, 0.0])

    def test_corner_offset(self, cube3):
        np.testing.assert_allclose(cube3.position((0, 0, 0)), [-1.5, -1.5, -1.5])
        np.testing.assert_allclose(cube3.position((2, 2, 2)), [1.5, 1.5, 1.5])

    def test_even_dimension_is_centered(self):
        grid = build_grid(2, 2, 4)
        np.testing.assert_allclose(grid.position((0, 1, 0)), [-0.75, 0.75, -2.25])

    def test_custom_spacing(self):
        grid = Grid(3, 3, 3, spacing=2.0)
        np.testing.assert_allclose(grid.position((2, 0, 1)), [2.0, -2.0, 0.0])

    def test_positions_shape(self, cube3):
        pts = cube3.positions([(0, 0, 0), (0, 0, 1)])
        assert pts.shape == (2, 3)
        assert cube3.positions([]).shape == (0, 3)


def test_layer(cube3):
    layer = cube3.layer(2, 0)
    assert len(layer) == 9
    assert all(c.z == 0 for c in layer)
    assert cube3.layer(0, 5) == []


def test_parse_cell():
    assert parse_cell("1, 2,3") == Cell(1, 2, 3)
    with pytest.raises(ValueError):
        parse_cell("1,2")


def test_direction_index():
    assert direction_index("y-") == 3
    with pytest.raises(ValueError):
        direction_index("w+")


def test_cell_parity():
    assert Cell(0, 0, 0).parity == 0
    assert Cell(1, 0, 0).parity == 1


def test_membership_accepts_any_sequence(cube3):
    assert (0, 0, 0) in cube3
    assert [2, 2, 2] in cube3
    assert [0, 0, 0] in cube3 and cube3.contains([0, 0, 0])
    assert (3, 0, 0) not in cube3
    assert (0, 0) not in cube3
    assert "abc" not in cube3
    assert 5 not in cube3
