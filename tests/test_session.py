"""Tests for the manual drawing session."""

from cubepath.core.grid import Cell
from cubepath.core.session import PathSession


def test_select_start_and_extend(cube3):
    session = PathSession(cube3)
    assert session.start is None
    assert session.select_start((0, 0, 0))
    assert session.path == (Cell(0, 0, 0),)
    assert session.extend((1, 0, 0))
    assert session.head == Cell(1, 0, 0)


def test_extend_rules(cube3):
    session = PathSession(cube3)
    assert not session.extend((0, 0, 0))
    session.select_start((0, 0, 0))
    assert not session.extend((2, 0, 0))
    assert not session.extend((0, 0, 0))
    assert not session.extend((0, 0, -1))
    session.extend((0, 1, 0))
    session.extend((1, 1, 0))
    session.extend((1, 0, 0))
    assert not session.extend((0, 0, 0))
    assert len(session) == 4


def test_available_directions_at_corner(cube3):
    session = PathSession(cube3)
    session.select_start((0, 0, 0))
    assert session.available_directions() == ["x+", "y+", "z+"]
    session.move("x+")
    assert "x-" not in session.available_directions()
    assert set(session.available_cells()) == {Cell(2, 0, 0), Cell(1, 1, 0), Cell(1, 0, 1)}


def test_move_off_grid_is_refused(cube3):
    session = PathSession(cube3)
    session.select_start((0, 0, 0))
    assert not session.move("x-")
    assert session.move(0)
    assert session.head == Cell(1, 0, 0)


def test_single_cell_start_can_move(cube3):
    session = PathSession(cube3)
    session.select_start((0, 0, 0))
    assert session.select_start((2, 2, 2))
    assert session.path == (Cell(2, 2, 2),)


def test_select_start_refused_for_long_path(cube3, sink):
    session = PathSession(cube3, sink=sink)
    session.select_start((0, 0, 0))
    session.move("z+")
    assert not session.select_start((2, 2, 2))
    assert session.start == Cell(0, 0, 0)
    assert sink.find("start_refused")


def test_reset_and_clear(cube3):
    session = PathSession(cube3)
    session.select_start((1, 1, 1))
    session.move("y+")
    session.move("x+")
    session.reset()
    assert session.path == (Cell(1, 1, 1),)
    assert session.extend((1, 2, 1))
    session.clear()
    assert session.path == ()
    assert session.available_directions() == []


def test_replace_truncates_invalid(cube3):
    session = PathSession(cube3)
    ok = session.replace([(0, 0, 0), (0, 0, 1), (0, 0, 2), (2, 2, 2)])
    assert not ok
    assert len(session) == 3
    assert session.head == Cell(0, 0, 2)


def test_replace_accepts_valid(cube3):
    session = PathSession(cube3)
    assert session.replace([(0, 0, 0), (0, 0, 1)])
    assert session.contains((0, 0, 1))


def test_rebuild_clears_path(cube3):
    session = PathSession(cube3)
    session.select_start((0, 0, 0))
    grid = session.rebuild(2, 2, 4)
    assert grid.dims == (2, 2, 4)
    assert session.grid is grid
    assert session.path == ()


def test_is_complete():
    from cubepath.core.grid import build_grid
    grid = build_grid(2, 2, 2)
    session = PathSession(grid)
    session.replace([(0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0), (0, 1, 1), (1, 1, 1), (1, 0, 1), (0, 0, 1)])
    assert session.is_complete
