"""
3-D lattice grid model.

This module provides the Cell value type and the Grid class, which owns the
dense enumeration of cells for a width x height x depth box, their 6-connected
adjacency, and their continuous positions in space.

Cells are stored by flat index ``(x * height + y) * depth + z``. The neighbor
table is built once per grid so adjacency queries are O(1); the construction
algorithms work on flat indices directly for speed.
"""

from typing import Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from ..errors import InvalidDimension

MIN_DIM = 2
MAX_DIM = 8
DEFAULT_SPACING = 1.5

# Canonical direction order: x+, x-, y+, y-, z+, z-
DIRECTIONS: Tuple[Tuple[int, int, int], ...] = (
    (1, 0, 0),
    (-1, 0, 0),
    (0, 1, 0),
    (0, -1, 0),
    (0, 0, 1),
    (0, 0, -1),
)
DIRECTION_NAMES: Tuple[str, ...] = ("x+", "x-", "y+", "y-", "z+", "z-")

AXES = ("x", "y", "z")


class Cell(NamedTuple):
    """Immutable lattice cell identified by its index triple."""
    x: int
    y: int
    z: int

    @property
    def parity(self) -> int:
        return (self.x + self.y + self.z) % 2


def direction_index(name: str) -> int:
    """Map a direction name such as ``"y-"`` to its index."""
    try:
        return DIRECTION_NAMES.index(name)
    except ValueError:
        raise ValueError(f"Unknown direction: {name!r}") from None


def parse_cell(text: str) -> Cell:
    """Parse ``"x,y,z"`` (spaces allowed) into a Cell."""
    parts = [p for p in text.replace(" ", "").split(",") if p]
    if len(parts) != 3:
        raise ValueError(f"Expected three comma-separated integers, got {text!r}")
    return Cell(*(int(p) for p in parts))


class Grid:
    """
    Immutable 3-D lattice of width x height x depth cells.

    Attributes:
        width, height, depth: Per-axis cell counts
        dims: (width, height, depth)
        spacing: Distance between neighboring cell centers
        size: Total number of cells
        cells: Dense list of cells in flat-index order
    """

    def __init__(self, width: int, height: int, depth: int, spacing: float = DEFAULT_SPACING):
        for axis, value in zip(AXES, (width, height, depth)):
            if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                raise InvalidDimension(axis, value, MIN_DIM, MAX_DIM)
            if value < MIN_DIM or value > MAX_DIM:
                raise InvalidDimension(axis, value, MIN_DIM, MAX_DIM)

        self.width, self.height, self.depth = int(width), int(height), int(depth)
        self.dims: Tuple[int, int, int] = (self.width, self.height, self.depth)
        self.spacing = float(spacing)
        self.size = self.width * self.height * self.depth

        self.cells: List[Cell] = [
            Cell(x, y, z)
            for x in range(self.width)
            for y in range(self.height)
            for z in range(self.depth)
        ]
        self._directional = self._build_directional()
        self._adjacency = [[i for i in row if i >= 0] for row in self._directional]
        self._offsets = np.array(
            [(d - 1) / 2.0 * self.spacing for d in self.dims], dtype=float
        )

    # ---------- Indexing ----------

    def index(self, x: int, y: int, z: int) -> int:
        return (x * self.height + y) * self.depth + z

    def index_of(self, cell: Sequence[int]) -> int:
        """Flat index of an in-bounds cell."""
        if not self.contains(cell):
            raise IndexError(f"{tuple(cell)} is outside grid {self}")
        return self.index(cell[0], cell[1], cell[2])

    def in_bounds(self, x: int, y: int, z: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height and 0 <= z < self.depth

    def contains(self, cell: Sequence[int]) -> bool:
        return len(cell) == 3 and self.in_bounds(cell[0], cell[1], cell[2])

    def cell_at(self, x: int, y: int, z: int) -> Optional[Cell]:
        """Cell at the given coordinates, or None when out of range."""
        if not self.in_bounds(x, y, z):
            return None
        return self.cells[self.index(x, y, z)]

    def __len__(self) -> int:
        return self.size

    def __iter__(self) -> Iterator[Cell]:
        return iter(self.cells)

    def __contains__(self, cell) -> bool:
        try:
            return self.contains(cell)
        except TypeError:
            return False

    def __eq__(self, other) -> bool:
        return isinstance(other, Grid) and self.dims == other.dims and self.spacing == other.spacing

    def __hash__(self) -> int:
        return hash((self.dims, self.spacing))

    def __repr__(self) -> str:
        return f"Grid({self.width}x{self.height}x{self.depth})"

    # ---------- Adjacency ----------

    def _build_directional(self) -> List[List[int]]:
        table = []
        for cell in self.cells:
            row = []
            for dx, dy, dz in DIRECTIONS:
                x, y, z = cell.x + dx, cell.y + dy, cell.z + dz
                row.append(self.index(x, y, z) if self.in_bounds(x, y, z) else -1)
            table.append(row)
        return table

    def adjacent_indices(self, index: int) -> List[int]:
        """Flat indices of the neighbors of a flat index, in direction order."""
        return self._adjacency[index]

    def directional_indices(self, index: int) -> List[int]:
        """Neighbor flat index per direction (x+, x-, y+, y-, z+, z-), -1 at the boundary."""
        return self._directional[index]

    def neighbors(self, cell: Sequence[int]) -> List[Cell]:
        """All in-bounds 6-connected neighbors of ``cell``."""
        return [self.cells[i] for i in self._adjacency[self.index_of(cell)]]

    def neighbor(self, cell: Sequence[int], direction: Union[int, str]) -> Optional[Cell]:
        """Neighbor one step along ``direction`` (index or name), or None at the boundary."""
        if isinstance(direction, str):
            direction = direction_index(direction)
        dx, dy, dz = DIRECTIONS[direction]
        return self.cell_at(cell[0] + dx, cell[1] + dy, cell[2] + dz)

    def parity(self, cell: Sequence[int]) -> int:
        return (cell[0] + cell[1] + cell[2]) % 2

    def layer(self, axis: int, value: int) -> List[Cell]:
        """Cells whose coordinate on ``axis`` (0=x, 1=y, 2=z) equals ``value``."""
        if not 0 <= value < self.dims[axis]:
            return []
        return [c for c in self.cells if c[axis] == value]

    # ---------- Geometry ----------

    def position(self, cell: Sequence[int]) -> np.ndarray:
        """Center of ``cell`` in world space; the lattice is centered on the origin."""
        return np.asarray(cell[:3], dtype=float) * self.spacing - self._offsets

    def positions(self, path: Sequence[Sequence[int]]) -> np.ndarray:
        """(N, 3) array of cell centers for a sequence of cells."""
        if len(path) == 0:
            return np.zeros((0, 3), dtype=float)
        return np.asarray([c[:3] for c in path], dtype=float) * self.spacing - self._offsets

    # ---------- Flat-index helpers ----------

    def to_cells(self, indices: Sequence[int]) -> List[Cell]:
        return [self.cells[i] for i in indices]

    def to_indices(self, cells: Sequence[Sequence[int]]) -> List[int]:
        return [self.index_of(c) for c in cells]


def build_grid(
    width: Union[int, Sequence[int]],
    height: Optional[int] = None,
    depth: Optional[int] = None,
    spacing: float = DEFAULT_SPACING,
) -> Grid:
    """
    Build a grid.

    Accepts three dimensions, a single integer for a cube, or a 3-sequence.

    Raises:
        InvalidDimension: if any dimension is outside [2, 8].
    """
    if height is None and depth is None:
        if isinstance(width, (list, tuple)):
            if len(width) != 3:
                raise InvalidDimension("dims", tuple(width), MIN_DIM, MAX_DIM)
            width, height, depth = width
        else:
            height = depth = width
    elif height is None or depth is None:
        raise InvalidDimension("height" if height is None else "depth", None, MIN_DIM, MAX_DIM)
    return Grid(width, height, depth, spacing=spacing)
