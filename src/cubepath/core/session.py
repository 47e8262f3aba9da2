"""
Manual drawing session: the hand-drawn path state of the viewer.

The session owns the current path for one grid. A start cell is chosen, then
the path grows one adjacent unvisited cell at a time. Generated paths can be
installed wholesale with ``replace``; changing the grid clears everything.
"""

from typing import List, Optional, Sequence, Tuple

from ..diagnostics import DiagnosticsSink, resolve_sink
from .grid import DIRECTION_NAMES, Cell, Grid, build_grid
from .validation import truncate_at_violation


class PathSession:
    """
    Mutable path bound to an immutable grid.

    Attributes:
        grid: Grid the path lives on
    """

    def __init__(self, grid: Grid, sink: Optional[DiagnosticsSink] = None):
        self.grid = grid
        self._path: List[Cell] = []
        self._visited = set()
        self._sink = resolve_sink(sink, "session")

    # ---------- Accessors ----------

    @property
    def path(self) -> Tuple[Cell, ...]:
        return tuple(self._path)

    @property
    def start(self) -> Optional[Cell]:
        return self._path[0] if self._path else None

    @property
    def head(self) -> Optional[Cell]:
        return self._path[-1] if self._path else None

    @property
    def is_complete(self) -> bool:
        return len(self._path) == self.grid.size

    def __len__(self) -> int:
        return len(self._path)

    def contains(self, cell: Sequence[int]) -> bool:
        return tuple(cell[:3]) in self._visited

    # ---------- Editing ----------

    def select_start(self, cell: Sequence[int]) -> bool:
        """
        Begin a new path at ``cell``.

        Refused while a drawn path longer than one cell exists; clear it first.
        """
        if not self.grid.contains(cell):
            return False
        if len(self._path) > 1:
            self._sink.info("start_refused", path_length=len(self._path))
            return False
        start = Cell(cell[0], cell[1], cell[2])
        self._path = [start]
        self._visited = {start}
        return True

    def extend(self, cell: Sequence[int]) -> bool:
        """Append ``cell`` if it is in bounds, unvisited and adjacent to the head."""
        if not self._path or not self.grid.contains(cell):
            return False
        nxt = Cell(cell[0], cell[1], cell[2])
        if nxt in self._visited:
            return False
        if nxt not in self.grid.neighbors(self.head):
            return False
        self._path.append(nxt)
        self._visited.add(nxt)
        return True

    def move(self, direction) -> bool:
        """Extend one step along a direction index or name (``"x+"``...)."""
        if not self._path:
            return False
        nxt = self.grid.neighbor(self.head, direction)
        return nxt is not None and self.extend(nxt)

    def available_cells(self) -> List[Cell]:
        """Unvisited neighbors of the head."""
        if not self._path:
            return []
        return [c for c in self.grid.neighbors(self.head) if c not in self._visited]

    def available_directions(self) -> List[str]:
        """Names of the directions the head can currently move in."""
        if not self._path:
            return []
        enabled = []
        for name in DIRECTION_NAMES:
            nxt = self.grid.neighbor(self.head, name)
            if nxt is not None and nxt not in self._visited:
                enabled.append(name)
        return enabled

    def reset(self):
        """Drop everything after the start cell."""
        if self._path:
            start = self._path[0]
            self._path = [start]
            self._visited = {start}

    def clear(self):
        self._path = []
        self._visited = set()

    def replace(self, path: Sequence[Sequence[int]]) -> bool:
        """
        Install a complete path, truncating at its first violation.

        Returns:
            True if the whole path was accepted.
        """
        cells, violation = truncate_at_violation(path, self.grid, self._sink)
        self._path = cells
        self._visited = set(cells)
        return violation is None

    def rebuild(self, width: int, height: int, depth: int) -> Grid:
        """Switch to a new grid; any existing path is invalidated."""
        self.grid = build_grid(width, height, depth, spacing=self.grid.spacing)
        self.clear()
        return self.grid
