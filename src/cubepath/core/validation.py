"""
Path validation and truncation.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..diagnostics import DiagnosticsSink, resolve_sink
from .grid import Cell, Grid

REASON_EMPTY = "empty"
REASON_DISCONTINUOUS = "discontinuous"
REASON_DUPLICATE = "duplicate"
REASON_OUT_OF_BOUNDS = "out_of_bounds"


@dataclass(frozen=True)
class PathViolation:
    """First offending position in a path and why it is invalid."""
    index: int
    reason: str
    cell: Optional[Tuple[int, int, int]] = None

    def __str__(self) -> str:
        if self.cell is None:
            return f"{self.reason} at index {self.index}"
        return f"{self.reason} at index {self.index} {tuple(self.cell)}"


def manhattan(a: Sequence[int], b: Sequence[int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1]) + abs(a[2] - b[2])


def are_adjacent(a: Sequence[int], b: Sequence[int]) -> bool:
    return manhattan(a, b) == 1


def validate_path(
    path: Sequence[Sequence[int]], grid: Optional[Grid] = None
) -> Optional[PathViolation]:
    """
    Check that consecutive cells are adjacent and no cell repeats.

    Returns:
        None if the path is valid, otherwise the first PathViolation.
    """
    if len(path) == 0:
        return PathViolation(0, REASON_EMPTY)

    seen = set()
    prev = None
    for i, cell in enumerate(path):
        key = (cell[0], cell[1], cell[2])
        if grid is not None and not grid.contains(key):
            return PathViolation(i, REASON_OUT_OF_BOUNDS, key)
        if key in seen:
            return PathViolation(i, REASON_DUPLICATE, key)
        if prev is not None and manhattan(prev, key) != 1:
            return PathViolation(i, REASON_DISCONTINUOUS, key)
        seen.add(key)
        prev = key
    return None


def is_valid_path(path: Sequence[Sequence[int]], grid: Optional[Grid] = None) -> bool:
    return validate_path(path, grid) is None


def validate_indices(grid: Grid, indices: Sequence[int]) -> bool:
    """Validity check for a flat-index path on ``grid``."""
    if not indices:
        return False
    seen = set()
    prev = None
    for idx in indices:
        if idx < 0 or idx >= grid.size or idx in seen:
            return False
        if prev is not None and idx not in grid.adjacent_indices(prev):
            return False
        seen.add(idx)
        prev = idx
    return True


def truncate_at_violation(
    path: Sequence[Sequence[int]],
    grid: Optional[Grid] = None,
    sink: Optional[DiagnosticsSink] = None,
) -> Tuple[List[Cell], Optional[PathViolation]]:
    """
    Keep the prefix of ``path`` before its first violation.

    Returns:
        (prefix, violation) where violation is None for a valid path.
    """
    violation = validate_path(path, grid)
    cells = [Cell(c[0], c[1], c[2]) for c in path]
    if violation is None:
        return cells, None
    resolve_sink(sink, "validator").warn(
        "path_truncated",
        index=violation.index,
        reason=violation.reason,
        kept=violation.index,
        dropped=len(cells) - violation.index,
    )
    return cells[:violation.index], violation


def coverage(path: Sequence[Sequence[int]], grid: Grid) -> Tuple[int, int]:
    """(distinct in-bounds cells visited, total cells)."""
    covered = {(c[0], c[1], c[2]) for c in path if grid.contains(c)}
    return len(covered), grid.size
