"""
Bounded backtracking search for Hamiltonian paths on small grids.

The search is an explicit-stack DFS. Moves are ranked by the number of onward
moves they leave (fewest first), with a direction permutation chosen from the
start cell's structural class as tie-breaker. Every attempt runs under its own
slice of a shared wall-clock deadline; the best partial path seen is kept and
tail-grafted when no attempt completes.
"""

import random
import threading
import time
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import SearchConfig
from ..core.grid import Cell, Grid
from ..diagnostics import DiagnosticsSink, resolve_sink
from .common import (
    MODE_COMPLETE,
    finalize,
    graft_tail,
    make_rng,
    mark_visited,
    onward_degree,
)
from .greedy import greedy_path

IDENTITY = (0, 1, 2, 3, 4, 5)

# Direction indices: 0=x+, 1=x-, 2=y+, 3=y-, 4=z+, 5=z-
DIRECTION_ORDERS: Dict[str, Tuple[Tuple[int, ...], ...]] = {
    "corner": (IDENTITY, (1, 0, 3, 2, 5, 4), (2, 3, 0, 1, 4, 5)),
    "edge": (IDENTITY, (4, 5, 0, 1, 2, 3), (2, 3, 4, 5, 0, 1)),
    "face": (IDENTITY, (2, 3, 0, 1, 4, 5), (0, 1, 4, 5, 2, 3)),
    "interior": (IDENTITY, (4, 5, 2, 3, 0, 1), (3, 2, 0, 1, 5, 4)),
}

_CLASS_BY_BOUNDARY_COUNT = {3: "corner", 2: "edge", 1: "face", 0: "interior"}


def structural_class(grid: Grid, cell: Sequence[int]) -> str:
    """Classify ``cell`` by how many of its coordinates sit on a boundary layer."""
    on_boundary = sum(
        1 for axis in range(3) if cell[axis] in (0, grid.dims[axis] - 1)
    )
    return _CLASS_BY_BOUNDARY_COUNT[on_boundary]


def direction_orders(grid: Grid, cell: Sequence[int]) -> Tuple[Tuple[int, ...], ...]:
    return DIRECTION_ORDERS[structural_class(grid, cell)]


# ---------- Search ----------

def _ranked_moves(grid: Grid, head: int, visited: List[bool], rank: Sequence[int]) -> List[int]:
    """Unvisited neighbors of ``head``, best candidate last (popped first)."""
    moves = []
    for direction, nb in enumerate(grid.directional_indices(head)):
        if nb >= 0 and not visited[nb]:
            moves.append((onward_degree(grid, nb, visited), rank[direction], nb))
    moves.sort(reverse=True)
    return [m[2] for m in moves]


def _strands_neighbor(grid: Grid, prev: int, head: int, visited: List[bool]) -> bool:
    """
    True if stepping ``prev -> head`` leaves an unvisited neighbor of ``prev``
    unreachable, or leaves two of them as forced path ends.
    """
    dead_ends = 0
    for nb in grid.adjacent_indices(prev):
        if visited[nb]:
            continue
        degree = onward_degree(grid, nb, visited)
        if degree == 0:
            return True
        if degree == 1:
            dead_ends += 1
            if dead_ends > 1:
                return True
    return False


def search_hamiltonian(
    grid: Grid,
    start: int,
    order: Sequence[int],
    deadline: float,
    cancel: Optional[threading.Event] = None,
) -> Tuple[bool, List[int], bool]:
    """
    Depth-first search for a path from ``start`` covering every cell.

    Args:
        grid: Grid to search
        start: Flat index of the start cell
        order: Direction permutation used as the tie-breaker
        deadline: ``time.monotonic()`` value after which the search stops
        cancel: Optional event; when set the search stops at the next expansion

    Returns:
        (found, path, interrupted) where ``path`` is the full path when found
        and the longest partial path otherwise.
    """
    n = grid.size
    rank = [0] * 6
    for position, direction in enumerate(order):
        rank[direction] = position

    visited = [False] * n
    visited[start] = True
    path = [start]
    best = [start]
    stack = [_ranked_moves(grid, start, visited, rank)]

    while stack:
        if len(path) == n:
            return True, path, False
        if time.monotonic() > deadline or (cancel is not None and cancel.is_set()):
            return False, best, True

        moves = stack[-1]
        if not moves:
            stack.pop()
            visited[path.pop()] = False
            continue

        nxt = moves.pop()
        if visited[nxt]:
            continue
        visited[nxt] = True
        path.append(nxt)

        if _strands_neighbor(grid, path[-2], nxt, visited):
            visited[nxt] = False
            path.pop()
            continue

        if len(path) > len(best):
            best = list(path)
        stack.append(_ranked_moves(grid, nxt, visited, rank))

    return False, best, False


def backtracking_path(
    grid: Grid,
    start: Sequence[int],
    rng: Optional[random.Random] = None,
    config: Optional[SearchConfig] = None,
    sink: Optional[DiagnosticsSink] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Cell]:
    """
    Hamiltonian path by bounded backtracking.

    Grids with any dimension above ``config.backtrack_max_dim`` are handed to
    the greedy constructor in complete mode.

    Returns:
        A valid path starting at ``start``; full coverage when the search
        succeeds, the repaired best effort otherwise.
    """
    config = config or SearchConfig()
    rng = make_rng(rng)
    log = resolve_sink(sink, "backtracking")
    s = grid.index_of(start)
    n = grid.size

    if max(grid.dims) > config.backtrack_max_dim:
        log.info("delegated", reason="grid_too_large", max_dim=max(grid.dims))
        return greedy_path(grid, start, MODE_COMPLETE, rng=rng, config=config, sink=sink)

    cls = structural_class(grid, start)
    orders = list(DIRECTION_ORDERS[cls])
    rng.shuffle(orders)

    t0 = time.monotonic()
    deadline = t0 + config.backtrack_timeout_sec
    best = [s]
    interrupted = False

    for attempt, order in enumerate(orders):
        now = time.monotonic()
        remaining = deadline - now
        if remaining <= 0 or (cancel is not None and cancel.is_set()):
            interrupted = True
            break
        slice_deadline = now + remaining / (len(orders) - attempt)

        found, path, interrupted = search_hamiltonian(grid, s, order, slice_deadline, cancel)
        if found:
            log.info("found", cls=cls, attempt=attempt, elapsed=round(time.monotonic() - t0, 4))
            return finalize(grid, path, s, log, "backtracking")
        if len(path) > len(best):
            best = path
        if not interrupted:
            # Exhaustive search finished: no order can succeed
            log.info("exhausted", cls=cls, attempt=attempt, best=len(best), total=n)
            break

    if cancel is not None and cancel.is_set():
        log.info("cancelled", best=len(best), total=n)
        return finalize(grid, best, s, log, "backtracking")

    if interrupted:
        log.warn("timeout", best=len(best), total=n, timeout=config.backtrack_timeout_sec)

    repaired = list(best)
    visited = mark_visited(grid, repaired)
    added = graft_tail(grid, repaired, visited, rng, config.repair_max_rotations)
    log.info("grafted", added=added, covered=len(repaired), total=n)
    result = finalize(grid, repaired, s, log, "backtracking")

    if len(result) < n:
        fallback = greedy_path(grid, start, MODE_COMPLETE, rng=rng, config=config, sink=sink)
        if len(fallback) > len(result):
            log.info("greedy_fallback_kept", covered=len(fallback), total=n)
            result = fallback
    return result
