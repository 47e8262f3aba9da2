"""
Shared helpers for the path constructors.

All helpers work on flat cell indices (see ``Grid.index``) with a per-call
``visited`` list of booleans. Nothing here keeps state between calls.
"""

import random
from collections import deque
from typing import List, Optional, Sequence

from ..core.grid import Cell, Grid
from ..core.validation import validate_indices
from ..diagnostics import DiagnosticsSink

MODE_RANDOM = "random"
MODE_COMPLETE = "complete"
MODES = (MODE_RANDOM, MODE_COMPLETE)


def check_mode(mode: str) -> str:
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}. Available: {list(MODES)}")
    return mode


def make_rng(rng: Optional[random.Random] = None, seed: Optional[int] = None) -> random.Random:
    """Return ``rng`` or a new generator seeded with ``seed``."""
    if rng is not None:
        return rng
    return random.Random(seed)


def onward_degree(grid: Grid, index: int, visited: Sequence[bool]) -> int:
    """Number of unvisited neighbors of ``index``."""
    count = 0
    for nb in grid.adjacent_indices(index):
        if not visited[nb]:
            count += 1
    return count


def mark_visited(grid: Grid, path: Sequence[int]) -> List[bool]:
    visited = [False] * grid.size
    for idx in path:
        visited[idx] = True
    return visited


# ---------- BFS bridging ----------

def bfs_connect(
    grid: Grid, source: int, target: int, visited: Sequence[bool]
) -> Optional[List[int]]:
    """
    Shortest route from ``source`` to ``target`` through unvisited cells.

    Returns:
        Cells after ``source`` up to and including ``target``, or None when
        the unvisited region does not connect them.
    """
    if source == target or visited[target]:
        return None
    parent = {source: source}
    queue = deque([source])
    while queue:
        cur = queue.popleft()
        for nb in grid.adjacent_indices(cur):
            if nb in parent or visited[nb]:
                continue
            parent[nb] = cur
            if nb == target:
                route = [nb]
                while parent[route[-1]] != source:
                    route.append(parent[route[-1]])
                route.reverse()
                return route
            queue.append(nb)
    return None


# ---------- Tail grafting ----------

def graft_tail(
    grid: Grid,
    path: List[int],
    visited: List[bool],
    rng: random.Random,
    max_rotations: int = 2000,
) -> int:
    """
    Extend ``path`` in place until it covers the grid or gets stuck.

    While the tail has an unvisited neighbor the path grows onto it, picking
    the neighbor with the fewest onward moves. When the tail is stuck, the
    path is rotated: for a path cell p[i] adjacent to the tail, the suffix
    after p[i] is reversed so p[i+1] becomes the new tail. The start cell is
    never moved.

    Returns:
        Number of cells added.
    """
    added = 0
    rotations = 0
    n = grid.size
    while len(path) < n:
        tail = path[-1]
        options = [nb for nb in grid.adjacent_indices(tail) if not visited[nb]]
        if options:
            rng.shuffle(options)
            options.sort(key=lambda c: onward_degree(grid, c, visited))
            nxt = options[0]
            path.append(nxt)
            visited[nxt] = True
            added += 1
            continue

        if rotations >= max_rotations:
            break

        position = {cell: i for i, cell in enumerate(path)}
        pivots = [
            position[nb] for nb in grid.adjacent_indices(tail)
            if nb in position and position[nb] < len(path) - 2
        ]
        if not pivots:
            break

        # Prefer pivots that expose a tail with somewhere to go
        useful = [i for i in pivots if onward_degree(grid, path[i + 1], visited) > 0]
        pivot = rng.choice(useful) if useful else rng.choice(pivots)
        path[pivot + 1:] = path[pivot + 1:][::-1]
        rotations += 1
    return added


# ---------- Result handling ----------

def finalize(
    grid: Grid,
    path: List[int],
    start: int,
    sink: DiagnosticsSink,
    strategy: str,
) -> List[Cell]:
    """Convert a flat-index path to cells, or fall back to ``[start]`` if invalid."""
    if not path or path[0] != start or not validate_indices(grid, path):
        sink.error("invalid_candidate", strategy=strategy, length=len(path))
        return [grid.cells[start]]
    return grid.to_cells(path)
