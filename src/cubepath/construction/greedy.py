"""
Randomized greedy walk with depth-limited repair.
"""

import random
from typing import List, Optional, Sequence

from ..config import SearchConfig
from ..core.grid import Cell, Grid
from ..diagnostics import DiagnosticsSink, resolve_sink
from .common import (
    MODE_COMPLETE,
    check_mode,
    finalize,
    graft_tail,
    make_rng,
    mark_visited,
)


def _unvisited(grid: Grid, index: int, visited: List[bool]) -> List[int]:
    return [nb for nb in grid.adjacent_indices(index) if not visited[nb]]


def greedy_walk(grid: Grid, start: int, rng: random.Random, budget: int) -> List[int]:
    """Step to a random unvisited neighbor until stuck or out of steps."""
    visited = [False] * grid.size
    visited[start] = True
    path = [start]
    for _ in range(budget):
        options = _unvisited(grid, path[-1], visited)
        if not options:
            break
        rng.shuffle(options)
        nxt = options[0]
        visited[nxt] = True
        path.append(nxt)
    return path


def depth_limited_dfs(
    grid: Grid, start: int, rng: random.Random, depth_cap: int, max_expansions: int
) -> List[int]:
    """
    Randomized DFS that stops once a path of ``depth_cap`` cells is found.

    Returns the longest path seen within ``max_expansions`` moves.
    """
    visited = [False] * grid.size
    visited[start] = True
    path = [start]
    best = [start]
    first = _unvisited(grid, start, visited)
    rng.shuffle(first)
    stack = [first]
    expansions = 0

    while stack and expansions < max_expansions and len(best) < depth_cap:
        moves = stack[-1]
        if not moves:
            stack.pop()
            visited[path.pop()] = False
            continue
        nxt = moves.pop()
        if visited[nxt]:
            continue
        expansions += 1
        visited[nxt] = True
        path.append(nxt)
        if len(path) > len(best):
            best = list(path)
        options = _unvisited(grid, nxt, visited)
        rng.shuffle(options)
        stack.append(options)
    return best


def greedy_path(
    grid: Grid,
    start: Sequence[int],
    mode: str = MODE_COMPLETE,
    rng: Optional[random.Random] = None,
    config: Optional[SearchConfig] = None,
    sink: Optional[DiagnosticsSink] = None,
) -> List[Cell]:
    """
    Randomized greedy path.

    A shuffled greedy walk runs first; when it covers less than
    ``config.greedy_repair_ratio`` of the grid a depth-limited DFS is tried
    from the start and the longer candidate is kept. In complete mode the
    winner is then tail-grafted toward full coverage.
    """
    check_mode(mode)
    config = config or SearchConfig()
    rng = make_rng(rng)
    log = resolve_sink(sink, "greedy")
    s = grid.index_of(start)
    n = grid.size

    budget = max(config.greedy_min_steps, config.greedy_step_factor * n)
    best = greedy_walk(grid, s, rng, budget)
    log.debug("walk", covered=len(best), total=n, budget=budget)

    if len(best) < config.greedy_repair_ratio * n:
        cap = min(config.dfs_depth_cap, n)
        deep = depth_limited_dfs(grid, s, rng, cap, config.dfs_max_expansions)
        log.debug("depth_limited", covered=len(deep), cap=cap)
        if len(deep) > len(best):
            best = deep

    if mode == MODE_COMPLETE and len(best) < n:
        visited = mark_visited(grid, best)
        added = graft_tail(grid, best, visited, rng, config.repair_max_rotations)
        log.debug("grafted", added=added, covered=len(best), total=n)

    return finalize(grid, best, s, log, "greedy")
