"""
Deterministic layer sweep ("snake") path construction.

The box is cut into layers along one axis. Each layer is walked row by row,
alternating direction, starting from the cell where the path enters it; the
next layer is entered directly above the exit cell. When the start does not
sit on a boundary layer, the layers behind it are covered first as columns
along the layer axis, then the sweep continues forward.

Layer patterns (all in canonical coordinates, then flipped and transposed to
match the actual entry cell):

- corner entry: plain boustrophedon rows.
- edge entry at an even column: finish the entry row, come back along the
  second row, then zig-zag the two rows down to column 0 and continue.
- edge entry in a layer with an even number of rows: run the entry row to
  column 0, snake the block below it, then snake the columns on the far
  side back up.
- interior entry: run the entry row to column 0, cover the rows above, drop
  back onto the far end of the entry row, then snake the remaining columns.

Planned cells that are not adjacent to the head are bridged with a BFS
through unvisited cells.
"""

import random
import threading
import time
from functools import lru_cache
from typing import Callable, List, Optional, Sequence, Tuple

from ..config import SearchConfig
from ..core.grid import Cell, Grid
from ..diagnostics import DiagnosticsSink, resolve_sink
from .backtracking import IDENTITY, backtracking_path, search_hamiltonian
from .common import bfs_connect, finalize, graft_tail, make_rng, mark_visited

Coord2 = Tuple[int, int]
Coord3 = Tuple[int, int, int]


# ---------- Layer patterns ----------

def _boustrophedon(R: int, C: int) -> List[Coord2]:
    order = []
    for a in range(R):
        cols = range(C) if a % 2 == 0 else range(C - 1, -1, -1)
        order.extend((a, b) for b in cols)
    return order


def _edge_entry(R: int, C: int, b0: int) -> List[Coord2]:
    """Entry at (0, b0) with b0 even and strictly inside the row."""
    order = [(0, b) for b in range(b0, C)]
    order += [(1, b) for b in range(C - 1, b0 - 1, -1)]
    for j, b in enumerate(range(b0 - 1, -1, -1)):
        order += [(1, b), (0, b)] if j % 2 == 0 else [(0, b), (1, b)]
    # Now at (1, 0)
    forward = True
    for a in range(2, R):
        cols = range(C) if forward else range(C - 1, -1, -1)
        order.extend((a, b) for b in cols)
        forward = not forward
    return order


def _edge_entry_split(R: int, C: int, b0: int) -> List[Coord2]:
    """Entry at (0, b0) strictly inside the row, R even."""
    order = [(0, b) for b in range(b0, -1, -1)]
    for i, a in enumerate(range(1, R)):
        cols = range(b0 + 1) if i % 2 == 0 else range(b0, -1, -1)
        order.extend((a, b) for b in cols)
    # Now at (R - 1, b0); sweep the columns right of the entry bottom-up
    for i, a in enumerate(range(R - 1, -1, -1)):
        cols = range(b0 + 1, C) if i % 2 == 0 else range(C - 1, b0, -1)
        order.extend((a, b) for b in cols)
    return order


def _interior_entry(R: int, C: int, a0: int, b0: int) -> List[Coord2]:
    """Entry strictly inside the layer; needs (C even or a0 odd) and C-1-b0 odd."""
    order = [(a0, b) for b in range(b0, -1, -1)]

    # Rows above the entry row, ending at (a0 - 1, C - 1)
    if C % 2 == 0:
        for j, b in enumerate(range(C)):
            rows = range(a0 - 1, -1, -1) if j % 2 == 0 else range(a0)
            order.extend((a, b) for a in rows)
    else:
        order.extend((a, 0) for a in range(a0 - 1, -1, -1))
        for a in range(a0):
            cols = range(1, C) if a % 2 == 0 else range(C - 1, 0, -1)
            order.extend((a, b) for b in cols)

    # Columns right of the entry, from the entry row to the bottom
    for i, b in enumerate(range(C - 1, b0, -1)):
        rows = range(a0, R) if i % 2 == 0 else range(R - 1, a0 - 1, -1)
        order.extend((a, b) for a in rows)

    # Remaining columns below the entry row
    for j, b in enumerate(range(b0, -1, -1)):
        rows = range(R - 1, a0, -1) if j % 2 == 0 else range(a0 + 1, R)
        order.extend((a, b) for a in rows)
    return order


def _canonical_plans(R: int, C: int, a0: int, b0: int) -> List[List[Coord2]]:
    if a0 == 0 and b0 == 0:
        return [_boustrophedon(R, C)]
    plans = []
    if a0 == 0 and 0 < b0 < C - 1:
        if b0 % 2 == 0:
            plans.append(_edge_entry(R, C, b0))
        if R % 2 == 0:
            plans.append(_edge_entry_split(R, C, b0))
    elif (0 < a0 < R - 1 and 0 < b0 < C - 1
            and (C % 2 == 0 or a0 % 2 == 1) and (C - 1 - b0) % 2 == 1):
        plans.append(_interior_entry(R, C, a0, b0))
    return plans


@lru_cache(maxsize=4096)
def layer_plans(nr: int, nc: int, r0: int, c0: int) -> Tuple[Tuple[Coord2, ...], ...]:
    """
    Every pattern covering an nr x nc layer from entry (r0, c0).

    Patterns are tried under all row/column flips and the transpose.
    Returns an empty tuple when none applies.
    """
    plans = []
    seen = set()
    for transpose in (False, True):
        R, C = (nc, nr) if transpose else (nr, nc)
        a0, b0 = (c0, r0) if transpose else (r0, c0)
        for flip_a in (False, True):
            for flip_b in (False, True):
                ca = R - 1 - a0 if flip_a else a0
                cb = C - 1 - b0 if flip_b else b0
                for plan in _canonical_plans(R, C, ca, cb):
                    mapped = []
                    for a, b in plan:
                        if flip_a:
                            a = R - 1 - a
                        if flip_b:
                            b = C - 1 - b
                        mapped.append((b, a) if transpose else (a, b))
                    key = tuple(mapped)
                    if key not in seen:
                        seen.add(key)
                        plans.append(key)
    return tuple(plans)


def sweep_order(nr: int, nc: int, r0: int, c0: int, rng: random.Random) -> List[Coord2]:
    """Row-by-row visiting order for entries no pattern covers."""
    if r0 == 0:
        dr = 1
    elif r0 == nr - 1:
        dr = -1
    else:
        dr = rng.choice((1, -1))
    rows = [r0 + k * dr for k in range(1, nr) if 0 <= r0 + k * dr < nr]
    rows += [r0 - k * dr for k in range(1, nr) if 0 <= r0 - k * dr < nr]

    if c0 == 0:
        dc = 1
    elif c0 == nc - 1:
        dc = -1
    else:
        dc = rng.choice((1, -1))
    order = [(r0, c) for c in range(c0, nc if dc > 0 else -1, dc)]
    order += [(r0, c) for c in range(c0 - dc, -1 if dc > 0 else nc, -dc)]

    for r in rows:
        last_c = order[-1][1]
        cols = range(nc) if last_c <= (nc - 1) / 2 else range(nc - 1, -1, -1)
        order.extend((r, c) for c in cols)
    return order


def _layer_plan(
    nr: int,
    nc: int,
    entry: Coord2,
    rng: random.Random,
    accept: Optional[Callable[[Coord2], bool]] = None,
) -> Tuple[List[Coord2], bool]:
    """Pick a covering pattern for the layer, preferring exits ``accept`` likes."""
    plans = layer_plans(nr, nc, entry[0], entry[1])
    if not plans:
        return sweep_order(nr, nc, entry[0], entry[1], rng), False
    pool = plans
    if accept is not None:
        pool = [p for p in plans if accept(p[-1])] or plans
    return list(rng.choice(pool)), True


# ---------- Box plans ----------

def plan_box(
    dims: Sequence[int],
    start: Sequence[int],
    axis: int,
    direction: int,
    rng: random.Random,
) -> Tuple[List[Coord3], bool]:
    """
    Visiting order for the whole box with layers stacked along ``axis``.

    Layers from the start back to the boundary opposite ``direction`` are
    covered as columns; the layers ahead are swept one at a time.

    Returns:
        (order, perfect) where ``perfect`` means consecutive cells are all
        adjacent, so the order is itself a Hamiltonian path.
    """
    row_axis, col_axis = [a for a in range(3) if a != axis]
    nl, nr, nc = dims[axis], dims[row_axis], dims[col_axis]
    sl = start[axis]
    if direction > 0:
        behind = list(range(sl, -1, -1))
        ahead = list(range(sl + 1, nl))
    else:
        behind = list(range(sl, nl))
        ahead = list(range(sl - 1, -1, -1))

    def compose(layer: int, r: int, c: int) -> Coord3:
        coords = [0, 0, 0]
        coords[axis] = layer
        coords[row_axis] = r
        coords[col_axis] = c
        return (coords[0], coords[1], coords[2])

    def plannable(rc: Coord2) -> bool:
        return bool(layer_plans(nr, nc, rc[0], rc[1]))

    plan, perfect = _layer_plan(
        nr, nc, (start[row_axis], start[col_axis]), rng, plannable if ahead else None
    )
    if ahead and len(behind) > 1 and len(plan) % 2 == 1:
        perfect = False

    order: List[Coord3] = []
    for k, (r, c) in enumerate(plan):
        layers = behind if k % 2 == 0 else behind[::-1]
        order.extend(compose(layer, r, c) for layer in layers)

    entry = plan[-1]
    for i, layer in enumerate(ahead):
        accept = plannable if i < len(ahead) - 1 else None
        plan, ok = _layer_plan(nr, nc, entry, rng, accept)
        perfect = perfect and ok
        order.extend(compose(layer, r, c) for r, c in plan)
        entry = plan[-1]
    return order, perfect


def follow_plan(grid: Grid, start: int, order: Sequence[Coord3]) -> List[int]:
    """Walk ``order`` from ``start``, bridging gaps through unvisited cells."""
    visited = [False] * grid.size
    visited[start] = True
    path = [start]
    for x, y, z in order:
        target = grid.index(x, y, z)
        if visited[target]:
            continue
        head = path[-1]
        if target in grid.adjacent_indices(head):
            visited[target] = True
            path.append(target)
            continue
        route = bfs_connect(grid, head, target, visited)
        if route is None:
            continue
        for cell in route:
            visited[cell] = True
        path.extend(route)
    return path


# ---------- Constructor ----------

def snake_path(
    grid: Grid,
    start: Sequence[int],
    rng: Optional[random.Random] = None,
    config: Optional[SearchConfig] = None,
    sink: Optional[DiagnosticsSink] = None,
    cancel: Optional[threading.Event] = None,
) -> List[Cell]:
    """
    Hamiltonian path by layer sweep.

    Grids no larger than 2 on every axis use plain randomized DFS. Sweeps
    that leave cells unvisited fall back to bounded backtracking on small
    grids, and are tail-grafted and reported on larger ones.
    """
    config = config or SearchConfig()
    rng = make_rng(rng)
    log = resolve_sink(sink, "snake")
    s = grid.index_of(start)
    n = grid.size
    dims = grid.dims

    if max(dims) <= 2:
        order = list(IDENTITY)
        rng.shuffle(order)
        deadline = time.monotonic() + config.backtrack_timeout_sec
        found, path, _ = search_hamiltonian(grid, s, order, deadline, cancel)
        if not found:
            graft_tail(grid, path, mark_visited(grid, path), rng, config.repair_max_rotations)
        log.info("dfs", covered=len(path), total=n)
        return finalize(grid, path, s, log, "snake")

    candidates = []
    for axis in range(3):
        for direction in (1, -1):
            order, perfect = plan_box(dims, start, axis, direction, rng)
            classic = (
                (start[axis] == 0 and direction > 0)
                or (start[axis] == dims[axis] - 1 and direction < 0)
            )
            candidates.append((perfect, classic, axis, direction, order))
    rng.shuffle(candidates)

    pool = [c for c in candidates if c[0] and c[1]] or [c for c in candidates if c[0]]
    if pool:
        _, _, axis, direction, order = pool[0]
        path = follow_plan(grid, s, order)
    else:
        path, axis, direction = [s], candidates[0][2], candidates[0][3]
        for _, _, cand_axis, cand_direction, order in candidates:
            attempt = follow_plan(grid, s, order)
            if len(attempt) > len(path):
                path, axis, direction = attempt, cand_axis, cand_direction
    log.info(
        "sweep",
        axis="xyz"[axis],
        direction=direction,
        planned=bool(pool),
        covered=len(path),
        total=n,
    )

    result = finalize(grid, path, s, log, "snake")
    if len(result) == n:
        return result

    if max(dims) <= config.backtrack_max_dim:
        log.info("backtracking_fallback", covered=len(result), total=n)
        fallback = backtracking_path(grid, start, rng=rng, config=config, sink=sink, cancel=cancel)
        return fallback if len(fallback) > len(result) else result

    visited = mark_visited(grid, path)
    graft_tail(grid, path, visited, rng, config.repair_max_rotations)
    result = finalize(grid, path, s, log, "snake")
    if len(result) < n:
        log.warn("shortfall", covered=len(result), total=n)
    return result
