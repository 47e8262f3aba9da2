"""
Batch coverage sweep.

Generates one task per (grid size, start cell, mode, seed) combination, runs
them (optionally across worker processes) and aggregates coverage per grid.
"""

import time
from dataclasses import dataclass, field
from multiprocessing import Pool
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from ..config import EngineConfig
from ..core.feasibility import analyze_dimensions
from ..core.grid import build_grid
from .generator import generate_path

START_SETS = ("all", "feasible", "corners")


@dataclass
class SweepTask:
    """A single generation run."""
    task_id: str
    dims: Tuple[int, int, int]
    start: Tuple[int, int, int]
    mode: str
    strategy: str
    seed: int


@dataclass
class SweepResult:
    """Result of a single sweep task."""
    task_id: str
    dims: Tuple[int, int, int]
    start: Tuple[int, int, int]
    mode: str
    feasible: bool
    covered: int
    total: int
    runtime_sec: float
    issues: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return self.covered == self.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "dims": list(self.dims),
            "start": list(self.start),
            "mode": self.mode,
            "feasible": self.feasible,
            "covered": self.covered,
            "total": self.total,
            "runtime_sec": self.runtime_sec,
            "issues": list(self.issues),
        }


def _starts_for(dims: Tuple[int, int, int], which: str) -> List[Tuple[int, int, int]]:
    w, h, d = dims
    if which == "corners":
        return [(x, y, z) for x in (0, w - 1) for y in (0, h - 1) for z in (0, d - 1)]
    cells = [(x, y, z) for x in range(w) for y in range(h) for z in range(d)]
    if which == "feasible":
        return [c for c in cells if analyze_dimensions(w, h, d, c).can_generate]
    return cells


def generate_sweep_tasks(
    sizes: Iterable[Sequence[int]],
    starts: str = "feasible",
    modes: Sequence[str] = ("complete",),
    strategy: str = "auto",
    seeds: int = 1,
    base_seed: int = 0,
) -> List[SweepTask]:
    """
    Expand grid sizes into tasks.

    Args:
        sizes: Grid dimensions, each (width, height, depth)
        starts: "all", "feasible" (parity-feasible cells) or "corners"
        modes: Generation modes to run
        strategy: Complete-mode strategy
        seeds: Number of seeds per start
        base_seed: First seed value

    Returns:
        List of SweepTask objects
    """
    if starts not in START_SETS:
        raise ValueError(f"Unknown start set: {starts}. Available: {list(START_SETS)}")

    tasks: List[SweepTask] = []
    for size in sizes:
        dims = (int(size[0]), int(size[1]), int(size[2]))
        label = "x".join(str(d) for d in dims)
        for start in sorted(set(_starts_for(dims, starts))):
            for mode in modes:
                for k in range(seeds):
                    seed = base_seed + k
                    tasks.append(SweepTask(
                        task_id=f"{label}_{start[0]}-{start[1]}-{start[2]}_{mode}_s{seed}",
                        dims=dims,
                        start=start,
                        mode=mode,
                        strategy=strategy if mode == "complete" else "auto",
                        seed=seed,
                    ))
    return tasks


def execute_sweep_task(task: SweepTask, config: Optional[EngineConfig] = None) -> SweepResult:
    """Run one task and record its coverage."""
    config = config or EngineConfig()
    grid = build_grid(*task.dims, spacing=config.grid.spacing)
    t0 = time.time()
    result = generate_path(
        grid,
        task.start,
        mode=task.mode,
        strategy=task.strategy,
        seed=task.seed,
        config=config,
    )
    return SweepResult(
        task_id=task.task_id,
        dims=task.dims,
        start=task.start,
        mode=task.mode,
        feasible=result.verdict.can_generate,
        covered=result.covered,
        total=result.total,
        runtime_sec=time.time() - t0,
        issues=[issue.code for issue in result.issues],
    )


def _execute_packed(packed: Tuple[SweepTask, EngineConfig]) -> SweepResult:
    task, config = packed
    return execute_sweep_task(task, config)


def run_sweep(
    tasks: Sequence[SweepTask],
    config: Optional[EngineConfig] = None,
    workers: int = 1,
    progress: bool = True,
) -> List[SweepResult]:
    """
    Run every task, in-process or on a worker pool.

    Results are returned in task order.
    """
    config = config or EngineConfig()
    packed = [(task, config) for task in tasks]
    if workers <= 1 or len(tasks) <= 1:
        iterator = map(_execute_packed, packed)
        return list(tqdm(iterator, total=len(tasks), desc="Sweep", disable=not progress))

    with Pool(processes=workers) as pool:
        iterator = pool.imap(_execute_packed, packed)
        return list(tqdm(iterator, total=len(tasks), desc="Sweep", disable=not progress))


def summarize_sweep(results: Sequence[SweepResult]) -> List[Dict[str, Any]]:
    """
    Aggregate coverage per (grid, mode).

    Returns:
        One row per group with run counts, completion rate, mean/min coverage
        ratio and mean runtime.
    """
    groups: Dict[Tuple[Tuple[int, int, int], str], List[SweepResult]] = {}
    for r in results:
        groups.setdefault((r.dims, r.mode), []).append(r)

    rows = []
    for (dims, mode), group in sorted(groups.items()):
        ratios = np.array([r.covered / r.total for r in group], dtype=float)
        runtimes = np.array([r.runtime_sec for r in group], dtype=float)
        rows.append({
            "dims": "x".join(str(d) for d in dims),
            "mode": mode,
            "runs": len(group),
            "feasible": sum(1 for r in group if r.feasible),
            "complete": sum(1 for r in group if r.complete),
            "mean_coverage": float(ratios.mean()),
            "min_coverage": float(ratios.min()),
            "mean_runtime_sec": float(runtimes.mean()),
        })
    return rows
