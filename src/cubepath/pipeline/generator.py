"""
Path generation entry point.

Runs the feasibility check, dispatches to a constructor, validates the
result and collects every shortfall as an issue on the returned
GenerationResult. Nothing here raises for search failures: the worst
outcome is a single-cell path.
"""

import random
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from ..config import EngineConfig
from ..construction import (
    MODE_COMPLETE,
    MODE_RANDOM,
    STRATEGIES,
    STRATEGY_AUTO,
    backtracking_path,
    greedy_path,
    snake_path,
)
from ..construction.common import check_mode
from ..core.feasibility import FeasibilityVerdict, analyze
from ..core.grid import Cell, Grid
from ..core.validation import REASON_DUPLICATE, REASON_OUT_OF_BOUNDS, truncate_at_violation
from ..diagnostics import DiagnosticsSink, resolve_sink
from ..errors import (
    DISCONTINUOUS_PATH,
    DUPLICATE_CELL,
    INCOMPLETE_PATH,
    INFEASIBLE_START,
    ISSUE_CODES,
    OUT_OF_BOUNDS,
    InvalidStartCell,
    NoStartCell,
)


@dataclass
class Issue:
    """A non-fatal problem with a generated path."""
    code: str
    message: str
    detail: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.code not in ISSUE_CODES:
            raise ValueError(f"Unknown issue code: {self.code}. Available: {list(ISSUE_CODES)}")

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "detail": dict(self.detail)}


@dataclass
class GenerationResult:
    """Outcome of one generate_path call."""
    path: List[Cell]
    verdict: FeasibilityVerdict
    mode: str
    strategy: str
    total: int
    seed: Optional[int] = None
    issues: List[Issue] = field(default_factory=list)
    elapsed_sec: float = 0.0

    @property
    def covered(self) -> int:
        return len(self.path)

    @property
    def complete(self) -> bool:
        return self.covered == self.total

    @property
    def coverage_label(self) -> str:
        return f"{self.covered}/{self.total}"

    def has_issue(self, code: str) -> bool:
        return any(issue.code == code for issue in self.issues)

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary for serialization."""
        return {
            "path": [list(c) for c in self.path],
            "verdict": self.verdict.to_dict(),
            "mode": self.mode,
            "strategy": self.strategy,
            "covered": self.covered,
            "total": self.total,
            "complete": self.complete,
            "seed": self.seed,
            "issues": [issue.to_dict() for issue in self.issues],
            "elapsed_sec": round(self.elapsed_sec, 6),
        }


def _construct(
    grid: Grid,
    start: Cell,
    mode: str,
    strategy: str,
    rng: random.Random,
    config: EngineConfig,
    sink: Optional[DiagnosticsSink],
    cancel: Optional[threading.Event],
) -> List[Cell]:
    search = config.search
    if mode == MODE_RANDOM or strategy == "greedy":
        return greedy_path(grid, start, mode, rng=rng, config=search, sink=sink)
    if strategy == "backtracking":
        return backtracking_path(grid, start, rng=rng, config=search, sink=sink, cancel=cancel)
    return snake_path(grid, start, rng=rng, config=search, sink=sink, cancel=cancel)


def generate_path(
    grid: Grid,
    start: Optional[Sequence[int]],
    mode: str = MODE_COMPLETE,
    strategy: str = STRATEGY_AUTO,
    seed: Optional[int] = None,
    rng: Optional[random.Random] = None,
    config: Optional[EngineConfig] = None,
    sink: Optional[DiagnosticsSink] = None,
    cancel: Optional[threading.Event] = None,
) -> GenerationResult:
    """
    Build a path on ``grid`` from ``start``.

    Args:
        grid: Grid to cover
        start: Start cell
        mode: "random" for a self-avoiding walk, "complete" to aim for every cell
        strategy: Complete-mode constructor: "auto" (snake), "snake",
            "backtracking" or "greedy"; random mode accepts "auto"/"greedy"
        seed: Seed for a fresh generator when ``rng`` is not given
        rng: Generator owned by this call
        config: Engine configuration (defaults when None)
        sink: Diagnostics sink
        cancel: Event that abandons an in-flight backtracking search

    Returns:
        GenerationResult

    Raises:
        NoStartCell: if ``start`` is None
        InvalidStartCell: if ``start`` is outside the grid
        ValueError: for an unknown mode or strategy
    """
    if start is None:
        raise NoStartCell()
    if not grid.contains(start):
        raise InvalidStartCell(start, grid.dims)
    check_mode(mode)
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown strategy: {strategy}. Available: {list(STRATEGIES)}")
    if mode == MODE_RANDOM and strategy not in (STRATEGY_AUTO, "greedy"):
        raise ValueError(f"Strategy '{strategy}' is not available in random mode")

    config = config or EngineConfig()
    log = resolve_sink(sink, "generator")
    if rng is None:
        if seed is None:
            seed = random.SystemRandom().randrange(2 ** 32)
        rng = random.Random(seed)
    start = Cell(start[0], start[1], start[2])
    used = "greedy" if mode == MODE_RANDOM else ("snake" if strategy == STRATEGY_AUTO else strategy)
    t0 = time.perf_counter()

    verdict = analyze(grid, start)
    issues: List[Issue] = []
    log.info(
        "request",
        dims="x".join(str(d) for d in grid.dims),
        start=",".join(str(v) for v in start),
        mode=mode,
        strategy=used,
        feasible=verdict.can_generate,
    )

    if mode == MODE_COMPLETE and not verdict.can_generate:
        issues.append(Issue(INFEASIBLE_START, verdict.message, {
            "start_color": verdict.start_color,
            "required_color": verdict.required_color,
        }))
        log.warn("infeasible_start", message=verdict.message)
        return GenerationResult(
            path=[start],
            verdict=verdict,
            mode=mode,
            strategy=used,
            total=grid.size,
            seed=seed,
            issues=issues,
            elapsed_sec=time.perf_counter() - t0,
        )

    path = _construct(grid, start, mode, strategy, rng, config, sink, cancel)

    if mode == MODE_RANDOM:
        minimum = max(2, int(grid.size * config.search.random_retry_ratio))
        if len(path) < minimum:
            retry_rng = random.Random(rng.getrandbits(32))
            retry = greedy_path(grid, start, mode, rng=retry_rng, config=config.search, sink=sink)
            log.info("random_retry", first=len(path), second=len(retry), minimum=minimum)
            if len(retry) > len(path):
                path = retry

    path, violation = truncate_at_violation(path, grid, sink)
    if violation is not None:
        if violation.reason == REASON_DUPLICATE:
            code = DUPLICATE_CELL
        elif violation.reason == REASON_OUT_OF_BOUNDS:
            code = OUT_OF_BOUNDS
        else:
            code = DISCONTINUOUS_PATH
        issues.append(Issue(code, str(violation), {"index": violation.index}))
        if not path:
            path = [start]

    if mode == MODE_COMPLETE and len(path) < grid.size:
        label = f"{len(path)}/{grid.size}"
        issues.append(Issue(INCOMPLETE_PATH, f"covered {label} cells", {
            "covered": len(path),
            "total": grid.size,
        }))
        log.warn("incomplete_path", covered=label)

    elapsed = time.perf_counter() - t0
    log.info("done", covered=len(path), total=grid.size, elapsed=round(elapsed, 4))
    return GenerationResult(
        path=path,
        verdict=verdict,
        mode=mode,
        strategy=used,
        total=grid.size,
        seed=seed,
        issues=issues,
        elapsed_sec=elapsed,
    )
