"""
Progressive draw-in of a freshly generated path.
"""

from dataclasses import dataclass
from typing import Iterator, List, Sequence


@dataclass
class RevealStep:
    """One frame of the reveal: the first ``count`` cells are shown."""
    count: int
    cells: List[Sequence[int]]
    delay_ms: float


def reveal_delay_ms(
    length: int,
    min_ms: float = 5.0,
    max_ms: float = 30.0,
    budget_ms: float = 200.0,
) -> float:
    """Per-step delay; longer paths reveal faster."""
    if length <= 0:
        return max_ms
    return max(min_ms, min(max_ms, budget_ms / length))


def reveal_schedule(
    path: Sequence[Sequence[int]],
    min_ms: float = 5.0,
    max_ms: float = 30.0,
    budget_ms: float = 200.0,
) -> Iterator[RevealStep]:
    """Yield growing prefixes of ``path``, from two cells up to the whole path."""
    if len(path) <= 1:
        return
    delay = reveal_delay_ms(len(path), min_ms, max_ms, budget_ms)
    for count in range(2, len(path) + 1):
        yield RevealStep(count=count, cells=list(path[:count]), delay_ms=delay)


def reveal_from_config(path: Sequence[Sequence[int]], config) -> Iterator[RevealStep]:
    """Reveal schedule using the delays from a PlaybackConfig."""
    return reveal_schedule(
        path,
        min_ms=config.reveal_min_ms,
        max_ms=config.reveal_max_ms,
        budget_ms=config.reveal_budget_ms,
    )
