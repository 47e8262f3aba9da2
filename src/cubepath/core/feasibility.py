"""
Checkerboard parity test for Hamiltonian-path feasibility.

Cells are colored by the parity of x + y + z. A Hamiltonian path alternates
colors, so when the two classes differ by one cell the path must start (and
end) on the larger class. The test is a pre-filter: a positive verdict does
not prove that a path exists.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .grid import Grid

COLOR_NAMES = ("even", "odd")

MSG_ANY_START = "any cell may start"
MSG_MAJORITY_START = "start is on the majority color"
MSG_MINORITY_START = "start must be on the {color} color ({count} cells)"
MSG_THIN_SLAB = "a one-cell-thick slab with an odd side cannot be covered"
MSG_IMBALANCED = "color classes differ by more than one cell"


@dataclass
class FeasibilityVerdict:
    """Outcome of the parity test for one start cell."""
    can_generate: bool
    message: str
    color_counts: Dict[str, int] = field(default_factory=dict)
    start_color: str = "even"
    required_color: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        return {
            "can_generate": self.can_generate,
            "message": self.message,
            "color_counts": dict(self.color_counts),
            "start_color": self.start_color,
            "required_color": self.required_color,
        }


def color_counts(width: int, height: int, depth: int) -> Tuple[int, int]:
    """Number of (even, odd) cells in a width x height x depth box."""
    parity = np.indices((width, height, depth)).sum(axis=0) % 2
    odd = int(parity.sum())
    return int(parity.size) - odd, odd


def analyze_dimensions(
    width: int, height: int, depth: int, start: Sequence[int]
) -> FeasibilityVerdict:
    """
    Parity verdict for a box of the given size.

    Unlike ``Grid``, dimensions of 1 are accepted here so thin slabs can be
    evaluated.
    """
    dims = (width, height, depth)
    even, odd = color_counts(width, height, depth)
    counts = {"even": even, "odd": odd}
    start_color = COLOR_NAMES[(start[0] + start[1] + start[2]) % 2]

    if even > odd:
        required = "even"
    elif odd > even:
        required = "odd"
    else:
        required = None

    # Slab rule: applies before the count comparison
    for i, d in enumerate(dims):
        if d == 1 and any(dims[j] % 2 == 1 for j in range(3) if j != i):
            return FeasibilityVerdict(False, MSG_THIN_SLAB, counts, start_color, required)

    if required is None:
        return FeasibilityVerdict(True, MSG_ANY_START, counts, start_color, None)

    if abs(even - odd) > 1:
        return FeasibilityVerdict(False, MSG_IMBALANCED, counts, start_color, required)

    if start_color == required:
        return FeasibilityVerdict(True, MSG_MAJORITY_START, counts, start_color, required)

    message = MSG_MINORITY_START.format(color=required, count=counts[required])
    return FeasibilityVerdict(False, message, counts, start_color, required)


def analyze(grid: Grid, start: Sequence[int]) -> FeasibilityVerdict:
    """Parity verdict for starting a Hamiltonian path at ``start`` on ``grid``."""
    return analyze_dimensions(grid.width, grid.height, grid.depth, start)
