"""
Core module containing the lattice model and path bookkeeping.

- grid: Cell and Grid, adjacency and positions
- feasibility: checkerboard parity verdicts
- validation: path checks, truncation and coverage
- session: hand-drawn path state
"""

from .feasibility import FeasibilityVerdict, analyze, analyze_dimensions, color_counts
from .grid import (
    DIRECTION_NAMES,
    DIRECTIONS,
    Cell,
    Grid,
    build_grid,
    parse_cell,
)
from .session import PathSession
from .validation import (
    PathViolation,
    are_adjacent,
    coverage,
    is_valid_path,
    manhattan,
    truncate_at_violation,
    validate_path,
)

__all__ = [
    "Cell",
    "DIRECTIONS",
    "DIRECTION_NAMES",
    "FeasibilityVerdict",
    "Grid",
    "PathSession",
    "PathViolation",
    "analyze",
    "analyze_dimensions",
    "are_adjacent",
    "build_grid",
    "color_counts",
    "coverage",
    "is_valid_path",
    "manhattan",
    "parse_cell",
    "truncate_at_violation",
    "validate_path",
]
