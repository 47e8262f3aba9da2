"""
cubepath: Hamiltonian and self-avoiding paths on 3-D lattice grids.

- core: grid model, parity feasibility, validation, manual drawing session
- construction: backtracking, greedy and layer-sweep path constructors
- playback: timed marker engine and reveal schedule
- pipeline: generate_path orchestration and batch sweeps
"""

from .config import EngineConfig, load_config
from .construction import MODE_COMPLETE, MODE_RANDOM, STRATEGIES
from .core import (
    Cell,
    FeasibilityVerdict,
    Grid,
    PathSession,
    PathViolation,
    analyze,
    analyze_dimensions,
    build_grid,
    coverage,
    is_valid_path,
    truncate_at_violation,
    validate_path,
)
from .diagnostics import DiagnosticsSink, NullSink
from .errors import (
    ConfigError,
    CubePathError,
    InvalidDimension,
    InvalidStartCell,
    NoStartCell,
)
from .pipeline import GenerationResult, Issue, generate_path
from .playback import PlaybackEngine, PlaybackFrame, reveal_schedule

__version__ = "0.1.0"

__all__ = [
    "Cell",
    "ConfigError",
    "CubePathError",
    "DiagnosticsSink",
    "EngineConfig",
    "FeasibilityVerdict",
    "GenerationResult",
    "Grid",
    "InvalidDimension",
    "InvalidStartCell",
    "Issue",
    "MODE_COMPLETE",
    "MODE_RANDOM",
    "NoStartCell",
    "NullSink",
    "PathSession",
    "PathViolation",
    "PlaybackEngine",
    "PlaybackFrame",
    "STRATEGIES",
    "analyze",
    "analyze_dimensions",
    "build_grid",
    "coverage",
    "generate_path",
    "is_valid_path",
    "load_config",
    "reveal_schedule",
    "truncate_at_violation",
    "validate_path",
]
