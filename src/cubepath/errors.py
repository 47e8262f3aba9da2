"""
Exceptions and issue codes used across cubepath.

Exceptions are raised only for caller mistakes (bad dimensions, missing or
out-of-grid start cells, malformed configuration). Search shortfalls are never
raised: they are attached to a generation result as issue codes.
"""

# ---------- Issue codes ----------

INFEASIBLE_START = "infeasible_start"
INCOMPLETE_PATH = "incomplete_path"
DISCONTINUOUS_PATH = "discontinuous_path"
DUPLICATE_CELL = "duplicate_cell"
OUT_OF_BOUNDS = "out_of_bounds"

ISSUE_CODES = (
    INFEASIBLE_START,
    INCOMPLETE_PATH,
    DISCONTINUOUS_PATH,
    DUPLICATE_CELL,
    OUT_OF_BOUNDS,
)


class CubePathError(Exception):
    """Base class for all cubepath exceptions."""


class InvalidDimension(CubePathError, ValueError):
    """Grid dimension outside the supported range."""

    def __init__(self, axis: str, value, low: int, high: int):
        self.axis = axis
        self.value = value
        self.low = low
        self.high = high
        super().__init__(f"{axis}={value!r} is outside [{low}, {high}]")


class NoStartCell(CubePathError, ValueError):
    """Path construction requested without a start cell."""

    def __init__(self, message: str = "a start cell is required"):
        super().__init__(message)


class InvalidStartCell(CubePathError, ValueError):
    """Start cell does not belong to the grid."""

    def __init__(self, cell, dims):
        self.cell = cell
        self.dims = dims
        super().__init__(f"start {tuple(cell)} is outside grid {dims[0]}x{dims[1]}x{dims[2]}")


class ConfigError(CubePathError, ValueError):
    """Malformed configuration file."""
