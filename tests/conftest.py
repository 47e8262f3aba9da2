"""Shared fixtures for the cubepath test suite."""

import os
import random

import pytest

from cubepath.config import EngineConfig, SearchConfig
from cubepath.core.grid import build_grid
from cubepath.diagnostics import DiagnosticsSink

REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


@pytest.fixture
def cube3():
    return build_grid(3, 3, 3)


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def sink():
    return DiagnosticsSink("test", level="debug")


@pytest.fixture
def fast_search():
    """Search budgets small enough for property-style loops."""
    return SearchConfig(backtrack_timeout_sec=0.2, repair_max_rotations=300)


@pytest.fixture
def fast_config(fast_search):
    config = EngineConfig()
    config.search = fast_search
    return config


@pytest.fixture
def default_config_path():
    return os.path.join(REPO_ROOT, "configs", "default.yaml")


def assert_valid_path(grid, path, start=None):
    """Consecutive cells adjacent, no repeats, all in bounds, correct start."""
    assert len(path) >= 1
    if start is not None:
        assert tuple(path[0]) == tuple(start)
    seen = set()
    for i, cell in enumerate(path):
        key = tuple(cell)
        assert grid.contains(key), f"{key} out of bounds"
        assert key not in seen, f"duplicate {key} at {i}"
        seen.add(key)
        if i:
            prev = path[i - 1]
            assert sum(abs(a - b) for a, b in zip(prev, key)) == 1, f"gap at {i}"
