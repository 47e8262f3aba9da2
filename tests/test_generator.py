"""Tests for generate_path and GenerationResult."""

import json
import threading

import pytest

from conftest import assert_valid_path
from cubepath.config import EngineConfig
from cubepath.core.grid import build_grid
from cubepath.errors import (
    INCOMPLETE_PATH,
    INFEASIBLE_START,
    ISSUE_CODES,
    InvalidStartCell,
    NoStartCell,
)
from cubepath.pipeline.generator import Issue, generate_path


class TestCompleteMode:
    def test_cube_from_corner_covers_everything(self, cube3):
        result = generate_path(cube3, (0, 0, 0), seed=3)
        assert result.covered == 27
        assert result.complete
        assert result.issues == []
        assert result.coverage_label == "27/27"
        assert_valid_path(cube3, result.path, (0, 0, 0))

    def test_even_grid_any_start(self):
        grid = build_grid(2, 2, 3)
        result = generate_path(grid, (1, 0, 1), seed=0)
        assert result.verdict.color_counts == {"even": 6, "odd": 6}
        assert result.covered == 12
        assert_valid_path(grid, result.path, (1, 0, 1))

    def test_infeasible_start_returns_single_cell(self, cube3, sink):
        result = generate_path(cube3, (1, 0, 0), seed=0, sink=sink)
        assert [tuple(c) for c in result.path] == [(1, 0, 0)]
        assert result.has_issue(INFEASIBLE_START)
        assert not result.verdict.can_generate
        assert sink.find("infeasible_start")

    @pytest.mark.parametrize("strategy", ["snake", "backtracking", "greedy"])
    def test_explicit_strategies(self, strategy, fast_config):
        grid = build_grid(3, 3, 2)
        result = generate_path(grid, (0, 0, 0), strategy=strategy, seed=5, config=fast_config)
        assert result.strategy == strategy
        assert_valid_path(grid, result.path, (0, 0, 0))

    def test_auto_reports_snake(self, cube3):
        assert generate_path(cube3, (0, 0, 0), seed=1).strategy == "snake"

    def test_cancelled_search_reports_incomplete(self, cube3, sink):
        cancel = threading.Event()
        cancel.set()
        result = generate_path(cube3, (0, 0, 0), strategy="backtracking", seed=0, sink=sink, cancel=cancel)
        assert result.covered == 1
        assert result.has_issue(INCOMPLETE_PATH)
        issue = [i for i in result.issues if i.code == INCOMPLETE_PATH][0]
        assert "1/27" in issue.message
        assert issue.detail == {"covered": 1, "total": 27}
        assert sink.find("incomplete_path")


class TestRandomMode:
    def test_path_is_valid(self):
        grid = build_grid(5, 4, 3)
        result = generate_path(grid, (2, 1, 1), mode="random", seed=11)
        assert result.mode == "random"
        assert result.strategy == "greedy"
        assert not result.has_issue(INCOMPLETE_PATH)
        assert_valid_path(grid, result.path, (2, 1, 1))

    def test_minority_start_allowed(self, cube3):
        result = generate_path(cube3, (1, 0, 0), mode="random", seed=2)
        assert not result.has_issue(INFEASIBLE_START)
        assert result.covered >= 2

    def test_short_walk_is_retried(self, sink):
        grid = build_grid(8, 8, 8)
        config = EngineConfig()
        config.search.random_retry_ratio = 1.0
        result = generate_path(grid, (0, 0, 0), mode="random", seed=4, config=config, sink=sink)
        events = sink.find("random_retry")
        assert len(events) == 1
        assert events[0].fields["minimum"] == 512
        assert result.covered == max(events[0].fields["first"], events[0].fields["second"])

    def test_same_seed_same_path(self):
        grid = build_grid(4, 4, 4)
        a = generate_path(grid, (1, 2, 3), mode="random", seed=99)
        b = generate_path(grid, (1, 2, 3), mode="random", seed=99)
        assert a.path == b.path

    def test_seed_is_drawn_when_absent(self, cube3):
        result = generate_path(cube3, (0, 0, 0), mode="random")
        assert isinstance(result.seed, int)


class TestRequestErrors:
    def test_missing_start(self, cube3):
        with pytest.raises(NoStartCell):
            generate_path(cube3, None)

    def test_start_outside_grid(self, cube3):
        with pytest.raises(InvalidStartCell):
            generate_path(cube3, (3, 0, 0))

    def test_unknown_mode(self, cube3):
        with pytest.raises(ValueError):
            generate_path(cube3, (0, 0, 0), mode="spiral")

    def test_unknown_strategy(self, cube3):
        with pytest.raises(ValueError):
            generate_path(cube3, (0, 0, 0), strategy="astar")

    def test_random_mode_rejects_snake(self, cube3):
        with pytest.raises(ValueError):
            generate_path(cube3, (0, 0, 0), mode="random", strategy="snake")


def test_result_serializes_to_json(cube3):
    result = generate_path(cube3, (1, 0, 0), seed=0)
    data = json.loads(json.dumps(result.to_dict()))
    assert data["path"] == [[1, 0, 0]]
    assert data["total"] == 27
    assert data["complete"] is False
    assert data["issues"][0]["code"] == INFEASIBLE_START
    assert data["verdict"]["can_generate"] is False


def test_issue_codes_are_checked():
    for code in ISSUE_CODES:
        assert Issue(code, "message").code == code
    with pytest.raises(ValueError):
        Issue("too_slow", "message")
