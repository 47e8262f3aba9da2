"""Tests for the batch coverage sweep."""

import pytest

from cubepath.pipeline.sweep import (
    SweepResult,
    execute_sweep_task,
    generate_sweep_tasks,
    run_sweep,
    summarize_sweep,
)


class TestTaskGeneration:
    def test_corner_starts(self):
        tasks = generate_sweep_tasks([(3, 3, 3), (2, 3, 4)], starts="corners")
        assert len(tasks) == 16
        assert tasks[0].task_id == "3x3x3_0-0-0_complete_s0"

    def test_feasible_starts_on_odd_cube(self):
        tasks = generate_sweep_tasks([(3, 3, 3)], starts="feasible")
        assert len(tasks) == 14
        assert all(sum(t.start) % 2 == 0 for t in tasks)

    def test_modes_and_seeds_multiply(self):
        tasks = generate_sweep_tasks(
            [(2, 2, 2)], starts="all", modes=("complete", "random"),
            strategy="backtracking", seeds=2, base_seed=10,
        )
        assert len(tasks) == 8 * 2 * 2
        assert {t.seed for t in tasks} == {10, 11}
        assert {t.strategy for t in tasks if t.mode == "random"} == {"auto"}
        assert {t.strategy for t in tasks if t.mode == "complete"} == {"backtracking"}

    def test_unknown_start_set(self):
        with pytest.raises(ValueError):
            generate_sweep_tasks([(3, 3, 3)], starts="edges")


def test_execute_task(fast_config):
    task = generate_sweep_tasks([(3, 3, 3)], starts="corners")[0]
    result = execute_sweep_task(task, fast_config)
    assert result.feasible
    assert result.complete
    assert result.issues == []


def test_run_sweep_in_process(fast_config):
    tasks = generate_sweep_tasks([(2, 2, 3)], starts="corners")
    results = run_sweep(tasks, config=fast_config, progress=False)
    assert [r.task_id for r in results] == [t.task_id for t in tasks]
    assert all(r.covered == 12 for r in results)


def test_summarize():
    results = [
        SweepResult("a", (3, 3, 3), (0, 0, 0), "complete", True, 27, 27, 0.01),
        SweepResult("b", (3, 3, 3), (1, 0, 0), "complete", False, 1, 27, 0.03, ["infeasible_start"]),
        SweepResult("c", (2, 2, 2), (0, 0, 0), "random", True, 4, 8, 0.02),
    ]
    rows = summarize_sweep(results)
    assert [(r["dims"], r["mode"]) for r in rows] == [("2x2x2", "random"), ("3x3x3", "complete")]
    cube = rows[1]
    assert cube["runs"] == 2
    assert cube["feasible"] == 1
    assert cube["complete"] == 1
    assert cube["mean_coverage"] == pytest.approx((1 + 1 / 27) / 2)
    assert cube["min_coverage"] == pytest.approx(1 / 27)
    assert cube["mean_runtime_sec"] == pytest.approx(0.02)
