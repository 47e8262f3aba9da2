"""
Pipeline module for path generation and batch sweeps.
"""

from .generator import GenerationResult, Issue, generate_path
from .sweep import (
    SweepResult,
    SweepTask,
    execute_sweep_task,
    generate_sweep_tasks,
    run_sweep,
    summarize_sweep,
)

__all__ = [
    "GenerationResult",
    "Issue",
    "generate_path",
    "SweepResult",
    "SweepTask",
    "execute_sweep_task",
    "generate_sweep_tasks",
    "run_sweep",
    "summarize_sweep",
]
