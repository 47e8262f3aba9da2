"""
Path constructors.

- backtracking: bounded explicit-stack DFS for small grids
- greedy: randomized walk with depth-limited repair
- snake: layer-by-layer boustrophedon sweep
- common: BFS bridging, tail grafting and result checks shared by all three
"""

from .backtracking import backtracking_path, search_hamiltonian, structural_class
from .common import MODE_COMPLETE, MODE_RANDOM, MODES, bfs_connect, graft_tail
from .greedy import greedy_path
from .snake import layer_plans, plan_box, snake_path

STRATEGY_AUTO = "auto"
STRATEGIES = (STRATEGY_AUTO, "snake", "backtracking", "greedy")

__all__ = [
    "MODE_COMPLETE",
    "MODE_RANDOM",
    "MODES",
    "STRATEGY_AUTO",
    "STRATEGIES",
    "backtracking_path",
    "bfs_connect",
    "graft_tail",
    "greedy_path",
    "layer_plans",
    "plan_box",
    "search_hamiltonian",
    "snake_path",
    "structural_class",
]
