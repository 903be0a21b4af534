"""MILP and heuristic solvers for starting-XI selection."""

from lineup_optimizer.solver.backend import (
    BackendSolution,
    BinaryProgram,
    IntegerBackend,
    ScipyMilpBackend,
    SolveStatus,
)
from lineup_optimizer.solver.exact import solve_exact
from lineup_optimizer.solver.formation import get_formation_string, order_lineup
from lineup_optimizer.solver.greedy import solve_greedy
from lineup_optimizer.solver.sweep import (
    SweepEvent,
    optimize_arena_lineup,
    optimize_lineup,
    solve_formation,
)
from lineup_optimizer.solver.validator import validate_lineup

__all__ = [
    "BackendSolution",
    "BinaryProgram",
    "IntegerBackend",
    "ScipyMilpBackend",
    "SolveStatus",
    "SweepEvent",
    "get_formation_string",
    "optimize_arena_lineup",
    "optimize_lineup",
    "order_lineup",
    "solve_exact",
    "solve_formation",
    "solve_greedy",
    "validate_lineup",
]
