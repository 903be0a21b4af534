"""Budget-constrained starting-XI optimizer."""

from lineup_optimizer.projection import compute_projections
from lineup_optimizer.schemas import (
    FORMATIONS,
    Formation,
    OptimizationResult,
    PlayerCandidate,
    Position,
    SweepResult,
)
from lineup_optimizer.solver import optimize_arena_lineup, optimize_lineup

__all__ = [
    "FORMATIONS",
    "Formation",
    "OptimizationResult",
    "PlayerCandidate",
    "Position",
    "SweepResult",
    "compute_projections",
    "optimize_arena_lineup",
    "optimize_lineup",
]
