"""Pydantic models and lineup rules shared by the solvers."""

from lineup_optimizer.schemas.lineup_rules import (
    FORMATION_NAMES,
    FORMATIONS,
    Formation,
    get_formation,
)
from lineup_optimizer.schemas.player import (
    FormationSummary,
    OptimizationResult,
    PlayerCandidate,
    Position,
    SolveMethod,
    SweepResult,
    SweepStats,
)

__all__ = [
    "FORMATIONS",
    "FORMATION_NAMES",
    "Formation",
    "FormationSummary",
    "OptimizationResult",
    "PlayerCandidate",
    "Position",
    "SolveMethod",
    "SweepResult",
    "SweepStats",
    "get_formation",
]
