"""Pydantic schemas for player candidates and optimizer results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Position(str, Enum):
    GOALKEEPER = "GK"
    DEFENDER = "DEF"
    MIDFIELDER = "MID"
    FORWARD = "FWD"


class SolveMethod(str, Enum):
    EXACT = "exact"
    FALLBACK = "fallback"


class PlayerCandidate(BaseModel):
    """A scored player the optimizer may pick."""

    player_id: str
    position: Position
    cost: int = Field(..., ge=0)  # Currency minor units (e.g. 12_500_000 = 12.5m)
    predicted_score: float = Field(..., allow_inf_nan=False)
    name: str = ""
    team: str = ""
    injured: bool = False
    status: int = 0
    extra: dict[str, Any] = Field(default_factory=dict)

    @property
    def value_ratio(self) -> float:
        """Predicted score per unit cost; a free player ranks on raw score."""
        if self.cost == 0:
            return self.predicted_score
        return self.predicted_score / self.cost


class OptimizationResult(BaseModel):
    """A valid lineup for one formation."""

    formation: str
    lineup: list[PlayerCandidate] = Field(default_factory=list)
    objective: float = 0.0
    total_cost: int = 0
    remaining_budget: float = 0.0
    method: SolveMethod = SolveMethod.EXACT

    @property
    def player_ids(self) -> list[str]:
        return [p.player_id for p in self.lineup]

    def summary(self) -> FormationSummary:
        return FormationSummary(
            formation=self.formation,
            objective=self.objective,
            remaining_budget=self.remaining_budget,
            method=self.method,
        )


class FormationSummary(BaseModel):
    """One row of the ranked alternatives list."""

    formation: str
    objective: float
    remaining_budget: float
    method: SolveMethod


class SweepStats(BaseModel):
    players_considered: int = 0
    formations_evaluated: int = 0
    generation_time_ms: float = 0.0


class SweepResult(BaseModel):
    """Outcome of a formation sweep.

    ``best`` is None when no formation produced a valid lineup; callers
    render that as an empty state rather than an error.
    """

    best: OptimizationResult | None = None
    results: list[OptimizationResult] = Field(default_factory=list)
    alternatives: list[FormationSummary] = Field(default_factory=list)
    stats: SweepStats = Field(default_factory=SweepStats)

    @property
    def found(self) -> bool:
        return self.best is not None
