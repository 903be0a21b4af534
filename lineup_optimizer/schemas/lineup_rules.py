"""Lineup rule constants and the Formation model.

Encodes the starting-XI rules as constants and a validated Formation
model, used by the solvers, the sweep and the validator.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, model_validator

from lineup_optimizer.config import solver_cfg
from lineup_optimizer.schemas.player import Position


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STARTING_XI = solver_cfg.starting_xi
GOALKEEPERS = solver_cfg.goalkeepers

# Canonical position order for grouping and lineup ordering
POSITION_ORDER: dict[Position, int] = {pos: i for i, pos in enumerate(Position)}


# ---------------------------------------------------------------------------
# Formation
# ---------------------------------------------------------------------------

class Formation(BaseModel):
    """Positional quota for a lineup (goalkeeper count is always 1)."""

    model_config = ConfigDict(frozen=True)

    name: str
    defenders: int
    midfielders: int
    forwards: int
    lineup_size: int = STARTING_XI

    @model_validator(mode="after")
    def validate_quota(self) -> "Formation":
        errors: list[str] = []
        for label, count in (
            ("defenders", self.defenders),
            ("midfielders", self.midfielders),
            ("forwards", self.forwards),
        ):
            if count < 0:
                errors.append(f"{label} must be >= 0, got {count}")
        total = GOALKEEPERS + self.defenders + self.midfielders + self.forwards
        if total != self.lineup_size:
            errors.append(
                f"Formation {self.name} has {total} players, expected {self.lineup_size}"
            )
        if errors:
            raise ValueError("; ".join(errors))
        return self

    @property
    def quotas(self) -> dict[Position, int]:
        """Required count per position, in canonical position order."""
        return {
            Position.GOALKEEPER: GOALKEEPERS,
            Position.DEFENDER: self.defenders,
            Position.MIDFIELDER: self.midfielders,
            Position.FORWARD: self.forwards,
        }


FORMATIONS: tuple[Formation, ...] = tuple(
    Formation(name=name, defenders=d, midfielders=m, forwards=f)
    for name, d, m, f in solver_cfg.formations
)

FORMATION_NAMES: list[str] = [f.name for f in FORMATIONS]


def get_formation(formation: str | Formation) -> Formation:
    """Resolve a formation tag (e.g. '4-4-2') to its Formation.

    Formation instances pass through unchanged so callers can supply
    custom quotas.
    """
    if isinstance(formation, Formation):
        return formation
    for f in FORMATIONS:
        if f.name == formation:
            return f
    raise ValueError(
        f"Unknown formation {formation!r}; expected one of {', '.join(FORMATION_NAMES)}"
    )
