"""Central configuration: every tunable constant in one place."""

from __future__ import annotations

from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Solver
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class SolverConfig:
    starting_xi: int = 11
    goalkeepers: int = 1
    # Blended exact objective: score share dominates, cost share nudges the
    # solver towards spending budget that would otherwise sit idle.
    score_weight: float = 0.9
    cost_weight: float = 0.1
    # Fallback local search stops once this share of the budget is spent.
    improvement_threshold: float = 0.95
    time_limit: float | None = 30.0  # Seconds per formation, None = unbounded
    selection_tolerance: float = 0.5  # Binary variable counts as picked above this
    arena_budget: int = 150_000_000  # 150m, the fixed arena budget
    # Ordered (name, DEF, MID, FWD); enumeration order is the sweep tie-break.
    formations: tuple[tuple[str, int, int, int], ...] = (
        ("4-4-2", 4, 4, 2),
        ("4-2-4", 4, 2, 4),
        ("3-4-3", 3, 4, 3),
        ("4-3-3", 4, 3, 3),
        ("5-3-2", 5, 3, 2),
        ("3-5-2", 3, 5, 2),
        ("5-4-1", 5, 4, 1),
        ("4-5-1", 4, 5, 1),
        ("3-6-1", 3, 6, 1),
        ("5-2-3", 5, 2, 3),
    )


# ---------------------------------------------------------------------------
# Eligibility
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class EligibilityConfig:
    # Status codes reported for injured, suspended or otherwise unavailable
    unavailable_status_codes: frozenset[int] = frozenset({1, 8, 16})


# ---------------------------------------------------------------------------
# Projection
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ProjectionConfig:
    base_mode: str = "avg"  # "avg", "sum" or "last3"
    w_base: float = 1.0
    w_form: float = 0.35
    w_odds: float = 0.35
    w_home: float = 0.1
    w_minutes: float = 0.2
    w_risk: float = 0.15
    alpha: float = 1.0   # Win probability weight
    beta: float = 0.2    # Draw probability weight
    gamma: float = 0.7   # Loss probability penalty
    form_window: int = 3
    full_match_minutes: int = 90
    base_modes: tuple[str, ...] = ("avg", "sum", "last3")


# ---------------------------------------------------------------------------
# Singleton instances (importable as `from lineup_optimizer.config import solver_cfg, ...`)
# ---------------------------------------------------------------------------
solver_cfg = SolverConfig()
eligibility_cfg = EligibilityConfig()
projection_cfg = ProjectionConfig()
