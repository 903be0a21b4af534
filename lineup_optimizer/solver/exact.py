"""Exact MILP solver for a single formation.

One binary variable per candidate, a fixed lineup size, one equality per
position quota and a budget ceiling.  The objective blends normalised
predicted score (primary) with normalised cost (secondary) so the solver
does not leave budget unspent for no reason; the reported objective is
always the plain predicted-score sum.

Every failure mode returns None so the caller can fall back to the
greedy heuristic.
"""

from __future__ import annotations

import numpy as np

from lineup_optimizer.config import solver_cfg
from lineup_optimizer.logging_config import get_logger
from lineup_optimizer.schemas.lineup_rules import Formation, get_formation
from lineup_optimizer.schemas.player import (
    OptimizationResult,
    PlayerCandidate,
    SolveMethod,
)
from lineup_optimizer.solver.backend import (
    BinaryProgram,
    IntegerBackend,
    ScipyMilpBackend,
)
from lineup_optimizer.solver.formation import build_result
from lineup_optimizer.solver.validator import validate_lineup

logger = get_logger(__name__)

DEFAULT_BACKEND = ScipyMilpBackend()


def _scale(values: np.ndarray) -> float:
    """Largest magnitude in values, or 1.0 when everything is zero."""
    peak = float(np.max(np.abs(values))) if len(values) else 0.0
    return peak if peak > 0 else 1.0


def build_program(
    pool: list[PlayerCandidate],
    formation: Formation,
    budget: float,
    score_weight: float = solver_cfg.score_weight,
    cost_weight: float = solver_cfg.cost_weight,
) -> BinaryProgram:
    """Formulate the lineup selection for one formation as a binary program."""
    n = len(pool)
    scores = np.array([p.predicted_score for p in pool], dtype=float)
    costs = np.array([p.cost for p in pool], dtype=float)

    objective = (
        score_weight * scores / _scale(scores)
        + cost_weight * costs / _scale(costs)
    )

    A_rows: list[np.ndarray] = []
    lbs: list[float] = []
    ubs: list[float] = []

    def add_constraint(coeffs: np.ndarray, lb: float, ub: float) -> None:
        A_rows.append(coeffs)
        lbs.append(lb)
        ubs.append(ub)

    # Exactly lineup_size players
    add_constraint(np.ones(n), formation.lineup_size, formation.lineup_size)

    # Position quotas: exactly 1 GK, formation counts for DEF/MID/FWD
    positions = [p.position for p in pool]
    for pos, count in formation.quotas.items():
        pos_mask = np.array([1.0 if q == pos else 0.0 for q in positions])
        add_constraint(pos_mask, count, count)

    # Budget
    add_constraint(costs, 0, budget)

    return BinaryProgram(
        objective=objective,
        A=np.array(A_rows),
        lower=np.array(lbs, dtype=float),
        upper=np.array(ubs, dtype=float),
        name=f"lineup_{formation.name}",
    )


def solve_exact(
    players: list[PlayerCandidate],
    formation: str | Formation,
    budget: float,
    backend: IntegerBackend | None = DEFAULT_BACKEND,
    score_weight: float = solver_cfg.score_weight,
    cost_weight: float = solver_cfg.cost_weight,
    time_limit: float | None = solver_cfg.time_limit,
) -> OptimizationResult | None:
    """Solve the lineup MILP for one formation.

    ``players`` should already be eligibility-filtered; players costing
    more than the whole budget are dropped here.  Passing ``backend=None``
    models an unavailable solver.

    Returns an OptimizationResult (method=exact) or None when the backend
    is unavailable, raises, reports a non-optimal/non-feasible status, or
    returns an assignment that does not reconstruct into a valid lineup.
    """
    formation = get_formation(formation)
    pool = [p for p in players if p.cost <= budget]
    n = len(pool)
    if n == 0:
        return None

    if backend is None:
        logger.debug("No MILP backend for %s; deferring to fallback", formation.name)
        return None

    program = build_program(pool, formation, budget, score_weight, cost_weight)
    try:
        solution = backend.solve(program, time_limit=time_limit)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "MILP backend failed for %s: %s", formation.name, exc, exc_info=True,
        )
        return None

    if not solution.success:
        logger.debug(
            "MILP %s returned %s (%s)",
            formation.name, solution.status.value, solution.message,
        )
        return None

    if solution.x is None:
        logger.warning("MILP %s reported %s without a solution vector",
                       formation.name, solution.status.value)
        return None
    try:
        x = np.asarray(solution.x, dtype=float)
    except (TypeError, ValueError):
        logger.warning("MILP %s returned a non-numeric solution vector", formation.name)
        return None
    if x.shape != (n,) or not np.all(np.isfinite(x)):
        logger.warning(
            "MILP %s returned a malformed solution vector (shape %s, expected (%d,))",
            formation.name, x.shape, n,
        )
        return None

    selected = x > solver_cfg.selection_tolerance
    lineup = [p for p, picked in zip(pool, selected) if picked]
    if len(lineup) != formation.lineup_size:
        logger.warning(
            "MILP %s selected %d players, expected %d",
            formation.name, len(lineup), formation.lineup_size,
        )
        return None

    result = build_result(lineup, formation, budget, SolveMethod.EXACT)
    errors = validate_lineup(result, formation, budget)
    if errors:
        logger.warning(
            "MILP %s lineup failed validation: %s", formation.name, "; ".join(errors),
        )
        return None
    return result
