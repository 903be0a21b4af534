"""Post-solve lineup rule validation.

Validates solver output against the lineup rules to catch any constraint
violations that slipped through the MILP (e.g. due to rounding or
numerical tolerance in the backend).
"""

from __future__ import annotations

import math

from lineup_optimizer.schemas.lineup_rules import Formation
from lineup_optimizer.schemas.player import OptimizationResult
from lineup_optimizer.solver.formation import count_positions


def validate_lineup(
    result: OptimizationResult | None,
    formation: Formation,
    budget: float,
) -> list[str]:
    """Validate a solver result against the formation and budget.

    Returns an empty list if valid, or a list of error strings describing
    each violation found.
    """
    if result is None:
        return ["Solver returned None (no feasible solution)"]

    errors: list[str] = []
    lineup = result.lineup

    # --- Lineup size ---
    if len(lineup) != formation.lineup_size:
        errors.append(
            f"Lineup size: expected {formation.lineup_size}, got {len(lineup)}"
        )

    # --- Position quotas (goalkeeper included) ---
    counts = count_positions(lineup)
    for pos, required in formation.quotas.items():
        actual = counts[pos]
        if actual != required:
            errors.append(f"{pos.value}: need {required}, got {actual}")

    # --- Budget ---
    total_cost = sum(p.cost for p in lineup)
    if total_cost > budget:
        errors.append(f"Over budget: {total_cost} > {budget}")
    if total_cost != result.total_cost:
        errors.append(
            f"Cost mismatch: result says {result.total_cost}, lineup sums to {total_cost}"
        )
    if not math.isclose(result.remaining_budget, budget - total_cost, abs_tol=1e-6):
        errors.append(
            f"Remaining budget mismatch: {result.remaining_budget} != {budget - total_cost}"
        )

    # --- Objective is the plain score sum ---
    score_sum = sum(p.predicted_score for p in lineup)
    if not math.isclose(result.objective, score_sum, rel_tol=1e-9, abs_tol=1e-9):
        errors.append(f"Objective mismatch: {result.objective} != {score_sum}")

    # --- Unique player IDs ---
    ids = [p.player_id for p in lineup]
    if len(set(ids)) != len(ids):
        errors.append("Duplicate player IDs in lineup")

    return errors
