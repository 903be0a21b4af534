"""Greedy fill plus budget-aware local search, used when the MILP fails.

Phase 1 fills each position (GK, DEF, MID, FWD) in value-ratio order,
then retries the leftovers cheapest-first.  Phase 2 spends slack budget
on same-position upgrades, one best swap at a time, until no upgrade
fits or the spend threshold is reached.

All sorts are stable, so ties keep pool order and the output is fully
reproducible for a given input.
"""

from __future__ import annotations

from lineup_optimizer.config import solver_cfg
from lineup_optimizer.logging_config import get_logger
from lineup_optimizer.schemas.lineup_rules import Formation, get_formation
from lineup_optimizer.schemas.player import (
    OptimizationResult,
    PlayerCandidate,
    SolveMethod,
)
from lineup_optimizer.solver.formation import build_result, group_by_position
from lineup_optimizer.solver.validator import validate_lineup

logger = get_logger(__name__)


def _greedy_fill(
    players: list[PlayerCandidate],
    formation: Formation,
    budget: float,
) -> list[PlayerCandidate] | None:
    """Phase 1: pick each position's quota while the running cost fits."""
    grouped = group_by_position(players)
    lineup: list[PlayerCandidate] = []
    total_cost = 0

    for pos, need in formation.quotas.items():
        if need == 0:
            continue
        group = grouped[pos]
        by_ratio = sorted(group, key=lambda p: p.value_ratio, reverse=True)

        # Ratio pass stops at the first player the budget cannot take
        picked: list[PlayerCandidate] = []
        for p in by_ratio:
            if len(picked) == need or total_cost + p.cost > budget:
                break
            picked.append(p)
            total_cost += p.cost

        if len(picked) < need:
            # Expensive high-ratio players may have crowded out cheap ones
            picked_ids = {p.player_id for p in picked}
            remainder = [p for p in group if p.player_id not in picked_ids]
            for p in sorted(remainder, key=lambda p: p.cost):
                if len(picked) == need:
                    break
                if total_cost + p.cost <= budget:
                    picked.append(p)
                    total_cost += p.cost

        if len(picked) < need:
            logger.debug(
                "Fallback %s: only %d/%d affordable %s",
                formation.name, len(picked), need, pos.value,
            )
            return None
        lineup.extend(picked)

    return lineup


def _improve(
    lineup: list[PlayerCandidate],
    players: list[PlayerCandidate],
    budget: float,
    threshold: float,
) -> list[PlayerCandidate]:
    """Phase 2: apply the best same-position upgrade until none fits."""
    lineup = list(lineup)
    total_cost = sum(p.cost for p in lineup)
    swaps = 0

    while total_cost < threshold * budget:
        selected = {p.player_id for p in lineup}
        best_gain = 0.0
        best_swap: tuple[int, PlayerCandidate] | None = None

        for slot, current in enumerate(lineup):
            for cand in players:
                if cand.position != current.position or cand.player_id in selected:
                    continue
                if cand.predicted_score <= current.predicted_score:
                    continue
                if total_cost - current.cost + cand.cost > budget:
                    continue
                gain = cand.predicted_score - current.predicted_score
                if gain > best_gain:
                    best_gain = gain
                    best_swap = (slot, cand)

        if best_swap is None:
            break
        slot, cand = best_swap
        total_cost += cand.cost - lineup[slot].cost
        lineup[slot] = cand
        swaps += 1

    if swaps:
        logger.debug("Fallback local search applied %d swap(s)", swaps)
    return lineup


def solve_greedy(
    players: list[PlayerCandidate],
    formation: str | Formation,
    budget: float,
    improvement_threshold: float = solver_cfg.improvement_threshold,
) -> OptimizationResult | None:
    """Build a feasible lineup heuristically for one formation.

    Returns an OptimizationResult (method=fallback), or None when some
    position cannot be filled within budget or the assembled lineup
    fails validation.
    """
    formation = get_formation(formation)
    lineup = _greedy_fill(players, formation, budget)
    if lineup is None:
        return None
    lineup = _improve(lineup, players, budget, improvement_threshold)
    result = build_result(lineup, formation, budget, SolveMethod.FALLBACK)
    errors = validate_lineup(result, formation, budget)
    if errors:
        logger.warning(
            "Fallback %s lineup failed validation: %s", formation.name, "; ".join(errors),
        )
        return None
    return result
