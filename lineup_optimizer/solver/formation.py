"""Lineup ordering, position counting and result assembly helpers."""

from __future__ import annotations

from lineup_optimizer.schemas.lineup_rules import POSITION_ORDER, Formation
from lineup_optimizer.schemas.player import (
    OptimizationResult,
    PlayerCandidate,
    Position,
    SolveMethod,
)


def group_by_position(
    players: list[PlayerCandidate],
) -> dict[Position, list[PlayerCandidate]]:
    """Partition players by position, preserving pool order within each group."""
    grouped: dict[Position, list[PlayerCandidate]] = {pos: [] for pos in Position}
    for p in players:
        grouped[p.position].append(p)
    return grouped


def count_positions(players: list[PlayerCandidate]) -> dict[Position, int]:
    counts = {pos: 0 for pos in Position}
    for p in players:
        counts[p.position] += 1
    return counts


def order_lineup(lineup: list[PlayerCandidate]) -> list[PlayerCandidate]:
    """Order a lineup GK, DEF, MID, FWD, then by descending predicted score.

    The sort is stable, so equal scores keep the order they were picked in.
    """
    return sorted(
        lineup,
        key=lambda p: (POSITION_ORDER[p.position], -p.predicted_score),
    )


def get_formation_string(lineup: list[PlayerCandidate]) -> str:
    """Return formation string like '3-4-3' from a lineup.

    Only counts outfield positions (DEF-MID-FWD).
    """
    counts = count_positions(lineup)
    return (
        f"{counts[Position.DEFENDER]}-{counts[Position.MIDFIELDER]}"
        f"-{counts[Position.FORWARD]}"
    )


def build_result(
    lineup: list[PlayerCandidate],
    formation: Formation,
    budget: float,
    method: SolveMethod,
) -> OptimizationResult:
    """Assemble an OptimizationResult with true (unweighted) totals."""
    ordered = order_lineup(lineup)
    total_cost = sum(p.cost for p in ordered)
    objective = sum(p.predicted_score for p in ordered)
    return OptimizationResult(
        formation=formation.name,
        lineup=ordered,
        objective=objective,
        total_cost=total_cost,
        remaining_budget=budget - total_cost,
        method=method,
    )
