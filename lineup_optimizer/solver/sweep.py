"""Formation sweep: best lineup across every formation.

Each formation gets one MILP attempt and, if that fails, one greedy
fallback attempt.  The best result is the one with the strictly highest
objective; equal objectives keep the earliest formation in the
configured enumeration order.
"""

from __future__ import annotations

import math
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable

from lineup_optimizer.config import solver_cfg
from lineup_optimizer.data.eligibility import filter_eligible, is_player_unavailable
from lineup_optimizer.logging_config import get_logger
from lineup_optimizer.schemas.lineup_rules import FORMATIONS, Formation, get_formation
from lineup_optimizer.schemas.player import (
    OptimizationResult,
    PlayerCandidate,
    SweepResult,
    SweepStats,
)
from lineup_optimizer.solver.backend import IntegerBackend
from lineup_optimizer.solver.exact import DEFAULT_BACKEND, solve_exact
from lineup_optimizer.solver.greedy import solve_greedy

logger = get_logger(__name__)


@dataclass(frozen=True)
class SweepEvent:
    """Structured progress event emitted to an optional ``on_event`` callback.

    kind is one of: formation_start, exact_failed, formation_solved,
    formation_infeasible, sweep_done.
    """

    kind: str
    formation: str | None = None
    objective: float | None = None
    detail: str = ""


EventCallback = Callable[[SweepEvent], None]


def _emit(on_event: EventCallback | None, event: SweepEvent) -> None:
    if on_event is not None:
        on_event(event)


def solve_formation(
    players: list[PlayerCandidate],
    formation: str | Formation,
    budget: float,
    backend: IntegerBackend | None = DEFAULT_BACKEND,
    score_weight: float = solver_cfg.score_weight,
    cost_weight: float = solver_cfg.cost_weight,
    improvement_threshold: float = solver_cfg.improvement_threshold,
    time_limit: float | None = solver_cfg.time_limit,
    on_event: EventCallback | None = None,
) -> OptimizationResult | None:
    """Exact solve for one formation, falling back to the greedy heuristic."""
    formation = get_formation(formation)
    _emit(on_event, SweepEvent("formation_start", formation.name))

    result = solve_exact(
        players, formation, budget,
        backend=backend,
        score_weight=score_weight,
        cost_weight=cost_weight,
        time_limit=time_limit,
    )
    if result is None:
        _emit(on_event, SweepEvent(
            "exact_failed", formation.name, detail="falling back to greedy",
        ))
        result = solve_greedy(
            players, formation, budget,
            improvement_threshold=improvement_threshold,
        )

    if result is None:
        logger.debug("Formation %s: no valid lineup", formation.name)
        _emit(on_event, SweepEvent("formation_infeasible", formation.name))
    else:
        logger.debug(
            "Formation %s (%s): objective=%.2f, remaining=%s",
            formation.name, result.method.value, result.objective,
            result.remaining_budget,
        )
        _emit(on_event, SweepEvent(
            "formation_solved", formation.name, result.objective,
            detail=result.method.value,
        ))
    return result


def optimize_lineup(
    players: list[PlayerCandidate],
    budget: float,
    formation: str | Formation | None = None,
    exclusions: Iterable[str] = (),
    backend: IntegerBackend | None = DEFAULT_BACKEND,
    score_weight: float = solver_cfg.score_weight,
    cost_weight: float = solver_cfg.cost_weight,
    improvement_threshold: float = solver_cfg.improvement_threshold,
    time_limit: float | None = solver_cfg.time_limit,
    on_event: EventCallback | None = None,
    max_workers: int = 1,
) -> SweepResult:
    """Find the best lineup over one formation or all configured formations.

    Parameters
    ----------
    players:
        Ordered candidate pool.  Pool order is the tie-break for the
        fallback heuristic.
    budget:
        Non-negative spending ceiling, in the same units as ``cost``.
    formation:
        A single formation tag / Formation, or None to compare all.
    exclusions:
        Player IDs that must not be picked.
    max_workers:
        Formations are independent, so values > 1 evaluate them on a
        thread pool.  Results are re-ordered by enumeration index before
        the best is chosen, so the outcome matches a sequential run.

    Returns
    -------
    SweepResult with ``best`` (None when no formation is feasible), the
    per-formation results, and the ranked ``alternatives`` summaries.
    """
    if budget is None or not math.isfinite(budget) or budget < 0:
        raise ValueError(f"Budget must be a finite non-negative number, got {budget!r}")

    start = time.perf_counter()
    formations = [get_formation(formation)] if formation is not None else list(FORMATIONS)
    pool = filter_eligible(players, exclusions)

    def _solve(f: Formation) -> OptimizationResult | None:
        return solve_formation(
            pool, f, budget,
            backend=backend,
            score_weight=score_weight,
            cost_weight=cost_weight,
            improvement_threshold=improvement_threshold,
            time_limit=time_limit,
            on_event=on_event,
        )

    if max_workers > 1 and len(formations) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # map() yields in submission order, i.e. enumeration order
            outcomes = list(executor.map(_solve, formations))
    else:
        outcomes = [_solve(f) for f in formations]

    results = [r for r in outcomes if r is not None]

    best: OptimizationResult | None = None
    for r in results:
        if best is None or r.objective > best.objective:
            best = r

    # Stable sort keeps enumeration order among equal objectives
    ranked = sorted(results, key=lambda r: r.objective, reverse=True)

    elapsed_ms = (time.perf_counter() - start) * 1000.0
    stats = SweepStats(
        players_considered=len(pool),
        formations_evaluated=len(formations),
        generation_time_ms=round(elapsed_ms, 2),
    )

    if best is None:
        logger.info(
            "No valid lineup within budget %s across %d formation(s)",
            budget, len(formations),
        )
    else:
        logger.info(
            "Best formation %s: objective=%.2f, remaining=%s (%d/%d feasible, %.0f ms)",
            best.formation, best.objective, best.remaining_budget,
            len(results), len(formations), elapsed_ms,
        )
    _emit(on_event, SweepEvent(
        "sweep_done",
        best.formation if best else None,
        best.objective if best else None,
        detail=f"{len(results)}/{len(formations)} feasible",
    ))

    return SweepResult(
        best=best,
        results=ranked,
        alternatives=[r.summary() for r in ranked],
        stats=stats,
    )


def optimize_arena_lineup(
    players: list[PlayerCandidate],
    exclusions: Iterable[str] = (),
    is_unavailable: Callable[[PlayerCandidate], bool] = is_player_unavailable,
    **kwargs,
) -> SweepResult:
    """Fixed-budget sweep over all formations that skips unavailable players.

    A call-site configuration of :func:`optimize_lineup`: the pool is
    pre-filtered with ``is_unavailable``, the budget is the configured
    arena budget, and every formation is compared.  Remaining keyword
    arguments (backend, weights, threshold, time limit, on_event,
    max_workers) are passed through to :func:`optimize_lineup`.
    """
    for fixed in ("budget", "formation"):
        if fixed in kwargs:
            raise TypeError(f"optimize_arena_lineup() does not accept {fixed!r}")
    pool = filter_eligible(players, exclusions, is_unavailable=is_unavailable)
    return optimize_lineup(pool, solver_cfg.arena_budget, **kwargs)
