"""Tests for the exact MILP solver and its failure routing."""

from __future__ import annotations

import logging

import numpy as np
import pytest

from conftest import (
    DEF,
    GK,
    RaisingBackend,
    StaticBackend,
    assert_valid_lineup,
    make_player,
)
from lineup_optimizer.schemas.lineup_rules import FORMATIONS, Formation, get_formation
from lineup_optimizer.schemas.player import SolveMethod
from lineup_optimizer.solver.backend import BinaryProgram, ScipyMilpBackend, SolveStatus
from lineup_optimizer.solver.exact import build_program, solve_exact


# ===========================================================================
# 1. Formulation
# ===========================================================================

class TestBuildProgram:

    def test_one_variable_per_player_and_six_rows(self, league_pool):
        formation = get_formation("4-4-2")
        program = build_program(league_pool, formation, 150_000_000)
        assert program.n_vars == len(league_pool)
        # lineup size, GK, DEF, MID, FWD, budget
        assert program.A.shape == (6, len(league_pool))

    def test_quota_rows_are_equalities(self, league_pool):
        formation = get_formation("3-5-2")
        program = build_program(league_pool, formation, 150_000_000)
        assert list(program.lower[:5]) == [11, 1, 3, 5, 2]
        assert list(program.upper[:5]) == [11, 1, 3, 5, 2]

    def test_budget_row_is_upper_bound_on_cost(self, league_pool):
        program = build_program(league_pool, get_formation("4-4-2"), 90_000_000)
        assert program.lower[-1] == 0
        assert program.upper[-1] == 90_000_000
        assert list(program.A[-1]) == [float(p.cost) for p in league_pool]

    def test_objective_is_normalised_blend(self):
        pool = [
            make_player("a", GK, 10, 4.0),
            make_player("b", GK, 5, 8.0),
        ]
        program = build_program(pool, Formation(
            name="gk", defenders=0, midfielders=0, forwards=0, lineup_size=1,
        ), 100)
        # a: 0.9 * 4/8 + 0.1 * 10/10, b: 0.9 * 8/8 + 0.1 * 5/10
        assert program.objective[0] == pytest.approx(0.55)
        assert program.objective[1] == pytest.approx(0.95)

    def test_all_zero_scores_and_costs_do_not_divide_by_zero(self):
        pool = [make_player("a", GK, 0, 0.0), make_player("b", GK, 0, 0.0)]
        program = build_program(pool, Formation(
            name="gk", defenders=0, midfielders=0, forwards=0, lineup_size=1,
        ), 0)
        assert np.all(np.isfinite(program.objective))

    def test_negative_scores_keep_their_sign(self):
        pool = [make_player("a", GK, 1, -5.0), make_player("b", GK, 1, -1.0)]
        program = build_program(pool, Formation(
            name="gk", defenders=0, midfielders=0, forwards=0, lineup_size=1,
        ), 10)
        assert program.objective[1] > program.objective[0]


# ===========================================================================
# 2. Solving with the real backend
# ===========================================================================

class TestSolveExact:

    def test_keeper_defender_scenario(self, keeper_defender_pool, keeper_defender_formation):
        result = solve_exact(keeper_defender_pool, keeper_defender_formation, 50)
        assert_valid_lineup(result, keeper_defender_formation, 50)
        assert result.method == SolveMethod.EXACT
        assert set(result.player_ids) == {"gk0", "d0", "d1", "d2", "d3"}
        assert result.objective == 78
        assert result.remaining_budget == 41

    @pytest.mark.parametrize("formation", FORMATIONS, ids=lambda f: f.name)
    def test_every_formation_is_valid(self, league_pool, formation):
        result = solve_exact(league_pool, formation, 100_000_000)
        assert_valid_lineup(result, formation, 100_000_000)

    def test_tight_budget_respected(self, league_pool):
        # Cheapest 4-4-2: 5m + 4*6m + 4*8m + 2*11m = 83m
        formation = get_formation("4-4-2")
        result = solve_exact(league_pool, formation, 84_000_000)
        assert_valid_lineup(result, formation, 84_000_000)

    def test_cost_term_prefers_spending_idle_budget(self):
        """Equal scores: the blended objective picks the dearer keeper."""
        pool = [make_player("cheap", GK, 1, 10.0), make_player("dear", GK, 3, 10.0)]
        formation = Formation(name="gk", defenders=0, midfielders=0, forwards=0, lineup_size=1)
        result = solve_exact(pool, formation, 10)
        assert result.player_ids == ["dear"]
        assert result.objective == 10.0
        assert result.remaining_budget == 7

    def test_budget_below_cheapest_lineup_is_none(self, league_pool):
        assert solve_exact(league_pool, "4-4-2", 1) is None

    def test_no_goalkeepers_is_none(self, league_pool):
        outfield = [p for p in league_pool if p.position != GK]
        assert solve_exact(outfield, "4-4-2", 150_000_000) is None

    def test_empty_pool_short_circuits(self):
        backend = StaticBackend()
        assert solve_exact([], "4-4-2", 100, backend=backend) is None
        assert backend.programs == []

    def test_players_over_budget_are_not_variables(self, keeper_defender_pool, keeper_defender_formation):
        pool = keeper_defender_pool + [make_player("star", DEF, 500, 99.0)]
        backend = StaticBackend(status=SolveStatus.INFEASIBLE)
        solve_exact(pool, keeper_defender_formation, 50, backend=backend)
        assert backend.programs[0].n_vars == len(keeper_defender_pool)

    def test_unknown_formation_raises(self, league_pool):
        with pytest.raises(ValueError, match="Unknown formation"):
            solve_exact(league_pool, "2-2-6", 100)


# ===========================================================================
# 3. Failure routing: every backend anomaly becomes None
# ===========================================================================

class TestExactFailures:

    def test_missing_backend(self, league_pool):
        assert solve_exact(league_pool, "4-4-2", 150_000_000, backend=None) is None

    def test_backend_raises(self, league_pool, caplog):
        backend = RaisingBackend()
        with caplog.at_level(logging.WARNING, logger="lineup_optimizer.solver.exact"):
            assert solve_exact(league_pool, "4-4-2", 150_000_000, backend=backend) is None
        assert backend.calls == 1
        assert "solver crashed" in caplog.text

    @pytest.mark.parametrize("status", [
        SolveStatus.INFEASIBLE, SolveStatus.UNBOUNDED, SolveStatus.ERROR,
    ])
    def test_unsuccessful_status(self, keeper_defender_pool, keeper_defender_formation, status):
        backend = StaticBackend(status=status, pick=[0, 4, 5, 6, 7])
        assert solve_exact(
            keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
        ) is None

    def test_feasible_status_is_accepted(self, keeper_defender_pool, keeper_defender_formation):
        backend = StaticBackend(status=SolveStatus.FEASIBLE, pick=[1, 4, 5, 6, 8])
        result = solve_exact(keeper_defender_pool, keeper_defender_formation, 50, backend=backend)
        assert_valid_lineup(result, keeper_defender_formation, 50)
        assert set(result.player_ids) == {"gk1", "d0", "d1", "d2", "d4"}
        assert result.objective == 8 + 20 + 18 + 16 + 12

    def test_missing_vector(self, keeper_defender_pool, keeper_defender_formation, caplog):
        backend = StaticBackend(status=SolveStatus.OPTIMAL, x=None)
        with caplog.at_level(logging.WARNING, logger="lineup_optimizer.solver.exact"):
            assert solve_exact(
                keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
            ) is None
        assert "without a solution vector" in caplog.text

    def test_wrong_length_vector(self, keeper_defender_pool, keeper_defender_formation):
        backend = StaticBackend(status=SolveStatus.OPTIMAL, x=np.ones(3))
        assert solve_exact(
            keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
        ) is None

    def test_non_finite_vector(self, keeper_defender_pool, keeper_defender_formation):
        x = np.zeros(len(keeper_defender_pool))
        x[0] = np.nan
        backend = StaticBackend(status=SolveStatus.OPTIMAL, x=x)
        assert solve_exact(
            keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
        ) is None

    def test_non_numeric_vector(self, keeper_defender_pool, keeper_defender_formation):
        backend = StaticBackend(status=SolveStatus.OPTIMAL, x=["yes"] * len(keeper_defender_pool))
        assert solve_exact(
            keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
        ) is None

    @pytest.mark.parametrize("pick", [
        [0, 4, 5, 6],           # one short
        [0, 4, 5, 6, 7, 8],     # one extra
    ])
    def test_wrong_selection_count(self, keeper_defender_pool, keeper_defender_formation, pick, caplog):
        backend = StaticBackend(status=SolveStatus.OPTIMAL, pick=pick)
        with caplog.at_level(logging.WARNING, logger="lineup_optimizer.solver.exact"):
            assert solve_exact(
                keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
            ) is None
        assert "expected 5" in caplog.text

    def test_near_binary_values_round_correctly(self, keeper_defender_pool, keeper_defender_formation):
        x = np.full(len(keeper_defender_pool), 1e-7)
        x[[0, 4, 5, 6, 7]] = 1 - 1e-7
        backend = StaticBackend(status=SolveStatus.OPTIMAL, x=x)
        result = solve_exact(keeper_defender_pool, keeper_defender_formation, 50, backend=backend)
        assert result.objective == 78

    def test_quota_violation_is_rejected(self, keeper_defender_pool, keeper_defender_formation, caplog):
        # Right count, but two keepers
        backend = StaticBackend(status=SolveStatus.OPTIMAL, pick=[0, 1, 4, 5, 6])
        with caplog.at_level(logging.WARNING, logger="lineup_optimizer.solver.exact"):
            assert solve_exact(
                keeper_defender_pool, keeper_defender_formation, 50, backend=backend,
            ) is None
        assert "failed validation" in caplog.text

    def test_over_budget_assignment_is_rejected(self, keeper_defender_pool, keeper_defender_formation):
        backend = StaticBackend(status=SolveStatus.OPTIMAL, pick=[0, 4, 5, 6, 7])
        assert solve_exact(
            keeper_defender_pool, keeper_defender_formation, 8, backend=backend,
        ) is None


# ===========================================================================
# 4. Scipy backend status mapping
# ===========================================================================

class TestScipyBackend:

    def _program(self, lower, upper):
        return BinaryProgram(
            objective=np.array([1.0, 2.0, 3.0]),
            A=np.array([[1.0, 1.0, 1.0]]),
            lower=np.array([lower], dtype=float),
            upper=np.array([upper], dtype=float),
            name="toy",
        )

    def test_optimal(self):
        solution = ScipyMilpBackend().solve(self._program(2, 2))
        assert solution.status == SolveStatus.OPTIMAL
        assert solution.success
        assert list(np.round(solution.x)) == [0, 1, 1]

    def test_infeasible(self):
        solution = ScipyMilpBackend().solve(self._program(4, 4))
        assert solution.status == SolveStatus.INFEASIBLE
        assert not solution.success

    def test_time_limit_is_accepted(self):
        solution = ScipyMilpBackend().solve(self._program(1, 1), time_limit=5)
        assert solution.success
        assert list(np.round(solution.x)) == [0, 0, 1]
