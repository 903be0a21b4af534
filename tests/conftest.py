"""Shared test fixtures for the lineup optimizer."""

import numpy as np
import pytest

from lineup_optimizer.schemas.lineup_rules import Formation
from lineup_optimizer.schemas.player import PlayerCandidate, Position
from lineup_optimizer.solver.backend import BackendSolution, SolveStatus
from lineup_optimizer.solver.formation import count_positions


GK, DEF, MID, FWD = (
    Position.GOALKEEPER, Position.DEFENDER, Position.MIDFIELDER, Position.FORWARD,
)


def make_player(pid, position, cost, score, **kwargs) -> PlayerCandidate:
    return PlayerCandidate(
        player_id=str(pid), position=position, cost=cost, predicted_score=score, **kwargs,
    )


def assert_valid_lineup(result, formation: Formation, budget: float) -> None:
    """Assert every lineup rule holds for a non-empty result."""
    assert result is not None, "Expected a lineup"
    lineup = result.lineup

    assert len(lineup) == formation.lineup_size
    counts = count_positions(lineup)
    assert counts[GK] == 1
    assert counts[DEF] == formation.defenders
    assert counts[MID] == formation.midfielders
    assert counts[FWD] == formation.forwards

    total_cost = sum(p.cost for p in lineup)
    assert total_cost <= budget
    assert result.total_cost == total_cost
    assert result.remaining_budget == budget - total_cost
    assert result.remaining_budget >= 0
    assert result.objective == pytest.approx(sum(p.predicted_score for p in lineup))
    assert len({p.player_id for p in lineup}) == len(lineup)


# ---------------------------------------------------------------------------
# Player pools
# ---------------------------------------------------------------------------

@pytest.fixture
def league_pool():
    """64-player pool across four clubs (1 GK, 6 DEF, 6 MID, 3 FWD each)."""
    teams = ["FC Atlas", "SV Comet", "Union Helios", "Bayern Nova"]
    players = []
    pid = 1
    for t, team in enumerate(teams):
        players.append(make_player(f"p-{pid}", GK, 5_000_000, 70.0 + 2 * t, team=team))
        pid += 1
        for i in range(6):
            players.append(make_player(
                f"p-{pid}", DEF, 6_000_000 + i * 250_000, 65.0 + 2 * i + t, team=team,
            ))
            pid += 1
        for i in range(6):
            players.append(make_player(
                f"p-{pid}", MID, 8_000_000 + i * 300_000, 80.0 + 3 * i + t, team=team,
            ))
            pid += 1
        for i in range(3):
            players.append(make_player(
                f"p-{pid}", FWD, 11_000_000 + i * 400_000, 90.0 + 4 * i + t, team=team,
            ))
            pid += 1
    return players


@pytest.fixture
def keeper_defender_pool():
    """4 GK (scores 10/8/6/4, cost 1) and 8 DEF (scores 20..6, cost 2)."""
    keepers = [make_player(f"gk{i}", GK, 1, s) for i, s in enumerate([10, 8, 6, 4])]
    defenders = [make_player(f"d{i}", DEF, 2, s) for i, s in enumerate(range(20, 5, -2))]
    return keepers + defenders


@pytest.fixture
def keeper_defender_formation():
    """Degenerate 1 GK + 4 DEF formation."""
    return Formation(name="1-4-0-0", defenders=4, midfielders=0, forwards=0, lineup_size=5)


# ---------------------------------------------------------------------------
# Stub backends
# ---------------------------------------------------------------------------

class RaisingBackend:
    """Backend whose solve always blows up."""

    def __init__(self):
        self.calls = 0

    def solve(self, program, time_limit=None):
        self.calls += 1
        raise RuntimeError("solver crashed")


class StaticBackend:
    """Backend returning a canned status / vector."""

    def __init__(self, status=SolveStatus.OPTIMAL, x=None, pick=None):
        self.status = status
        self.x = x
        self.pick = pick
        self.programs = []
        self.time_limits = []

    def solve(self, program, time_limit=None):
        self.programs.append(program)
        self.time_limits.append(time_limit)
        x = self.x
        if self.pick is not None:
            x = np.zeros(program.n_vars)
            x[list(self.pick)] = 1.0
        return BackendSolution(status=self.status, x=x)


@pytest.fixture
def raising_backend():
    return RaisingBackend()
