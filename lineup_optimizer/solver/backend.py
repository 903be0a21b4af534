"""Binary integer program backends.

A backend accepts a maximisation objective plus linear constraints over
binary variables and returns a status and an assignment.  The exact
solver only talks to this interface, so any conforming MILP library can
stand in for the default scipy/HiGHS implementation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

import numpy as np
from scipy.optimize import Bounds as ScipyBounds, LinearConstraint, milp

from lineup_optimizer.logging_config import get_logger

logger = get_logger(__name__)


class SolveStatus(str, Enum):
    OPTIMAL = "optimal"
    FEASIBLE = "feasible"
    INFEASIBLE = "infeasible"
    UNBOUNDED = "unbounded"
    ERROR = "error"


@dataclass
class BinaryProgram:
    """maximise objective @ x  s.t.  lower <= A @ x <= upper,  x in {0, 1}."""

    objective: np.ndarray
    A: np.ndarray
    lower: np.ndarray
    upper: np.ndarray
    name: str = ""

    @property
    def n_vars(self) -> int:
        return len(self.objective)


@dataclass
class BackendSolution:
    status: SolveStatus
    x: np.ndarray | None = None
    message: str = ""
    info: dict = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.status in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)


class IntegerBackend(Protocol):
    def solve(
        self, program: BinaryProgram, time_limit: float | None = None,
    ) -> BackendSolution:
        ...


# scipy.optimize.milp status codes
_MILP_STATUS = {
    0: SolveStatus.OPTIMAL,
    2: SolveStatus.INFEASIBLE,
    3: SolveStatus.UNBOUNDED,
    4: SolveStatus.ERROR,
}


class ScipyMilpBackend:
    """HiGHS branch-and-bound via ``scipy.optimize.milp``."""

    def solve(
        self, program: BinaryProgram, time_limit: float | None = None,
    ) -> BackendSolution:
        n = program.n_vars
        options: dict = {"disp": False}
        if time_limit is not None:
            options["time_limit"] = float(time_limit)

        # milp minimises, so negate the objective
        result = milp(
            -np.asarray(program.objective, dtype=float),
            integrality=np.ones(n),
            bounds=ScipyBounds(lb=0, ub=1),
            constraints=LinearConstraint(program.A, program.lower, program.upper),
            options=options,
        )

        if result.status == 1:
            # Time/iteration limit: usable only if HiGHS kept an incumbent
            status = SolveStatus.FEASIBLE if result.x is not None else SolveStatus.ERROR
        else:
            status = _MILP_STATUS.get(result.status, SolveStatus.ERROR)

        logger.debug(
            "milp %s: status=%s (%s)", program.name, status.value, result.message,
        )
        return BackendSolution(
            status=status,
            x=result.x,
            message=str(result.message),
            info={"raw_status": int(result.status)},
        )
