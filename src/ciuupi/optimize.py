# src/ciuupi/optimize.py
"""
Inner optimizer: knot values of b and s for a fixed trade-off weight lambda.

    minimize    objective(y, lambda)
    subject to  coverage(gamma; y) >= 1 - alpha   for gamma in cfg.gams
                b_bounds[0] <= b(i) <= b_bounds[1]
                s_bounds[0] <= s(i) <= s_bounds[1]

starting from the standard interval (b = 0, s = c_alpha). SLSQP is a local
method; whatever local optimum it reaches is returned.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .config import CIUUPIConfig
from .coverage import require_rho
from .errors import ConvergenceError
from .normal import quantile_constant
from .objective import constraints, objective
from .progress import ProgressObserver, resolve_observer
from .solver import ConstrainedSolver, SLSQPSolver, SolverResult

LOG = logging.getLogger(__name__)


def standard_ci(d: float, n_ints: int, alpha: float) -> NDArray[np.float64]:
    """Knot vector of the standard 1 - alpha interval: b = 0, s = c_alpha."""
    c_alpha = quantile_constant(alpha)
    return np.concatenate([np.zeros(n_ints - 1), np.full(n_ints, c_alpha)])


def knot_bounds(cfg: CIUUPIConfig) -> List[Tuple[float, float]]:
    return [cfg.b_bounds] * (cfg.n_ints - 1) + [cfg.s_bounds] * cfg.n_ints


def default_solver(cfg: CIUUPIConfig) -> SLSQPSolver:
    return SLSQPSolver(maxiter=cfg.solver_maxiter, ftol=cfg.solver_ftol)


def solve_knots(
    lam: float,
    rho: float,
    cfg: CIUUPIConfig,
    *,
    solver: Optional[ConstrainedSolver] = None,
) -> SolverResult:
    """Run the constrained optimization and return the solver's full result."""
    r = require_rho(rho)
    lam = float(lam)
    start = standard_ci(cfg.d, cfg.n_ints, cfg.alpha)
    backend = default_solver(cfg) if solver is None else solver
    return backend.minimize(
        lambda y: objective(y, lam, cfg),
        start,
        knot_bounds(cfg),
        lambda y: constraints(y, r, cfg),
    )


def optimize_knots(
    lam: float,
    rho: float,
    cfg: CIUUPIConfig,
    *,
    solver: Optional[ConstrainedSolver] = None,
    observer: Optional[ProgressObserver] = None,
) -> NDArray[np.float64]:
    """
    Knot vector (b(1..n-1), s(0..n-1)) minimizing the objective at lambda.

    A solver failure is reported to the observer; with
    cfg.strict_convergence it raises ConvergenceError instead.
    """
    obs = resolve_observer(observer)
    res = solve_knots(lam, rho, cfg, solver=solver)
    if not res.success:
        if cfg.strict_convergence:
            raise ConvergenceError(
                f"SLSQP did not converge at lambda={lam:.6g}: {res.message} (status {res.status})",
                result=res,
            )
        obs.notify("knots.not_converged", lam=float(lam), status=res.status, message=res.message)
    else:
        obs.notify("knots.optimized", lam=float(lam), fun=res.fun, nit=res.nit)
    LOG.debug("optimize_knots lambda=%.6g -> %s", lam, np.array2string(res.x, precision=7))
    return res.x


__all__ = ["default_solver", "knot_bounds", "optimize_knots", "solve_knots", "standard_ci"]
