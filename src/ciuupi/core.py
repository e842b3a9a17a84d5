# src/ciuupi/core.py
"""
bsciuupi: the knot vector (b(1), ..., b(5), s(0), ..., s(5)) that specifies
the confidence interval utilizing uncertain prior information.

Pipeline:
  1. rho      - supplied, or derived from (a, c, X)
  2. lambda   - outer bisection/secant search (skipped when rho == 0)
  3. knots    - inner SLSQP optimization at that lambda

rho == 0 short-circuits to the standard interval: with no correlation the
prior information cannot shorten the interval.
"""

from __future__ import annotations

import contextlib
import logging
import time
from typing import Any, Iterator, Optional

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import CIUUPIConfig
from .coverage import require_rho
from .design import rho_from_design
from .errors import CIUUPIError, InputValidationError
from .optimize import optimize_knots, standard_ci
from .progress import ProgressObserver, resolve_observer
from .search import compute_lambda
from .solver import ConstrainedSolver

LOG = logging.getLogger(__name__)


@contextlib.contextmanager
def _stage(name: str) -> Iterator[None]:
    """Tag package errors escaping this block with the pipeline stage."""
    try:
        yield
    except CIUUPIError as e:
        if e.stage is None:
            e.stage = name
        raise


def resolve_rho(
    rho: Optional[float] = None,
    a: Optional[ArrayLike] = None,
    c: Optional[ArrayLike] = None,
    x: Optional[ArrayLike] = None,
) -> float:
    """rho as given, or computed from the contrasts and design matrix."""
    if rho is not None:
        return float(rho)
    if a is None or c is None or x is None:
        raise InputValidationError("specify either rho or all of a, c and x")
    return rho_from_design(a, c, x)


def bsciuupi(
    alpha: float,
    natural: bool = True,
    rho: Optional[float] = None,
    a: Optional[ArrayLike] = None,
    c: Optional[ArrayLike] = None,
    x: Optional[ArrayLike] = None,
    *,
    config: Optional[CIUUPIConfig] = None,
    solver: Optional[ConstrainedSolver] = None,
    observer: Optional[ProgressObserver] = None,
) -> NDArray[np.float64]:
    """
    Compute the knot vector that specifies the CIUUPI.

    Args:
        alpha: 1 - alpha is the minimum coverage probability.
        natural: natural (True) or clamped (False) cubic splines.
        rho: known correlation between the estimators of theta and tau.
        a, c, x: contrasts and n x p design matrix, used when rho is None.
        config: remaining pipeline settings; its alpha/natural are overridden
            by the arguments above.
        solver: constrained optimizer backend (default SLSQP).
        observer: progress observer (default: logging).

    Returns:
        Array of length 2*n_ints - 1.
    """
    base = CIUUPIConfig() if config is None else config
    cfg = base.replace(alpha=alpha, natural=bool(natural))
    obs = resolve_observer(observer)

    with _stage("rho"):
        r = require_rho(resolve_rho(rho, a, c, x))
        if rho is None:
            obs.notify("rho.computed", rho=r)

    obs.notify("bsciuupi.start", alpha=cfg.alpha, rho=r, natural=cfg.natural)
    t0 = time.perf_counter()

    if r == 0.0:
        out = standard_ci(cfg.d, cfg.n_ints, cfg.alpha)
    else:
        with _stage("lambda"):
            lam = compute_lambda(r, cfg, solver=solver, observer=obs)
        with _stage("knots"):
            out = optimize_knots(lam, r, cfg, solver=solver, observer=obs)

    obs.notify("bsciuupi.done", seconds=time.perf_counter() - t0)
    return out


def describe(bsvec: ArrayLike, n_ints: int = 6) -> dict[str, Any]:
    """Split a knot vector into its b and s parts."""
    y = np.asarray(bsvec, dtype=float)
    return {
        "b": [float(v) for v in y[: n_ints - 1]],
        "s": [float(v) for v in y[n_ints - 1 :]],
    }


__all__ = ["bsciuupi", "describe", "resolve_rho"]
