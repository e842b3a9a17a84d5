# src/ciuupi/search.py
"""
Outer search for the trade-off weight lambda.

For a given lambda the inner optimizer yields knots y(lambda); from those

    expected_gain       = 1 - sel(0)^2
    max_potential_loss  = max_{0 <= gamma <= d} sel(gamma)^2 - 1
    ratio_minus1        = expected_gain / max_potential_loss - 1

and lambda is chosen so that ratio_minus1(lambda) = 0: `n_iter` bisection
steps on cfg.lambda_bracket, then a secant step through the final bracket,
then one more secant step through whichever pair still brackets the root.

Bracket handling (cfg.bracket_policy):
  * "raise"  : the final bracket endpoints must differ in sign, else BracketError.
  * "expand" : check the initial endpoints first and double the upper end
               (up to cfg.max_lambda) until a sign change appears.
  * "ignore" : no checks at all.
"""

from __future__ import annotations

import logging
import math
from typing import Callable, Dict, Optional, Tuple

import numpy as np
from scipy import optimize

from .config import CIUUPIConfig
from .coverage import compute_sel
from .integrands import SplineFn
from .errors import BracketError, NumericalStabilityError
from .optimize import optimize_knots
from .progress import ProgressObserver, resolve_observer
from .solver import ConstrainedSolver
from .splines import spline_s

LOG = logging.getLogger(__name__)


def max_sel(cfg: CIUUPIConfig, s_spl: SplineFn) -> Tuple[float, float]:
    """(gamma, sel(gamma)) at the maximum of the scaled expected length on [0, d]."""
    res = optimize.minimize_scalar(
        lambda g: -compute_sel(g, cfg, s_spl),
        bounds=(0.0, float(cfg.d)),
        method="bounded",
        options={"xatol": cfg.sel_xatol},
    )
    return float(res.x), float(-res.fun)


def compute_ratio_minus1(
    lam: float,
    rho: float,
    cfg: CIUUPIConfig,
    *,
    solver: Optional[ConstrainedSolver] = None,
    observer: Optional[ProgressObserver] = None,
) -> float:
    """expected_gain / max_potential_loss - 1 for the knots optimal at lambda."""
    knots = optimize_knots(lam, rho, cfg, solver=solver, observer=observer)
    s_spl = spline_s(knots, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)

    _, sel_max = max_sel(cfg, s_spl)
    sel_min = float(compute_sel(0.0, cfg, s_spl))

    expected_gain = 1.0 - sel_min**2
    max_potential_loss = sel_max**2 - 1.0
    if not max_potential_loss > 0.0:
        raise NumericalStabilityError(
            f"max potential loss is {max_potential_loss:.3g} at lambda={lam:.6g}; "
            "the optimized interval never exceeds the standard length, so the "
            "gain/loss ratio is undefined"
        )
    ratio = expected_gain / max_potential_loss - 1.0
    if not math.isfinite(ratio):
        raise NumericalStabilityError(f"non-finite gain/loss ratio at lambda={lam:.6g}")
    LOG.debug(
        "lambda=%.6g gain=%.6g loss=%.6g ratio_minus1=%.6g", lam, expected_gain, max_potential_loss, ratio
    )
    return ratio


def _secant_root(x1: float, y1: float, x2: float, y2: float) -> float:
    if y2 == y1 or x2 == x1:
        raise NumericalStabilityError(
            f"secant step undefined: f({x1:.6g}) = f({x2:.6g}) = {y1:.6g}"
        )
    slope = (y2 - y1) / (x2 - x1)
    return x1 - y1 / slope


def _expand_bracket(
    f: Callable[[float], float],
    lower: float,
    upper: float,
    max_lambda: float,
    obs: ProgressObserver,
) -> Tuple[float, float]:
    if f(lower) >= 0.0:
        raise BracketError(
            f"ratio_minus1({lower:.6g}) >= 0; no root of the gain/loss balance above lambda={lower:.6g}"
        )
    while f(upper) < 0.0:
        if upper >= max_lambda:
            raise BracketError(f"ratio_minus1 stays negative up to lambda={max_lambda:.6g}")
        lower, upper = upper, min(2.0 * upper, max_lambda)
        obs.notify("lambda.expand", lower=lower, upper=upper)
    return lower, upper


def compute_lambda(
    rho: float,
    cfg: CIUUPIConfig,
    *,
    solver: Optional[ConstrainedSolver] = None,
    observer: Optional[ProgressObserver] = None,
) -> float:
    """Trade-off weight balancing expected gain against maximum potential loss."""
    obs = resolve_observer(observer)
    memo: Dict[float, float] = {}

    def f(lam: float) -> float:
        key = float(lam)
        if key not in memo:
            memo[key] = compute_ratio_minus1(key, rho, cfg, solver=solver, observer=obs)
        return memo[key]

    lower, upper = cfg.lambda_bracket
    if cfg.bracket_policy == "expand":
        lower, upper = _expand_bracket(f, lower, upper, cfg.max_lambda, obs)

    for step in range(1, cfg.n_iter + 1):
        mid = (upper + lower) / 2.0
        val = f(mid)
        if val < 0.0:
            lower = mid
        else:
            upper = mid
        obs.notify("lambda.bisect", step=step, lam=mid, ratio_minus1=val, lower=lower, upper=upper)

    x1, x2 = lower, upper
    y1, y2 = f(x1), f(x2)
    if cfg.bracket_policy != "ignore" and np.sign(y1) == np.sign(y2) and y1 != 0.0:
        raise BracketError(
            f"no sign change of ratio_minus1 on [{x1:.6g}, {x2:.6g}] "
            f"(values {y1:.6g}, {y2:.6g}); widen lambda_bracket or use bracket_policy='expand'"
        )

    x3 = _secant_root(x1, y1, x2, y2)
    y3 = f(x3)
    obs.notify("lambda.secant", lam=x3, ratio_minus1=y3)

    if np.sign(y1) != np.sign(y3):
        lam = _secant_root(x1, y1, x3, y3)
    else:
        lam = _secant_root(x2, y2, x3, y3)

    if cfg.bracket_policy != "ignore" and not (math.isfinite(lam) and lam >= 0.0):
        raise NumericalStabilityError(f"lambda search produced an invalid weight {lam!r}")
    obs.notify("lambda.done", lam=lam, evaluations=len(memo))
    return float(lam)


__all__ = ["compute_lambda", "compute_ratio_minus1", "max_sel"]
