# src/ciuupi/objective.py
"""Objective and inequality constraints consumed by the knot optimizer."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import CIUUPIConfig
from .coverage import compute_cov_legendre
from .integrands import integrand_obj
from .quadrature import integrate
from .splines import spline_b, spline_s


def objective(bsvec: ArrayLike, lam: float, cfg: CIUUPIConfig) -> float:
    """int_0^d (s(x) - c_alpha) (lambda + phi(x)) dx for the s spline of bsvec."""
    c_alpha = cfg.c_alpha
    s_spl = spline_s(bsvec, cfg.d, cfg.n_ints, c_alpha, cfg.natural)
    return float(integrate(lambda x: integrand_obj(x, lam, c_alpha, s_spl), cfg.knots, cfg.n_nodes))


def constraints(bsvec: ArrayLike, rho: float, cfg: CIUUPIConfig) -> NDArray[np.float64]:
    """
    coverage(gamma) - (1 - alpha) for every gamma in cfg.gams.

    Feasible knot vectors make every entry >= 0.
    """
    c_alpha = cfg.c_alpha
    b_spl = spline_b(bsvec, cfg.d, cfg.n_ints, c_alpha, cfg.natural)
    s_spl = spline_s(bsvec, cfg.d, cfg.n_ints, c_alpha, cfg.natural)
    covs = compute_cov_legendre(cfg.gam_grid, rho, cfg, b_spl, s_spl)
    return np.asarray(covs, dtype=float) - (1.0 - cfg.alpha)


__all__ = ["constraints", "objective"]
