# src/ciuupi/coverage.py
"""
Coverage probability and scaled expected length of the CIUUPI for given
b and s splines.

  - compute_cov_legendre(gam, rho, cfg, b_spl, s_spl)
      (1 - alpha) + int_0^d integrand_cov(x) dx
  - compute_sel(gam, cfg, s_spl)
      1 + (1/c_alpha) int_{-d}^{d} (s(x) - c_alpha) phi(x - gam) dx

Both take a scalar gamma (returning a float) or an array of gammas (returning
an array); the array form integrates the whole grid in one broadcast pass.
"""

from __future__ import annotations

import math
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .config import CIUUPIConfig
from .errors import NumericalStabilityError
from .integrands import SplineFn, integrand_cov, integrand_sel
from .quadrature import integrate

FloatOrArray = Union[float, NDArray[np.float64]]


def require_rho(rho: float) -> float:
    r = float(rho)
    if not math.isfinite(r) or abs(r) >= 1.0:
        raise NumericalStabilityError(
            f"rho must lie strictly inside (-1, 1). Got {rho!r}; "
            "|rho| = 1 means the contrasts a and c are collinear."
        )
    return r


def _as_output(values: NDArray[np.float64], gam: ArrayLike) -> FloatOrArray:
    if np.ndim(gam) == 0:
        return float(np.asarray(values).reshape(-1)[0])
    return np.asarray(values, dtype=float)


def compute_cov_legendre(
    gam: ArrayLike,
    rho: float,
    cfg: CIUUPIConfig,
    b_spl: SplineFn,
    s_spl: SplineFn,
) -> FloatOrArray:
    """Coverage probability of the CIUUPI at gamma."""
    r = require_rho(rho)
    c_alpha = cfg.c_alpha
    total = integrate(
        lambda x: integrand_cov(x, gam, r, c_alpha, b_spl, s_spl),
        cfg.knots,
        cfg.n_nodes,
    )
    return _as_output((1.0 - cfg.alpha) + total, gam)


def compute_sel(gam: ArrayLike, cfg: CIUUPIConfig, s_spl: SplineFn) -> FloatOrArray:
    """Scaled expected length of the CIUUPI at gamma (1 means no improvement)."""
    c_alpha = cfg.c_alpha
    total = integrate(
        lambda x: integrand_sel(x, gam, c_alpha, s_spl),
        cfg.symmetric_knots,
        cfg.n_nodes,
    )
    return _as_output(1.0 + total / c_alpha, gam)


__all__ = ["compute_cov_legendre", "compute_sel", "require_rho"]
