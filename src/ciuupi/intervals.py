# src/ciuupi/intervals.py
"""
Evaluators that consume an already computed knot vector.

Provides:
  - cpciuupi(gam, bsvec, alpha, ...)   coverage probability curve
  - selciuupi(gam, bsvec, alpha, ...)  scaled expected length curve
  - ciuupi(alpha, a, c, x, bsvec, t, y, ...)  the realized CIUUPI
  - cistandard(a, x, y, alpha, ...)    the standard interval

Notes:
  * The CIUUPI for theta = a'beta is
        [theta_hat - v * b(gam_hat) - v * s(gam_hat), theta_hat - v * b(gam_hat) + v * s(gam_hat)]
    with v = sig * sqrt(a'(X'X)^{-1}a) and gam_hat = tau_hat / (sig * sqrt(c'(X'X)^{-1}c)).
  * When sig is not supplied it is estimated from the residuals; with fewer
    than 30 residual degrees of freedom a UserWarning is emitted.
"""

from __future__ import annotations

import logging
import math
import warnings
from typing import Optional

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray

from .config import CIUUPIConfig
from .core import resolve_rho
from .coverage import compute_cov_legendre, compute_sel, require_rho
from .design import least_squares
from .errors import InputValidationError
from .splines import spline_b, spline_s

LOG = logging.getLogger(__name__)

# Residual degrees of freedom below which an estimated sigma is flagged.
MIN_RESIDUAL_DF = 30


def cpciuupi(
    gam: ArrayLike,
    bsvec: ArrayLike,
    alpha: float,
    natural: bool = True,
    rho: Optional[float] = None,
    a: Optional[ArrayLike] = None,
    c: Optional[ArrayLike] = None,
    x: Optional[ArrayLike] = None,
    *,
    config: Optional[CIUUPIConfig] = None,
) -> NDArray[np.float64]:
    """Coverage probability of the CIUUPI at each gamma."""
    cfg = (CIUUPIConfig() if config is None else config).replace(alpha=alpha, natural=bool(natural))
    r = require_rho(resolve_rho(rho, a, c, x))
    b_spl = spline_b(bsvec, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)
    s_spl = spline_s(bsvec, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)
    gams = np.atleast_1d(np.asarray(gam, dtype=float))
    return np.asarray(compute_cov_legendre(gams, r, cfg, b_spl, s_spl), dtype=float)


def selciuupi(
    gam: ArrayLike,
    bsvec: ArrayLike,
    alpha: float,
    natural: bool = True,
    rho: Optional[float] = None,
    a: Optional[ArrayLike] = None,
    c: Optional[ArrayLike] = None,
    x: Optional[ArrayLike] = None,
    *,
    config: Optional[CIUUPIConfig] = None,
) -> NDArray[np.float64]:
    """
    Scaled expected length of the CIUUPI at each gamma.

    rho (or a, c, x) is accepted for symmetry with cpciuupi; the scaled
    expected length does not depend on it.
    """
    cfg = (CIUUPIConfig() if config is None else config).replace(alpha=alpha, natural=bool(natural))
    if rho is not None or a is not None:
        require_rho(resolve_rho(rho, a, c, x))
    s_spl = spline_s(bsvec, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)
    gams = np.atleast_1d(np.asarray(gam, dtype=float))
    return np.asarray(compute_sel(gams, cfg, s_spl), dtype=float)


def _resolve_sigma(sig: Optional[float], rss: float, n: int, p: int) -> float:
    if sig is not None:
        s = float(sig)
        if not (math.isfinite(s) and s > 0.0):
            raise InputValidationError(f"sig must be finite and > 0. Got {sig!r}.")
        return s
    df = n - p
    if df <= 0:
        raise InputValidationError("sig cannot be estimated: n - p must be positive")
    LOG.info("Error variance not supplied; estimating it from the data (n - p = %d)", df)
    if df < MIN_RESIDUAL_DF:
        warnings.warn(f"n - p = {df} < {MIN_RESIDUAL_DF}: estimated sigma is imprecise", UserWarning, stacklevel=3)
    return math.sqrt(rss / df)


def cistandard(
    a: ArrayLike,
    x: ArrayLike,
    y: ArrayLike,
    alpha: float,
    sig: Optional[float] = None,
) -> pd.DataFrame:
    """Standard 1 - alpha interval for a'beta."""
    cfg = CIUUPIConfig(alpha=alpha)
    beta_hat, M, rss = least_squares(x, y)
    n, p = np.asarray(x).shape
    av = np.asarray(a, dtype=float).ravel()
    if av.size != p:
        raise InputValidationError(f"a must have length p = {p}. Got {av.size}.")
    sigma = _resolve_sigma(sig, rss, n, p)

    theta_hat = float(av @ beta_hat)
    half = sigma * math.sqrt(float(av @ M @ av)) * cfg.c_alpha
    return pd.DataFrame({"lower": [theta_hat - half], "upper": [theta_hat + half]}, index=["standard"])


def ciuupi(
    alpha: float,
    a: ArrayLike,
    c: ArrayLike,
    x: ArrayLike,
    bsvec: ArrayLike,
    t: float,
    y: ArrayLike,
    natural: bool = True,
    sig: Optional[float] = None,
) -> pd.DataFrame:
    """The confidence interval utilizing the prior information c'beta = t."""
    cfg = CIUUPIConfig(alpha=alpha, natural=bool(natural))
    beta_hat, M, rss = least_squares(x, y)
    n, p = np.asarray(x).shape
    av = np.asarray(a, dtype=float).ravel()
    cv = np.asarray(c, dtype=float).ravel()
    if av.size != p or cv.size != p:
        raise InputValidationError(f"a and c must have length p = {p}")
    sigma = _resolve_sigma(sig, rss, n, p)

    theta_hat = float(av @ beta_hat)
    tau_hat = float(cv @ beta_hat) - float(t)
    gam_hat = tau_hat / (sigma * math.sqrt(float(cv @ M @ cv)))
    scale = sigma * math.sqrt(float(av @ M @ av))

    b_val = spline_b(bsvec, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)(gam_hat)
    s_val = spline_s(bsvec, cfg.d, cfg.n_ints, cfg.c_alpha, cfg.natural)(gam_hat)
    centre = theta_hat - scale * b_val
    return pd.DataFrame(
        {"lower": [centre - scale * s_val], "upper": [centre + scale * s_val]},
        index=["ciuupi"],
    )


__all__ = ["ciuupi", "cistandard", "cpciuupi", "selciuupi"]
