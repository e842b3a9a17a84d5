# src/ciuupi/normal.py
"""
Normal-distribution helpers used throughout the integrands.

Provides:
  - norm_cdf(x, mean, sd), norm_pdf(x, mean, sd), norm_ppf(p)
  - psi(x, y, mu, variance) = P(x <= Z <= y) for Z ~ N(mu, variance)
  - quantile_constant(alpha) = Phi^{-1}(1 - alpha/2)

All functions broadcast over numpy arrays.
"""

from __future__ import annotations

import math
from typing import Union

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import special
from scipy import stats as scipy_stats

from .errors import InputValidationError

FloatOrArray = Union[float, NDArray[np.float64]]

_INV_SQRT_2PI = 1.0 / math.sqrt(2.0 * math.pi)


def norm_cdf(x: ArrayLike, mean: ArrayLike = 0.0, sd: ArrayLike = 1.0) -> FloatOrArray:
    return special.ndtr((np.asarray(x, dtype=float) - mean) / sd)


def norm_pdf(x: ArrayLike, mean: ArrayLike = 0.0, sd: ArrayLike = 1.0) -> FloatOrArray:
    z = (np.asarray(x, dtype=float) - mean) / sd
    return _INV_SQRT_2PI * np.exp(-0.5 * z * z) / sd


def norm_ppf(p: ArrayLike) -> FloatOrArray:
    return scipy_stats.norm.ppf(p)


def psi(x: ArrayLike, y: ArrayLike, mu: ArrayLike, variance: ArrayLike) -> FloatOrArray:
    """P(x <= Z <= y) where Z ~ N(mu, variance). Requires y >= x for a probability."""
    sigma = np.sqrt(variance)
    return norm_cdf(y, mu, sigma) - norm_cdf(x, mu, sigma)


def quantile_constant(alpha: float) -> float:
    """Two-sided standard normal quantile c_alpha = Phi^{-1}(1 - alpha/2)."""
    a = float(alpha)
    if not (math.isfinite(a) and 0.0 < a < 1.0):
        raise InputValidationError(f"alpha must be in (0,1). Got {alpha!r}.")
    return float(scipy_stats.norm.ppf(1.0 - a / 2.0))


__all__ = ["norm_cdf", "norm_pdf", "norm_ppf", "psi", "quantile_constant"]
