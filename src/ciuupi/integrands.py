# src/ciuupi/integrands.py
"""
Closed-form integrands of the coverage probability, the objective and the
scaled expected length.

`x` is a 1-D array of quadrature nodes. `gam` may be a scalar or a 1-D array
of gamma values; in the latter case the result has shape (len(gam), len(x)).
"""

from __future__ import annotations

from typing import Callable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from .normal import norm_pdf, psi

SplineFn = Callable[[ArrayLike], NDArray[np.float64]]


def _gamma_axis(gam: ArrayLike) -> NDArray[np.float64]:
    return np.asarray(gam, dtype=float)[..., None]


def integrand_cov(
    x: ArrayLike,
    gam: ArrayLike,
    rho: float,
    c_alpha: float,
    b_spl: SplineFn,
    s_spl: SplineFn,
) -> NDArray[np.float64]:
    """
    (k(x, gam, rho) - k_dag(x, gam, rho)) * phi(x - gam), summed over the
    mirrored node -x so that integrating over [0, d] covers [-d, d].

    k is the probability that the companion estimator lands inside
    [b(x) - s(x), b(x) + s(x)] given the discrepancy x; k_dag is the same for
    the standard interval [-c_alpha, c_alpha].
    """
    xs = np.asarray(x, dtype=float)
    g = _gamma_axis(gam)
    var = 1.0 - rho * rho

    b_pos, s_pos = b_spl(xs), s_spl(xs)
    b_neg, s_neg = b_spl(-xs), s_spl(-xs)

    mu1 = rho * (xs - g)
    k1 = psi(b_pos - s_pos, b_pos + s_pos, mu1, var)
    k_dag1 = psi(-c_alpha, c_alpha, mu1, var)
    term1 = norm_pdf(xs - g)

    mu2 = rho * (-xs - g)
    k2 = psi(b_neg - s_neg, b_neg + s_neg, mu2, var)
    k_dag2 = psi(-c_alpha, c_alpha, mu2, var)
    term2 = norm_pdf(xs + g)

    return (k1 - k_dag1) * term1 + (k2 - k_dag2) * term2


def integrand_obj(x: ArrayLike, lam: float, c_alpha: float, s_spl: SplineFn) -> NDArray[np.float64]:
    """(s(x) - c_alpha) * (lambda + phi(x))."""
    xs = np.asarray(x, dtype=float)
    return (s_spl(xs) - c_alpha) * (lam + norm_pdf(xs))


def integrand_sel(x: ArrayLike, gam: ArrayLike, c_alpha: float, s_spl: SplineFn) -> NDArray[np.float64]:
    """(s(x) - c_alpha) * phi(x - gam)."""
    xs = np.asarray(x, dtype=float)
    return (s_spl(xs) - c_alpha) * norm_pdf(xs - _gamma_axis(gam))


__all__ = ["integrand_cov", "integrand_obj", "integrand_sel"]
