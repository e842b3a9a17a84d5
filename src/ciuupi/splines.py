# src/ciuupi/splines.py
"""
Spline builder for the b and s functions that index the CIUUPI.

A knot vector y = (b(1), ..., b(n-1), s(0), ..., s(n-1)) with n = n_ints
fixes the values of b and s at the knots 0, d/n, ..., d. By assumption

    b(0) = 0,  b(-x) = -b(x),  b(x) = 0        for |x| >= d
    s(-x) = s(x),              s(x) = c_alpha  for |x| >= d

so the mirrored values at -d, ..., d are interpolated by a cubic spline
(natural: zero second derivative at +-d; clamped: zero first derivative).
Evaluation goes through |x| so the symmetry holds exactly in floating point.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike, NDArray
from scipy.interpolate import CubicSpline

from .errors import InputValidationError
from .normal import quantile_constant

FloatOrArray = Union[float, NDArray[np.float64]]


def _validate_bsvec(bsvec: ArrayLike, n_ints: int) -> NDArray[np.float64]:
    y = np.asarray(bsvec, dtype=float)
    if y.ndim != 1 or y.size != 2 * n_ints - 1:
        raise InputValidationError(
            f"knot vector must have length 2*n_ints - 1 = {2 * n_ints - 1}. Got shape {y.shape}."
        )
    if not np.all(np.isfinite(y)):
        raise InputValidationError("knot vector must be finite")
    return y


def _validate_domain(d: float, n_ints: int) -> None:
    if not (math.isfinite(float(d)) and float(d) > 0.0):
        raise InputValidationError(f"d must be finite and > 0. Got {d}.")
    if not (isinstance(n_ints, (int, np.integer)) and n_ints >= 1):
        raise InputValidationError(f"n_ints must be a positive integer. Got {n_ints}.")


@dataclass(frozen=True)
class SymmetricSpline:
    """
    Cubic spline on [-d, d] that is even (parity=+1) or odd (parity=-1).

    Outside [-d, d] it returns `outside`. Scalars in, float out; arrays in,
    arrays of the same shape out.
    """

    spline: CubicSpline
    d: float
    parity: int
    outside: float

    def __call__(self, x: ArrayLike) -> FloatOrArray:
        xa = np.asarray(x, dtype=float)
        ax = np.abs(xa)
        inside = ax < self.d
        vals = self.spline(np.minimum(ax, self.d))
        if self.parity < 0:
            vals = np.sign(xa) * vals
        out = np.where(inside, vals, self.outside)
        out = np.where(np.isnan(xa), np.nan, out)
        if out.ndim == 0:
            return float(out)
        return out


def _build(knots_all: NDArray[np.float64], vals_all: NDArray[np.float64], natural: bool) -> CubicSpline:
    bc_type = "natural" if natural else "clamped"
    return CubicSpline(knots_all, vals_all, bc_type=bc_type)


def spline_b(bsvec: ArrayLike, d: float, n_ints: int, c_alpha: float, natural: bool = True) -> SymmetricSpline:
    """Odd function b with b(i*d/n_ints) = bsvec[i-1] for i = 1..n_ints-1."""
    _validate_domain(d, n_ints)
    y = _validate_bsvec(bsvec, n_ints)
    b_vals = np.concatenate([[0.0], y[: n_ints - 1], [0.0]])
    vals_all = np.concatenate([-b_vals[:0:-1], b_vals])
    knots_all = np.linspace(-d, d, 2 * n_ints + 1)
    return SymmetricSpline(_build(knots_all, vals_all, natural), float(d), -1, 0.0)


def spline_s(bsvec: ArrayLike, d: float, n_ints: int, c_alpha: float, natural: bool = True) -> SymmetricSpline:
    """Even function s with s(i*d/n_ints) = bsvec[n_ints-1+i] for i = 0..n_ints-1."""
    _validate_domain(d, n_ints)
    y = _validate_bsvec(bsvec, n_ints)
    s_vals = np.concatenate([y[n_ints - 1 :], [c_alpha]])
    vals_all = np.concatenate([s_vals[:0:-1], s_vals])
    knots_all = np.linspace(-d, d, 2 * n_ints + 1)
    return SymmetricSpline(_build(knots_all, vals_all, natural), float(d), 1, float(c_alpha))


def bsspline(
    x: ArrayLike,
    bsvec: ArrayLike,
    alpha: float,
    natural: bool = True,
    *,
    d: float = 6.0,
    n_ints: int = 6,
) -> pd.DataFrame:
    """Evaluate b and s at x; returns a frame with columns x, b, s."""
    c_alpha = quantile_constant(alpha)
    xs = np.atleast_1d(np.asarray(x, dtype=float))
    b_spl = spline_b(bsvec, d, n_ints, c_alpha, natural)
    s_spl = spline_s(bsvec, d, n_ints, c_alpha, natural)
    return pd.DataFrame({"x": xs, "b": b_spl(xs), "s": s_spl(xs)})


__all__ = ["SymmetricSpline", "bsspline", "spline_b", "spline_s"]
