# src/ciuupi/design.py
"""
Design-matrix helpers for y = X beta + eps.

  - precision_matrix(x): (X'X)^{-1} from the R factor of a QR decomposition
  - rho_from_design(a, c, x): correlation between the least squares
    estimators of theta = a'beta and tau = c'beta
  - least_squares(x, y): beta_hat and the residual standard deviation
"""

from __future__ import annotations

import math
from typing import Tuple

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import linalg

from .errors import InputValidationError, NumericalStabilityError

# Relative tolerance on |diag(R)| below which X is treated as rank deficient.
RANK_TOL = 1e-10

# |rho| within this distance of 1 is treated as exact collinearity of a and c.
COLLINEAR_TOL = 1e-12

# |rho| at or below this is rounding noise from the QR solve; it is returned as 0.
ORTHOGONAL_TOL = 1e-12


def _as_design(x: ArrayLike) -> NDArray[np.float64]:
    X = np.asarray(x, dtype=float)
    if X.ndim != 2:
        raise InputValidationError(f"design matrix must be 2-D. Got shape {X.shape}.")
    n, p = X.shape
    if n < p or p == 0:
        raise InputValidationError(f"design matrix must have n >= p >= 1 rows/columns. Got {n}x{p}.")
    if not np.all(np.isfinite(X)):
        raise InputValidationError("design matrix must be finite")
    return X


def _as_contrast(name: str, v: ArrayLike, p: int) -> NDArray[np.float64]:
    arr = np.asarray(v, dtype=float).ravel()
    if arr.size != p:
        raise InputValidationError(f"{name} must have length p = {p}. Got {arr.size}.")
    if not np.all(np.isfinite(arr)):
        raise InputValidationError(f"{name} must be finite")
    return arr


def qr_r_factor(x: ArrayLike) -> NDArray[np.float64]:
    X = _as_design(x)
    R = np.linalg.qr(X, mode="r")
    diag = np.abs(np.diag(R))
    if diag.min() <= RANK_TOL * max(diag.max(), 1.0):
        raise InputValidationError("design matrix does not have linearly independent columns")
    return R


def precision_matrix(x: ArrayLike) -> NDArray[np.float64]:
    """(X'X)^{-1} computed as (R'R)^{-1} for the QR factor R of X."""
    R = qr_r_factor(x)
    return linalg.cho_solve((R, False), np.eye(R.shape[0]))


def rho_from_design(a: ArrayLike, c: ArrayLike, x: ArrayLike) -> float:
    """rho = a'M c / sqrt((a'M a)(c'M c)) with M = (X'X)^{-1}."""
    M = precision_matrix(x)
    p = M.shape[0]
    av = _as_contrast("a", a, p)
    cv = _as_contrast("c", c, p)
    v_theta = float(av @ M @ av)
    v_tau = float(cv @ M @ cv)
    if v_theta <= 0.0 or v_tau <= 0.0:
        raise InputValidationError("a and c must be non-zero contrasts")
    rho = float(av @ M @ cv) / math.sqrt(v_theta * v_tau)
    if not math.isfinite(rho) or abs(rho) >= 1.0 - COLLINEAR_TOL:
        raise NumericalStabilityError(
            f"|rho| = {abs(rho):.12g} >= 1: a and c are (nearly) collinear"
        )
    if abs(rho) <= ORTHOGONAL_TOL:
        return 0.0
    return rho


def least_squares(x: ArrayLike, y: ArrayLike) -> Tuple[NDArray[np.float64], NDArray[np.float64], float]:
    """
    Returns (beta_hat, (X'X)^{-1}, residual sum of squares).
    """
    X = _as_design(x)
    yv = np.asarray(y, dtype=float).ravel()
    if yv.size != X.shape[0]:
        raise InputValidationError(f"y must have length n = {X.shape[0]}. Got {yv.size}.")
    M = precision_matrix(X)
    beta_hat = M @ X.T @ yv
    resid = yv - X @ beta_hat
    return beta_hat, M, float(resid @ resid)


__all__ = ["least_squares", "precision_matrix", "qr_r_factor", "rho_from_design"]
