# src/ciuupi/quadrature.py
"""
Composite Gauss-Legendre quadrature over a partition.

Each subinterval [a, b] gets the canonical n-point rule mapped by
x = ((b-a)/2) * node + (a+b)/2 and weights scaled by (b-a)/2, which is exact
for polynomials of degree 2n - 1 on every piece.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable, Tuple

import numpy as np
from numpy.polynomial import legendre
from numpy.typing import ArrayLike, NDArray

from .errors import InputValidationError

Integrand = Callable[[NDArray[np.float64]], NDArray[np.float64]]


@lru_cache(maxsize=32)
def _gauss_legendre_cached(n_nodes: int) -> Tuple[Tuple[float, ...], Tuple[float, ...]]:
    nodes, weights = legendre.leggauss(n_nodes)
    return tuple(nodes.tolist()), tuple(weights.tolist())


def gauss_legendre(n_nodes: int) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Nodes and weights of the n-point Legendre rule on [-1, 1]."""
    if not (isinstance(n_nodes, (int, np.integer)) and n_nodes >= 1):
        raise InputValidationError(f"n_nodes must be a positive integer. Got {n_nodes}.")
    nodes, weights = _gauss_legendre_cached(int(n_nodes))
    return np.array(nodes), np.array(weights)


def composite_rule(breaks: ArrayLike, n_nodes: int) -> Tuple[NDArray[np.float64], NDArray[np.float64]]:
    """
    Mapped nodes and weights for every subinterval of `breaks`.

    Returns arrays of shape (n_sub, n_nodes).
    """
    br = np.asarray(breaks, dtype=float)
    if br.ndim != 1 or br.size < 2 or np.any(np.diff(br) <= 0.0):
        raise InputValidationError("breaks must be a strictly increasing 1-D array of length >= 2")
    nodes, weights = gauss_legendre(n_nodes)
    a, b = br[:-1, None], br[1:, None]
    half = (b - a) / 2.0
    x = half * nodes[None, :] + (a + b) / 2.0
    w = half * weights[None, :]
    return x, w


def subinterval_integrals(f: Integrand, breaks: ArrayLike, n_nodes: int) -> NDArray[np.float64]:
    """
    Integral of f over each subinterval.

    f receives the flattened nodes and must return an array whose last axis
    matches them (leading axes, e.g. one per gamma value, are kept). The
    result has shape (*leading, n_sub).
    """
    x, w = composite_rule(breaks, n_nodes)
    q = np.asarray(f(x.ravel()), dtype=float)
    q = q.reshape(q.shape[:-1] + x.shape)
    return np.sum(q * w, axis=-1)


def integrate(f: Integrand, breaks: ArrayLike, n_nodes: int) -> NDArray[np.float64]:
    """Composite integral of f over [breaks[0], breaks[-1]]."""
    return np.sum(subinterval_integrals(f, breaks, n_nodes), axis=-1)


__all__ = ["composite_rule", "gauss_legendre", "integrate", "subinterval_integrals"]
