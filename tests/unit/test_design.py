"""Unit tests for the design-matrix helpers."""

from __future__ import annotations

import math

import numpy as np
import pytest

from ciuupi.design import least_squares, precision_matrix, qr_r_factor, rho_from_design
from ciuupi.errors import InputValidationError, NumericalStabilityError

from tests._reference import A_FACTORIAL, C_FACTORIAL, Y_FACTORIAL


def test_factorial_precision_is_diagonal(design) -> None:
    np.testing.assert_allclose(precision_matrix(design), np.eye(4) / 4.0, atol=1e-14)


def test_precision_matches_direct_inverse() -> None:
    rng = np.random.default_rng(11)
    X = np.column_stack([np.ones(20), rng.normal(size=(20, 3))])
    np.testing.assert_allclose(precision_matrix(X), np.linalg.inv(X.T @ X), rtol=1e-10, atol=1e-12)


def test_factorial_rho(design) -> None:
    assert rho_from_design(A_FACTORIAL, C_FACTORIAL, design) == pytest.approx(-1.0 / math.sqrt(2.0), abs=1e-12)


@pytest.mark.parametrize(
    "a, c",
    [([0, 1, 0, 0], [0, 0, 1, 0]), ([0, 1, 0, 0], [0, 0, 0, 1]), ([0, 2, 0, 0], [0, 0, 3, 0])],
)
def test_orthogonal_contrasts_give_exact_zero_rho(design, a, c) -> None:
    # exact zero so bsciuupi takes the standard-interval shortcut
    assert rho_from_design(a, c, design) == 0.0


def test_orthogonal_contrasts_with_noisy_design_give_zero_rho() -> None:
    rng = np.random.default_rng(5)
    q, _ = np.linalg.qr(rng.normal(size=(12, 3)))
    X = 3.0 * q
    assert rho_from_design([1.0, 0.0, 0.0], [0.0, 1.0, 0.0], X) == 0.0


def test_rho_is_scale_invariant(design) -> None:
    r1 = rho_from_design(A_FACTORIAL, C_FACTORIAL, design)
    r2 = rho_from_design(3.0 * A_FACTORIAL, 0.5 * C_FACTORIAL, design)
    assert r1 == pytest.approx(r2, abs=1e-14)


def test_collinear_contrasts_raise(design) -> None:
    with pytest.raises(NumericalStabilityError):
        rho_from_design(A_FACTORIAL, -2.0 * A_FACTORIAL, design)


def test_rank_deficient_design_raises(design) -> None:
    X = design.copy()
    X[:, 3] = X[:, 1]
    with pytest.raises(InputValidationError, match="linearly independent"):
        qr_r_factor(X)


@pytest.mark.parametrize(
    "x",
    [np.ones(4), np.ones((2, 4)), np.array([[1.0, np.nan], [1.0, 2.0], [1.0, 3.0]])],
)
def test_malformed_design_raises(x) -> None:
    with pytest.raises(InputValidationError):
        precision_matrix(x)


def test_wrong_contrast_length_raises(design) -> None:
    with pytest.raises(InputValidationError, match="length p = 4"):
        rho_from_design([0, 2, -2], C_FACTORIAL, design)


def test_zero_contrast_raises(design) -> None:
    with pytest.raises(InputValidationError):
        rho_from_design(np.zeros(4), C_FACTORIAL, design)


def test_least_squares_factorial(design) -> None:
    beta_hat, M, rss = least_squares(design, Y_FACTORIAL)
    np.testing.assert_allclose(beta_hat, [87.875, 0.925, 0.075, 0.325], atol=1e-12)
    np.testing.assert_allclose(M, np.eye(4) / 4.0, atol=1e-14)
    # saturated model
    assert rss == pytest.approx(0.0, abs=1e-20)


def test_least_squares_residuals() -> None:
    X = np.column_stack([np.ones(5), np.arange(5.0)])
    y = np.array([1.0, 3.0, 2.0, 5.0, 4.0])
    beta_hat, _, rss = least_squares(X, y)
    ref, res, _, _ = np.linalg.lstsq(X, y, rcond=None)
    np.testing.assert_allclose(beta_hat, ref, atol=1e-12)
    assert rss == pytest.approx(float(res[0]), rel=1e-10)


def test_least_squares_wrong_y_length(design) -> None:
    with pytest.raises(InputValidationError):
        least_squares(design, [1.0, 2.0])
