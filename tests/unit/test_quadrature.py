"""Unit tests for composite Gauss-Legendre quadrature."""

from __future__ import annotations

import numpy as np
import pytest

from ciuupi.errors import InputValidationError
from ciuupi.quadrature import composite_rule, gauss_legendre, integrate, subinterval_integrals

BREAKS = np.linspace(0.0, 6.0, 7)


def test_reference_rule_five_nodes() -> None:
    nodes, weights = gauss_legendre(5)
    assert nodes.shape == weights.shape == (5,)
    assert weights.sum() == pytest.approx(2.0)
    assert nodes[2] == pytest.approx(0.0, abs=1e-15)
    assert weights[2] == pytest.approx(128.0 / 225.0)


def test_exact_up_to_degree_2n_minus_1() -> None:
    assert integrate(lambda x: x**9, BREAKS, 5) == pytest.approx(6.0**10 / 10.0, rel=1e-12)
    # degree 10 is no longer exact for a single panel
    single = np.array([0.0, 6.0])
    assert integrate(lambda x: x**10, single, 5) != pytest.approx(6.0**11 / 11.0, rel=1e-12)


def test_gaussian_mass_on_symmetric_partition() -> None:
    breaks = np.linspace(-6.0, 6.0, 13)
    val = integrate(lambda x: np.exp(-0.5 * x * x) / np.sqrt(2 * np.pi), breaks, 5)
    assert val == pytest.approx(1.0 - 2e-9, abs=1e-8)


def test_subinterval_results_sum_to_total() -> None:
    parts = subinterval_integrals(np.cos, BREAKS, 5)
    assert parts.shape == (6,)
    assert parts.sum() == pytest.approx(np.sin(6.0), abs=1e-9)
    assert parts[0] == pytest.approx(np.sin(1.0), abs=1e-10)


def test_leading_axes_are_kept() -> None:
    scale = np.array([1.0, 2.0])
    out = integrate(lambda x: np.outer(scale, x**2), BREAKS, 5)
    np.testing.assert_allclose(out, [72.0, 144.0], rtol=1e-12)


def test_composite_rule_maps_nodes_inside_panels() -> None:
    x, w = composite_rule(BREAKS, 3)
    assert x.shape == w.shape == (6, 3)
    assert np.all((x > BREAKS[:-1, None]) & (x < BREAKS[1:, None]))
    np.testing.assert_allclose(w.sum(axis=1), np.diff(BREAKS))


@pytest.mark.parametrize("breaks", [[0.0], [1.0, 0.0], [[0.0, 1.0]], [0.0, 0.0, 1.0]])
def test_bad_breaks(breaks) -> None:
    with pytest.raises(InputValidationError):
        composite_rule(breaks, 5)


@pytest.mark.parametrize("n", [0, -1, 2.5])
def test_bad_node_count(n) -> None:
    with pytest.raises(InputValidationError):
        gauss_legendre(n)
