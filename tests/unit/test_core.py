"""Unit tests for the bsciuupi orchestrator (solver and search stubbed)."""

from __future__ import annotations

import numpy as np
import pytest

import ciuupi.core as core
from ciuupi.config import CIUUPIConfig
from ciuupi.core import bsciuupi, describe, resolve_rho
from ciuupi.errors import (
    BracketError,
    ConvergenceError,
    InputValidationError,
    NumericalStabilityError,
)
from ciuupi.optimize import standard_ci
from ciuupi.progress import RecordingObserver
from ciuupi.solver import SolverResult

from tests._reference import A_FACTORIAL, C_FACTORIAL


class ShiftSolver:
    """Returns the start shifted by a constant without looking at the problem."""

    def __init__(self, success: bool = True) -> None:
        self.success = success
        self.starts = []

    def minimize(self, fun, x0, bounds, ineq):
        self.starts.append(np.array(x0))
        x = np.array(x0) + 0.05
        return SolverResult(x=x, fun=fun(x), success=self.success, status=0, message="", nit=1, nfev=1)


def test_zero_rho_returns_standard_interval() -> None:
    out = bsciuupi(0.05, rho=0.0, observer=RecordingObserver())
    np.testing.assert_array_equal(out, standard_ci(6.0, 6, 0.05))


def test_zero_rho_honours_alpha_over_config() -> None:
    out = bsciuupi(0.1, rho=0.0, config=CIUUPIConfig(alpha=0.05), observer=RecordingObserver())
    np.testing.assert_allclose(out[5:], 1.6448536269514722)


def test_orthogonal_contrasts_short_circuit(design) -> None:
    obs = RecordingObserver()
    out = bsciuupi(0.05, a=[0, 1, 0, 0], c=[0, 0, 1, 0], x=design, observer=obs)
    np.testing.assert_array_equal(out, standard_ci(6.0, 6, 0.05))
    assert obs.names() == ["rho.computed", "bsciuupi.start", "bsciuupi.done"]


def test_missing_rho_is_tagged_with_stage() -> None:
    with pytest.raises(InputValidationError) as ei:
        bsciuupi(0.05, a=[0, 1, 0, 0], observer=RecordingObserver())
    assert ei.value.stage == "rho"
    assert str(ei.value).startswith("[rho]")


@pytest.mark.parametrize("rho", [1.0, -1.0, 2.0])
def test_degenerate_rho_is_tagged_with_stage(rho: float) -> None:
    with pytest.raises(NumericalStabilityError) as ei:
        bsciuupi(0.05, rho=rho, observer=RecordingObserver())
    assert ei.value.stage == "rho"


def test_invalid_alpha_raises() -> None:
    with pytest.raises(InputValidationError):
        bsciuupi(1.5, rho=0.0)


def test_lambda_errors_are_tagged(monkeypatch) -> None:
    def broken(rho, cfg, *, solver=None, observer=None):
        raise BracketError("no sign change")

    monkeypatch.setattr(core, "compute_lambda", broken)
    with pytest.raises(BracketError) as ei:
        bsciuupi(0.05, rho=0.4, observer=RecordingObserver())
    assert ei.value.stage == "lambda"


def test_knot_errors_are_tagged(monkeypatch) -> None:
    monkeypatch.setattr(core, "compute_lambda", lambda rho, cfg, **kw: 0.1)
    cfg = CIUUPIConfig(strict_convergence=True)
    with pytest.raises(ConvergenceError) as ei:
        bsciuupi(0.05, rho=0.4, config=cfg, solver=ShiftSolver(success=False), observer=RecordingObserver())
    assert ei.value.stage == "knots"


def test_pipeline_order_with_stubbed_search(monkeypatch, design) -> None:
    seen = {}

    def fake_lambda(rho, cfg, *, solver=None, observer=None):
        seen["rho"] = rho
        seen["alpha"] = cfg.alpha
        return 0.1

    monkeypatch.setattr(core, "compute_lambda", fake_lambda)
    solver = ShiftSolver()
    obs = RecordingObserver()
    out = bsciuupi(0.05, a=A_FACTORIAL, c=C_FACTORIAL, x=design, solver=solver, observer=obs)

    assert seen["rho"] == pytest.approx(-1.0 / np.sqrt(2.0), abs=1e-12)
    assert seen["alpha"] == 0.05
    np.testing.assert_allclose(out, standard_ci(6.0, 6, 0.05) + 0.05)
    assert obs.names() == ["rho.computed", "bsciuupi.start", "knots.optimized", "bsciuupi.done"]


def test_repeated_runs_agree(monkeypatch) -> None:
    monkeypatch.setattr(core, "compute_lambda", lambda rho, cfg, **kw: 0.1)
    first = bsciuupi(0.05, rho=0.4, solver=ShiftSolver(), observer=RecordingObserver())
    second = bsciuupi(0.05, rho=0.4, solver=ShiftSolver(), observer=RecordingObserver())
    np.testing.assert_array_equal(first, second)


def test_resolve_rho_prefers_explicit_value(design) -> None:
    assert resolve_rho(0.3, A_FACTORIAL, C_FACTORIAL, design) == 0.3


def test_describe_splits_knot_vector() -> None:
    parts = describe(standard_ci(6.0, 6, 0.05))
    assert parts["b"] == [0.0] * 5
    assert len(parts["s"]) == 6
