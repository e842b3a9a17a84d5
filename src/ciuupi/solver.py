# src/ciuupi/solver.py
"""
Constrained local optimizer interface.

The knot optimizer only talks to a `ConstrainedSolver`: it hands over an
objective, a starting point, box bounds and a vector-valued inequality
constraint (feasible when every entry is >= 0) and gets a `SolverResult`
back, status included. `SLSQPSolver` is the default backend.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol, Sequence, Tuple

import numpy as np
from numpy.typing import NDArray
from scipy import optimize

ScalarFn = Callable[[NDArray[np.float64]], float]
VectorFn = Callable[[NDArray[np.float64]], NDArray[np.float64]]

# Step used for central differences: cube root of machine epsilon.
CENTRAL_STEP = float(np.finfo(float).eps ** (1.0 / 3.0))


@dataclass(frozen=True)
class SolverResult:
    x: NDArray[np.float64]
    fun: float
    success: bool
    status: int
    message: str
    nit: int = 0
    nfev: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": [float(v) for v in self.x],
            "fun": float(self.fun),
            "success": bool(self.success),
            "status": int(self.status),
            "message": str(self.message),
            "nit": int(self.nit),
            "nfev": int(self.nfev),
        }


class ConstrainedSolver(Protocol):
    def minimize(
        self,
        fun: ScalarFn,
        x0: NDArray[np.float64],
        bounds: Sequence[Tuple[float, float]],
        ineq: VectorFn,
    ) -> SolverResult: ...


def central_difference(f: Callable[[NDArray[np.float64]], Any], x: NDArray[np.float64], h: float = CENTRAL_STEP) -> NDArray[np.float64]:
    """
    Central-difference gradient (scalar f) or Jacobian (vector f, shape (m, n)).
    """
    x = np.asarray(x, dtype=float)
    cols = []
    for i in range(x.size):
        step = np.zeros_like(x)
        step[i] = h
        hi = np.asarray(f(x + step), dtype=float)
        lo = np.asarray(f(x - step), dtype=float)
        cols.append((hi - lo) / (2.0 * h))
    jac = np.stack(cols, axis=-1)
    return jac


@dataclass
class SLSQPSolver:
    """
    Sequential least-squares quadratic programming via scipy.

    gradient:
        "central" (default) supplies central-difference derivatives;
        "forward" lets scipy use its own forward differences.
    """

    maxiter: int = 1000
    ftol: float = 1e-10
    gradient: str = "central"
    step: float = CENTRAL_STEP

    def minimize(
        self,
        fun: ScalarFn,
        x0: NDArray[np.float64],
        bounds: Sequence[Tuple[float, float]],
        ineq: VectorFn,
    ) -> SolverResult:
        if self.gradient not in ("central", "forward"):
            raise ValueError(f"gradient must be 'central' or 'forward', got {self.gradient!r}")

        jac: Optional[Callable[[NDArray[np.float64]], NDArray[np.float64]]] = None
        cons: Dict[str, Any] = {"type": "ineq", "fun": ineq}
        if self.gradient == "central":
            h = self.step
            jac = lambda x: central_difference(fun, x, h)  # noqa: E731
            cons["jac"] = lambda x: central_difference(ineq, x, h)

        res = optimize.minimize(
            fun,
            np.asarray(x0, dtype=float),
            method="SLSQP",
            jac=jac,
            bounds=optimize.Bounds([b[0] for b in bounds], [b[1] for b in bounds]),
            constraints=[cons],
            options={"maxiter": int(self.maxiter), "ftol": float(self.ftol)},
        )
        return SolverResult(
            x=np.asarray(res.x, dtype=float),
            fun=float(res.fun),
            success=bool(res.success),
            status=int(res.status),
            message=str(res.message),
            nit=int(getattr(res, "nit", 0) or 0),
            nfev=int(getattr(res, "nfev", 0) or 0),
        )


__all__ = [
    "CENTRAL_STEP",
    "ConstrainedSolver",
    "SLSQPSolver",
    "SolverResult",
    "central_difference",
]
