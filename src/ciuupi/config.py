# src/ciuupi/config.py
from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Tuple, Union

import numpy as np
import yaml
from numpy.typing import NDArray

from .errors import ConfigError
from .normal import quantile_constant

BracketPolicy = Literal["raise", "expand", "ignore"]


def default_gams() -> Tuple[float, ...]:
    """Constraint grid 0, 0.05, ..., 8."""
    return tuple(0.05 * i for i in range(161))


# ---------------------------------------------------------------------
# Canonical config passed alongside the knot vector everywhere
# ---------------------------------------------------------------------
@dataclass(frozen=True)
class CIUUPIConfig:
    """
    Everything the optimization pipeline needs besides rho and the knot vector.

    alpha:
        1 - alpha is the minimum coverage probability.
    natural:
        True for natural cubic splines, False for clamped ones.
    d, n_ints:
        b and s are free on [-d, d], with knots every d/n_ints.
    n_nodes:
        Gauss-Legendre nodes per knot-to-knot subinterval.
    gams:
        Gamma values at which coverage >= 1 - alpha is enforced.
    n_iter:
        Bisection steps of the lambda search.
    lambda_bracket, bracket_policy, max_lambda:
        Initial lambda bracket and what to do when it holds no sign change
        ("raise", "expand" up to max_lambda, or "ignore").
    b_bounds, s_bounds:
        Box bounds for the optimizer.
    sel_xatol:
        Absolute tolerance of the 1-D maximization of the scaled expected length.
    solver_maxiter, solver_ftol:
        SLSQP iteration cap and objective tolerance.
    strict_convergence:
        Raise ConvergenceError instead of warning when SLSQP reports failure.
    """

    alpha: float = 0.05
    natural: bool = True
    d: float = 6.0
    n_ints: int = 6
    n_nodes: int = 5
    gams: Tuple[float, ...] = field(default_factory=default_gams)
    n_iter: int = 5

    lambda_bracket: Tuple[float, float] = (0.0, 0.3)
    bracket_policy: BracketPolicy = "raise"
    max_lambda: float = 10.0

    b_bounds: Tuple[float, float] = (-100.0, 100.0)
    s_bounds: Tuple[float, float] = (0.5, 200.0)

    sel_xatol: float = 1.220703e-4
    solver_maxiter: int = 1000
    solver_ftol: float = 1e-10
    strict_convergence: bool = False

    def __post_init__(self) -> None:
        # Normalize sequence-typed fields so YAML lists hash and compare like tuples.
        object.__setattr__(self, "gams", tuple(float(g) for g in self.gams))
        object.__setattr__(self, "lambda_bracket", tuple(float(v) for v in self.lambda_bracket))
        object.__setattr__(self, "b_bounds", tuple(float(v) for v in self.b_bounds))
        object.__setattr__(self, "s_bounds", tuple(float(v) for v in self.s_bounds))
        if isinstance(self.bracket_policy, str):
            object.__setattr__(self, "bracket_policy", self.bracket_policy.strip().lower())
        validate_cfg(self)

    # -- derived quantities ------------------------------------------------
    @property
    def c_alpha(self) -> float:
        return quantile_constant(self.alpha)

    @property
    def knots(self) -> NDArray[np.float64]:
        """Knots 0, d/n_ints, ..., d."""
        return np.linspace(0.0, self.d, self.n_ints + 1)

    @property
    def symmetric_knots(self) -> NDArray[np.float64]:
        """Knots -d, ..., d."""
        return np.linspace(-self.d, self.d, 2 * self.n_ints + 1)

    @property
    def n_params(self) -> int:
        return 2 * self.n_ints - 1

    @property
    def gam_grid(self) -> NDArray[np.float64]:
        return np.asarray(self.gams, dtype=float)

    def replace(self, **changes: Any) -> "CIUUPIConfig":
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        for k in ("gams", "lambda_bracket", "b_bounds", "s_bounds"):
            out[k] = list(out[k])
        return out


def _finite(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool) and math.isfinite(float(x))


def _ordered_pair(name: str, pair: Tuple[float, ...]) -> None:
    if len(pair) != 2 or not all(math.isfinite(v) for v in pair) or pair[0] >= pair[1]:
        raise ConfigError(f"{name} must be a finite (low, high) pair with low < high, got {pair!r}")


def validate_cfg(cfg: CIUUPIConfig) -> None:
    if not _finite(cfg.alpha) or not (0.0 < float(cfg.alpha) < 1.0):
        raise ConfigError(f"alpha must be in (0,1), got {cfg.alpha!r}")
    if not isinstance(cfg.natural, bool):
        raise ConfigError(f"natural must be bool, got {cfg.natural!r}")

    # --- grid geometry ---
    if not _finite(cfg.d) or float(cfg.d) <= 0.0:
        raise ConfigError(f"d must be finite and > 0, got {cfg.d!r}")
    for name in ("n_ints", "n_nodes", "n_iter", "solver_maxiter"):
        v = getattr(cfg, name)
        if not isinstance(v, int) or isinstance(v, bool) or v < 1:
            raise ConfigError(f"{name} must be a positive int, got {v!r}")
    if len(cfg.gams) == 0:
        raise ConfigError("gams must be non-empty")
    if not all(math.isfinite(g) and g >= 0.0 for g in cfg.gams):
        raise ConfigError("gams must be finite and >= 0")

    # --- lambda search ---
    _ordered_pair("lambda_bracket", cfg.lambda_bracket)
    if cfg.lambda_bracket[0] < 0.0:
        raise ConfigError(f"lambda_bracket must lie in [0, inf), got {cfg.lambda_bracket!r}")
    if cfg.bracket_policy not in ("raise", "expand", "ignore"):
        raise ConfigError(f"bracket_policy must be raise/expand/ignore, got {cfg.bracket_policy!r}")
    if not _finite(cfg.max_lambda) or float(cfg.max_lambda) < cfg.lambda_bracket[1]:
        raise ConfigError(
            f"max_lambda must be finite and >= lambda_bracket[1], got {cfg.max_lambda!r}"
        )

    # --- optimizer ---
    _ordered_pair("b_bounds", cfg.b_bounds)
    _ordered_pair("s_bounds", cfg.s_bounds)
    if cfg.s_bounds[0] <= 0.0:
        raise ConfigError(f"s_bounds must be strictly positive, got {cfg.s_bounds!r}")
    for name in ("sel_xatol", "solver_ftol"):
        v = getattr(cfg, name)
        if not _finite(v) or float(v) <= 0.0:
            raise ConfigError(f"{name} must be finite and > 0, got {v!r}")
    if not isinstance(cfg.strict_convergence, bool):
        raise ConfigError(f"strict_convergence must be bool, got {cfg.strict_convergence!r}")


_FIELDS = {f.name for f in dataclasses.fields(CIUUPIConfig)}


def config_from_mapping(data: Mapping[str, Any]) -> CIUUPIConfig:
    """Build a config from a plain mapping; unknown keys are an error."""
    unknown = sorted(set(data) - _FIELDS)
    if unknown:
        raise ConfigError(f"unknown config keys: {unknown}")
    return CIUUPIConfig(**dict(data))


def load_config(path: Union[str, Path]) -> CIUUPIConfig:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config at {path} is not a mapping")
    return config_from_mapping(data)


__all__ = [
    "BracketPolicy",
    "CIUUPIConfig",
    "config_from_mapping",
    "default_gams",
    "load_config",
    "validate_cfg",
]
