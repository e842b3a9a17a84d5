"""Top-level package for ciuupi: confidence intervals utilizing uncertain prior information."""

from importlib import metadata as _metadata

from .config import CIUUPIConfig, load_config
from .core import bsciuupi
from .coverage import compute_cov_legendre, compute_sel
from .errors import (
    BracketError,
    CIUUPIError,
    ConfigError,
    ConvergenceError,
    InputValidationError,
    NumericalStabilityError,
)
from .intervals import ciuupi, cistandard, cpciuupi, selciuupi
from .optimize import optimize_knots, standard_ci
from .search import compute_lambda, compute_ratio_minus1
from .splines import bsspline, spline_b, spline_s

try:
    __version__ = _metadata.version("ciuupi")
except _metadata.PackageNotFoundError:  # pragma: no cover - during local usage
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "BracketError",
    "CIUUPIConfig",
    "CIUUPIError",
    "ConfigError",
    "ConvergenceError",
    "InputValidationError",
    "NumericalStabilityError",
    "bsciuupi",
    "bsspline",
    "ciuupi",
    "cistandard",
    "compute_cov_legendre",
    "compute_lambda",
    "compute_ratio_minus1",
    "compute_sel",
    "cpciuupi",
    "load_config",
    "optimize_knots",
    "selciuupi",
    "spline_b",
    "spline_s",
    "standard_ci",
]
