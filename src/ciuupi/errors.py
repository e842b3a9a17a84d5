# src/ciuupi/errors.py
"""
Semantic error hierarchy for the ciuupi package.

Public functions raise these instead of bare ValueError so callers can tell a
malformed input apart from a numerical breakdown of the pipeline. Errors that
escape `bsciuupi` carry the pipeline stage they came from in `.stage`
("rho", "lambda" or "knots").
"""

from __future__ import annotations

from typing import Any, Optional


class CIUUPIError(Exception):
    """Base error for this package."""

    def __init__(self, message: str, *, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.stage = stage

    def __str__(self) -> str:
        msg = super().__str__()
        return f"[{self.stage}] {msg}" if self.stage else msg


class InputValidationError(CIUUPIError, ValueError):
    """Inputs violate the contract: domain/type/shape."""


class ConfigError(InputValidationError):
    """User-fixable configuration error."""


class NumericalStabilityError(CIUUPIError, FloatingPointError):
    """Degenerate numerics: |rho| >= 1, zero potential loss, non-finite lambda."""


class BracketError(NumericalStabilityError):
    """The lambda search bracket does not contain a sign change."""


class ConvergenceError(CIUUPIError):
    """The constrained optimizer stopped without meeting its tolerance."""

    def __init__(self, message: str, *, result: Any = None, stage: Optional[str] = None) -> None:
        super().__init__(message, stage=stage)
        self.result = result


__all__ = [
    "CIUUPIError",
    "InputValidationError",
    "ConfigError",
    "NumericalStabilityError",
    "BracketError",
    "ConvergenceError",
]
