"""
Pytest bootstrap for src/ layout.

Why:
- Repo uses ./src for packages.
- Tests import shared reference data as `tests._reference`.

This puts ./src and the repo root on sys.path for any pytest invocation.
"""
from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest

repo_root = Path(__file__).resolve().parents[1]
for path in (repo_root / "src", repo_root):
    path_str = str(path)
    if path.is_dir() and path_str not in sys.path:
        # Put first so local src wins over any installed copy.
        sys.path.insert(0, path_str)

from ciuupi.config import CIUUPIConfig  # noqa: E402
from tests._reference import factorial_design  # noqa: E402


@pytest.fixture()
def cfg() -> CIUUPIConfig:
    return CIUUPIConfig(alpha=0.05)


@pytest.fixture()
def coarse_cfg() -> CIUUPIConfig:
    """Coarse constraint grid that keeps a real SLSQP run to a few seconds."""
    return CIUUPIConfig(alpha=0.05, gams=tuple(0.5 * i for i in range(17)))


@pytest.fixture()
def design() -> np.ndarray:
    return factorial_design()
