"""Documented reference knot vectors and the 2x2 factorial design."""

from __future__ import annotations

import numpy as np

# alpha = 0.05, rho = 0.4, natural splines
BSVEC_RHO_04 = np.array(
    [0.129443483, 0.218926703, 0.125880945, 0.024672734, -0.001427343,
     1.792489585, 1.893870240, 2.081786492, 2.080407355, 1.986667246,
     1.958594824]
)

# alpha = 0.05, a = (0, 2, 0, -2), c = (0, 0, 0, 1), factorial design
BSVEC_FACTORIAL = np.array(
    [-0.03639701, -0.18051953, -0.25111411, -0.15830362, -0.04479113,
     1.71997203, 1.79147968, 2.03881195, 2.19926399, 2.11845381,
     2.00482563]
)

A_FACTORIAL = np.array([0.0, 2.0, 0.0, -2.0])
C_FACTORIAL = np.array([0.0, 0.0, 0.0, 1.0])
Y_FACTORIAL = np.array([87.2, 88.4, 86.7, 89.2])


def factorial_design() -> np.ndarray:
    x1 = np.array([-1.0, 1.0, -1.0, 1.0])
    x2 = np.array([-1.0, -1.0, 1.0, 1.0])
    return np.column_stack([np.ones(4), x1, x2, x1 * x2])
