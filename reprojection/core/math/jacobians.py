"""Jacobian computation utilities."""

import numpy as np
from typing import Callable, Sequence

from .dual import gradient_of, make_variables
from .generic import value_of


def dual_jacobian(
    func: Callable[[Sequence], Sequence],
    x: np.ndarray
) -> tuple[np.ndarray, np.ndarray]:
    """Evaluate a generic function on dual numbers.

    Args:
        func: Function written against scalar operators, taking a sequence of
            scalars and returning a sequence of scalars
        x: Input parameters

    Returns:
        Tuple of (value, J) where J[i,j] = df_i/dx_j
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    outputs = func(make_variables(x))

    value = np.array([value_of(f) for f in outputs], dtype=float)
    J = np.vstack([gradient_of(f, len(x)) for f in outputs])
    return value, J


def finite_difference_jacobian(
    func: Callable[[np.ndarray], np.ndarray],
    x: np.ndarray,
    h: float = 1e-8,
    method: str = "central"
) -> np.ndarray:
    """Compute Jacobian using finite differences.

    Args:
        func: Function that takes x and returns residual vector
        x: Input parameters
        h: Step size for finite differences
        method: Finite difference method ("forward", "backward", "central")

    Returns:
        Jacobian matrix J where J[i,j] = df_i/dx_j
    """
    x = np.atleast_1d(np.asarray(x, dtype=float))
    f0 = func(x)
    f0 = np.atleast_1d(f0)

    m, n = len(f0), len(x)
    J = np.zeros((m, n))

    if method == "forward":
        for j in range(n):
            x_plus = x.copy()
            x_plus[j] += h
            f_plus = func(x_plus)
            J[:, j] = (f_plus - f0) / h

    elif method == "backward":
        for j in range(n):
            x_minus = x.copy()
            x_minus[j] -= h
            f_minus = func(x_minus)
            J[:, j] = (f0 - f_minus) / h

    elif method == "central":
        for j in range(n):
            x_plus = x.copy()
            x_minus = x.copy()
            x_plus[j] += h
            x_minus[j] -= h
            f_plus = func(x_plus)
            f_minus = func(x_minus)
            J[:, j] = (f_plus - f_minus) / (2 * h)

    else:
        raise ValueError(f"Unknown finite difference method: {method}")

    return J


def compare_jacobians(
    J_analytic: np.ndarray,
    J_numeric: np.ndarray,
    atol: float = 1e-6,
    rtol: float = 1e-6
) -> tuple[bool, float, float, np.ndarray]:
    """Compare a Jacobian against a reference approximation.

    Returns:
        Tuple of (is_correct, max_abs_error, max_rel_error, error_matrix)
    """
    error = np.abs(J_analytic - J_numeric)
    relative_error = error / (np.abs(J_numeric) + 1e-12)

    is_correct = bool(np.allclose(J_analytic, J_numeric, atol=atol, rtol=rtol))

    return is_correct, float(np.max(error)), float(np.max(relative_error)), error

