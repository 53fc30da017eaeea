"""Barycentric differentiation matrices.

D[i, j] is the derivative of the j-th Lagrange basis polynomial at node i.
All builders set the diagonal with the negative row-sum rule so that the
derivative of a constant is exactly zero up to rounding.
"""

from __future__ import annotations

import numpy as np


def _negative_row_sum_diagonal(D: np.ndarray) -> np.ndarray:
    np.fill_diagonal(D, 0.0)
    np.fill_diagonal(D, -np.sum(D, axis=1))
    return D


def _node_differences(x: np.ndarray) -> np.ndarray:
    """Return x_i - x_j with ones on the diagonal (safe to divide by)."""
    dX = x[:, None] - x[None, :]
    np.fill_diagonal(dX, 1.0)
    return dX


def build_d1(x: np.ndarray, w: np.ndarray) -> np.ndarray:
    """First-derivative matrix from nodes and barycentric weights.

    D1[i, j] = (w_j / w_i) / (x_i - x_j) for i != j and
    D1[i, i] = -sum_{j != i} D1[i, j].
    """
    x = np.asarray(x, dtype=float)
    w = np.asarray(w, dtype=float)
    if x.shape != w.shape or x.ndim != 1:
        raise ValueError(f"Nodes and weights must be 1D arrays of equal length, got {x.shape} and {w.shape}")
    D = (w[None, :] / w[:, None]) / _node_differences(x)
    return _negative_row_sum_diagonal(D)


def build_d2(x: np.ndarray, w: np.ndarray, d1: np.ndarray) -> np.ndarray:
    """Second-derivative matrix from the analytic barycentric formula.

    D2[i, j] = 2 D1[i, j] (D1[i, i] - 1 / (x_i - x_j)) for i != j
    (Schneider-Werner), diagonal by negative row sum.
    """
    x = np.asarray(x, dtype=float)
    d1 = np.asarray(d1, dtype=float)
    n = x.shape[0]
    if d1.shape != (n, n):
        raise ValueError(f"D1 must have shape ({n}, {n}), got {d1.shape}")
    D = 2.0 * d1 * (np.diag(d1)[:, None] - 1.0 / _node_differences(x))
    return _negative_row_sum_diagonal(D)


def build_d2_squared(d1: np.ndarray) -> np.ndarray:
    """Second-derivative matrix as D1 @ D1 with the diagonal re-balanced."""
    d1 = np.asarray(d1, dtype=float)
    return _negative_row_sum_diagonal(d1 @ d1)


D2_BUILDERS = ("analytic", "squared")
