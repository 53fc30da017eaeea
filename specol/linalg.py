"""Dense linear solve for collocation systems."""

from __future__ import annotations

import warnings

import numpy as np
import scipy.linalg
from scipy.linalg import LinAlgWarning

from .exceptions import SingularMatrix


def solve(A: np.ndarray, b: np.ndarray) -> np.ndarray:
    """Solve A x = b with LU factorisation.

    Neither argument is modified.

    Raises:
        ValueError: If A is not square or b does not match
        SingularMatrix: If A is singular or too ill-conditioned to solve
    """
    A = np.asarray(A, dtype=float)
    b = np.asarray(b, dtype=float)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Matrix must be square, got shape {A.shape}")
    if b.ndim not in (1, 2):
        raise ValueError(f"Right-hand side must be a vector or a matrix, got shape {b.shape}")
    if b.shape[0] != A.shape[0]:
        raise ValueError(f"Right-hand side has {b.shape[0]} rows, matrix has {A.shape[0]}")

    with warnings.catch_warnings():
        warnings.simplefilter("error", LinAlgWarning)
        try:
            return scipy.linalg.solve(A, b, check_finite=True)
        except LinAlgWarning as e:
            raise SingularMatrix(f"Matrix is numerically singular: {e}") from e
        except np.linalg.LinAlgError as e:
            raise SingularMatrix(f"Matrix is singular: {e}") from e
