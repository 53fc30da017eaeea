"""Lagrange interpolation in barycentric form.

The interpolant owns its grid, weights and (lazily) its differentiation
matrices. Everything it hands out is read-only so one instance can back any
number of solves.

References:
    Berrut J-P, Trefethen LN (2004), Barycentric Lagrange Interpolation,
    SIAM Review 46(3):501-517
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple, Union

import numpy as np

from .differentiation import D2_BUILDERS, build_d1, build_d2, build_d2_squared
from .exceptions import DegreeMismatch
from .grid import CollocationGrid, GridType, generate_grid

logger = logging.getLogger(__name__)

ArrayLike = Union[float, np.ndarray]


def _readonly(a: np.ndarray) -> np.ndarray:
    a.setflags(write=False)
    return a


def barycentric_weights(x: np.ndarray) -> np.ndarray:
    """Compute w_k = 1 / prod_{j != k} (x_k - x_j).

    The product is accumulated as a sum of log-magnitudes plus a sign count,
    which keeps high-degree grids from overflowing.
    """
    x = np.asarray(x, dtype=float)
    dX = x[:, None] - x[None, :]
    np.fill_diagonal(dX, 1.0)
    log_mag = np.sum(np.log(np.abs(dX)), axis=1)
    negatives = np.sum(dX < 0.0, axis=1)
    sign = np.where(negatives % 2 == 0, 1.0, -1.0)
    return sign * np.exp(-log_mag)


class LagrangeInterpolant:
    """Lagrange interpolant of degree N on a collocation grid.

    Args:
        N: Polynomial degree (N+1 nodes)
        grid_type: Node distribution (default Chebyshev-Gauss-Lobatto)
        d2_method: "analytic" for the barycentric second-derivative formula,
            "squared" for D1 @ D1
    """

    def __init__(
        self,
        N: int,
        grid_type: Union[str, GridType] = GridType.CHEBYSHEV_GAUSS_LOBATTO,
        *,
        d2_method: str = "analytic",
    ) -> None:
        self.grid: CollocationGrid = generate_grid(N, grid_type)
        d2_method = str(d2_method).lower()
        if d2_method not in D2_BUILDERS:
            raise ValueError(f"Unknown d2_method: {d2_method}. Supported: {', '.join(D2_BUILDERS)}")
        self.d2_method = d2_method
        self._w = _readonly(barycentric_weights(self.grid.x))
        self._d1: Optional[np.ndarray] = None
        self._d2: Optional[np.ndarray] = None

    def __repr__(self) -> str:
        return f"LagrangeInterpolant(N={self.N}, grid_type={self.grid_type.value!r}, d2_method={self.d2_method!r})"

    # --- Grid ---
    @property
    def N(self) -> int:
        return self.grid.degree

    @property
    def npoint(self) -> int:
        return self.grid.npoint

    @property
    def grid_type(self) -> GridType:
        return self.grid.grid_type

    @property
    def x(self) -> np.ndarray:
        return self.grid.x

    def get_points(self) -> np.ndarray:
        return self.grid.x

    @property
    def weights(self) -> np.ndarray:
        return self._w

    def sample(self, f: Callable[[np.ndarray], np.ndarray]) -> np.ndarray:
        """Evaluate f at the nodes (f must accept an array)."""
        return np.asarray(f(np.array(self.grid.x)), dtype=float)

    # --- Differentiation matrices ---
    def calc_d1(self) -> np.ndarray:
        if self._d1 is None:
            self._d1 = _readonly(build_d1(self.grid.x, self._w))
            logger.debug("Computed D1 for N=%d (%s)", self.N, self.grid_type.value)
        return self._d1

    def calc_d2(self) -> np.ndarray:
        if self._d2 is None:
            d1 = self.calc_d1()
            if self.d2_method == "analytic":
                d2 = build_d2(self.grid.x, self._w, d1)
            else:
                d2 = build_d2_squared(d1)
            self._d2 = _readonly(d2)
            logger.debug("Computed D2 (%s) for N=%d", self.d2_method, self.N)
        return self._d2

    @property
    def d1(self) -> np.ndarray:
        return self.calc_d1()

    @property
    def d2(self) -> np.ndarray:
        return self.calc_d2()

    # --- Evaluation ---
    def _check_values(self, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=float)
        if u.ndim != 1 or u.shape[0] != self.npoint:
            raise DegreeMismatch(self.npoint, u.shape[0] if u.ndim else 0)
        return u

    def eval(self, u: np.ndarray, x: ArrayLike) -> ArrayLike:
        """Evaluate the interpolant of nodal values u at x (second barycentric form).

        At a node the nodal value is returned unchanged.
        """
        u = self._check_values(u)
        scalar = np.ndim(x) == 0
        xs = np.atleast_1d(np.asarray(x, dtype=float))
        nodes = self.grid.x

        diff = xs[:, None] - nodes[None, :]
        exact = diff == 0.0
        hit = np.any(exact, axis=1)
        diff[exact] = 1.0  # avoid division by zero; overwritten below
        c = self._w[None, :] / diff
        with np.errstate(invalid="ignore", over="ignore"):
            result = (c @ u) / np.sum(c, axis=1)
        if np.any(hit):
            result[hit] = u[np.argmax(exact[hit], axis=1)]

        if scalar:
            return float(result[0])
        return result.reshape(np.shape(x))

    def eval_deriv1(self, u: np.ndarray, x: ArrayLike) -> ArrayLike:
        """First derivative of the interpolant at x."""
        u = self._check_values(u)
        return self.eval(self.d1 @ u, x)

    def eval_deriv2(self, u: np.ndarray, x: ArrayLike) -> ArrayLike:
        """Second derivative of the interpolant at x."""
        u = self._check_values(u)
        return self.eval(self.d2 @ u, x)

    def psi(self, p: int, x: ArrayLike) -> ArrayLike:
        """Evaluate the p-th Lagrange basis polynomial at x."""
        if not 0 <= int(p) <= self.N:
            raise IndexError(f"Basis index {p} is outside [0, {self.N}]")
        unit = np.zeros(self.npoint)
        unit[int(p)] = 1.0
        return self.eval(unit, x)

    basis = psi

    # --- Diagnostics ---
    def lebesgue_function(self, x: ArrayLike) -> ArrayLike:
        """Sum of |psi_k(x)| over all basis polynomials."""
        scalar = np.ndim(x) == 0
        xs = np.atleast_1d(np.asarray(x, dtype=float))
        total = np.zeros_like(xs)
        for p in range(self.npoint):
            total += np.abs(self.psi(p, xs))
        if scalar:
            return float(total[0])
        return total.reshape(np.shape(x))

    def lebesgue_constant(self, nstation: int = 10000) -> float:
        """Maximum of the Lebesgue function over nstation points in [-1, 1]."""
        stations = np.linspace(-1.0, 1.0, int(nstation))
        return float(np.max(self.lebesgue_function(stations)))

    def estimate_max_error(
        self, f: Callable[[np.ndarray], np.ndarray], nstation: int = 10000
    ) -> Tuple[float, float]:
        """Estimate max |f(x) - p(x)| on [-1, 1] where p interpolates f.

        Returns:
            Tuple of (max_error, x_at_max_error)
        """
        u = self.sample(f)
        stations = np.linspace(-1.0, 1.0, int(nstation))
        err = np.abs(np.asarray(f(stations), dtype=float) - self.eval(u, stations))
        imax = int(np.argmax(err))
        return float(err[imax]), float(stations[imax])
