from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

import numpy as np

from .exceptions import InvalidDegree


class GridType(str, Enum):
    """Node distribution on [-1, 1]."""

    UNIFORM = "uniform"
    CHEBYSHEV_GAUSS = "chebyshev_gauss"
    CHEBYSHEV_GAUSS_LOBATTO = "chebyshev_gauss_lobatto"

    @classmethod
    def parse(cls, value: Union[str, "GridType"]) -> "GridType":
        if isinstance(value, GridType):
            return value
        key = str(value).strip().lower().replace("-", "_")
        # Accept the short names used in config files
        aliases = {"cg": "chebyshev_gauss", "cgl": "chebyshev_gauss_lobatto"}
        key = aliases.get(key, key)
        try:
            return cls(key)
        except ValueError:
            valid = ", ".join(t.value for t in cls)
            raise ValueError(f"Unknown grid type: {value!r}. Valid types: {valid}") from None


def _uniform_nodes(N: int) -> np.ndarray:
    k = np.arange(N + 1, dtype=float)
    return -1.0 + 2.0 * k / N


def _cheb_nodes_g(N: int) -> np.ndarray:
    """Chebyshev-Gauss nodes (roots of T_{N+1}), increasing."""
    k = np.arange(N + 1, dtype=float)
    x = np.cos((2.0 * k + 1.0) * np.pi / (2.0 * (N + 1)))
    x = x[::-1].copy()
    if N % 2 == 0:
        x[N // 2] = 0.0
    return x


def _cheb_nodes_gl(N: int) -> np.ndarray:
    """Chebyshev-Gauss-Lobatto nodes (extrema of T_N), increasing."""
    k = np.arange(N + 1, dtype=float)
    x = np.cos(np.pi * k / N)
    x = x[::-1].copy()
    x[0] = -1.0
    x[-1] = 1.0
    if N % 2 == 0:
        x[N // 2] = 0.0
    return x


_GENERATORS = {
    GridType.UNIFORM: _uniform_nodes,
    GridType.CHEBYSHEV_GAUSS: _cheb_nodes_g,
    GridType.CHEBYSHEV_GAUSS_LOBATTO: _cheb_nodes_gl,
}


@dataclass(frozen=True)
class CollocationGrid:
    """Strictly increasing collocation nodes on [-1, 1].

    Attributes:
        degree: Polynomial degree N (there are N+1 nodes)
        grid_type: Node distribution
        x: Read-only node array of shape (N+1,)
    """

    degree: int
    grid_type: GridType
    x: np.ndarray = field(repr=False)

    @property
    def npoint(self) -> int:
        return self.degree + 1

    def has_endpoints(self) -> bool:
        return self.grid_type is not GridType.CHEBYSHEV_GAUSS

    def __len__(self) -> int:
        return self.npoint


def generate_grid(N: int, grid_type: Union[str, GridType] = GridType.CHEBYSHEV_GAUSS_LOBATTO) -> CollocationGrid:
    """Generate N+1 collocation nodes of the requested distribution.

    Args:
        N: Polynomial degree (>= 1)
        grid_type: GridType or its string value

    Returns:
        CollocationGrid with increasing, read-only nodes

    Raises:
        InvalidDegree: If N is not an integer >= 1
        ValueError: If grid_type is unknown
    """
    if isinstance(N, bool) or not isinstance(N, (int, np.integer)) or N < 1:
        raise InvalidDegree(N)
    N = int(N)
    gtype = GridType.parse(grid_type)
    x = _GENERATORS[gtype](N)
    x.setflags(write=False)
    return CollocationGrid(degree=N, grid_type=gtype, x=x)
