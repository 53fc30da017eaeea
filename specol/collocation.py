"""Collocation problem assembly.

Two usage modes share one boundary projection:

- steady boundary-value problems assemble ``A u = b`` and overwrite the
  boundary rows of ``A`` with identity rows and the boundary entries of
  ``b`` with the prescribed values;
- semi-discrete problems expose ``f(t, u) = M u`` with the boundary entries
  of the time derivative forced to zero, so Dirichlet values present in the
  initial field stay fixed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import BoundaryIndexOutOfRange, DegreeMismatch, InconsistentInitialCondition
from .integrator import IntegrationStats, integrate
from .interpolation import LagrangeInterpolant
from .linalg import solve

logger = logging.getLogger(__name__)

Coefficient = Union[float, np.ndarray]
Source = Union[Callable[[np.ndarray], np.ndarray], np.ndarray, Sequence[float], float]


@dataclass(frozen=True)
class OperatorTerms:
    """Linear operator d2 * D2 + d1 * D1 + identity * I.

    Coefficients are scalars or arrays of length N+1; arrays scale the
    corresponding rows (variable coefficients a(x_i)).
    """

    d2: Coefficient = 0.0
    d1: Coefficient = 0.0
    identity: Coefficient = 0.0

    def _coefficient(self, value: Coefficient, n: int, name: str) -> np.ndarray:
        arr = np.asarray(value, dtype=float)
        if arr.ndim == 0:
            return np.full(n, float(arr))
        if arr.shape != (n,):
            raise DegreeMismatch(n, arr.shape[0] if arr.ndim == 1 else arr.size, what=f"coefficient {name}")
        return arr

    def assemble(self, interp: LagrangeInterpolant) -> np.ndarray:
        """Return a fresh (N+1, N+1) operator matrix."""
        n = interp.npoint
        A = np.zeros((n, n))
        c2 = self._coefficient(self.d2, n, "d2")
        c1 = self._coefficient(self.d1, n, "d1")
        c0 = self._coefficient(self.identity, n, "identity")
        if np.any(c2 != 0.0):
            A += c2[:, None] * interp.d2
        if np.any(c1 != 0.0):
            A += c1[:, None] * interp.d1
        A[np.diag_indices(n)] += c0
        return A


@dataclass(frozen=True)
class DirichletBoundary:
    """Boundary rows and the values the solution takes there.

    Attributes:
        indices: Node indices in [0, N]
        values: Prescribed values, scalar or one per index
    """

    indices: Tuple[int, ...]
    values: Tuple[float, ...] = field(default=())

    def __init__(self, indices: Sequence[int], values: Union[float, Sequence[float]] = 0.0):
        idx = tuple(int(i) for i in np.atleast_1d(np.asarray(indices, dtype=int)))
        vals = np.atleast_1d(np.asarray(values, dtype=float))
        if vals.size == 1:
            vals = np.full(len(idx), float(vals[0]))
        if vals.size != len(idx):
            raise ValueError(f"Got {vals.size} boundary values for {len(idx)} indices")
        if len(set(idx)) != len(idx):
            raise ValueError(f"Duplicate boundary indices: {idx}")
        object.__setattr__(self, "indices", idx)
        object.__setattr__(self, "values", tuple(float(v) for v in vals))

    @classmethod
    def endpoints(cls, N: int, left: float = 0.0, right: float = 0.0) -> "DirichletBoundary":
        """u(x_0) = left and u(x_N) = right."""
        return cls((0, int(N)), (left, right))

    def validate(self, N: int) -> None:
        for i in self.indices:
            if not 0 <= i <= N:
                raise BoundaryIndexOutOfRange(i, N)

    def is_homogeneous(self) -> bool:
        return all(v == 0.0 for v in self.values)


def apply_boundary_constraints(target: np.ndarray, boundary: DirichletBoundary,
                               mode: str = "value") -> np.ndarray:
    """Project a matrix or vector onto the Dirichlet constraints.

    For a square matrix each boundary row becomes the identity row. For a
    vector each boundary entry becomes its prescribed value (mode="value") or
    zero (mode="homogeneous", for time derivatives of held values).

    Returns a new array; target is not modified.

    Raises:
        BoundaryIndexOutOfRange: If an index is outside [0, N]
    """
    out = np.array(target, dtype=float, copy=True)
    N = out.shape[0] - 1
    boundary.validate(N)
    idx = list(boundary.indices)

    if out.ndim == 2:
        if out.shape[0] != out.shape[1]:
            raise ValueError(f"Operator matrix must be square, got shape {out.shape}")
        out[idx, :] = 0.0
        out[idx, idx] = 1.0
    elif out.ndim == 1:
        if mode == "value":
            out[idx] = boundary.values
        elif mode == "homogeneous":
            out[idx] = 0.0
        else:
            raise ValueError(f"Unknown mode: {mode}. Supported: value, homogeneous")
    else:
        raise ValueError(f"Expected a matrix or a vector, got {out.ndim} dimensions")
    return out


@dataclass
class CollocationSystem:
    """Assembled linear system A u = b with boundary rows in place."""

    matrix: np.ndarray
    rhs: np.ndarray
    boundary: DirichletBoundary

    def solve(self) -> np.ndarray:
        return solve(self.matrix, self.rhs)

    def residual(self, u: np.ndarray) -> np.ndarray:
        return self.matrix @ u - self.rhs


def _source_vector(interp: LagrangeInterpolant, source: Source) -> np.ndarray:
    if callable(source):
        b = interp.sample(source)
    else:
        b = np.asarray(source, dtype=float)
    if b.ndim == 0:
        b = np.full(interp.npoint, float(b))
    if b.shape != (interp.npoint,):
        raise DegreeMismatch(interp.npoint, b.shape[0] if b.ndim == 1 else b.size, what="source")
    return b


def assemble_bvp(interp: LagrangeInterpolant, terms: OperatorTerms, source: Source,
                 boundary: DirichletBoundary) -> CollocationSystem:
    """Assemble the collocation system for L u = source with Dirichlet rows."""
    boundary.validate(interp.N)
    A = terms.assemble(interp)
    b = _source_vector(interp, source)
    return CollocationSystem(
        matrix=apply_boundary_constraints(A, boundary),
        rhs=apply_boundary_constraints(b, boundary, mode="value"),
        boundary=boundary,
    )


def solve_bvp(interp: LagrangeInterpolant, terms: OperatorTerms, source: Source,
              boundary: DirichletBoundary) -> np.ndarray:
    """Solve a linear boundary-value problem; returns nodal values.

    Raises:
        SingularMatrix: If the assembled system cannot be solved
    """
    system = assemble_bvp(interp, terms, source, boundary)
    u = system.solve()
    logger.debug("Solved %dx%d collocation system, residual=%.3e",
                 interp.npoint, interp.npoint, float(np.max(np.abs(system.residual(u)))))
    return u


class SemiDiscreteSystem:
    """Method-of-lines right-hand side du/dt = M u with held boundary values.

    The operator M is assembled once. Boundary entries of du/dt are zero, so
    the boundary values stay whatever the initial field holds; the Dirichlet
    values must therefore already be present in u0 (see
    check_initial_condition).

    Args:
        interp: Interpolant providing the differentiation matrices
        terms: Spatial operator (default pure diffusion D2)
        boundary: Held boundary nodes (default both endpoints, zero)
    """

    def __init__(self, interp: LagrangeInterpolant, terms: Optional[OperatorTerms] = None,
                 boundary: Optional[DirichletBoundary] = None) -> None:
        self.interp = interp
        self.terms = terms if terms is not None else OperatorTerms(d2=1.0)
        self.boundary = boundary if boundary is not None else DirichletBoundary.endpoints(interp.N)
        self.boundary.validate(interp.N)
        M = self.terms.assemble(interp)
        M.setflags(write=False)
        self.operator = M

    def __call__(self, t: float, u: np.ndarray) -> np.ndarray:
        u = np.asarray(u, dtype=float)
        if u.shape != (self.interp.npoint,):
            raise DegreeMismatch(self.interp.npoint, u.shape[0] if u.ndim == 1 else u.size)
        return apply_boundary_constraints(self.operator @ u, self.boundary, mode="homogeneous")

    def check_initial_condition(self, u0: np.ndarray, atol: float = 1e-12) -> None:
        """Require u0 to equal the Dirichlet values at the boundary nodes.

        Raises:
            InconsistentInitialCondition: If any boundary value differs by more than atol
        """
        u0 = np.asarray(u0, dtype=float)
        if u0.shape != (self.interp.npoint,):
            raise DegreeMismatch(self.interp.npoint, u0.shape[0] if u0.ndim == 1 else u0.size, what="u0")
        idx = list(self.boundary.indices)
        mismatch = np.abs(u0[idx] - np.asarray(self.boundary.values))
        if np.any(mismatch > atol):
            bad = [i for i, m in zip(idx, mismatch) if m > atol]
            raise InconsistentInitialCondition(
                f"Initial field does not satisfy the Dirichlet values at nodes {bad} "
                f"(max deviation {float(np.max(mismatch)):.3e}); boundary values are held "
                f"fixed by zeroing their time derivative"
            )

    def solve(self, u0: np.ndarray, t0: float, t1: float, method: str = "dopri5",
              rtol: float = 1e-8, atol: float = 1e-10,
              **kwargs) -> Tuple[np.ndarray, IntegrationStats]:
        """Validate u0 and integrate to t1; returns (u(t1), stats)."""
        self.check_initial_condition(u0)
        return integrate(self, u0, t0, t1, method=method, rtol=rtol, atol=atol, **kwargs)
