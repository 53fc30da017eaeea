"""Steady linear boundary-value problem solved by collocation.

    u'' - 4 u' + 4 u = exp(x) + C,   C = -4e / (1 + e^2),   x in [-1, 1]
    u(-1) = u(1) = 0

with exact solution u(x) = exp(x) - sinh(1)/sinh(2) exp(2x) + C/4.

Reference:
    Gourgoulhon E (2005), An introduction to polynomial interpolation,
    School on spectral methods: Application to General Relativity and Field
    Theory, Meudon, 14-18 November 2005
"""

import logging
from typing import Any, Dict

import numpy as np

from specol.collocation import DirichletBoundary, OperatorTerms, solve_bvp
from specol.visualization import plot_nodal_solution

from ..base import BaseProblem

logger = logging.getLogger(__name__)

CC = -4.0 * np.e / (1.0 + np.e * np.e)


def bvp1d_source(x: np.ndarray) -> np.ndarray:
    return np.exp(x) + CC


def bvp1d_solution(x: np.ndarray) -> np.ndarray:
    return np.exp(x) - np.exp(2.0 * x) * np.sinh(1.0) / np.sinh(2.0) + CC / 4.0


class BVP1DProblem(BaseProblem):
    """u'' - 4u' + 4u = e^x + C with homogeneous Dirichlet ends."""

    name = "bvp1d"
    DEFAULT_CONFIG: Dict[str, Any] = {
        "grid": {"N": 4, "type": "chebyshev_gauss_lobatto", "d2_method": "analytic"},
        "operator": {"d2": 1.0, "d1": -4.0, "identity": 4.0},
        "boundary": {"left": 0.0, "right": 0.0},
        "io": {"plot": True, "save": True, "format": "png"},
    }

    def setup_parameters(self) -> None:
        op = self.config["operator"]
        self.terms = OperatorTerms(
            d2=float(op.get("d2", 0.0)),
            d1=float(op.get("d1", 0.0)),
            identity=float(op.get("identity", 0.0)),
        )
        bc = self.config["boundary"]
        self.left = float(bc.get("left", 0.0))
        self.right = float(bc.get("right", 0.0))

    def solve(self) -> Dict[str, Any]:
        interp = self.create_interpolant()
        self.interp = interp
        boundary = DirichletBoundary.endpoints(interp.N, self.left, self.right)
        u = solve_bvp(interp, self.terms, bvp1d_source, boundary)

        u_exact = interp.sample(bvp1d_solution)
        max_error = float(np.max(np.abs(u - u_exact)))
        logger.info("N = %d (%s): max diff = %.6e", interp.N, interp.grid_type.value, max_error)
        return {
            "x": np.array(interp.x),
            "u": u,
            "u_exact": u_exact,
            "max_error": max_error,
        }

    def plot(self, result: Dict[str, Any]) -> None:
        plot_nodal_solution(
            self.interp,
            result["u"],
            bvp1d_solution,
            title=f"N = {self.interp.N}",
            outpath=self.output_path(self.name),
        )
