"""Heat equation u_t = u_xx on [-1, 1] by the method of lines.

Initial field sin(pi (x + 1)) at t0 with u(-1) = u(1) = 0; after an elapsed
time t the exact solution is u(x, t) = -exp(-pi^2 t) sin(pi x).
"""

import logging
from typing import Any, Dict

import numpy as np

from specol.collocation import DirichletBoundary, OperatorTerms, SemiDiscreteSystem
from specol.visualization import plot_nodal_solution

from ..base import BaseProblem

logger = logging.getLogger(__name__)


def heat1d_initial(x: np.ndarray) -> np.ndarray:
    return np.sin(np.pi * (x + 1.0))


def heat1d_solution(x: np.ndarray, t: float) -> np.ndarray:
    return -np.exp(-np.pi * np.pi * t) * np.sin(np.pi * x)


class Heat1DProblem(BaseProblem):
    """Diffusion of a sine mode with boundary values held at zero."""

    name = "heat1d"
    DEFAULT_CONFIG: Dict[str, Any] = {
        "grid": {"N": 8, "type": "chebyshev_gauss_lobatto", "d2_method": "analytic"},
        "physics": {"diffusivity": 1.0},
        "integration": {
            "t0": 0.0,
            "t1": 0.1,
            "method": "dopri8",
            "rtol": 1e-8,
            "atol": 1e-10,
            "max_steps": 100000,
        },
        "io": {"plot": True, "save": True, "format": "png"},
    }

    def setup_parameters(self) -> None:
        self.diffusivity = float(self.config["physics"].get("diffusivity", 1.0))
        integ = self.config["integration"]
        self.t0 = float(integ.get("t0", 0.0))
        self.t1 = float(integ.get("t1", 0.1))
        self.method = str(integ.get("method", "dopri8"))
        self.rtol = float(integ.get("rtol", 1e-8))
        self.atol = float(integ.get("atol", 1e-10))
        self.max_steps = int(integ.get("max_steps", 100000))

    def exact(self, x: np.ndarray, t: float) -> np.ndarray:
        return heat1d_solution(x, self.diffusivity * t)

    def solve(self) -> Dict[str, Any]:
        interp = self.create_interpolant()
        self.interp = interp
        system = SemiDiscreteSystem(
            interp,
            OperatorTerms(d2=self.diffusivity),
            DirichletBoundary.endpoints(interp.N),
        )
        u0 = interp.sample(heat1d_initial)
        u1, stats = system.solve(
            u0, self.t0, self.t1, method=self.method,
            rtol=self.rtol, atol=self.atol, max_steps=self.max_steps,
        )
        logger.info("Integrator statistics (%s):\n%s", self.method, stats)

        # u0 is the t = 0 field, so the reference is taken at the elapsed time
        elapsed = self.t1 - self.t0
        u_exact = self.exact(np.array(interp.x), elapsed)
        max_error = float(np.max(np.abs(u1 - u_exact)))
        logger.info("N = %d, t = %g: max diff = %.6e", interp.N, self.t1, max_error)
        return {
            "x": np.array(interp.x),
            "u0": u0,
            "u": u1,
            "u_exact": u_exact,
            "max_error": max_error,
            "t0": self.t0,
            "t1": self.t1,
            "n_function_evals": stats.n_function_evals,
            "n_accepted": stats.n_accepted,
            "n_rejected": stats.n_rejected,
            "stats": stats,
        }

    def plot(self, result: Dict[str, Any]) -> None:
        t1 = result["t1"]
        elapsed = t1 - result["t0"]
        plot_nodal_solution(
            self.interp,
            result["u"],
            lambda x: self.exact(x, elapsed),
            title=f"N = {self.interp.N}, t = {t1:g}",
            show_interpolant=False,
            outpath=self.output_path(self.name),
        )
