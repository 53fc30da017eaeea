"""Lagrange basis polynomials on each grid type."""

import logging
from typing import Any, Dict

import numpy as np

from specol.grid import GridType
from specol.visualization import plot_basis_functions

from ..base import BaseProblem

logger = logging.getLogger(__name__)


class BasisProblem(BaseProblem):
    """Draw psi_p(x) for every grid type and report Lebesgue constants."""

    name = "basis"
    DEFAULT_CONFIG: Dict[str, Any] = {
        "grid": {"N": 6},
        "basis": {
            "grid_types": ["uniform", "chebyshev_gauss", "chebyshev_gauss_lobatto"],
            "nstation": 201,
            "lebesgue_nstation": 10000,
        },
        "io": {"plot": True, "save": True, "format": "png"},
    }

    def setup_parameters(self) -> None:
        cfg = self.config["basis"]
        self.grid_types = [GridType.parse(g) for g in cfg.get("grid_types", [])]
        self.nstation = int(cfg.get("nstation", 201))
        self.lebesgue_nstation = int(cfg.get("lebesgue_nstation", 10000))

    def solve(self) -> Dict[str, Any]:
        self.interpolants = {}
        result: Dict[str, Any] = {}
        for gtype in self.grid_types:
            interp = self.create_interpolant(grid_type=gtype)
            self.interpolants[gtype] = interp
            lebesgue = interp.lebesgue_constant(self.lebesgue_nstation)
            logger.info("%s: X = %s", gtype.value, np.array2string(interp.x, precision=6))
            logger.info("%s: Lebesgue constant = %.6f", gtype.value, lebesgue)
            result[f"x_{gtype.value}"] = np.array(interp.x)
            result[f"lebesgue_{gtype.value}"] = lebesgue
        return result

    def plot(self, result: Dict[str, Any]) -> None:
        for gtype, interp in self.interpolants.items():
            plot_basis_functions(
                interp,
                nstation=self.nstation,
                outpath=self.output_path(f"{self.name}_{gtype.value}"),
            )
