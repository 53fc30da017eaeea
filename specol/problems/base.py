"""Base problem class for specol drivers."""

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from specol.interpolation import LagrangeInterpolant
from specol.io import ensure_outdir, load_config, merge_config, save_solution

logger = logging.getLogger(__name__)


class BaseProblem(ABC):
    """Base class for all specol problems.

    Subclasses define ``name`` and ``DEFAULT_CONFIG``; a user config (dict or
    YAML/JSON file) is merged over the defaults, so a problem runs with no
    arguments at all.
    """

    name: str = "base"
    DEFAULT_CONFIG: Dict[str, Any] = {}

    def __init__(
        self,
        config_path: Optional[str] = None,
        config: Optional[Dict[str, Any]] = None,
    ):
        """Initialize problem with configuration.

        Args:
            config_path: Path to YAML/JSON configuration file
            config: Configuration dictionary (takes precedence over config_path)
        """
        if config is not None:
            user_config = config
        elif config_path is not None:
            user_config = load_config(config_path)
        else:
            user_config = {}

        self.config = merge_config(self.DEFAULT_CONFIG, user_config)
        self.config.setdefault("problem", self.name)

        self.setup_output_directory()
        self.setup_common_parameters()
        self.setup_parameters()

    def setup_output_directory(self) -> None:
        """Setup output directory from configuration."""
        io_cfg = self.config.get("io", {})
        if io_cfg.get("outdir"):
            self.outdir = os.path.abspath(io_cfg["outdir"])
        else:
            self.outdir = os.path.abspath(f"outputs/{self.name}")

    def setup_common_parameters(self) -> None:
        """Extract parameters shared by every problem."""
        io_cfg = self.config.get("io", {})
        self.plot_enabled = bool(io_cfg.get("plot", True))
        self.save_enabled = bool(io_cfg.get("save", True))
        self.image_format = str(io_cfg.get("format", "png")).lstrip(".")

        grid_cfg = self.config.get("grid", {})
        self.N = int(grid_cfg.get("N", 8))
        self.grid_type = str(grid_cfg.get("type", "chebyshev_gauss_lobatto"))
        self.d2_method = str(grid_cfg.get("d2_method", "analytic"))

    @abstractmethod
    def setup_parameters(self) -> None:
        """Extract problem-specific parameters from self.config."""

    def create_interpolant(self, N: Optional[int] = None, grid_type: Optional[str] = None) -> LagrangeInterpolant:
        return LagrangeInterpolant(
            self.N if N is None else N,
            self.grid_type if grid_type is None else grid_type,
            d2_method=self.d2_method,
        )

    @abstractmethod
    def solve(self) -> Dict[str, Any]:
        """Run the computation and return arrays and metrics."""

    def plot(self, result: Dict[str, Any]) -> None:
        """Render result; default does nothing."""

    def output_path(self, stem: str) -> str:
        return os.path.join(self.outdir, f"{stem}.{self.image_format}")

    def save(self, result: Dict[str, Any]) -> str:
        arrays = {k: v for k, v in result.items() if hasattr(v, "shape")}
        meta = {k: v for k, v in result.items() if isinstance(v, (int, float, str, bool))}
        meta["config"] = self.config
        return save_solution(self.outdir, self.name, meta=meta, **arrays)

    def run(self, plot: Optional[bool] = None, save: Optional[bool] = None) -> Dict[str, Any]:
        """Solve, then optionally save and render.

        Args:
            plot: Override io.plot
            save: Override io.save

        Returns:
            Result dictionary from solve()
        """
        do_plot = self.plot_enabled if plot is None else bool(plot)
        do_save = self.save_enabled if save is None else bool(save)
        if do_plot or do_save:
            ensure_outdir(self.outdir)

        logger.info("Running %s", self.name)
        result = self.solve()

        if do_save:
            path = self.save(result)
            logger.info("Saved solution: %s", path)
        if do_plot:
            self.plot(result)
            logger.info("Figures written to: %s", self.outdir)
        return result
