"""specol: spectral collocation with barycentric Lagrange interpolation."""

import os

from .collocation import (  # noqa: F401
    CollocationSystem,
    DirichletBoundary,
    OperatorTerms,
    SemiDiscreteSystem,
    apply_boundary_constraints,
    assemble_bvp,
    solve_bvp,
)
from .exceptions import (  # noqa: F401
    BoundaryIndexOutOfRange,
    DegreeMismatch,
    InconsistentInitialCondition,
    IntegrationFailure,
    InvalidDegree,
    SingularMatrix,
    SpecolError,
)
from .grid import CollocationGrid, GridType, generate_grid  # noqa: F401
from .interpolation import LagrangeInterpolant, barycentric_weights  # noqa: F401

# Register all problems
from .problems import register  # noqa: F401

__all__ = [
    "__version__",
    "run_problem",
    "BoundaryIndexOutOfRange",
    "CollocationGrid",
    "CollocationSystem",
    "DegreeMismatch",
    "DirichletBoundary",
    "GridType",
    "InconsistentInitialCondition",
    "IntegrationFailure",
    "InvalidDegree",
    "LagrangeInterpolant",
    "OperatorTerms",
    "SemiDiscreteSystem",
    "SingularMatrix",
    "SpecolError",
    "apply_boundary_constraints",
    "assemble_bvp",
    "barycentric_weights",
    "generate_grid",
    "solve_bvp",
]

__version__ = "0.1.0"


def run_problem(
    problem_name: str,
    config_path: str = None,
    config: dict = None,
    outdir: str = None,
    plot: bool = None,
    save: bool = None,
):
    """Convenience function to run a registered problem.

    Args:
        problem_name: Name of the problem to run ('bvp1d', 'heat1d', 'basis', 'dft')
        config_path: Path to YAML/JSON configuration file
        config: Configuration dictionary merged over the problem defaults
        outdir: Override output directory
        plot: Override io.plot
        save: Override io.save

    Returns:
        Tuple of (problem, result)
    """
    from .problems import ProblemRegistry

    problem = ProblemRegistry.create_problem(
        name=problem_name, config_path=config_path, config=config
    )
    if outdir:
        problem.outdir = os.path.abspath(outdir)

    return problem, problem.run(plot=plot, save=save)
