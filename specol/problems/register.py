"""Register all available problems."""

from .registry import ProblemRegistry
from .problem_list.basis import BasisProblem
from .problem_list.bvp1d import BVP1DProblem
from .problem_list.dft import DFTProblem
from .problem_list.heat1d import Heat1DProblem


ProblemRegistry.register("bvp1d", BVP1DProblem)
ProblemRegistry.register("heat1d", Heat1DProblem)
ProblemRegistry.register("basis", BasisProblem)
ProblemRegistry.register("dft", DFTProblem)
