"""Problem registry and driver classes."""

from .base import BaseProblem
from .registry import ProblemRegistry
from .problem_list.basis import BasisProblem
from .problem_list.bvp1d import BVP1DProblem
from .problem_list.dft import DFTProblem
from .problem_list.heat1d import Heat1DProblem

__all__ = [
    "BaseProblem",
    "ProblemRegistry",
    "BasisProblem",
    "BVP1DProblem",
    "DFTProblem",
    "Heat1DProblem",
]
