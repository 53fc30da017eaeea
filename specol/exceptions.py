"""Exception types raised by the collocation engine and its collaborators."""

import numpy as np


class SpecolError(Exception):
    """Base class for all specol errors."""


class InvalidDegree(SpecolError, ValueError):
    """Polynomial degree is not an integer >= 1."""

    def __init__(self, degree):
        self.degree = degree
        super().__init__(f"Polynomial degree must be an integer >= 1, got {degree!r}")


class DegreeMismatch(SpecolError, ValueError):
    """A nodal vector does not have N+1 entries."""

    def __init__(self, expected: int, actual: int, what: str = "u"):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Length of {what} must equal N+1 = {expected}, got {actual}"
        )


class BoundaryIndexOutOfRange(SpecolError, IndexError):
    """A boundary row index is outside [0, N]."""

    def __init__(self, index, degree: int):
        self.index = index
        self.degree = degree
        super().__init__(f"Boundary index {index} is outside [0, {degree}]")


class InconsistentInitialCondition(SpecolError, ValueError):
    """Initial field does not satisfy the Dirichlet values it will be held at."""


class SingularMatrix(SpecolError, np.linalg.LinAlgError):
    """The collocation matrix is numerically singular."""


class IntegrationFailure(SpecolError, RuntimeError):
    """The time integrator could not reach the final time."""
