"""Problem registry for looking up drivers by name."""

from typing import Dict, List, Optional, Type

from .base import BaseProblem


class ProblemRegistry:
    """Registry for managing available problems."""

    _problems: Dict[str, Type[BaseProblem]] = {}

    @classmethod
    def register(cls, name: str, problem_class: Type[BaseProblem]) -> None:
        """Register a problem class under name."""
        cls._problems[name] = problem_class

    @classmethod
    def get_problem_class(cls, name: str) -> Type[BaseProblem]:
        """Get a problem class by name.

        Raises:
            KeyError: If problem name is not registered
        """
        if name not in cls._problems:
            available = ", ".join(cls._problems.keys())
            raise KeyError(f"Unknown problem '{name}'. Available problems: {available}")
        return cls._problems[name]

    @classmethod
    def create_problem(
        cls,
        name: str,
        config_path: Optional[str] = None,
        config: Optional[dict] = None,
    ) -> BaseProblem:
        problem_class = cls.get_problem_class(name)
        return problem_class(config_path=config_path, config=config)

    @classmethod
    def list_problems(cls) -> List[str]:
        return list(cls._problems.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        return name in cls._problems
