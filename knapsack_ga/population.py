"""
Population of solutions for the knapsack GA.
"""

from typing import Iterator, List, Sequence

import numpy as np

from .data_models import ItemCatalog, RepairMethod
from .solution import Solution


class Population:
    """
    Fixed-size ordered collection of solutions sharing one catalog, budget
    vector and repair method.
    """

    def __init__(
        self,
        solutions: Sequence[Solution],
        catalog: ItemCatalog,
        budgets: np.ndarray,
        repair_method: RepairMethod
    ):
        if not solutions:
            raise ValueError("Population must contain at least one solution")
        for solution in solutions:
            if solution.catalog is not catalog or solution.repair_method is not repair_method:
                raise ValueError(
                    "Every solution must share the population's catalog and repair method"
                )

        self.solutions: List[Solution] = list(solutions)
        self.catalog = catalog
        self.budgets = budgets
        self.repair_method = repair_method

    @classmethod
    def initialize(
        cls,
        size: int,
        catalog: ItemCatalog,
        budgets: np.ndarray,
        repair_method: RepairMethod,
        rng: np.random.Generator
    ) -> "Population":
        """
        Build a population of independently randomized, repaired solutions.

        Args:
            size: Number of solutions
            catalog: Shared item catalog
            budgets: Shared budget vector
            repair_method: Repair heuristic for every solution
            rng: Random number generator

        Returns:
            New Population
        """
        if size < 1:
            raise ValueError(f"Population size must be positive, got {size}")

        solutions = [
            Solution.random(catalog, budgets, repair_method, rng)
            for _ in range(size)
        ]
        return cls(solutions, catalog, budgets, repair_method)

    def utilities(self) -> np.ndarray:
        """Cached utility of every solution, in population order."""
        return np.array([solution.utility for solution in self.solutions], dtype=float)

    def best_index(self) -> int:
        # argmax returns the first maximum
        return int(np.argmax(self.utilities()))

    def worst_index(self) -> int:
        return int(np.argmin(self.utilities()))

    def best(self) -> Solution:
        return self.solutions[self.best_index()]

    def worst(self) -> Solution:
        return self.solutions[self.worst_index()]

    def sorted_indices(self, descending: bool = True) -> np.ndarray:
        """
        Indices ordered by utility. Ties keep population order.

        Args:
            descending: Highest utility first if True

        Returns:
            Array of indices
        """
        utilities = self.utilities()
        if descending:
            return np.argsort(-utilities, kind="stable")
        return np.argsort(utilities, kind="stable")

    def __len__(self) -> int:
        return len(self.solutions)

    def __getitem__(self, index: int) -> Solution:
        return self.solutions[index]

    def __iter__(self) -> Iterator[Solution]:
        return iter(self.solutions)
