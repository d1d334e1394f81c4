"""
Solution representation for the knapsack GA.

A solution is a binary selection vector over the shared item catalog
(1 if the item is packed, 0 otherwise) with cached utility and per-constraint
costs. Every public operation leaves the solution feasible.
"""

from typing import List, Optional, Sequence

import numpy as np

from .data_models import ItemCatalog, RepairMethod


class Solution:
    """
    One candidate packing (individual in the GA population).

    Attributes:
        catalog: Shared, read-only item catalog
        budgets: Shared, read-only budget vector
        repair_method: Heuristic used whenever this solution is repaired
        selection: int8 array of 0/1 genes, one per item
        utility: Cached total utility of the selected items
        costs: Cached total cost per constraint dimension
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        budgets: np.ndarray,
        repair_method: RepairMethod,
        selection: Optional[Sequence[int]] = None,
        repair: bool = True
    ):
        """
        Args:
            catalog: Shared item catalog
            budgets: Shared budget vector
            repair_method: Repair heuristic for this solution
            selection: Initial genes (all zeros if omitted)
            repair: Repair the given genes right away. Only pass False to
                inspect a raw, possibly infeasible chromosome.
        """
        if not isinstance(repair_method, RepairMethod):
            raise ValueError(
                f"Invalid repair method: {repair_method!r}. Must be a RepairMethod"
            )
        if len(budgets) != catalog.constraint_count:
            raise ValueError(
                f"Expected {catalog.constraint_count} budgets, got {len(budgets)}"
            )

        self.catalog = catalog
        self.budgets = budgets
        self.repair_method = repair_method

        if selection is None:
            self.selection = np.zeros(catalog.item_count, dtype=np.int8)
        else:
            self.selection = np.array(selection, dtype=np.int8).reshape(-1)
            if self.selection.size != catalog.item_count:
                raise ValueError(
                    f"Selection has {self.selection.size} genes, expected {catalog.item_count}"
                )
            if np.any((self.selection != 0) & (self.selection != 1)):
                raise ValueError("Selection genes must be 0 or 1")

        self.utility = 0.0
        self.costs = np.zeros(catalog.constraint_count, dtype=float)
        self.calculate_utility()
        self.calculate_costs()
        if repair:
            self.repair()

    @classmethod
    def random(
        cls,
        catalog: ItemCatalog,
        budgets: np.ndarray,
        repair_method: RepairMethod,
        rng: np.random.Generator
    ) -> "Solution":
        """
        Create a solution with every gene drawn Bernoulli(0.5), then repaired.

        Args:
            catalog: Shared item catalog
            budgets: Shared budget vector
            repair_method: Repair heuristic for this solution
            rng: Random number generator

        Returns:
            Feasible random Solution
        """
        genes = (rng.random(catalog.item_count) < 0.5).astype(np.int8)
        return cls(catalog, budgets, repair_method, genes)

    def calculate_utility(self) -> float:
        """Recompute and cache the total utility of the selected items."""
        self.utility = float(np.dot(self.catalog.utilities, self.selection))
        return self.utility

    def calculate_costs(self) -> np.ndarray:
        """Recompute and cache the per-dimension cost of the selected items."""
        self.costs = self.selection.astype(float) @ self.catalog.costs
        return self.costs

    def check_feasible(self, delta: Optional[np.ndarray] = None) -> bool:
        """
        Check whether the cached costs plus delta fit every budget.

        Args:
            delta: Extra cost per dimension (defaults to zero)

        Returns:
            True if costs[j] + delta[j] <= budgets[j] for every j
        """
        if delta is None:
            return bool(np.all(self.costs <= self.budgets))
        return bool(np.all(self.costs + delta <= self.budgets))

    def is_feasible(self) -> bool:
        """Check feasibility from scratch, ignoring the cached costs."""
        actual = self.selection.astype(float) @ self.catalog.costs
        return bool(np.all(actual <= self.budgets))

    def repair(self) -> List[str]:
        """
        Restore feasibility in place with this solution's repair heuristic.

        Returns:
            Repair notes
        """
        from .repair import repair_solution

        return repair_solution(self)

    def copy(self) -> "Solution":
        """
        Create an independent copy sharing the catalog and budgets.

        Returns:
            New Solution with copied genes and cached totals
        """
        clone = Solution.__new__(Solution)
        clone.catalog = self.catalog
        clone.budgets = self.budgets
        clone.repair_method = self.repair_method
        clone.selection = self.selection.copy()
        clone.utility = self.utility
        clone.costs = self.costs.copy()
        return clone

    def selected_count(self) -> int:
        return int(self.selection.sum())

    def __len__(self) -> int:
        return int(self.selection.size)

    def __repr__(self) -> str:
        return (
            f"Solution(selected={self.selected_count()}/{len(self)}, "
            f"utility={self.utility:.2f}, repair={self.repair_method.value})"
        )
