"""
Data models for the knapsack GA.

Core data structures: items and their catalog, budget generation, and the
strategy tags that select operators for a run.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

import numpy as np


class MutationMethod(Enum):
    """Mutation operators applied to a child"""
    BIT_FLIP = "bit_flip"
    FLIP = "flip"
    SWAP = "swap"


class CrossoverMethod(Enum):
    """Crossover operators combining two parents into one child"""
    UNIFORM = "uniform"
    ONE_POINT = "one_point"
    SHUFFLE = "shuffle"


class RepairMethod(Enum):
    """Greedy heuristics that restore feasibility"""
    GREEDY_UTILITY = "greedy_utility"
    WEIGHTED_UTILITY = "weighted_utility"


class SelectionMethod(Enum):
    """Parent selection strategies"""
    RANDOM = "random"
    ROULETTE = "roulette"
    RANK = "rank"
    TOURNAMENT = "tournament"


@dataclass(frozen=True)
class StrategyTuple:
    """
    One combination of operators benchmarked by the experiment driver.

    Attributes:
        mutation: Mutation operator applied to children
        crossover: Crossover operator producing children
        repair: Repair heuristic used by every solution of the run
        selection: Parent selection strategy
    """
    mutation: MutationMethod
    crossover: CrossoverMethod
    repair: RepairMethod
    selection: SelectionMethod

    def __post_init__(self):
        """Reject anything that is not one of the closed enumerations."""
        expected = (
            ("mutation", MutationMethod),
            ("crossover", CrossoverMethod),
            ("repair", RepairMethod),
            ("selection", SelectionMethod),
        )
        for name, enum_cls in expected:
            value = getattr(self, name)
            if not isinstance(value, enum_cls):
                raise ValueError(
                    f"Invalid {name} method: {value!r}. Must be a {enum_cls.__name__}"
                )

    @property
    def label(self) -> str:
        """Short human-readable name used in reports and chart legends."""
        return (
            f"{self.mutation.value}/{self.crossover.value}/"
            f"{self.repair.value}/{self.selection.value}"
        )


@dataclass(frozen=True)
class Item:
    """
    A single candidate item.

    Attributes:
        utility: Value gained when the item is selected
        costs: Cost of the item in each constraint dimension
    """
    utility: float
    costs: tuple

    def __post_init__(self):
        """Store costs as an immutable tuple of floats."""
        object.__setattr__(self, "costs", tuple(float(c) for c in self.costs))

    @property
    def total_cost(self) -> float:
        return sum(self.costs)


class ItemCatalog:
    """
    Read-only collection of items shared by every solution of a batch.

    Utilities and costs are also held as numpy arrays so that solutions can
    compute their totals without looping in Python.
    """

    def __init__(self, items: Sequence[Item]):
        if not items:
            raise ValueError("ItemCatalog must contain at least one item")

        constraint_count = len(items[0].costs)
        for index, item in enumerate(items):
            if len(item.costs) != constraint_count:
                raise ValueError(
                    f"Item {index} has {len(item.costs)} costs, expected {constraint_count}"
                )

        self.items: tuple = tuple(items)
        self.utilities = np.array([item.utility for item in items], dtype=float)
        self.costs = np.array([item.costs for item in items], dtype=float).reshape(
            len(items), constraint_count
        )
        if np.any(self.costs < 0):
            raise ValueError("Item costs must be non-negative")
        self.utilities.flags.writeable = False
        self.costs.flags.writeable = False

    @classmethod
    def from_arrays(cls, utilities: Sequence[float], costs: Sequence[Sequence[float]]) -> "ItemCatalog":
        """
        Build a catalog from parallel utility and cost sequences.

        Args:
            utilities: Utility per item
            costs: One cost row per item

        Returns:
            ItemCatalog over the given items
        """
        if len(utilities) != len(costs):
            raise ValueError(
                f"Got {len(utilities)} utilities but {len(costs)} cost rows"
            )
        return cls([Item(float(u), tuple(row)) for u, row in zip(utilities, costs)])

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def constraint_count(self) -> int:
        return self.costs.shape[1]

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, index: int) -> Item:
        return self.items[index]

    def __iter__(self):
        return iter(self.items)


def as_budget_vector(budgets: Sequence[float]) -> np.ndarray:
    """
    Convert budgets into the read-only vector shared by a batch.

    Args:
        budgets: One budget per constraint dimension

    Returns:
        Read-only float array
    """
    vector = np.array(budgets, dtype=float).reshape(-1)
    if vector.size == 0:
        raise ValueError("Budget vector must have at least one dimension")
    if np.any(vector < 0):
        raise ValueError(f"Budgets must be non-negative, got {vector.tolist()}")
    vector.flags.writeable = False
    return vector


def generate_budgets(
    item_count: int,
    constraint_count: int,
    rng: np.random.Generator
) -> np.ndarray:
    """
    Draw one budget per constraint uniformly from [n/2, n/2 + 2n).

    Args:
        item_count: Number of items in the batch (n)
        constraint_count: Number of constraint dimensions
        rng: Random number generator

    Returns:
        Read-only budget vector
    """
    if constraint_count < 1:
        raise ValueError(f"constraint_count must be positive, got {constraint_count}")
    low = item_count / 2.0
    budgets = rng.random(constraint_count) * item_count * 2 + low
    return as_budget_vector(budgets)


def generate_items(
    item_count: int,
    constraint_count: int,
    budgets: Sequence[float],
    rng: Optional[np.random.Generator] = None
) -> ItemCatalog:
    """
    Generate a random item catalog.

    Utility is uniform in [0, n*10). The cost in dimension j is uniform in
    [0, (budgets[j] - 1) / 4), so a handful of items always fits.

    Args:
        item_count: Number of items (n)
        constraint_count: Number of constraint dimensions
        budgets: Budget per constraint dimension
        rng: Random number generator

    Returns:
        ItemCatalog with item_count items
    """
    if item_count < 1:
        raise ValueError(f"item_count must be positive, got {item_count}")
    if len(budgets) != constraint_count:
        raise ValueError(
            f"Expected {constraint_count} budgets, got {len(budgets)}"
        )

    if rng is None:
        rng = np.random.default_rng()

    budget_array = np.asarray(budgets, dtype=float)
    scales = np.maximum((budget_array - 1) / 4, 0.0)

    items: List[Item] = []
    for _ in range(item_count):
        utility = rng.random() * item_count * 10
        costs = rng.random(constraint_count) * scales
        items.append(Item(float(utility), tuple(costs)))

    return ItemCatalog(items)
