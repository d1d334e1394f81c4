"""
Evolutionary engine for the knapsack GA.

Runs the generational loop for one strategy tuple:

1. Elitism: copy the best floor(N * elitism_rate) solutions unchanged
2. Reproduction: select two distinct parents, cross them over into one
   child, and mutate that child with probability mutation_rate
3. Replacement: the new generation replaces the population wholesale
4. Trace: record the best utility of the new generation
"""

import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import numpy as np

from .config import GAConfig
from .crossover import get_crossover_operator
from .data_models import ItemCatalog, StrategyTuple
from .mutation import get_mutation_operator
from .population import Population
from .selection import get_selection_operator
from .solution import Solution


@dataclass
class RunResult:
    """
    Outcome of one GA run.

    Attributes:
        best_solution: Best solution of the final generation
        trace: Best utility of each generation (length = generations)
        elapsed_ms: Wall-clock time of the run in milliseconds
        operation_counts: How many crossovers/mutations were applied
    """
    best_solution: Solution
    trace: np.ndarray
    elapsed_ms: float
    operation_counts: Dict[str, int] = field(default_factory=dict)

    @property
    def best_utility(self) -> float:
        return self.best_solution.utility


class GeneticAlgorithm:
    """
    Generational GA with elitism for a single strategy tuple.

    Operators are resolved from their tags once, when the engine is built;
    an unknown tag therefore fails before any generation runs.
    """

    def __init__(
        self,
        population: Population,
        config: GAConfig,
        strategy: StrategyTuple,
        rng: np.random.Generator
    ):
        if not isinstance(strategy, StrategyTuple):
            raise ValueError(f"Invalid strategy: {strategy!r}. Must be a StrategyTuple")
        if population.repair_method is not strategy.repair:
            raise ValueError(
                f"Population repairs with {population.repair_method.value}, "
                f"strategy expects {strategy.repair.value}"
            )

        self.population = population
        self.config = config
        self.strategy = strategy
        self.rng = rng

        self.generation = 0
        self.elitism_count = min(config.elitism_count, len(population))
        self.trace = np.zeros(config.generations, dtype=float)
        self.operation_counts = {'crossovers': 0, 'mutations': 0, 'elites': 0}

        self._select_pair = get_selection_operator(strategy.selection, config.tournament_size)
        self._crossover = get_crossover_operator(strategy.crossover)
        self._mutate = get_mutation_operator(strategy.mutation, config.gene_flip_rate)

    @property
    def finished(self) -> bool:
        return self.generation >= self.config.generations

    def _elites(self) -> List[Solution]:
        order = self.population.sorted_indices(descending=True)
        return [self.population[int(i)].copy() for i in order[:self.elitism_count]]

    def _offspring(self) -> Solution:
        first, second = self._select_pair(self.population, self.rng)
        child, _ = self._crossover(self.population[first], self.population[second], self.rng)
        self.operation_counts['crossovers'] += 1

        if self.rng.random() < self.config.mutation_rate:
            child, _ = self._mutate(child, self.rng)
            self.operation_counts['mutations'] += 1

        return child

    def step(self) -> float:
        """
        Advance the population by one generation.

        Returns:
            Best utility of the new generation

        Raises:
            RuntimeError: If all configured generations already ran
        """
        if self.finished:
            raise RuntimeError(
                f"All {self.config.generations} generations have already run"
            )

        next_generation = self._elites()
        self.operation_counts['elites'] += len(next_generation)
        while len(next_generation) < len(self.population):
            next_generation.append(self._offspring())

        self.population = Population(
            next_generation,
            self.population.catalog,
            self.population.budgets,
            self.population.repair_method,
        )

        best_utility = self.population.best().utility
        self.trace[self.generation] = best_utility
        self.generation += 1
        return best_utility

    def solve(self) -> RunResult:
        """
        Run every remaining generation.

        Returns:
            RunResult with the final best solution and the utility trace
        """
        start_time = time.perf_counter()
        while not self.finished:
            self.step()
        elapsed_ms = (time.perf_counter() - start_time) * 1000.0

        return RunResult(
            best_solution=self.population.best(),
            trace=self.trace.copy(),
            elapsed_ms=elapsed_ms,
            operation_counts=dict(self.operation_counts),
        )


def run_once(
    config: GAConfig,
    strategy: StrategyTuple,
    catalog: ItemCatalog,
    budgets: np.ndarray,
    rng: Optional[np.random.Generator] = None
) -> RunResult:
    """
    Initialize a population and run the GA once.

    Args:
        config: Batch configuration
        strategy: Operators for this run
        catalog: Shared item catalog
        budgets: Shared budget vector
        rng: Random number generator owned by this run

    Returns:
        RunResult of the run. Its elapsed time covers the generational loop
        only, not population initialization.
    """
    if rng is None:
        rng = np.random.default_rng()

    population = Population.initialize(
        config.population_size, catalog, budgets, strategy.repair, rng
    )
    return GeneticAlgorithm(population, config, strategy, rng).solve()
