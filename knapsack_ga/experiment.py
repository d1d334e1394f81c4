"""
Experiment driver for the knapsack GA.

Benchmarks every strategy tuple of the configured cross-product
{mutation} x {crossover} x {repair} x {selection}: each tuple is run
`repetitions` times over one shared item catalog and budget vector, and the
per-generation best utilities are aggregated into mean and standard deviation
series.

Randomness: a single numpy SeedSequence spawns one stream for the catalog and
one independent stream per (tuple, repetition). Results therefore depend only
on the seed, not on the number of worker processes.
"""

import itertools
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .config import GAConfig
from .data_models import (
    ItemCatalog,
    StrategyTuple,
    as_budget_vector,
    generate_budgets,
    generate_items,
)
from .engine import run_once
from . import reporting


def strategy_tuples(config: GAConfig) -> List[StrategyTuple]:
    """
    Enumerate the configured cross-product of operators.

    Args:
        config: Batch configuration

    Returns:
        Strategy tuples ordered mutation, crossover, repair, selection
        (selection varies fastest)
    """
    return [
        StrategyTuple(mutation, crossover, repair, selection)
        for mutation, crossover, repair, selection in itertools.product(
            config.mutations, config.crossovers, config.repairs, config.selections
        )
    ]


@dataclass
class TupleStatistics:
    """
    Aggregated results of all repetitions of one strategy tuple.

    Attributes:
        strategy: The benchmarked operators
        traces: Best utility per [repetition][generation]
        times_ms: Wall-clock time per repetition
        mean_utility: Mean best utility per generation
        std_utility: Population standard deviation per generation
        mean_time_ms: Mean wall-clock time of a repetition
    """
    strategy: StrategyTuple
    traces: np.ndarray
    times_ms: np.ndarray
    mean_utility: np.ndarray = field(init=False)
    std_utility: np.ndarray = field(init=False)
    mean_time_ms: float = field(init=False)

    def __post_init__(self):
        self.mean_utility = self.traces.mean(axis=0)
        self.std_utility = self.traces.std(axis=0)
        self.mean_time_ms = float(self.times_ms.mean())

    @property
    def final_mean(self) -> float:
        return float(self.mean_utility[-1])

    @property
    def final_std(self) -> float:
        return float(self.std_utility[-1])

    @property
    def best_utility(self) -> float:
        """Highest final utility reached by any repetition."""
        return float(self.traces[:, -1].max())


@dataclass
class ExperimentResult:
    """
    Output of a benchmark batch, consumed by reporting and visualization.

    Attributes:
        catalog: Item catalog shared by every run
        budgets: Budget vector shared by every run
        tuples: Per-tuple statistics, in benchmark order
        entropy: Seed entropy that reproduces the batch
    """
    catalog: ItemCatalog
    budgets: np.ndarray
    tuples: List[TupleStatistics]
    entropy: int

    @property
    def strategies(self) -> List[StrategyTuple]:
        return [stats.strategy for stats in self.tuples]

    @property
    def tuple_count(self) -> int:
        return len(self.tuples)

    @property
    def generation_count(self) -> int:
        return int(self.tuples[0].mean_utility.size) if self.tuples else 0

    @property
    def mean_utility(self) -> np.ndarray:
        """Mean best utility, shape [tuple][generation]."""
        return np.vstack([stats.mean_utility for stats in self.tuples])

    @property
    def std_utility(self) -> np.ndarray:
        """Standard deviation of best utility, shape [tuple][generation]."""
        return np.vstack([stats.std_utility for stats in self.tuples])

    @property
    def mean_time_ms(self) -> np.ndarray:
        return np.array([stats.mean_time_ms for stats in self.tuples])

    def get(self, strategy: StrategyTuple) -> TupleStatistics:
        for stats in self.tuples:
            if stats.strategy == strategy:
                return stats
        raise KeyError(f"Strategy not benchmarked: {strategy.label}")

    def ranking(self) -> List[TupleStatistics]:
        """Tuples ordered by final mean utility, best first."""
        return sorted(self.tuples, key=lambda stats: stats.final_mean, reverse=True)


def _run_repetition(
    config: GAConfig,
    strategy: StrategyTuple,
    catalog: ItemCatalog,
    budgets: np.ndarray,
    seed_sequence: np.random.SeedSequence
) -> Tuple[np.ndarray, float]:
    """Run one repetition with its own random stream."""
    rng = np.random.default_rng(seed_sequence)
    result = run_once(config, strategy, catalog, budgets, rng)
    return result.trace, result.elapsed_ms


def run_strategy(
    config: GAConfig,
    strategy: StrategyTuple,
    catalog: ItemCatalog,
    budgets: np.ndarray,
    seed_sequence: np.random.SeedSequence,
    executor: Optional[ProcessPoolExecutor] = None
) -> TupleStatistics:
    """
    Run every repetition of one strategy tuple.

    Each repetition writes to its own row of the trace matrix.

    Args:
        config: Batch configuration
        strategy: Operators to benchmark
        catalog: Shared item catalog
        budgets: Shared budget vector
        seed_sequence: Parent sequence of this tuple's repetitions
        executor: Optional process pool for parallel repetitions

    Returns:
        TupleStatistics of the tuple
    """
    repetition_seeds = seed_sequence.spawn(config.repetitions)
    traces = np.zeros((config.repetitions, config.generations), dtype=float)
    times_ms = np.zeros(config.repetitions, dtype=float)

    if executor is None:
        outcomes = (
            _run_repetition(config, strategy, catalog, budgets, seed)
            for seed in repetition_seeds
        )
    else:
        futures = [
            executor.submit(_run_repetition, config, strategy, catalog, budgets, seed)
            for seed in repetition_seeds
        ]
        outcomes = (future.result() for future in futures)

    for repetition, (trace, elapsed_ms) in enumerate(outcomes):
        traces[repetition] = trace
        times_ms[repetition] = elapsed_ms

    return TupleStatistics(strategy=strategy, traces=traces, times_ms=times_ms)


def run_experiment(
    config: GAConfig,
    catalog: Optional[ItemCatalog] = None,
    budgets: Optional[Sequence[float]] = None,
    strategies: Optional[Sequence[StrategyTuple]] = None,
    verbose: bool = True
) -> ExperimentResult:
    """
    Benchmark every strategy tuple and aggregate the results.

    Algorithm:
        1. Seed one SeedSequence from config.seed (OS entropy if None)
        2. Use the given budgets, config.budgets, or generate them
        3. Use the given catalog or generate one over the budgets
        4. For each strategy tuple: run `repetitions` independent GA runs,
           then compute per-generation mean and standard deviation
        5. Print progress when verbose

    Args:
        config: Batch configuration
        catalog: Item catalog to reuse (generated if None)
        budgets: Budget vector to reuse (required with a catalog)
        strategies: Tuples to benchmark (config cross-product if None)
        verbose: Print progress while running

    Returns:
        ExperimentResult with one TupleStatistics per strategy tuple
    """
    root = np.random.SeedSequence(config.seed)
    catalog_seed, runs_seed = root.spawn(2)
    catalog_rng = np.random.default_rng(catalog_seed)

    if catalog is not None and budgets is None:
        raise ValueError("budgets must be given together with a catalog")

    if budgets is not None:
        budget_vector = as_budget_vector(budgets)
    elif config.budgets is not None:
        budget_vector = as_budget_vector(config.budgets)
    else:
        budget_vector = generate_budgets(config.item_count, config.constraint_count, catalog_rng)

    if catalog is None:
        catalog = generate_items(
            config.item_count, config.constraint_count, budget_vector, catalog_rng
        )
    elif catalog.constraint_count != budget_vector.size:
        raise ValueError(
            f"Catalog has {catalog.constraint_count} constraints, "
            f"budgets have {budget_vector.size}"
        )

    if strategies is None:
        strategies = strategy_tuples(config)
    strategies = list(strategies)
    tuple_seeds = runs_seed.spawn(len(strategies))

    if verbose:
        reporting.print_budgets(budget_vector)

    executor = ProcessPoolExecutor(max_workers=config.workers) if config.workers > 1 else None
    results = []
    try:
        for strategy, seed_sequence in zip(strategies, tuple_seeds):
            if verbose:
                reporting.print_strategy_header(strategy)

            stats = run_strategy(config, strategy, catalog, budget_vector, seed_sequence, executor)
            results.append(stats)

            if verbose:
                reporting.print_strategy_progress(stats, config.report_interval)
    finally:
        if executor is not None:
            executor.shutdown()

    return ExperimentResult(
        catalog=catalog,
        budgets=budget_vector,
        tuples=results,
        entropy=root.entropy,
    )
