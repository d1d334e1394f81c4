"""
Knapsack GA - strategy benchmark for the multi-dimensional knapsack problem

This package searches for high-utility feasible packings with a configurable
genetic algorithm and benchmarks every combination of operators over many
independent runs.

Modules:
- data_models: Items, item catalog, budgets and strategy tags
- solution: Binary selection vector with cached utility and costs
- repair: Greedy utility and weighted utility repair heuristics
- mutation: Bit flip, per-gene flip and swap mutation
- crossover: Uniform, one-point and shuffle crossover
- population: Fixed-size population of solutions
- selection: Random, roulette, rank and tournament parent selection
- engine: Generational loop with elitism
- experiment: Cross-product benchmark driver and aggregate statistics
- config: YAML run configuration and validation
- reporting: Console progress and summary report
- visualization: Mean utility curves (matplotlib)
"""

__version__ = "0.1.0"
__author__ = "Knapsack GA Team"

from .data_models import (
    Item,
    ItemCatalog,
    StrategyTuple,
    MutationMethod,
    CrossoverMethod,
    RepairMethod,
    SelectionMethod,
    generate_items,
    generate_budgets,
)
from .solution import Solution
from .population import Population
from .selection import SelectionError, select_parents
from .engine import GeneticAlgorithm, RunResult, run_once
from .experiment import ExperimentResult, TupleStatistics, run_experiment, strategy_tuples
from .config import GAConfig, ConfigValidationError, load_config

__all__ = [
    "Item",
    "ItemCatalog",
    "StrategyTuple",
    "MutationMethod",
    "CrossoverMethod",
    "RepairMethod",
    "SelectionMethod",
    "generate_items",
    "generate_budgets",
    "Solution",
    "Population",
    "SelectionError",
    "select_parents",
    "GeneticAlgorithm",
    "RunResult",
    "run_once",
    "ExperimentResult",
    "TupleStatistics",
    "run_experiment",
    "strategy_tuples",
    "GAConfig",
    "ConfigValidationError",
    "load_config",
]
