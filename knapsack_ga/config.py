"""
Configuration for the knapsack GA.

Handles run configuration loading from YAML, validation, and conversion of
strategy tags into their enumerations.
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

import yaml

from .data_models import (
    CrossoverMethod,
    MutationMethod,
    RepairMethod,
    SelectionMethod,
)


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def parse_strategy(enum_cls: Type[Enum], tag: Any, kind: str) -> Enum:
    """
    Convert a strategy tag into its enumeration member.

    Args:
        enum_cls: Target enumeration
        tag: Tag from the configuration (string value or member)
        kind: Name used in error messages ("mutation", "selection", ...)

    Returns:
        Enumeration member

    Raises:
        ConfigValidationError: If the tag is not a member of the enumeration
    """
    if isinstance(tag, enum_cls):
        return tag
    try:
        return enum_cls(tag)
    except ValueError:
        allowed = ", ".join(f"'{member.value}'" for member in enum_cls)
        raise ConfigValidationError(
            f"Unknown {kind} method: '{tag}'. Must be one of {allowed}"
        )


def _parse_strategy_list(enum_cls: Type[Enum], tags: Any, kind: str) -> list:
    if tags is None:
        return list(enum_cls)
    if isinstance(tags, (str, Enum)):
        tags = [tags]
    if not isinstance(tags, list) or not tags:
        raise ConfigValidationError(
            f"'strategies.{kind}' must be a non-empty list of tags, got: {tags!r}"
        )

    parsed = []
    for tag in tags:
        member = parse_strategy(enum_cls, tag, kind)
        if member not in parsed:
            parsed.append(member)
    return parsed


@dataclass
class GAConfig:
    """
    Parameters of a benchmark batch.

    Defaults reproduce the reference benchmark: 30 items, 10 constraints,
    populations of 20 evolved for 500 generations, 100 repetitions per
    strategy tuple.
    """
    item_count: int = 30
    constraint_count: int = 10
    population_size: int = 20
    mutation_rate: float = 0.05
    gene_flip_rate: float = 0.05
    generations: int = 500
    elitism_rate: float = 0.1
    tournament_size: int = 4
    repetitions: int = 100
    seed: Optional[int] = None
    workers: int = 1
    report_interval: int = 50
    budgets: Optional[List[float]] = None

    mutations: List[MutationMethod] = field(default_factory=lambda: list(MutationMethod))
    crossovers: List[CrossoverMethod] = field(default_factory=lambda: list(CrossoverMethod))
    repairs: List[RepairMethod] = field(default_factory=lambda: list(RepairMethod))
    selections: List[SelectionMethod] = field(default_factory=lambda: list(SelectionMethod))

    plot_path: Optional[str] = None
    show_std: bool = False

    def __post_init__(self):
        self.validate()

    @property
    def elitism_count(self) -> int:
        """Number of elites copied into every new generation."""
        # Tolerance keeps e.g. 100 * 0.29 from flooring to 28
        return math.floor(self.population_size * self.elitism_rate + 1e-9)

    @property
    def tuple_count(self) -> int:
        return (
            len(self.mutations) * len(self.crossovers)
            * len(self.repairs) * len(self.selections)
        )

    def validate(self) -> None:
        """
        Validate numeric ranges and strategy lists.

        Raises:
            ConfigValidationError: If any option is out of range
        """
        positive_ints = {
            'item_count': self.item_count,
            'constraint_count': self.constraint_count,
            'generations': self.generations,
            'tournament_size': self.tournament_size,
            'repetitions': self.repetitions,
            'workers': self.workers,
            'report_interval': self.report_interval,
        }
        for name, value in positive_ints.items():
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigValidationError(
                    f"'{name}' must be a positive integer, got: {value!r}"
                )

        if isinstance(self.population_size, bool) or not isinstance(self.population_size, int) \
                or self.population_size < 2:
            raise ConfigValidationError(
                f"'population_size' must be an integer >= 2, got: {self.population_size!r}"
            )

        for name in ('mutation_rate', 'gene_flip_rate'):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not 0.0 <= value <= 1.0:
                raise ConfigValidationError(f"'{name}' must be in [0, 1], got: {value!r}")

        if not isinstance(self.elitism_rate, (int, float)) or not 0.0 <= self.elitism_rate < 1.0:
            raise ConfigValidationError(
                f"'elitism_rate' must be in [0, 1), got: {self.elitism_rate!r}"
            )

        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)
                                      or self.seed < 0):
            raise ConfigValidationError(
                f"'seed' must be a non-negative integer or null, got: {self.seed!r}"
            )

        if self.budgets is not None:
            if not isinstance(self.budgets, (list, tuple)):
                raise ConfigValidationError(
                    f"'budgets' must be a list of numbers, got: {self.budgets!r}"
                )
            if len(self.budgets) != self.constraint_count:
                raise ConfigValidationError(
                    f"'budgets' must have {self.constraint_count} entries, got {len(self.budgets)}"
                )
            if any(not isinstance(b, (int, float)) or b < 0 for b in self.budgets):
                raise ConfigValidationError(
                    f"'budgets' must be non-negative numbers, got: {self.budgets!r}"
                )

        self.mutations = _parse_strategy_list(MutationMethod, self.mutations, 'mutation')
        self.crossovers = _parse_strategy_list(CrossoverMethod, self.crossovers, 'crossover')
        self.repairs = _parse_strategy_list(RepairMethod, self.repairs, 'repair')
        self.selections = _parse_strategy_list(SelectionMethod, self.selections, 'selection')

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "GAConfig":
        """
        Build a configuration from a parsed YAML mapping.

        Args:
            config: Run configuration dictionary

        Returns:
            Validated GAConfig

        Raises:
            ConfigValidationError: If configuration is invalid
        """
        if not isinstance(config, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        config = dict(config)
        strategies = config.pop('strategies', None) or {}
        output = config.pop('output', None) or {}

        if not isinstance(strategies, dict):
            raise ConfigValidationError("'strategies' must be a dictionary")
        if not isinstance(output, dict):
            raise ConfigValidationError("'output' must be a dictionary")

        unknown_strategies = set(strategies) - {'mutation', 'crossover', 'repair', 'selection'}
        if unknown_strategies:
            raise ConfigValidationError(
                f"Unknown strategy families: {sorted(unknown_strategies)}"
            )

        known = {
            'item_count', 'constraint_count', 'population_size', 'mutation_rate',
            'gene_flip_rate', 'generations', 'elitism_rate', 'tournament_size',
            'repetitions', 'seed', 'workers', 'report_interval', 'budgets',
        }
        unknown = set(config) - known
        if unknown:
            raise ConfigValidationError(f"Unknown configuration fields: {sorted(unknown)}")

        return cls(
            **config,
            mutations=strategies.get('mutation'),
            crossovers=strategies.get('crossover'),
            repairs=strategies.get('repair'),
            selections=strategies.get('selection'),
            plot_path=output.get('plot'),
            show_std=bool(output.get('show_std', False)),
        )

    def with_overrides(self, **overrides: Any) -> "GAConfig":
        """Return a validated copy with the non-None overrides applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes)


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    return config


def load_config(config_path: str) -> GAConfig:
    """Load and validate a GAConfig from a YAML file."""
    return GAConfig.from_dict(load_run_config(config_path))
