"""
Parent selection strategies for the knapsack GA.

Every strategy returns two distinct population indices. The second parent is
always drawn with the first one's index excluded, so no strategy needs a retry
loop and every call terminates.
"""

from typing import Callable, Dict, Optional, Tuple

import numpy as np

from .data_models import SelectionMethod
from .population import Population


class SelectionError(ValueError):
    """Raised when two distinct parents cannot be selected."""
    pass


def _check_population(population: Population) -> None:
    if len(population) < 2:
        raise SelectionError(
            f"Cannot select two distinct parents from a population of {len(population)}"
        )


def _candidates(size: int, exclude: Optional[int]) -> np.ndarray:
    indices = np.arange(size)
    if exclude is None:
        return indices
    return indices[indices != exclude]


def _cumulative_pick(weights: np.ndarray, rng: np.random.Generator) -> int:
    """
    Pick a position with probability proportional to its weight.

    Scans cumulative weights against one draw in [0, total) and returns the
    first position whose cumulative weight reaches the draw. If rounding keeps
    the sum below the draw, the last position is returned.
    """
    cumulative = np.cumsum(weights)
    point = rng.random() * float(weights.sum())
    position = int(np.searchsorted(cumulative, point, side="left"))
    return min(position, len(weights) - 1)


def random_index(population: Population, rng: np.random.Generator, exclude: Optional[int] = None) -> int:
    candidates = _candidates(len(population), exclude)
    return int(candidates[rng.integers(0, candidates.size)])


def roulette_index(population: Population, rng: np.random.Generator, exclude: Optional[int] = None) -> int:
    """Select an index with probability proportional to utility."""
    candidates = _candidates(len(population), exclude)
    utilities = population.utilities()[candidates]
    return int(candidates[_cumulative_pick(utilities, rng)])


def rank_index(population: Population, rng: np.random.Generator, exclude: Optional[int] = None) -> int:
    """
    Select an index with probability proportional to its utility rank.

    The whole population is sorted by ascending utility (stable) and given
    ranks 1..N; the best solution is N times as likely as the worst.
    Excluding an index leaves the ranks of the others unchanged.
    """
    order = np.argsort(population.utilities(), kind="stable")
    ranks = np.empty(order.size, dtype=float)
    ranks[order] = np.arange(1, order.size + 1)
    candidates = _candidates(len(population), exclude)
    return int(candidates[_cumulative_pick(ranks[candidates], rng)])


def tournament_index(
    population: Population,
    rng: np.random.Generator,
    exclude: Optional[int] = None,
    tournament_size: int = 4
) -> int:
    """
    Draw tournament_size candidates with replacement and keep the best.

    The first candidate with the highest utility wins.
    """
    if tournament_size < 1:
        raise ValueError(f"tournament_size must be positive, got {tournament_size}")

    candidates = _candidates(len(population), exclude)
    drawn = candidates[rng.integers(0, candidates.size, size=tournament_size)]
    utilities = population.utilities()[drawn]
    return int(drawn[np.argmax(utilities)])


IndexSelector = Callable[..., int]

SELECTION_OPERATORS: Dict[SelectionMethod, IndexSelector] = {
    SelectionMethod.RANDOM: random_index,
    SelectionMethod.ROULETTE: roulette_index,
    SelectionMethod.RANK: rank_index,
    SelectionMethod.TOURNAMENT: tournament_index,
}


def get_selection_operator(method: SelectionMethod, tournament_size: int = 4) -> Callable[[Population, np.random.Generator], Tuple[int, int]]:
    """
    Resolve a selection tag to a parent-pair selector once per run.

    Args:
        method: Selection method tag
        tournament_size: k for tournament selection

    Returns:
        Callable taking (population, rng) and returning two distinct indices

    Raises:
        ValueError: If method is not a SelectionMethod
    """
    try:
        pick = SELECTION_OPERATORS[method]
    except KeyError:
        raise ValueError(f"Unknown selection method: {method!r}")

    if method is SelectionMethod.TOURNAMENT:
        if tournament_size < 1:
            raise ValueError(f"tournament_size must be positive, got {tournament_size}")

        def pick_one(population, rng, exclude=None):
            return tournament_index(population, rng, exclude, tournament_size)
    else:
        pick_one = pick

    def select_pair(population: Population, rng: np.random.Generator) -> Tuple[int, int]:
        _check_population(population)
        first = pick_one(population, rng)
        second = pick_one(population, rng, exclude=first)
        return first, second

    return select_pair


def select_parents(
    population: Population,
    method: SelectionMethod,
    rng: np.random.Generator,
    tournament_size: int = 4
) -> Tuple[int, int]:
    """
    Select the indices of two distinct parents.

    Args:
        population: Current population
        method: Selection method tag
        rng: Random number generator
        tournament_size: k for tournament selection

    Returns:
        Tuple (first_index, second_index) with first_index != second_index

    Raises:
        SelectionError: If the population has fewer than two solutions
    """
    return get_selection_operator(method, tournament_size)(population, rng)
