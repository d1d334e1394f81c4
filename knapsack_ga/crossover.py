"""
Crossover operators for the knapsack GA.

Implements uniform, one-point and shuffle crossover. Each operator builds one
new child from two parents, repairs it, and never modifies the parents.
"""

from typing import Callable, Dict, List, Tuple

import numpy as np

from .data_models import CrossoverMethod
from .solution import Solution


def _make_child(father: Solution, mother: Solution, genes: np.ndarray) -> Tuple[Solution, List[str]]:
    """Wrap crossover genes into a repaired child sharing the mother's catalog."""
    if len(father) != len(mother):
        raise ValueError(
            f"Parents have different lengths: {len(father)} and {len(mother)}"
        )
    child = Solution(mother.catalog, mother.budgets, mother.repair_method, genes, repair=False)
    notes = child.repair()
    return child, notes


def uniform_crossover(
    father: Solution,
    mother: Solution,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Take each gene from the father with probability 0.5, else from the mother.

    Args:
        father: First parent
        mother: Second parent
        rng: Random number generator

    Returns:
        Tuple of (child, operation_log)
    """
    from_father = rng.random(len(father)) < 0.5
    genes = np.where(from_father, father.selection, mother.selection)

    child, notes = _make_child(father, mother, genes)
    op_log = [f"uniform: {int(from_father.sum())}/{len(father)} genes from father"]
    return child, op_log + notes


def one_point_crossover(
    father: Solution,
    mother: Solution,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Cut both parents at one random index and join a head and a tail.

    With probability 0.5 the father supplies the head [0, cut) and the mother
    the tail, otherwise the roles are reversed.

    Args:
        father: First parent
        mother: Second parent
        rng: Random number generator

    Returns:
        Tuple of (child, operation_log)
    """
    length = len(mother)
    cut = int(rng.integers(0, length))
    if rng.random() < 0.5:
        head, tail, order = father, mother, "father|mother"
    else:
        head, tail, order = mother, father, "mother|father"

    genes = np.concatenate([head.selection[:cut], tail.selection[cut:]])

    child, notes = _make_child(father, mother, genes)
    return child, [f"one_point: cut at {cut} ({order})"] + notes


def shuffle_crossover(
    father: Solution,
    mother: Solution,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Shuffle the gene indices and alternate parents along the shuffled order.

    Genes at even positions of the permutation come from the father, genes at
    odd positions from the mother.

    Args:
        father: First parent
        mother: Second parent
        rng: Random number generator

    Returns:
        Tuple of (child, operation_log)
    """
    length = len(mother)
    permutation = rng.permutation(length)

    genes = mother.selection.copy()
    from_father = permutation[0::2]
    genes[from_father] = father.selection[from_father]

    child, notes = _make_child(father, mother, genes)
    return child, [f"shuffle: {from_father.size}/{length} genes from father"] + notes


CrossoverOperator = Callable[[Solution, Solution, np.random.Generator], Tuple[Solution, List[str]]]

CROSSOVER_OPERATORS: Dict[CrossoverMethod, CrossoverOperator] = {
    CrossoverMethod.UNIFORM: uniform_crossover,
    CrossoverMethod.ONE_POINT: one_point_crossover,
    CrossoverMethod.SHUFFLE: shuffle_crossover,
}


def get_crossover_operator(method: CrossoverMethod) -> CrossoverOperator:
    """
    Resolve a crossover tag to its operator once per run.

    Raises:
        ValueError: If method is not a CrossoverMethod
    """
    try:
        return CROSSOVER_OPERATORS[method]
    except KeyError:
        raise ValueError(f"Unknown crossover method: {method!r}")


def crossover(
    father: Solution,
    mother: Solution,
    method: CrossoverMethod,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Combine two parents with the given crossover.

    Args:
        father: First parent
        mother: Second parent
        method: Crossover method tag
        rng: Random number generator

    Returns:
        Tuple of (child, operation_log)
    """
    return get_crossover_operator(method)(father, mother, rng)
