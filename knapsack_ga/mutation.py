"""
Mutation operators for the knapsack GA.

Implements single bit flip, per-gene flip and swap mutation. Every operator
works on a copy of the input, repairs the result and returns it together with
an operation log.
"""

from typing import Callable, Dict, List, Tuple

import numpy as np

from .data_models import MutationMethod
from .solution import Solution


def bit_flip_mutation(
    solution: Solution,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Flip exactly one uniformly chosen gene, then repair.

    Args:
        solution: Solution to mutate (left unchanged)
        rng: Random number generator

    Returns:
        Tuple of (mutated_solution, operation_log)
    """
    mutated = solution.copy()
    index = int(rng.integers(0, len(mutated)))
    mutated.selection[index] = 1 - mutated.selection[index]

    op_log = [f"bit_flip: gene {index} -> {mutated.selection[index]}"]
    op_log.extend(mutated.repair())
    return mutated, op_log


def swap_mutation(
    solution: Solution,
    rng: np.random.Generator
) -> Tuple[Solution, List[str]]:
    """
    Flip two genes holding different values, then repair.

    The first gene is chosen uniformly; the second is drawn among the genes
    holding the opposite value. A vector of all zeros or all ones has no such
    pair and is returned unchanged.

    Args:
        solution: Solution to mutate (left unchanged)
        rng: Random number generator

    Returns:
        Tuple of (mutated_solution, operation_log)
    """
    selection = solution.selection
    ones = np.flatnonzero(selection == 1)
    zeros = np.flatnonzero(selection == 0)

    if ones.size == 0 or zeros.size == 0:
        return solution.copy(), [
            f"swap: no differing gene pair ({ones.size} selected of {selection.size})"
        ]

    mutated = solution.copy()
    index1 = int(rng.integers(0, len(mutated)))
    candidates = zeros if mutated.selection[index1] == 1 else ones
    index2 = int(candidates[rng.integers(0, candidates.size)])

    mutated.selection[index1] = 1 - mutated.selection[index1]
    mutated.selection[index2] = 1 - mutated.selection[index2]

    op_log = [f"swap: genes {index1} <-> {index2}"]
    op_log.extend(mutated.repair())
    return mutated, op_log


def flip_mutation(
    solution: Solution,
    rng: np.random.Generator,
    gene_flip_rate: float
) -> Tuple[Solution, List[str]]:
    """
    Flip every gene independently with probability gene_flip_rate, then repair.

    Args:
        solution: Solution to mutate (left unchanged)
        rng: Random number generator
        gene_flip_rate: Per-gene flip probability

    Returns:
        Tuple of (mutated_solution, operation_log)
    """
    if not 0.0 <= gene_flip_rate <= 1.0:
        raise ValueError(f"gene_flip_rate must be in [0, 1], got {gene_flip_rate}")

    mutated = solution.copy()
    mask = rng.random(len(mutated)) < gene_flip_rate
    mutated.selection[mask] = 1 - mutated.selection[mask]

    op_log = [f"flip: {int(mask.sum())} gene(s) flipped at rate {gene_flip_rate}"]
    op_log.extend(mutated.repair())
    return mutated, op_log


MutationOperator = Callable[[Solution, np.random.Generator], Tuple[Solution, List[str]]]


def get_mutation_operator(method: MutationMethod, gene_flip_rate: float = 0.05) -> MutationOperator:
    """
    Resolve a mutation tag to its operator once per run.

    Args:
        method: Mutation method tag
        gene_flip_rate: Per-gene probability bound into flip mutation

    Returns:
        Callable taking (solution, rng)

    Raises:
        ValueError: If method is not a MutationMethod
    """
    operators: Dict[MutationMethod, MutationOperator] = {
        MutationMethod.BIT_FLIP: bit_flip_mutation,
        MutationMethod.SWAP: swap_mutation,
        MutationMethod.FLIP: lambda solution, rng: flip_mutation(solution, rng, gene_flip_rate),
    }
    try:
        return operators[method]
    except KeyError:
        raise ValueError(f"Unknown mutation method: {method!r}")


def mutate(
    solution: Solution,
    method: MutationMethod,
    rng: np.random.Generator,
    gene_flip_rate: float = 0.05
) -> Tuple[Solution, List[str]]:
    """
    Apply one mutation of the given kind.

    Args:
        solution: Solution to mutate (left unchanged)
        method: Mutation method tag
        rng: Random number generator
        gene_flip_rate: Per-gene probability for flip mutation

    Returns:
        Tuple of (mutated_solution, operation_log)
    """
    operator = get_mutation_operator(method, gene_flip_rate)
    return operator(solution, rng)


def mutation_statistics(original: Solution, mutated: Solution) -> Dict:
    """
    Calculate statistics about a mutation.

    Args:
        original: Solution before mutation
        mutated: Solution after mutation and repair

    Returns:
        Dictionary with mutation statistics
    """
    changed = int(np.count_nonzero(original.selection != mutated.selection))
    return {
        'genes': len(original),
        'genes_changed': changed,
        'change_rate': changed / max(len(original), 1),
        'utility_delta': mutated.utility - original.utility,
    }
