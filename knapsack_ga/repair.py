"""
Repair heuristics for the knapsack GA.

A feasible solution is left untouched. Otherwise both heuristics work in
two phases:

1. Removal: drop selected items in ascending rank order, stopping as soon
   as every constraint holds.
2. Addition: scan the unselected items in descending rank order and add each
   one that still fits (first fit, no backtracking).

They only differ in how items are ranked: by raw utility, or by utility per
unit of total cost. Orderings use a stable sort, so ties resolve by item index.
"""

from typing import TYPE_CHECKING, Callable, Dict, List

import numpy as np

from .data_models import ItemCatalog, RepairMethod

if TYPE_CHECKING:
    from .solution import Solution


def utility_ratios(catalog: ItemCatalog) -> np.ndarray:
    """
    Rank items by utility per unit of summed cost.

    Items whose costs sum to zero get +inf: they are free to pack, so they
    are removed last and added first.

    Args:
        catalog: Item catalog

    Returns:
        Array of ratios, one per item
    """
    cost_sums = catalog.costs.sum(axis=1)
    ratios = np.full(catalog.item_count, np.inf)
    np.divide(catalog.utilities, cost_sums, out=ratios, where=cost_sums > 0)
    return ratios


def _remove_until_feasible(solution: "Solution", removal_order: np.ndarray) -> List[str]:
    """Phase 1: drop selected items in removal_order until within budget."""
    notes = []
    if solution.check_feasible():
        return notes

    costs = solution.catalog.costs
    removed = 0
    for index in removal_order:
        if solution.selection[index] != 1:
            continue
        solution.selection[index] = 0
        solution.costs = solution.costs - costs[index]
        removed += 1
        if solution.check_feasible():
            break

    notes.append(f"removed {removed} item(s) to restore feasibility")
    return notes


def _add_while_feasible(solution: "Solution", addition_order: np.ndarray) -> List[str]:
    """Phase 2: first-fit addition of unselected items in addition_order."""
    costs = solution.catalog.costs
    added = 0
    for index in addition_order:
        if solution.selection[index] != 0:
            continue
        if solution.check_feasible(costs[index]):
            solution.selection[index] = 1
            solution.costs = solution.costs + costs[index]
            added += 1

    if added:
        return [f"added {added} item(s) that still fit"]
    return []


def _two_phase_repair(solution: "Solution", ranks: np.ndarray, name: str) -> List[str]:
    """Run removal then addition with the given item ranking."""
    solution.calculate_costs()
    if solution.check_feasible():
        solution.calculate_utility()
        return [f"{name}: already feasible"]

    ascending = np.argsort(ranks, kind="stable")
    descending = np.argsort(-ranks, kind="stable")

    notes = _remove_until_feasible(solution, ascending)
    notes.extend(_add_while_feasible(solution, descending))

    solution.calculate_utility()
    solution.calculate_costs()

    # Incremental cost updates can overshoot a budget by a rounding error
    while not solution.check_feasible():
        notes.extend(_remove_until_feasible(solution, ascending))
        solution.calculate_utility()
        solution.calculate_costs()

    return [f"{name}: {note}" for note in notes]


def repair_greedy_utility(solution: "Solution") -> List[str]:
    """
    Repair by raw utility: remove the lowest-utility items first, then add
    the highest-utility items that fit.

    Args:
        solution: Solution to repair in place

    Returns:
        Repair notes
    """
    return _two_phase_repair(solution, solution.catalog.utilities, "repair_greedy_utility")


def repair_weighted_utility(solution: "Solution") -> List[str]:
    """
    Repair by utility/cost ratio: remove the lowest-ratio items first, then
    add the highest-ratio items that fit. Tends to give denser packings when
    several constraints bind at once.

    Args:
        solution: Solution to repair in place

    Returns:
        Repair notes
    """
    return _two_phase_repair(
        solution, utility_ratios(solution.catalog), "repair_weighted_utility"
    )


REPAIR_OPERATORS: Dict[RepairMethod, Callable[["Solution"], List[str]]] = {
    RepairMethod.GREEDY_UTILITY: repair_greedy_utility,
    RepairMethod.WEIGHTED_UTILITY: repair_weighted_utility,
}


def repair_solution(solution: "Solution") -> List[str]:
    """
    Repair a solution in place with the heuristic it carries.

    Args:
        solution: Solution to repair

    Returns:
        Repair notes

    Raises:
        ValueError: If the solution's repair method has no operator
    """
    try:
        operator = REPAIR_OPERATORS[solution.repair_method]
    except KeyError:
        raise ValueError(f"Unknown repair method: {solution.repair_method!r}")

    return operator(solution)
