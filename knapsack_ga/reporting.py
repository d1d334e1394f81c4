"""
Console reporting for knapsack GA experiments.

`format_*` functions build text; `print_*` functions print it.
"""

from typing import TYPE_CHECKING, List

import numpy as np

from .data_models import StrategyTuple

if TYPE_CHECKING:
    from .experiment import ExperimentResult, TupleStatistics


def print_budgets(budgets: np.ndarray) -> None:
    formatted = ", ".join(f"{budget:.2f}" for budget in budgets)
    print(f"Budgets: [{formatted}]")


def print_strategy_header(strategy: StrategyTuple) -> None:
    print("-" * 70)
    print(
        f"Mutation: {strategy.mutation.value}, Crossover: {strategy.crossover.value}, "
        f"Repair: {strategy.repair.value}, Selection: {strategy.selection.value}"
    )


def format_strategy_progress(stats: "TupleStatistics", report_interval: int = 50) -> List[str]:
    """
    Progress lines for one finished strategy tuple.

    Args:
        stats: Aggregated results of the tuple
        report_interval: Generations between reported lines

    Returns:
        One line per reported generation, then the mean compute time
    """
    lines = []
    for generation in range(0, stats.mean_utility.size, report_interval):
        lines.append(
            f"  Generation {generation:4d}: "
            f"mean={stats.mean_utility[generation]:.3f} "
            f"std={stats.std_utility[generation]:.3f}"
        )
    lines.append(f"  Mean compute time: {stats.mean_time_ms:.3f} ms")
    return lines


def print_strategy_progress(stats: "TupleStatistics", report_interval: int = 50) -> None:
    for line in format_strategy_progress(stats, report_interval):
        print(line)


def format_experiment_report(result: "ExperimentResult", top: int = 10) -> str:
    """Generate a human-readable summary of an experiment."""
    lines = []
    lines.append("=" * 70)
    lines.append("KNAPSACK GA BENCHMARK REPORT")
    lines.append("=" * 70)
    lines.append(f"Items: {result.catalog.item_count}, "
                 f"Constraints: {result.catalog.constraint_count}")
    lines.append(f"Strategy tuples: {result.tuple_count}, "
                 f"Generations: {result.generation_count}")
    lines.append(f"Seed entropy: {result.entropy}")
    lines.append("")

    ranking = result.ranking()
    lines.append(f"TOP {min(top, len(ranking))} STRATEGY TUPLES (final mean utility):")
    for position, stats in enumerate(ranking[:top], start=1):
        lines.append(
            f"  {position:2d}. {stats.strategy.label:<50} "
            f"{stats.final_mean:10.3f} +/- {stats.final_std:8.3f} "
            f"({stats.mean_time_ms:.1f} ms)"
        )

    if ranking:
        fastest = min(result.tuples, key=lambda stats: stats.mean_time_ms)
        lines.append("")
        lines.append(f"Best single run: {max(s.best_utility for s in result.tuples):.3f}")
        lines.append(f"Fastest tuple: {fastest.strategy.label} ({fastest.mean_time_ms:.1f} ms)")

    lines.append("=" * 70)
    return "\n".join(lines)


def print_experiment_report(result: "ExperimentResult", top: int = 10) -> str:
    report = format_experiment_report(result, top)
    print(report)
    return report
