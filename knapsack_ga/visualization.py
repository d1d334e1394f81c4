"""
Visualization for knapsack GA experiments.

Draws one mean-utility curve per strategy tuple over the generations, with an
optional standard-deviation band, plus a ranking of final mean utilities.
"""

from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .experiment import ExperimentResult


class ExperimentVisualizer:
    """Plots the aggregate statistics of an ExperimentResult"""

    def __init__(self, result: ExperimentResult):
        if result.tuple_count == 0:
            raise ValueError("Experiment result has no strategy tuples to plot")
        self.result = result
        self.colors = plt.cm.viridis(np.linspace(0, 1, result.tuple_count))

    def plot_mean_curves(self, ax: plt.Axes = None, show_std: bool = False, legend: bool = True):
        """Plot mean best utility per generation, one curve per tuple"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(10, 6))

        generations = np.arange(self.result.generation_count)
        mean = self.result.mean_utility
        std = self.result.std_utility

        for index, strategy in enumerate(self.result.strategies):
            ax.plot(generations, mean[index], color=self.colors[index],
                    linewidth=1.2, label=strategy.label)
            if show_std:
                ax.fill_between(generations, mean[index] - std[index], mean[index] + std[index],
                                color=self.colors[index], alpha=0.15)

        ax.set_xlabel("Generation")
        ax.set_ylabel("Utility")
        ax.set_title("Mean best utility per generation")
        ax.grid(True, alpha=0.3)

        # Legends with dozens of tuples would hide the curves
        if legend and self.result.tuple_count <= 12:
            ax.legend(fontsize=7, loc="lower right")

        return ax

    def plot_final_ranking(self, ax: plt.Axes = None, top: int = 10):
        """Horizontal bar chart of the best final mean utilities"""
        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 6))

        ranking = self.result.ranking()[:top]
        labels = [stats.strategy.label for stats in ranking]
        values = [stats.final_mean for stats in ranking]
        errors = [stats.final_std for stats in ranking]
        positions = np.arange(len(ranking))

        ax.barh(positions, values, xerr=errors, color="steelblue", alpha=0.8, capsize=3)
        ax.set_yticks(positions)
        ax.set_yticklabels(labels, fontsize=7)
        ax.invert_yaxis()
        ax.set_xlabel("Final mean utility")
        ax.set_title(f"Top {len(ranking)} strategy tuples")

        if values:
            low = min(v - e for v, e in zip(values, errors))
            high = max(v + e for v, e in zip(values, errors))
            margin = max((high - low) * 0.1, 1.0)
            ax.set_xlim(low - margin, high + margin)

        return ax

    def plot_comprehensive_analysis(self,
                                    figsize: Tuple[int, int] = (16, 7),
                                    show_std: bool = False,
                                    save_path: Optional[str] = None,
                                    show: bool = False):
        """
        Create the two-panel figure: curves on the left, ranking on the right

        Args:
            figsize: Figure size (width, height)
            show_std: Shade +/- one standard deviation around each curve
            save_path: Optional path to save the figure
            show: Open an interactive window
        """
        fig = plt.figure(figsize=figsize)
        gs = fig.add_gridspec(1, 2, width_ratios=[2, 1])

        ax_curves = fig.add_subplot(gs[0, 0])
        self.plot_mean_curves(ax_curves, show_std=show_std)

        ax_ranking = fig.add_subplot(gs[0, 1])
        self.plot_final_ranking(ax_ranking)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')

        if show:
            plt.show()
        else:
            plt.close(fig)

        return fig
