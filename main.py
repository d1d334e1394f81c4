#!/usr/bin/env python3
"""
Knapsack GA Benchmark

Main entry point for benchmarking genetic algorithm strategies on a random
multi-dimensional knapsack instance. Every combination of mutation, crossover,
repair and selection method is run many times; the mean and standard
deviation of the best utility per generation are reported and plotted.
"""

import sys
import argparse
import time
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))

from knapsack_ga.config import GAConfig, load_config
from knapsack_ga.experiment import run_experiment
from knapsack_ga.reporting import print_experiment_report


def run_benchmark(config: GAConfig, quiet: bool = False):
    """Run the full benchmark and print the summary report"""
    if not quiet:
        print("=" * 70)
        print("KNAPSACK GA BENCHMARK")
        print("=" * 70)
        print(f"Items: {config.item_count}, Constraints: {config.constraint_count}")
        print(f"Population: {config.population_size}, Generations: {config.generations}, "
              f"Repetitions: {config.repetitions}")
        print(f"Strategy tuples: {config.tuple_count}, Workers: {config.workers}")
        print()

    start_time = time.time()
    result = run_experiment(config, verbose=not quiet)
    elapsed_time = time.time() - start_time

    print()
    print_experiment_report(result)
    print(f"Benchmark completed in {elapsed_time:.1f} seconds")

    if config.plot_path:
        print(f"\nGenerating visualization plot...")
        # Set matplotlib to non-interactive backend to avoid display issues
        import matplotlib
        matplotlib.use('Agg')
        from knapsack_ga.visualization import ExperimentVisualizer

        plot_path = Path(config.plot_path)
        plot_path.parent.mkdir(parents=True, exist_ok=True)
        ExperimentVisualizer(result).plot_comprehensive_analysis(
            show_std=config.show_std,
            save_path=str(plot_path)
        )
        print(f"  Plot: {plot_path}")

    return result


def main():
    """Main entry point with command-line argument parsing"""
    parser = argparse.ArgumentParser(
        description="Knapsack GA - strategy benchmark",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 main.py                               # Benchmark with config.yaml
  python3 main.py --seed 42                     # Reproducible run
  python3 main.py --repetitions 10 --generations 100
  python3 main.py --workers 4                   # Parallel repetitions
  python3 main.py --plot output/curves.png      # Save the utility curves
  python3 main.py --config custom.yaml          # Custom config file
        """
    )

    parser.add_argument(
        '--config', '-c',
        default='config.yaml',
        help='Configuration file path (default: config.yaml)'
    )

    parser.add_argument('--seed', '-s', type=int, metavar='N', help='Master random seed')
    parser.add_argument('--repetitions', '-r', type=int, metavar='N', help='Runs per strategy tuple')
    parser.add_argument('--generations', '-g', type=int, metavar='N', help='Generations per run')
    parser.add_argument('--workers', '-w', type=int, metavar='N', help='Worker processes')

    parser.add_argument(
        '--plot', '-p',
        type=str,
        metavar='PATH',
        help='Save the mean utility chart to PATH (PNG)'
    )

    parser.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only print the final report'
    )

    args = parser.parse_args()

    try:
        if Path(args.config).exists():
            config = load_config(args.config)
        elif args.config == 'config.yaml':
            config = GAConfig()
        else:
            raise FileNotFoundError(f"Configuration file not found: {args.config}")

        config = config.with_overrides(
            seed=args.seed,
            repetitions=args.repetitions,
            generations=args.generations,
            workers=args.workers,
            plot_path=args.plot,
        )
        run_benchmark(config, quiet=args.quiet)

    except KeyboardInterrupt:
        print("\nInterrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
