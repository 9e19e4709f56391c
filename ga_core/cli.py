"""
CLI module for ga_core.

Loads a run configuration, runs the evolution and writes the run report
(per-generation statistics CSV and optional fitness plot).
"""

import csv
from pathlib import Path
from typing import Any, Dict, List, Union

from .config import create_engine_from_config, load_run_config, validate_run_config
from .engine import GeneticAlgorithm
from .statistics import Statistics
from .termination import Generation, SteadyFitness


def save_statistics_log(
    history: List[Statistics],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation statistics to a CSV file.

    Args:
        history: Statistics of consecutive generations
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Statistics log already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    if not history:
        output_path.write_text("")
        return output_path

    fieldnames = list(history[0].to_dict().keys())
    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()

        for statistics in history:
            writer.writerow(statistics.to_dict())

    return output_path


def run_evolution(ga: GeneticAlgorithm, run_config: Dict[str, Any]) -> List[Statistics]:
    """
    Set up `ga` and evolve it as configured in the 'run' section.

    Evolution stops once generation 'generations' is reached (the initial
    population counts as generation 1), after 'steady_fitness' generations
    without improvement, or at whichever comes first when both are given.

    Returns:
        Statistics of every generation, starting with the initial one
    """
    history = []

    ga.setup()
    history.append(ga.statistics)
    _print_progress(ga.statistics)

    conditions = []
    if 'generations' in run_config:
        conditions.append(Generation(run_config['generations']))
    if 'steady_fitness' in run_config:
        conditions.append(SteadyFitness(run_config['steady_fitness']))

    while all(condition(ga.statistics) for condition in conditions):
        ga.evolve()
        history.append(ga.statistics)
        _print_progress(ga.statistics)

    return history


def _print_progress(statistics: Statistics) -> None:
    mean = statistics.fitness_mean
    mean_text = f"{mean:.6f}" if mean is not None else "n/a"
    print(
        f"  Generation {statistics.generation:4d}: best={statistics.best_fitness} "
        f"mean={mean_text} killed={statistics.killed} invalid={statistics.invalid}"
    )


def run_from_config(config_path: str) -> List[Statistics]:
    """
    Load run configuration and execute the evolution.

    This is the main entry point called by ga_cli.py.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Statistics of every generation

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    print(f"Loading configuration from: {config_path}")
    config = load_run_config(config_path)

    print("Validating configuration...")
    validate_run_config(config)

    run_config = config['run']

    print("=" * 70)
    print("EVOLUTION")
    print("=" * 70)

    ga = create_engine_from_config(config)
    try:
        history = run_evolution(ga, run_config)
    finally:
        ga.executor.shutdown(wait=True)

    best = ga.best_statistics
    print()
    print(f"Best fitness: {best.best_fitness} (generation {best.generation})")
    print(f"Best genotype: {best.best_phenotype.genotype}")
    print(f"Killed: {ga.killed}, invalid: {ga.invalid}")
    print(ga.time_statistics())

    if run_config.get('output'):
        output_root = Path(run_config['output'])
        overwrite = run_config.get('overwrite', False)

        log_path = save_statistics_log(history, output_root / "statistics.csv", overwrite)
        print(f"Statistics log: {log_path}")

        if run_config.get('plot', False):
            from .visualization import plot_fitness_history
            plot_path = output_root / "fitness.png"
            if plot_path.exists() and not overwrite:
                raise FileExistsError(f"Plot already exists: {plot_path}")
            plot_fitness_history(history, plot_path)
            print(f"Fitness plot: {plot_path}")

    print("\nRun completed successfully!")
    return history
