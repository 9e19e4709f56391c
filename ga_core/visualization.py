"""
Plotting of evolution progress.

Renders the best, mean and worst fitness per generation of a run to an
image file with matplotlib.
"""

from pathlib import Path
from typing import Sequence, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .statistics import Statistics


def plot_fitness_history(
    history: Sequence[Statistics],
    output_path: Union[str, Path],
    figsize: Tuple[int, int] = (10, 6),
    title: str = "Fitness per generation"
) -> Path:
    """
    Plot best/mean/worst fitness of every generation in `history`.

    Generations with non-numeric fitness contribute no mean value.

    Args:
        history: Statistics of consecutive generations
        output_path: Image file to write (format follows the suffix)
        figsize: Figure size (width, height)
        title: Plot title

    Returns:
        Path to saved image

    Raises:
        ValueError: If history is empty
    """
    if not history:
        raise ValueError("Cannot plot an empty statistics history")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations = [s.generation for s in history]
    best = [s.best_fitness for s in history]
    worst = [s.worst_fitness for s in history]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(generations, best, color='green', linewidth=2, label='Best')
    ax.plot(generations, worst, color='red', linewidth=1, alpha=0.6, label='Worst')

    mean_points = [(s.generation, s.fitness_mean) for s in history if s.fitness_mean is not None]
    if mean_points:
        xs, ys = zip(*mean_points)
        ax.plot(xs, ys, color='blue', linestyle='--', linewidth=1, label='Mean')

    ax.set_xlabel('Generation')
    ax.set_ylabel('Fitness')
    ax.set_title(f"{title} ({history[-1].optimize.value})")
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    fig.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close(fig)

    return output_path
