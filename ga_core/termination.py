"""
Termination predicates for GeneticAlgorithm.evolve(predicate).

A predicate receives the latest Statistics and returns True while the
evolution should go on.
"""

from typing import Any, Optional

from .statistics import Statistics


class SteadyFitness:
    """
    Continue until the best fitness has not improved for `generations`
    consecutive generations.

    Stateful: use a fresh instance per run.
    """

    def __init__(self, generations: int):
        if generations < 1:
            raise ValueError(f"Generations must be positive: {generations}")
        self.generations = int(generations)
        self._fitness: Optional[Any] = None
        self._stable_generations = 0

    def __call__(self, statistics: Statistics) -> bool:
        if self._fitness is None:
            self._fitness = statistics.best_fitness
            self._stable_generations = 1
            return True

        if statistics.optimize.compare(self._fitness, statistics.best_fitness) >= 0:
            self._stable_generations += 1
            return self._stable_generations <= self.generations

        self._fitness = statistics.best_fitness
        self._stable_generations = 1
        return True


class Generation:
    """Continue while the statistics' generation is below `generation`."""

    def __init__(self, generation: int):
        self.generation = int(generation)

    def __call__(self, statistics: Statistics) -> bool:
        return statistics.generation < self.generation
