"""
Per-generation population statistics.
"""

import numbers
from dataclasses import dataclass, field, replace
from typing import Any, Optional

import numpy as np

from .optimize import Optimize
from .phenotype import Phenotype
from .population import Population
from .timing import TimeStatistics


@dataclass(frozen=True)
class Statistics:
    """
    Aggregate metrics of one generation.

    Attributes:
        generation: Generation the statistics describe
        optimize: Optimization direction used to rank phenotypes
        best_phenotype: Best phenotype of the population
        worst_phenotype: Worst phenotype of the population
        samples: Population size
        age_mean: Mean phenotype age
        age_variance: Sample variance of the phenotype age
        fitness_mean: Mean fitness (None for non-numeric fitness)
        fitness_variance: Sample variance of the fitness (None for non-numeric fitness)
        killed: Phenotypes replaced this generation for exceeding the maximal age
        invalid: Phenotypes replaced this generation for being invalid
        time: Phase durations of the generation
    """
    generation: int
    optimize: Optimize
    best_phenotype: Optional[Phenotype]
    worst_phenotype: Optional[Phenotype]
    samples: int
    age_mean: float
    age_variance: float
    fitness_mean: Optional[float] = None
    fitness_variance: Optional[float] = None
    killed: int = 0
    invalid: int = 0
    time: TimeStatistics = field(default_factory=TimeStatistics)

    @property
    def best_fitness(self) -> Any:
        return self.best_phenotype.fitness if self.best_phenotype is not None else None

    @property
    def worst_fitness(self) -> Any:
        return self.worst_phenotype.fitness if self.worst_phenotype is not None else None

    def with_time(self, time: TimeStatistics) -> "Statistics":
        return replace(self, time=time)

    def to_dict(self) -> dict:
        """Flat, CSV-friendly representation."""
        return {
            "generation": self.generation,
            "optimize": self.optimize.value,
            "samples": self.samples,
            "best_fitness": self.best_fitness,
            "worst_fitness": self.worst_fitness,
            "fitness_mean": self.fitness_mean,
            "fitness_variance": self.fitness_variance,
            "age_mean": self.age_mean,
            "age_variance": self.age_variance,
            "killed": self.killed,
            "invalid": self.invalid,
            "execution_time": self.time.execution,
            "evaluation_time": self.time.evaluation,
        }

    def __str__(self) -> str:
        return "\n".join([
            "+---------------------------------------------------------------------------+",
            "|  Population statistics                                                    |",
            "+---------------------------------------------------------------------------+",
            f"|                     Age mean: {self.age_mean:>43.8f} |",
            f"|                 Age variance: {self.age_variance:>43.8f} |",
            f"|                      Samples: {self.samples:>43d} |",
            f"|                 Best fitness: {str(self.best_fitness):>43s} |",
            f"|                Worst fitness: {str(self.worst_fitness):>43s} |",
            "+---------------------------------------------------------------------------+",
        ])


def _sample_variance(values: np.ndarray) -> float:
    if len(values) < 2:
        return 0.0
    return float(np.var(values, ddof=1))


class StatisticsCalculator:
    """Builds a Statistics object from an evaluated population."""

    def evaluate(
        self,
        population: Population,
        generation: int,
        optimize: Optimize,
        killed: int = 0,
        invalid: int = 0
    ) -> Statistics:
        """
        Compute the statistics of `population` at `generation`.

        Args:
            population: Population whose fitness values are already evaluated
            generation: Current generation (used for the phenotype ages)
            optimize: Direction that decides best and worst
            killed: Age-expired replacements in this generation
            invalid: Invalid replacements in this generation

        Returns:
            Statistics for the generation
        """
        if len(population) == 0:
            return Statistics(
                generation=generation, optimize=optimize, best_phenotype=None,
                worst_phenotype=None, samples=0, age_mean=0.0, age_variance=0.0,
                killed=killed, invalid=invalid,
            )

        best = worst = population[0]
        for phenotype in population:
            best = optimize.best(best, phenotype, key=lambda pt: pt.fitness)
            worst = optimize.worst(worst, phenotype, key=lambda pt: pt.fitness)

        ages = np.array([pt.age(generation) for pt in population], dtype=np.float64)

        fitness_mean = fitness_variance = None
        fitness = [pt.fitness for pt in population]
        if all(isinstance(f, numbers.Real) for f in fitness):
            values = np.array(fitness, dtype=np.float64)
            fitness_mean = float(values.mean())
            fitness_variance = _sample_variance(values)

        return Statistics(
            generation=generation,
            optimize=optimize,
            best_phenotype=best,
            worst_phenotype=worst,
            samples=len(population),
            age_mean=float(ages.mean()),
            age_variance=_sample_variance(ages),
            fitness_mean=fitness_mean,
            fitness_variance=fitness_variance,
            killed=killed,
            invalid=invalid,
        )
