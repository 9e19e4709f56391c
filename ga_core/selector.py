"""
Selectors.

A selector draws `count` phenotypes (with replacement) from a population.
ProbabilitySelector turns the population into a probability distribution
and samples it by binary search over the cumulative distribution; concrete
subclasses only shape the distribution.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from . import random_registry
from .optimize import Optimize
from .population import Population

MAX_ULP_DISTANCE = 10**10

_INT64_MIN = -(2**63)


class Selector(ABC):
    """Draws phenotypes from a population."""

    @abstractmethod
    def select(self, population: Population, count: int, optimize: Optimize) -> Population:
        """
        Select `count` phenotypes from `population`.

        Args:
            population: Population to select from (left unchanged)
            count: Number of phenotypes to select
            optimize: Whether higher or lower fitness is better

        Returns:
            New population of exactly `count` phenotypes

        Raises:
            ValueError: If count is negative, or positive for an empty population
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def _check_count(population: Population, count: int) -> None:
    if count < 0:
        raise ValueError(
            f"Selection count must be greater or equal then zero, but was {count}."
        )
    if count > 0 and len(population) == 0:
        raise ValueError(f"Can't select {count} phenotypes from an empty population.")


def ulp_position(value: float) -> int:
    """
    Ordinal position of a double among all doubles.

    Adjacent doubles have adjacent positions, so the difference of two
    positions counts the representable values between them.
    """
    bits = int(np.array(value, dtype=np.float64).view(np.int64))
    if bits < 0:
        bits = _INT64_MIN - bits
    return bits


def ulp_distance(a: float, b: float) -> int:
    return ulp_position(a) - ulp_position(b)


def sum_to_one(probabilities: Sequence[float]) -> bool:
    """True if the probabilities sum to one within MAX_ULP_DISTANCE ulps."""
    total = float(np.sum(probabilities))
    return abs(ulp_distance(total, 1.0)) < MAX_ULP_DISTANCE


def incremental(values: np.ndarray) -> np.ndarray:
    """In-place prefix sum."""
    np.cumsum(values, out=values)
    return values


def index_of(incremental_values: Sequence[float], value: float) -> int:
    """
    Binary search on a cumulative probability array.

    Returns the smallest index i with incremental_values[i] >= value and
    (i == 0 or incremental_values[i - 1] < value). Falls back to the last
    index when no such index exists.
    """
    imin = 0
    imax = len(incremental_values)
    while imax > imin:
        imid = (imin + imax) >> 1
        if imid == 0:
            return imid
        elif incremental_values[imid] >= value and incremental_values[imid - 1] < value:
            return imid
        elif incremental_values[imid] <= value:
            imin = imid + 1
        else:
            imax = imid

    return len(incremental_values) - 1


def fitness_array(population: Population) -> np.ndarray:
    return np.array([float(pt.fitness) for pt in population], dtype=np.float64)


class ProbabilitySelector(Selector):
    """
    Roulette-style selection over a subclass-defined distribution.

    Subclasses implement `probabilities`, always assuming that higher fitness
    is better. For Optimize.MINIMUM the base class maps every weight w to
    1 - w. The result is intentionally not renormalized; the relative order
    of the weights is what flips.
    """

    def select(self, population: Population, count: int, optimize: Optimize) -> Population:
        _check_count(population, count)
        selection = Population()
        if count == 0:
            return selection

        probabilities = self.probabilities_for(population, count, optimize)
        incremental(probabilities)

        rng = random_registry.get_random()
        for value in rng.random(count):
            selection.append(population[index_of(probabilities, value)])

        assert len(selection) == count
        return selection

    def probabilities_for(self, population: Population, count: int, optimize: Optimize) -> np.ndarray:
        """
        Subclass probabilities, checked and inverted for minimization.

        Returns:
            Fresh float64 array of length len(population)
        """
        probabilities = np.array(self.probabilities(population, count), dtype=np.float64)
        assert len(probabilities) == len(population), \
            "Population size and probability length are not equal."
        assert sum_to_one(probabilities), "Probabilities doesn't sum to one."
        assert np.all(probabilities >= 0.0), "Probabilities must not be negative."

        if optimize is Optimize.MINIMUM:
            probabilities = 1.0 - probabilities
        return probabilities

    @abstractmethod
    def probabilities(self, population: Population, count: int) -> np.ndarray:
        """
        Return one non-negative weight per phenotype, summing to one.

        The population is not sorted. Subclasses that need a sorted order
        must sort a copy and map the weights back to the original positions.

        Args:
            population: The unsorted population
            count: Number of phenotypes that will be selected; unused by most
                implementations
        """


class RouletteWheelSelector(ProbabilitySelector):
    """Fitness-proportional selection; negative fitness shifts the wheel."""

    def probabilities(self, population: Population, count: int) -> np.ndarray:
        fitness = fitness_array(population)
        worst = min(float(fitness.min()), 0.0)
        total = float(fitness.sum()) - worst * len(fitness)

        if total == 0.0:
            return np.full(len(fitness), 1.0 / len(fitness))
        return (fitness - worst) / total


class StochasticUniversalSelector(RouletteWheelSelector):
    """
    Roulette wheel sampled with `count` evenly spaced pointers.

    Gives every phenotype a number of copies close to its expected value.
    Works on a best-first sorted copy of the population.
    """

    def select(self, population: Population, count: int, optimize: Optimize) -> Population:
        _check_count(population, count)
        selection = Population()
        if count == 0:
            return selection

        ordered = population.copy().sort_with(optimize)
        probabilities = self.probabilities_for(ordered, count, optimize)
        cumulative = np.cumsum(probabilities)
        # Inverted (minimizing) weights no longer sum to one; scale the
        # pointers to the actual wheel length.
        if cumulative[-1] > 0.0:
            cumulative /= cumulative[-1]

        delta = 1.0 / count
        start = random_registry.get_random().random() * delta
        j = 0
        last = len(ordered) - 1
        for i in range(count):
            pointer = start + i * delta
            while j < last and cumulative[j] < pointer:
                j += 1
            selection.append(ordered[j])

        return selection


class LinearRankSelector(ProbabilitySelector):
    """
    Linear ranking: the worst phenotype gets weight nminus/N, the best
    nplus/N with nplus = 2 - nminus.
    """

    def __init__(self, nminus: float = 0.5):
        if not 0.0 <= nminus <= 1.0:
            raise ValueError(f"nminus is not in range [0, 1]: {nminus}")
        self.nminus = float(nminus)
        self.nplus = 2.0 - self.nminus

    def probabilities(self, population: Population, count: int) -> np.ndarray:
        n = len(population)
        if n == 1:
            return np.ones(1)

        # Rank 0 is the worst phenotype
        order = np.argsort(fitness_array(population), kind="stable")
        ranks = np.empty(n, dtype=np.float64)
        ranks[order] = np.arange(n, dtype=np.float64)
        return (self.nminus + (self.nplus - self.nminus) * ranks / (n - 1)) / n

    def __repr__(self) -> str:
        return f"{type(self).__name__}(nminus={self.nminus})"


class ExponentialRankSelector(ProbabilitySelector):
    """
    Exponential ranking: the phenotype at rank i (0 = best) gets weight
    c**i * (c - 1) / (c**N - 1).
    """

    def __init__(self, c: float = 0.975):
        if not 0.0 <= c < 1.0:
            raise ValueError(f"Selective pressure c must be in range [0, 1): {c}")
        self.c = float(c)

    def probabilities(self, population: Population, count: int) -> np.ndarray:
        n = len(population)
        # Rank 0 is the best phenotype
        order = np.argsort(-fitness_array(population), kind="stable")
        ranks = np.empty(n, dtype=np.float64)
        ranks[order] = np.arange(n, dtype=np.float64)
        b = (self.c - 1.0) / (self.c**n - 1.0)
        return self.c**ranks * b

    def __repr__(self) -> str:
        return f"{type(self).__name__}(c={self.c})"


class BoltzmannSelector(ProbabilitySelector):
    """
    Boltzmann selection: weights proportional to exp(b * f') where f' is the
    fitness normalized to [0, 1]. Larger b means stronger selection pressure.
    """

    def __init__(self, b: float = 0.2):
        self.b = float(b)

    def probabilities(self, population: Population, count: int) -> np.ndarray:
        fitness = fitness_array(population)
        low, high = float(fitness.min()), float(fitness.max())
        if high == low:
            return np.full(len(fitness), 1.0 / len(fitness))

        weights = np.exp(self.b * (fitness - low) / (high - low))
        return weights / weights.sum()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(b={self.b})"


class TournamentSelector(Selector):
    """Best of `sample_size` uniformly drawn phenotypes wins each slot."""

    def __init__(self, sample_size: int = 2):
        if sample_size < 2:
            raise ValueError(f"Sample size must be greater than one, but was {sample_size}")
        self.sample_size = int(sample_size)

    def select(self, population: Population, count: int, optimize: Optimize) -> Population:
        _check_count(population, count)
        selection = Population()
        if count == 0:
            return selection

        rng = random_registry.get_random()
        n = len(population)
        for _ in range(count):
            winner = population[int(rng.integers(n))]
            for _ in range(self.sample_size - 1):
                challenger = population[int(rng.integers(n))]
                winner = optimize.best(winner, challenger, key=lambda pt: pt.fitness)
            selection.append(winner)

        return selection

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sample_size={self.sample_size})"


class TruncationSelector(Selector):
    """Deterministically takes the best phenotypes, cycling if count > size."""

    def select(self, population: Population, count: int, optimize: Optimize) -> Population:
        _check_count(population, count)
        selection = Population()
        if count == 0:
            return selection

        ordered = population.copy().sort_with(optimize)
        for i in range(count):
            selection.append(ordered[i % len(ordered)])
        return selection
