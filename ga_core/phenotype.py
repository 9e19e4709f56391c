"""
Phenotype: a genotype paired with its lazily evaluated fitness.
"""

import threading
from typing import Any, Callable, Optional

from .genotype import Genotype

FitnessFunction = Callable[[Genotype], Any]
FitnessScaler = Callable[[Any], Any]


def identity(value: Any) -> Any:
    """Default fitness scaler."""
    return value


class Phenotype:
    """
    Genotype with a memoized (raw fitness, scaled fitness) pair.

    The fitness function and scaler run at most once per instance, no matter
    how many threads ask for the fitness. Re-evaluating a genotype means
    building a new phenotype.

    Attributes:
        genotype: The evaluated genotype
        generation: Generation in which this phenotype was created
    """

    __slots__ = (
        "_genotype", "_fitness_function", "_fitness_scaler", "_generation",
        "_raw_fitness", "_fitness", "_evaluated", "_lock",
    )

    def __init__(
        self,
        genotype: Genotype,
        fitness_function: FitnessFunction,
        fitness_scaler: FitnessScaler = identity,
        generation: int = 0
    ):
        if genotype is None:
            raise ValueError("Genotype must not be None")
        if fitness_function is None:
            raise ValueError("Fitness function must not be None")
        if fitness_scaler is None:
            raise ValueError("Fitness scaler must not be None")
        if generation < 0:
            raise ValueError(f"Generation must not be negative: {generation}")

        self._genotype = genotype
        self._fitness_function = fitness_function
        self._fitness_scaler = fitness_scaler
        self._generation = int(generation)
        self._raw_fitness: Any = None
        self._fitness: Any = None
        self._evaluated = False
        self._lock = threading.Lock()

    @property
    def genotype(self) -> Genotype:
        return self._genotype

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fitness_function(self) -> FitnessFunction:
        return self._fitness_function

    @property
    def fitness_scaler(self) -> FitnessScaler:
        return self._fitness_scaler

    @property
    def is_evaluated(self) -> bool:
        return self._evaluated

    def evaluate(self) -> "Phenotype":
        """Compute and cache the fitness if that has not happened yet."""
        if not self._evaluated:
            with self._lock:
                if not self._evaluated:
                    raw = self._fitness_function(self._genotype)
                    self._fitness = self._fitness_scaler(raw)
                    self._raw_fitness = raw
                    self._evaluated = True
        return self

    __call__ = evaluate

    @property
    def fitness(self) -> Any:
        """Scaled fitness value."""
        return self.evaluate()._fitness

    @property
    def raw_fitness(self) -> Any:
        return self.evaluate()._raw_fitness

    def age(self, current_generation: int) -> int:
        return current_generation - self._generation

    def is_valid(self) -> bool:
        return self._genotype.is_valid()

    def new_instance(self, genotype: Genotype, generation: int) -> "Phenotype":
        """Phenotype for another genotype, evaluated with the same functions."""
        return Phenotype(genotype, self._fitness_function, self._fitness_scaler, generation)

    def with_function(
        self,
        fitness_function: FitnessFunction,
        fitness_scaler: Optional[FitnessScaler] = None,
        generation: Optional[int] = None
    ) -> "Phenotype":
        """Same genotype, different fitness function, scaler or birth generation."""
        return Phenotype(
            self._genotype,
            fitness_function,
            fitness_scaler if fitness_scaler is not None else identity,
            self._generation if generation is None else generation,
        )

    def __lt__(self, other: "Phenotype") -> bool:
        return self.fitness < other.fitness

    def __eq__(self, other: Any) -> bool:
        if self is other:
            return True
        if not isinstance(other, Phenotype):
            return NotImplemented
        return (
            self._generation == other._generation
            and self._genotype == other._genotype
            and self.fitness == other.fitness
            and self.raw_fitness == other.raw_fitness
        )

    def __hash__(self) -> int:
        return hash((self._generation, self._genotype))

    def __repr__(self) -> str:
        fitness = self._fitness if self._evaluated else "?"
        return f"{self._genotype!r} --> {fitness}"
