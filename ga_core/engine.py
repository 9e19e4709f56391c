"""
Generational evolution engine.

GeneticAlgorithm owns the population and drives it through discrete
generations:

    1. select survivors and offspring from the current population
    2. alter the offspring
    3. combine: replace too old or invalid survivors, merge with offspring
    4. evaluate every phenotype whose fitness is not cached yet
    5. compute statistics and track the best generation so far

Every public operation holds the engine's re-entrant lock, so parameter
changes made by other threads only take effect between generations. To
change several parameters atomically, hold the lock yourself:

    with ga.lock:
        ga.alterer = MeanAlterer(0.1)
        ga.population_size = 200
"""

import logging
import math
import threading
from concurrent.futures import Executor
from typing import Any, Callable, Iterable, Optional, Tuple, Union

from .alterer import Alterer, CompositeAlterer
from .concurrency import Concurrency, SerialExecutor
from .crossover import SinglePointCrossover
from .genotype import Genotype, GenotypeFactory
from .index_stream import check_probability
from .mutation import Mutator
from .optimize import Optimize
from .phenotype import FitnessFunction, FitnessScaler, Phenotype, identity
from .population import Population
from .selector import Selector, TournamentSelector
from .statistics import Statistics, StatisticsCalculator
from .timing import Timer, TimeStatistics

logger = logging.getLogger(__name__)

DEFAULT_POPULATION_SIZE = 50
DEFAULT_MAXIMAL_PHENOTYPE_AGE = 70
DEFAULT_OFFSPRING_FRACTION = 0.6

StatisticsPredicate = Callable[[Statistics], bool]


class IllegalStateError(RuntimeError):
    """Raised when an engine operation is called in the wrong state."""
    pass


def _require(value: Any, name: str) -> Any:
    if value is None:
        raise ValueError(f"{name} must not be None")
    return value


class GeneticAlgorithm:
    """
    Evolution engine.

    Lifecycle: construct, optionally configure, call setup() exactly once,
    then call evolve() as often as needed.

    Args:
        genotype_factory: Zero-argument callable creating random genotypes
        fitness_function: Maps a genotype to a totally ordered fitness value
        fitness_scaler: Applied to the raw fitness; identity by default
        optimize: Maximize (default) or minimize the fitness
        executor: Executor for the parallel phases; runs inline by default
    """

    def __init__(
        self,
        genotype_factory: GenotypeFactory,
        fitness_function: FitnessFunction,
        fitness_scaler: FitnessScaler = identity,
        optimize: Optimize = Optimize.MAXIMUM,
        executor: Optional[Executor] = None
    ):
        self._genotype_factory = _require(genotype_factory, "Genotype factory")
        self._fitness_function = _require(fitness_function, "Fitness function")
        self._fitness_scaler = _require(fitness_scaler, "Fitness scaler")
        self._optimize = Optimize.parse(_require(optimize, "Optimization"))
        self._executor = executor if executor is not None else SerialExecutor()

        self._lock = threading.RLock()

        self._offspring_fraction = DEFAULT_OFFSPRING_FRACTION
        self._alterer: Alterer = CompositeAlterer.of(
            SinglePointCrossover(0.1),
            Mutator(0.05),
        )
        self._survivor_selector: Selector = TournamentSelector(3)
        self._offspring_selector: Selector = TournamentSelector(3)
        self._population_size = DEFAULT_POPULATION_SIZE
        self._population = Population()
        self._maximal_phenotype_age = DEFAULT_MAXIMAL_PHENOTYPE_AGE
        self._generation = 0

        self._calculator = StatisticsCalculator()
        self._statistics: Optional[Statistics] = None
        self._best_statistics: Optional[Statistics] = None
        self._killed = 0
        self._invalid = 0

        self._execution_timer = Timer("Execution time")
        self._select_timer = Timer("Select time")
        self._alter_timer = Timer("Alter time")
        self._combine_timer = Timer("Combine survivors and offspring time")
        self._statistic_timer = Timer("Statistic time")
        self._evaluate_timer = Timer("Evaluate time")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def setup(self, genotypes: Optional[Iterable[Genotype]] = None) -> None:
        """
        Create and evaluate the initial population (generation 1).

        Without arguments the population is filled up to the configured size
        with random phenotypes. With `genotypes`, exactly those genotypes form
        the initial population and the population size follows their count.

        Raises:
            IllegalStateError: If setup() was already called
        """
        with self._lock:
            if self._generation > 0:
                raise IllegalStateError(
                    "The method GeneticAlgorithm.setup() must be called only once."
                )
            if genotypes is not None:
                genotypes = list(genotypes)
                self._check_genotypes(genotypes)

            self._execution_timer.start()
            self._generation = 1
            try:
                if genotypes is not None:
                    self._population = self._phenotypes_of(genotypes, self._generation)
                    self._population_size = len(self._population)
                else:
                    self._population.fill(
                        lambda: self._new_phenotype(self._generation),
                        self._population_size - len(self._population),
                    )

                self._evaluate(self._population)

                with self._statistic_timer:
                    self._statistics = self._calculator.evaluate(
                        self._population, self._generation, self._optimize
                    )
                self._best_statistics = self._statistics
            except BaseException:
                self._generation = 0
                raise
            finally:
                self._execution_timer.stop()

            self._statistics = self._with_times(self._statistics)
            self._best_statistics = self._statistics
            logger.info(
                "Setup finished: population=%d, best fitness=%s",
                len(self._population), self._statistics.best_fitness
            )

    def evolve(self, until: Union[None, int, StatisticsPredicate] = None) -> None:
        """
        Evolve one or more generations.

        Args:
            until: None for one generation, an int for exactly that many
                generations, or a predicate over the latest Statistics that
                is checked before every generation (evolve while it holds)

        Raises:
            IllegalStateError: If setup() has not been called
        """
        if until is None:
            self._evolve()
        elif callable(until):
            while until(self.statistics):
                self._evolve()
        else:
            for _ in range(int(until)):
                self._evolve()

    def _evolve(self) -> None:
        with self._lock:
            if self._generation == 0:
                raise IllegalStateError(
                    "Call the GeneticAlgorithm.setup() method before "
                    "calling GeneticAlgorithm.evolve()."
                )

            # Work on locals and publish at the end: a failing step leaves the
            # engine as it was before the call.
            generation = self._generation + 1
            self._execution_timer.start()
            try:
                with self._select_timer:
                    survivors, offspring = self._select()

                with self._alter_timer:
                    alterations = self._alterer.alter(offspring, generation)

                with self._combine_timer:
                    population, killed, invalid = self._combine(survivors, offspring, generation)

                self._evaluate(population)

                with self._statistic_timer:
                    statistics = self._calculator.evaluate(
                        population, generation, self._optimize, killed, invalid
                    )
            finally:
                self._execution_timer.stop()

            self._generation = generation
            self._population = population
            self._killed += killed
            self._invalid += invalid

            self._statistics = self._with_times(statistics)
            if self._optimize.compare(
                self._statistics.best_fitness, self._best_statistics.best_fitness
            ) > 0:
                self._best_statistics = self._statistics

            logger.debug(
                "Generation %d: best=%s, alterations=%d, killed=%d, invalid=%d",
                generation, self._statistics.best_fitness, alterations, killed, invalid
            )

    # ------------------------------------------------------------------
    # Phases
    # ------------------------------------------------------------------

    def _select(self) -> Tuple[Population, Population]:
        number_of_offspring = self._number_of_offspring()
        number_of_survivors = self._population_size - number_of_offspring
        assert number_of_survivors + number_of_offspring == self._population_size

        population = self._population
        with Concurrency(self._executor) as c:
            survivors_future = c.execute(lambda: self._survivor_selector.select(
                population, number_of_survivors, self._optimize
            ))
            offspring = self._offspring_selector.select(
                population, number_of_offspring, self._optimize
            )
        survivors = survivors_future.result()

        assert len(survivors) == number_of_survivors
        assert len(offspring) == number_of_offspring
        return survivors, offspring

    def _combine(
        self,
        survivors: Population,
        offspring: Population,
        generation: int
    ) -> Tuple[Population, int, int]:
        assert len(survivors) + len(offspring) == self._population_size

        population = Population()
        with Concurrency(self._executor) as c:
            replaced = c.execute(lambda: self._replace_unfit(survivors, generation))
            population.extend(offspring)
        population.extend(survivors)

        killed, invalid = replaced.result()
        return population, killed, invalid

    def _replace_unfit(self, survivors: Population, generation: int) -> Tuple[int, int]:
        """Replace too old or invalid survivors in place with new random phenotypes."""
        killed = invalid = 0
        for i in range(len(survivors)):
            survivor = survivors[i]
            too_old = survivor.age(generation) > self._maximal_phenotype_age
            if too_old or not survivor.is_valid():
                survivors[i] = self._new_phenotype(generation)
                if too_old:
                    killed += 1
                else:
                    invalid += 1
        return killed, invalid

    def _evaluate(self, population: Population) -> None:
        with self._evaluate_timer:
            with Concurrency(self._executor) as c:
                c.execute_all(pt.evaluate for pt in population if not pt.is_evaluated)

    def _number_of_offspring(self) -> int:
        # Round half up
        return int(math.floor(self._offspring_fraction * self._population_size + 0.5))

    def _new_phenotype(self, generation: int) -> Phenotype:
        return Phenotype(
            self._genotype_factory(),
            self._fitness_function,
            self._fitness_scaler,
            generation,
        )

    def _phenotypes_of(self, genotypes: Iterable[Genotype], generation: int) -> Population:
        return Population(
            Phenotype(gt, self._fitness_function, self._fitness_scaler, generation)
            for gt in genotypes
        )

    @staticmethod
    def _check_genotypes(genotypes: list) -> None:
        if any(gt is None for gt in genotypes):
            raise ValueError("Genotype must not be None")
        if len(genotypes) < 1:
            raise ValueError(
                f"Genotype size must be greater than zero, but was {len(genotypes)}."
            )

    def _with_times(self, statistics: Statistics) -> Statistics:
        return statistics.with_time(TimeStatistics(
            execution=self._execution_timer.interim_time,
            selection=self._select_timer.interim_time,
            alter=self._alter_timer.interim_time,
            combine=self._combine_timer.interim_time,
            evaluation=self._evaluate_timer.interim_time,
            statistics=self._statistic_timer.interim_time,
        ))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def is_initialized(self) -> bool:
        with self._lock:
            return self._generation > 0

    @property
    def genotype_factory(self) -> GenotypeFactory:
        return self._genotype_factory

    @property
    def fitness_function(self) -> FitnessFunction:
        return self._fitness_function

    @property
    def optimize(self) -> Optimize:
        return self._optimize

    @property
    def executor(self) -> Executor:
        return self._executor

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def fitness_scaler(self) -> FitnessScaler:
        return self._fitness_scaler

    @fitness_scaler.setter
    def fitness_scaler(self, scaler: FitnessScaler) -> None:
        with self._lock:
            self._fitness_scaler = _require(scaler, "Fitness scaler")

    @property
    def offspring_fraction(self) -> float:
        return self._offspring_fraction

    @offspring_fraction.setter
    def offspring_fraction(self, fraction: float) -> None:
        with self._lock:
            self._offspring_fraction = check_probability(fraction, "Offspring fraction")

    @property
    def offspring_selector(self) -> Selector:
        return self._offspring_selector

    @offspring_selector.setter
    def offspring_selector(self, selector: Selector) -> None:
        with self._lock:
            self._offspring_selector = _require(selector, "Offspring selector")

    @property
    def survivor_selector(self) -> Selector:
        return self._survivor_selector

    @survivor_selector.setter
    def survivor_selector(self, selector: Selector) -> None:
        with self._lock:
            self._survivor_selector = _require(selector, "Survivor selector")

    def set_selectors(self, selector: Selector) -> None:
        """Use the same selector for survivors and offspring."""
        with self._lock:
            self.offspring_selector = selector
            self.survivor_selector = selector

    @property
    def alterer(self) -> Alterer:
        return self._alterer

    @alterer.setter
    def alterer(self, alterer: Alterer) -> None:
        with self._lock:
            self._alterer = _require(alterer, "Alterer")

    def set_alterers(self, *alterers: Alterer) -> None:
        self.alterer = CompositeAlterer(alterers)

    @property
    def maximal_phenotype_age(self) -> int:
        return self._maximal_phenotype_age

    @maximal_phenotype_age.setter
    def maximal_phenotype_age(self, age: int) -> None:
        if age < 1:
            raise ValueError(f"Phenotype age must be greater than one, but was {age}.")
        with self._lock:
            self._maximal_phenotype_age = int(age)

    @property
    def population_size(self) -> int:
        return self._population_size

    @population_size.setter
    def population_size(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"Population size must be greater than zero, but was {size}.")
        with self._lock:
            self._population_size = int(size)

    @property
    def population(self) -> Population:
        """Copy of the current population."""
        with self._lock:
            return self._population.copy()

    def set_population(self, phenotypes: Iterable[Phenotype]) -> None:
        """
        Replace the population with the genotypes of `phenotypes`.

        The phenotypes are re-created with this engine's fitness function and
        scaler at the current generation; the population size follows.
        """
        phenotypes = list(phenotypes)
        if any(pt is None for pt in phenotypes):
            raise ValueError("Phenotype must not be None")
        if len(phenotypes) < 1:
            raise ValueError(
                f"Population size must be greater than zero, but was {len(phenotypes)}."
            )
        with self._lock:
            self._population = Population(
                pt.with_function(self._fitness_function, self._fitness_scaler, self._generation)
                for pt in phenotypes
            )
            self._population_size = len(self._population)

    def set_genotypes(self, genotypes: Iterable[Genotype]) -> None:
        """Replace the population with phenotypes of `genotypes` at the current generation."""
        genotypes = list(genotypes)
        self._check_genotypes(genotypes)
        with self._lock:
            self._population = self._phenotypes_of(genotypes, self._generation)
            self._population_size = len(self._population)

    @property
    def statistics(self) -> Optional[Statistics]:
        """Statistics of the latest generation."""
        return self._statistics

    @property
    def best_statistics(self) -> Optional[Statistics]:
        """Statistics of the generation holding the best phenotype so far."""
        return self._best_statistics

    @property
    def best_phenotype(self) -> Optional[Phenotype]:
        stats = self._best_statistics
        return stats.best_phenotype if stats is not None else None

    @property
    def killed(self) -> int:
        """Total number of phenotypes replaced for exceeding the maximal age."""
        return self._killed

    @property
    def invalid(self) -> int:
        """Total number of phenotypes replaced for being invalid."""
        return self._invalid

    @property
    def statistics_calculator(self) -> StatisticsCalculator:
        return self._calculator

    @statistics_calculator.setter
    def statistics_calculator(self, calculator: StatisticsCalculator) -> None:
        with self._lock:
            self._calculator = _require(calculator, "Statistic calculator")

    def time_statistics(self) -> TimeStatistics:
        """Accumulated phase durations over the whole run."""
        with self._lock:
            return TimeStatistics(
                execution=self._execution_timer.time,
                selection=self._select_timer.time,
                alter=self._alter_timer.time,
                combine=self._combine_timer.time,
                evaluation=self._evaluate_timer.time,
                statistics=self._statistic_timer.time,
            )

    def __str__(self) -> str:
        with self._lock:
            best = self._statistics.best_phenotype if self._statistics is not None else None
            return f"{self._generation:4d}: (best) {best}"
