"""
ga_core: Generational Genetic Algorithm Engine

This package provides a configurable genetic algorithm: a population of
genotypes is evolved through selection, recombination and mutation, and
evaluated against a user supplied fitness function.

Key Features:
- Pluggable selectors (probability based, tournament, truncation)
- Pluggable alterers (crossover, mutation, composites)
- Thread-safe engine with parallel selection, combination and evaluation
- Scoped, reproducible random number generation

Modules:
- seq: Immutable and copy-on-write mutable gene sequences
- index_stream: Random index streams and subsets
- random_registry: Current random generator lookup and scoping
- genes, chromosome, genotype: Genetic representation
- phenotype, population: Fitness-evaluated individuals and their container
- optimize: Optimization direction
- selector: Selection strategies
- alterer, crossover, mutation: Variation operators
- concurrency: Task fan-out over an executor
- statistics, timing: Per-generation statistics and phase timers
- termination, scaler: Evolution predicates and fitness scalers
- engine: The GeneticAlgorithm
- config, cli, visualization, problems: YAML runs, reports and demo problems
"""

__version__ = "0.1.0"

from .alterer import Alterer, CompositeAlterer
from .chromosome import (
    BitChromosome, CharacterChromosome, Chromosome, DoubleChromosome,
    IntegerChromosome, PermutationChromosome,
)
from .crossover import MeanAlterer, MultiPointCrossover, SinglePointCrossover
from .engine import GeneticAlgorithm, IllegalStateError
from .genotype import Genotype
from .mutation import Mutator, SwapMutator
from .optimize import Optimize
from .phenotype import Phenotype
from .population import Population
from .selector import (
    BoltzmannSelector, ExponentialRankSelector, LinearRankSelector,
    RouletteWheelSelector, StochasticUniversalSelector, TournamentSelector,
    TruncationSelector,
)
from .statistics import Statistics

__all__ = [
    "Alterer",
    "CompositeAlterer",
    "BitChromosome",
    "CharacterChromosome",
    "Chromosome",
    "DoubleChromosome",
    "IntegerChromosome",
    "PermutationChromosome",
    "MeanAlterer",
    "MultiPointCrossover",
    "SinglePointCrossover",
    "GeneticAlgorithm",
    "IllegalStateError",
    "Genotype",
    "Mutator",
    "SwapMutator",
    "Optimize",
    "Phenotype",
    "Population",
    "BoltzmannSelector",
    "ExponentialRankSelector",
    "LinearRankSelector",
    "RouletteWheelSelector",
    "StochasticUniversalSelector",
    "TournamentSelector",
    "TruncationSelector",
    "Statistics",
]
