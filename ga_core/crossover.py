"""
Crossover operators.

Recombinators pick groups of individuals from the offspring population and
recombine them. The crossover variants exchange gene sub-sequences of one
randomly chosen chromosome between two individuals; MeanAlterer blends the
genes of two individuals into the first one.
"""

from abc import abstractmethod
from typing import List, Sequence

from . import random_registry
from .alterer import Alterer
from .index_stream import random_indexes, random_subset
from .population import Population
from .seq import MSeq


class Recombinator(Alterer):
    """
    Base class for alterers that combine `order` individuals.

    Every individual of the population starts a group with probability
    probability/order, so on average a fraction `probability` of the
    population takes part in a recombination. The other group members are
    distinct individuals drawn uniformly.
    """

    def __init__(self, probability: float, order: int):
        super().__init__(probability)
        if order < 2:
            raise ValueError(f"Order must be greater than one, but was {order}.")
        self.order = int(order)

    def alter(self, population: Population, generation: int) -> int:
        n = len(population)
        if n < 2:
            return 0

        order = min(self.order, n)
        rng = random_registry.get_random()
        alterations = 0
        for i in random_indexes(n, self.probability / self.order, rng):
            partners = rng.choice(n - 1, size=order - 1, replace=False)
            individuals = [i] + [int(j) + 1 if j >= i else int(j) for j in partners]
            alterations += self.recombine(population, individuals, generation)

        return alterations

    @abstractmethod
    def recombine(self, population: Population, individuals: Sequence[int], generation: int) -> int:
        """
        Recombine the individuals at the given population positions.

        Returns:
            Number of individuals replaced in the population
        """


class Crossover(Recombinator):
    """Exchanges genes of one chromosome between two individuals."""

    def __init__(self, probability: float):
        super().__init__(probability, 2)

    def recombine(self, population: Population, individuals: Sequence[int], generation: int) -> int:
        rng = random_registry.get_random()
        pt1 = population[individuals[0]]
        pt2 = population[individuals[1]]
        gt1 = pt1.genotype
        gt2 = pt2.genotype

        cindex = int(rng.integers(min(len(gt1), len(gt2))))
        chromosomes1 = gt1.to_seq().copy()
        chromosomes2 = gt2.to_seq().copy()
        genes1 = chromosomes1[cindex].to_seq().copy()
        genes2 = chromosomes2[cindex].to_seq().copy()

        self.crossover(genes1, genes2)

        chromosomes1[cindex] = chromosomes1[cindex].new_instance(genes1.to_iseq())
        chromosomes2[cindex] = chromosomes2[cindex].new_instance(genes2.to_iseq())
        population[individuals[0]] = pt1.new_instance(
            gt1.new_instance(chromosomes1.to_iseq()), generation
        )
        population[individuals[1]] = pt2.new_instance(
            gt2.new_instance(chromosomes2.to_iseq()), generation
        )
        return self.order

    @abstractmethod
    def crossover(self, that: MSeq, other: MSeq) -> int:
        """
        Exchange genes between two equally long gene sequences in place.

        Returns:
            Number of altered sequences
        """


def crossover_at(that: MSeq, other: MSeq, index: int) -> None:
    """
    Swap the suffixes [index, len) of two sequences.

    Cutting at 0 or at the sequence length leaves both sequences unchanged.

    Raises:
        IndexError: If index is outside [0, len(that)]
    """
    length = len(that)
    if index < 0 or index > length:
        raise IndexError(f"Cut index {index} out of bounds [0, {length}]")
    if 0 < index < length:
        that.swap_range(index, length, other, index)


def crossover_points(that: MSeq, other: MSeq, indexes: Sequence[int]) -> None:
    """
    Swap the segments between consecutive pairs of cut points.

    For points (a, b, c, d) the segments [a, b) and [c, d) are swapped. An
    odd trailing point swaps the rest of the sequence from there on.
    """
    for i in range(0, len(indexes) - 1, 2):
        start, end = indexes[i], indexes[i + 1]
        that.swap_range(start, end, other, start)
    if len(indexes) % 2 == 1:
        crossover_at(that, other, indexes[-1])


class MultiPointCrossover(Crossover):
    """
    n-point crossover.

    Draws k = min(length, n) distinct, sorted cut points and swaps every
    other segment between the two gene sequences.
    """

    def __init__(self, probability: float = 0.05, n: int = 2):
        super().__init__(probability)
        if n < 1:
            raise ValueError(f"n must be at least 1 but was {n}.")
        self.n = int(n)

    def crossover(self, that: MSeq, other: MSeq) -> int:
        assert len(that) == len(other), "Gene sequences must have the same length."
        length = len(that)
        k = min(length, self.n)
        points: List[int] = random_subset(length, k) if k > 0 else []
        crossover_points(that, other, points)
        return 2

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.probability, self.n))

    def __repr__(self) -> str:
        return f"{type(self).__name__}[p={self.probability:f}, n={self.n}]"


class SinglePointCrossover(MultiPointCrossover):
    """
    Classic one-point crossover.

    Cuts both gene sequences at one random index and swaps the tails.
    Consumes randomness exactly like MultiPointCrossover(p, 1).
    """

    def __init__(self, probability: float = 0.05):
        super().__init__(probability, 1)

    def __repr__(self) -> str:
        return f"{type(self).__name__}[p={self.probability:f}]"


class MeanAlterer(Recombinator):
    """
    Blend crossover for genes that support `mean`.

    Replaces the first individual of each pair by one whose genes in a
    random chromosome are the means of both parents' genes.
    """

    def __init__(self, probability: float = 0.05):
        super().__init__(probability, 2)

    def recombine(self, population: Population, individuals: Sequence[int], generation: int) -> int:
        rng = random_registry.get_random()
        pt1 = population[individuals[0]]
        pt2 = population[individuals[1]]
        gt1 = pt1.genotype
        gt2 = pt2.genotype

        cindex = int(rng.integers(len(gt1)))
        chromosomes1 = gt1.to_seq().copy()
        genes = chromosomes1[cindex].to_seq().copy()
        others = gt2[cindex].to_seq()
        for i in range(len(genes)):
            genes[i] = genes[i].mean(others[i])

        chromosomes1[cindex] = chromosomes1[cindex].new_instance(genes.to_iseq())
        population[individuals[0]] = pt1.new_instance(
            gt1.new_instance(chromosomes1.to_iseq()), generation
        )
        return 1
