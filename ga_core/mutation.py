"""
Mutation operators.

Mutation works hierarchically: population -> genotype -> chromosome -> gene.
Each level is sampled with an independent index stream using the per-level
probability p**(1/3), where p is the alterer probability.
"""

from . import random_registry
from .alterer import Alterer
from .genotype import Genotype
from .index_stream import random_indexes
from .population import Population
from .seq import MSeq


class Mutator(Alterer):
    """
    Replaces randomly selected genes with fresh random instances.

    Only individuals that actually receive a mutation are replaced in the
    population (and re-born in the current generation).
    """

    def __init__(self, probability: float = 0.01):
        super().__init__(probability)

    def alter(self, population: Population, generation: int) -> int:
        if len(population) == 0:
            return 0

        p = self.probability ** (1.0 / 3.0)
        alterations = 0
        for i in random_indexes(len(population), p):
            phenotype = population[i]
            genotype, mutations = self._mutate_genotype(phenotype.genotype, p)
            if mutations > 0:
                population[i] = phenotype.new_instance(genotype, generation)
                alterations += mutations

        return alterations

    def _mutate_genotype(self, genotype: Genotype, p: float):
        chromosomes = genotype.to_seq().copy()
        mutations = 0
        for i in random_indexes(len(genotype), p):
            chromosome = chromosomes[i]
            genes = chromosome.to_seq().copy()
            count = self.mutate(genes, p)
            if count > 0:
                chromosomes[i] = chromosome.new_instance(genes.to_iseq())
                mutations += count

        if mutations == 0:
            return genotype, 0
        return genotype.new_instance(chromosomes.to_iseq()), mutations

    def mutate(self, genes: MSeq, p: float) -> int:
        """
        Mutate a gene sequence in place.

        Args:
            genes: Genes of one chromosome
            p: Per-gene mutation probability

        Returns:
            Number of mutated genes
        """
        alterations = 0
        for i in random_indexes(len(genes), p):
            genes[i] = genes[i].new_instance()
            alterations += 1
        return alterations


class SwapMutator(Mutator):
    """
    Swaps randomly selected genes with another gene of the same chromosome.

    Keeps the multiset of alleles intact, which makes it the mutator of choice
    for permutation chromosomes.
    """

    def __init__(self, probability: float = 0.2):
        super().__init__(probability)

    def mutate(self, genes: MSeq, p: float) -> int:
        length = len(genes)
        if length < 2:
            return 0

        rng = random_registry.get_random()
        alterations = 0
        for i in random_indexes(length, p, rng):
            genes.swap(i, int(rng.integers(length)))
            alterations += 1
        return alterations
