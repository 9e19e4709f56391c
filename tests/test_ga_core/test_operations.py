"""
Tests for alterers: composition, crossover, and mutation.
"""

import unittest

import numpy as np

from ga_core import random_registry
from ga_core.alterer import Alterer, CompositeAlterer
from ga_core.chromosome import BitChromosome, DoubleChromosome, PermutationChromosome
from ga_core.crossover import (
    MeanAlterer,
    MultiPointCrossover,
    SinglePointCrossover,
    crossover_at,
    crossover_points,
)
from ga_core.genes import DoubleGene
from ga_core.genotype import Genotype
from ga_core.mutation import Mutator, SwapMutator
from ga_core.phenotype import Phenotype
from ga_core.population import Population
from ga_core.problems import count_ones, first_allele, inversions
from ga_core.seq import MSeq


class CountingAlterer(Alterer):
    """Alterer that reports a fixed number of alterations."""

    def __init__(self, count):
        super().__init__(1.0)
        self.count = count
        self.calls = 0

    def alter(self, population, generation):
        self.calls += 1
        return self.count


def bit_population(size, length=20):
    return Population(
        Phenotype(Genotype.of(BitChromosome.of(length)), count_ones)
        for _ in range(size)
    )


def total_ones(population):
    return sum(count_ones(pt.genotype) for pt in population)


class TestCompositeAlterer(unittest.TestCase):
    """Test alterer validation and composition."""

    def test_probability_validated(self):
        with self.assertRaises(ValueError):
            Mutator(1.5)
        with self.assertRaises(ValueError):
            SinglePointCrossover(-0.1)

    def test_nested_composites_flattened(self):
        """Test that nested composites are spliced in order."""
        a, b, c = Mutator(0.1), SwapMutator(0.2), SinglePointCrossover(0.3)
        composite = CompositeAlterer.of(a, CompositeAlterer.of(b, c))
        self.assertEqual(composite.alterers, (a, b, c))

        appended = CompositeAlterer.of(a, b).append(c)
        self.assertEqual(appended.alterers, (a, b, c))
        self.assertEqual(CompositeAlterer.join(a, b).alterers, (a, b))

    def test_none_rejected(self):
        with self.assertRaises(ValueError):
            CompositeAlterer.of(Mutator(0.1), None)

    def test_alteration_counts_summed(self):
        first, second = CountingAlterer(2), CountingAlterer(3)
        composite = CompositeAlterer.of(first, second)
        self.assertEqual(composite.alter(bit_population(4), 1), 5)
        self.assertEqual((first.calls, second.calls), (1, 1))

    def test_equality(self):
        self.assertEqual(Mutator(0.1), Mutator(0.1))
        self.assertNotEqual(Mutator(0.1), Mutator(0.2))
        self.assertNotEqual(Mutator(0.1), SwapMutator(0.1))
        self.assertEqual(
            CompositeAlterer.of(SinglePointCrossover(0.1), Mutator(0.05)),
            CompositeAlterer.of(SinglePointCrossover(0.1), Mutator(0.05)),
        )


class TestCrossover(unittest.TestCase):
    """Test gene exchange between sequences and populations."""

    def setUp(self):
        self.a = MSeq([1, 2, 3, 4, 5])
        self.b = MSeq([6, 7, 8, 9, 10])

    def test_crossover_at(self):
        crossover_at(self.a, self.b, 2)
        self.assertEqual(self.a.to_list(), [1, 2, 8, 9, 10])
        self.assertEqual(self.b.to_list(), [6, 7, 3, 4, 5])

    def test_crossover_at_edges_is_noop(self):
        """Test that cutting at 0 or at the length changes nothing."""
        crossover_at(self.a, self.b, 0)
        crossover_at(self.a, self.b, 5)
        self.assertEqual(self.a.to_list(), [1, 2, 3, 4, 5])
        self.assertEqual(self.b.to_list(), [6, 7, 8, 9, 10])

    def test_crossover_at_out_of_bounds(self):
        with self.assertRaises(IndexError):
            crossover_at(self.a, self.b, 6)
        with self.assertRaises(IndexError):
            crossover_at(self.a, self.b, -1)

    def test_crossover_points_pairs(self):
        crossover_points(self.a, self.b, [1, 3])
        self.assertEqual(self.a.to_list(), [1, 7, 8, 4, 5])
        self.assertEqual(self.b.to_list(), [6, 2, 3, 9, 10])

    def test_crossover_points_odd_tail(self):
        """Test that an odd trailing point swaps the rest of the sequence."""
        crossover_points(self.a, self.b, [1, 3, 4])
        self.assertEqual(self.a.to_list(), [1, 7, 8, 4, 10])
        self.assertEqual(self.b.to_list(), [6, 2, 3, 9, 5])

    def test_multi_point_more_points_than_genes(self):
        """Test that n >= length cuts at every position."""
        a = MSeq([1, 2, 3, 4])
        b = MSeq([5, 6, 7, 8])
        MultiPointCrossover(1.0, n=10).crossover(a, b)
        self.assertEqual(a.to_list(), [5, 2, 7, 4])
        self.assertEqual(b.to_list(), [1, 6, 3, 8])

    def test_multi_point_keeps_position_pairs(self):
        """Test that every position keeps its pair of values."""
        with random_registry.scope(1):
            MultiPointCrossover(1.0, n=3).crossover(self.a, self.b)
        for i, (x, y) in enumerate(zip(self.a, self.b)):
            self.assertEqual({x, y}, {i + 1, i + 6})

    def test_single_point_equals_one_point_multi(self):
        """Test that both operators consume randomness identically."""
        def run(alterer):
            with random_registry.scope(np.random.default_rng(9)):
                population = bit_population(20)
                alterer.alter(population, 3)
            return population.genotypes()

        self.assertEqual(
            run(SinglePointCrossover(0.8)), run(MultiPointCrossover(0.8, n=1))
        )

    def test_multi_point_invalid_n(self):
        with self.assertRaises(ValueError):
            MultiPointCrossover(0.1, n=0)

    def test_population_crossover(self):
        """Test that crossover conserves alleles and re-births children."""
        with random_registry.scope(2):
            population = bit_population(30)
            ones = total_ones(population)
            alterations = SinglePointCrossover(1.0).alter(population, 7)

        self.assertEqual(alterations % 2, 0)
        self.assertGreater(alterations, 0)
        self.assertEqual(total_ones(population), ones)
        self.assertEqual(len(population), 30)
        reborn = sum(1 for pt in population if pt.generation == 7)
        self.assertGreater(reborn, 0)

    def test_single_individual_untouched(self):
        population = bit_population(1)
        self.assertEqual(SinglePointCrossover(1.0).alter(population, 1), 0)

    def test_mean_alterer_recombine(self):
        """Test that the first individual gets the gene means."""
        def double_phenotype(values):
            genes = [DoubleGene(v, 0.0, 10.0) for v in values]
            return Phenotype(Genotype.of(DoubleChromosome(genes)), first_allele)

        population = Population([double_phenotype([2.0, 4.0]), double_phenotype([4.0, 8.0])])
        second = population[1]

        result = MeanAlterer(1.0).recombine(population, [0, 1], 3)

        self.assertEqual(result, 1)
        alleles = [gene.allele for gene in population[0].genotype.chromosome]
        self.assertEqual(alleles, [3.0, 6.0])
        self.assertEqual(population[0].generation, 3)
        self.assertIs(population[1], second)


class TestMutation(unittest.TestCase):
    """Test gene mutation operators."""

    def test_zero_probability_changes_nothing(self):
        population = bit_population(10)
        before = [id(pt) for pt in population]
        self.assertEqual(Mutator(0.0).alter(population, 2), 0)
        self.assertEqual([id(pt) for pt in population], before)

    def test_probability_one_mutates_every_gene(self):
        """Test that p=1 touches every gene of every individual."""
        population = bit_population(5, length=8)
        with random_registry.scope(3):
            alterations = Mutator(1.0).alter(population, 4)
        self.assertEqual(alterations, 5 * 8)
        self.assertTrue(all(pt.generation == 4 for pt in population))

    def test_mutate_gene_sequence(self):
        genes = BitChromosome.of(6).to_seq().copy()
        self.assertEqual(Mutator(0.5).mutate(genes, 1.0), 6)

    def test_swap_mutator_keeps_permutation(self):
        """Test that swapping keeps a valid permutation."""
        population = Population(
            Phenotype(Genotype.of(PermutationChromosome.of_integer(10)), inversions)
            for _ in range(10)
        )
        with random_registry.scope(4):
            alterations = SwapMutator(1.0).alter(population, 2)

        self.assertEqual(alterations, 10 * 10)
        for pt in population:
            self.assertTrue(pt.is_valid())
            alleles = sorted(gene.allele for gene in pt.genotype.chromosome)
            self.assertEqual(alleles, list(range(10)))

    def test_swap_mutator_single_gene(self):
        genes = DoubleChromosome.of(0.0, 1.0).to_seq().copy()
        self.assertEqual(SwapMutator(1.0).mutate(genes, 1.0), 0)


if __name__ == '__main__':
    unittest.main()
