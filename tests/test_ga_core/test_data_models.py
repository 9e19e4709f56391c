"""
Tests for genes, chromosomes, genotypes, phenotypes and populations.
"""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

import numpy as np

from ga_core import random_registry
from ga_core.chromosome import (
    BitChromosome,
    CharacterChromosome,
    DoubleChromosome,
    IntegerChromosome,
    PermutationChromosome,
)
from ga_core.genes import BitGene, EnumGene, IntegerGene
from ga_core.genotype import Genotype
from ga_core.optimize import Optimize
from ga_core.phenotype import Phenotype
from ga_core.population import Population
from ga_core.problems import count_ones, first_allele
from ga_core.scaler import SQR_SCALER, ExponentialScaler


class TestGenotype(unittest.TestCase):
    """Test genetic representation and validity."""

    def test_chromosome_must_not_be_empty(self):
        with self.assertRaises(ValueError):
            BitChromosome([])

    def test_mixed_gene_types_rejected(self):
        with self.assertRaises(TypeError):
            Genotype.of(BitChromosome.of(3), DoubleChromosome.of(0.0, 1.0))

    def test_factory_creates_same_shape(self):
        """Test that the factory builds fresh genotypes of the prototype shape."""
        factory = Genotype.factory(IntegerChromosome.of(0, 9, 4), IntegerChromosome.of(0, 9, 2))
        with random_registry.scope(1):
            genotypes = [factory() for _ in range(5)]

        for genotype in genotypes:
            self.assertEqual([len(c) for c in genotype], [4, 2])
            self.assertEqual(genotype.number_of_genes(), 6)
            self.assertTrue(genotype.is_valid())

    def test_bit_factory_keeps_ones_probability(self):
        """Test that factory genotypes keep the bit density of the prototype."""
        factory = Genotype.factory(BitChromosome.of(1000, 0.15))
        with random_registry.scope(np.random.default_rng(1)):
            ones = [count_ones(factory()) for _ in range(20)]

        self.assertLess(np.mean(ones), 200)
        self.assertGreater(np.mean(ones), 100)

    def test_bit_chromosome_probability(self):
        self.assertEqual(BitChromosome.of(10, 0.25).p, 0.25)
        self.assertEqual(BitChromosome.of(10, 0.25).new_instance().p, 0.25)
        explicit = BitChromosome([BitGene(True), BitGene(False), BitGene(False), BitGene(False)])
        self.assertEqual(explicit.p, 0.25)
        with self.assertRaises(ValueError):
            BitChromosome.of(10, 1.5)

    def test_integer_gene_mean_truncates_toward_zero(self):
        def mean(a, b):
            return IntegerGene(a, -10, 10).mean(IntegerGene(b, -10, 10)).allele

        self.assertEqual(mean(-1, -2), -1)
        self.assertEqual(mean(1, 2), 1)
        self.assertEqual(mean(-3, 2), 0)
        self.assertEqual(mean(-4, -6), -5)

    def test_invalid_gene_makes_genotype_invalid(self):
        genotype = Genotype.of(IntegerChromosome([IntegerGene(5, 0, 3)]))
        self.assertFalse(genotype.is_valid())

    def test_permutation_validity(self):
        alleles = ('a', 'b', 'c')
        self.assertTrue(PermutationChromosome.of(alleles).is_valid())
        duplicate = PermutationChromosome([EnumGene(0, alleles), EnumGene(0, alleles)])
        self.assertFalse(duplicate.is_valid())

    def test_character_chromosome(self):
        chromosome = CharacterChromosome.of(8, "ab")
        self.assertEqual(len(str(chromosome)), 8)
        self.assertTrue(set(str(chromosome)) <= {'a', 'b'})
        self.assertTrue(chromosome.is_valid())

    def test_genotype_equality(self):
        chromosome = BitChromosome.of(10)
        self.assertEqual(Genotype.of(chromosome), Genotype.of(chromosome))
        self.assertEqual(hash(Genotype.of(chromosome)), hash(Genotype.of(chromosome)))


class TestPhenotype(unittest.TestCase):
    """Test lazy, memoized fitness evaluation."""

    def setUp(self):
        self.genotype = Genotype.of(BitChromosome.of(16))

    def test_evaluated_at_most_once(self):
        calls = []

        def fitness(genotype):
            calls.append(1)
            return count_ones(genotype)

        phenotype = Phenotype(self.genotype, fitness)
        self.assertFalse(phenotype.is_evaluated)
        self.assertEqual(phenotype.fitness, phenotype.fitness)
        self.assertTrue(phenotype.is_evaluated)
        self.assertEqual(len(calls), 1)

    def test_concurrent_evaluation_runs_once(self):
        """Test that racing threads trigger a single evaluation."""
        calls = []
        lock = threading.Lock()

        def fitness(genotype):
            with lock:
                calls.append(1)
            return count_ones(genotype)

        phenotype = Phenotype(self.genotype, fitness)
        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: phenotype.fitness, range(50)))

        self.assertEqual(len(set(results)), 1)
        self.assertEqual(len(calls), 1)

    def test_scaler_applied(self):
        phenotype = Phenotype(self.genotype, lambda gt: 3.0, SQR_SCALER)
        self.assertEqual(phenotype.raw_fitness, 3.0)
        self.assertEqual(phenotype.fitness, 9.0)

    def test_exponential_scaler(self):
        self.assertEqual(ExponentialScaler(2.0, 1.0, 2.0)(3.0), 49.0)

    def test_age(self):
        self.assertEqual(Phenotype(self.genotype, count_ones, generation=3).age(10), 7)

    def test_argument_validation(self):
        with self.assertRaises(ValueError):
            Phenotype(None, count_ones)
        with self.assertRaises(ValueError):
            Phenotype(self.genotype, None)
        with self.assertRaises(ValueError):
            Phenotype(self.genotype, count_ones, generation=-1)

    def test_with_function(self):
        phenotype = Phenotype(self.genotype, count_ones, generation=2)
        other = phenotype.with_function(lambda gt: -1, generation=5)
        self.assertIs(other.genotype, self.genotype)
        self.assertEqual(other.fitness, -1)
        self.assertEqual(other.generation, 5)


class TestPopulation(unittest.TestCase):
    """Test the population container."""

    def setUp(self):
        self.population = Population(
            Phenotype(Genotype.of(DoubleChromosome.of(0.0, 1.0)), first_allele)
            for _ in range(5)
        )

    def test_bounds(self):
        with self.assertRaises(IndexError):
            self.population[5]
        with self.assertRaises(IndexError):
            self.population[-1] = self.population[0]

    def test_fill(self):
        population = Population()
        population.fill(lambda: self.population[0], 3)
        self.assertEqual(len(population), 3)

    def test_sort_with(self):
        """Test best-first ordering in both directions."""
        maximum = [pt.fitness for pt in self.population.copy().sort_with(Optimize.MAXIMUM)]
        minimum = [pt.fitness for pt in self.population.copy().sort_with(Optimize.MINIMUM)]
        self.assertEqual(maximum, sorted(maximum, reverse=True))
        self.assertEqual(minimum, sorted(minimum))

    def test_copy_is_independent(self):
        copy = self.population.copy()
        copy.append(self.population[0])
        self.assertEqual(len(self.population), 5)
        self.assertEqual(len(copy), 6)

    def test_pop(self):
        """Test that pop defaults to the last phenotype and checks bounds."""
        last = self.population[4]
        first = self.population[0]
        self.assertIs(self.population.pop(), last)
        self.assertIs(self.population.pop(0), first)
        self.assertEqual(len(self.population), 3)
        with self.assertRaises(IndexError):
            self.population.pop(3)
        with self.assertRaises(IndexError):
            Population().pop()

    def test_genotypes(self):
        self.assertEqual(
            self.population.genotypes(), [pt.genotype for pt in self.population]
        )


class TestOptimize(unittest.TestCase):
    """Test optimization direction helpers."""

    def test_compare_and_best(self):
        self.assertGreater(Optimize.MAXIMUM.compare(2, 1), 0)
        self.assertLess(Optimize.MINIMUM.compare(2, 1), 0)
        self.assertEqual(Optimize.MAXIMUM.best(1, 2), 2)
        self.assertEqual(Optimize.MINIMUM.best(1, 2), 1)
        self.assertEqual(Optimize.MINIMUM.worst(1, 2), 2)

    def test_parse(self):
        self.assertIs(Optimize.parse("Minimum"), Optimize.MINIMUM)
        self.assertIs(Optimize.parse(Optimize.MAXIMUM), Optimize.MAXIMUM)
        with self.assertRaises(ValueError):
            Optimize.parse("sideways")


if __name__ == '__main__':
    unittest.main()
