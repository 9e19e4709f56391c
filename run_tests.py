#!/usr/bin/env python3
"""
Test runner for the ga_core genetic algorithm
"""

import unittest
import sys
from pathlib import Path

# Add current directory to path for imports
sys.path.append(str(Path(__file__).parent))


def run_all_tests():
    """Run all test modules"""
    loader = unittest.TestLoader()
    suite = loader.discover(
        start_dir=str(Path(__file__).parent / "tests"),
        top_level_dir=str(Path(__file__).parent),
    )

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


def run_integration_test():
    """Run a basic integration test"""
    print("\n" + "=" * 50)
    print("INTEGRATION TEST")
    print("=" * 50)

    try:
        import numpy as np

        from ga_core import random_registry
        from ga_core.chromosome import BitChromosome
        from ga_core.engine import GeneticAlgorithm
        from ga_core.genotype import Genotype
        from ga_core.problems import count_ones
        from ga_core.termination import SteadyFitness

        print("Creating ones-counting engine...")
        ga = GeneticAlgorithm(Genotype.factory(BitChromosome.of(30, 0.15)), count_ones)
        ga.population_size = 100

        print("Evolving until the best fitness is steady for 25 generations...")
        with random_registry.scope(np.random.default_rng(42)):
            ga.setup()
            initial = ga.statistics.best_fitness
            ga.evolve(SteadyFitness(25))

        best = ga.best_statistics
        print(f"Generations: {ga.generation}")
        print(f"Best fitness: {initial} -> {best.best_fitness}")

        success = best.best_fitness > initial

        if success:
            print("✓ Integration test PASSED")
        else:
            print("✗ Integration test FAILED")

        return success

    except Exception as e:
        print(f"✗ Integration test FAILED: {e}")
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    print("Running ga_core Tests")
    print("=" * 60)

    # Run unit tests
    print("Running unit tests...")
    unit_success = run_all_tests()

    # Run integration test
    integration_success = run_integration_test()

    # Summary
    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)
    print(f"Unit tests: {'PASSED' if unit_success else 'FAILED'}")
    print(f"Integration test: {'PASSED' if integration_success else 'FAILED'}")

    overall_success = unit_success and integration_success
    print(f"Overall: {'PASSED' if overall_success else 'FAILED'}")

    sys.exit(0 if overall_success else 1)
