"""
Ready-made fitness functions for demo runs and configuration files.

Reference them from a run configuration as e.g.
`fitness.function: "ga_core.problems:count_ones"`.
"""

from .genotype import Genotype


def count_ones(genotype: Genotype) -> int:
    """Number of set bits over all chromosomes (maximize)."""
    return sum(1 for chromosome in genotype for gene in chromosome if gene.allele)


def first_allele(genotype: Genotype) -> float:
    """Allele of the first gene (maximize or minimize a single number)."""
    return genotype.gene.allele


def sphere(genotype: Genotype) -> float:
    """Sum of squared alleles over all numeric genes (minimize, optimum 0)."""
    return float(sum(gene.allele ** 2 for chromosome in genotype for gene in chromosome))


def inversions(genotype: Genotype) -> int:
    """Number of out-of-order pairs in the first permutation chromosome (minimize)."""
    indices = [gene.allele_index for gene in genotype.chromosome]
    return sum(
        1
        for i in range(len(indices))
        for j in range(i + 1, len(indices))
        if indices[i] > indices[j]
    )
