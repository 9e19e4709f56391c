"""
Chromosomes: fixed-length, immutable gene sequences of one gene type.
"""

from typing import Any, Iterable, Optional, Sequence, Union

from . import random_registry
from .genes import (
    DEFAULT_CHARACTERS,
    BitGene,
    CharacterGene,
    DoubleGene,
    EnumGene,
    IntegerGene,
)
from .index_stream import check_probability
from .seq import ISeq


class Chromosome:
    """
    Immutable sequence of genes.

    Subclasses only add factories and, where needed, extra validity rules.
    `new_instance()` without arguments creates a random chromosome of the
    same shape; with genes it wraps them in a chromosome of the same kind.
    """

    __slots__ = ("_genes", "_valid")

    def __init__(self, genes: Union[ISeq, Iterable[Any]]):
        self._genes = genes if isinstance(genes, ISeq) else ISeq(genes)
        if len(self._genes) == 0:
            raise ValueError("Chromosome must contain at least one gene")
        self._valid: Optional[bool] = None

    @property
    def genes(self) -> ISeq:
        return self._genes

    @property
    def gene(self) -> Any:
        """First gene of the chromosome."""
        return self._genes[0]

    @property
    def gene_type(self) -> type:
        return type(self._genes[0])

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index: int) -> Any:
        return self._genes[index]

    def __iter__(self):
        return iter(self._genes)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Chromosome):
            return NotImplemented
        return type(self) is type(other) and self._genes == other._genes

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._genes))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({'|'.join(str(g) for g in self._genes)})"

    def is_valid(self) -> bool:
        if self._valid is None:
            self._valid = self._check_valid()
        return self._valid

    def _check_valid(self) -> bool:
        return all(gene.is_valid() for gene in self._genes)

    def to_seq(self) -> ISeq:
        return self._genes

    def new_instance(self, genes: Optional[Union[ISeq, Iterable[Any]]] = None) -> "Chromosome":
        if genes is None:
            genes = ISeq(gene.new_instance() for gene in self._genes)
        return type(self)(genes)


class BitChromosome(Chromosome):
    """
    Bit string chromosome.

    Remembers the ones probability `p` it was created with, so random new
    instances keep the same bit density. Chromosomes built from explicit
    genes use their own ones ratio as `p`.
    """

    __slots__ = ("_p",)

    def __init__(self, genes: Union[ISeq, Iterable[BitGene]], p: Optional[float] = None):
        super().__init__(genes)
        if p is None:
            p = self.bit_count() / len(self._genes)
        self._p = check_probability(p, "Ones probability")

    @classmethod
    def of(cls, length: int, p: float = 0.5) -> "BitChromosome":
        """
        Create a random bit chromosome.

        Args:
            length: Number of bits
            p: Probability of a bit being set
        """
        if length < 1:
            raise ValueError(f"Length must be positive: {length}")
        p = check_probability(p, "Ones probability")
        rng = random_registry.get_random()
        return cls((BitGene(bool(b)) for b in rng.random(length) < p), p)

    @property
    def p(self) -> float:
        return self._p

    def new_instance(self, genes: Optional[Union[ISeq, Iterable[BitGene]]] = None) -> "BitChromosome":
        if genes is None:
            return type(self).of(len(self._genes), self._p)
        return type(self)(genes)

    def bit_count(self) -> int:
        return sum(1 for gene in self._genes if gene.allele)

    def __str__(self) -> str:
        return "".join(str(gene) for gene in self._genes)


class CharacterChromosome(Chromosome):
    __slots__ = ()

    @classmethod
    def of(cls, length: int, valid_characters: str = DEFAULT_CHARACTERS) -> "CharacterChromosome":
        if length < 1:
            raise ValueError(f"Length must be positive: {length}")
        return cls(CharacterGene.of(valid_characters) for _ in range(length))

    def __str__(self) -> str:
        return "".join(gene.allele for gene in self._genes)


class IntegerChromosome(Chromosome):
    __slots__ = ()

    @classmethod
    def of(cls, min: int, max: int, length: int = 1) -> "IntegerChromosome":
        if length < 1:
            raise ValueError(f"Length must be positive: {length}")
        return cls(IntegerGene.of(min, max) for _ in range(length))


class DoubleChromosome(Chromosome):
    __slots__ = ()

    @classmethod
    def of(cls, min: float, max: float, length: int = 1) -> "DoubleChromosome":
        if length < 1:
            raise ValueError(f"Length must be positive: {length}")
        return cls(DoubleGene.of(min, max) for _ in range(length))


class PermutationChromosome(Chromosome):
    """Chromosome whose genes are a permutation of the valid alleles."""

    __slots__ = ()

    @classmethod
    def of(cls, valid_alleles: Sequence[Any]) -> "PermutationChromosome":
        alleles = tuple(valid_alleles)
        if not alleles:
            raise ValueError("Valid alleles must not be empty")
        order = random_registry.get_random().permutation(len(alleles))
        return cls(EnumGene(int(i), alleles) for i in order)

    @classmethod
    def of_integer(cls, length: int) -> "PermutationChromosome":
        return cls.of(range(length))

    def _check_valid(self) -> bool:
        indices = [gene.allele_index for gene in self._genes]
        return super()._check_valid() and len(set(indices)) == len(indices)

    def new_instance(self, genes=None) -> "PermutationChromosome":
        if genes is None:
            return type(self).of(self.gene.valid_alleles)
        return type(self)(genes)
