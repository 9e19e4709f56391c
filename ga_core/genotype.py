"""
Genotype: the encoded structure of one candidate solution.
"""

from typing import Any, Callable, Iterable, Optional, Union

from .chromosome import Chromosome
from .seq import ISeq

GenotypeFactory = Callable[[], "Genotype"]


class Genotype:
    """
    Immutable, non-empty sequence of chromosomes sharing one gene type.

    Validity is the conjunction of the chromosome validities; it is computed
    on first use and cached, which is safe because genotypes never change.
    """

    __slots__ = ("_chromosomes", "_valid")

    def __init__(self, chromosomes: Union[ISeq, Iterable[Chromosome]]):
        self._chromosomes = (
            chromosomes if isinstance(chromosomes, ISeq) else ISeq(chromosomes)
        )
        if len(self._chromosomes) == 0:
            raise ValueError("Genotype must contain at least one chromosome")

        gene_type = self._chromosomes[0].gene_type
        for chromosome in self._chromosomes:
            if chromosome.gene_type is not gene_type:
                raise TypeError(
                    f"All chromosomes must share one gene type: "
                    f"{gene_type.__name__} != {chromosome.gene_type.__name__}"
                )
        self._valid: Optional[bool] = None

    @classmethod
    def of(cls, *chromosomes: Chromosome) -> "Genotype":
        return cls(chromosomes)

    @staticmethod
    def factory(*prototypes: Chromosome) -> GenotypeFactory:
        """
        Build a factory of random genotypes shaped like `prototypes`.

        Each call creates a new genotype whose chromosomes are fresh random
        instances of the given prototype chromosomes.
        """
        if not prototypes:
            raise ValueError("At least one prototype chromosome is required")
        shape = Genotype(prototypes)

        def new_genotype() -> "Genotype":
            return shape.new_instance()

        return new_genotype

    @property
    def chromosomes(self) -> ISeq:
        return self._chromosomes

    @property
    def chromosome(self) -> Chromosome:
        """First chromosome of the genotype."""
        return self._chromosomes[0]

    @property
    def gene(self) -> Any:
        """First gene of the first chromosome."""
        return self._chromosomes[0].gene

    def __len__(self) -> int:
        return len(self._chromosomes)

    def __getitem__(self, index: int) -> Chromosome:
        return self._chromosomes[index]

    def __iter__(self):
        return iter(self._chromosomes)

    def number_of_genes(self) -> int:
        return sum(len(c) for c in self._chromosomes)

    def is_valid(self) -> bool:
        if self._valid is None:
            self._valid = all(c.is_valid() for c in self._chromosomes)
        return self._valid

    def to_seq(self) -> ISeq:
        return self._chromosomes

    def new_instance(self, chromosomes: Optional[Union[ISeq, Iterable[Chromosome]]] = None) -> "Genotype":
        """
        Create a genotype of the same shape.

        Args:
            chromosomes: Replacement chromosomes; random ones if omitted
        """
        if chromosomes is None:
            chromosomes = ISeq(c.new_instance() for c in self._chromosomes)
        return Genotype(chromosomes)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Genotype):
            return NotImplemented
        return self._chromosomes == other._chromosomes

    def __hash__(self) -> int:
        return hash(self._chromosomes)

    def __repr__(self) -> str:
        return "[" + ", ".join(repr(c) for c in self._chromosomes) + "]"
