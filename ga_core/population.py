"""
Population: ordered, mutable collection of phenotypes.
"""

from collections.abc import MutableSequence
from typing import Callable, Iterable, Iterator, List, Optional

from .optimize import Optimize
from .phenotype import Phenotype


class Population(MutableSequence):
    """
    Mutable list of phenotypes with strict positional access.

    Out-of-range indices (including negative ones) raise IndexError instead
    of wrapping around.
    """

    def __init__(self, phenotypes: Optional[Iterable[Phenotype]] = None):
        self._items: List[Phenotype] = list(phenotypes) if phenotypes is not None else []

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._items):
            raise IndexError(
                f"Population index {index} out of bounds [0, {len(self._items)})"
            )

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Population(self._items[index])
        self._check_index(index)
        return self._items[index]

    def __setitem__(self, index: int, phenotype: Phenotype) -> None:
        if phenotype is None:
            raise ValueError("Phenotype must not be None")
        self._check_index(index)
        self._items[index] = phenotype

    def __delitem__(self, index: int) -> None:
        self._check_index(index)
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Phenotype]:
        return iter(self._items)

    def pop(self, index: Optional[int] = None) -> Phenotype:
        """Remove and return the phenotype at `index` (default: the last one)."""
        if index is None:
            index = len(self._items) - 1
        self._check_index(index)
        return self._items.pop(index)

    def insert(self, index: int, phenotype: Phenotype) -> None:
        if phenotype is None:
            raise ValueError("Phenotype must not be None")
        self._items.insert(index, phenotype)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Population):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Population(size={len(self._items)})"

    def fill(self, factory: Callable[[], Phenotype], count: int) -> "Population":
        """
        Append `count` phenotypes created by `factory`.

        Args:
            factory: Zero-argument phenotype factory
            count: Number of phenotypes to add (non-positive adds nothing)

        Returns:
            self, for chaining
        """
        for _ in range(count):
            self.append(factory())
        return self

    def sort_with(self, optimize: Optimize) -> "Population":
        """Stable in-place sort, best phenotype first."""
        self._items.sort(key=lambda pt: pt.fitness, reverse=optimize is Optimize.MAXIMUM)
        return self

    def copy(self) -> "Population":
        return Population(self._items)

    def genotypes(self) -> List:
        return [pt.genotype for pt in self._items]
