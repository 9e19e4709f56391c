"""
Alterer base class and composition.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Tuple

from .index_stream import check_probability
from .population import Population

DEFAULT_ALTER_PROBABILITY = 0.2


class Alterer(ABC):
    """
    Changes (part of) the offspring population in place.

    Attributes:
        probability: Application probability, validated at construction
    """

    def __init__(self, probability: float = DEFAULT_ALTER_PROBABILITY):
        self.probability = check_probability(probability, "Alter probability")

    @abstractmethod
    def alter(self, population: Population, generation: int) -> int:
        """
        Alter the population in place.

        Args:
            population: Population to alter
            generation: Current generation; altered phenotypes are born here

        Returns:
            Number of alterations performed
        """

    def __eq__(self, other) -> bool:
        if other is self:
            return True
        if type(other) is not type(self):
            return NotImplemented
        return self.__dict__ == other.__dict__

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.probability))

    def __repr__(self) -> str:
        return f"{type(self).__name__}[p={self.probability:f}]"


class CompositeAlterer(Alterer):
    """
    Applies a flat list of alterers one after the other.

    Nested composites are spliced into the list in place, so the children
    are always leaf alterers in their original order.
    """

    def __init__(self, alterers: Iterable[Alterer]):
        super().__init__(1.0)
        alterers = list(alterers)
        for alterer in alterers:
            if alterer is None:
                raise ValueError("Alterer must not be None")
        self._alterers: Tuple[Alterer, ...] = tuple(self._normalize(alterers))

    @staticmethod
    def _normalize(alterers: List[Alterer]) -> List[Alterer]:
        stack = list(reversed(alterers))
        normalized = []
        while stack:
            alterer = stack.pop()
            if isinstance(alterer, CompositeAlterer):
                stack.extend(reversed(alterer.alterers))
            else:
                normalized.append(alterer)
        return normalized

    @classmethod
    def of(cls, *alterers: Alterer) -> "CompositeAlterer":
        return cls(alterers)

    @classmethod
    def join(cls, first: Alterer, second: Alterer) -> "CompositeAlterer":
        return cls((first, second))

    def append(self, alterer: Alterer) -> "CompositeAlterer":
        if alterer is None:
            raise ValueError("Alterer must not be None")
        return CompositeAlterer((self, alterer))

    @property
    def alterers(self) -> Tuple[Alterer, ...]:
        return self._alterers

    def alter(self, population: Population, generation: int) -> int:
        return sum(a.alter(population, generation) for a in self._alterers)

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._alterers))

    def __repr__(self) -> str:
        return f"{type(self).__name__}[{', '.join(repr(a) for a in self._alterers)}]"
