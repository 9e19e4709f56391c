"""
Gene representations.

A gene holds one allele and knows how to check it and how to produce a fresh
random instance of itself. Numeric genes additionally support `mean`, which
the blend crossover (MeanAlterer) relies on.
"""

from dataclasses import dataclass
from typing import Any, Tuple

from . import random_registry

DEFAULT_CHARACTERS = (
    "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
)


@dataclass(frozen=True)
class BitGene:
    allele: bool

    def is_valid(self) -> bool:
        return True

    def new_instance(self) -> "BitGene":
        return BitGene(bool(random_registry.get_random().random() < 0.5))

    def __str__(self) -> str:
        return "1" if self.allele else "0"


@dataclass(frozen=True)
class CharacterGene:
    allele: str
    valid_characters: str = DEFAULT_CHARACTERS

    def is_valid(self) -> bool:
        return len(self.allele) == 1 and self.allele in self.valid_characters

    def new_instance(self) -> "CharacterGene":
        rng = random_registry.get_random()
        index = int(rng.integers(len(self.valid_characters)))
        return CharacterGene(self.valid_characters[index], self.valid_characters)

    @classmethod
    def of(cls, valid_characters: str = DEFAULT_CHARACTERS) -> "CharacterGene":
        if not valid_characters:
            raise ValueError("Valid character set must not be empty")
        return cls(valid_characters[0], valid_characters).new_instance()

    def __str__(self) -> str:
        return self.allele


@dataclass(frozen=True)
class IntegerGene:
    """Integer allele within the closed range [min, max]."""

    allele: int
    min: int
    max: int

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"min > max: {self.min} > {self.max}")

    def is_valid(self) -> bool:
        return self.min <= self.allele <= self.max

    def new_instance(self) -> "IntegerGene":
        rng = random_registry.get_random()
        return IntegerGene(int(rng.integers(self.min, self.max, endpoint=True)), self.min, self.max)

    def with_allele(self, allele: int) -> "IntegerGene":
        return IntegerGene(int(allele), self.min, self.max)

    def mean(self, other: "IntegerGene") -> "IntegerGene":
        # Truncates toward zero
        total = self.allele + other.allele
        return self.with_allele(abs(total) // 2 * (1 if total >= 0 else -1))

    @classmethod
    def of(cls, min: int, max: int) -> "IntegerGene":
        return cls(min, min, max).new_instance()

    def __str__(self) -> str:
        return f"[{self.allele}]"


@dataclass(frozen=True)
class DoubleGene:
    """Floating point allele; random instances are drawn from [min, max)."""

    allele: float
    min: float
    max: float

    def __post_init__(self):
        if self.min > self.max:
            raise ValueError(f"min > max: {self.min} > {self.max}")

    def is_valid(self) -> bool:
        return self.min <= self.allele <= self.max

    def new_instance(self) -> "DoubleGene":
        rng = random_registry.get_random()
        return DoubleGene(float(rng.uniform(self.min, self.max)), self.min, self.max)

    def with_allele(self, allele: float) -> "DoubleGene":
        return DoubleGene(float(allele), self.min, self.max)

    def mean(self, other: "DoubleGene") -> "DoubleGene":
        return self.with_allele((self.allele + other.allele) / 2.0)

    @classmethod
    def of(cls, min: float, max: float) -> "DoubleGene":
        return cls(min, min, max).new_instance()

    def __str__(self) -> str:
        return f"[{self.allele:.6g}]"


@dataclass(frozen=True)
class EnumGene:
    """One element of a fixed tuple of valid alleles, stored by index."""

    allele_index: int
    valid_alleles: Tuple[Any, ...]

    def __post_init__(self):
        if not self.valid_alleles:
            raise ValueError("Valid alleles must not be empty")

    @property
    def allele(self) -> Any:
        return self.valid_alleles[self.allele_index]

    def is_valid(self) -> bool:
        return 0 <= self.allele_index < len(self.valid_alleles)

    def new_instance(self) -> "EnumGene":
        rng = random_registry.get_random()
        return EnumGene(int(rng.integers(len(self.valid_alleles))), self.valid_alleles)

    def __str__(self) -> str:
        return str(self.allele)
