"""
Optimization direction.
"""

from enum import Enum
from typing import Any, Callable, TypeVar

T = TypeVar("T")


def _cmp(a: Any, b: Any) -> int:
    return (a > b) - (a < b)


class Optimize(Enum):
    """Whether the fitness function is minimized or maximized."""

    MINIMUM = "minimum"
    MAXIMUM = "maximum"

    def compare(self, a: Any, b: Any) -> int:
        """
        Compare two fitness values under this direction.

        Returns:
            Positive if `a` is better than `b`, negative if worse, 0 if equal
        """
        if self is Optimize.MAXIMUM:
            return _cmp(a, b)
        return _cmp(b, a)

    def best(self, a: T, b: T, key: Callable[[T], Any] = lambda x: x) -> T:
        """Return the better of a and b; ties keep a."""
        return b if self.compare(key(b), key(a)) > 0 else a

    def worst(self, a: T, b: T, key: Callable[[T], Any] = lambda x: x) -> T:
        """Return the worse of a and b; ties keep a."""
        return b if self.compare(key(b), key(a)) < 0 else a

    @classmethod
    def parse(cls, value: Any) -> "Optimize":
        """Accept an Optimize member or its case-insensitive name/value."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError(
                f"Invalid optimization direction: {value!r}. Must be 'minimum' or 'maximum'"
            ) from None
