"""
Index-probability streams.

Sparse stochastic iteration: yield the positions of a length-n sequence that
are hit with probability p, without building a boolean mask. The gaps
between hits are drawn from a geometric distribution, so sparse streams cost
roughly n*p draws instead of n.
"""

from typing import Iterator, List, Optional

import numpy as np

from . import random_registry

MAX_INDEX = 2**31 - 1


def check_probability(p: float, name: str = "Probability") -> float:
    """
    Validate that p is a probability.

    Args:
        p: Value to check
        name: Name used in the error message

    Returns:
        p as float

    Raises:
        ValueError: If p is not within [0, 1]
    """
    p = float(p)
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"{name} is not in range [0, 1]: {p}")
    return p


def random_indexes(
    n: int,
    p: float,
    random: Optional[np.random.Generator] = None
) -> Iterator[int]:
    """
    Create a lazy, strictly increasing stream of indices in [0, n).

    Each index is included independently with probability p. Arguments are
    validated eagerly; the stream itself is consumed lazily and cannot be
    restarted.

    Args:
        n: Length of the indexed sequence (0 < n < 2**31 - 1)
        p: Selection probability for every index
        random: Generator to draw from; defaults to the registry's current one

    Returns:
        Iterator over the selected indices

    Raises:
        ValueError: If n or p is out of range
    """
    if n >= MAX_INDEX:
        raise ValueError(f"n must be smaller than {MAX_INDEX}: {n}")
    if n <= 0:
        raise ValueError(f"n must be greater than zero: {n}")
    p = check_probability(p)

    rng = random if random is not None else random_registry.get_random()
    return _indexes(n, p, rng)


def random_subset(n: int, k: int, random: Optional[np.random.Generator] = None) -> List[int]:
    """
    Draw k distinct indices from [0, n), sorted ascending.

    Raises:
        ValueError: If k <= 0 or n < k
    """
    if k <= 0:
        raise ValueError(f"Subset size smaller or equal zero: {k}")
    if n < k:
        raise ValueError(f"n smaller than k: {n} < {k}.")

    rng = random if random is not None else random_registry.get_random()
    return sorted(int(i) for i in rng.choice(n, size=k, replace=False))


def _indexes(n: int, p: float, rng: np.random.Generator) -> Iterator[int]:
    if p == 0.0:
        return
    if p == 1.0:
        yield from range(n)
        return

    pos = -1
    while True:
        # Trials up to and including the next hit
        pos += int(rng.geometric(p))
        if pos >= n:
            return
        yield pos
