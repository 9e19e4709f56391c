"""
Random engine registry.

Every stochastic operation in ga_core fetches its generator from here at the
point of use instead of caching one. Callers can therefore pin a deterministic
generator around a sub-computation:

    with random_registry.scope(np.random.default_rng(42)):
        ga.setup()
        ga.evolve(100)

Scopes nest (the outer generator is restored on exit) and are carried into
worker threads by the concurrency facade, which runs every task inside a copy
of the submitting context.
"""

import contextvars
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar, Union

import numpy as np

T = TypeVar("T")

RandomLike = Union[np.random.Generator, int]

_scoped: contextvars.ContextVar[Optional[np.random.Generator]] = contextvars.ContextVar(
    "ga_core_random", default=None
)
_global: Optional[np.random.Generator] = None
_global_lock = threading.Lock()
_thread_local = threading.local()


def _as_generator(random: RandomLike) -> np.random.Generator:
    if isinstance(random, np.random.Generator):
        return random
    if isinstance(random, (int, np.integer)) and not isinstance(random, bool):
        return np.random.default_rng(int(random))
    raise TypeError(
        f"Expected numpy.random.Generator or int seed, got {type(random).__name__}"
    )


def get_random() -> np.random.Generator:
    """
    Return the generator that applies to the caller right now.

    Lookup order: innermost active scope, then the process-wide generator set
    with set_random(), then a lazily created per-thread generator.
    """
    scoped = _scoped.get()
    if scoped is not None:
        return scoped

    if _global is not None:
        return _global

    rng = getattr(_thread_local, "rng", None)
    if rng is None:
        rng = np.random.default_rng()
        _thread_local.rng = rng
    return rng


def set_random(random: RandomLike) -> np.random.Generator:
    """
    Install a process-wide generator, replacing the per-thread default.

    Args:
        random: Generator or integer seed

    Returns:
        The installed generator
    """
    global _global
    rng = _as_generator(random)
    with _global_lock:
        _global = rng
    return rng


def reset() -> None:
    """Drop the process-wide generator and fall back to per-thread defaults."""
    global _global
    with _global_lock:
        _global = None


@contextmanager
def scope(random: RandomLike) -> Iterator[np.random.Generator]:
    """
    Make `random` the current generator for the duration of the block.

    Args:
        random: Generator or integer seed

    Yields:
        The scoped generator
    """
    rng = _as_generator(random)
    token = _scoped.set(rng)
    try:
        yield rng
    finally:
        _scoped.reset(token)


def with_random(random: RandomLike, function: Callable[[np.random.Generator], T]) -> T:
    """Call `function` with `random` scoped as the current generator."""
    with scope(random) as rng:
        return function(rng)
