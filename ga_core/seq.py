"""
Fixed-length sequences with a mutable and an immutable facet.

ISeq is the read-only, hashable view handed around between genotypes,
chromosomes and operators. MSeq is the scratch copy operators write into.
Converting between the two is cheap: both facets may share one backing list,
and the first write through an MSeq whose list is shared copies it.
"""

from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class Seq(Generic[T]):
    """Read-only sequence operations shared by both facets."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T] = ()):
        self._items: List[T] = list(items)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._items):
            raise IndexError(
                f"Index {index} out of bounds [0, {len(self._items)})"
            )

    def _check_range(self, start: int, end: int) -> None:
        if start < 0 or end > len(self._items) or start > end:
            raise IndexError(
                f"Invalid range [{start}, {end}) for length {len(self._items)}"
            )

    def __getitem__(self, index: int) -> T:
        self._check_index(index)
        return self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Seq):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"

    def index_of(self, predicate: Callable[[T], bool]) -> int:
        """Return the first index whose element satisfies `predicate`, or -1."""
        for i, item in enumerate(self._items):
            if predicate(item):
                return i
        return -1

    def to_list(self) -> List[T]:
        return list(self._items)


class ISeq(Seq[T]):
    """Immutable sequence; may share storage with MSeq instances."""

    __slots__ = ()

    def __hash__(self) -> int:
        return hash(tuple(self._items))

    def copy(self) -> "MSeq[T]":
        """Return a mutable copy; storage is duplicated on first write."""
        return MSeq._shared(self._items)


class MSeq(Seq[T]):
    """Mutable fixed-length sequence with copy-on-write storage."""

    __slots__ = ("_is_shared",)

    def __init__(self, items: Iterable[T] = ()):
        super().__init__(items)
        self._is_shared = False

    @classmethod
    def _shared(cls, items: List[T]) -> "MSeq[T]":
        seq = cls.__new__(cls)
        seq._items = items
        seq._is_shared = True
        return seq

    @classmethod
    def of_length(cls, length: int, value: Optional[T] = None) -> "MSeq[T]":
        if length < 0:
            raise ValueError(f"Length must not be negative: {length}")
        return cls([value] * length)

    def _own(self) -> None:
        if self._is_shared:
            self._items = list(self._items)
            self._is_shared = False

    def __setitem__(self, index: int, value: T) -> None:
        self._check_index(index)
        self._own()
        self._items[index] = value

    def swap(self, i: int, j: int) -> None:
        """Swap the elements at positions i and j."""
        self._check_index(i)
        self._check_index(j)
        if i != j:
            self._own()
            self._items[i], self._items[j] = self._items[j], self._items[i]

    def swap_range(self, start: int, end: int, other: "MSeq[T]", other_start: int) -> None:
        """
        Exchange self[start:end] with other[other_start:other_start + (end - start)].

        Args:
            start: First index (inclusive) in this sequence
            end: Last index (exclusive) in this sequence
            other: Sequence to exchange elements with
            other_start: First index in `other`

        Raises:
            IndexError: If either range is out of bounds
        """
        self._check_range(start, end)
        other._check_range(other_start, other_start + (end - start))
        if start == end:
            return

        self._own()
        other._own()
        other_end = other_start + (end - start)
        mine = self._items[start:end]
        self._items[start:end] = other._items[other_start:other_end]
        other._items[other_start:other_end] = mine

    def fill(self, supplier: Callable[[], T]) -> "MSeq[T]":
        self._own()
        for i in range(len(self._items)):
            self._items[i] = supplier()
        return self

    def copy(self) -> "MSeq[T]":
        return MSeq(self._items)

    def to_iseq(self) -> ISeq[T]:
        """
        Return an immutable view of the current content.

        The view shares storage with this sequence; later writes through this
        MSeq copy the storage first, so the view never changes.
        """
        view = ISeq.__new__(ISeq)
        view._items = self._items
        self._is_shared = True
        return view
