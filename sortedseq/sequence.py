"""A sorted sequence backed by a single contiguous slot array.

Elements are kept in ascending order after every mutation. Positions are
located with :mod:`bisect`, so lookups are ``O(log n)`` while inserts and
removals pay ``O(n)`` for shifting the tail. Capacity is tracked explicitly:
the backing list always has ``capacity()`` slots, of which the first
``len(seq)`` hold live elements and the rest hold ``None``.

Out-of-range indices and missing values are reported as ``None``, never
raised. ``MemoryError`` during growth is logged and propagated.
"""
from __future__ import annotations

import logging
import math
import operator
from bisect import bisect_left, bisect_right
from typing import Any, Callable, Generic, Iterable, Iterator, List, Optional, TypeVar

from .config import SequenceSettings, get_settings
from .observability import inc_storage_grow, inc_storage_shrink
from .views import MutableSequenceView, SequenceView

T = TypeVar("T")

logger = logging.getLogger(__name__)


class SortedSequence(Generic[T]):
    """Keep elements sorted in a resizable array.

    ``key`` works like the ``key`` argument of :func:`sorted`. Two elements
    whose keys are neither less than the other are comparator-equal; they may
    coexist and sit next to each other.
    """

    def __init__(
        self,
        iterable: Iterable[T] | None = None,
        *,
        key: Callable[[T], Any] | None = None,
        capacity: int = 0,
        settings: SequenceSettings | None = None,
    ) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be non-negative, got {capacity}")
        self._key = key
        self._settings = settings if settings is not None else get_settings()
        items: List[T] = sorted(iterable, key=key) if iterable is not None else []
        self._slots: List[Optional[T]] = items
        self._len = len(items)
        self._version = 0
        if capacity > self._len:
            self._slots.extend([None] * (capacity - self._len))

    @classmethod
    def with_capacity(
        cls,
        capacity: int,
        *,
        key: Callable[[T], Any] | None = None,
        settings: SequenceSettings | None = None,
    ) -> "SortedSequence[T]":
        """Return an empty sequence able to hold ``capacity`` elements without growing."""
        return cls(key=key, capacity=capacity, settings=settings)

    # -- searching ---------------------------------------------------------

    def _key_of(self, value: T) -> Any:
        return value if self._key is None else self._key(value)

    def _find(self, value: T) -> Optional[int]:
        target = self._key_of(value)
        idx = bisect_left(self._slots, target, 0, self._len, key=self._key)
        if idx < self._len and not target < self._key_of(self._slots[idx]):
            return idx
        return None

    # -- storage -----------------------------------------------------------

    def _grow(self, required: int) -> None:
        old = len(self._slots)
        if required <= old:
            return
        new = max(
            required,
            self._settings.min_capacity,
            math.ceil(old * self._settings.growth_factor),
        )
        try:
            self._slots.extend([None] * (new - old))
        except MemoryError:
            logger.critical(
                "unable to grow sorted sequence storage",
                extra={"old_capacity": old, "new_capacity": new, "length": self._len},
            )
            raise
        logger.debug(
            "grew sorted sequence storage",
            extra={"old_capacity": old, "new_capacity": new, "length": self._len},
        )
        inc_storage_grow(self._settings.growth_alert_threshold)

    def _release(self, start: int, stop: int) -> None:
        self._slots[start:stop] = [None] * (stop - start)

    def _log_unordered_fill(self, fill_value: T, length: int, new_len: int) -> None:
        try:
            unordered = self._key_of(fill_value) < self._key_of(self._slots[length - 1])
        except TypeError:
            return
        if unordered:
            logger.debug(
                "resize fill value orders before the last element",
                extra={"length": length, "new_length": new_len},
            )

    # -- mutation ----------------------------------------------------------

    def insert(self, value: T) -> int:
        """Insert ``value`` keeping the order and return its index.

        Equal elements already present stay in front of the new one.
        """
        n = self._len
        idx = bisect_right(self._slots, self._key_of(value), 0, n, key=self._key)
        self._grow(n + 1)
        self._slots[idx + 1 : n + 1] = self._slots[idx:n]
        self._slots[idx] = value
        self._len = n + 1
        self._version += 1
        return idx

    def update(self, iterable: Iterable[T]) -> None:
        """Insert every value of ``iterable``."""
        for value in iterable:
            self.insert(value)

    def remove(self, index: int) -> Optional[T]:
        """Remove and return the element at ``index``, or ``None`` when out of range."""
        n = self._len
        if not 0 <= index < n:
            return None
        value = self._slots[index]
        self._slots[index : n - 1] = self._slots[index + 1 : n]
        self._slots[n - 1] = None
        self._len = n - 1
        self._version += 1
        return value

    def remove_value(self, value: T) -> Optional[T]:
        """Remove and return an element equal to ``value``, or ``None`` if absent."""
        idx = self._find(value)
        if idx is None:
            return None
        return self.remove(idx)

    def clear(self) -> None:
        """Drop every element. The capacity is kept for reuse."""
        self._release(0, self._len)
        self._len = 0
        self._version += 1

    def reserve(self, additional: int) -> None:
        """Make room for at least ``additional`` more elements."""
        if additional < 0:
            raise ValueError(f"additional must be non-negative, got {additional}")
        self._grow(self._len + additional)

    def shrink_to_fit(self) -> None:
        old = len(self._slots)
        if old == self._len:
            return
        del self._slots[self._len :]
        logger.debug(
            "shrank sorted sequence storage",
            extra={"old_capacity": old, "new_capacity": self._len, "length": self._len},
        )
        inc_storage_shrink()

    def resize(self, new_len: int, fill_value: T) -> None:
        """Truncate to ``new_len`` or pad the end with ``fill_value``.

        Padding does not re-sort. If ``fill_value`` orders below the current
        last element the sequence is no longer sorted; keeping it sorted is
        the caller's job. Every padded slot refers to the same
        ``fill_value`` object; pass an immutable value or mutate the slots
        through :meth:`as_mutable_view` afterwards.
        """
        if new_len < 0:
            raise ValueError(f"new_len must be non-negative, got {new_len}")
        n = self._len
        if new_len < n:
            self._release(new_len, n)
        elif new_len > n:
            if n and logger.isEnabledFor(logging.DEBUG):
                self._log_unordered_fill(fill_value, n, new_len)
            self._grow(new_len)
            self._slots[n:new_len] = [fill_value] * (new_len - n)
        else:
            return
        self._len = new_len
        self._version += 1

    # -- queries -----------------------------------------------------------

    def get(self, index: int) -> Optional[T]:
        """Return the element at ``index``, or ``None`` when out of range."""
        if 0 <= index < self._len:
            return self._slots[index]
        return None

    def get_index(self, value: T) -> Optional[int]:
        """Return the index of an element equal to ``value``, or ``None``.

        With duplicates, which member of the equal run is found is not
        guaranteed.
        """
        return self._find(value)

    def contains(self, value: T) -> bool:
        return self._find(value) is not None

    def capacity(self) -> int:
        return len(self._slots)

    def is_empty(self) -> bool:
        return self._len == 0

    def first(self) -> Optional[T]:
        return self._slots[0] if self._len else None

    def last(self) -> Optional[T]:
        return self._slots[self._len - 1] if self._len else None

    def as_view(self) -> SequenceView[T]:
        return SequenceView(self)

    def as_mutable_view(self) -> MutableSequenceView[T]:
        """Return a writable window over the live elements.

        Changing an element's ordering key through the view leaves the
        sequence unsorted.
        """
        return MutableSequenceView(self)

    # -- conversion --------------------------------------------------------

    def as_list(self) -> List[T]:
        """Return a copy of the live elements."""
        return self._slots[: self._len]

    def into_list(self) -> List[T]:
        """Hand the elements over as a plain list, leaving this sequence empty."""
        items = self._slots[: self._len]
        self._slots = []
        self._len = 0
        self._version += 1
        return items

    def drain(self) -> Iterator[T]:
        """Empty the sequence now and iterate over what it held, in order."""
        return iter(self.into_list())

    def copy(self) -> "SortedSequence[T]":
        clone = type(self)(key=self._key, settings=self._settings)
        clone._slots = list(self._slots)
        clone._len = self._len
        return clone

    __copy__ = copy

    # -- python protocols --------------------------------------------------

    def __len__(self) -> int:
        return self._len

    def __contains__(self, value: object) -> bool:
        return self.contains(value)  # type: ignore[arg-type]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return self._slots[: self._len][index]
        i = operator.index(index)
        if i < 0:
            i += self._len
        if not 0 <= i < self._len:
            raise IndexError("sorted sequence index out of range")
        return self._slots[i]

    def __delitem__(self, index: int) -> None:
        i = operator.index(index)
        if i < 0:
            i += self._len
        if not 0 <= i < self._len:
            raise IndexError("sorted sequence index out of range")
        self.remove(i)

    def _iterate(self, indices: range, version: int) -> Iterator[T]:
        for i in indices:
            if self._version != version:
                raise RuntimeError("sorted sequence changed size during iteration")
            yield self._slots[i]

    def __iter__(self) -> Iterator[T]:
        return self._iterate(range(self._len), self._version)

    def __reversed__(self) -> Iterator[T]:
        return self._iterate(range(self._len - 1, -1, -1), self._version)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SortedSequence):
            return NotImplemented
        return self.as_list() == other.as_list()

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SortedSequence):
            return NotImplemented
        return self.as_list() < other.as_list()

    def __le__(self, other: object) -> bool:
        if not isinstance(other, SortedSequence):
            return NotImplemented
        return self.as_list() <= other.as_list()

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, SortedSequence):
            return NotImplemented
        return self.as_list() > other.as_list()

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, SortedSequence):
            return NotImplemented
        return self.as_list() >= other.as_list()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.as_list()!r})"


__all__ = ["SortedSequence"]
