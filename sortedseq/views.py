"""Live windows over the storage of a :class:`SortedSequence`.

A view does not copy anything: every access reads the owner's current live
range, so the view follows later inserts and removals.
"""
from __future__ import annotations

import operator
from collections.abc import Sequence
from typing import TYPE_CHECKING, Generic, Iterator, List, TypeVar, overload

if TYPE_CHECKING:  # pragma: no cover
    from .sequence import SortedSequence

T = TypeVar("T")


class SequenceView(Sequence, Generic[T]):
    """Read-only window over ``owner[0:len(owner)]``."""

    __slots__ = ("_owner",)

    def __init__(self, owner: "SortedSequence[T]") -> None:
        self._owner = owner

    def __len__(self) -> int:
        return len(self._owner)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> List[T]: ...

    def __getitem__(self, index):
        return self._owner[index]

    def __iter__(self) -> Iterator[T]:
        return iter(self._owner)

    def __contains__(self, value: object) -> bool:
        return self._owner.contains(value)  # type: ignore[arg-type]

    def index(self, value: T, start: int = 0, stop: int | None = None) -> int:
        """Return the first index of an element comparator-equal to ``value``.

        Searches the whole window with bisect; ``start``/``stop`` fall back to
        a linear scan.
        """
        if start == 0 and stop is None:
            idx = self._owner.get_index(value)
            if idx is None:
                raise ValueError(f"{value!r} is not in view")
            return idx
        return super().index(value, start, stop)

    def __repr__(self) -> str:  # pragma: no cover - trivial
        return f"{type(self).__name__}({list(self)!r})"


class MutableSequenceView(SequenceView[T]):
    """Window that allows writing elements in place.

    The length is fixed: only item and same-length slice assignment are
    supported. Writes are not checked against the ordering, callers must keep
    ordering keys unchanged.
    """

    __slots__ = ()

    def __setitem__(self, index, value) -> None:
        owner = self._owner
        length = len(owner)
        if isinstance(index, slice):
            indices = range(length)[index]
            values = list(value)
            if len(values) != len(indices):
                raise ValueError(
                    f"view is fixed-size: cannot assign {len(values)} items "
                    f"to a slice of {len(indices)}"
                )
            for i, item in zip(indices, values):
                owner._slots[i] = item
        else:
            i = operator.index(index)
            if i < 0:
                i += length
            if not 0 <= i < length:
                raise IndexError("view index out of range")
            owner._slots[i] = value


__all__ = ["SequenceView", "MutableSequenceView"]
