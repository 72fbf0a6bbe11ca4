# assetgraph/assets/ordering.py
from __future__ import annotations
from collections.abc import Hashable, Iterable, Iterator
from typing import Generic, TypeVar

__all__ = ["RepositioningList"]

T = TypeVar("T", bound=Hashable)



class RepositioningList(Generic[T]):
    """
    Insertion-ordered sequence without duplicates where pushing an entry that is
    already present moves it to the end.

    This is the ordering rule shared by module flattening and response
    linearization: an entry referenced again is pulled to sit after the last
    thing that required it.

        >>> items = RepositioningList(["a", "b", "c"])
        >>> items.push("a")
        >>> list(items)
        ['b', 'c', 'a']

    Backed by a dict, so remove + re-append is O(1).
    """
    __slots__ = ("_items",)

    def __init__(self, items: Iterable[T] = ()) -> None:
        self._items: dict[T, None] = {}
        self.extend(items)

    def push(self, item: T) -> None:
        self._items.pop(item, None)
        self._items[item] = None

    def extend(self, items: Iterable[T]) -> None:
        for item in items:
            self.push(item)

    def remove(self, item: T) -> bool:
        """Removes `item`. Returns False if it wasn't present."""
        if item in self._items:
            del self._items[item]
            return True
        return False

    def toTuple(self) -> tuple[T, ...]:
        return tuple(self._items)

    def reversedTuple(self) -> tuple[T, ...]:
        return tuple(reversed(self._items))

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __reversed__(self) -> Iterator[T]:
        return reversed(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"RepositioningList({list(self._items)!r})"
