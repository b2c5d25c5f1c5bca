# src/spicelib_core/library/registry.py
from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """
    A name-keyed store where the first definition of a name wins.

    `insert_if_absent` reports whether the entry was kept, so callers can count
    discarded duplicates. Names are matched exactly (case-sensitive).
    Iteration follows insertion order.
    """

    def __init__(self, key: Callable[[T], str] = lambda item: item.name):
        self._key = key
        self._items: Dict[str, T] = {}

    def insert_if_absent(self, item: T) -> bool:
        name = self._key(item)
        if name in self._items:
            return False
        self._items[name] = item
        return True

    def get(self, name: str) -> Optional[T]:
        return self._items.get(name)

    def names(self) -> List[str]:
        return list(self._items)

    def values(self) -> List[T]:
        return list(self._items.values())

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self._items.values())
