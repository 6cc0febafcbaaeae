from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar, Union
import json
from collections import abc

T = TypeVar('T')
U = TypeVar('U')

Items = Union[List[Any], Dict[Any, Any]]


class Collection(Generic[T]):
    """
    Laravel-style collection, the native form of ``collection`` casts.

    Items are a list, or a mapping when built from one; keys are kept so a
    decoded JSON object encodes back to an object. Scalars are wrapped in a
    one item list.
    """

    def __init__(self, items: Union[List[T], Dict[Any, T], Iterable[T], T, None] = None):
        self._items: Items
        if items is None:
            self._items = []
        elif isinstance(items, Collection):
            self._items = items.all()
        elif isinstance(items, dict):
            self._items = dict(items)
        elif isinstance(items, list):
            self._items = items.copy()
        elif isinstance(items, (str, bytes, bytearray)) or not isinstance(items, abc.Iterable):
            self._items = [items]
        else:
            self._items = list(items)

    @classmethod
    def make(cls, items: Union[List[T], Dict[Any, T], Iterable[T], T, None] = None) -> 'Collection[T]':
        """Create a new collection instance."""
        return cls(items)

    def all(self) -> Items:
        """Get the underlying items, a list or a mapping."""
        return self._items.copy()

    def keys(self) -> List[Any]:
        if isinstance(self._items, dict):
            return list(self._items.keys())
        return list(range(len(self._items)))

    def values(self) -> List[T]:
        if isinstance(self._items, dict):
            return list(self._items.values())
        return self._items.copy()

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def first(self, callback: Optional[Callable[[T], bool]] = None, default: Any = None) -> Any:
        """Get the first item, optionally the first passing a truth test."""
        for item in self:
            if callback is None or callback(item):
                return item
        return default

    def map(self, callback: Callable[[T], U]) -> 'Collection[U]':
        """Run a map over each of the items, keeping keys."""
        if isinstance(self._items, dict):
            return Collection({key: callback(item) for key, item in self._items.items()})
        return Collection([callback(item) for item in self._items])

    def filter(self, callback: Optional[Callable[[T], bool]] = None) -> 'Collection[T]':
        """Filter items using the given callback, or drop falsy items."""
        test = callback if callback is not None else bool
        if isinstance(self._items, dict):
            return Collection({key: item for key, item in self._items.items() if test(item)})
        return Collection([item for item in self._items if test(item)])

    def to_list(self) -> List[Any]:
        """Get the values as a plain list, unwrapping nested collections."""
        return [_unwrap(item) for item in self]

    def to_array(self) -> Items:
        """Get the items in their original shape, unwrapping nested collections."""
        if isinstance(self._items, dict):
            return {key: _unwrap(item) for key, item in self._items.items()}
        return self.to_list()

    def to_json(self) -> str:
        return json.dumps(self.to_array())

    def __iter__(self) -> Iterator[T]:
        if isinstance(self._items, dict):
            return iter(self._items.values())
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, key: Any) -> T:
        return self._items[key]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Collection):
            return self._items == other._items
        if isinstance(other, (list, dict)):
            return self._items == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"Collection({self._items!r})"


def _unwrap(item: Any) -> Any:
    return item.to_array() if isinstance(item, Collection) else item
