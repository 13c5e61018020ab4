from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar, Union

T = TypeVar('T')
U = TypeVar('U')


class Collection(Generic[T]):
    """Laravel-style collection.

    Transforming methods return an instance of the same class, so subclasses
    such as ``TreeCollection`` survive ``filter()`` and friends.
    """

    def __init__(self, items: Union[List[T], Iterable[T], None] = None):
        if items is None:
            self._items: List[T] = []
        elif isinstance(items, list):
            self._items = items.copy()
        else:
            self._items = list(items)

    @classmethod
    def make(cls, items: Union[List[T], Iterable[T], None] = None) -> 'Collection[T]':
        """Create a new collection instance."""
        return cls(items)

    def all(self) -> List[T]:
        """Get all items as a list."""
        return self._items.copy()

    def count(self) -> int:
        return len(self._items)

    def is_empty(self) -> bool:
        return len(self._items) == 0

    def is_not_empty(self) -> bool:
        return not self.is_empty()

    def push(self, *items: T) -> 'Collection[T]':
        """Push items onto the end of the collection."""
        self._items.extend(items)
        return self

    # Filtering and searching
    def filter(self, callback: Optional[Callable[[T], bool]] = None) -> 'Collection[T]':
        """Filter items using a callback."""
        if callback is None:
            return self.__class__([item for item in self._items if item])

        return self.__class__([item for item in self._items if callback(item)])

    def reject(self, callback: Callable[[T], bool]) -> 'Collection[T]':
        """Filter out items using a callback."""
        return self.__class__([item for item in self._items if not callback(item)])

    def where(self, key: str, value: Any) -> 'Collection[T]':
        """Filter items by a key-value pair."""
        return self.filter(lambda item: self._get_item_value(item, key) == value)

    def first(self, callback: Optional[Callable[[T], bool]] = None, default: Any = None) -> Any:
        """Get the first item."""
        if callback is None:
            return self._items[0] if self._items else default

        for item in self._items:
            if callback(item):
                return item
        return default

    def last(self, callback: Optional[Callable[[T], bool]] = None, default: Any = None) -> Any:
        """Get the last item."""
        if callback is None:
            return self._items[-1] if self._items else default

        for item in reversed(self._items):
            if callback(item):
                return item
        return default

    def find(self, key: Any, default: Any = None) -> Any:
        """Find a model by its primary key."""
        for item in self._items:
            if getattr(item, 'id', None) == key:
                return item
        return default

    def contains(self, item: Any) -> bool:
        if callable(item):
            return any(item(value) for value in self._items)
        return item in self._items

    # Transforming
    def map(self, callback: Callable[[T], U]) -> 'Collection[U]':
        """Transform items using a callback."""
        return Collection([callback(item) for item in self._items])

    def pluck(self, value: str, key: Optional[str] = None) -> Union['Collection[Any]', Dict[Any, Any]]:
        """Pluck values from items."""
        if key is None:
            return Collection([self._get_item_value(item, value) for item in self._items])

        return {
            self._get_item_value(item, key): self._get_item_value(item, value)
            for item in self._items
        }

    def key_by(self, key: str) -> Dict[Any, T]:
        return {self._get_item_value(item, key): item for item in self._items}

    def sort_by(self, key: Union[str, Callable[[T], Any]], reverse: bool = False) -> 'Collection[T]':
        """Sort items by a key or callback."""
        if callable(key):
            return self.__class__(sorted(self._items, key=key, reverse=reverse))
        return self.__class__(sorted(self._items, key=lambda item: self._get_item_value(item, key), reverse=reverse))

    def each(self, callback: Callable[[T], Any]) -> 'Collection[T]':
        """Execute callback for each item, stopping early when it returns False."""
        for item in self._items:
            if callback(item) is False:
                break
        return self

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> T:
        return self._items[index]

    def __contains__(self, item: object) -> bool:
        return item in self._items

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._items!r})"

    def _get_item_value(self, item: Any, key: str) -> Any:
        """Get value from item by key."""
        if isinstance(item, dict):
            return item.get(key)
        return getattr(item, key, None)
