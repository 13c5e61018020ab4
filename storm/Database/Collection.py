from __future__ import annotations

from typing import Any, Dict, Optional, TypeVar, TYPE_CHECKING

from storm.Support.Collection import Collection as BaseCollection

if TYPE_CHECKING:
    from storm.Database.Model import Model

T = TypeVar('T', bound='Model')


class Collection(BaseCollection[T]):
    """Collection of models returned by queries and to-many relations."""

    def get_dictionary(self) -> Dict[Any, T]:
        """Models keyed by primary key, in collection order."""
        return {model.get_key(): model for model in self._items}

    def find(self, key: Any, default: Optional[T] = None) -> Optional[T]:
        return self.get_dictionary().get(key, default)

    def contains(self, value: Any) -> bool:
        key = value.get_key() if hasattr(value, 'get_key') else value
        return key in self.get_dictionary()
