from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from storm.Database.Collection import Collection, T
from storm.Database.Exceptions import ColumnMismatchError


class TreeCollection(Collection[T]):
    """Collection of ``SimpleTree`` models that can assemble itself into a tree."""

    def to_nested(self, remove_orphans: bool = True) -> 'TreeCollection[T]':
        """
        Attach every model to its parent's ``children`` relation and return
        the roots.

        Models whose parent is not part of the collection are dropped when
        ``remove_orphans`` is set, otherwise they are returned as roots.
        """
        dictionary = self.get_dictionary()

        for model in dictionary.values():
            model.set_relation('children', self.__class__())

        nested_keys = []
        for key, model in dictionary.items():
            parent_key = model.get_parent_id()
            if not parent_key:
                continue

            if parent_key in dictionary:
                dictionary[parent_key].get_related('children').push(model)
                nested_keys.append(key)
            elif remove_orphans:
                nested_keys.append(key)

        for key in nested_keys:
            del dictionary[key]

        return self.__class__(list(dictionary.values()))

    def lists_nested(
        self,
        value: str,
        key: Optional[str] = None,
        indent: str = '&nbsp;&nbsp;&nbsp;'
    ) -> Union[Dict[Any, str], List[str]]:
        """Indented listing of ``value``, optionally keyed by ``key``."""
        for item in self:
            for name in (value, key, item.get_parent_column_name()):
                if name is not None and not hasattr(item, name):
                    raise ColumnMismatchError(
                        'Column mismatch in lists_nested method. Are you sure the columns exist?'
                    )

        keyed: Dict[Any, str] = {}
        listed: List[str] = []

        def build(items: 'TreeCollection[T]', depth: int) -> None:
            prefix = indent * depth
            for item in items:
                text = prefix + str(getattr(item, value))
                if key is not None:
                    keyed.setdefault(getattr(item, key), text)
                else:
                    listed.append(text)

                children = item.get_children()
                if children.count() > 0:
                    build(children, depth + 1)

        build(self.to_nested(), 0)
        return keyed if key is not None else listed
