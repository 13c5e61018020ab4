from __future__ import annotations

from typing import Any, Dict, Optional, Self, Union, TYPE_CHECKING
from sqlalchemy import text

if TYPE_CHECKING:
    from storm.Database.Builder import Builder


class DefinedConstraints:
    """
    Applies the ``conditions`` and ``order`` options of a relation definition.

    ``conditions`` is either a mapping of column to value or a raw SQL string,
    ``order`` is a column name optionally followed by a direction,
    e.g. ``"sort_order desc"``.
    """

    _conditions: Optional[Union[str, Dict[str, Any]]] = None
    _order: Optional[str] = None

    def conditions(self, conditions: Union[str, Dict[str, Any]]) -> Self:
        self._conditions = conditions
        return self

    def order(self, order: str) -> Self:
        self._order = order
        return self

    def apply_defined_constraints(self, query: 'Builder[Any]') -> 'Builder[Any]':
        if isinstance(self._conditions, dict):
            for column, value in self._conditions.items():
                query.where(column, '=', value)
        elif self._conditions:
            query.where(text(self._conditions))

        if self._order:
            parts = self._order.split()
            query.order_by(parts[0], parts[1] if len(parts) > 1 else 'asc')

        return query
