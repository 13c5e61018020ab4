from __future__ import annotations

from typing import (
    Any, Dict, Generic, List, Optional, Tuple, Type, TypeVar, Union, Self, TYPE_CHECKING
)
from sqlalchemy import select, Select, update, delete, func, false
from sqlalchemy.orm import Session


if TYPE_CHECKING:
    from storm.Database.Model import Model
    from storm.Database.Collection import Collection

T = TypeVar('T', bound='Model')


class Builder(Generic[T]):
    """Laravel-style query builder over a SQLAlchemy ``Select``."""

    OPERATORS = {'=', '!=', '<>', '<', '>', '<=', '>=', 'like', 'not like', 'in', 'not in'}

    def __init__(self, model: Type[T], session: Session, query: Optional[Select[Tuple[T]]] = None) -> None:
        self.model = model
        self.session = session
        self._query: Select[Tuple[T]] = query if query is not None else select(model)

    def __repr__(self) -> str:
        return f"<Builder({self.model.__name__})>"

    def where(self, column: Any, operator: str = '=', value: Any = None) -> Self:
        """Add a where clause; ``column`` may be a name or a SQL expression."""
        if not isinstance(column, str):
            self._query = self._query.where(column)
            return self

        if operator.lower() not in self.OPERATORS:
            raise ValueError(f"Invalid operator: {operator}")

        column_attr = self._get_column_attribute(column)
        self._query = self._query.where(self._build_condition(column_attr, operator, value))
        return self

    def where_in(self, column: str, values: List[Any]) -> Self:
        if not values:
            # Empty values should match nothing
            self._query = self._query.where(false())
            return self

        self._query = self._query.where(self._get_column_attribute(column).in_(values))
        return self

    def where_not_in(self, column: str, values: List[Any]) -> Self:
        if not values:
            return self

        self._query = self._query.where(~self._get_column_attribute(column).in_(values))
        return self

    def where_null(self, column: str) -> Self:
        self._query = self._query.where(self._get_column_attribute(column).is_(None))
        return self

    def order_by(self, column: str, direction: str = 'asc') -> Self:
        column_attr = self._get_column_attribute(column)
        self._query = self._query.order_by(column_attr.desc() if direction.lower() == 'desc' else column_attr.asc())
        return self

    def get(self) -> 'Collection[T]':
        """Execute the query and wrap the models in the model's collection class."""
        models = list(self.session.scalars(self._query).all())
        return self.model.new_collection(models)

    def all(self) -> 'Collection[T]':
        return self.get()

    def first(self) -> Optional[T]:
        return self.session.scalars(self._query.limit(1)).first()

    def find(self, key: Any) -> Optional[T]:
        return self.where(self.model.get_key_name(), '=', key).first()

    def count(self) -> int:
        count_query = select(func.count()).select_from(self._query.order_by(None).subquery())
        return self.session.execute(count_query).scalar() or 0

    def exists(self) -> bool:
        return self.count() > 0

    def pluck(self, column: str, key: Optional[str] = None) -> Union[List[Any], Dict[Any, Any]]:
        """Get the values of one column, optionally keyed by another column."""
        columns = [self._get_column_attribute(column)]
        if key is not None:
            columns.append(self._get_column_attribute(key))

        subquery = self._query.subquery()
        rows = self.session.execute(
            select(*[subquery.c[c.key] for c in columns])
        ).all()

        if key is None:
            return [row[0] for row in rows]
        return {row[1]: row[0] for row in rows}

    def update(self, values: Dict[str, Any]) -> int:
        """Update the matching rows, keeping in-session models in sync."""
        statement = update(self.model).values(**values).execution_options(synchronize_session='fetch')
        if self._query.whereclause is not None:
            statement = statement.where(self._query.whereclause)
        result = self.session.execute(statement)
        return result.rowcount or 0

    def delete(self) -> int:
        statement = delete(self.model).execution_options(synchronize_session='fetch')
        if self._query.whereclause is not None:
            statement = statement.where(self._query.whereclause)
        result = self.session.execute(statement)
        return result.rowcount or 0

    def _get_column_attribute(self, column: str) -> Any:
        """Get SQLAlchemy column attribute."""
        if column in self.model.__table__.columns:
            return getattr(self.model, column)
        raise AttributeError(f"Column '{column}' not found on {self.model.__name__}")

    def _build_condition(self, column_attr: Any, operator: str, value: Any) -> Any:
        op = operator.lower().strip()

        if op == '=':
            return column_attr.is_(None) if value is None else column_attr == value
        elif op in ('!=', '<>'):
            return column_attr.is_not(None) if value is None else column_attr != value
        elif op == '<':
            return column_attr < value
        elif op == '>':
            return column_attr > value
        elif op == '<=':
            return column_attr <= value
        elif op == '>=':
            return column_attr >= value
        elif op == 'like':
            return column_attr.like(value)
        elif op == 'not like':
            return ~column_attr.like(value)
        elif op == 'in':
            return column_attr.in_(value if isinstance(value, (list, tuple)) else [value])
        return ~column_attr.in_(value if isinstance(value, (list, tuple)) else [value])
