from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Optional, Tuple, Type, TypeVar, TYPE_CHECKING
from sqlalchemy.orm import Session

from storm.Database.Builder import Builder
from storm.Database.Relations.Concerns import (
    HasRelationName, CanBeDependent, CanBePushed, CanBeCounted, DefinedConstraints
)

if TYPE_CHECKING:
    from storm.Database.Model import Model
    from storm.Database.Collection import Collection

T = TypeVar('T', bound='Model')


class Relation(
    HasRelationName, CanBeDependent, CanBePushed, CanBeCounted, DefinedConstraints, Generic[T], ABC
):
    """
    Base class for relations between a parent model instance and a related
    model class.

    A relation object is cheap to build and never touches the database on
    construction; queries are issued by ``get_results()`` and the builder
    helpers.
    """

    def __init__(self, parent: 'Model', related: Type[T], relation_name: Optional[str] = None) -> None:
        self.parent = parent
        self.related = related
        self.relation_name = relation_name

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}({self.parent.__class__.__name__}.{self.relation_name} -> {self.related.__name__})>"

    @property
    def session(self) -> Session:
        return self.related.resolve_session()

    def new_query(self) -> Builder[T]:
        return Builder(self.related, self.session)

    @abstractmethod
    def get_relation_condition(self) -> Any:
        """SQL condition selecting the committed related rows."""
        pass

    @abstractmethod
    def get_results(self) -> Any:
        pass

    def query(self) -> Builder[T]:
        return self.apply_defined_constraints(self.new_query().where(self.get_relation_condition()))

    def get(self) -> 'Collection[T]':
        return self.query().get()

    def first(self) -> Optional[T]:
        return self.query().first()

    def count(self) -> int:
        return self.query().count()

    def exists(self) -> bool:
        return self.query().exists()

    def update(self, values: Dict[str, Any]) -> int:
        return self.query().update(values)

    def get_simple_value(self) -> Any:
        raise NotImplementedError(f"{self.__class__.__name__} does not support simple values")

    def set_simple_value(self, value: Any) -> None:
        raise NotImplementedError(f"{self.__class__.__name__} does not support simple values")

    def get_array_definition(self) -> Tuple[str, Dict[str, Any]]:
        """Describe the relation as a ``(related_type, options)`` definition."""
        return (
            self.related.get_morph_class(),
            {
                'delete': self.is_dependent(),
                'push': self.is_pushable(),
                'count': self.is_count_only(),
            },
        )

    def delete_dependents(self) -> None:
        """Delete the related records of a dependent relation."""
        for model in self.get():
            model.delete()
