from __future__ import annotations

from typing import Any, Optional, Type, TYPE_CHECKING
from sqlalchemy import false

from storm.Database.Relations.Relation import Relation, T
from storm.Database.Relations.Concerns import DeferOneOrMany

if TYPE_CHECKING:
    from storm.Database.Model import Model


class BelongsTo(DeferOneOrMany, Relation[T]):
    """Inverse of a one-to-one or one-to-many relation; the parent holds the foreign key."""

    def __init__(
        self,
        parent: 'Model',
        related: Type[T],
        foreign_key: str,
        other_key: str = 'id',
        relation_name: Optional[str] = None
    ) -> None:
        super().__init__(parent, related, relation_name)
        self.foreign_key = foreign_key
        self.other_key = other_key

    def get_relation_condition(self) -> Any:
        value = getattr(self.parent, self.foreign_key)
        if value is None:
            return false()
        return getattr(self.related, self.other_key) == value

    def get_results(self) -> Optional[T]:
        if getattr(self.parent, self.foreign_key) is None:
            return None
        return self.query().first()

    def associate(self, model: Optional[T]) -> 'Model':
        setattr(self.parent, self.foreign_key, getattr(model, self.other_key) if model is not None else None)
        self.parent.set_relation(self.relation_name, model)
        return self.parent

    def dissociate(self) -> 'Model':
        return self.associate(None)

    def add(self, model: T, session_key: Optional[str] = None) -> None:
        if session_key is None:
            self.associate(model)
        else:
            self.parent.bind_deferred(self.relation_name, model, session_key)

    def remove(self, model: T, session_key: Optional[str] = None) -> None:
        if session_key is None:
            self.dissociate()
        else:
            self.parent.unbind_deferred(self.relation_name, model, session_key)

    def set_simple_value(self, value: Any) -> None:
        if value is None:
            self.dissociate()
        elif isinstance(value, self.related):
            self.associate(value)
        else:
            setattr(self.parent, self.foreign_key, value)
            self.parent.unset_relation(self.relation_name)

    def get_simple_value(self) -> Any:
        return getattr(self.parent, self.foreign_key)

    def delete_dependents(self) -> None:
        related = self.get_results()
        if related is not None:
            related.delete()

    def get_array_definition(self):
        related_type, options = super().get_array_definition()
        options['key'] = self.foreign_key
        options['other_key'] = self.other_key
        return related_type, options
