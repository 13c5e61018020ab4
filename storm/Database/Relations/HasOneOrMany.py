from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Type, TYPE_CHECKING
from sqlalchemy import false

from storm.Database.Relations.Relation import Relation, T
from storm.Database.Relations.Concerns import DeferOneOrMany

if TYPE_CHECKING:
    from storm.Database.Model import Model


class HasOneOrMany(DeferOneOrMany, Relation[T]):
    """Relations where the related model holds the foreign key."""

    def __init__(
        self,
        parent: 'Model',
        related: Type[T],
        foreign_key: str,
        local_key: str = 'id',
        relation_name: Optional[str] = None
    ) -> None:
        super().__init__(parent, related, relation_name)
        self.foreign_key = foreign_key
        self.local_key = local_key
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

    def get_parent_key(self) -> Any:
        return getattr(self.parent, self.local_key)

    def get_relation_condition(self) -> Any:
        parent_key = self.get_parent_key()
        if parent_key is None:
            return false()
        return getattr(self.related, self.foreign_key) == parent_key

    def associate_model(self, model: T) -> None:
        """Point the foreign key of ``model`` at the parent."""
        setattr(model, self.foreign_key, self.get_parent_key())

    def make(self, attributes: Optional[Dict[str, Any]] = None) -> T:
        model = self.related(**(attributes or {}))
        if self.parent.exists:
            self.associate_model(model)
        return model

    def create(self, attributes: Optional[Dict[str, Any]] = None, session_key: Optional[str] = None) -> T:
        """Create a related model; with ``session_key`` the association is deferred."""
        model = self.make(attributes) if session_key is None else self.related(**(attributes or {}))
        model.save()

        if session_key is not None:
            self.add(model, session_key)
        elif not self.parent.exists:
            self.add(model)
        else:
            self.after_attach(model)
        return model

    def add(self, model: T, session_key: Optional[str] = None) -> None:
        """Associate ``model``, or record a pending add under ``session_key``."""
        if session_key is not None:
            self.parent.bind_deferred(self.relation_name, model, session_key)
            return

        if not self.parent.exists:
            self.parent.after_save_once(lambda: self.add(model))
            return

        self.associate_model(model)
        if not model.exists or model.is_dirty():
            model.save()

        self.after_attach(model)

    def remove(self, model: T, session_key: Optional[str] = None) -> None:
        """Dissociate ``model``, or record a pending removal under ``session_key``."""
        if session_key is not None:
            self.parent.unbind_deferred(self.relation_name, model, session_key)
            return

        if self.is_dependent():
            model.delete()
        else:
            setattr(model, self.foreign_key, None)
            model.save()

        self.after_detach(model)

    def after_attach(self, model: T) -> None:
        self.parent.reload_relations(self.relation_name)

    def after_detach(self, model: T) -> None:
        self.parent.reload_relations(self.relation_name)

    def get_array_definition(self):
        related_type, options = super().get_array_definition()
        options['key'] = self.foreign_key
        options['other_key'] = self.local_key
        return related_type, options
