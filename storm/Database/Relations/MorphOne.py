from __future__ import annotations

from typing import Any, Dict, Optional, Type, TYPE_CHECKING

from storm.Database.Relations.HasOne import HasOne
from storm.Database.Relations.Relation import T

if TYPE_CHECKING:
    from storm.Database.Model import Model


class MorphOne(HasOne[T]):
    """
    Polymorphic one-to-one relation.

    The related table stores the owner key in ``<name>_id`` and the owner
    type in ``<name>_type``.
    """

    def __init__(
        self,
        parent: 'Model',
        related: Type[T],
        name: str,
        type_column: Optional[str] = None,
        id_column: Optional[str] = None,
        local_key: str = 'id',
        relation_name: Optional[str] = None
    ) -> None:
        super().__init__(parent, related, id_column or f"{name}_id", local_key, relation_name)
        self.morph_name = name
        self.morph_type = type_column or f"{name}_type"
        self.morph_class = parent.get_morph_class()

    def get_relation_condition(self) -> Any:
        return super().get_relation_condition() & (getattr(self.related, self.morph_type) == self.morph_class)

    def associate_model(self, model: T) -> None:
        super().associate_model(model)
        setattr(model, self.morph_type, self.morph_class)

    def get_release_values(self) -> Dict[str, Any]:
        return {self.foreign_key: None, self.morph_type: None}

    def get_array_definition(self):
        related_type, options = super().get_array_definition()
        options['name'] = self.morph_name
        options['type'] = self.morph_type
        options['id'] = self.foreign_key
        options['key'] = self.local_key
        del options['other_key']
        return related_type, options
