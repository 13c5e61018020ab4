from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Type, TYPE_CHECKING

from storm.Database.Relations.MorphOne import MorphOne
from storm.Database.Relations.Relation import T
from storm.Database.Relations.Concerns import AttachOneOrMany

if TYPE_CHECKING:
    from storm.Database.Model import Model


class AttachOne(AttachOneOrMany, MorphOne[T]):
    """
    Attach a single file to a model.

    The file is a polymorphic ``attachment`` whose ``field`` column holds
    the relation name, so one model may carry several single attachments.
    Adding a new file deletes the current one.
    """

    def __init__(
        self,
        parent: 'Model',
        related: Type[T],
        is_public: bool = True,
        local_key: str = 'id',
        relation_name: Optional[str] = None
    ) -> None:
        super().__init__(parent, related, 'attachment', local_key=local_key, relation_name=relation_name)
        self._public = is_public

    def is_single(self) -> bool:
        return True

    def after_attach(self, model: T) -> None:
        self.parent.set_relation(self.relation_name, model)

    def after_detach(self, model: T) -> None:
        self.parent.set_relation(self.relation_name, None)

    def set_simple_value(self, value: Any) -> None:
        """
        Accept raw upload data, an existing file model, or ``None``.

        The raw value is kept as the relation value so validation can read
        it before the parent is saved.
        """
        if isinstance(value, (list, tuple)):
            value = value[0] if value else None

        if value is None:
            if self.parent.exists:
                self.parent.after_save_once(self._nullify_attachment)
            self.parent.set_relation(self.relation_name, None)
            return

        if self.is_valid_file_data(value):
            def create_file() -> None:
                file = self.create({'data': value})
                self.parent.set_relation(self.relation_name, file)

            self.parent.after_save_once(create_file)
        elif isinstance(value, self.related):
            self.parent.after_save_once(lambda: self.add(value))

        self.parent.set_relation(self.relation_name, value)

    def get_simple_value(self) -> Optional[str]:
        value = self._get_simple_value_internal()
        if isinstance(value, self.related):
            return value.get_path()
        if isinstance(value, (str, Path)) and self.is_valid_file_data(value):
            return str(value)
        return None

    def get_validation_value(self) -> Any:
        value = self._get_simple_value_internal()
        if value is None:
            return None
        return self.make_validation_file(value)

    def _get_simple_value_internal(self) -> Any:
        session_key = self.parent.session_key
        if session_key:
            return self.with_deferred(session_key).first()
        return self.parent.get_related(self.relation_name)

    def _nullify_attachment(self) -> None:
        for file in self.get():
            self.remove(file)

    def get_array_definition(self) -> Tuple[str, Dict[str, Any]]:
        return (
            self.related.get_morph_class(),
            {
                'key': self.local_key,
                'delete': self.is_dependent(),
                'public': self.is_public(),
                'push': self.is_pushable(),
                'count': self.is_count_only(),
            },
        )
