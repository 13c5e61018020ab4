from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Self, TYPE_CHECKING
from fastapi import UploadFile

if TYPE_CHECKING:
    from storm.Database.Attach.File import File

logger = logging.getLogger(__name__)


class AttachOneOrMany:
    """
    Shared behaviour of file attachment relations.

    Attachments are polymorphic ``File`` rows constrained to the relation
    name through the ``field`` column.
    """

    _public: bool = True

    def public(self, value: bool = True) -> Self:
        self._public = value
        return self

    def is_public(self) -> bool:
        return self._public

    def is_valid_file_data(self, value: Any) -> bool:
        """Raw uploaded data: an ``UploadFile`` or a path to an existing local file."""
        if isinstance(value, UploadFile):
            return True
        if isinstance(value, (str, Path)) and Path(value).is_file():
            return True
        return False

    def make_validation_file(self, value: Any) -> Any:
        from storm.Database.Attach.File import File, ValidationFile

        if isinstance(value, File):
            return ValidationFile(
                path=value.get_local_path(),
                name=value.file_name,
                size=value.file_size,
                content_type=value.content_type,
            )
        return value

    def get_relation_condition(self) -> Any:
        return super().get_relation_condition() & (self.related.field == self.relation_name)

    def create(self, attributes: Optional[Dict[str, Any]] = None, session_key: Optional[str] = None) -> 'File':
        """Create a file attached to the parent."""
        attributes = dict(attributes or {})
        attributes.setdefault('is_public', self.is_public())

        if session_key is None and self.is_single():
            self.delete_siblings()

        model = self.related(**attributes)
        model.field = self.relation_name

        if session_key is None and self.parent.exists:
            self.associate_model(model)
            model.save()
            self.after_attach(model)
        else:
            model.save()
            if session_key is not None:
                self.add(model, session_key)
            else:
                self.parent.after_save_once(lambda: self.add(model))

        return model

    def add(self, model: 'File', session_key: Optional[str] = None) -> None:
        if session_key is not None:
            self.parent.bind_deferred(self.relation_name, model, session_key)
            return

        if not self.parent.exists:
            self.parent.after_save_once(lambda: self.add(model))
            return

        if self.is_single():
            self.delete_siblings(model)

        if model.is_public is None:
            model.is_public = self.is_public()
        model.field = self.relation_name

        self.associate_model(model)
        model.save()
        self.after_attach(model)

    def remove(self, model: 'File', session_key: Optional[str] = None) -> None:
        if session_key is not None:
            self.parent.unbind_deferred(self.relation_name, model, session_key)
            return

        if self.is_dependent():
            model.delete()
        else:
            setattr(model, self.foreign_key, None)
            setattr(model, self.morph_type, None)
            model.field = None
            model.save()

        self.after_detach(model)

    def delete_siblings(self, keep: Optional['File'] = None) -> None:
        query = self.query()
        if keep is not None and keep.exists:
            query.where(self.related.get_key_name(), '!=', keep.get_key())

        for sibling in query.get():
            logger.debug(f"Replacing attachment {sibling.get_key()} of {self.relation_name}")
            sibling.delete()

    def is_single(self) -> bool:
        return False

    def after_attach(self, model: 'File') -> None:
        self.parent.reload_relations(self.relation_name)

    def after_detach(self, model: 'File') -> None:
        self.parent.reload_relations(self.relation_name)
