from __future__ import annotations

from typing import Any, Dict, Optional

from storm.Database.Relations.HasOneOrMany import HasOneOrMany, T


class HasOne(HasOneOrMany[T]):
    """One-to-one relation; the related model holds the foreign key."""

    def get_results(self) -> Optional[T]:
        if self.get_parent_key() is None:
            return None
        return self.query().first()

    def after_attach(self, model: T) -> None:
        self.parent.set_relation(self.relation_name, model)

    def after_detach(self, model: T) -> None:
        self.parent.set_relation(self.relation_name, None)

    def set_simple_value(self, value: Any) -> None:
        """
        Assign the related model by instance or primary key.

        The association is written after the parent saves. Any other row
        holding the parent's key loses it at that point.
        """
        if isinstance(value, (list, tuple, dict)):
            return

        if value is None:
            if self.parent.exists:
                self.parent.after_save_once(self._nullify)
            self.parent.set_relation(self.relation_name, None)
            return

        if isinstance(value, self.related):
            instance = value
        else:
            instance = self.related.find(value)
            if instance is None:
                return

        original = instance.get_original(self.foreign_key)
        if self.parent.exists:
            self.associate_model(instance)

        self.parent.set_relation(self.relation_name, instance)
        self.parent.after_save_once(lambda: self._associate(instance, original))

    def get_simple_value(self) -> Any:
        value = self.parent.get_related(self.relation_name)
        return value.get_key() if value is not None else None

    def get_release_values(self) -> Dict[str, Any]:
        """Column values written to rows that stop being the related record."""
        return {self.foreign_key: None}

    def _nullify(self) -> None:
        self.update(self.get_release_values())

    def _associate(self, instance: T, original: Any) -> None:
        parent_key = self.get_parent_key()
        if instance.exists and original == parent_key:
            return

        stolen = self.query().where(self.related.get_key_name(), '!=', instance.get_key()).update(
            self.get_release_values()
        )
        if stolen:
            self.logger.debug(f"{self.relation_name}: released {stolen} previous holder(s)")

        self.associate_model(instance)
        instance.save()
