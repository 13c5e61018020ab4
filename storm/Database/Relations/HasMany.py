from __future__ import annotations

from typing import Any, List, TYPE_CHECKING

from storm.Database.Relations.HasOneOrMany import HasOneOrMany, T

if TYPE_CHECKING:
    from storm.Database.Collection import Collection


class HasMany(HasOneOrMany[T]):
    """One-to-many relation; the related models hold the foreign key."""

    def get_results(self) -> 'Collection[T]':
        if self.get_parent_key() is None:
            return self.related.new_collection([])
        return self.query().order_by(self.related.get_key_name()).get()

    def set_simple_value(self, value: Any) -> None:
        """Replace the related set with the given models or primary keys after save."""
        if not value:
            if self.parent.exists:
                self.parent.after_save_once(lambda: self.update({self.foreign_key: None}))
            self.parent.set_relation(self.relation_name, self.related.new_collection([]))
            return

        if isinstance(value, self.related):
            value = [value]

        models: List[T] = [item for item in value if isinstance(item, self.related)]
        keys = [item for item in value if not isinstance(item, self.related)]
        if keys:
            models.extend(self.new_query().where_in(self.related.get_key_name(), keys).get())

        collection = self.related.new_collection(models)
        self.parent.set_relation(self.relation_name, collection)
        self.parent.after_save_once(lambda: self._sync(collection))

    def get_simple_value(self) -> List[Any]:
        return [model.get_key() for model in self.parent.get_related(self.relation_name)]

    def _sync(self, collection: 'Collection[T]') -> None:
        keep = [model.get_key() for model in collection if model.exists]
        self.query().where_not_in(self.related.get_key_name(), keep).update({self.foreign_key: None})

        for model in collection:
            self.associate_model(model)
            model.save()
