from __future__ import annotations

import functools
import importlib
import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import (
    Any, Callable, ClassVar, Dict, Iterator, List, Optional, Type, TypeVar, Union, Self, TYPE_CHECKING
)
from sqlalchemy import func, select, inspect as sa_inspect
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, Session, declared_attr, reconstructor

from storm.Database.Builder import Builder
from storm.Database.Collection import Collection
from storm.Database.DatabaseManager import get_database_manager
from storm.Database.Exceptions import ModelNotFoundError, RelationNotFoundError, MassAssignmentError
from storm.Database.Relations import Relation, HasOne, HasMany, BelongsTo, MorphOne, AttachOne
from storm.Database.Traits.DeferredBinding import DeferredBinding
from storm.Support.Str import Str

T = TypeVar('T', bound='Model')

if TYPE_CHECKING:
    from storm.Database.Attach.File import File


class RelationType(Enum):
    """Relation types that can be declared with a class level dictionary."""
    HAS_ONE = "has_one"
    HAS_MANY = "has_many"
    BELONGS_TO = "belongs_to"
    MORPH_ONE = "morph_one"
    ATTACH_ONE = "attach_one"


class RelationDefinition:
    """A relation registered by name on a model class."""

    def __init__(
        self,
        name: str,
        relation_type: Optional[RelationType] = None,
        related: Union[str, Type[Model], None] = None,
        options: Optional[Dict[str, Any]] = None,
        accessor: Optional[Callable[..., Any]] = None
    ):
        self.name = name
        self.relation_type = relation_type
        self.related = related
        self.options = options or {}
        self.accessor = accessor

    def __repr__(self) -> str:
        kind = self.relation_type.value if self.relation_type else 'accessor'
        return f"<RelationDefinition({self.name}: {kind})>"


def relation(method: Callable[[Any], Relation[Any]]) -> Callable[[Any], Relation[Any]]:
    """
    Register a method as a relation accessor.

    The method name becomes the relation name:

        class Author(Model):
            @relation
            def contact_number(self) -> HasOne[Phone]:
                return self.has_one(Phone)
    """
    @functools.wraps(method)
    def accessor(self: Any) -> Relation[Any]:
        instance = method(self)
        if instance.relation_name is None:
            instance.relation_name = method.__name__
        return instance

    accessor.__storm_relation__ = True  # type: ignore[attr-defined]
    return accessor


class Base(DeclarativeBase):
    pass


class Model(DeferredBinding, Base):
    __abstract__ = True

    # Laravel-style mass assignment protection
    __fillable__: ClassVar[List[str]] = []
    __guarded__: ClassVar[List[str]] = ['id', 'created_at', 'updated_at']

    # Named database connection, None for the default one
    __connection__: ClassVar[Optional[str]] = None
    __collection_class__: ClassVar[Type[Collection[Any]]] = Collection

    # Relations, keyed by name; filled by __init_subclass__
    __relation_registry__: ClassVar[Dict[str, RelationDefinition]] = {}

    _unguarded: ClassVar[bool] = False

    # Session key of the form the model is edited in
    session_key: ClassVar[Optional[str]] = None

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(server_default=func.now(), nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        server_default=func.now(), onupdate=func.now(), nullable=True
    )

    @declared_attr.directive
    def __table_args__(cls) -> Dict[str, Any]:
        # Ids of deleted rows are never handed out again
        return {'sqlite_autoincrement': True}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        cls._register_relations()

    def __init__(self, **attributes: Any) -> None:
        self._init_model_state()
        super().__init__()
        self.fill(attributes)

    @reconstructor
    def _init_model_state(self) -> None:
        self._relations: Dict[str, Any] = {}
        self._after_save_callbacks: List[Callable[[], Any]] = []

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"

    # Mass assignment

    def fill(self, attributes: Dict[str, Any]) -> Self:
        """Laravel-style mass assignment with fillable/guarded protection."""
        for key, value in attributes.items():
            if self._is_fillable(key):
                setattr(self, key, value)
            elif self._is_totally_guarded():
                raise MassAssignmentError(
                    f"Add [{key}] to __fillable__ to allow mass assignment on [{self.__class__.__name__}]"
                )
        return self

    def _is_fillable(self, key: str) -> bool:
        if Model._unguarded:
            return True
        if self.__fillable__:
            return key in self.__fillable__
        return key not in self.__guarded__ and '*' not in self.__guarded__

    def _is_totally_guarded(self) -> bool:
        return not self.__fillable__ and '*' in self.__guarded__

    @classmethod
    def unguard(cls, state: bool = True) -> None:
        Model._unguarded = state

    @classmethod
    def reguard(cls) -> None:
        Model._unguarded = False

    @classmethod
    @contextmanager
    def unguarded(cls) -> Iterator[None]:
        """Run a block with mass assignment protection disabled."""
        previous = Model._unguarded
        Model._unguarded = True
        try:
            yield
        finally:
            Model._unguarded = previous

    # Class helpers

    @classmethod
    def resolve_session(cls) -> Session:
        return get_database_manager().session(cls.__connection__)

    @classmethod
    def query(cls) -> Builder[Self]:
        return Builder(cls, cls.resolve_session())

    @classmethod
    def new_collection(cls, models: Optional[List[Any]] = None) -> Collection[Any]:
        return cls.__collection_class__(models or [])

    @classmethod
    def get_key_name(cls) -> str:
        return 'id'

    @classmethod
    def get_foreign_key(cls) -> str:
        """Default foreign key pointing at this model, e.g. ``author_id``."""
        return f"{Str.snake(cls.__name__)}_{cls.get_key_name()}"

    @classmethod
    def get_morph_class(cls) -> str:
        """Qualified class name stored in polymorphic type and ledger columns."""
        return f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def resolve_model(cls, related: Union[str, Type[Model]]) -> Type[Model]:
        """Resolve a model class from a class, a qualified name or a mapped class name."""
        if isinstance(related, type):
            return related

        if '.' in related:
            module_name, _, class_name = related.rpartition('.')
            return getattr(importlib.import_module(module_name), class_name)

        for mapper in Base.registry.mappers:
            if mapper.class_.__name__ == related:
                return mapper.class_

        raise ValueError(f"Unable to resolve model [{related}]")

    @classmethod
    def make(cls, **attributes: Any) -> Self:
        return cls(**attributes)

    @classmethod
    def create(cls, **attributes: Any) -> Self:
        model = cls(**attributes)
        model.save()
        return model

    @classmethod
    def find(cls, key: Any) -> Optional[Self]:
        if key is None:
            return None
        return cls.resolve_session().get(cls, key)

    @classmethod
    def find_or_fail(cls, key: Any) -> Self:
        model = cls.find(key)
        if model is None:
            raise ModelNotFoundError(cls.__name__, key)
        return model

    @classmethod
    def first(cls) -> Optional[Self]:
        return cls.query().order_by(cls.get_key_name()).first()

    @classmethod
    def all(cls) -> Collection[Self]:
        return cls.query().order_by(cls.get_key_name()).get()

    @classmethod
    def get(cls) -> Collection[Self]:
        return cls.all()

    # State

    def get_key(self) -> Any:
        return getattr(self, self.get_key_name())

    @property
    def exists(self) -> bool:
        """Whether the model is backed by a row that has not been deleted."""
        state = sa_inspect(self)
        return state.has_identity and not state.was_deleted

    def is_dirty(self, *attributes: str) -> bool:
        state = sa_inspect(self)
        if not state.has_identity:
            return True
        names = attributes or tuple(attr.key for attr in state.mapper.column_attrs)
        return any(state.attrs[name].history.has_changes() for name in names)

    def get_original(self, key: str) -> Any:
        """Value of ``key`` as last persisted, ``None`` for new models."""
        state = sa_inspect(self)
        if not state.has_identity:
            return None

        history = state.attrs[key].load_history()
        if history.deleted:
            return history.deleted[0]
        if history.unchanged:
            return history.unchanged[0]
        if history.added:
            # Assigned while expired, so the stored value was never loaded
            model = self.__class__
            return self.resolve_session().execute(
                select(getattr(model, key)).where(getattr(model, self.get_key_name()) == self.get_key())
            ).scalar()
        return None

    # Persistence

    def after_save_once(self, callback: Callable[[], Any]) -> None:
        """Run ``callback`` once, after the next successful save of this model."""
        self._after_save_callbacks.append(callback)

    def _fire_after_save_callbacks(self, callbacks: List[Callable[[], Any]]) -> None:
        for callback in callbacks:
            callback()

    def save(self, session_key: Optional[str] = None) -> bool:
        """
        Persist the model.

        Within one transaction the row is flushed, the deferred bindings of
        ``session_key`` are committed and the after-save callbacks run.
        The callbacks are kept for the next save when the unit fails.
        """
        callbacks, self._after_save_callbacks = self._after_save_callbacks, []
        try:
            with get_database_manager().transaction(self.__connection__) as session:
                session.add(self)
                session.flush()
                self.commit_deferred(session_key)
                self._fire_after_save_callbacks(callbacks)
        except Exception:
            self._after_save_callbacks = callbacks + self._after_save_callbacks
            raise
        return True

    def push(self, session_key: Optional[str] = None) -> bool:
        """Save the model and every loaded relation that allows pushing."""
        self.save(session_key)

        for name, value in list(self._relations.items()):
            if value is None or not self.has_relation(name):
                continue
            if not self.relation(name).is_pushable():
                continue

            models = value if isinstance(value, Collection) else [value]
            for model in models:
                if isinstance(model, Model):
                    model.push()

        return True

    def delete(self) -> bool:
        """Delete the model, removing dependent relations first."""
        if not self.exists:
            return False

        with get_database_manager().transaction(self.__connection__) as session:
            self.perform_delete_on_relations()
            session.delete(self)
            session.flush()

        self._relations.clear()
        return True

    def perform_delete_on_relations(self) -> None:
        for name in self.__relation_registry__:
            instance = self.relation(name)
            if instance.is_dependent():
                instance.delete_dependents()

    # Relation registry

    @classmethod
    def _register_relations(cls) -> None:
        registry: Dict[str, RelationDefinition] = {}

        for klass in reversed(cls.__mro__):
            for relation_type in RelationType:
                declared = klass.__dict__.get(f"__{relation_type.value}__") or {}
                for name, value in declared.items():
                    related, options = value if isinstance(value, tuple) else (value, {})
                    registry[name] = RelationDefinition(name, relation_type, related, dict(options))

            for name, attribute in klass.__dict__.items():
                if getattr(attribute, '__storm_relation__', False):
                    registry[name] = RelationDefinition(name, accessor=attribute)

        cls.__relation_registry__ = registry

    @classmethod
    def has_relation(cls, name: str) -> bool:
        return name in cls.__relation_registry__

    @classmethod
    def get_relation_definition(cls, name: str) -> RelationDefinition:
        try:
            return cls.__relation_registry__[name]
        except KeyError:
            raise RelationNotFoundError(cls.__name__, name) from None

    @classmethod
    def get_relation_definitions(cls) -> Dict[str, RelationDefinition]:
        return dict(cls.__relation_registry__)

    def relation(self, name: str) -> Relation[Any]:
        """Build the relation object registered as ``name``."""
        definition = self.get_relation_definition(name)

        if definition.accessor is not None:
            return getattr(self, name)()

        return self._build_relation(definition)

    def _build_relation(self, definition: RelationDefinition) -> Relation[Any]:
        options = definition.options
        name = definition.name
        related = definition.related

        instance: Relation[Any]
        if definition.relation_type is RelationType.HAS_ONE:
            instance = self.has_one(related, options.get('key'), options.get('other_key'), name)
        elif definition.relation_type is RelationType.HAS_MANY:
            instance = self.has_many(related, options.get('key'), options.get('other_key'), name)
        elif definition.relation_type is RelationType.BELONGS_TO:
            instance = self.belongs_to(related, options.get('key'), options.get('other_key'), name)
        elif definition.relation_type is RelationType.MORPH_ONE:
            instance = self.morph_one(
                related, options['name'], options.get('type'), options.get('id'), options.get('key'), name
            )
        else:
            instance = self.attach_one(related, options.get('public', True), options.get('key'), name)

        return self._apply_relation_options(instance, options)

    @staticmethod
    def _apply_relation_options(instance: Relation[Any], options: Dict[str, Any]) -> Relation[Any]:
        if options.get('delete'):
            instance.dependent()
        if 'push' in options:
            instance.push(bool(options['push']))
        if options.get('count'):
            instance.count_only()
        if options.get('conditions'):
            instance.conditions(options['conditions'])
        if options.get('order'):
            instance.order(options['order'])
        return instance

    def has_one(
        self,
        related: Union[str, Type[T]],
        key: Optional[str] = None,
        other_key: Optional[str] = None,
        relation_name: Optional[str] = None
    ) -> HasOne[T]:
        return HasOne(
            self, self.resolve_model(related), key or self.get_foreign_key(),
            other_key or self.get_key_name(), relation_name
        )

    def has_many(
        self,
        related: Union[str, Type[T]],
        key: Optional[str] = None,
        other_key: Optional[str] = None,
        relation_name: Optional[str] = None
    ) -> HasMany[T]:
        return HasMany(
            self, self.resolve_model(related), key or self.get_foreign_key(),
            other_key or self.get_key_name(), relation_name
        )

    def belongs_to(
        self,
        related: Union[str, Type[T]],
        key: Optional[str] = None,
        other_key: Optional[str] = None,
        relation_name: Optional[str] = None
    ) -> BelongsTo[T]:
        related_class = self.resolve_model(related)
        if key is None:
            key = f"{relation_name}_id" if relation_name else related_class.get_foreign_key()
        return BelongsTo(self, related_class, key, other_key or related_class.get_key_name(), relation_name)

    def morph_one(
        self,
        related: Union[str, Type[T]],
        name: str,
        type_column: Optional[str] = None,
        id_column: Optional[str] = None,
        local_key: Optional[str] = None,
        relation_name: Optional[str] = None
    ) -> MorphOne[T]:
        return MorphOne(
            self, self.resolve_model(related), name, type_column, id_column,
            local_key or self.get_key_name(), relation_name
        )

    def attach_one(
        self,
        related: Union[str, Type[File], None] = None,
        is_public: bool = True,
        local_key: Optional[str] = None,
        relation_name: Optional[str] = None
    ) -> AttachOne[File]:
        return AttachOne(
            self, self.resolve_model(related or 'storm.Database.Attach.File.File'), is_public,
            local_key or self.get_key_name(), relation_name
        )

    # Relation values

    def get_related(self, name: str) -> Any:
        """Value of a relation, loaded on first access and cached."""
        if name not in self._relations:
            instance = self.relation(name)
            self._relations[name] = instance.count() if instance.is_count_only() else instance.get_results()
        return self._relations[name]

    def set_related(self, name: str, value: Any) -> None:
        """Assign a relation from a model, a primary key or raw data."""
        self.relation(name).set_simple_value(value)

    def get_relation_value(self, name: str) -> Any:
        """Simple value of a relation, e.g. the related primary key."""
        return self.relation(name).get_simple_value()

    def set_relation(self, name: str, value: Any) -> Self:
        self._relations[name] = value
        return self

    def relation_loaded(self, name: str) -> bool:
        return name in self._relations

    def unset_relation(self, name: str) -> Self:
        self._relations.pop(name, None)
        return self

    def reload_relations(self, *names: str) -> Self:
        if not names:
            self._relations.clear()
        for name in names:
            self._relations.pop(name, None)
        return self

    def get_relations(self) -> Dict[str, Any]:
        return dict(self._relations)
