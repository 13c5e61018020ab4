from .DatabaseManager import DatabaseManager, get_database_manager, set_database_manager
from .Exceptions import (
    StormDatabaseError,
    ModelNotFoundError,
    RelationNotFoundError,
    MassAssignmentError,
    ColumnMismatchError,
)
from .Builder import Builder
from .Collection import Collection
from .TreeCollection import TreeCollection
from .Model import Base, Model, RelationDefinition, RelationType, relation
from .DeferredBinding import DeferredBinding
from .Traits.SimpleTree import SimpleTree
from .Attach import File, ValidationFile

__all__ = [
    'DatabaseManager',
    'get_database_manager',
    'set_database_manager',
    'StormDatabaseError',
    'ModelNotFoundError',
    'RelationNotFoundError',
    'MassAssignmentError',
    'ColumnMismatchError',
    'Builder',
    'Collection',
    'TreeCollection',
    'Base',
    'Model',
    'RelationDefinition',
    'RelationType',
    'relation',
    'DeferredBinding',
    'SimpleTree',
    'File',
    'ValidationFile',
]
