from __future__ import annotations


class StormDatabaseError(Exception):
    """Base exception for storm database errors."""
    pass


class ModelNotFoundError(StormDatabaseError):
    """Raised when a model lookup by key finds nothing."""

    def __init__(self, model: str, key: object = None) -> None:
        self.model = model
        self.key = key
        message = f"No query results for model [{model}]"
        if key is not None:
            message += f" {key}"
        super().__init__(message)


class RelationNotFoundError(StormDatabaseError):
    """Raised when a relation name is not registered on a model."""

    def __init__(self, model: str, relation: str) -> None:
        self.model = model
        self.relation = relation
        super().__init__(f"Relation '{relation}' is not defined on model [{model}]")


class MassAssignmentError(StormDatabaseError):
    """Raised when filling a guarded attribute while models are guarded."""
    pass


class ColumnMismatchError(StormDatabaseError):
    """Raised when a tree listing asks for a column the table does not have."""
    pass
