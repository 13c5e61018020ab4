from .Relation import Relation
from .HasOneOrMany import HasOneOrMany
from .HasOne import HasOne
from .HasMany import HasMany
from .BelongsTo import BelongsTo
from .MorphOne import MorphOne
from .AttachOne import AttachOne

__all__ = [
    'Relation',
    'HasOneOrMany',
    'HasOne',
    'HasMany',
    'BelongsTo',
    'MorphOne',
    'AttachOne',
]
