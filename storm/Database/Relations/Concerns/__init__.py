from .HasRelationName import HasRelationName
from .CanBeDependent import CanBeDependent
from .CanBePushed import CanBePushed
from .CanBeCounted import CanBeCounted
from .DefinedConstraints import DefinedConstraints
from .DeferOneOrMany import DeferOneOrMany
from .AttachOneOrMany import AttachOneOrMany

__all__ = [
    'HasRelationName',
    'CanBeDependent',
    'CanBePushed',
    'CanBeCounted',
    'DefinedConstraints',
    'DeferOneOrMany',
    'AttachOneOrMany',
]
