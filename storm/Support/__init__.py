from .Collection import Collection
from .Str import Str
from .helpers import base_path, public_path, storage_path

__all__ = [
    "Collection",
    "Str",
    "base_path",
    "public_path",
    "storage_path",
]
