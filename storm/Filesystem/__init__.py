from .FilesystemBase import FilesystemBase
from .Filesystem import Filesystem, get_filesystem, set_filesystem
from .FilesystemManager import (
    FilesystemAdapter,
    LocalFilesystemAdapter,
    FilesystemManager,
    get_filesystem_manager,
    set_filesystem_manager,
    storage,
)

__all__ = [
    'FilesystemBase',
    'Filesystem',
    'get_filesystem',
    'set_filesystem',
    'FilesystemAdapter',
    'LocalFilesystemAdapter',
    'FilesystemManager',
    'get_filesystem_manager',
    'set_filesystem_manager',
    'storage',
]
