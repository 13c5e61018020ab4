from __future__ import annotations

import inspect
import logging
import os
import re
from typing import Any, Dict, Optional, Union
from urllib.parse import urlparse

from storm.Config.Repository import config
from storm.Filesystem.FilesystemBase import FilesystemBase
from storm.Filesystem.FilesystemManager import FilesystemAdapter, LocalFilesystemAdapter
from storm.Support.helpers import base_path, public_path, storage_path
from storm.Support.Str import Str

SIZE_PATTERN = re.compile(r'^(\d+(?:\.\d+)?)\s*(gb|g|mb|m|kb|k|bytes|byte)?$')

SIZE_UNITS: Dict[str, int] = {
    'gb': 1024 ** 3,
    'g': 1024 ** 3,
    'mb': 1024 ** 2,
    'm': 1024 ** 2,
    'kb': 1024,
    'k': 1024,
    'bytes': 1,
    'byte': 1,
}


class Filesystem(FilesystemBase):
    """
    File helper.

    Adds size conversion, permission masks, path symbols and public path
    resolution on top of the plain file operations. Permission masks are
    octal strings such as ``"755"``.
    """

    def __init__(
        self,
        file_permissions: Optional[str] = None,
        folder_permissions: Optional[str] = None,
        path_symbols: Optional[Dict[str, str]] = None
    ) -> None:
        self.file_permissions = file_permissions
        self.folder_permissions = folder_permissions
        self.path_symbols: Dict[str, str] = path_symbols or {}
        self._symlinks: Optional[Dict[str, str]] = None
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

    def is_directory_empty(self, directory: str) -> Optional[bool]:
        """
        Whether ``directory`` holds no entries.

        Returns ``None`` when the directory does not exist or cannot be read.
        """
        try:
            with os.scandir(directory) as entries:
                for _ in entries:
                    return False
        except OSError:
            return None
        return True

    def size_to_string(self, size: int) -> str:
        """Human readable file size, e.g. ``1.50 MB``."""
        if size >= 1024 ** 3:
            return f"{size / 1024 ** 3:,.2f} GB"
        if size >= 1024 ** 2:
            return f"{size / 1024 ** 2:,.2f} MB"
        if size >= 1024:
            return f"{size / 1024:,.2f} KB"
        if size > 1:
            return f"{size} bytes"
        if size == 1:
            return "1 byte"
        return "0 bytes"

    def size_to_bytes(self, size: str) -> Union[int, float]:
        """
        Convert a size such as ``"1 GB"``, ``"512K"`` or ``"2M"`` to bytes.

        Raises ``ValueError`` when the string cannot be parsed.
        """
        value = size.strip().lower()
        match = SIZE_PATTERN.match(value)
        if match is None:
            self.logger.warning(f"Invalid size format '{size}'")
            raise ValueError(f"Invalid size format '{size}'")

        unit = match.group(2) or 'bytes'
        if unit not in SIZE_UNITS:
            raise ValueError(f"Unknown size unit '{unit}'")

        result = float(match.group(1)) * SIZE_UNITS[unit]
        return int(result) if result.is_integer() else result

    def get_max_upload_size(self) -> Union[int, float]:
        """The smaller of the configured upload and post size limits, in bytes."""
        upload_max_size = self.size_to_bytes(str(config('filesystems.upload_max_filesize', '2M')))
        post_max_size = self.size_to_bytes(str(config('filesystems.post_max_size', '8M')))

        return post_max_size if float(upload_max_size) > float(post_max_size) else upload_max_size

    def local_to_public(self, path: str) -> Optional[str]:
        """
        Public URL path of a local absolute path, following symlinks inside
        the base path. ``None`` when the path is not publicly reachable.
        """
        public = public_path()

        if path.startswith(public):
            return self.normalize_path(path[len(public):])

        for source, target in self.get_symlinks().items():
            if path.startswith(target):
                relative = path[len(target):]
                return self.normalize_path(source[len(public):] + relative)

        return None

    def is_absolute_path(self, file: str) -> bool:
        if not file:
            return False
        if file[0] in '/\\':
            return True
        if len(file) > 3 and file[0].isalpha() and file[1] == ':' and file[2] in '/\\':
            return True
        try:
            return bool(urlparse(file).scheme)
        except ValueError:
            # Unparseable URLs count as absolute
            return True

    def is_local_path(self, path: str, realpath: bool = True) -> bool:
        """Whether ``path`` is inside the base path; ``realpath`` requires it to exist."""
        base = base_path()

        if realpath:
            if not os.path.exists(path):
                return False
            path = os.path.realpath(path)

        return path.startswith(base)

    def is_local_disk(self, disk: FilesystemAdapter) -> bool:
        return isinstance(disk, LocalFilesystemAdapter)

    def from_class(self, class_name: Union[type, Any]) -> Optional[str]:
        """Source file of a class (or of an instance's class)."""
        if not isinstance(class_name, type):
            class_name = class_name.__class__
        try:
            return inspect.getfile(class_name)
        except TypeError:
            return None

    def exists_insensitive(self, path: str) -> Optional[str]:
        """The path as stored on disk when only the case of the file name differs."""
        if self.exists(path):
            return path

        path_lower = path.lower()
        for file in self.glob(os.path.join(os.path.dirname(path), '*')):
            if file.lower() == path_lower:
                return file

        return None

    def normalize_path(self, path: str) -> str:
        return path.replace('\\', '/')

    def symbolize_path(self, path: str, default: Any = None) -> Any:
        """Expand a leading path symbol, e.g. ``~/config`` to ``<base>/config``."""
        if not self.is_path_symbol(path):
            return path if default is None else default

        return self.path_symbols[path[0]] + path[1:]

    def is_path_symbol(self, path: str) -> bool:
        return path[:1] in self.path_symbols

    def put(self, path: str, contents: Union[str, bytes], lock: bool = False) -> int:
        result = super().put(path, contents, lock)
        self.chmod(path)
        return result

    def copy(self, path: str, target: str) -> bool:
        result = super().copy(path, target)
        self.chmod(target)
        return result

    def make_directory(self, path: str, mode: int = 0o777, recursive: bool = False, force: bool = False) -> bool:
        """Create a directory, applying the folder mask to every created level."""
        mask = self.get_folder_permissions()
        if mask is not None:
            mode = mask

        # Top-most directory that does not exist yet
        chmod_path = path
        if recursive and mask is not None:
            while True:
                parent = os.path.dirname(chmod_path)
                if parent == chmod_path or self.is_directory(parent):
                    break
                chmod_path = parent

        result = super().make_directory(path, mode, recursive, force)

        if mask:
            self.chmod(chmod_path, mask)
            if recursive:
                self.chmod_recursive(chmod_path, None, mask)

        return result

    def chmod(self, path: str, mask: Optional[int] = None) -> bool:
        if not mask:
            mask = self.get_folder_permissions() if self.is_directory(path) else self.get_file_permissions()

        if not mask:
            return False

        try:
            os.chmod(path, mask)
        except OSError as e:
            self.logger.debug(f"chmod {oct(mask)} failed on {path}: {e}")
            return False
        return True

    def chmod_recursive(self, path: str, file_mask: Optional[int] = None, directory_mask: Optional[int] = None) -> None:
        if not file_mask:
            file_mask = self.get_file_permissions()

        if not directory_mask:
            directory_mask = self.get_folder_permissions() or file_mask

        if not file_mask:
            return

        if not self.is_directory(path):
            self.chmod(path, file_mask)
            return

        with os.scandir(path) as entries:
            for entry in entries:
                if entry.is_dir():
                    self.chmod(entry.path, directory_mask)
                    self.chmod_recursive(entry.path, file_mask, directory_mask)
                else:
                    self.chmod(entry.path, file_mask)

    def get_file_permissions(self) -> Optional[int]:
        return int(self.file_permissions, 8) if self.file_permissions else None

    def get_folder_permissions(self) -> Optional[int]:
        return int(self.folder_permissions, 8) if self.folder_permissions else None

    def file_name_match(self, file_name: str, pattern: str) -> bool:
        """Case-insensitive match where ``*`` and ``?`` are wildcards."""
        return Str.is_(pattern, file_name, ignore_case=True)

    def get_symlinks(self) -> Dict[str, str]:
        """Directory symlinks within the base path, as ``source -> target``."""
        if self._symlinks is None:
            self.find_symlinks()
        return self._symlinks or {}

    def find_symlinks(self) -> None:
        restrict_base_dir = config('cms.restrict_base_dir', True)
        deep = config('develop.allow_deep_symlinks', False)
        base = base_path()
        real_base = os.path.realpath(base)
        symlinks: Dict[str, str] = {}

        def walk(path: str) -> None:
            with os.scandir(path) as entries:
                for entry in sorted(entries, key=lambda item: item.name):
                    if not entry.is_dir():
                        continue

                    if entry.is_symlink():
                        target = self._resolve_symlink(entry.path)
                        if target is None:
                            self.logger.debug(f"Skipping unresolvable symlink {entry.path}")
                            continue
                        if restrict_base_dir and not (target + os.sep).startswith(real_base + os.sep):
                            self.logger.debug(f"Skipping symlink {entry.path} outside of the base path")
                            continue
                        symlinks[entry.path] = target
                        continue

                    if deep:
                        walk(entry.path)

        walk(base)
        self._symlinks = symlinks

    def _resolve_symlink(self, path: str) -> Optional[str]:
        link = os.readlink(path)
        for candidate in (link, os.path.join(os.path.dirname(path), link)):
            if os.path.exists(candidate):
                return os.path.realpath(candidate)
        return None


# Global filesystem helper instance
filesystem_instance: Optional[Filesystem] = None


def get_filesystem() -> Filesystem:
    """Get the global file helper, configured from the ``filesystems`` config."""
    global filesystem_instance
    if filesystem_instance is None:
        filesystem_instance = Filesystem(
            file_permissions=config('filesystems.default_file_mask') or None,
            folder_permissions=config('filesystems.default_folder_mask') or None,
            path_symbols={'~': base_path(), '$': storage_path()},
        )
    return filesystem_instance


def set_filesystem(filesystem: Optional[Filesystem]) -> None:
    global filesystem_instance
    filesystem_instance = filesystem
