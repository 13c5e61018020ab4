from __future__ import annotations

import logging
import os
import shutil
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union


class FilesystemAdapter(ABC):
    """Abstract filesystem adapter."""

    @abstractmethod
    def exists(self, path: str) -> bool:
        pass

    @abstractmethod
    def get(self, path: str) -> bytes:
        pass

    @abstractmethod
    def put(self, path: str, contents: Union[str, bytes]) -> bool:
        pass

    @abstractmethod
    def delete(self, paths: Union[str, List[str]]) -> bool:
        pass

    @abstractmethod
    def copy(self, from_path: str, to_path: str) -> bool:
        pass

    @abstractmethod
    def size(self, path: str) -> int:
        pass

    @abstractmethod
    def files(self, directory: Optional[str] = None) -> List[str]:
        pass

    @abstractmethod
    def make_directory(self, path: str) -> bool:
        pass

    @abstractmethod
    def path(self, path: str) -> str:
        """Absolute location of ``path`` on the underlying storage."""
        pass


class LocalFilesystemAdapter(FilesystemAdapter):
    """Local filesystem adapter rooted at a directory."""

    def __init__(self, root: Union[str, Path] = '', url: Optional[str] = None) -> None:
        self.root = Path(root) if root else Path.cwd()
        self.url = url
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

    def __repr__(self) -> str:
        return f"<LocalFilesystemAdapter({self.root})>"

    def _full_path(self, path: str) -> Path:
        return self.root / path.lstrip('/')

    def path(self, path: str) -> str:
        return str(self._full_path(path))

    def exists(self, path: str) -> bool:
        return self._full_path(path).exists()

    def get(self, path: str) -> bytes:
        full_path = self._full_path(path)
        if not full_path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        return full_path.read_bytes()

    def put(self, path: str, contents: Union[str, bytes]) -> bool:
        full_path = self._full_path(path)
        try:
            full_path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(contents, str):
                full_path.write_text(contents, encoding='utf-8')
            else:
                full_path.write_bytes(contents)
        except OSError as e:
            self.logger.error(f"Unable to write {full_path}: {e}")
            return False
        return True

    def delete(self, paths: Union[str, List[str]]) -> bool:
        if isinstance(paths, str):
            paths = [paths]

        success = True
        for path in paths:
            full_path = self._full_path(path)
            try:
                if full_path.is_file() or full_path.is_symlink():
                    full_path.unlink()
            except OSError as e:
                self.logger.error(f"Unable to delete {full_path}: {e}")
                success = False
        return success

    def copy(self, from_path: str, to_path: str) -> bool:
        target = self._full_path(to_path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(self._full_path(from_path), target)
        except OSError as e:
            self.logger.error(f"Unable to copy {from_path} to {to_path}: {e}")
            return False
        return True

    def size(self, path: str) -> int:
        return self._full_path(path).stat().st_size

    def files(self, directory: Optional[str] = None) -> List[str]:
        base = self._full_path(directory or '')
        if not base.is_dir():
            return []
        return sorted(str(item.relative_to(self.root)) for item in base.iterdir() if item.is_file())

    def make_directory(self, path: str) -> bool:
        try:
            self._full_path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self.logger.error(f"Unable to create directory {path}: {e}")
            return False
        return True


class FilesystemManager:
    """
    Laravel-style filesystem manager.

    Disks are read from the ``filesystems`` configuration; relative roots are
    resolved against the application base path.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config is None:
            from storm.Config.Repository import config as config_value
            config = config_value('filesystems', {})
        self._config: Dict[str, Any] = config
        self._disks: Dict[str, FilesystemAdapter] = {}
        self._custom_drivers: Dict[str, Callable[[Dict[str, Any]], FilesystemAdapter]] = {}
        self._default_disk: str = config.get('default', 'local')

    def disk(self, name: Optional[str] = None) -> FilesystemAdapter:
        """Get a filesystem disk."""
        name = name or self._default_disk

        if name not in self._disks:
            self._disks[name] = self._create_disk(name)

        return self._disks[name]

    def _create_disk(self, name: str) -> FilesystemAdapter:
        config = self.disk_config(name)
        driver = config.get('driver', 'local')

        if driver in self._custom_drivers:
            return self._custom_drivers[driver](config)
        if driver == 'local':
            root = config.get('root', os.path.join('storage', 'app', name))
            if not os.path.isabs(root):
                from storm.Support.helpers import base_path
                root = base_path(root)
            return LocalFilesystemAdapter(root, config.get('url'))

        raise ValueError(f"Filesystem driver '{driver}' not supported")

    def extend(self, driver: str, creator: Callable[[Dict[str, Any]], FilesystemAdapter]) -> None:
        """Register a custom driver."""
        self._custom_drivers[driver] = creator

    def disk_config(self, disk: Optional[str] = None) -> Dict[str, Any]:
        return self._config.get('disks', {}).get(disk or self._default_disk, {})

    def forget_disk(self, name: str) -> None:
        self._disks.pop(name, None)


# Global filesystem manager instance
filesystem_manager_instance: Optional[FilesystemManager] = None


def get_filesystem_manager() -> FilesystemManager:
    """Get the global filesystem manager instance."""
    global filesystem_manager_instance
    if filesystem_manager_instance is None:
        filesystem_manager_instance = FilesystemManager()
    return filesystem_manager_instance


def set_filesystem_manager(manager: Optional[FilesystemManager]) -> None:
    global filesystem_manager_instance
    filesystem_manager_instance = manager


def storage(disk: Optional[str] = None) -> FilesystemAdapter:
    """Get a filesystem disk."""
    return get_filesystem_manager().disk(disk)
