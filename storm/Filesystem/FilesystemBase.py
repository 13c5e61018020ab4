from __future__ import annotations

import glob as globbing
import os
import shutil
from typing import List, Union


class FilesystemBase:
    """Plain local file operations, path based."""

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_file(self, path: str) -> bool:
        return os.path.isfile(path)

    def is_directory(self, path: str) -> bool:
        return os.path.isdir(path)

    def get(self, path: str) -> bytes:
        if not self.is_file(path):
            raise FileNotFoundError(f"File does not exist at path {path}")
        with open(path, 'rb') as handle:
            return handle.read()

    def put(self, path: str, contents: Union[str, bytes], lock: bool = False) -> int:
        """Write a file, returning the number of bytes written."""
        data = contents.encode('utf-8') if isinstance(contents, str) else contents
        with open(path, 'wb') as handle:
            if lock:
                import fcntl
                fcntl.flock(handle, fcntl.LOCK_EX)
            return handle.write(data)

    def copy(self, path: str, target: str) -> bool:
        shutil.copyfile(path, target)
        return True

    def delete(self, *paths: str) -> bool:
        success = True
        for path in paths:
            try:
                os.remove(path)
            except OSError:
                success = False
        return success

    def make_directory(self, path: str, mode: int = 0o777, recursive: bool = False, force: bool = False) -> bool:
        try:
            if recursive:
                os.makedirs(path, mode)
            else:
                os.mkdir(path, mode)
        except FileExistsError:
            if not force:
                raise
            return False
        return True

    def glob(self, pattern: str) -> List[str]:
        return globbing.glob(pattern)

    def size(self, path: str) -> int:
        return os.path.getsize(path)
