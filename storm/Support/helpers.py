from __future__ import annotations

import os

from storm.Config.Repository import config


def base_path(path: str = '') -> str:
    """Get the base path of the application."""
    base = str(config('app.base_path') or os.getcwd())
    return os.path.join(base, path) if path else base


def public_path(path: str = '') -> str:
    """Get the path to the public directory."""
    public = str(config('app.public_path') or os.path.join(base_path(), 'public'))
    return os.path.join(public, path) if path else public


def storage_path(path: str = '') -> str:
    """Get the path to the storage directory."""
    storage = str(config('app.storage_path') or os.path.join(base_path(), 'storage'))
    return os.path.join(storage, path) if path else storage
