from __future__ import annotations

import pytest
from pathlib import Path
from typing import Any, Dict, Iterator

from storm.Config.Repository import ConfigRepository, set_config
from storm.Database import DatabaseManager, Model, set_database_manager
from storm.Filesystem import set_filesystem, set_filesystem_manager
from storm.Log import set_log_manager

# Registers the fixture tables on the model metadata
import tests.fixtures.models  # noqa: F401


def make_config(base: Path) -> Dict[str, Any]:
    """Configuration of an application rooted at ``base``."""
    return {
        'app': {
            'name': 'Storm',
            'env': 'testing',
            'base_path': str(base),
            'public_path': str(base / 'public'),
            'storage_path': str(base / 'storage'),
        },
        'cms': {
            'restrict_base_dir': True,
            'storage': {
                'uploads': {
                    'disk': 'local',
                    'folder': 'uploads',
                    'path': '/storage/app/uploads',
                    'protected_path': '/storage/app/uploads/protected',
                },
            },
        },
        'develop': {
            'allow_deep_symlinks': False,
        },
        'filesystems': {
            'default': 'local',
            'disks': {
                'local': {'driver': 'local', 'root': str(base / 'storage' / 'app')},
                'public': {'driver': 'local', 'root': 'public', 'url': '/'},
            },
            'default_file_mask': '',
            'default_folder_mask': '',
            'upload_max_filesize': '2M',
            'post_max_size': '8M',
        },
        'database': {
            'default': 'testing',
            'connections': {
                'testing': {'driver': 'sqlite', 'database': ':memory:', 'echo': False},
            },
        },
        'logging': {
            'default': 'single',
            'channels': {
                'single': {
                    'driver': 'single',
                    'path': str(base / 'storage' / 'logs' / 'storm.log'),
                    'level': 'debug',
                },
            },
        },
    }


@pytest.fixture(autouse=True)
def app_config(tmp_path: Path) -> Iterator[ConfigRepository]:
    """Fresh configuration, database and filesystem for every test."""
    repository = ConfigRepository(items=make_config(tmp_path))
    set_config(repository)
    set_log_manager(None)
    set_filesystem(None)
    set_filesystem_manager(None)

    manager = DatabaseManager(repository.get('database'))
    set_database_manager(manager)
    manager.create_all()

    yield repository

    Model.reguard()
    manager.purge()
    set_database_manager(None)
    set_filesystem_manager(None)
    set_filesystem(None)
    set_log_manager(None)
    set_config(None)


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    return tmp_path / 'storage' / 'logs' / 'storm.log'
