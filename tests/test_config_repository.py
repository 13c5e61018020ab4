from __future__ import annotations

import pytest
from pathlib import Path
from typing import Any, List, Tuple

from storm.Config import ConfigRepository, config, env

CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config'


class TestConfigRepository:
    """Test suite for the configuration repository."""

    @pytest.fixture
    def repository(self, tmp_path: Path) -> ConfigRepository:
        (tmp_path / '__init__.py').write_text('raise RuntimeError("never loaded")\n')
        (tmp_path / 'queue.py').write_text(
            "from __future__ import annotations\n"
            "\n"
            "import os\n"
            "\n"
            "_private = 'hidden'\n"
            "default = 'sync'\n"
            "connections = {'sync': {'driver': 'sync'}, 'redis': {'driver': 'redis', 'retry_after': 90}}\n"
            "\n"
            "def helper():\n"
            "    return 1\n"
        )
        return ConfigRepository(path=str(tmp_path))

    def test_loads_public_values(self, repository: ConfigRepository) -> None:
        assert repository.all() == {
            'queue': {
                'default': 'sync',
                'connections': {'sync': {'driver': 'sync'}, 'redis': {'driver': 'redis', 'retry_after': 90}},
            },
        }

    def test_dot_notation(self, repository: ConfigRepository) -> None:
        assert repository.get('queue.connections.redis.retry_after') == 90
        assert repository.get('queue.connections.sqs', 'missing') == 'missing'
        assert repository.has('queue.default')
        assert not repository.has('queue.default.driver')

    def test_set_and_forget(self, repository: ConfigRepository) -> None:
        repository.set('queue.connections.sqs.driver', 'sqs')
        assert repository.get('queue.connections.sqs') == {'driver': 'sqs'}

        repository.forget('queue.connections.sqs')
        assert not repository.has('queue.connections.sqs')

    def test_merge(self, repository: ConfigRepository) -> None:
        repository.merge('queue.connections.sync', {'after_commit': True})
        assert repository.get('queue.connections.sync') == {'driver': 'sync', 'after_commit': True}

    def test_observers(self, repository: ConfigRepository) -> None:
        changes: List[Tuple[str, Any]] = []
        repository.observe('queue.*', lambda key, value: changes.append((key, value)))

        repository.set('queue.default', 'redis')
        repository.set('cache.default', 'file')
        assert changes == [('queue.default', 'redis')]

    def test_reload(self, repository: ConfigRepository) -> None:
        repository.set('queue.default', 'redis')
        repository.reload()
        assert repository.get('queue.default') == 'sync'

    def test_missing_directory(self, tmp_path: Path) -> None:
        assert ConfigRepository(path=str(tmp_path / 'missing')).all() == {}

    def test_shipped_config(self) -> None:
        """The bundled config directory describes uploads, disks and limits."""
        repository = ConfigRepository(path=str(CONFIG_PATH))

        assert repository.get('cms.storage.uploads.folder') == 'uploads'
        assert repository.get('cms.storage.uploads.protected_path') == '/storage/app/uploads/protected'
        assert repository.get('filesystems.disks.local.driver') == 'local'
        assert repository.get('filesystems.upload_max_filesize')
        assert repository.has('develop.allow_deep_symlinks')
        assert 'testing' in repository.get('database.connections')

    def test_global_helpers(self, app_config: ConfigRepository, monkeypatch: pytest.MonkeyPatch) -> None:
        assert config() is app_config
        assert config('app.name') == 'Storm'

        monkeypatch.setenv('STORM_FLAG', 'true')
        monkeypatch.setenv('STORM_LIMIT', '25')
        monkeypatch.setenv('STORM_HOSTS', '["a", "b"]')
        monkeypatch.setenv('STORM_EMPTY', 'null')
        assert env('STORM_FLAG') is True
        assert env('STORM_LIMIT') == 25
        assert env('STORM_HOSTS') == ['a', 'b']
        assert env('STORM_EMPTY') is None
        assert env('STORM_UNSET', 'default') == 'default'
