from __future__ import annotations

import pytest
from pathlib import Path

from storm.Config import ConfigRepository, ConfigWriter, EnvValue, Standard


class TestConfigWriter:
    """Test suite for writing config modules."""

    @pytest.fixture
    def writer(self) -> ConfigWriter:
        return ConfigWriter()

    def test_render(self, writer: ConfigWriter) -> None:
        code = writer.render(
            {'default': 'local', 'disks': {'local': {'driver': 'local', 'root': 'storage/app'}}},
            comments={'default': 'Default disk'},
            header='Generated filesystems config',
        )

        assert code == (
            "# Generated filesystems config\n"
            "\n"
            "from __future__ import annotations\n"
            "\n"
            "\n"
            "# Default disk\n"
            "\n"
            "default = 'local'\n"
            "disks = {\n"
            "    'local': {\n"
            "        'driver': 'local',\n"
            "        'root': 'storage/app',\n"
            "    },\n"
            "}\n"
        )

    def test_render_environment_values(self, writer: ConfigWriter) -> None:
        code = writer.render({'name': EnvValue('APP_NAME', 'Storm'), 'debug': False, 'hosts': ['a', 'b']})

        assert code.startswith('from __future__ import annotations\n\nimport os\n\n')
        assert "name = os.getenv('APP_NAME', 'Storm')\n" in code
        assert 'debug = False\n' in code

    def test_render_with_standard_printer(self) -> None:
        writer = ConfigWriter(printer=Standard())
        code = writer.render({'hosts': ['a', 'b'], 'retries': 3})

        assert code == (
            "from __future__ import annotations\n"
            "\n"
            "hosts = ['a', 'b']\n"
            "retries = 3\n"
        )

    def test_unsupported_value(self, writer: ConfigWriter) -> None:
        with pytest.raises(TypeError):
            writer.render({'value': object()})

    def test_written_module_loads_back(
        self,
        writer: ConfigWriter,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A written module is read by the repository with the same values."""
        monkeypatch.delenv('APP_NAME', raising=False)
        path = tmp_path / 'config' / 'app.py'

        writer.write(str(path), {
            'name': EnvValue('APP_NAME', 'Storm'),
            'debug': True,
            'providers': ['cache', 'queue'],
            'limits': {'upload': '2M', 'post': None, 'ratio': 1.5},
        })

        repository = ConfigRepository(path=str(tmp_path / 'config'))
        assert repository.get('app.name') == 'Storm'
        assert repository.get('app.debug') is True
        assert repository.get('app.providers') == ['cache', 'queue']
        assert repository.get('app.limits') == {'upload': '2M', 'post': None, 'ratio': 1.5}
        assert repository.get('app.annotations') is None

    def test_update(self, writer: ConfigWriter, tmp_path: Path) -> None:
        path = tmp_path / 'filesystems.py'
        writer.write(str(path), {'default': 'local', 'disks': {'local': {'root': 'storage/app'}}})

        code = writer.update(str(path), {'disks.local.root': 'storage/files', 'disks.public': {'root': 'public'}})

        assert "'root': 'storage/files'," in code
        values = ConfigRepository(items={}).load_file(path)
        assert values == {
            'default': 'local',
            'disks': {'local': {'root': 'storage/files'}, 'public': {'root': 'public'}},
        }
