from __future__ import annotations

import json
import pytest
from pathlib import Path

from storm.Filesystem import Filesystem
from storm.Log import LogManager, get_log_manager, log_error, log_info, logger
from tests.fixtures.models import Author, Phone


class TestLogManager:
    """Test suite for log channels."""

    def test_default_channel_writes_laravel_format(self, log_file: Path) -> None:
        log_info('Stored file', {'disk': 'local'})

        line = log_file.read_text().strip()
        assert '] storm.single.INFO: Stored file {"disk": "local"}' in line

    def test_channel_level(self, tmp_path: Path) -> None:
        path = tmp_path / 'warnings.log'
        manager = LogManager({
            'default': 'warnings',
            'channels': {'warnings': {'driver': 'single', 'path': str(path), 'level': 'warning'}},
        })

        manager.info('ignored')
        manager.warning('kept')
        assert path.read_text().count('\n') == 1
        assert 'storm.warnings.WARNING: kept' in path.read_text()

    def test_json_formatter(self, tmp_path: Path) -> None:
        path = tmp_path / 'json.log'
        manager = LogManager({
            'channels': {'json': {'driver': 'single', 'path': str(path), 'formatter': 'json'}},
        })

        manager.channel('json').error('Upload failed', {'file': 'a.png'})
        entry = json.loads(path.read_text())
        assert entry['level'] == 'ERROR'
        assert entry['channel'] == 'storm.json'
        assert entry['message'] == 'Upload failed'
        assert entry['context'] == {'file': 'a.png'}

    def test_stack_channel(self, tmp_path: Path) -> None:
        path = tmp_path / 'stack.log'
        manager = LogManager({
            'default': 'stack',
            'channels': {
                'stack': {'driver': 'stack', 'channels': ['single']},
                'single': {'driver': 'single', 'path': str(path)},
            },
        })

        manager.error('through the stack')
        assert 'storm.stack.ERROR: through the stack' in path.read_text()

    def test_forget_channel(self, tmp_path: Path) -> None:
        manager = LogManager({'channels': {'single': {'driver': 'single', 'path': str(tmp_path / 'a.log')}}})
        channel = manager.channel('single')

        manager.forget_channel('single')
        assert channel.logger.handlers == []
        assert manager.channel('single') is not channel

    def test_global_helpers(self, log_file: Path) -> None:
        assert get_log_manager() is get_log_manager()
        logger().debug('debugging')
        log_error('broken')

        contents = log_file.read_text()
        assert 'storm.single.DEBUG: debugging' in contents
        assert 'storm.single.ERROR: broken' in contents

    def test_log_with_level_name(self, log_file: Path) -> None:
        logger('single').log('critical', 'on fire')
        assert 'storm.single.CRITICAL: on fire' in log_file.read_text()

    def test_unknown_level_name(self) -> None:
        with pytest.raises(AttributeError):
            logger().log('loud', 'message')

    def test_component_messages_reach_default_channel(self, log_file: Path) -> None:
        author = Author.create(name='Stevie')
        Phone.create(number='0404040404', author_id=author.id)
        second = Phone.create(number='0505050505')

        author.set_related('phone', second)
        author.save()
        with pytest.raises(ValueError):
            Filesystem().size_to_bytes('lots')

        contents = log_file.read_text()
        assert 'storm.HasOne.DEBUG: phone: released 1 previous holder(s)' in contents
        assert "storm.Filesystem.WARNING: Invalid size format 'lots'" in contents
