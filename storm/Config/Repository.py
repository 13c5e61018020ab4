from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional
from pathlib import Path
from types import ModuleType
import __future__
import importlib.util
import json
import logging
import os


class ConfigRepository:
    """Laravel-style configuration repository.

    Every ``*.py`` module of the config directory becomes a namespace named
    after the file, so ``config/cms.py`` is reached as ``config.get('cms.x')``.
    """

    def __init__(self, path: Optional[str] = None, items: Optional[Dict[str, Any]] = None) -> None:
        self._path = path
        self._config: Dict[str, Any] = {}
        self._observers: Dict[str, List[Callable[[str, Any], None]]] = {}
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

        if items is not None:
            self._config.update(items)
        else:
            self._load_config()

    @property
    def path(self) -> Path:
        """Directory the configuration modules are loaded from."""
        if self._path:
            return Path(self._path)
        return Path(os.getenv('STORM_CONFIG_PATH', Path.cwd() / 'config'))

    def _load_config(self) -> None:
        """Load configuration from files."""
        config_dir = self.path
        if not config_dir.is_dir():
            self.logger.debug("Config directory %s not found", config_dir)
            return

        for config_file in sorted(config_dir.glob("*.py")):
            if config_file.name == "__init__.py":
                continue
            self._config[config_file.stem] = self._load_python_config(config_file)

    def load_file(self, config_file: Path) -> Dict[str, Any]:
        """Values of a single config module, without registering them."""
        return self._load_python_config(Path(config_file))

    def _load_python_config(self, config_file: Path) -> Dict[str, Any]:
        """Execute a config module and collect its public values."""
        spec = importlib.util.spec_from_file_location(f"_storm_config_{config_file.stem}", config_file)
        if spec is None or spec.loader is None:
            raise ImportError(f"Unable to load config file {config_file}")

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        return {
            key: value for key, value in module.__dict__.items()
            if not key.startswith('_')
            and not callable(value)
            and not isinstance(value, (ModuleType, __future__._Feature))
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value using dot notation."""
        value: Any = self._config

        for k in key.split('.'):
            if not isinstance(value, dict) or k not in value:
                return default
            value = value[k]

        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value using dot notation."""
        keys = key.split('.')
        config = self._config

        # Navigate to the parent
        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

        self._notify_observers(key, value)

    def has(self, key: str) -> bool:
        """Check if a configuration key exists."""
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def all(self) -> Dict[str, Any]:
        """Get all configuration."""
        return self._config.copy()

    def forget(self, key: str) -> None:
        """Remove a configuration value."""
        keys = key.split('.')
        config = self._config

        try:
            for k in keys[:-1]:
                config = config[k]
            config.pop(keys[-1], None)
        except (KeyError, TypeError, AttributeError):
            pass

    def merge(self, key: str, values: Dict[str, Any]) -> None:
        """Merge values into a configuration array."""
        current = self.get(key, {})
        if isinstance(current, dict):
            current = {**current, **values}
            self.set(key, current)

    def observe(self, key: str, callback: Callable[[str, Any], None]) -> None:
        """Register an observer for configuration changes."""
        self._observers.setdefault(key, []).append(callback)

    def _notify_observers(self, key: str, new_value: Any) -> None:
        """Notify observers of configuration changes."""
        for observer_key, observers in self._observers.items():
            if observer_key == key or (observer_key.endswith('*') and key.startswith(observer_key[:-1])):
                for observer in observers:
                    observer(key, new_value)

    def reload(self) -> None:
        """Reload all configuration from files."""
        self._config.clear()
        self._load_config()

    def _convert_env_value(self, value: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if value.lower() in ('true', 'false'):
            return value.lower() == 'true'

        if value.lower() in ('null', 'none', ''):
            return None

        try:
            if '.' in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        if value.startswith(('{', '[')):
            try:
                return json.loads(value)
            except json.JSONDecodeError:
                pass

        return value


# Global config instance, loaded on first use
config_instance: Optional[ConfigRepository] = None


def get_config() -> ConfigRepository:
    """Get the global configuration repository."""
    global config_instance
    if config_instance is None:
        config_instance = ConfigRepository()
    return config_instance


def set_config(repository: Optional[ConfigRepository]) -> None:
    """Swap the global configuration repository (None reloads on next use)."""
    global config_instance
    config_instance = repository


def config(key: Optional[str] = None, default: Any = None) -> Any:
    """Get a configuration value, or the repository when no key is given."""
    if key is None:
        return get_config()
    return get_config().get(key, default)


def env(key: str, default: Any = None) -> Any:
    """Get environment variable with type conversion."""
    value = os.getenv(key)
    if value is None:
        return default
    return get_config()._convert_env_value(value)
