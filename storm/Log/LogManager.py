from __future__ import annotations

import logging
import logging.handlers
from typing import Any, Dict, Optional, Union, List
from pathlib import Path
from datetime import datetime
import json
import sys


class LogChannel:
    """Laravel-style log channel."""

    def __init__(self, name: str, handlers: List[logging.Handler], level: Union[str, int] = logging.INFO) -> None:
        self.name = name
        self.logger = logging.getLogger(f"storm.{name}")
        self.logger.setLevel(level.upper() if isinstance(level, str) else level)
        for handler in list(self.logger.handlers):
            self.logger.removeHandler(handler)
        for handler in handlers:
            self.logger.addHandler(handler)
        self.logger.propagate = False

    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message."""
        self._log(logging.DEBUG, message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log info message."""
        self._log(logging.INFO, message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message."""
        self._log(logging.WARNING, message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log error message."""
        self._log(logging.ERROR, message, context)

    def critical(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log critical message."""
        self._log(logging.CRITICAL, message, context)

    def log(self, level: Union[str, int], message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """Log message at specified level."""
        if isinstance(level, str):
            level = getattr(logging, level.upper())
        self._log(level, message, context)

    def _log(self, level: int, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        extra = {'context': context} if context else {}
        self.logger.log(level, message, extra=extra)


class LaravelFormatter(logging.Formatter):
    """Formats records as ``[2024-01-01 10:00:00] channel.LEVEL: message {context}``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S')
        log_line = f"[{timestamp}] {record.name}.{record.levelname}: {record.getMessage()}"

        context = getattr(record, 'context', {})
        if context:
            log_line += f" {json.dumps(context, default=str)}"

        if record.exc_info:
            log_line += f"\n{self.formatException(record.exc_info)}"

        return log_line


class JsonFormatter(logging.Formatter):
    """JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'channel': record.name,
            'message': record.getMessage(),
            'context': getattr(record, 'context', {}),
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class LogManager:
    """Builds log channels from the ``logging`` configuration."""

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        if config is None:
            from storm.Config.Repository import config as config_value
            config = config_value('logging', {})
        self._config: Dict[str, Any] = config
        self._channels: Dict[str, LogChannel] = {}
        self._default_channel: str = self._config.get('default', 'stderr')

    def channel(self, name: Optional[str] = None) -> LogChannel:
        """Get a log channel."""
        name = name or self._default_channel

        if name not in self._channels:
            self._channels[name] = self._create_channel(name)

        return self._channels[name]

    def _create_channel(self, name: str) -> LogChannel:
        config = self._config.get('channels', {}).get(name, {'driver': 'stderr'})
        level = config.get('level', logging.INFO)
        return LogChannel(name, self._create_handlers(name, config), level)

    def _create_handlers(self, name: str, config: Dict[str, Any]) -> List[logging.Handler]:
        driver = config.get('driver', 'single')

        if driver == 'stack':
            handlers: List[logging.Handler] = []
            for channel_name in config.get('channels', []):
                handlers.extend(self.channel(channel_name).logger.handlers)
            return handlers

        if driver == 'stderr':
            handler: logging.Handler = logging.StreamHandler(sys.stderr)
        elif driver == 'daily':
            path = self._ensure_path(config.get('path', f'storage/logs/{name}.log'))
            handler = logging.handlers.TimedRotatingFileHandler(
                path, when='midnight', interval=1, backupCount=config.get('days', 14)
            )
        else:
            path = self._ensure_path(config.get('path', f'storage/logs/{name}.log'))
            handler = logging.FileHandler(path)

        handler.setFormatter(self._get_formatter(config))
        return [handler]

    def _ensure_path(self, path: str) -> str:
        Path(path).parent.mkdir(parents=True, exist_ok=True)
        return path

    def _get_formatter(self, config: Dict[str, Any]) -> logging.Formatter:
        if config.get('formatter') == 'json':
            return JsonFormatter()
        return LaravelFormatter()

    def forget_channel(self, name: str) -> None:
        """Remove a channel."""
        channel = self._channels.pop(name, None)
        if channel is not None:
            for handler in list(channel.logger.handlers):
                channel.logger.removeHandler(handler)

    # Proxy methods to default channel
    def debug(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().debug(message, context)

    def info(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().info(message, context)

    def warning(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().warning(message, context)

    def error(self, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        self.channel().error(message, context)


class ChannelBridgeHandler(logging.Handler):
    """Hands records of ``storm.*`` component loggers to the default channel."""

    def __init__(self) -> None:
        super().__init__()
        self._forwarding = False

    def emit(self, record: logging.LogRecord) -> None:
        # Records logged while the manager itself is being built are dropped
        if self._forwarding:
            return

        self._forwarding = True
        try:
            channel = get_log_manager().channel()
            if channel.logger.isEnabledFor(record.levelno):
                channel.logger.handle(record)
        except Exception:
            self.handleError(record)
        finally:
            self._forwarding = False


def install_channel_bridge() -> None:
    """Route the ``storm`` logger hierarchy through the configured channels."""
    root = logging.getLogger('storm')
    root.setLevel(logging.DEBUG)
    if not any(isinstance(handler, ChannelBridgeHandler) for handler in root.handlers):
        root.addHandler(ChannelBridgeHandler())


# Global log manager instance
log_manager_instance: Optional[LogManager] = None


def get_log_manager() -> LogManager:
    """Get the global log manager instance."""
    global log_manager_instance
    if log_manager_instance is None:
        log_manager_instance = LogManager()
    return log_manager_instance


def set_log_manager(manager: Optional[LogManager]) -> None:
    global log_manager_instance
    log_manager_instance = manager


def logger(channel: Optional[str] = None) -> LogChannel:
    """Get a log channel."""
    return get_log_manager().channel(channel)


def log_info(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    get_log_manager().info(message, context)


def log_warning(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    get_log_manager().warning(message, context)


def log_error(message: str, context: Optional[Dict[str, Any]] = None) -> None:
    get_log_manager().error(message, context)
