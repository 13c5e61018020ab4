from __future__ import annotations

from .LogManager import (
    LogManager,
    LogChannel,
    LaravelFormatter,
    JsonFormatter,
    ChannelBridgeHandler,
    install_channel_bridge,
    get_log_manager,
    set_log_manager,
    logger,
    log_info,
    log_warning,
    log_error,
)

__all__ = [
    'LogManager',
    'LogChannel',
    'LaravelFormatter',
    'JsonFormatter',
    'ChannelBridgeHandler',
    'install_channel_bridge',
    'get_log_manager',
    'set_log_manager',
    'logger',
    'log_info',
    'log_warning',
    'log_error',
]
