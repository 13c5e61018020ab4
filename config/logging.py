from __future__ import annotations

import os
from typing import Any, Dict

# Default log channel
default = os.getenv('LOG_CHANNEL', 'stack')

channels: Dict[str, Dict[str, Any]] = {
    'stack': {
        'driver': 'stack',
        'channels': ['single'],
    },

    'single': {
        'driver': 'single',
        'path': 'storage/logs/storm.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
    },

    'daily': {
        'driver': 'daily',
        'path': 'storage/logs/storm.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'days': 14,
    },

    'stderr': {
        'driver': 'stderr',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'formatter': 'laravel',
    },

    'json': {
        'driver': 'single',
        'path': 'storage/logs/json.log',
        'level': os.getenv('LOG_LEVEL', 'debug'),
        'formatter': 'json',
    },
}
