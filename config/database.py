from __future__ import annotations

import os
from typing import Any, Dict

# Default database connection
default = os.getenv('DB_CONNECTION', 'sqlite')

connections: Dict[str, Dict[str, Any]] = {
    'sqlite': {
        'driver': 'sqlite',
        'database': os.getenv('DB_DATABASE', 'storage/database.sqlite'),
        'foreign_key_constraints': True,
        'echo': os.getenv('DB_ECHO', '').lower() == 'true',
    },

    'testing': {
        'driver': 'sqlite',
        'database': ':memory:',
        'foreign_key_constraints': True,
        'echo': False,
    },

    'pgsql': {
        'driver': 'postgresql',
        'host': os.getenv('DB_HOST', 'localhost'),
        'port': int(os.getenv('DB_PORT', '5432')),
        'database': os.getenv('DB_DATABASE', 'storm'),
        'username': os.getenv('DB_USERNAME', 'postgres'),
        'password': os.getenv('DB_PASSWORD', ''),
        'echo': os.getenv('DB_ECHO', '').lower() == 'true',
    },

    'mysql': {
        'driver': 'mysql',
        'host': os.getenv('DB_HOST', 'localhost'),
        'port': int(os.getenv('DB_PORT', '3306')),
        'database': os.getenv('DB_DATABASE', 'storm'),
        'username': os.getenv('DB_USERNAME', 'root'),
        'password': os.getenv('DB_PASSWORD', ''),
        'charset': os.getenv('DB_CHARSET', 'utf8mb4'),
        'echo': os.getenv('DB_ECHO', '').lower() == 'true',
    },
}
