from __future__ import annotations

import re
from typing import Dict, Pattern


class Str:
    """Laravel-style string helper class."""

    # Cache for compiled glob patterns
    _patterns: Dict[str, Pattern[str]] = {}

    @staticmethod
    def snake(value: str, delimiter: str = '_') -> str:
        """Convert a string to snake case."""
        value = re.sub(r'([a-z0-9])([A-Z])', rf'\1{delimiter}\2', value)
        value = re.sub(r'[^a-zA-Z0-9]', delimiter, value)
        value = value.lower()
        value = re.sub(f'{re.escape(delimiter)}+', delimiter, value)
        return value.strip(delimiter)

    @staticmethod
    def finish(value: str, cap: str) -> str:
        """Cap a string with a single instance of a given value."""
        return re.sub(f'(?:{re.escape(cap)})+$', '', value) + cap

    @classmethod
    def is_(cls, pattern: str, value: str, ignore_case: bool = False) -> bool:
        """Determine if a string matches a pattern where ``*`` and ``?`` are wildcards."""
        if pattern == value:
            return True

        cache_key = f"{int(ignore_case)}:{pattern}"
        if cache_key not in cls._patterns:
            regex = re.escape(pattern).replace(r'\*', '.*').replace(r'\?', '.')
            cls._patterns[cache_key] = re.compile(f'^{regex}$', re.IGNORECASE if ignore_case else 0)

        return cls._patterns[cache_key].match(value) is not None
