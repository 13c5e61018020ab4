from __future__ import annotations

from typing import Self


class CanBeCounted:
    """Count only relations resolve to the number of related records."""

    _count_only: bool = False

    def count_only(self, value: bool = True) -> Self:
        self._count_only = value
        return self

    def is_count_only(self) -> bool:
        return self._count_only
