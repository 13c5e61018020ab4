from __future__ import annotations

from typing import Self


class CanBeDependent:
    """Related records are deleted together with the parent (``delete`` option)."""

    _dependent: bool = False

    def dependent(self, value: bool = True) -> Self:
        self._dependent = value
        return self

    def is_dependent(self) -> bool:
        return self._dependent
