from __future__ import annotations

from typing import Self


class CanBePushed:
    """Loaded related records are saved by ``Model.push()`` unless ``push`` is off."""

    _pushable: bool = True

    def push(self, value: bool = True) -> Self:
        self._pushable = value
        return self

    def is_pushable(self) -> bool:
        return self._pushable
