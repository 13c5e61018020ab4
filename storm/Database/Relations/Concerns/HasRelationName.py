from __future__ import annotations

from typing import Optional


class HasRelationName:
    """Remembers the name a relation is registered under on its parent."""

    relation_name: Optional[str] = None

    def get_relation_name(self) -> Optional[str]:
        return self.relation_name

    def set_relation_name(self, name: str) -> None:
        self.relation_name = name
