from __future__ import annotations

from typing import Any, List, Optional, TYPE_CHECKING
from sqlalchemy import and_, or_

if TYPE_CHECKING:
    from storm.Database.Builder import Builder


class DeferOneOrMany:
    """Query support for deferred bindings held against a session key."""

    def with_deferred(self, session_key: Optional[str]) -> 'Builder[Any]':
        """
        Build a query that sees the committed relation overlaid with the
        pending adds and removes of ``session_key``.
        """
        query = self.new_query()
        condition = self.get_relation_condition()

        if session_key:
            adds: List[Any] = []
            removes: List[Any] = []
            for binding in self.parent.get_deferred_bindings(session_key, self.relation_name):
                (adds if binding.is_bind else removes).append(binding.slave_id)

            key_column = getattr(self.related, self.related.get_key_name())
            if removes:
                condition = and_(condition, key_column.not_in(removes))
            if adds:
                condition = or_(condition, key_column.in_(adds))

        return self.apply_defined_constraints(query.where(condition))
