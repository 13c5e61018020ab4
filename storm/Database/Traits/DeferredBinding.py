from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from storm.Database.Model import Model
    from storm.Database.DeferredBinding import DeferredBinding as DeferredBindingModel

logger = logging.getLogger(__name__)


class DeferredBinding:
    """
    Model mixin that holds relation changes against a session key until the
    model is saved with that key.

    Usage:
        post.relation('cover').add(file, session_key)
        post.save(session_key=session_key)
    """

    def bind_deferred(
        self,
        relation_name: str,
        record: 'Model',
        session_key: str,
        pivot_data: Optional[Dict[str, Any]] = None
    ) -> Optional['DeferredBindingModel']:
        """Record a pending add of ``record`` to ``relation_name``."""
        return self._record_binding(relation_name, record, session_key, True, pivot_data)

    def unbind_deferred(self, relation_name: str, record: 'Model', session_key: str) -> Optional['DeferredBindingModel']:
        """Record a pending removal of ``record`` from ``relation_name``."""
        return self._record_binding(relation_name, record, session_key, False)

    def _record_binding(
        self,
        relation_name: str,
        record: 'Model',
        session_key: str,
        is_bind: bool,
        pivot_data: Optional[Dict[str, Any]] = None
    ) -> Optional['DeferredBindingModel']:
        from storm.Database.DeferredBinding import DeferredBinding as DeferredBindingModel

        if not record.exists:
            record.save()

        return DeferredBindingModel.record(
            master_type=self.get_morph_class(),
            master_field=relation_name,
            slave_type=record.get_morph_class(),
            slave_id=record.get_key(),
            session_key=session_key,
            is_bind=is_bind,
            pivot_data=json.dumps(pivot_data) if pivot_data else None,
        )

    def get_deferred_bindings(self, session_key: str, relation_name: Optional[str] = None) -> List['DeferredBindingModel']:
        """The ledger of ``session_key`` for this model class, oldest first."""
        from storm.Database.DeferredBinding import DeferredBinding as DeferredBindingModel

        query = DeferredBindingModel.query() \
            .where('master_type', '=', self.get_morph_class()) \
            .where('session_key', '=', session_key)
        if relation_name is not None:
            query.where('master_field', '=', relation_name)

        return query.order_by('id').get().all()

    def has_deferred(self, session_key: Optional[str], relation_name: Optional[str] = None) -> bool:
        if not session_key:
            return False
        return len(self.get_deferred_bindings(session_key, relation_name)) > 0

    def commit_deferred(self, session_key: Optional[str]) -> None:
        """Replay the ledger of ``session_key`` against the real relations, then clear it."""
        if not session_key:
            return

        for binding in self.get_deferred_bindings(session_key):
            relation_name = binding.master_field
            if not relation_name or not self.has_relation(relation_name):
                continue

            slave = binding.get_slave()
            if slave is None:
                binding.delete()
                continue

            relation = self.relation(relation_name)
            if binding.is_bind:
                relation.add(slave)
            else:
                relation.remove(slave)

            logger.debug(
                f"Committed deferred {'bind' if binding.is_bind else 'unbind'} "
                f"of {binding.slave_type}#{binding.slave_id} to {relation_name}"
            )
            binding.delete()

    def cancel_deferred(self, session_key: Optional[str]) -> int:
        """Drop the ledger of ``session_key`` without applying it."""
        from storm.Database.DeferredBinding import DeferredBinding as DeferredBindingModel

        if not session_key:
            return 0
        return DeferredBindingModel.cancel_deferred_actions(self.get_morph_class(), session_key)
