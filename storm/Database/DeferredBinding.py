from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Optional
from sqlalchemy import String, Integer, Boolean, Text, select
from sqlalchemy.orm import Mapped, mapped_column

from storm.Database.Model import Model
from storm.Log import log_info


class DeferredBinding(Model):
    """
    One pending relation change held against a session key.

    ``is_bind`` is True for a pending add and False for a pending removal.
    Rows of one session key ordered by id form the change ledger replayed
    by ``Model.save(session_key=...)``.
    """

    __tablename__ = 'deferred_bindings'

    master_type: Mapped[str] = mapped_column(String(255), index=True)
    master_field: Mapped[str] = mapped_column(String(255), index=True)
    slave_type: Mapped[str] = mapped_column(String(255))
    slave_id: Mapped[int] = mapped_column(Integer, index=True)
    session_key: Mapped[str] = mapped_column(String(255), index=True)
    is_bind: Mapped[bool] = mapped_column(Boolean, default=True)
    pivot_data: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __fillable__ = ['master_type', 'master_field', 'slave_type', 'slave_id', 'session_key', 'is_bind', 'pivot_data']

    def __repr__(self) -> str:
        action = 'bind' if self.is_bind else 'unbind'
        return f"<DeferredBinding({action} {self.master_type}.{self.master_field} -> {self.slave_type}#{self.slave_id})>"

    @classmethod
    def record(
        cls,
        master_type: str,
        master_field: str,
        slave_type: str,
        slave_id: Any,
        session_key: str,
        is_bind: bool,
        pivot_data: Optional[str] = None
    ) -> Optional['DeferredBinding']:
        """
        Append a change to the ledger.

        A repeated change is skipped; a change opposite to the pending one
        cancels it instead of stacking. Returns the new row, if any.
        """
        existing = cls.query().where('master_type', '=', master_type) \
            .where('master_field', '=', master_field) \
            .where('slave_type', '=', slave_type) \
            .where('slave_id', '=', slave_id) \
            .where('session_key', '=', session_key) \
            .order_by('id', 'desc') \
            .first()

        if existing is not None:
            if existing.is_bind != is_bind:
                existing.delete_cancel()
            return None

        binding = cls(
            master_type=master_type,
            master_field=master_field,
            slave_type=slave_type,
            slave_id=slave_id,
            session_key=session_key,
            is_bind=is_bind,
            pivot_data=pivot_data,
        )
        binding.save()
        return binding

    def get_slave(self) -> Optional[Model]:
        return self.resolve_model(self.slave_type).find(self.slave_id)

    def delete_cancel(self) -> None:
        """Delete the binding along with the orphaned record of a cancelled add."""
        self._delete_slave_record()
        self.delete()

    def _delete_slave_record(self) -> None:
        if not self.is_bind:
            return

        master = self.resolve_model(self.master_type)
        if not master.has_relation(self.master_field):
            return

        relation = master().relation(self.master_field)
        if not relation.is_dependent():
            return

        slave = self.get_slave()
        foreign_key = getattr(relation, 'foreign_key', None)
        # Only records that never got an owner are removed
        if slave is not None and foreign_key and getattr(slave, foreign_key, None) is None:
            slave.delete()

    @classmethod
    def cancel_deferred_actions(cls, master_type: str, session_key: str) -> int:
        bindings = cls.query().where('master_type', '=', master_type) \
            .where('session_key', '=', session_key) \
            .get()
        for binding in bindings:
            binding.delete_cancel()
        return bindings.count()

    @classmethod
    def clean_orphan_bindings(cls, days: int = 5) -> int:
        """Cancel ledger entries older than ``days`` days."""
        # Timestamps are written by the database in UTC
        cutoff = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=days)
        bindings = cls.resolve_session().scalars(
            select(cls).where(cls.created_at < cutoff).order_by(cls.id)
        ).all()

        for binding in bindings:
            binding.delete_cancel()

        if bindings:
            log_info(f"Cleaned {len(bindings)} orphan deferred bindings", {'days': days})
        return len(bindings)
