from __future__ import annotations

from typing import Any, ClassVar, Dict, List, Optional, Union, TYPE_CHECKING
from sqlalchemy import select

from storm.Database.Exceptions import ColumnMismatchError
from storm.Database.Model import relation
from storm.Database.TreeCollection import TreeCollection

if TYPE_CHECKING:
    from storm.Database.Relations import BelongsTo, HasMany


class SimpleTree:
    """
    Adjacency list tree for models with a ``parent_id`` column.

    Usage:
        class Category(SimpleTree, Model):
            __tablename__ = 'categories'

            name: Mapped[str] = mapped_column(String(255))
            parent_id: Mapped[Optional[int]] = mapped_column(nullable=True, index=True)

    Models using a different column name set ``PARENT_ID``.
    """

    PARENT_ID: ClassVar[str] = 'parent_id'

    __collection_class__ = TreeCollection

    @relation
    def children(self) -> 'HasMany[Any]':
        return self.has_many(self.__class__, key=self.get_parent_column_name())

    @relation
    def parent(self) -> 'BelongsTo[Any]':
        return self.belongs_to(self.__class__, key=self.get_parent_column_name())

    @classmethod
    def get_parent_column_name(cls) -> str:
        return cls.PARENT_ID

    def get_parent_id(self) -> Any:
        return getattr(self, self.get_parent_column_name())

    def get_parent(self) -> Optional[Any]:
        return self.get_related('parent')

    def get_children(self) -> TreeCollection[Any]:
        """Direct children, loaded on first access."""
        return self.get_related('children')

    def get_child_count(self) -> int:
        """Number of all descendants."""
        return self.get_all_children().count()

    def get_all_children(self) -> TreeCollection[Any]:
        """All descendants, depth first."""
        result: List[Any] = []
        for child in self.get_children():
            result.append(child)
            result.extend(child.get_all_children())
        return TreeCollection(result)

    @classmethod
    def get_all_root(cls) -> TreeCollection[Any]:
        """Root nodes, without their children loaded."""
        return cls.query().where_null(cls.get_parent_column_name()).order_by(cls.get_key_name()).get()

    @classmethod
    def get_nested(cls) -> TreeCollection[Any]:
        """Root nodes with ``children`` loaded on every level from a single query."""
        return cls.query().order_by(cls.get_key_name()).get().to_nested()

    @classmethod
    def lists_nested(
        cls,
        column: str,
        key: Optional[str] = None,
        indent: str = '&nbsp;&nbsp;&nbsp;'
    ) -> Union[Dict[Any, str], List[str]]:
        """
        Indented listing of ``column`` for the whole tree.

        Only table columns can be listed, without loading models; use
        ``TreeCollection.lists_nested`` for computed attributes.
        """
        table_columns = cls.__table__.columns
        id_name = cls.get_key_name()
        parent_name = cls.get_parent_column_name()
        for name in (column, key, id_name, parent_name):
            if name is not None and name not in table_columns:
                raise ColumnMismatchError(
                    'Column mismatch in lists_nested method. Are you sure the columns exist?'
                )

        selected = [table_columns[id_name], table_columns[parent_name], table_columns[column]]
        if key is not None:
            selected.append(table_columns[key])

        rows = cls.resolve_session().execute(select(*selected).order_by(table_columns[id_name])).all()

        children: Dict[Any, List[Any]] = {}
        for row in rows:
            children.setdefault(row[1], []).append(row)

        keyed: Dict[Any, str] = {}
        listed: List[str] = []

        def build(parent_key: Any, depth: int) -> None:
            for row in children.get(parent_key, []):
                text = indent * depth + str(row[2])
                if key is not None:
                    keyed.setdefault(row[3], text)
                else:
                    listed.append(text)
                build(row[0], depth + 1)

        build(None, 0)
        return keyed if key is not None else listed
