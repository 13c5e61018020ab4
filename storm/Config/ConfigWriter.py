from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from storm.Config.Nodes import Arg, Array, ArrayItem, Assign, Call, Module, Name, Node, Raw, Scalar
from storm.Config.Printer import Standard
from storm.Config.Repository import ConfigRepository
from storm.Config.StormPrinter import StormPrinter

if TYPE_CHECKING:
    from storm.Filesystem.Filesystem import Filesystem


@dataclass
class EnvValue:
    """A value read from the environment when the config module is loaded."""
    key: str
    default: Any = None


class ConfigWriter:
    """
    Renders configuration values as a Python config module.

    Comments are keyed by dotted path, e.g. ``{'disks.local': 'Local disk'}``
    puts a comment above the ``'local'`` entry of the ``disks`` dict.
    """

    def __init__(self, printer: Optional[Standard] = None, filesystem: Optional[Filesystem] = None) -> None:
        from storm.Filesystem.Filesystem import get_filesystem

        self.printer = printer or StormPrinter()
        self.filesystem = filesystem or get_filesystem()
        self._uses_env = False
        self.logger = logging.getLogger(f"storm.{self.__class__.__name__}")

    def build(
        self,
        values: Dict[str, Any],
        comments: Optional[Dict[str, str]] = None,
        header: Optional[str] = None
    ) -> Module:
        comments = comments or {}
        self._uses_env = False

        statements: List[Node] = [
            Assign(key, self.to_node(value, key, comments), comments=self._comments_for(key, comments))
            for key, value in values.items()
        ]

        imports = 'from __future__ import annotations\n'
        if self._uses_env:
            imports += '\nimport os\n'

        return Module([Raw(imports)] + statements, comments=[header] if header else None)

    def to_node(self, value: Any, path: str = '', comments: Optional[Dict[str, str]] = None) -> Node:
        comments = comments or {}

        if isinstance(value, EnvValue):
            self._uses_env = True
            return Call(Name('os.getenv'), [Arg(Scalar(value.key)), Arg(self.to_node(value.default))])

        if isinstance(value, dict):
            items = []
            for key, item in value.items():
                item_path = f"{path}.{key}" if path else str(key)
                items.append(ArrayItem(
                    self.to_node(item, item_path, comments),
                    Scalar(key),
                    comments=self._comments_for(item_path, comments),
                ))
            return Array(items, 'dict')

        if isinstance(value, (list, tuple)):
            return Array([ArrayItem(self.to_node(item)) for item in value], 'list')

        if value is None or isinstance(value, (str, int, float, bool)):
            return Scalar(value)

        raise TypeError(f"Cannot write config value of type {type(value).__name__}")

    @staticmethod
    def _comments_for(path: str, comments: Dict[str, str]) -> Optional[List[str]]:
        return [comments[path]] if path in comments else None

    def render(
        self,
        values: Dict[str, Any],
        comments: Optional[Dict[str, str]] = None,
        header: Optional[str] = None
    ) -> str:
        return self.printer.pretty_print_file(self.build(values, comments, header))

    def write(
        self,
        path: str,
        values: Dict[str, Any],
        comments: Optional[Dict[str, str]] = None,
        header: Optional[str] = None
    ) -> str:
        """Write a config module to ``path`` and return its source."""
        code = self.render(values, comments, header)

        directory = os.path.dirname(path)
        if directory and not self.filesystem.is_directory(directory):
            self.filesystem.make_directory(directory, recursive=True, force=True)

        self.filesystem.put(path, code)
        self.logger.info(f"Wrote config file {path}")
        return code

    def update(self, path: str, changes: Dict[str, Any], comments: Optional[Dict[str, str]] = None) -> str:
        """
        Apply dotted-key ``changes`` to an existing config module and rewrite it.

        The current values are loaded by executing the module, so environment
        lookups are written back as their resolved values.
        """
        repository = ConfigRepository(items={})
        repository.set('file', repository.load_file(path))
        for key, value in changes.items():
            repository.set(f"file.{key}", value)

        return self.write(path, repository.get('file'), comments)
