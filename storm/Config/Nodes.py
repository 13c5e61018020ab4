from __future__ import annotations

from typing import Any, List, Optional, Union


class Comment:
    """A ``#`` comment, possibly spanning several lines."""

    def __init__(self, text: str) -> None:
        self.text = text

    def __repr__(self) -> str:
        return f"Comment({self.text!r})"

    def get_text(self) -> str:
        return self.text

    def get_reformatted_text(self) -> str:
        """
        The comment with its indentation stripped and every line prefixed
        by ``#``, joined with ``\\n``.
        """
        lines = []
        for line in self.text.strip().splitlines():
            line = line.strip()
            if not line.startswith('#'):
                line = f"# {line}" if line else '#'
            lines.append(line)
        return '\n'.join(lines)


class Node:
    """Base printer node; every node may carry leading comments."""

    def __init__(self, comments: Optional[List[Union[Comment, str]]] = None) -> None:
        self.comments: List[Comment] = [
            comment if isinstance(comment, Comment) else Comment(comment)
            for comment in (comments or [])
        ]

    def get_comments(self) -> List[Comment]:
        return self.comments

    def get_type(self) -> str:
        return self.__class__.__name__


class Scalar(Node):
    """A literal: string, number, boolean or ``None``."""

    def __init__(self, value: Any, comments: Optional[List[Union[Comment, str]]] = None) -> None:
        super().__init__(comments)
        self.value = value


class Name(Node):
    """A (possibly dotted) name printed as is, e.g. ``os.getenv``."""

    def __init__(self, name: str, comments: Optional[List[Union[Comment, str]]] = None) -> None:
        super().__init__(comments)
        self.name = name


class Raw(Node):
    """Source text printed verbatim."""

    def __init__(self, code: str, comments: Optional[List[Union[Comment, str]]] = None) -> None:
        super().__init__(comments)
        self.code = code


class ArrayItem(Node):
    """An entry of a dict (``key`` set) or list (``key`` is None)."""

    def __init__(
        self,
        value: Node,
        key: Optional[Node] = None,
        comments: Optional[List[Union[Comment, str]]] = None
    ) -> None:
        super().__init__(comments)
        self.value = value
        self.key = key


class Array(Node):
    """A dict or list literal."""

    def __init__(
        self,
        items: Optional[List[ArrayItem]] = None,
        kind: str = 'dict',
        comments: Optional[List[Union[Comment, str]]] = None
    ) -> None:
        super().__init__(comments)
        if kind not in ('dict', 'list'):
            raise ValueError(f"Unknown array kind [{kind}]")
        self.items = items or []
        self.kind = kind


class Arg(Node):
    """A call argument, positional or keyword."""

    def __init__(
        self,
        value: Node,
        name: Optional[str] = None,
        comments: Optional[List[Union[Comment, str]]] = None
    ) -> None:
        super().__init__(comments)
        self.value = value
        self.name = name


class Call(Node):
    def __init__(
        self,
        func: Node,
        args: Optional[List[Arg]] = None,
        comments: Optional[List[Union[Comment, str]]] = None
    ) -> None:
        super().__init__(comments)
        self.func = func
        self.args = args or []


class Assign(Node):
    """A module level assignment, optionally annotated."""

    def __init__(
        self,
        target: str,
        value: Node,
        annotation: Optional[str] = None,
        comments: Optional[List[Union[Comment, str]]] = None
    ) -> None:
        super().__init__(comments)
        self.target = target
        self.value = value
        self.annotation = annotation


class Module(Node):
    """A whole file: a list of statements."""

    def __init__(self, body: Optional[List[Node]] = None, comments: Optional[List[Union[Comment, str]]] = None) -> None:
        super().__init__(comments)
        self.body = body or []
