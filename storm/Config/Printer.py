from __future__ import annotations

import re
from typing import List, Optional, Sequence

from storm.Config.Nodes import (
    Arg, Array, ArrayItem, Assign, Call, Comment, Module, Name, Node, Raw, Scalar
)


class Standard:
    """
    Pretty printer for Python configuration modules.

    Printing dispatches on the node type to ``p_<NodeType>`` methods and
    keeps the current line break (``nl``) in sync with the indentation, so
    nested structures only ever append ``self.nl``.
    """

    INDENT = '    '

    def __init__(self) -> None:
        self.reset_state()

    def reset_state(self) -> None:
        self.indent_level = 0
        self.nl = '\n'

    def indent(self) -> None:
        self.indent_level += len(self.INDENT)
        self.nl += self.INDENT

    def outdent(self) -> None:
        if self.indent_level < len(self.INDENT):
            raise RuntimeError('Cannot outdent below the top level')
        self.indent_level -= len(self.INDENT)
        self.nl = '\n' + ' ' * self.indent_level

    def pretty_print(self, stmts: Sequence[Node]) -> str:
        """Print statements, without a leading or trailing line break."""
        self.reset_state()
        return self.p_stmts(stmts, indent=False).lstrip('\n')

    def pretty_print_file(self, module: Module) -> str:
        """Print a whole module, ending with a single line break."""
        body: List[Node] = list(module.body)
        code = self.pretty_print(body)
        if module.get_comments():
            header = '\n'.join(comment.get_reformatted_text() for comment in module.get_comments())
            code = header + '\n\n' + code

        # Indentation of blank lines is noise
        code = re.sub(r'[ \t]+$', '', code, flags=re.MULTILINE)
        return code.strip('\n') + '\n'

    def p(self, node: Node) -> str:
        method = getattr(self, f"p_{node.get_type()}", None)
        if method is None:
            raise ValueError(f"Cannot print node of type {node.get_type()}")
        return method(node)

    def p_stmts(self, nodes: Sequence[Node], indent: bool = True) -> str:
        if indent:
            self.indent()

        result = ''
        for node in nodes:
            comments = node.get_comments()
            if comments:
                result += self.nl + self.p_comments(comments)
            result += self.nl + self.p(node)

        if indent:
            self.outdent()
        return result

    def p_Module(self, node: Module) -> str:
        return self.p_stmts(node.body, indent=False)

    def p_Scalar(self, node: Scalar) -> str:
        return repr(node.value)

    def p_Name(self, node: Name) -> str:
        return node.name

    def p_Raw(self, node: Raw) -> str:
        return node.code.replace('\n', self.nl)

    def p_ArrayItem(self, node: ArrayItem) -> str:
        if node.key is None:
            return self.p(node.value)
        return f"{self.p(node.key)}: {self.p(node.value)}"

    def p_Array(self, node: Array) -> str:
        opening, closing = ('{', '}') if node.kind == 'dict' else ('[', ']')
        return opening + self.p_maybe_multiline(node.items, trailing_comma=True) + closing

    def p_Arg(self, node: Arg) -> str:
        prefix = f"{node.name}=" if node.name else ''
        return prefix + self.p(node.value)

    def p_Call(self, node: Call) -> str:
        return f"{self.p(node.func)}({self.p_maybe_multiline(node.args)})"

    def p_Assign(self, node: Assign) -> str:
        target = f"{node.target}: {node.annotation}" if node.annotation else node.target
        return f"{target} = {self.p(node.value)}"

    def p_comma_separated(self, nodes: Sequence[Node]) -> str:
        return ', '.join(self.p(node) for node in nodes)

    def p_comma_separated_multiline(self, nodes: Sequence[Optional[Node]], trailing_comma: bool) -> str:
        """One node per line at one more indentation level, comments above their node."""
        self.indent()

        result = ''
        last_index = len(nodes) - 1
        for index, node in enumerate(nodes):
            if node is not None:
                comments = node.get_comments()
                if comments:
                    result += self.nl + self.p_comments(comments)
                result += self.nl + self.p(node)
            else:
                result += self.nl

            if trailing_comma or index != last_index:
                result += ','

        self.outdent()
        return result

    def p_maybe_multiline(self, nodes: Sequence[Node], trailing_comma: bool = False) -> str:
        if not self.has_node_with_comments(nodes):
            return self.p_comma_separated(nodes)
        return self.p_comma_separated_multiline(nodes, trailing_comma) + self.nl

    def p_comments(self, comments: Sequence[Comment]) -> str:
        return self.nl.join(comment.get_reformatted_text().replace('\n', self.nl) for comment in comments)

    @staticmethod
    def has_node_with_comments(nodes: Sequence[Optional[Node]]) -> bool:
        return any(node is not None and node.get_comments() for node in nodes)
