from __future__ import annotations

from typing import Sequence

from storm.Config.Nodes import ArrayItem, Comment, Node
from storm.Config.Printer import Standard


class StormPrinter(Standard):
    """
    Printer used for generated configuration files.

    Dicts and lists always go one item per line with a trailing comma, and
    comment blocks are set apart from the surrounding code by blank lines.
    """

    def p_maybe_multiline(self, nodes: Sequence[Node], trailing_comma: bool = False) -> str:
        if self.has_node_with_comments(nodes) or (nodes and isinstance(nodes[0], ArrayItem)):
            return self.p_comma_separated_multiline(nodes, trailing_comma) + self.nl
        return self.p_comma_separated(nodes)

    def p_comments(self, comments: Sequence[Comment]) -> str:
        formatted = [comment.get_reformatted_text().replace('\n', self.nl) for comment in comments]
        return self.nl + self.nl.join(formatted) + self.nl
