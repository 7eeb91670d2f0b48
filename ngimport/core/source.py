"""
TypeScript source parsing.

Wraps a tree-sitter parse of one file. Node positions from tree-sitter are
UTF-8 byte offsets; SourceFile converts them to the character offsets the
source Tree works with.
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional

import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

TYPESCRIPT = Language(tree_sitter_typescript.language_typescript())
TSX = Language(tree_sitter_typescript.language_tsx())

# Named nodes that carry no syntax (comments can appear between any tokens).
_TRIVIA = frozenset({"comment"})


def _language_for(path: str) -> Language:
    return TSX if path.endswith((".tsx", ".jsx")) else TYPESCRIPT


class SourceFile:
    """A parsed source file: text, bytes and the tree-sitter root node."""

    def __init__(self, path: str, text: str):
        self.path = path
        self.text = text
        self.data = text.encode("utf-8")
        parser = Parser(_language_for(path))
        self.tree = parser.parse(self.data)

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def node_text(self, node: Node) -> str:
        return self.data[node.start_byte:node.end_byte].decode("utf-8")

    def offset(self, byte_offset: int) -> int:
        """Character offset for a byte offset into the file."""
        if self.data.isascii():
            return byte_offset
        return len(self.data[:byte_offset].decode("utf-8"))

    def start(self, node: Node) -> int:
        return self.offset(node.start_byte)

    def end(self, node: Node) -> int:
        return self.offset(node.end_byte)

    @property
    def statements(self) -> List[Node]:
        return syntax_children(self.root)


def syntax_children(node: Node) -> List[Node]:
    """Named children of ``node`` without comments."""
    return [child for child in node.named_children if child.type not in _TRIVIA]


def walk(
    node: Node,
    visit: Callable[[Node], bool],
    max_depth: Optional[int] = None,
) -> Iterator[Node]:
    """
    Pre-order traversal yielding every node ``visit`` accepts.

    Children of an accepted node are not descended into. ``max_depth``
    bounds the descent (1 = direct children of ``node`` only).
    """
    stack = [(node, 0)]
    while stack:
        current, depth = stack.pop()
        if visit(current):
            yield current
            continue
        if max_depth is not None and depth >= max_depth:
            continue
        stack.extend((child, depth + 1) for child in reversed(current.children))


def find_first(
    node: Node,
    visit: Callable[[Node], bool],
    max_depth: Optional[int] = None,
) -> Optional[Node]:
    return next(walk(node, visit, max_depth), None)
