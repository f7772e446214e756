"""Pre-order node inspection over a tree-sitter tree.

This is the "inspect" capability that rules declare in
``RuleMetadata.requires``: rules ask for nodes of a few types instead of
writing their own recursive walks.
"""

from collections.abc import Callable, Iterable, Iterator
from typing import Any


class Inspector:
    """Filtered pre-order traversal of one syntax tree."""

    def __init__(self, tree: Any):
        self.root = tree.root_node if hasattr(tree, "root_node") else tree

    def nodes(self, node_types: Iterable[str] | None = None) -> Iterator[Any]:
        """Yield nodes in pre-order, optionally restricted to ``node_types``."""
        wanted = frozenset(node_types) if node_types is not None else None
        yield from walk(self.root, wanted)

    def preorder(self, node_types: Iterable[str], fn: Callable[[Any], None]) -> None:
        """Call ``fn`` for every node of the given types, in pre-order."""
        for node in self.nodes(node_types):
            fn(node)


def walk(node: Any, node_types: frozenset[str] | None = None) -> Iterator[Any]:
    """Iterative pre-order walk starting at (and including) ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        if node_types is None or current.type in node_types:
            yield current
        stack.extend(reversed(current.children))
