"""Tree nodes built from a token stream."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List

from djotlex.attributes import Attributes


@dataclass
class TreeNode:
    """A typed node with attributes, children and its own text."""

    type: int = 0
    attributes: Attributes = field(default_factory=Attributes)
    children: List[TreeNode] = field(default_factory=list)
    text: bytes = b""

    def traverse(self) -> Iterator[TreeNode]:
        """Yield this node and all descendants in pre-order."""
        pending = [self]
        while pending:
            node = pending.pop()
            yield node
            pending.extend(reversed(node.children))

    def full_text(self) -> bytes:
        """Concatenate the text of every node in pre-order."""
        return b"".join(node.text for node in self.traverse())