"""The node interface the pricing pipeline needs from a host document."""

from typing import List, Optional, Protocol


class ContentNode(Protocol):
    """An element of a document tree that carries text and inner markup.

    The pipeline only reads text, reads markup and writes markup back; it
    never creates, moves or removes nodes. Wrappers around the same
    underlying element must compare equal.
    """

    @property
    def text(self) -> str:
        """Visible text of the node and all of its descendants."""
        ...

    @property
    def markup(self) -> str:
        """Serialized inner markup of the node."""
        ...

    def set_markup(self, markup: str) -> None:
        """Replace the node's inner markup."""
        ...

    @property
    def parent(self) -> Optional["ContentNode"]:
        """Enclosing node, or None at the top of the tree."""
        ...

    def descendants(self) -> List["ContentNode"]:
        """Every element below this node, in document (pre-)order."""
        ...


def is_descendant(node: ContentNode, ancestor: ContentNode) -> bool:
    """Whether ``ancestor`` appears anywhere on ``node``'s parent chain."""
    current = node.parent
    while current is not None:
        if current == ancestor:
            return True
        current = current.parent
    return False
