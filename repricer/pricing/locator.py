"""Find the elements that hold prices.

Every element's text includes the text of its children, so one price makes
its whole ancestor chain match. The locator keeps only the most specific
container: a child replaces its parent when both hold the same number of
prices, and a parent holding more prices than its child wins over the child
and the rest of its own subtree.
"""

from typing import List, Optional

from repricer.document.nodes import ContentNode, is_descendant
from repricer.logging import get_logger

from .models import DECIMAL_POINT, DIGITS, MARKER, Candidate

logger = get_logger(__name__, component="locator")


def _is_digit(char: str) -> bool:
    return len(char) == 1 and char in DIGITS


def count_amounts(text: str) -> int:
    """Count the prices in a piece of text.

    A price is the marker followed by a digit, or by a decimal point and two
    digits (``$.99``).

    Example:
        >>> count_amounts("Was $12.00, now $.99 ($ off!)")
        2
    """
    count = 0
    index = text.find(MARKER)

    while index != -1:
        following = text[index + 1:index + 4]
        if _is_digit(following[:1]):
            count += 1
        elif (
            following[:1] == DECIMAL_POINT
            and _is_digit(following[1:2])
            and _is_digit(following[2:3])
        ):
            count += 1
        index = text.find(MARKER, index + 1)

    return count


def locate(root: ContentNode, limit: Optional[int] = None) -> List[Candidate]:
    """Select the price-holding elements under ``root``.

    The descendants are listed once, up front, and walked in document order
    so a container is always seen before its children.

    Args:
        root: Node whose descendants are searched (root itself is not a candidate)
        limit: Maximum number of candidates to return; None means no limit

    Returns:
        Candidates in document order

    Raises:
        ValueError: If limit is negative
    """
    if limit is not None and limit < 0:
        raise ValueError(f"Invalid limit: {limit}. Must be zero or greater")

    results: List[Candidate] = []
    last: Optional[Candidate] = None
    skip_subtree = False
    scanned = 0

    for node in root.descendants():
        scanned += 1
        count = count_amounts(node.text)
        if not count:
            continue

        if skip_subtree and is_descendant(node, last.node):
            continue
        skip_subtree = False

        if last is not None and node.parent == last.node:
            if count == last.count:
                # Same prices, tighter container
                results.pop()
            elif last.count > count:
                skip_subtree = True
                logger.debug(
                    "Skipping subtree of larger container",
                    extra={
                        "event": "locator.subtree.skipped",
                        "parent_count": last.count,
                        "child_count": count,
                    },
                )
                continue

        last = Candidate(node=node, count=count)
        results.append(last)

    selected = results if limit is None else results[:limit]

    logger.debug(
        f"Located {len(selected)} price containers",
        extra={
            "event": "locator.scan.completed",
            "elements_scanned": scanned,
            "candidates_found": len(results),
            "candidates_selected": len(selected),
            "limit": limit,
        },
    )

    return selected


def find(root: ContentNode, limit: Optional[int] = None) -> List[ContentNode]:
    """Nodes selected by locate(), in document order."""
    return [candidate.node for candidate in locate(root, limit)]
