"""Adjust every price under a node: locate, then extract, adjust and splice.

Ordering rules that keep recorded positions valid:
1. All candidates are located before any markup is touched.
2. Candidates are rewritten last to first, so an edit never moves a node
   that is still waiting to be processed.
3. Inside a node, prices are rewritten right to left, so offsets captured
   for prices further left are unaffected by each splice.
"""

from typing import Optional, Tuple, Union
from uuid import uuid4

from repricer.document import ContentNode, HtmlDocument
from repricer.logging import get_logger
from repricer.logging.context import log_context

from .adjuster import apply
from .exceptions import PricingError
from .extractor import capture, find_markers
from .locator import locate
from .models import AdjustmentInput, AdjustmentReport, AdjustmentSpec
from .rewriter import splice

logger = get_logger(__name__, component="pricing")


def reprice_markup(markup: str, spec: AdjustmentSpec) -> Tuple[str, int, int]:
    """Rewrite every price in a markup string.

    Args:
        markup: Inner markup of one node
        spec: Adjustment to apply

    Returns:
        Tuple of (new markup, prices adjusted, markers skipped). Markers not
        followed by a price (``$ off``) are skipped.

    Raises:
        PricingError: If a captured price cannot be adjusted or spliced.
            Nothing is returned in that case, so callers never see a
            partially rewritten string.

    Example:
        >>> reprice_markup("<b>$1,234</b>.56", AdjustmentSpec.parse(1))
        ('<b>$1,235</b>.56', 1, 0)
    """
    adjusted = 0
    skipped = 0

    for marker_offset in reversed(find_markers(markup)):
        token = capture(markup, marker_offset)
        if not token.is_amount:
            skipped += 1
            continue

        new_digits = apply(token.value, spec)
        markup = splice(markup, token.offsets, new_digits)
        adjusted += 1

    return markup, adjusted, skipped


def adjust(
    adjustment: Union[AdjustmentInput, AdjustmentSpec],
    root: Union[ContentNode, HtmlDocument],
    limit: Optional[int] = None,
) -> AdjustmentReport:
    """Adjust all prices under ``root`` in place.

    Args:
        adjustment: Signed number (additive) or ``"<number>%"`` (percentage)
        root: Subtree to scan; an HtmlDocument means the whole document
        limit: Maximum number of matched nodes to rewrite (None for all)

    Returns:
        AdjustmentReport with per-run counters

    Raises:
        AdjustmentParseError: If the adjustment value is invalid
        ValueError: If limit is negative

    Example:
        >>> doc = HtmlDocument.from_string("<p>Now $100.00</p>")
        >>> adjust("-14%", doc).amounts_adjusted
        1
    """
    spec = AdjustmentSpec.parse(adjustment)
    if isinstance(root, HtmlDocument):
        root = root.root

    report = AdjustmentReport()

    with log_context(run_id=uuid4().hex[:12]):
        candidates = locate(root, limit)
        report.nodes_matched = len(candidates)

        logger.info(
            f"Adjusting prices in {len(candidates)} nodes by {spec}",
            extra={
                "event": "pricing.run.started",
                "adjustment": str(spec),
                "candidate_count": len(candidates),
                "limit": limit,
            },
        )

        for index in range(len(candidates) - 1, -1, -1):
            node = candidates[index].node
            with log_context(node_index=index):
                _adjust_node(node, spec, report)

        logger.info(
            "Adjustment run completed",
            extra={
                "event": "pricing.run.completed",
                "nodes_matched": report.nodes_matched,
                "nodes_adjusted": report.nodes_adjusted,
                "nodes_failed": report.nodes_failed,
                "amounts_adjusted": report.amounts_adjusted,
                "markers_skipped": report.markers_skipped,
            },
        )

    return report


def _adjust_node(node: ContentNode, spec: AdjustmentSpec, report: AdjustmentReport) -> None:
    """Rewrite one node's markup, or leave it untouched on error."""
    try:
        markup, adjusted, skipped = reprice_markup(node.markup, spec)
    except PricingError as e:
        report.nodes_failed += 1
        logger.error(
            f"Node left unchanged: {e}",
            extra={
                "event": "pricing.node.failed",
                "error_type": type(e).__name__,
            },
            exc_info=True,
        )
        return

    report.markers_skipped += skipped

    if not adjusted:
        logger.debug("No prices in node markup", extra={"event": "pricing.node.empty"})
        return

    node.set_markup(markup)
    report.nodes_adjusted += 1
    report.amounts_adjusted += adjusted

    logger.debug(
        f"Adjusted {adjusted} prices",
        extra={"event": "pricing.node.adjusted", "amount_count": adjusted},
    )
