"""Capture price digit runs from markup, stepping over interleaved tags.

A price such as ``$1<b>2</b>3.00`` renders as ``$123.00`` but its digits are
scattered across the markup. The scanner here walks the raw markup one
character at a time, skips everything between ``<`` and ``>`` (``<!--`` and
``-->`` for comments), and records where in the markup each captured
character came from. That offset map is what lets the rewriter put new
digits back without touching the tags.

The scan is an explicit state machine rather than a regular expression so
the tag handling and offset bookkeeping can be tested on their own.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import List, Optional, Sequence

from .models import DECIMAL_POINT, DIGITS, GROUP_SEPARATOR, MARKER, SEPARATORS, AmountToken

TAG_OPEN = "<"
TAG_CLOSE = ">"
COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"


class ScanState(str, Enum):
    """States of the markup scanner."""

    SEEKING_MARKER = "seeking_marker"
    IN_TAG = "in_tag"
    IN_COMMENT = "in_comment"
    CAPTURING = "capturing"
    TRIMMING = "trimming"


# States in which characters belong to markup rather than text
MARKUP_STATES = (ScanState.IN_TAG, ScanState.IN_COMMENT)


def _is_run_char(char: str) -> bool:
    return char in DIGITS or char in SEPARATORS


def _enter_markup(markup: str, index: int) -> ScanState:
    """State entered at a ``<``: a comment runs to ``-->``, a tag to the next ``>``."""
    if markup.startswith(COMMENT_OPEN, index):
        return ScanState.IN_COMMENT
    return ScanState.IN_TAG


def _leaves_markup(state: ScanState, markup: str, index: int, opened_at: int) -> bool:
    """Whether ``markup[index]`` closes the tag or comment opened at ``opened_at``."""
    if markup[index] != TAG_CLOSE:
        return False
    if state is ScanState.IN_TAG:
        return True

    # The closing "-->" may not share characters with the opening "<!--"
    close_start = index - len(COMMENT_CLOSE) + 1
    return close_start >= opened_at + len(COMMENT_OPEN) and markup.startswith(
        COMMENT_CLOSE, close_start
    )


def find_markers(markup: str) -> List[int]:
    """Offsets of every marker that sits in text content.

    Markers inside tags (attribute values, for example) and inside comments
    are not prices and are ignored.

    Example:
        >>> find_markers('<a title="$1">$5</a> <!-- $2 --> and $6')
        [14, 37]
    """
    offsets = []
    state = ScanState.SEEKING_MARKER
    opened_at = 0

    for index, char in enumerate(markup):
        if state in MARKUP_STATES:
            if _leaves_markup(state, markup, index, opened_at):
                state = ScanState.SEEKING_MARKER
        elif char == TAG_OPEN:
            state = _enter_markup(markup, index)
            opened_at = index
        elif char == MARKER:
            offsets.append(index)

    return offsets


def capture(markup: str, marker_offset: int) -> AmountToken:
    """Capture the amount that follows the marker at ``marker_offset``.

    Scanning starts just after the marker. Digits, ``.`` and ``,`` outside
    tags and comments are captured with their offsets; tags and comments
    are skipped; the first other character in text ends the run. Trailing
    separators are then trimmed, since a price never ends in one.

    Args:
        markup: Markup string containing the marker
        marker_offset: Offset of the marker character

    Returns:
        AmountToken with captured characters, offsets and parsed value

    Example:
        >>> token = capture("$1<b>2</b>3.00", 0)
        >>> token.characters, token.offsets
        ('123.00', (1, 5, 10, 11, 12, 13))
    """
    characters: List[str] = []
    offsets: List[int] = []
    state = ScanState.CAPTURING
    index = marker_offset + 1
    opened_at = 0

    while state is not ScanState.TRIMMING:
        char = markup[index] if index < len(markup) else None

        if char is None:
            state = ScanState.TRIMMING
        elif state in MARKUP_STATES:
            if _leaves_markup(state, markup, index, opened_at):
                state = ScanState.CAPTURING
        elif char == TAG_OPEN:
            state = _enter_markup(markup, index)
            opened_at = index
        elif _is_run_char(char):
            characters.append(char)
            offsets.append(index)
        else:
            state = ScanState.TRIMMING

        index += 1

    while characters and characters[-1] in SEPARATORS:
        characters.pop()
        offsets.pop()

    return AmountToken(
        characters="".join(characters),
        offsets=tuple(offsets),
        value=parse_value(characters),
    )


def parse_value(characters: Sequence[str]) -> Optional[Decimal]:
    """Turn a captured run into a number.

    Grouping commas are dropped. Only the first decimal point counts: from a
    second point onward the run is ignored, so ``1.2.3`` reads as ``1.2``.

    Returns:
        The value, or None if the run holds no digits
    """
    cleaned = "".join(char for char in characters if char != GROUP_SEPARATOR)

    head, point, tail = cleaned.partition(DECIMAL_POINT)
    tail = tail.split(DECIMAL_POINT, 1)[0]
    number = f"{head}{point}{tail}"

    if not any(char in DIGITS for char in number):
        return None

    try:
        return Decimal(number)
    except InvalidOperation:
        return None
