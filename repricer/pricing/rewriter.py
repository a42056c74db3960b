"""Splice reformatted digits back into markup at recorded offsets."""

from typing import List, Sequence

from .exceptions import SpliceError


def _replacements(slot_count: int, new_digits: str) -> List[str]:
    """Assign the new characters to offset slots, right-aligned.

    The last slot takes the last character and so on leftwards. Slots left
    over on the left become empty (the run shrinks); characters left over on
    the left all go into the first slot (the run grows).
    """
    shift = len(new_digits) - slot_count
    replacements = []

    for slot in range(slot_count):
        index = slot + shift
        if slot == 0:
            replacements.append(new_digits[: index + 1] if index >= 0 else "")
        else:
            replacements.append(new_digits[index] if index >= 0 else "")

    return replacements


def splice(markup: str, offset_map: Sequence[int], new_digits: str) -> str:
    """Replace the characters at ``offset_map`` with ``new_digits``.

    Only the mapped positions change; tags and text between them are copied
    through as they are. Any edit lands at or after ``offset_map[0]``, so
    offsets to the left of it stay valid for further splices.

    Args:
        markup: Original markup
        offset_map: Strictly increasing offsets of the run being replaced
        new_digits: Formatted replacement

    Returns:
        The new markup

    Raises:
        SpliceError: If the offset map is empty, unordered or out of range

    Examples:
        >>> splice("$1<b>2</b>3.00", [1, 5, 10, 11, 12, 13], "124.00")
        '$1<b>2</b>4.00'
        >>> splice("<i>$9.99</i>", [4, 5, 6, 7], "10.01")
        '<i>$10.01</i>'
    """
    if not offset_map:
        raise SpliceError("Cannot splice an empty offset map")

    previous = -1
    for offset in offset_map:
        if offset <= previous:
            raise SpliceError(f"Offset map is not strictly increasing at {offset}")
        previous = offset
    if offset_map[0] < 0 or offset_map[-1] >= len(markup):
        raise SpliceError(
            f"Offset map [{offset_map[0]}..{offset_map[-1]}] out of range "
            f"for markup of length {len(markup)}"
        )

    pieces = []
    cursor = 0
    for offset, replacement in zip(offset_map, _replacements(len(offset_map), new_digits)):
        pieces.append(markup[cursor:offset])
        pieces.append(replacement)
        cursor = offset + 1
    pieces.append(markup[cursor:])

    return "".join(pieces)
