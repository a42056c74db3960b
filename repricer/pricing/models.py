"""Data models for the pricing pipeline.

- AdjustmentSpec: the delta applied to every amount in one run
- Candidate: a node picked by the locator, with its amount count
- AmountToken: one captured digit run and its offset map
- AdjustmentReport: counters describing what a run did
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Tuple, Union

from pydantic import BaseModel, Field, field_validator

from repricer.document.nodes import ContentNode

from .exceptions import AdjustmentParseError

MARKER = "$"
DECIMAL_POINT = "."
GROUP_SEPARATOR = ","
SEPARATORS = (DECIMAL_POINT, GROUP_SEPARATOR)
DIGITS = "0123456789"

# Signed number, optionally comma-grouped: "12", "-2.46", "+7,395", ".5"
_NUMBER_PATTERN = re.compile(r"^[+-]?(?:[0-9][0-9,]*(?:\.[0-9]*)?|\.[0-9]+)$")

AdjustmentInput = Union[int, float, Decimal, str]


class AdjustmentSpec(BaseModel):
    """An additive or percentage delta, fixed for the duration of one run."""

    delta: Decimal = Field(..., description="Amount (or percent) to add; negative lowers prices")
    is_percentage: bool = Field(False, description="Interpret delta as a percentage of each amount")

    model_config = {"frozen": True}

    @field_validator("delta")
    @classmethod
    def ensure_finite(cls, v: Decimal) -> Decimal:
        """Reject NaN and infinities."""
        if not v.is_finite():
            raise ValueError("Adjustment delta must be a finite number")
        return v

    @classmethod
    def parse(cls, adjustment: Any) -> "AdjustmentSpec":
        """Build a spec from a number or a ``<number>%`` string.

        Args:
            adjustment: ``-2.46``, ``7395``, ``"-14%"``, ``"39.2%"``, ``"+5"``,
                or an existing AdjustmentSpec

        Returns:
            AdjustmentSpec

        Raises:
            AdjustmentParseError: If the value is not a usable adjustment

        Examples:
            >>> AdjustmentSpec.parse("-14%")
            AdjustmentSpec(delta=Decimal('-14'), is_percentage=True)
            >>> AdjustmentSpec.parse(-2.46).delta
            Decimal('-2.46')
        """
        if isinstance(adjustment, AdjustmentSpec):
            return adjustment

        # bool is an int subclass; True is not a price delta
        if isinstance(adjustment, bool) or adjustment is None:
            raise AdjustmentParseError(f"Invalid adjustment: {adjustment!r}")

        if isinstance(adjustment, (int, float, Decimal)):
            # str() keeps floats like -2.46 from expanding to their binary value
            return cls._build(Decimal(str(adjustment)), False, adjustment)

        if not isinstance(adjustment, str):
            raise AdjustmentParseError(
                f"Invalid adjustment type: {type(adjustment).__name__}. "
                "Expected a number or a '<number>%' string"
            )

        text = adjustment.strip()
        is_percentage = text.endswith("%")
        if is_percentage:
            text = text[:-1].rstrip()

        if not _NUMBER_PATTERN.match(text):
            raise AdjustmentParseError(
                f"Invalid adjustment: '{adjustment}'. "
                "Use a signed number (e.g., -2.46) or a percentage (e.g., -14%)"
            )

        try:
            delta = Decimal(text.replace(GROUP_SEPARATOR, ""))
        except InvalidOperation as e:
            raise AdjustmentParseError(f"Invalid adjustment: '{adjustment}'") from e

        return cls._build(delta, is_percentage, adjustment)

    @classmethod
    def _build(cls, delta: Decimal, is_percentage: bool, original: Any) -> "AdjustmentSpec":
        if not delta.is_finite():
            raise AdjustmentParseError(f"Adjustment must be a finite number, got {original!r}")
        return cls(delta=delta, is_percentage=is_percentage)

    def __str__(self) -> str:
        sign = "+" if self.delta >= 0 else ""
        return f"{sign}{self.delta}{'%' if self.is_percentage else ''}"


@dataclass
class Candidate:
    """A node chosen by the locator as the most specific holder of its amounts.

    Attributes:
        node: The content node
        count: Number of amounts found in the node's text
    """

    node: ContentNode
    count: int


@dataclass(frozen=True)
class AmountToken:
    """One digit run captured after a marker.

    Attributes:
        characters: Captured digits and separators, trailing separators trimmed
        offsets: Markup offset of each captured character (strictly increasing)
        value: Parsed value, or None when nothing numeric was captured
    """

    characters: str
    offsets: Tuple[int, ...]
    value: Optional[Decimal]

    def __post_init__(self):
        if len(self.characters) != len(self.offsets):
            raise ValueError(
                f"Offset map length {len(self.offsets)} does not match "
                f"captured length {len(self.characters)}"
            )

    def __len__(self) -> int:
        return len(self.characters)

    @property
    def is_amount(self) -> bool:
        """Whether the run reads as a price: a leading digit, or '.' and two digits."""
        chars = self.characters
        if not chars:
            return False
        if chars[0] in DIGITS:
            return True
        return chars[0] == DECIMAL_POINT and len(chars) >= 3 and all(c in DIGITS for c in chars[1:3])


@dataclass
class AdjustmentReport:
    """Counters for a single ``adjust`` run.

    Attributes:
        nodes_matched: Candidates selected by the locator (after the limit)
        nodes_adjusted: Nodes whose markup was rewritten
        nodes_failed: Nodes left untouched because of an internal error
        amounts_adjusted: Amounts rewritten across all nodes
        markers_skipped: Markers not followed by an amount
    """

    nodes_matched: int = 0
    nodes_adjusted: int = 0
    nodes_failed: int = 0
    amounts_adjusted: int = 0
    markers_skipped: int = 0

    @property
    def had_errors(self) -> bool:
        return self.nodes_failed > 0
