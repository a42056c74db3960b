"""Apply an adjustment to a captured amount and format the result.

Arithmetic is done in Decimal so that half-up rounding to cents behaves the
same for additive and percentage adjustments (``1.005`` rounds to ``1.01``,
which binary floats get wrong). The working precision is sized to the
operands, so a price has no upper bound on its digit count.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Optional

from .exceptions import AmountParseError
from .models import AdjustmentSpec

CENTS = Decimal("0.01")
HUNDRED = Decimal(100)

# Default decimal context precision; never go below it
MIN_PRECISION = 28


def _precision_for(*values: Decimal) -> int:
    """Digits needed to add, multiply and quantize ``values`` without rounding.

    A sum or product never needs more digits than all operands together,
    counting the zeros implied by their exponents; cents add two more.
    """
    needed = 0
    for value in values:
        exponent = value.as_tuple().exponent
        needed += len(value.as_tuple().digits) + abs(exponent) + 2
    return max(MIN_PRECISION, needed)


def round2(value: Decimal) -> Decimal:
    """Round half-up to exactly two decimal places.

    Raises:
        AmountParseError: If the value is not finite
    """
    if not value.is_finite():
        raise AmountParseError(f"Cannot round a non-numeric amount: {value}", str(value))

    with localcontext() as ctx:
        ctx.prec = _precision_for(value)
        try:
            rounded = value.quantize(CENTS, rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise AmountParseError(f"Amount out of range: {value}", str(value)) from e

    # -0.004 rounds to -0.00; a price of zero has no sign
    if rounded.is_zero():
        return rounded.copy_abs()
    return rounded


def adjusted_value(value: Optional[Decimal], spec: AdjustmentSpec) -> Decimal:
    """Compute the adjusted, rounded value of one amount.

    Args:
        value: Parsed amount
        spec: Adjustment to apply

    Returns:
        New value rounded half-up to cents

    Raises:
        AmountParseError: If value is missing or not finite
    """
    if value is None or not value.is_finite():
        raise AmountParseError(f"Cannot adjust a non-numeric amount: {value!r}", str(value))

    with localcontext() as ctx:
        # Percentages go through value * delta / 100; HUNDRED covers the shift
        ctx.prec = _precision_for(value, spec.delta, HUNDRED)
        if spec.is_percentage:
            result = value + value * spec.delta / HUNDRED
        else:
            result = value + spec.delta

    return round2(result)


def format_amount(value: Decimal) -> str:
    """Format with comma grouping and two decimals.

    Example:
        >>> format_amount(Decimal("1234.5"))
        '1,234.50'
    """
    return f"{round2(value):,.2f}"


def apply(value: Optional[Decimal], spec: AdjustmentSpec) -> str:
    """Adjust ``value`` by ``spec`` and return the formatted digits.

    Examples:
        >>> apply(Decimal("10.00"), AdjustmentSpec.parse(-2.46))
        '7.54'
        >>> apply(Decimal("100.00"), AdjustmentSpec.parse("-14%"))
        '86.00'
    """
    return format_amount(adjusted_value(value, spec))
