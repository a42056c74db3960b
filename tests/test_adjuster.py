"""Unit tests for adjustment parsing, arithmetic and formatting."""

from decimal import Decimal

import pytest

from repricer.pricing.adjuster import adjusted_value, apply, format_amount, round2
from repricer.pricing.exceptions import AdjustmentParseError, AmountParseError
from repricer.pricing.models import AdjustmentSpec


class TestAdjustmentSpecParse:
    """Tests for AdjustmentSpec.parse."""

    @pytest.mark.parametrize(
        "raw,delta,is_percentage",
        [
            (-2.46, Decimal("-2.46"), False),
            (7395, Decimal("7395"), False),
            (Decimal("0.5"), Decimal("0.5"), False),
            ("-14%", Decimal("-14"), True),
            ("39.2%", Decimal("39.2"), True),
            ("+5%", Decimal("5"), True),
            (" 12 % ", Decimal("12"), True),
            ("-2.46", Decimal("-2.46"), False),
            ("7,395", Decimal("7395"), False),
        ],
    )
    def test_parse_valid(self, raw, delta, is_percentage):
        """Test numbers and percentage strings."""
        spec = AdjustmentSpec.parse(raw)

        assert spec.delta == delta
        assert spec.is_percentage is is_percentage

    @pytest.mark.parametrize("raw", ["", "%", "abc", "5%%", "1e3", "--5", True, None, [1]])
    def test_parse_invalid(self, raw):
        """Test that non-adjustments are rejected."""
        with pytest.raises(AdjustmentParseError):
            AdjustmentSpec.parse(raw)

    @pytest.mark.parametrize("raw", [float("nan"), float("inf")])
    def test_parse_non_finite(self, raw):
        """Test that NaN and infinity are rejected."""
        with pytest.raises(AdjustmentParseError, match="finite"):
            AdjustmentSpec.parse(raw)

    def test_parse_error_is_value_error(self):
        """Test that callers can catch a plain ValueError."""
        with pytest.raises(ValueError):
            AdjustmentSpec.parse("ten dollars")

    def test_parse_passes_spec_through(self):
        """Test that an existing spec is returned unchanged."""
        spec = AdjustmentSpec(delta=Decimal("1"), is_percentage=False)
        assert AdjustmentSpec.parse(spec) is spec

    def test_spec_is_immutable(self):
        """Test that a spec cannot be changed mid-run."""
        spec = AdjustmentSpec.parse("5%")
        with pytest.raises(Exception):
            spec.delta = Decimal("6")

    def test_str(self):
        """Test the readable form used in logs."""
        assert str(AdjustmentSpec.parse("-14%")) == "-14%"
        assert str(AdjustmentSpec.parse(2)) == "+2"


class TestRounding:
    """Tests for round2 and format_amount."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1.005", "1.01"),
            ("1.004", "1.00"),
            ("2.675", "2.68"),
            ("7", "7.00"),
            ("-0.004", "0.00"),
        ],
    )
    def test_round2_half_up(self, value, expected):
        """Test half-up rounding to exactly two places."""
        assert str(round2(Decimal(value))) == expected

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("1234.5", "1,234.50"),
            ("0.5", "0.50"),
            ("999", "999.00"),
            ("1000", "1,000.00"),
            ("1234567.891", "1,234,567.89"),
        ],
    )
    def test_format_amount(self, value, expected):
        """Test comma grouping and two-decimal formatting."""
        assert format_amount(Decimal(value)) == expected

    def test_format_negative_does_not_crash(self):
        """Test that a negative result still formats."""
        assert format_amount(Decimal("-1234.5")) == "-1,234.50"


class TestApply:
    """Tests for apply and adjusted_value."""

    def test_additive(self):
        """Test an additive decrease."""
        assert apply(Decimal("10.00"), AdjustmentSpec.parse(-2.46)) == "7.54"

    def test_additive_large(self):
        """Test an additive increase that adds a grouping separator."""
        assert apply(Decimal("605"), AdjustmentSpec.parse(7395)) == "8,000.00"

    def test_percentage(self):
        """Test a percentage decrease."""
        assert apply(Decimal("100.00"), AdjustmentSpec.parse("-14%")) == "86.00"

    def test_percentage_rounds_half_up(self):
        """Test that percentage results are rounded like additive ones."""
        assert apply(Decimal("0.10"), AdjustmentSpec.parse("5%")) == "0.11"
        assert apply(Decimal("50"), AdjustmentSpec.parse("39.2%")) == "69.60"

    def test_zero_adjustment_reformats(self):
        """Test that a zero delta only normalizes the format."""
        assert apply(Decimal("1234.56"), AdjustmentSpec.parse(0)) == "1,234.56"
        assert apply(Decimal("1234.5"), AdjustmentSpec.parse("0%")) == "1,234.50"

    def test_missing_value_raises(self):
        """Test that an amount without a value is rejected rather than written as NaN."""
        with pytest.raises(AmountParseError):
            adjusted_value(None, AdjustmentSpec.parse(1))

        with pytest.raises(AmountParseError):
            adjusted_value(Decimal("NaN"), AdjustmentSpec.parse(1))

    def test_infinite_value_raises(self):
        """Test that infinity is rejected by both stages."""
        with pytest.raises(AmountParseError):
            round2(Decimal("Infinity"))

        with pytest.raises(AmountParseError):
            apply(Decimal("-Infinity"), AdjustmentSpec.parse(1))


class TestLongAmounts:
    """Amounts longer than the default 28-digit decimal precision."""

    def test_additive_carry(self):
        """Test that a 27-digit amount carries into a 28th digit."""
        result = apply(Decimal("9" * 27), AdjustmentSpec.parse(1))
        assert result == f"{10 ** 27:,}.00"

    def test_additive_keeps_cents(self):
        """Test that cents survive on a 40-digit amount."""
        result = apply(Decimal("1" * 40 + ".05"), AdjustmentSpec.parse(0.01))
        assert result == f"{int('1' * 40):,}.06"

    def test_percentage(self):
        """Test a percentage on a 30-digit amount."""
        result = apply(Decimal("2" + "0" * 29), AdjustmentSpec.parse("-14%"))
        assert result == f"{172 * 10 ** 27:,}.00"

    def test_round2_large_exponent(self):
        """Test quantizing a value whose digits are implied by its exponent."""
        assert round2(Decimal("1E+40")) == Decimal(10 ** 40)
