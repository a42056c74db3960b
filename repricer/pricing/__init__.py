"""Locate, extract, adjust and splice prices inside markup."""

from .adjuster import apply, format_amount, round2
from .exceptions import AdjustmentParseError, AmountParseError, PricingError, SpliceError
from .extractor import ScanState, capture, find_markers
from .locator import count_amounts, find, locate
from .models import MARKER, AdjustmentReport, AdjustmentSpec, AmountToken, Candidate
from .rewriter import splice
from .service import adjust, reprice_markup

__all__ = [
    # Entry points
    "adjust",
    "reprice_markup",
    # Pipeline stages
    "locate",
    "find",
    "count_amounts",
    "capture",
    "find_markers",
    "apply",
    "format_amount",
    "round2",
    "splice",
    # Models
    "AdjustmentReport",
    "AdjustmentSpec",
    "AmountToken",
    "Candidate",
    "ScanState",
    "MARKER",
    # Exceptions
    "PricingError",
    "AdjustmentParseError",
    "AmountParseError",
    "SpliceError",
]
