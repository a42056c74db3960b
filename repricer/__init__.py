"""Repricer: adjust prices inside HTML without disturbing its markup."""

from repricer.document import HtmlDocument
from repricer.pricing import AdjustmentReport, AdjustmentSpec, adjust

__version__ = "1.0.0"

__all__ = ["adjust", "AdjustmentReport", "AdjustmentSpec", "HtmlDocument", "__version__"]
