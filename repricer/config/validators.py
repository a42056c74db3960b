"""Additional validation utilities for configuration."""

import warnings
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for settings that are valid but probably unintended.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    # A cut of 100% or more turns every price into zero or a negative amount
    adjustment = config_dict.get("adjustment")
    if isinstance(adjustment, str) and adjustment.strip().endswith("%"):
        try:
            percent = Decimal(adjustment.strip()[:-1].replace(",", ""))
        except InvalidOperation:
            percent = None
        if percent is not None and percent <= -100:
            warning_messages.append(
                f"Adjustment {adjustment.strip()} reduces every price to zero or below"
            )

    if adjustment in (0, "0", "0%"):
        warning_messages.append("Adjustment is zero; prices will only be reformatted")

    limit = config_dict.get("limit")
    if limit == 0:
        warning_messages.append("limit is 0; no nodes will be adjusted")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """
    Emit warning messages using Python's warnings module.

    Args:
        warning_messages: List of warning messages to emit
    """
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
