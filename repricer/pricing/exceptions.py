"""Exceptions raised by the pricing pipeline."""


class PricingError(Exception):
    """Base exception for all pricing errors.

    Catching this at the service level is enough to abandon a single node's
    rewrite without aborting the rest of the run.
    """

    pass


class AdjustmentParseError(PricingError, ValueError):
    """An adjustment value could not be understood.

    Raised for strings that are neither a signed number nor ``<number>%``,
    and for non-numeric, non-finite inputs.
    """

    pass


class AmountParseError(PricingError):
    """A captured digit run did not yield a usable numeric value.

    The Locator only hands over nodes whose text contains amounts, so this
    signals an internal inconsistency. The node being rewritten is left as is.
    """

    def __init__(self, message: str, characters: str = "") -> None:
        """Initialize with the offending captured characters.

        Args:
            message: Human-readable error message
            characters: The captured run that failed to parse
        """
        super().__init__(message)
        self.characters = characters


class SpliceError(PricingError):
    """An offset map cannot be applied to the markup it was recorded against."""

    pass
