"""Custom exceptions for document handling."""


class DocumentError(Exception):
    """A document could not be read, parsed, queried or written.

    Raised for unreadable input files, unknown parser names and selectors
    that are invalid or match nothing.
    """

    pass
