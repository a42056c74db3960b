"""Document tree access: the ContentNode interface and its HTML implementation."""

from .exceptions import DocumentError
from .html import DEFAULT_PARSER, FRAGMENT_PARSER, SUPPORTED_PARSERS, HtmlDocument, HtmlNode
from .nodes import ContentNode, is_descendant

__all__ = [
    "ContentNode",
    "DocumentError",
    "HtmlDocument",
    "HtmlNode",
    "is_descendant",
    "DEFAULT_PARSER",
    "FRAGMENT_PARSER",
    "SUPPORTED_PARSERS",
]
