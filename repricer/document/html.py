"""HTML documents backed by BeautifulSoup.

HtmlNode adapts a BeautifulSoup ``Tag`` to the ContentNode interface.
HtmlDocument owns the parsed tree and handles loading, root selection and
serialization.
"""

from pathlib import Path
from typing import List, Optional, Union

from bs4 import BeautifulSoup, FeatureNotFound, Tag
from soupsieve import SelectorSyntaxError

from repricer.logging import get_logger

from .exceptions import DocumentError

logger = get_logger(__name__, component="document")

DEFAULT_PARSER = "lxml"
SUPPORTED_PARSERS = ("lxml", "html.parser")

# Fragments are parsed with the built-in parser so that inner markup is not
# wrapped in <html><body> the way lxml wraps partial documents.
FRAGMENT_PARSER = "html.parser"


class HtmlNode:
    """ContentNode over a BeautifulSoup tag."""

    def __init__(self, tag: Tag):
        self.tag = tag

    @property
    def name(self) -> str:
        return self.tag.name

    @property
    def text(self) -> str:
        return self.tag.get_text()

    @property
    def markup(self) -> str:
        return self.tag.decode_contents()

    def set_markup(self, markup: str) -> None:
        fragment = BeautifulSoup(markup, FRAGMENT_PARSER)
        self.tag.clear()
        for child in list(fragment.contents):
            self.tag.append(child.extract())

    @property
    def parent(self) -> Optional["HtmlNode"]:
        if self.tag.parent is None:
            return None
        return HtmlNode(self.tag.parent)

    def descendants(self) -> List["HtmlNode"]:
        return [HtmlNode(tag) for tag in self.tag.find_all(True)]

    # Tag.__eq__ compares structure; node identity must follow the element.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HtmlNode):
            return NotImplemented
        return self.tag is other.tag

    def __hash__(self) -> int:
        return id(self.tag)

    def __repr__(self) -> str:
        return f"HtmlNode(<{self.tag.name}>)"


class HtmlDocument:
    """A parsed HTML document whose nodes can be repriced in place."""

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup

    @classmethod
    def from_string(cls, html: str, parser: str = DEFAULT_PARSER) -> "HtmlDocument":
        """Parse an HTML string.

        Args:
            html: Document or fragment source
            parser: BeautifulSoup tree builder name

        Returns:
            HtmlDocument

        Raises:
            DocumentError: If the parser is unknown or not installed
        """
        if parser not in SUPPORTED_PARSERS:
            raise DocumentError(
                f"Unsupported parser: {parser}. Must be one of: {', '.join(SUPPORTED_PARSERS)}"
            )
        try:
            soup = BeautifulSoup(html, parser)
        except FeatureNotFound as e:
            raise DocumentError(f"Parser '{parser}' is not available: {e}") from e
        return cls(soup)

    @classmethod
    def from_file(
        cls, path: Union[str, Path], parser: str = DEFAULT_PARSER, encoding: str = "utf-8"
    ) -> "HtmlDocument":
        """Read and parse an HTML file.

        Raises:
            DocumentError: If the file cannot be read or parsed
        """
        path = Path(path)
        try:
            html = path.read_text(encoding=encoding)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentError(f"Failed to read document {path}: {e}") from e

        logger.debug(
            "Document read",
            extra={"event": "document.read", "path": str(path), "size": len(html)},
        )
        return cls.from_string(html, parser=parser)

    @property
    def root(self) -> HtmlNode:
        """The whole document."""
        return HtmlNode(self.soup)

    def select(self, selector: str) -> HtmlNode:
        """Return the first element matching a CSS selector.

        Raises:
            DocumentError: If the selector is invalid or matches nothing
        """
        try:
            tag = self.soup.select_one(selector)
        except SelectorSyntaxError as e:
            raise DocumentError(f"Invalid selector '{selector}': {e}") from e

        if tag is None:
            raise DocumentError(f"Selector '{selector}' matched no element")
        return HtmlNode(tag)

    def to_string(self) -> str:
        return str(self.soup)

    def write(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        """Serialize the document to a file.

        Raises:
            DocumentError: If the file cannot be written
        """
        path = Path(path)
        try:
            path.write_text(self.to_string(), encoding=encoding)
        except OSError as e:
            raise DocumentError(f"Failed to write document {path}: {e}") from e
