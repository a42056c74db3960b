"""Shared pytest fixtures."""

import logging

import pytest

from repricer.document import HtmlDocument
from repricer.logging.config import ContextualFilter
from repricer.logging.context import clear_log_context


@pytest.fixture(autouse=True)
def clean_log_context():
    """Clear logging context before and after each test."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo configure_logging() calls made by a test.

    pytest swaps its own capture handlers in and out around each phase, so
    only the handlers configure_logging() installed are removed.
    """
    root_logger = logging.getLogger()
    level = root_logger.level
    yield
    for handler in list(root_logger.handlers):
        if any(isinstance(f, ContextualFilter) for f in handler.filters):
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run in an empty directory with no repricer environment overrides."""
    for name in ("LOG_LEVEL", "LOG_FORMAT", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def fragment():
    """Parse an HTML fragment without <html>/<body> wrappers."""

    def _parse(html: str) -> HtmlDocument:
        return HtmlDocument.from_string(html, parser="html.parser")

    return _parse
