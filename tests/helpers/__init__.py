"""Test helper utilities for repricer tests."""

from .tree import FakeNode

__all__ = ["FakeNode"]
