"""End-to-end repricing of a realistic product page.

These tests go through the whole stack: lxml parsing, locating, extraction,
adjustment, splicing and serialization.
"""

from pathlib import Path

import pytest

from repricer import HtmlDocument, adjust
from repricer.main import main

PAGE = Path(__file__).parent.parent / "fixtures" / "product_page.html"


@pytest.fixture
def document():
    return HtmlDocument.from_file(PAGE)


def test_every_visible_price_adjusted(document):
    """Test a whole-document additive adjustment."""
    report = adjust(1, document)
    html = document.to_string()

    assert "over $51.00" in html
    assert '<span class="price">$13.99</span>' in html
    # The tag inside the price keeps its position
    assert '<span class="price">$<b>1</b>,250.00</span>' in html
    assert '<span class="price">$1.99</span>' in html
    assert "was $41.00, now $36.50" in html

    assert report.amounts_adjusted == 6
    assert report.markers_skipped == 1
    assert report.nodes_failed == 0


def test_non_prices_untouched(document):
    """Test that attributes, bare markers and plain numbers are left alone."""
    adjust("-14%", document)
    html = document.to_string()

    assert "Deals from $5 and up" in html
    assert "(save $ today)" in html
    assert "Item 1001 ships in 3 days." in html
    assert "<title>Garden Supplies</title>" in html


def test_percentage_decrease(document):
    """Test a percentage decrease across grouped and cents-only prices."""
    adjust("-14%", document)
    html = document.to_string()

    assert "over $43.00" in html
    assert "$11.17" in html
    assert "$<b>1</b>,074.14" in html
    assert "$0.85" in html
    assert "was $34.40, now $30.53" in html


def test_selector_and_limit(document):
    """Test that a selected subtree and a limit narrow the rewrite."""
    report = adjust(1, document.select("#catalog"), limit=1)
    html = document.to_string()

    # Only the product list is rewritten
    assert "$13.99" in html
    assert "$.99" not in html
    assert "was $40.00, now $35.50" in html
    assert "over $50.00" in html
    assert report.nodes_matched == 1
    assert report.nodes_adjusted == 1


def test_zero_adjustment_is_stable(document):
    """Test that a zero adjustment only normalizes cents-only prices."""
    before = document.to_string()
    adjust(0, document)
    after = document.to_string()

    assert after == before.replace("$.99", "$0.99")


def test_cli_round_trip(tmp_path, monkeypatch):
    """Test the command line against the same page."""
    for name in ("LOG_LEVEL", "LOG_FORMAT", "ENVIRONMENT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    output = tmp_path / "repriced.html"

    exit_code = main([str(PAGE), "--adjustment=-14%", "--selector", "#catalog", "-o", str(output)])

    html = output.read_text(encoding="utf-8")
    assert exit_code == 0
    assert "$11.17" in html
    assert "was $34.40, now $30.53" in html
    assert "over $50.00" in html
