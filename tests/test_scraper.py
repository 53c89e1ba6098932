from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests
from bs4 import BeautifulSoup

from aftermarket.errors import ScrapeError
from aftermarket.scraper import (
    SP500_SYMBOL,
    parse_movers,
    parse_page,
    parse_percentage,
    parse_sp500,
    scrape_after_market,
)
from tests.conftest import utc

FIXTURE = Path(__file__).parent / "fixtures" / "after_hours.html"
NOW = utc(2019, 6, 3, 21, 30)


@pytest.fixture
def html() -> str:
    return FIXTURE.read_text()


@pytest.mark.parametrize(
    "text, expected",
    [("+7.06%", 7.06), ("-3.99%", -3.99), ("0%", 0.0), (" -0.71% ", -0.71), ("12.5%", 12.5)],
)
def test_parse_percentage(text, expected):
    assert parse_percentage(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["", "7.06", "abc%", "+-1%", "1.2.3%", None])
def test_parse_percentage_rejects_garbage(text):
    with pytest.raises(ScrapeError):
        parse_percentage(text)


def test_parse_movers_skips_header(html):
    records = parse_movers(BeautifulSoup(html, "html.parser"), NOW)

    assert [(r.symbol, r.percentage) for r in records] == [("NVDA", 7.06), ("TSLA", -3.99)]
    assert all(r.date == NOW for r in records)


def test_parse_sp500_takes_first_futures_row(html):
    record = parse_sp500(BeautifulSoup(html, "html.parser"), NOW)

    assert record.symbol == SP500_SYMBOL
    assert record.percentage == pytest.approx(-0.71)
    assert record.date == NOW


def test_parse_page_appends_sp500_last(html):
    records = parse_page(html, NOW)
    assert [r.symbol for r in records] == ["NVDA", "TSLA", "S&P"]


def test_missing_movers_container():
    with pytest.raises(ScrapeError, match="wsod_marketMoversContainer"):
        parse_page("<html><body></body></html>", NOW)


def test_row_without_change_cell(html):
    broken = html.replace('class="negChangePct">-3.99%', 'class="flat">-3.99%')
    with pytest.raises(ScrapeError, match="change cell for TSLA"):
        parse_movers(BeautifulSoup(broken, "html.parser"), NOW)


def test_sp500_without_percentage(html):
    broken = html.replace("-0.71%", "-0.71")
    with pytest.raises(ScrapeError, match="S&P percentage"):
        parse_sp500(BeautifulSoup(broken, "html.parser"), NOW)


def test_scrape_after_market_uses_one_timestamp(html):
    resp = MagicMock()
    resp.text = html
    resp.raise_for_status = MagicMock()
    session = MagicMock()
    session.get.return_value = resp

    records = scrape_after_market("https://example.test/after-hours", timeout=3, session=session, now=NOW)

    session.get.assert_called_once_with("https://example.test/after-hours", timeout=3)
    assert len(records) == 3
    assert {r.date for r in records} == {NOW}


def test_scrape_after_market_wraps_http_errors():
    resp = MagicMock()
    resp.raise_for_status.side_effect = requests.HTTPError("503 Server Error")
    session = MagicMock()
    session.get.return_value = resp

    with pytest.raises(ScrapeError, match="failed to fetch"):
        scrape_after_market("https://example.test/after-hours", session=session)


def test_scrape_after_market_requires_url():
    with pytest.raises(ScrapeError, match="AFTER_MARKET_URL"):
        scrape_after_market("")
