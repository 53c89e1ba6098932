"""Scrape after-hours gainers & losers and the S&P 500 futures change."""
from __future__ import annotations

import logging
import re
from datetime import datetime, timezone
from typing import List, Optional

import requests
from bs4 import BeautifulSoup, Tag

from aftermarket.errors import ScrapeError
from aftermarket.models.after_market import AfterMarketPriceData

logger = logging.getLogger(__name__)

SP500_SYMBOL = "S&P"
MOVERS_HEADER = "Gainers & Losers"

_PERCENT_RE = re.compile(r"^([+-]?\d+(?:\.\d+)?)%$")


def parse_percentage(text: str) -> float:
    """Strip the % sign so "+7.06%" becomes 7.06."""
    m = _PERCENT_RE.match((text or "").strip())
    if not m:
        raise ScrapeError(f"not a percentage: {text!r}")
    return float(m.group(1))


def _require(node: Optional[Tag], what: str) -> Tag:
    if node is None:
        raise ScrapeError(f"couldn't find {what}")
    return node


def _first_text(node: Tag) -> str:
    return next(node.stripped_strings, "")


def parse_movers(soup: BeautifulSoup, observed_at: datetime) -> List[AfterMarketPriceData]:
    container = _require(soup.select_one("div#wsod_marketMoversContainer"), "div#wsod_marketMoversContainer")
    tbody = _require(container.find("tbody"), "movers table body")

    out: List[AfterMarketPriceData] = []
    for row in tbody.find_all("tr", recursive=False):
        if row.find(string=lambda s: s is not None and s.strip() == MOVERS_HEADER):
            continue

        first_col = _require(row.find(class_="wsod_firstCol"), "wsod_firstCol cell")
        symbol = _first_text(first_col)
        if not symbol:
            raise ScrapeError(f"empty ticker cell in row: {row}")

        # the page marks the change cell differently for losers and gainers
        change = row.find(class_="negChangePct") or row.find(class_="posChangePct")
        change = _require(change, f"change cell for {symbol}")

        out.append(
            AfterMarketPriceData(
                symbol=symbol,
                percentage=parse_percentage(_first_text(change)),
                date=observed_at,
            )
        )
    return out


def parse_sp500(soup: BeautifulSoup, observed_at: datetime) -> AfterMarketPriceData:
    # first futures row is the S&P 500
    panel = _require(soup.select_one("div#premkContent1"), "div#premkContent1")
    row = _require(panel.find(class_="wsod_futureQuote wsod_futureQuoteFirst"), "S&P futures row")

    for cell in row.find_all(class_="wsod_bold wsod_aRight"):
        for text in cell.stripped_strings:
            if "%" in text:
                return AfterMarketPriceData(
                    symbol=SP500_SYMBOL,
                    percentage=parse_percentage(text),
                    date=observed_at,
                )
    raise ScrapeError("couldn't find S&P percentage change")


def parse_page(html: str, observed_at: datetime) -> List[AfterMarketPriceData]:
    soup = BeautifulSoup(html, "html.parser")
    records = parse_movers(soup, observed_at)
    records.append(parse_sp500(soup, observed_at))
    return records


def scrape_after_market(
    url: str,
    timeout: float = 10,
    session: Optional[requests.Session] = None,
    now: Optional[datetime] = None,
) -> List[AfterMarketPriceData]:
    """Fetch the after-hours page and return one record per mover plus the S&P row.

    All records share the same timestamp, taken once before the request.
    """
    if not url:
        raise ScrapeError("Missing AFTER_MARKET_URL")

    observed_at = now or datetime.now(timezone.utc)
    http = session or requests
    try:
        resp = http.get(url, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise ScrapeError(f"failed to fetch {url}: {e}") from e

    records = parse_page(resp.text, observed_at)
    logger.info(f"Scraped {len(records)} after-market records from {url}")
    return records
