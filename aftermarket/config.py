from __future__ import annotations

from dataclasses import dataclass
from dotenv import load_dotenv
import os


load_dotenv()


@dataclass(frozen=True)
class ScrapeSettings:
    after_market_url: str
    request_timeout: float


@dataclass(frozen=True)
class Settings:
    database_url: str
    after_market_url: str
    request_timeout: float


def get_database_url() -> str:
    database_url = os.getenv("DATABASE_URL") or os.getenv("PG_URL") or ""
    if not database_url:
        raise RuntimeError("Missing DATABASE_URL (or PG_URL)")
    return database_url


def get_scrape_settings() -> ScrapeSettings:
    # AFTER_MARKET_URL is checked by the scraper itself
    return ScrapeSettings(
        after_market_url=os.getenv("AFTER_MARKET_URL", ""),
        request_timeout=float(os.getenv("AFTER_MARKET_TIMEOUT", "10")),
    )


def get_settings() -> Settings:
    database_url = get_database_url()
    scrape = get_scrape_settings()

    return Settings(
        database_url=database_url,
        after_market_url=scrape.after_market_url,
        request_timeout=scrape.request_timeout,
    )
