from __future__ import annotations

from datetime import datetime, timezone

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from aftermarket.db import session as db_session
from aftermarket.db.schema import apply_schema
from aftermarket.models.after_market import AfterMarketPriceData


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    apply_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture
def db(engine):
    s = sessionmaker(bind=engine)()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def configured_engine(engine, monkeypatch):
    """Route SessionLocal()/get_engine() to the test engine."""
    monkeypatch.setattr(db_session, "_engine", None)
    monkeypatch.setattr(db_session, "_session_factory", None)
    db_session.configure(engine)
    return engine


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture
def sample_records():
    first = utc(2019, 6, 3, 21, 0)
    second = utc(2019, 6, 4, 21, 0)
    return [
        AfterMarketPriceData(symbol="AAPL", percentage=1.25, date=first),
        AfterMarketPriceData(symbol="TSLA", percentage=-3.99, date=first),
        AfterMarketPriceData(symbol="NVDA", percentage=7.06, date=first),
        AfterMarketPriceData(symbol="S&P", percentage=-0.71, date=first),
        AfterMarketPriceData(symbol="AAPL", percentage=-0.5, date=second),
        AfterMarketPriceData(symbol="S&P", percentage=0.2, date=second),
    ]
