from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Column, String, Double, DateTime, Index
from aftermarket.db.base import Base

TABLE_NAME = "after_market"
SYMBOL_MAX_LENGTH = 10


class AfterMarketRecord(Base):
    __tablename__ = TABLE_NAME
    symbol = Column(String(SYMBOL_MAX_LENGTH), primary_key=True, nullable=False)
    percentage = Column(Double, nullable=False)
    # NOT NULL: part of the primary key
    date = Column(DateTime(timezone=True), primary_key=True, nullable=False)

    __table_args__ = (
        Index("ix_after_market_symbol", "symbol"),
        Index("ix_after_market_percentage", "percentage"),
        Index("ix_after_market_date", "date"),
    )

    def __repr__(self) -> str:
        return f"AfterMarketRecord(symbol={self.symbol!r}, percentage={self.percentage!r}, date={self.date!r})"


@dataclass(frozen=True)
class AfterMarketPriceData:
    """One scraped after-hours price change, not yet persisted."""

    symbol: str
    percentage: float
    date: datetime
