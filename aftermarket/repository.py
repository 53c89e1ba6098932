"""Writes and lookups for the after_market table."""
from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import func, insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from aftermarket.db.session import storage_errors
from aftermarket.errors import DuplicateRecordError, InvalidRecordError
from aftermarket.models.after_market import SYMBOL_MAX_LENGTH, AfterMarketPriceData, AfterMarketRecord

logger = logging.getLogger(__name__)


def validate_record(record: AfterMarketPriceData) -> Dict[str, Any]:
    """Check a record against the table's constraints and return insertable values.

    The date is converted to UTC.
    """
    symbol = (record.symbol or "").strip()
    if not symbol:
        raise InvalidRecordError("symbol is required")
    if len(symbol) > SYMBOL_MAX_LENGTH:
        raise InvalidRecordError(f"symbol {symbol!r} is longer than {SYMBOL_MAX_LENGTH} characters")

    if isinstance(record.percentage, bool) or not isinstance(record.percentage, (int, float)):
        raise InvalidRecordError(f"percentage for {symbol} must be a number")
    if not math.isfinite(record.percentage):
        raise InvalidRecordError(f"percentage for {symbol} must be finite")

    if not isinstance(record.date, datetime):
        raise InvalidRecordError(f"date for {symbol} is required")
    if record.date.tzinfo is None or record.date.utcoffset() is None:
        raise InvalidRecordError(f"date for {symbol} must be timezone-aware")

    return {
        "symbol": symbol,
        "percentage": float(record.percentage),
        "date": record.date.astimezone(timezone.utc),
    }


def add_records(db: Session, records: Iterable[AfterMarketPriceData]) -> int:
    """Insert a batch of records in one transaction and return how many were written."""
    rows = [validate_record(r) for r in records]
    if not rows:
        return 0

    with storage_errors(db):
        try:
            db.execute(insert(AfterMarketRecord), rows)
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            raise DuplicateRecordError(
                f"after_market already holds a row for one of {sorted({r['symbol'] for r in rows})} at this date"
            ) from exc

    logger.info(f"Inserted {len(rows)} after_market rows")
    return len(rows)


def records_for_symbol(db: Session, symbol: str, limit: Optional[int] = None) -> List[AfterMarketRecord]:
    q = (
        db.query(AfterMarketRecord)
        .filter(AfterMarketRecord.symbol == symbol)
        .order_by(AfterMarketRecord.date.desc())
    )
    if limit is not None:
        q = q.limit(limit)
    with storage_errors():
        return q.all()


def records_in_percentage_range(db: Session, low: float, high: float) -> List[AfterMarketRecord]:
    with storage_errors():
        return (
            db.query(AfterMarketRecord)
            .filter(AfterMarketRecord.percentage.between(low, high))
            .order_by(AfterMarketRecord.percentage.desc())
            .all()
        )


def _require_aware(name: str, value: datetime) -> datetime:
    if not isinstance(value, datetime) or value.tzinfo is None or value.utcoffset() is None:
        raise InvalidRecordError(f"{name} must be a timezone-aware datetime")
    return value.astimezone(timezone.utc)


def records_in_date_range(db: Session, start: datetime, end: datetime) -> List[AfterMarketRecord]:
    start = _require_aware("start", start)
    end = _require_aware("end", end)
    with storage_errors():
        return (
            db.query(AfterMarketRecord)
            .filter(AfterMarketRecord.date >= start, AfterMarketRecord.date < end)
            .order_by(AfterMarketRecord.date.asc())
            .all()
        )


def latest_snapshot_date(db: Session) -> Optional[datetime]:
    with storage_errors():
        return db.query(func.max(AfterMarketRecord.date)).scalar()


def sa_to_dict(obj: Any) -> Dict[str, Any]:
    d = dict(getattr(obj, "__dict__", {}) or {})
    d.pop("_sa_instance_state", None)
    return d
