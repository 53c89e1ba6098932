from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query
from sqlalchemy.orm import Session

from aftermarket import repository
from aftermarket.db.session import SessionLocal
from aftermarket.models.after_market import SYMBOL_MAX_LENGTH

router = APIRouter()


def _require_aware(name: str, value: datetime) -> None:
    if value.tzinfo is None or value.utcoffset() is None:
        raise HTTPException(400, f"{name} must include a timezone offset")


@router.get("/after-market/range/dates")
def list_by_date_range(start: datetime, end: datetime) -> List[Dict[str, Any]]:
    _require_aware("start", start)
    _require_aware("end", end)
    if start >= end:
        raise HTTPException(400, "start must be before end")

    db: Session = SessionLocal()
    try:
        rows = repository.records_in_date_range(db, start, end)
        return [repository.sa_to_dict(r) for r in rows]
    finally:
        db.close()


@router.get("/after-market/{symbol}")
def list_by_symbol(symbol: str, limit: Optional[int] = Query(None, ge=1)) -> List[Dict[str, Any]]:
    s = symbol.strip().upper()
    if not s:
        raise HTTPException(400, "symbol is required")
    if len(s) > SYMBOL_MAX_LENGTH:
        raise HTTPException(400, f"symbol must be at most {SYMBOL_MAX_LENGTH} characters")

    db: Session = SessionLocal()
    try:
        rows = repository.records_for_symbol(db, s, limit=limit)
        return [repository.sa_to_dict(r) for r in rows]
    finally:
        db.close()


@router.get("/after-market")
def list_by_percentage(min_pct: float, max_pct: float) -> List[Dict[str, Any]]:
    if min_pct > max_pct:
        raise HTTPException(400, "min_pct must not exceed max_pct")

    db: Session = SessionLocal()
    try:
        rows = repository.records_in_percentage_range(db, min_pct, max_pct)
        return [repository.sa_to_dict(r) for r in rows]
    finally:
        db.close()
