from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from aftermarket.config import get_settings
from aftermarket.errors import StorageError

logger = logging.getLogger(__name__)

_engine: Optional[Engine] = None
_session_factory: Optional[sessionmaker] = None


def get_engine() -> Engine:
    global _engine
    if _engine is None:
        _engine = create_engine(get_settings().database_url, future=True)
    return _engine


def SessionLocal():
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(bind=get_engine())
    return _session_factory()


def configure(engine: Engine) -> None:
    """Point the engine and session factory at an existing engine."""
    global _engine, _session_factory
    _engine = engine
    _session_factory = sessionmaker(bind=engine)


@contextmanager
def storage_errors(db: Optional[Session] = None):
    """Re-raise SQLAlchemy errors as StorageError, rolling back db if given."""
    try:
        yield
    except SQLAlchemyError as e:
        if db is not None:
            db.rollback()
        logger.error(f"Database error: {e}")
        raise StorageError(f"database error: {e.__class__.__name__}: {e}") from e
