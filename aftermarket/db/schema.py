"""Idempotent creation of the after_market table and its indexes.

``apply_schema`` and the Alembic revision ``0001_create_after_market`` build
the same table. The revision skips the table when it already exists, so a
database set up with ``init-db`` can later be handed to ``alembic upgrade head``.
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import create_mock_engine, inspect
from sqlalchemy.engine import Engine

from aftermarket.db.base import Base
from aftermarket.db.session import storage_errors
from aftermarket.models.after_market import TABLE_NAME, AfterMarketRecord

logger = logging.getLogger(__name__)


def apply_schema(engine: Engine) -> bool:
    """Create the table and its indexes unless the table already exists.

    Returns True when the table was created by this call.
    """
    with storage_errors():
        if inspect(engine).has_table(TABLE_NAME):
            logger.info(f"Table {TABLE_NAME} already exists, nothing to do")
            return False

        # indexes are emitted along with the table, so they share its existence check
        Base.metadata.create_all(engine, tables=[AfterMarketRecord.__table__], checkfirst=True)
    logger.info(f"Created table {TABLE_NAME} with indexes")
    return True


def drop_schema(engine: Engine) -> None:
    with storage_errors():
        Base.metadata.drop_all(engine, tables=[AfterMarketRecord.__table__], checkfirst=True)
    logger.info(f"Dropped table {TABLE_NAME}")


def render_ddl(dialect: str = "postgresql") -> List[str]:
    """Return the CREATE statements for the given dialect without connecting."""
    statements: List[str] = []

    def _collect(sql, *multiparams, **params):
        statements.append(str(sql.compile(dialect=mock.dialect)).strip() + ";")

    mock = create_mock_engine(f"{dialect}://", _collect)
    Base.metadata.create_all(mock, tables=[AfterMarketRecord.__table__], checkfirst=False)
    return statements
