from __future__ import annotations

# crm_backend/services/utils.py
import logging
import sqlite3
from contextlib import contextmanager
from typing import Iterator

from ..db import get_conn
from ..errors import NotFoundError, StoreFailure

logger = logging.getLogger(__name__)


@contextmanager
def store_conn(db_path: str | None = None, missing: str | None = None) -> Iterator[sqlite3.Connection]:
    """get_conn() for service code: raw sqlite3 errors leave as StoreFailure.

    Callers that expect a specific sqlite3 error (IntegrityError on the phone
    UNIQUE constraint) catch it inside the block before it reaches here.
    `missing` is the NotFound message for by-id lookups: an id too large to
    bind as a SQLite INTEGER cannot name a stored row.
    """
    try:
        with get_conn(db_path) as conn:
            yield conn
    except OverflowError as e:
        if missing is not None:
            raise NotFoundError(missing) from e
        logger.exception("value out of store range: %s", e)
        raise StoreFailure(str(e)) from e
    except sqlite3.Error as e:
        logger.exception("store failure: %s", e)
        raise StoreFailure(str(e)) from e


def row_to_dict(row) -> dict | None:
    return None if row is None else dict(row)
