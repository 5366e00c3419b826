from __future__ import annotations

import sqlite3
from typing import Any, Mapping

from ..domain.validation import clean_address
from ..errors import NotFoundError
from ..logs import LogContext
from ..repository import address_repo, customer_repo
from .customer_svc import CUSTOMER_NOT_FOUND
from .utils import row_to_dict, store_conn

ADDRESS_NOT_FOUND = "Address not found"


def list_addresses(customer_id: int, db_path: str | None = None) -> list[dict[str, Any]]:
    with store_conn(db_path, missing=CUSTOMER_NOT_FOUND) as conn:
        if not customer_repo.exists(conn, customer_id):
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        return [dict(r) for r in address_repo.list_for_customer(conn, customer_id)]


def get_address(address_id: int, db_path: str | None = None) -> dict[str, Any]:
    with store_conn(db_path, missing=ADDRESS_NOT_FOUND) as conn:
        row = address_repo.get_one(conn, address_id)
    if row is None:
        raise NotFoundError(ADDRESS_NOT_FOUND)
    return dict(row)


def add_address(
    customer_id: int, payload: Mapping[str, Any], log: LogContext | None = None, db_path: str | None = None
) -> dict:
    data = clean_address(payload)
    with store_conn(db_path, missing=CUSTOMER_NOT_FOUND) as conn:
        if not customer_repo.exists(conn, customer_id):
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        try:
            new_id = address_repo.insert(
                conn, customer_id, data["address_details"], data["city"], data["state"], data["pin_code"]
            )
        except sqlite3.IntegrityError as e:
            # owner removed after the existence check; the foreign key refuses the row
            raise NotFoundError(CUSTOMER_NOT_FOUND) from e
        created = row_to_dict(address_repo.get_one(conn, new_id))
    if log is not None:
        log.set_entity("ADDRESS", new_id)
        log.set_after(created)
    return created


def update_address(
    address_id: int, payload: Mapping[str, Any], log: LogContext | None = None, db_path: str | None = None
) -> dict:
    data = clean_address(payload)
    with store_conn(db_path, missing=ADDRESS_NOT_FOUND) as conn:
        before = row_to_dict(address_repo.get_one(conn, address_id))
        if before is None:
            raise NotFoundError(ADDRESS_NOT_FOUND)
        changed = address_repo.update(
            conn, address_id, data["address_details"], data["city"], data["state"], data["pin_code"]
        )
        if not changed:
            raise NotFoundError(ADDRESS_NOT_FOUND)
        updated = row_to_dict(address_repo.get_one(conn, address_id))
    if log is not None:
        log.set_entity("ADDRESS", address_id)
        log.set_before(before)
        log.set_after(updated)
    return updated


def delete_address(address_id: int, log: LogContext | None = None, db_path: str | None = None) -> None:
    with store_conn(db_path, missing=ADDRESS_NOT_FOUND) as conn:
        before = row_to_dict(address_repo.get_one(conn, address_id))
        if before is None or not address_repo.delete(conn, address_id):
            raise NotFoundError(ADDRESS_NOT_FOUND)
    if log is not None:
        log.set_entity("ADDRESS", address_id)
        log.set_before(before)


def list_cities(db_path: str | None = None) -> list[str]:
    """Distinct address cities, alphabetical, read live for the city filter."""
    with store_conn(db_path) as conn:
        return address_repo.distinct_cities(conn)
