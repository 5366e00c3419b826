"""
Customer query engine: filtered/paginated listing with address counts,
plus customer CRUD with phone-number uniqueness and cascade delete.
"""
from __future__ import annotations

import logging
import sqlite3
from typing import Any, Mapping, Optional

from ..db import transaction
from ..domain import paging
from ..domain.validation import clean_customer, clean_filter
from ..errors import ConflictError, NotFoundError
from ..logs import LogContext
from ..repository import address_repo, customer_repo
from .config_svc import get_config
from .utils import row_to_dict, store_conn

logger = logging.getLogger(__name__)

PHONE_EXISTS = "Phone number already exists"
CUSTOMER_NOT_FOUND = "Customer not found"


def list_customers(
    search: Optional[str] = None,
    city: Optional[str] = None,
    page: int = 1,
    page_size: Optional[int] = None,
    db_path: str | None = None,
) -> tuple[list[dict[str, Any]], dict]:
    """
    One page of customers, newest first, each with address_count.

    search matches first_name/last_name/phone_number as a case-insensitive
    substring; city requires at least one owned address in that city. The
    total comes from the same filter set counted by distinct customer id,
    read in the same transaction as the page so both see one snapshot.
    """
    cfg = get_config(db_path)
    page = paging.resolve_page(page)
    size = paging.resolve_page_size(page_size, cfg["default_page_size"], cfg["max_page_size"])
    offset = paging.offset_for(page, size)
    search = clean_filter(search)
    city = clean_filter(city)

    with store_conn(db_path) as conn, transaction(conn):
        total = customer_repo.count_matching(conn, search, city)
        rows = customer_repo.list_page(conn, search, city, size, offset)
    return [dict(r) for r in rows], paging.pagination_meta(total, page, size)


def get_customer(customer_id: int, db_path: str | None = None) -> dict[str, Any]:
    with store_conn(db_path, missing=CUSTOMER_NOT_FOUND) as conn:
        row = customer_repo.get_one(conn, customer_id)
        if row is None:
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        customer = dict(row)
        customer["addresses"] = [dict(r) for r in address_repo.list_for_customer(conn, customer_id)]
    return customer


def create_customer(payload: Mapping[str, Any], log: LogContext | None = None, db_path: str | None = None) -> dict:
    data = clean_customer(payload)
    with store_conn(db_path) as conn:
        if customer_repo.phone_taken(conn, data["phone_number"]):
            raise ConflictError(PHONE_EXISTS)
        try:
            new_id = customer_repo.insert(conn, data["first_name"], data["last_name"], data["phone_number"])
        except sqlite3.IntegrityError as e:
            # lost a race with a concurrent create; the UNIQUE constraint decides
            raise ConflictError(PHONE_EXISTS) from e
        created = row_to_dict(customer_repo.get_one(conn, new_id))
    if log is not None:
        log.set_entity("CUSTOMER", new_id)
        log.set_after(created)
    logger.info("customer %s created", new_id)
    return created


def update_customer(
    customer_id: int, payload: Mapping[str, Any], log: LogContext | None = None, db_path: str | None = None
) -> dict:
    data = clean_customer(payload)
    with store_conn(db_path, missing=CUSTOMER_NOT_FOUND) as conn:
        before = row_to_dict(customer_repo.get_one(conn, customer_id))
        if before is None:
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        if customer_repo.phone_taken(conn, data["phone_number"], exclude_id=customer_id):
            raise ConflictError(PHONE_EXISTS)
        try:
            changed = customer_repo.update(
                conn, customer_id, data["first_name"], data["last_name"], data["phone_number"]
            )
        except sqlite3.IntegrityError as e:
            raise ConflictError(PHONE_EXISTS) from e
        if not changed:
            # deleted between the existence check and the update
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        updated = row_to_dict(customer_repo.get_one(conn, customer_id))
    if log is not None:
        log.set_entity("CUSTOMER", customer_id)
        log.set_before(before)
        log.set_after(updated)
    return updated


def delete_customer(customer_id: int, log: LogContext | None = None, db_path: str | None = None) -> None:
    """Remove the customer and every address it owns as one transaction."""
    with store_conn(db_path, missing=CUSTOMER_NOT_FOUND) as conn:
        before = row_to_dict(customer_repo.get_one(conn, customer_id))
        if before is None:
            raise NotFoundError(CUSTOMER_NOT_FOUND)
        with transaction(conn):
            removed_addresses = address_repo.delete_for_customer(conn, customer_id)
            if not customer_repo.delete(conn, customer_id):
                raise NotFoundError(CUSTOMER_NOT_FOUND)
    if log is not None:
        log.set_entity("CUSTOMER", customer_id)
        log.set_before(before)
        log.set_after({"deleted_addresses": removed_addresses})
    logger.info("customer %s deleted with %d addresses", customer_id, removed_addresses)
