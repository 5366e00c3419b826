# crm_backend/services/seed_svc.py
from __future__ import annotations

import os

import pandas as pd

from ..db import transaction
from ..domain.validation import clean_address, clean_customer
from ..errors import ValidationError
from ..logs import LogContext
from ..repository import address_repo, customer_repo
from .utils import store_conn

_SEEDS_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "seeds")
DEFAULT_CUSTOMERS_CSV = os.path.join(_SEEDS_DIR, "customers.csv")
DEFAULT_ADDRESSES_CSV = os.path.join(_SEEDS_DIR, "addresses.csv")


def load_sample_data(
    customers_csv: str = DEFAULT_CUSTOMERS_CSV,
    addresses_csv: str = DEFAULT_ADDRESSES_CSV,
    log: LogContext | None = None,
    only_if_empty: bool = True,
    db_path: str | None = None,
) -> dict:
    """Import customers and their addresses from CSV.

       customers.csv: first_name, last_name, phone_number
       addresses.csv: phone_number, address_details, city, state, pin_code
       Addresses link to their owner by phone_number. Rows go through the same
       validation as API input; a customer whose phone already exists is kept
       and only receives the addresses. Everything commits as one transaction.
    """
    # dtype=str keeps leading zeros in phone/pin codes
    cus_df = pd.read_csv(customers_csv, dtype=str, keep_default_na=False)
    adr_df = pd.read_csv(addresses_csv, dtype=str, keep_default_na=False)

    created_cus = 0
    created_adr = 0
    with store_conn(db_path) as conn:
        if only_if_empty and customer_repo.count_all(conn) > 0:
            return {"created_customer": 0, "created_address": 0, "skipped": True}

        with transaction(conn):
            ids_by_phone: dict[str, int] = {}
            for _, r in cus_df.iterrows():
                data = clean_customer(r.to_dict())
                row = conn.execute(
                    "SELECT id FROM customers WHERE phone_number = ?", (data["phone_number"],)
                ).fetchone()
                if row:
                    ids_by_phone[data["phone_number"]] = row["id"]
                    continue
                ids_by_phone[data["phone_number"]] = customer_repo.insert(
                    conn, data["first_name"], data["last_name"], data["phone_number"]
                )
                created_cus += 1

            for _, r in adr_df.iterrows():
                phone = str(r["phone_number"]).strip()
                owner = ids_by_phone.get(phone)
                if owner is None:
                    raise ValidationError(f"address row refers to unknown phone_number {phone}")
                data = clean_address(r.to_dict())
                address_repo.insert(
                    conn, owner, data["address_details"], data["city"], data["state"], data["pin_code"]
                )
                created_adr += 1

    res = {"created_customer": created_cus, "created_address": created_adr, "skipped": False}
    if log is not None:
        log.set_after(res)
    return res
