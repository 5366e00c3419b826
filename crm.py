#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Customer management command line (SQLite)

Commands:
  init                Create tables and default config
  seed                Load sample customers/addresses from seeds/*.csv (only into an empty DB unless --force)
  add-customer        Create a customer
  add-address         Add an address to an existing customer
  delete-customer     Delete a customer together with its addresses
  list                Print one page of customers (search / city filter)
  export              Export the filtered customer list to ./exports as CSV
  cities              Print distinct address cities

Notes:
- The DB path comes from --db, else CRM_DB_PATH, else config.yaml (see crm_backend/db.py).
- Every write goes through the same validation and uniqueness checks as the HTTP API.
"""

import argparse
import datetime as dt
import os

import pandas as pd

from crm_backend.db import ensure_schema, get_db_path
from crm_backend.errors import ConflictError, NotFoundError, ValidationError
from crm_backend.logs import LogContext, ensure_log_schema
from crm_backend.services import address_svc, customer_svc
from crm_backend.services.config_svc import ensure_default_config
from crm_backend.services.seed_svc import DEFAULT_ADDRESSES_CSV, DEFAULT_CUSTOMERS_CSV, load_sample_data

LIST_COLUMNS = ["id", "first_name", "last_name", "phone_number", "address_count", "created_at"]


def _db(args) -> str:
    return args.db or get_db_path()


def _log(args, action: str) -> LogContext:
    return LogContext(action, user="cli", db_path=_db(args))


def _run_write(log: LogContext, fn, *a, **kw):
    try:
        res = fn(*a, log=log, **kw)
    except (ValidationError, ConflictError, NotFoundError) as e:
        log.write("ERROR", str(e))
        raise SystemExit(f"error: {e}")
    log.write("OK")
    return res


# ---------------- Commands ----------------

def cmd_init(args):
    db = _db(args)
    ensure_schema(db)
    ensure_log_schema(db)
    ensure_default_config(db)
    print(f"DB initialized at {db}.")


def cmd_seed(args):
    db = _db(args)
    res = _run_write(
        _log(args, "CLI_SEED"), load_sample_data, args.customers, args.addresses,
        only_if_empty=not args.force, db_path=db,
    )
    if res["skipped"]:
        print("customers table not empty; nothing loaded (use --force).")
    else:
        print(f"loaded {res['created_customer']} customers, {res['created_address']} addresses.")


def cmd_add_customer(args):
    payload = {"first_name": args.first_name, "last_name": args.last_name, "phone_number": args.phone}
    created = _run_write(_log(args, "CUSTOMER_CREATE"), customer_svc.create_customer, payload, db_path=_db(args))
    print(f"customer {created['id']} created.")


def cmd_add_address(args):
    payload = {
        "address_details": args.details,
        "city": args.city,
        "state": args.state,
        "pin_code": args.pin_code,
    }
    created = _run_write(
        _log(args, "ADDRESS_CREATE"), address_svc.add_address, args.customer_id, payload, db_path=_db(args)
    )
    print(f"address {created['id']} added to customer {args.customer_id}.")


def cmd_delete_customer(args):
    _run_write(_log(args, "CUSTOMER_DELETE"), customer_svc.delete_customer, args.id, db_path=_db(args))
    print(f"customer {args.id} deleted.")


def cmd_list(args):
    try:
        rows, pagination = customer_svc.list_customers(
            search=args.search, city=args.city, page=args.page, page_size=args.limit, db_path=_db(args)
        )
    except ValidationError as e:
        raise SystemExit(f"error: {e}")
    df = pd.DataFrame(rows, columns=LIST_COLUMNS)

    pd.set_option("display.max_rows", 200)
    pd.set_option("display.width", 160)

    print("\n=== Customers ===")
    if not df.empty:
        print(df.to_string(index=False))
    else:
        print("(empty)")
    print(
        f"\npage {pagination['current_page']}/{pagination['total_pages']}, "
        f"{pagination['total_records']} records, {pagination['per_page']} per page"
    )


def cmd_export(args):
    db = _db(args)
    first, pagination = customer_svc.list_customers(search=args.search, city=args.city, page=1, db_path=db)
    rows = list(first)
    for page in range(2, pagination["total_pages"] + 1):
        more, _ = customer_svc.list_customers(search=args.search, city=args.city, page=page, db_path=db)
        rows.extend(more)
    df = pd.DataFrame(rows, columns=LIST_COLUMNS)

    out_dir = args.out or os.path.join(os.path.dirname(os.path.abspath(__file__)), "exports")
    os.makedirs(out_dir, exist_ok=True)
    stamp = dt.datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(out_dir, f"customers_{stamp}.csv")
    df.to_csv(path, index=False, encoding="utf-8-sig")
    print(f"{len(df)} customers exported to {path}")


def cmd_cities(args):
    for c in address_svc.list_cities(db_path=_db(args)):
        print(c)


# ---------------- Entry ----------------

def main():
    parser = argparse.ArgumentParser(description="Customer management (SQLite)")
    parser.add_argument("--db", default=None, help="SQLite file (overrides CRM_DB_PATH/config.yaml)")
    sub = parser.add_subparsers()

    p_init = sub.add_parser("init", help="create tables and default config")
    p_init.set_defaults(func=cmd_init)

    p_seed = sub.add_parser("seed", help="load sample data from CSV")
    p_seed.add_argument("--customers", default=DEFAULT_CUSTOMERS_CSV)
    p_seed.add_argument("--addresses", default=DEFAULT_ADDRESSES_CSV)
    p_seed.add_argument("--force", action="store_true", help="load even if customers exist")
    p_seed.set_defaults(func=cmd_seed)

    p_cus = sub.add_parser("add-customer", help="create a customer")
    p_cus.add_argument("--first_name", required=True)
    p_cus.add_argument("--last_name", required=True)
    p_cus.add_argument("--phone", required=True, help="10 digits")
    p_cus.set_defaults(func=cmd_add_customer)

    p_adr = sub.add_parser("add-address", help="add an address to a customer")
    p_adr.add_argument("--customer_id", required=True, type=int)
    p_adr.add_argument("--details", required=True)
    p_adr.add_argument("--city", required=True)
    p_adr.add_argument("--state", required=True)
    p_adr.add_argument("--pin_code", required=True, help="6 digits")
    p_adr.set_defaults(func=cmd_add_address)

    p_del = sub.add_parser("delete-customer", help="delete a customer and its addresses")
    p_del.add_argument("--id", required=True, type=int)
    p_del.set_defaults(func=cmd_delete_customer)

    p_list = sub.add_parser("list", help="print a page of customers")
    p_list.add_argument("--search", required=False)
    p_list.add_argument("--city", required=False)
    p_list.add_argument("--page", type=int, default=1)
    p_list.add_argument("--limit", type=int, default=None)
    p_list.set_defaults(func=cmd_list)

    p_exp = sub.add_parser("export", help="export filtered customers to CSV")
    p_exp.add_argument("--search", required=False)
    p_exp.add_argument("--city", required=False)
    p_exp.add_argument("--out", required=False, help="output directory (default ./exports)")
    p_exp.set_defaults(func=cmd_export)

    p_city = sub.add_parser("cities", help="print distinct cities")
    p_city.set_defaults(func=cmd_cities)

    args = parser.parse_args()
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
