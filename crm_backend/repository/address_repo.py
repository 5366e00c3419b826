from __future__ import annotations

from sqlite3 import Connection

COLUMNS = "id, customer_id, address_details, city, state, pin_code, created_at"


def get_one(conn: Connection, address_id: int):
    return conn.execute(f"SELECT {COLUMNS} FROM addresses WHERE id = ?", (address_id,)).fetchone()


def list_for_customer(conn: Connection, customer_id: int):
    return conn.execute(
        f"SELECT {COLUMNS} FROM addresses WHERE customer_id = ? ORDER BY created_at DESC, id DESC",
        (customer_id,),
    ).fetchall()


def insert(conn: Connection, customer_id: int, address_details: str, city: str, state: str, pin_code: str) -> int:
    cur = conn.execute(
        "INSERT INTO addresses(customer_id, address_details, city, state, pin_code) VALUES(?, ?, ?, ?, ?)",
        (customer_id, address_details, city, state, pin_code),
    )
    return int(cur.lastrowid)


def update(conn: Connection, address_id: int, address_details: str, city: str, state: str, pin_code: str) -> int:
    cur = conn.execute(
        "UPDATE addresses SET address_details = ?, city = ?, state = ?, pin_code = ? WHERE id = ?",
        (address_details, city, state, pin_code, address_id),
    )
    return cur.rowcount


def delete(conn: Connection, address_id: int) -> int:
    return conn.execute("DELETE FROM addresses WHERE id = ?", (address_id,)).rowcount


def delete_for_customer(conn: Connection, customer_id: int) -> int:
    return conn.execute("DELETE FROM addresses WHERE customer_id = ?", (customer_id,)).rowcount


def distinct_cities(conn: Connection) -> list[str]:
    return [r["city"] for r in conn.execute("SELECT DISTINCT city FROM addresses ORDER BY city").fetchall()]
