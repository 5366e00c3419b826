from __future__ import annotations

from sqlite3 import Connection
from typing import Optional

COLUMNS = "c.id, c.first_name, c.last_name, c.phone_number, c.created_at"


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def filter_clause(search: Optional[str], city: Optional[str]) -> tuple[str, list]:
    """
    Build the WHERE clause shared by the page query and the count query.

    Each active filter contributes one predicate plus its positional params;
    predicates are AND-ed. City goes through EXISTS on the customer's own
    addresses so the outer join stays one-row-per-address and address_count
    keeps counting every address the customer owns.
    """
    where: list[str] = []
    params: list = []
    if search:
        where.append(
            "(c.first_name LIKE ? ESCAPE '\\' OR c.last_name LIKE ? ESCAPE '\\' "
            "OR c.phone_number LIKE ? ESCAPE '\\')"
        )
        pat = _like_pattern(search)
        params.extend([pat, pat, pat])
    if city:
        where.append("EXISTS (SELECT 1 FROM addresses ca WHERE ca.customer_id = c.id AND ca.city = ?)")
        params.append(city)
    wh = " WHERE " + " AND ".join(where) if where else ""
    return wh, params


def count_matching(conn: Connection, search: Optional[str], city: Optional[str]) -> int:
    wh, params = filter_clause(search, city)
    sql = f"SELECT COUNT(DISTINCT c.id) AS cnt FROM customers c{wh}"
    return int(conn.execute(sql, params).fetchone()["cnt"])


def list_page(conn: Connection, search: Optional[str], city: Optional[str], limit: int, offset: int):
    wh, params = filter_clause(search, city)
    sql = (
        f"SELECT {COLUMNS}, COUNT(a.id) AS address_count "
        "FROM customers c LEFT JOIN addresses a ON a.customer_id = c.id"
        f"{wh} "
        "GROUP BY c.id "
        "ORDER BY c.created_at DESC, c.id DESC "
        "LIMIT ? OFFSET ?"
    )
    return conn.execute(sql, [*params, limit, offset]).fetchall()


def get_one(conn: Connection, customer_id: int):
    return conn.execute(f"SELECT {COLUMNS} FROM customers c WHERE c.id = ?", (customer_id,)).fetchone()


def exists(conn: Connection, customer_id: int) -> bool:
    row = conn.execute("SELECT 1 FROM customers WHERE id = ?", (customer_id,)).fetchone()
    return row is not None


def phone_taken(conn: Connection, phone_number: str, exclude_id: Optional[int] = None) -> bool:
    if exclude_id is None:
        row = conn.execute("SELECT 1 FROM customers WHERE phone_number = ?", (phone_number,)).fetchone()
    else:
        row = conn.execute(
            "SELECT 1 FROM customers WHERE phone_number = ? AND id != ?", (phone_number, exclude_id)
        ).fetchone()
    return row is not None


def insert(conn: Connection, first_name: str, last_name: str, phone_number: str) -> int:
    cur = conn.execute(
        "INSERT INTO customers(first_name, last_name, phone_number) VALUES(?, ?, ?)",
        (first_name, last_name, phone_number),
    )
    return int(cur.lastrowid)


def update(conn: Connection, customer_id: int, first_name: str, last_name: str, phone_number: str) -> int:
    cur = conn.execute(
        "UPDATE customers SET first_name = ?, last_name = ?, phone_number = ? WHERE id = ?",
        (first_name, last_name, phone_number, customer_id),
    )
    return cur.rowcount


def delete(conn: Connection, customer_id: int) -> int:
    return conn.execute("DELETE FROM customers WHERE id = ?", (customer_id,)).rowcount


def count_all(conn: Connection) -> int:
    return int(conn.execute("SELECT COUNT(1) AS c FROM customers").fetchone()["c"])
