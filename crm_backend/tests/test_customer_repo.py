"""
Repository tests for the customer listing query: filter clause assembly,
distinct counting and address_count aggregation.
"""
from __future__ import annotations

from crm_backend.db import get_conn
from crm_backend.repository import address_repo, customer_repo


def _seed(conn):
    a = customer_repo.insert(conn, "Meera", "Iyer", "9000000001")
    b = customer_repo.insert(conn, "Kabir", "Shah", "9000000002")
    c = customer_repo.insert(conn, "Noor", "Ali", "9000000003")
    address_repo.insert(conn, a, "1 Marine Drive", "Mumbai", "Maharashtra", "400002")
    address_repo.insert(conn, a, "2 Marine Drive", "Mumbai", "Maharashtra", "400002")
    address_repo.insert(conn, a, "3 Janpath", "Delhi", "Delhi", "110001")
    address_repo.insert(conn, b, "4 Park Street", "Kolkata", "West Bengal", "700016")
    return a, b, c


def test_filter_clause_no_filters():
    wh, params = customer_repo.filter_clause(None, None)
    assert wh == ""
    assert params == []


def test_filter_clause_binds_values_positionally():
    wh, params = customer_repo.filter_clause("ra'j", "Mumbai")
    assert "ra'j" not in wh and "Mumbai" not in wh
    assert wh.count("?") == 4
    assert params == ["%ra'j%", "%ra'j%", "%ra'j%", "Mumbai"]
    assert " AND " in wh


def test_like_pattern_escapes_wildcards():
    _, params = customer_repo.filter_clause("50%_off", None)
    assert params[0] == "%50\\%\\_off%"


def test_list_page_counts_all_addresses_once_per_customer():
    with get_conn() as conn:
        a, b, c = _seed(conn)
        rows = customer_repo.list_page(conn, None, None, 10, 0)
        counts = {r["id"]: r["address_count"] for r in rows}
        assert counts == {a: 3, b: 1, c: 0}
        # newest first
        assert [r["id"] for r in rows] == [c, b, a]


def test_city_filter_does_not_inflate_count():
    with get_conn() as conn:
        a, _, _ = _seed(conn)
        assert customer_repo.count_matching(conn, None, "Mumbai") == 1
        rows = customer_repo.list_page(conn, None, "Mumbai", 10, 0)
        assert len(rows) == 1
        assert rows[0]["id"] == a
        assert rows[0]["address_count"] == 3


def test_customer_without_address_never_matches_city():
    with get_conn() as conn:
        _seed(conn)
        rows = customer_repo.list_page(conn, "Noor", "Mumbai", 10, 0)
        assert rows == []
        assert customer_repo.count_matching(conn, "Noor", None) == 1


def test_search_is_case_insensitive_over_names_and_phone():
    with get_conn() as conn:
        a, b, _ = _seed(conn)
        assert [r["id"] for r in customer_repo.list_page(conn, "meer", None, 10, 0)] == [a]
        assert [r["id"] for r in customer_repo.list_page(conn, "SHAH", None, 10, 0)] == [b]
        assert customer_repo.count_matching(conn, "900000000", None) == 3


def test_phone_taken_excludes_self():
    with get_conn() as conn:
        a, b, _ = _seed(conn)
        assert customer_repo.phone_taken(conn, "9000000001")
        assert not customer_repo.phone_taken(conn, "9000000001", exclude_id=a)
        assert customer_repo.phone_taken(conn, "9000000001", exclude_id=b)


def test_distinct_cities_sorted():
    with get_conn() as conn:
        _seed(conn)
        assert address_repo.distinct_cities(conn) == ["Delhi", "Kolkata", "Mumbai"]
