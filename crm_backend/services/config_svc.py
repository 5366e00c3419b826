# crm_backend/services/config_svc.py
from ..db import get_conn
from ..logs import LogContext

DEFAULTS = {
    "default_page_size": "10",
    "max_page_size": "100",
    # Load seeds/*.csv on startup when the customers table is empty
    "seed_sample_data": "1",
}

def _to_int(v, default: str) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return int(default)

def ensure_default_config(db_path: str | None = None):
    """Insert missing keys without overwriting existing values."""
    with get_conn(db_path) as conn:
        for k, v in DEFAULTS.items():
            conn.execute(
                "INSERT INTO config(key, value) VALUES (?, ?) "
                "ON CONFLICT(key) DO NOTHING",
                (k, v),
            )

def get_config(db_path: str | None = None) -> dict:
    with get_conn(db_path) as conn:
        rows = conn.execute("SELECT key, value FROM config").fetchall()
    cfg = {r["key"]: r["value"] for r in rows}

    out = {
        "default_page_size": _to_int(cfg.get("default_page_size"), DEFAULTS["default_page_size"]),
        "max_page_size": _to_int(cfg.get("max_page_size"), DEFAULTS["max_page_size"]),
        "seed_sample_data": bool(_to_int(cfg.get("seed_sample_data"), DEFAULTS["seed_sample_data"])),
    }
    return out

def update_config(upd: dict, log: LogContext, db_path: str | None = None) -> list[str]:
    unknown = [k for k in upd if k not in DEFAULTS]
    if unknown:
        raise ValueError(f"unknown config keys: {', '.join(sorted(unknown))}")
    for k, v in upd.items():
        try:
            iv = int(v)
        except (TypeError, ValueError):
            raise ValueError(f"{k} must be an integer") from None
        if k.endswith("_page_size") and iv < 1:
            raise ValueError(f"{k} must be >= 1")

    updated = []
    with get_conn(db_path) as conn:
        before = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
        for k, v in upd.items():
            conn.execute(
                "INSERT INTO config(key,value) VALUES(?,?) "
                "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                (k, str(int(v)))
            )
            updated.append(k)
        after = {r["key"]: r["value"] for r in conn.execute("SELECT key,value FROM config")}
    log.set_before(before); log.set_after(after)
    return updated
