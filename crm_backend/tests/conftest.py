import os
import sys
import sqlite3
import pytest
from pathlib import Path

# Ensure project root on sys.path
_THIS_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _THIS_DIR.parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "customers_test.db"
    # Point crm_backend to this temp DB
    os.environ["CRM_DB_PATH"] = str(path)
    # Initialize schema
    schema = Path(_PROJECT_ROOT / "schema.sql").read_text(encoding="utf-8")
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(schema)
        conn.commit()
    finally:
        conn.close()
    from crm_backend.logs import ensure_log_schema
    ensure_log_schema()
    return str(path)


@pytest.fixture()
def client(tmp_db_path):
    from crm_backend.services.config_svc import ensure_default_config
    ensure_default_config()
    # Import app after DB ready
    from crm_backend.api import app
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture()
def sample_data(tmp_db_path):
    """The reference sample set: 5 customers, each with a Mumbai and a Delhi address."""
    from crm_backend.services.seed_svc import load_sample_data
    return load_sample_data()


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Clean tables before each test for isolation
    # Safety: ensure we only ever wipe the temp DB, never a real one
    assert os.environ.get("CRM_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    tables = [
        "addresses",
        "customers",
        "config",
        "operation_log",
    ]
    conn = sqlite3.connect(tmp_db_path)
    try:
        for t in tables:
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield
