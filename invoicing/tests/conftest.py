import os
import sqlite3

import pytest

from invoicing.db import ensure_schema, get_conn


@pytest.fixture(scope="session")
def tmp_db_path(tmp_path_factory):
    path = tmp_path_factory.mktemp("db") / "invoicing_test.db"
    # Point the package at this temp DB
    os.environ["INVOICING_DB_PATH"] = str(path)
    conn = sqlite3.connect(str(path))
    try:
        ensure_schema(conn)
        conn.commit()
    finally:
        conn.close()
    return str(path)


@pytest.fixture()
def conn(tmp_db_path):
    with get_conn(tmp_db_path) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_db(tmp_db_path):
    # Only ever wipe the temp DB
    assert os.environ.get("INVOICING_DB_PATH") == tmp_db_path, "Refusing to clean non-temp DB"
    conn = sqlite3.connect(tmp_db_path)
    try:
        # children first, invoice_items references invoices
        for t in ("invoice_items", "invoices", "invoice_audit"):
            conn.execute(f"DELETE FROM {t}")
        conn.commit()
    finally:
        conn.close()
    yield
