from __future__ import annotations

# invoicing/db.py
import logging
import os
import sqlite3
from contextlib import contextmanager
from typing import Iterator

import yaml

logger = logging.getLogger(__name__)

# DB path resolution order:
# 1) INVOICING_DB_PATH environment variable
# 2) config.yaml test_db_path (when running under tests)
# 3) config.yaml db_path
# 4) invoicing.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "invoicing.db")
SCHEMA_PATH = os.path.join(_PROJECT_ROOT, "schema.sql")


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning("ignoring unreadable config.yaml: %s", e)
        return {}
    out = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def _is_test_env() -> bool:
    return (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)


def get_db_path() -> str:
    env_path = os.environ.get("INVOICING_DB_PATH")
    cfg = _read_config_yaml()
    is_test = _is_test_env()

    if env_path:
        path = env_path
    elif is_test and cfg.get("test_db_path"):
        path = cfg["test_db_path"]
    elif cfg.get("db_path"):
        path = cfg["db_path"]
    else:
        path = _ROOT_DB

    if not os.path.isabs(path):
        path = os.path.join(_PROJECT_ROOT, path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection, preferring an explicit db_path over get_db_path().
    Foreign keys are enforced, rows come back as sqlite3.Row, and every
    statement autocommits.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(path, check_same_thread=False, isolation_level=None)
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()


def ensure_schema(conn: sqlite3.Connection, schema_path: str | None = None) -> None:
    """Execute the DDL script; safe to run repeatedly."""
    path = schema_path or SCHEMA_PATH
    with open(path, "r", encoding="utf-8") as f:
        conn.executescript(f.read())
    logger.debug("schema loaded from %s", path)


def ping(conn: sqlite3.Connection) -> bool:
    """Healthcheck: the connection answers and both tables exist."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name IN ('invoices','invoice_items')"
    ).fetchall()
    return len(rows) == 2
