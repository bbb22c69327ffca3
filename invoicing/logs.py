from __future__ import annotations

# invoicing/logs.py
# Audit trail of invoice / invoice-item creation, stored in invoice_audit (schema.sql).
import datetime as dt
import json
import time
import uuid
from sqlite3 import Connection
from typing import Optional
from uuid import UUID

from .db import get_conn
from .domain.models import Invoice, InvoiceItem
from .errors import storage_errors
from .repository import id_key


class LogContext:
    """One audited create call: which invoice (and item) it touched, and how it ended."""

    def __init__(self, action: str, invoice_id: UUID | str, item_id: UUID | str | None = None,
                 account_id: UUID | str | None = None, user: str = "system", db_path: str | None = None):
        self.action = action
        self.invoice_id = id_key(invoice_id)
        self.item_id = id_key(item_id) if item_id is not None else None
        self.account_id = id_key(account_id) if account_id is not None else None
        self.user = user
        self.db_path = db_path
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None

    @classmethod
    def for_invoice(cls, invoice: Invoice, action: str = "CREATE_INVOICE", **kw) -> "LogContext":
        log = cls(action, invoice.id, account_id=invoice.account_id, **kw)
        log.payload = invoice.model_dump(mode="json")
        return log

    @classmethod
    def for_item(cls, item: InvoiceItem, action: str = "CREATE_INVOICE_ITEM", **kw) -> "LogContext":
        log = cls(action, item.invoice_id, item_id=item.id, **kw)
        log.payload = item.model_dump(mode="json")
        return log

    def write(self, result: str = "OK", err: Optional[str] = None):
        rec = {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "invoice_id": self.invoice_id,
            "item_id": self.item_id,
            "account_id": self.account_id,
            "request_id": self.request_id,
            "payload_json": json.dumps(self.payload, ensure_ascii=False) if self.payload is not None else None,
            "result": result,
            "err_msg": err,
            "latency_ms": int((time.perf_counter() - self.start) * 1000),
        }
        with get_conn(self.db_path) as conn:
            conn.execute(
                """INSERT INTO invoice_audit
                (ts,user,action,invoice_id,item_id,account_id,request_id,payload_json,result,err_msg,latency_ms)
                VALUES(:ts,:user,:action,:invoice_id,:item_id,:account_id,:request_id,:payload_json,:result,:err_msg,:latency_ms)""",
                rec
            )


def _row_to_entry(row) -> dict:
    out = dict(row)
    raw = out.pop("payload_json")
    out["payload"] = json.loads(raw) if raw else None
    return out


def invoice_audit_trail(conn: Connection, invoice_id: UUID | str) -> list[dict]:
    """Audit entries for an invoice and all of its items, oldest first."""
    with storage_errors(f"audit trail for invoice {invoice_id}"):
        rows = conn.execute(
            "SELECT * FROM invoice_audit WHERE invoice_id=? ORDER BY id ASC", (id_key(invoice_id),)
        ).fetchall()
    return [_row_to_entry(r) for r in rows]


def item_audit_trail(conn: Connection, item_id: UUID | str) -> list[dict]:
    with storage_errors(f"audit trail for invoice item {item_id}"):
        rows = conn.execute(
            "SELECT * FROM invoice_audit WHERE item_id=? ORDER BY id ASC", (id_key(item_id),)
        ).fetchall()
    return [_row_to_entry(r) for r in rows]
