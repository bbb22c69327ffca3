from __future__ import annotations

from sqlite3 import Connection, Row
from uuid import UUID

from ..domain.models import InvoiceItem
from ..errors import storage_errors
from . import id_key

_COLUMNS = (
    "ii.id, ii.invoice_id, ii.subscription_id, ii.start_date, ii.end_date, "
    "ii.description, ii.amount, ii.rate, ii.currency"
)


def _row_to_item(row: Row) -> InvoiceItem:
    return InvoiceItem(
        id=row["id"],
        invoice_id=row["invoice_id"],
        subscription_id=row["subscription_id"],
        start_date=row["start_date"],
        end_date=row["end_date"],
        description=row["description"] or "",
        amount=row["amount"],
        rate=row["rate"],
        currency=row["currency"],
    )


def create_invoice_item(conn: Connection, item: InvoiceItem) -> InvoiceItem:
    """Insert one line item. The parent invoice must already exist."""
    with storage_errors(f"create invoice item {item.id}"):
        conn.execute(
            "INSERT INTO invoice_items(id, invoice_id, subscription_id, start_date, end_date, "
            "description, amount, rate, currency) VALUES(?,?,?,?,?,?,?,?,?)",
            (
                id_key(item.id),
                id_key(item.invoice_id),
                id_key(item.subscription_id),
                item.start_date.isoformat(),
                item.end_date.isoformat(),
                item.description,
                str(item.amount),
                str(item.rate),
                item.currency.value,
            ),
        )
    return item


def get_invoice_item(conn: Connection, item_id: UUID | str) -> InvoiceItem | None:
    with storage_errors(f"get invoice item {item_id}"):
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM invoice_items ii WHERE ii.id=?", (id_key(item_id),)
        ).fetchone()
    return _row_to_item(row) if row else None


def get_invoice_items_by_subscription(conn: Connection, subscription_id: UUID | str) -> list[InvoiceItem]:
    with storage_errors(f"list invoice items for subscription {subscription_id}"):
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM invoice_items ii WHERE ii.subscription_id=?",
            (id_key(subscription_id),),
        ).fetchall()
    return [_row_to_item(r) for r in rows]


def get_invoice_items_by_invoice(conn: Connection, invoice_id: UUID | str) -> list[InvoiceItem]:
    with storage_errors(f"list invoice items for invoice {invoice_id}"):
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM invoice_items ii WHERE ii.invoice_id=?",
            (id_key(invoice_id),),
        ).fetchall()
    return [_row_to_item(r) for r in rows]


def get_invoice_items_by_account(conn: Connection, account_id: UUID | str) -> list[InvoiceItem]:
    with storage_errors(f"list invoice items for account {account_id}"):
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM invoice_items ii "
            "JOIN invoices i ON i.id = ii.invoice_id "
            "WHERE i.account_id=?",
            (id_key(account_id),),
        ).fetchall()
    return [_row_to_item(r) for r in rows]
