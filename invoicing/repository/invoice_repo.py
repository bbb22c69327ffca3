from __future__ import annotations

from decimal import Decimal
from sqlite3 import Connection, Row
from uuid import UUID

from ..domain.models import Invoice
from ..errors import storage_errors
from . import id_key

_COLUMNS = "i.id, i.account_id, i.invoice_date, i.target_date, i.currency"


def _row_to_invoice(row: Row) -> Invoice:
    return Invoice(
        id=row["id"],
        account_id=row["account_id"],
        invoice_date=row["invoice_date"],
        target_date=row["target_date"],
        currency=row["currency"],
    )


def create_invoice(conn: Connection, invoice: Invoice) -> Invoice:
    with storage_errors(f"create invoice {invoice.id}"):
        conn.execute(
            "INSERT INTO invoices(id, account_id, invoice_date, target_date, currency) VALUES(?,?,?,?,?)",
            (
                id_key(invoice.id),
                id_key(invoice.account_id),
                invoice.invoice_date.isoformat(),
                invoice.target_date.isoformat(),
                invoice.currency.value,
            ),
        )
    return invoice


def get_invoice(conn: Connection, invoice_id: UUID | str) -> Invoice | None:
    with storage_errors(f"get invoice {invoice_id}"):
        row = conn.execute(
            f"SELECT {_COLUMNS} FROM invoices i WHERE i.id=?", (id_key(invoice_id),)
        ).fetchone()
    return _row_to_invoice(row) if row else None


def get_invoices_by_account(conn: Connection, account_id: UUID | str) -> list[Invoice]:
    with storage_errors(f"list invoices for account {account_id}"):
        rows = conn.execute(
            f"SELECT {_COLUMNS} FROM invoices i WHERE i.account_id=? "
            "ORDER BY i.target_date ASC, i.invoice_date ASC",
            (id_key(account_id),),
        ).fetchall()
    return [_row_to_invoice(r) for r in rows]


def get_invoices_by_subscription(conn: Connection, subscription_id: UUID | str) -> list[Invoice]:
    """Invoices carrying at least one item for the subscription."""
    with storage_errors(f"list invoices for subscription {subscription_id}"):
        rows = conn.execute(
            f"SELECT DISTINCT {_COLUMNS} FROM invoices i "
            "JOIN invoice_items ii ON ii.invoice_id = i.id "
            "WHERE ii.subscription_id=? "
            "ORDER BY i.target_date ASC, i.invoice_date ASC",
            (id_key(subscription_id),),
        ).fetchall()
    return [_row_to_invoice(r) for r in rows]


def get_invoice_total(conn: Connection, invoice_id: UUID | str) -> Decimal:
    # amounts are stored as text; sum in Decimal, not SQL REAL
    with storage_errors(f"total invoice {invoice_id}"):
        rows = conn.execute(
            "SELECT amount FROM invoice_items WHERE invoice_id=?", (id_key(invoice_id),)
        ).fetchall()
    return sum((Decimal(r["amount"]) for r in rows), Decimal("0"))
