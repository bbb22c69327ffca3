from __future__ import annotations

# invoicing/services/invoice_svc.py
# One call = one unit of work: open a connection, run the repository, audit.
import logging
import sqlite3
from decimal import Decimal
from uuid import UUID

from ..db import get_conn
from ..domain.models import Invoice, InvoiceItem
from ..errors import PersistenceError, storage_errors
from ..logs import LogContext, invoice_audit_trail, item_audit_trail
from ..repository import invoice_item_repo, invoice_repo

logger = logging.getLogger(__name__)


def _audit(log: LogContext, result: str, err: str | None = None) -> None:
    # the create outcome stands even when its audit row cannot be stored
    try:
        log.write(result, err)
    except sqlite3.Error:
        logger.exception("audit write failed: %s invoice=%s item=%s request=%s",
                         log.action, log.invoice_id, log.item_id, log.request_id)


def create_invoice(invoice: Invoice, log: LogContext | None = None, db_path: str | None = None) -> Invoice:
    log = log or LogContext.for_invoice(invoice, db_path=db_path)
    try:
        with storage_errors(f"create invoice {invoice.id}"), get_conn(db_path) as conn:
            invoice_repo.create_invoice(conn, invoice)
    except PersistenceError as e:
        logger.error("create invoice %s failed: %s", invoice.id, e)
        _audit(log, "ERROR", str(e))
        raise
    _audit(log, "OK")
    return invoice


def create_invoice_item(item: InvoiceItem, log: LogContext | None = None, db_path: str | None = None) -> InvoiceItem:
    log = log or LogContext.for_item(item, db_path=db_path)
    try:
        with storage_errors(f"create invoice item {item.id}"), get_conn(db_path) as conn:
            invoice_item_repo.create_invoice_item(conn, item)
    except PersistenceError as e:
        logger.error("create invoice item %s failed: %s", item.id, e)
        _audit(log, "ERROR", str(e))
        raise
    _audit(log, "OK")
    return item


def get_invoice(invoice_id: UUID | str, db_path: str | None = None) -> Invoice | None:
    with get_conn(db_path) as conn:
        return invoice_repo.get_invoice(conn, invoice_id)


def list_invoices_for_account(account_id: UUID | str, db_path: str | None = None) -> list[Invoice]:
    with get_conn(db_path) as conn:
        return invoice_repo.get_invoices_by_account(conn, account_id)


def get_invoice_item(item_id: UUID | str, db_path: str | None = None) -> InvoiceItem | None:
    with get_conn(db_path) as conn:
        return invoice_item_repo.get_invoice_item(conn, item_id)


def list_items_for_invoice(invoice_id: UUID | str, db_path: str | None = None) -> list[InvoiceItem]:
    with get_conn(db_path) as conn:
        return invoice_item_repo.get_invoice_items_by_invoice(conn, invoice_id)


def list_items_for_subscription(subscription_id: UUID | str, db_path: str | None = None) -> list[InvoiceItem]:
    with get_conn(db_path) as conn:
        return invoice_item_repo.get_invoice_items_by_subscription(conn, subscription_id)


def list_items_for_account(account_id: UUID | str, db_path: str | None = None) -> list[InvoiceItem]:
    with get_conn(db_path) as conn:
        return invoice_item_repo.get_invoice_items_by_account(conn, account_id)


def invoice_total(invoice_id: UUID | str, db_path: str | None = None) -> Decimal:
    with get_conn(db_path) as conn:
        return invoice_repo.get_invoice_total(conn, invoice_id)


def audit_trail_for_invoice(invoice_id: UUID | str, db_path: str | None = None) -> list[dict]:
    with get_conn(db_path) as conn:
        return invoice_audit_trail(conn, invoice_id)


def audit_trail_for_item(item_id: UUID | str, db_path: str | None = None) -> list[dict]:
    with get_conn(db_path) as conn:
        return item_audit_trail(conn, item_id)
