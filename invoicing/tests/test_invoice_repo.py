from __future__ import annotations

import datetime as dt
import uuid
from decimal import Decimal

import pytest

from invoicing.domain.models import Currency, Invoice, InvoiceItem
from invoicing.errors import PersistenceError
from invoicing.repository import invoice_item_repo, invoice_repo


def _item(invoice_id, subscription_id=None, amount="20.00"):
    return InvoiceItem(
        invoice_id=invoice_id,
        subscription_id=subscription_id or uuid.uuid4(),
        start_date=dt.date(2011, 3, 1),
        end_date=dt.date(2011, 4, 1),
        description="test",
        amount=Decimal(amount),
        rate=Decimal(amount),
        currency=Currency.USD,
    )


def test_create_and_get_invoice(conn):
    account_id = uuid.uuid4()
    invoice = Invoice(account_id=account_id, target_date=dt.date(2011, 5, 23), currency=Currency.USD)
    invoice_repo.create_invoice(conn, invoice)

    got = invoice_repo.get_invoice(conn, str(invoice.id))
    assert got == invoice
    assert got.account_id == account_id
    assert got.target_date == dt.date(2011, 5, 23)
    assert got.invoice_date == invoice.invoice_date


def test_get_invoice_not_found(conn):
    assert invoice_repo.get_invoice(conn, uuid.uuid4()) is None


def test_duplicate_invoice_fails(conn):
    invoice = Invoice(account_id=uuid.uuid4(), target_date=dt.date(2011, 5, 23), currency=Currency.EUR)
    invoice_repo.create_invoice(conn, invoice)
    with pytest.raises(PersistenceError):
        invoice_repo.create_invoice(conn, invoice)


def test_invoices_by_account_ordered_by_target_date(conn):
    account_id = uuid.uuid4()
    june = Invoice(account_id=account_id, target_date=dt.date(2011, 6, 23), currency=Currency.USD)
    may = Invoice(account_id=account_id, target_date=dt.date(2011, 5, 23), currency=Currency.USD)
    other = Invoice(account_id=uuid.uuid4(), target_date=dt.date(2011, 5, 1), currency=Currency.USD)
    for inv in (june, may, other):
        invoice_repo.create_invoice(conn, inv)

    got = invoice_repo.get_invoices_by_account(conn, account_id)
    assert [i.id for i in got] == [may.id, june.id]
    assert invoice_repo.get_invoices_by_account(conn, uuid.uuid4()) == []


def test_invoices_by_subscription_are_distinct(conn):
    subscription_id = uuid.uuid4()
    first = Invoice(account_id=uuid.uuid4(), target_date=dt.date(2011, 5, 23), currency=Currency.USD)
    second = Invoice(account_id=uuid.uuid4(), target_date=dt.date(2011, 6, 23), currency=Currency.USD)
    for inv in (first, second):
        invoice_repo.create_invoice(conn, inv)
    invoice_item_repo.create_invoice_item(conn, _item(first.id, subscription_id))
    invoice_item_repo.create_invoice_item(conn, _item(first.id, subscription_id))
    invoice_item_repo.create_invoice_item(conn, _item(second.id, subscription_id))
    invoice_item_repo.create_invoice_item(conn, _item(second.id))

    got = invoice_repo.get_invoices_by_subscription(conn, subscription_id)
    assert [i.id for i in got] == [first.id, second.id]


def test_invoice_total_is_exact(conn):
    invoice = Invoice(account_id=uuid.uuid4(), target_date=dt.date(2011, 5, 23), currency=Currency.USD)
    invoice_repo.create_invoice(conn, invoice)
    assert invoice_repo.get_invoice_total(conn, invoice.id) == Decimal("0")

    for amount in ("0.10", "0.20", "19.9999"):
        invoice_item_repo.create_invoice_item(conn, _item(invoice.id, amount=amount))
    assert invoice_repo.get_invoice_total(conn, invoice.id) == Decimal("20.2999")


def test_invoice_lookups_accept_any_uuid_spelling(conn):
    account_id = uuid.uuid4()
    invoice = Invoice(account_id=account_id, target_date=dt.date(2011, 5, 23), currency=Currency.USD)
    invoice_repo.create_invoice(conn, invoice)
    invoice_item_repo.create_invoice_item(conn, _item(invoice.id, amount="5"))

    assert invoice_repo.get_invoice(conn, str(invoice.id).upper()) == invoice
    assert invoice_repo.get_invoice(conn, invoice.id.hex) == invoice
    assert invoice_repo.get_invoices_by_account(conn, str(account_id).upper()) == [invoice]
    assert invoice_repo.get_invoice_total(conn, invoice.id.hex.upper()) == Decimal("5")
