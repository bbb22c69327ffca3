from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# Scale of stored monetary values
MONEY_DECIMAL_PLACES = 4


class Currency(str, Enum):
    USD = "USD"
    EUR = "EUR"
    GBP = "GBP"
    AUD = "AUD"
    BRL = "BRL"
    CAD = "CAD"
    JPY = "JPY"
    MXN = "MXN"


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


class Invoice(BaseModel):
    """A billing document for an account covering a target period.

    The id is assigned when the object is built, so an invoice compares equal
    before and after it is persisted.
    """

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    account_id: UUID
    target_date: dt.date
    currency: Currency
    invoice_date: dt.datetime = Field(default_factory=_utcnow)


class InvoiceItem(BaseModel):
    """A single line on an invoice, tied to one subscription and a date range."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    invoice_id: UUID
    subscription_id: UUID
    start_date: dt.date
    end_date: dt.date
    description: str = ""
    amount: Decimal = Field(decimal_places=MONEY_DECIMAL_PLACES, allow_inf_nan=False)
    rate: Decimal = Field(decimal_places=MONEY_DECIMAL_PLACES, allow_inf_nan=False)
    currency: Currency

    @field_validator("amount", "rate", mode="before")
    @classmethod
    def _no_float_money(cls, v):
        # floats cannot represent cents exactly
        if isinstance(v, float):
            raise ValueError("monetary values must be Decimal, int or str, not float")
        return v

    @model_validator(mode="after")
    def _check_period(self) -> "InvoiceItem":
        if self.start_date > self.end_date:
            raise ValueError(f"start_date {self.start_date} is after end_date {self.end_date}")
        return self
