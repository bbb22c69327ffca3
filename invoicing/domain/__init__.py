from .models import Currency, Invoice, InvoiceItem, MONEY_DECIMAL_PLACES

__all__ = ["Currency", "Invoice", "InvoiceItem", "MONEY_DECIMAL_PLACES"]
