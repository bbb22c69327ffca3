"""Errors raised by the invoicing data-access layer.

Model validation failures surface as pydantic's ``ValidationError`` when an
``Invoice`` or ``InvoiceItem`` is constructed; it is re-exported here so callers
can import both from one place.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterator

from pydantic import ValidationError


class PersistenceError(Exception):
    """Storage-layer failure: constraint or referential-integrity violation, or a sqlite error."""


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise any sqlite3.Error inside the block as PersistenceError."""
    try:
        yield
    except sqlite3.Error as e:
        raise PersistenceError(f"{operation} failed: {e}") from e


__all__ = ["PersistenceError", "ValidationError", "storage_errors"]
