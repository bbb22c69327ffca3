"""Invoice and invoice-item data access over SQLite."""
from __future__ import annotations

__version__ = "0.1.0"
