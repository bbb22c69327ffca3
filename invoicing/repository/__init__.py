"""Repository layer: DB access helpers (SQLite).

Keep functions thin and focused so services avoid SQL strings. Every function
takes the connection explicitly.
"""
from __future__ import annotations

from uuid import UUID


def id_key(value: UUID | str) -> str:
    """Canonical stored form of an id: lowercase, hyphenated.

    Raises ValueError for strings that are not UUIDs.
    """
    return str(value if isinstance(value, UUID) else UUID(str(value)))
