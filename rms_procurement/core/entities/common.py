"""Shared helpers for domain entities."""

from datetime import UTC, datetime
from decimal import Decimal

ZERO = Decimal("0")


def utcnow() -> datetime:
    """Naive UTC timestamp, the form stored in SQLite."""
    return datetime.now(UTC).replace(tzinfo=None)
