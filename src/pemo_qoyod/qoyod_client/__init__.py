"""
Qoyod API Client.

Provides:
- Create invoices (POST /invoices)
- Create journal entries (POST /journal_entries)

Treats Qoyod errors as loud failures carrying the upstream response.
"""

from .client import (
    QoyodAPIError,
    QoyodClient,
    QoyodConnectionError,
    QoyodError,
)

__all__ = [
    "QoyodClient",
    "QoyodError",
    "QoyodAPIError",
    "QoyodConnectionError",
]
