"""
Pemo external API client.

Provides:
- List transactions awaiting export
- Batch mark transactions as exported

No retry or pagination: one request per call, failures raise loudly.
"""

from .client import (
    PemoAPIError,
    PemoClient,
    PemoConnectionError,
    PemoError,
    PemoTransaction,
)

__all__ = [
    "PemoClient",
    "PemoTransaction",
    "PemoError",
    "PemoAPIError",
    "PemoConnectionError",
]
