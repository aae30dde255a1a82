"""
SSOT schemas for Pemo → Qoyod mapping.

These are the ONLY payload models sent to Qoyod.
"""

from .qoyod_payload import (
    DEFAULT_DESCRIPTION,
    DEFAULT_LINE_DESCRIPTION,
    QoyodEntry,
    QoyodInvoice,
    QoyodJournalAmount,
    QoyodJournalEntry,
    QoyodLineItem,
    build_invoice,
    build_journal_entry,
    build_qoyod_entry,
    is_exportable,
    minor_to_major,
    transaction_day,
)

__all__ = [
    "DEFAULT_DESCRIPTION",
    "DEFAULT_LINE_DESCRIPTION",
    "QoyodEntry",
    "QoyodInvoice",
    "QoyodJournalAmount",
    "QoyodJournalEntry",
    "QoyodLineItem",
    "build_invoice",
    "build_journal_entry",
    "build_qoyod_entry",
    "is_exportable",
    "minor_to_major",
    "transaction_day",
]
