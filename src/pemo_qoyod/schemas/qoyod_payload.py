"""
Qoyod entry payload builder (SSOT).

This is THE single place that maps a Pemo transaction to a Qoyod invoice or
journal entry.

Rules:
- Only transactions passing is_exportable() are mapped
- Amounts arrive in minor units and are divided by 100
- All dates are the UTC calendar day of the Pemo timestamp
- The Pemo transaction id is always carried as the Qoyod reference
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any

from ..config import ENTRY_TYPE_INVOICE, ENTRY_TYPE_JOURNAL, QoyodConfig
from ..pemo_client import PemoTransaction

logger = logging.getLogger(__name__)

MINOR_UNITS_PER_MAJOR = Decimal(100)

DEFAULT_DESCRIPTION = "Pemo Transaction"
DEFAULT_LINE_DESCRIPTION = "Expense"


def is_exportable(raw: Any) -> bool:
    """Data-quality gate applied before any mapping.

    A record is exportable when it is an object with a numeric totalAmount,
    a non-empty date (ISO-8601 string or epoch milliseconds) and a non-empty
    id. Anything else is skipped silently.
    """
    if not isinstance(raw, dict):
        return False
    if not _is_number(raw.get("totalAmount")):
        return False
    date = raw.get("date")
    if not (isinstance(date, str) or _is_number(date)) or not date:
        return False
    return bool(raw.get("id"))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def minor_to_major(amount: int | float) -> Decimal:
    """Convert minor currency units (fils, halalas, cents) to major units."""
    return Decimal(str(amount)) / MINOR_UNITS_PER_MAJOR


def transaction_day(timestamp: str | int | float) -> str:
    """Return the UTC calendar day (YYYY-MM-DD) of a Pemo timestamp.

    Accepts ISO-8601 strings or epoch milliseconds. Strings without an
    offset are taken as UTC.

    Raises:
        ValueError: If the timestamp cannot be parsed
    """
    if _is_number(timestamp):
        try:
            parsed = datetime.fromtimestamp(timestamp / 1000, tz=timezone.utc)
        except (OverflowError, OSError) as e:
            raise ValueError(f"Invalid epoch timestamp: {timestamp!r}") from e
        return parsed.date().isoformat()

    value = str(timestamp).strip()
    if value.endswith(("Z", "z")):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).date().isoformat()


def _json_number(amount: Decimal) -> int | float:
    """Qoyod expects plain JSON numbers."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


@dataclass
class QoyodLineItem:
    """Single invoice line."""

    product_id: int
    description: str
    unit_price: Decimal
    quantity: int = 1

    def to_dict(self) -> dict[str, Any]:
        return {
            "product_id": self.product_id,
            "description": self.description,
            "quantity": self.quantity,
            "unit_price": _json_number(self.unit_price),
        }


@dataclass
class QoyodInvoice:
    """
    Invoice for POST /invoices.

    issue_date and due_date are both the transaction day.
    """

    contact_id: int
    inventory_id: int
    reference: str
    description: str
    issue_date: str
    due_date: str
    status: str = "Approved"
    line_items: list[QoyodLineItem] = field(default_factory=list)

    endpoint = "/invoices"

    def to_dict(self) -> dict[str, Any]:
        """Convert to Qoyod API JSON format."""
        return {
            "invoice": {
                "contact_id": self.contact_id,
                "reference": self.reference,
                "description": self.description,
                "issue_date": self.issue_date,
                "due_date": self.due_date,
                "status": self.status,
                "inventory_id": self.inventory_id,
                "line_items": [item.to_dict() for item in self.line_items],
            }
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


@dataclass
class QoyodJournalAmount:
    """One debit or credit leg of a journal entry."""

    account_id: int
    amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {"account_id": self.account_id, "amount": _json_number(self.amount)}


@dataclass
class QoyodJournalEntry:
    """
    Journal entry for POST /journal_entries.

    Debits and credits must balance.
    """

    date: str
    description: str
    reference: str
    debit_amounts: list[QoyodJournalAmount] = field(default_factory=list)
    credit_amounts: list[QoyodJournalAmount] = field(default_factory=list)

    endpoint = "/journal_entries"

    def is_balanced(self) -> bool:
        debits = sum((leg.amount for leg in self.debit_amounts), Decimal(0))
        credits = sum((leg.amount for leg in self.credit_amounts), Decimal(0))
        return debits == credits

    def to_dict(self) -> dict[str, Any]:
        """Convert to Qoyod API JSON format."""
        return {
            "journal_entry": {
                "date": self.date,
                "description": self.description,
                "reference": self.reference,
                "debit_amounts": [leg.to_dict() for leg in self.debit_amounts],
                "credit_amounts": [leg.to_dict() for leg in self.credit_amounts],
            }
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


QoyodEntry = QoyodInvoice | QoyodJournalEntry


def build_invoice(transaction: PemoTransaction, qoyod: QoyodConfig) -> QoyodInvoice:
    """
    Build a Qoyod invoice with a single line item for the full amount.

    Raises:
        ValueError: If the date or a configured reference id is invalid
    """
    amount = minor_to_major(transaction.total_amount)
    day = transaction_day(transaction.date)

    return QoyodInvoice(
        contact_id=int(qoyod.contact_id),
        inventory_id=int(qoyod.inventory_id),
        reference=transaction.id,
        description=transaction.merchant or DEFAULT_DESCRIPTION,
        issue_date=day,
        due_date=day,
        status=qoyod.invoice_status,
        line_items=[
            QoyodLineItem(
                product_id=int(qoyod.product_id),
                description=transaction.merchant or DEFAULT_LINE_DESCRIPTION,
                unit_price=amount,
            )
        ],
    )


def build_journal_entry(transaction: PemoTransaction, qoyod: QoyodConfig) -> QoyodJournalEntry:
    """
    Build a balanced two-leg Qoyod journal entry (expense debit, card credit).

    Raises:
        ValueError: If the date or a configured account id is invalid
    """
    amount = minor_to_major(transaction.total_amount)

    return QoyodJournalEntry(
        date=transaction_day(transaction.date),
        description=transaction.merchant or DEFAULT_DESCRIPTION,
        reference=transaction.id,
        debit_amounts=[QoyodJournalAmount(int(qoyod.debit_account_id), amount)],
        credit_amounts=[QoyodJournalAmount(int(qoyod.credit_account_id), amount)],
    )


def build_qoyod_entry(transaction: PemoTransaction, qoyod: QoyodConfig) -> QoyodEntry:
    """Build the entry shape selected by qoyod.entry_type."""
    if qoyod.entry_type == ENTRY_TYPE_JOURNAL:
        return build_journal_entry(transaction, qoyod)
    if qoyod.entry_type == ENTRY_TYPE_INVOICE:
        return build_invoice(transaction, qoyod)
    raise ValueError(f"Unknown Qoyod entry type: {qoyod.entry_type}")
