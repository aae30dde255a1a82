"""Pemo → Qoyod export job.

One straight pass per invocation:
fetch readyToExport transactions from Pemo, create one Qoyod entry per
exportable transaction, then mark the successfully booked ones as exported
in a single batch call.

Every payload is built before the first submission, so malformed data
aborts the run before anything is written to Qoyod. Submission failures
only drop the affected transaction. A failed mark call
is logged and leaves the reported result unchanged: those entries exist in
Qoyod but stay readyToExport in Pemo until a later run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from pemo_qoyod.config import Config, ConfigValidationError
from pemo_qoyod.pemo_client import PemoAPIError, PemoClient, PemoError, PemoTransaction
from pemo_qoyod.qoyod_client import QoyodAPIError, QoyodClient, QoyodError
from pemo_qoyod.schemas.qoyod_payload import (
    QoyodEntry,
    QoyodInvoice,
    build_qoyod_entry,
    is_exportable,
)

logger = logging.getLogger(__name__)

TRIGGER_METHOD = "GET"
NO_TRANSACTIONS_MESSAGE = "No transactions to export"


class MethodNotAllowedError(Exception):
    """Invocation used a method other than the trigger method."""

    def __init__(self, method: str):
        self.method = method
        super().__init__("Method not allowed")


class SourceFetchError(Exception):
    """Fetching readyToExport transactions from Pemo failed."""

    pass


@dataclass
class SyncSummary:
    """Result of one export pass."""

    fetched_count: int = 0
    exported_ids: list[str] = field(default_factory=list)
    failed_ids: list[str] = field(default_factory=list)
    skipped_count: int = 0  # Records failing the data-quality gate
    mark_succeeded: bool | None = None  # None when no mark call was made
    dry_run: bool = False

    @property
    def exported_count(self) -> int:
        return len(self.exported_ids)

    def to_response_body(self) -> dict[str, Any]:
        """Caller-facing JSON body."""
        if self.fetched_count == 0:
            return {"message": NO_TRANSACTIONS_MESSAGE}
        return {
            "exportedCount": self.exported_count,
            "exportedTransactionIds": list(self.exported_ids),
        }


@dataclass
class SyncResponse:
    """HTTP-shaped outcome of SyncJob.run()."""

    status_code: int
    body: dict[str, Any]
    summary: SyncSummary | None = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    @classmethod
    def error(cls, status_code: int, message: str) -> SyncResponse:
        return cls(status_code=status_code, body={"error": message})


class SyncJob:
    """Export Pemo transactions to Qoyod.

    Clients are built from the config on first use, after validation, so a
    rejected invocation never touches the network. Tests inject their own.
    """

    def __init__(
        self,
        config: Config,
        pemo_client: PemoClient | None = None,
        qoyod_client: QoyodClient | None = None,
        dry_run: bool = False,
    ) -> None:
        """Initialize the job.

        Args:
            config: Application configuration, read once per run.
            pemo_client: Pemo client (default: built from config.pemo).
            qoyod_client: Qoyod client (default: built from config.qoyod).
            dry_run: Build payloads but skip Qoyod submissions and the mark call.
        """
        self.config = config
        self.dry_run = dry_run
        self._pemo = pemo_client
        self._qoyod = qoyod_client

    @property
    def pemo(self) -> PemoClient:
        if self._pemo is None:
            self._pemo = PemoClient(
                base_url=self.config.pemo.base_url,
                api_key=self.config.pemo.api_key,
                timeout=self.config.http_timeout,
            )
        return self._pemo

    @property
    def qoyod(self) -> QoyodClient:
        if self._qoyod is None:
            self._qoyod = QoyodClient(
                base_url=self.config.qoyod.base_url,
                api_key=self.config.qoyod.api_key,
                timeout=self.config.http_timeout,
            )
        return self._qoyod

    def run(self, method: str = TRIGGER_METHOD) -> SyncResponse:
        """Handle one trigger invocation.

        Returns:
            405 for a non-GET method, 500 for missing configuration or any
            fatal error, otherwise 200 with the export summary.
        """
        try:
            self.check_method(method)
        except MethodNotAllowedError as e:
            logger.warning(f"Rejected sync trigger with method {e.method}")
            return SyncResponse.error(405, str(e))

        try:
            self.config.ensure_complete()
        except ConfigValidationError as e:
            logger.error(str(e))
            return SyncResponse.error(500, str(e))

        try:
            summary = self.export()
        except Exception as e:
            logger.exception("Error syncing invoices")
            return SyncResponse.error(500, str(e))

        return SyncResponse(status_code=200, body=summary.to_response_body(), summary=summary)

    @staticmethod
    def check_method(method: str) -> None:
        # HTTP methods are case-sensitive
        if method != TRIGGER_METHOD:
            raise MethodNotAllowedError(method)

    def export(self) -> SyncSummary:
        """Run the fetch → submit → mark pass.

        Raises:
            SourceFetchError: If Pemo transactions could not be fetched
            ValueError: If a transaction date or configured id is malformed
        """
        summary = SyncSummary(dry_run=self.dry_run)

        transactions = self._fetch()
        summary.fetched_count = len(transactions)
        if not transactions:
            logger.info(NO_TRANSACTIONS_MESSAGE)
            return summary

        logger.info(f"Fetched {len(transactions)} Pemo transaction(s) ready to export")

        batch: list[tuple[PemoTransaction, QoyodEntry]] = []
        for raw in transactions:
            if not is_exportable(raw):
                summary.skipped_count += 1
                logger.debug(f"Skipping incomplete Pemo record: {raw!r}")
                continue

            transaction = PemoTransaction.from_api_response(raw)
            batch.append((transaction, build_qoyod_entry(transaction, self.config.qoyod)))

        for transaction, entry in batch:
            if self._submit(transaction, entry):
                summary.exported_ids.append(transaction.id)
            else:
                summary.failed_ids.append(transaction.id)

        if summary.exported_ids and not self.dry_run:
            summary.mark_succeeded = self._mark_exported(summary.exported_ids)

        logger.info(
            f"Sync finished: {summary.exported_count} exported, "
            f"{len(summary.failed_ids)} failed, {summary.skipped_count} skipped"
            + (" (dry run)" if self.dry_run else "")
        )
        return summary

    def _fetch(self) -> list[Any]:
        try:
            return self.pemo.list_ready_transactions()
        except PemoAPIError as e:
            raise SourceFetchError(
                f"Failed to fetch Pemo transactions: "
                f"{e.status_code} {e.message}: {e.response_body or ''}"
            ) from e
        except PemoError as e:
            raise SourceFetchError(f"Failed to fetch Pemo transactions: {e}") from e

    def _submit(self, transaction: PemoTransaction, entry: QoyodEntry) -> bool:
        """Create the Qoyod entry for one transaction. False if Qoyod refused it."""
        kind = "invoice" if isinstance(entry, QoyodInvoice) else "journal entry"

        if self.dry_run:
            logger.info(f"[dry-run] Would create Qoyod {kind} for {transaction.id}:\n{entry.to_json()}")
            return True

        try:
            self.qoyod.create_entry(entry)
        except QoyodAPIError as e:
            logger.error(
                f"Failed to create Qoyod {kind} for transaction {transaction.id}: "
                f"{e}: {e.response_body or ''}"
            )
            return False
        except QoyodError as e:
            logger.error(f"Failed to create Qoyod {kind} for transaction {transaction.id}: {e}")
            return False

        logger.info(f"Created Qoyod {kind} for Pemo transaction {transaction.id}")
        return True

    def _mark_exported(self, transaction_ids: list[str]) -> bool:
        try:
            self.pemo.mark_as_exported(transaction_ids)
        except PemoAPIError as e:
            logger.error(
                f"Failed to mark Pemo transactions as exported: "
                f"{e.status_code} {e.message}: {e.response_body or ''}"
            )
            return False
        except PemoError as e:
            logger.error(f"Failed to mark Pemo transactions as exported: {e}")
            return False
        return True
