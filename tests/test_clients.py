"""
Tests for Pemo and Qoyod API clients.

These tests use responses library to mock HTTP requests,
validating client behavior without making real API calls.
"""

import json

import pytest
import responses
from responses import matchers

from pemo_qoyod.pemo_client import (
    PemoAPIError,
    PemoClient,
    PemoConnectionError,
    PemoTransaction,
)
from pemo_qoyod.qoyod_client import QoyodAPIError, QoyodClient, QoyodConnectionError
from pemo_qoyod.schemas import build_invoice, build_journal_entry

PEMO_URL = "https://pemo.test/v1"
QOYOD_URL = "https://qoyod.test/api/2.0"


class TestPemoClient:
    """Test Pemo API client."""

    @responses.activate
    def test_list_ready_transactions(self, sample_transactions):
        """Fetch filters on readyToExport and sends the apiKey header."""
        responses.add(
            responses.GET,
            f"{PEMO_URL}/transactions",
            json={"transactions": sample_transactions},
            status=200,
            match=[
                matchers.query_param_matcher({"exportStatus": "readyToExport"}),
                matchers.header_matcher({"apiKey": "pemo-key"}),
            ],
        )

        client = PemoClient(PEMO_URL, "pemo-key")
        transactions = client.list_ready_transactions()

        assert [t["id"] for t in transactions] == ["txn_001", "txn_002", "txn_003"]

    @responses.activate
    def test_list_without_transactions_key(self):
        """A body without a transactions list is treated as empty."""
        responses.add(
            responses.GET,
            f"{PEMO_URL}/transactions",
            json={"transactions": None},
            status=200,
        )

        client = PemoClient(PEMO_URL, "pemo-key")
        assert client.list_ready_transactions() == []

    @responses.activate
    def test_list_error_carries_upstream_body(self):
        responses.add(
            responses.GET,
            f"{PEMO_URL}/transactions",
            json={"error": "Invalid API key"},
            status=401,
        )

        client = PemoClient(PEMO_URL, "bad-key")
        with pytest.raises(PemoAPIError) as exc_info:
            client.list_ready_transactions()

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"
        assert "Invalid API key" in exc_info.value.response_body

    @responses.activate
    def test_connection_error(self):
        """Unregistered URL → responses raises ConnectionError."""
        client = PemoClient(PEMO_URL, "pemo-key")
        with pytest.raises(PemoConnectionError):
            client.list_ready_transactions()

    @responses.activate
    def test_mark_as_exported(self):
        responses.add(
            responses.PATCH,
            f"{PEMO_URL}/transactions",
            json={"success": True},
            status=200,
        )

        client = PemoClient(PEMO_URL, "pemo-key")
        client.mark_as_exported(["txn_001", "txn_003"])

        assert len(responses.calls) == 1
        request = responses.calls[0].request
        assert request.headers["apiKey"] == "pemo-key"
        assert json.loads(request.body) == {
            "operation": "markAsExported",
            "transactionIds": ["txn_001", "txn_003"],
        }

    @responses.activate
    def test_mark_as_exported_error(self):
        responses.add(
            responses.PATCH,
            f"{PEMO_URL}/transactions",
            body="upstream down",
            status=503,
        )

        client = PemoClient(PEMO_URL, "pemo-key")
        with pytest.raises(PemoAPIError) as exc_info:
            client.mark_as_exported(["txn_001"])

        assert exc_info.value.status_code == 503

    def test_base_url_trailing_slash(self):
        client = PemoClient(f"{PEMO_URL}/", "pemo-key")
        assert client.base_url == PEMO_URL


class TestPemoTransaction:
    """Transaction parsing."""

    def test_from_api_response(self, sample_transactions):
        txn = PemoTransaction.from_api_response(sample_transactions[0])

        assert txn.id == "txn_001"
        assert txn.total_amount == 4550
        assert txn.date == "2024-01-15T10:30:00Z"
        assert txn.merchant == "ستاربكس - الرياض"

    def test_numeric_id_and_blank_merchant(self):
        txn = PemoTransaction.from_api_response(
            {"id": 42, "totalAmount": 100, "date": "2024-01-01", "merchant": ""}
        )
        assert txn.id == "42"
        assert txn.merchant is None


class TestQoyodClient:
    """Test Qoyod API client."""

    @responses.activate
    def test_create_invoice(self, invoice_config, sample_transactions):
        responses.add(
            responses.POST,
            f"{QOYOD_URL}/invoices",
            json={"invoice": {"id": 9001}},
            status=201,
            match=[matchers.header_matcher({"API-KEY": "qoyod-key"})],
        )

        txn = PemoTransaction.from_api_response(sample_transactions[0])
        invoice = build_invoice(txn, invoice_config.qoyod)

        client = QoyodClient(QOYOD_URL, "qoyod-key")
        result = client.create_invoice(invoice)

        assert result == {"invoice": {"id": 9001}}
        body = json.loads(responses.calls[0].request.body)
        assert body["invoice"]["reference"] == "txn_001"
        assert body["invoice"]["line_items"][0]["unit_price"] == 45.5

    @responses.activate
    def test_create_journal_entry(self, journal_config, sample_transactions):
        responses.add(
            responses.POST,
            f"{QOYOD_URL}/journal_entries",
            json={"journal_entry": {"id": 77, "status": "approved"}},
            status=201,
        )

        txn = PemoTransaction.from_api_response(sample_transactions[1])
        entry = build_journal_entry(txn, journal_config.qoyod)

        client = QoyodClient(QOYOD_URL, "qoyod-key")
        client.create_entry(entry)

        body = json.loads(responses.calls[0].request.body)
        assert body["journal_entry"]["debit_amounts"] == [{"account_id": 501, "amount": 120}]

    @responses.activate
    def test_empty_success_body(self, invoice_config, sample_transactions):
        responses.add(responses.POST, f"{QOYOD_URL}/invoices", body="", status=204)

        txn = PemoTransaction.from_api_response(sample_transactions[0])
        client = QoyodClient(QOYOD_URL, "qoyod-key")

        assert client.create_entry(build_invoice(txn, invoice_config.qoyod)) == {}

    @responses.activate
    def test_validation_error_details(self, invoice_config, sample_transactions):
        responses.add(
            responses.POST,
            f"{QOYOD_URL}/invoices",
            json={
                "message": "Validation failed",
                "errors": {"contact_id": ["is invalid"], "issue_date": "can't be blank"},
            },
            status=422,
        )

        txn = PemoTransaction.from_api_response(sample_transactions[0])
        client = QoyodClient(QOYOD_URL, "qoyod-key")

        with pytest.raises(QoyodAPIError) as exc_info:
            client.create_invoice(build_invoice(txn, invoice_config.qoyod))

        error = exc_info.value
        assert error.status_code == 422
        assert error.message == "Validation failed"
        assert "contact_id: is invalid" in str(error)
        assert "issue_date: can't be blank" in str(error)

    @responses.activate
    def test_non_json_error(self, invoice_config, sample_transactions):
        responses.add(
            responses.POST,
            f"{QOYOD_URL}/invoices",
            body="<html>Bad Gateway</html>",
            status=502,
        )

        txn = PemoTransaction.from_api_response(sample_transactions[0])
        client = QoyodClient(QOYOD_URL, "qoyod-key")

        with pytest.raises(QoyodAPIError) as exc_info:
            client.create_invoice(build_invoice(txn, invoice_config.qoyod))

        assert exc_info.value.message == "Bad Gateway"
        assert exc_info.value.response_body == "<html>Bad Gateway</html>"

    @responses.activate
    def test_connection_error(self, invoice_config, sample_transactions):
        txn = PemoTransaction.from_api_response(sample_transactions[0])
        client = QoyodClient(QOYOD_URL, "qoyod-key")

        with pytest.raises(QoyodConnectionError):
            client.create_invoice(build_invoice(txn, invoice_config.qoyod))
