"""
Qoyod API client implementation.
"""

import json
import logging

import requests

from ..schemas.qoyod_payload import QoyodEntry, QoyodInvoice, QoyodJournalEntry

logger = logging.getLogger(__name__)


class QoyodError(Exception):
    """Base exception for Qoyod client errors."""

    pass


class QoyodAPIError(QoyodError):
    """API returned an error response."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response_body: str | None = None,
        errors: dict | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        self.errors = errors or {}

        error_details = []
        if errors:
            for field, msgs in errors.items():
                if isinstance(msgs, list):
                    error_details.extend([f"{field}: {m}" for m in msgs])
                else:
                    error_details.append(f"{field}: {msgs}")

        detail_str = "; ".join(error_details) if error_details else message
        super().__init__(f"Qoyod API error {status_code}: {detail_str}")


class QoyodConnectionError(QoyodError):
    """Failed to connect to Qoyod."""

    pass


class QoyodClient:
    """
    Client for the Qoyod API v2.

    Authenticates with the `API-KEY` header. One request per call, no retry.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float | None = None,
    ):
        """
        Initialize Qoyod client.

        Args:
            base_url: API root (e.g., "https://www.qoyod.com/api/2.0")
            api_key: Qoyod API key
            timeout: Request timeout in seconds (None = no explicit timeout)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update(
            {
                "API-KEY": api_key,
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: dict | None = None,
    ) -> requests.Response:
        """Make an API request with error handling."""
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"API Request: {method} {url}")
        if json_data:
            logger.debug(f"Request body: {json.dumps(json_data, indent=2, ensure_ascii=False)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Connection error to {url}: {e}")
            raise QoyodConnectionError(
                f"Failed to connect to Qoyod at {self.base_url}: {e}"
            ) from e
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout for {url}: {e}")
            raise QoyodConnectionError(f"Request to Qoyod timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error for {url}: {e}")
            raise QoyodError(f"Request failed: {e}") from e

        logger.debug(f"Response status: {response.status_code}")

        if not response.ok:
            error_body = response.text
            errors = {}
            message = response.reason

            try:
                error_json = response.json()
            except ValueError:
                error_json = None
            if isinstance(error_json, dict):
                raw_errors = error_json.get("errors")
                if isinstance(raw_errors, dict):
                    errors = raw_errors
                message = error_json.get("message") or error_json.get("error") or message

            raise QoyodAPIError(
                status_code=response.status_code,
                message=str(message),
                response_body=error_body,
                errors=errors,
            )

        return response

    def _created(self, response: requests.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            return {}
        return data if isinstance(data, dict) else {}

    def create_invoice(self, invoice: QoyodInvoice) -> dict:
        """
        Create an invoice.

        Returns:
            Parsed response body (empty dict if Qoyod returned none)

        Raises:
            QoyodAPIError: If Qoyod returns a non-success status
            QoyodConnectionError: If Qoyod is unreachable
        """
        response = self._request("POST", QoyodInvoice.endpoint, json_data=invoice.to_dict())
        return self._created(response)

    def create_journal_entry(self, entry: QoyodJournalEntry) -> dict:
        """
        Create a journal entry.

        Raises:
            QoyodAPIError: If Qoyod returns a non-success status
            QoyodConnectionError: If Qoyod is unreachable
        """
        if not entry.is_balanced():
            raise ValueError(f"Journal entry {entry.reference} is not balanced")
        response = self._request("POST", QoyodJournalEntry.endpoint, json_data=entry.to_dict())
        return self._created(response)

    def create_entry(self, entry: QoyodEntry) -> dict:
        """Create an invoice or journal entry, whichever the payload is."""
        if isinstance(entry, QoyodJournalEntry):
            return self.create_journal_entry(entry)
        return self.create_invoice(entry)
