"""
Pemo external API client implementation.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import requests

logger = logging.getLogger(__name__)

READY_TO_EXPORT = "readyToExport"
MARK_AS_EXPORTED = "markAsExported"


class PemoError(Exception):
    """Base exception for Pemo client errors."""
    pass


class PemoAPIError(PemoError):
    """API returned an error response."""
    def __init__(self, status_code: int, message: str, response_body: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"Pemo API error {status_code}: {message}")


class PemoConnectionError(PemoError):
    """Failed to connect to Pemo."""
    pass


@dataclass
class PemoTransaction:
    """Pemo card transaction awaiting export."""
    id: str
    total_amount: int | float  # Minor units (fils/halalas)
    date: str | int | float  # ISO-8601 timestamp or epoch milliseconds
    merchant: Optional[str] = None

    @classmethod
    def from_api_response(cls, data: dict) -> "PemoTransaction":
        """Create from a Pemo API transaction object."""
        return cls(
            id=str(data["id"]),
            total_amount=data["totalAmount"],
            date=data["date"],
            merchant=data.get("merchant") or None,
        )


class PemoClient:
    """
    Client for the Pemo external API.

    Authenticates with the `apiKey` header. Every call is a single request;
    non-success responses raise PemoAPIError with the upstream body attached.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: Optional[float] = None,
    ):
        """
        Initialize Pemo client.

        Args:
            base_url: API root (e.g., "https://external-api.pemo.io/v1")
            api_key: Pemo API key
            timeout: Request timeout in seconds (None = no explicit timeout)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({
            "apiKey": api_key,
            "Accept": "application/json",
        })

    def _request(
        self,
        method: str,
        endpoint: str,
        params: Optional[dict] = None,
        json_data: Optional[dict] = None,
    ) -> requests.Response:
        """Make an API request with error handling."""
        url = f"{self.base_url}{endpoint}"

        logger.debug(f"API Request: {method} {url}")
        if json_data:
            logger.debug(f"Request body: {json.dumps(json_data)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.ConnectionError as e:
            raise PemoConnectionError(f"Failed to connect to Pemo at {self.base_url}: {e}") from e
        except requests.exceptions.Timeout as e:
            raise PemoConnectionError(f"Request to Pemo timed out: {e}") from e
        except requests.exceptions.RequestException as e:
            raise PemoError(f"Request failed: {e}") from e

        if not response.ok:
            raise PemoAPIError(
                status_code=response.status_code,
                message=response.reason,
                response_body=response.text,
            )

        return response

    def list_ready_transactions(self) -> list[Any]:
        """
        Fetch transactions whose export status is readyToExport.

        Returns the raw transaction objects in the order Pemo returned them;
        a response without a `transactions` list yields an empty list.
        """
        response = self._request(
            "GET",
            "/transactions",
            params={"exportStatus": READY_TO_EXPORT},
        )
        data = response.json()
        transactions = data.get("transactions") if isinstance(data, dict) else None
        if not isinstance(transactions, list):
            return []
        return transactions

    def mark_as_exported(self, transaction_ids: list[str]) -> None:
        """
        Mark transactions as exported in a single batch request.

        Args:
            transaction_ids: Pemo transaction IDs, in submission order
        """
        self._request(
            "PATCH",
            "/transactions",
            json_data={
                "operation": MARK_AS_EXPORTED,
                "transactionIds": list(transaction_ids),
            },
        )
        logger.info(f"Marked {len(transaction_ids)} Pemo transaction(s) as exported")
