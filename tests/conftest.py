"""Test fixtures and utilities."""

import pytest

from pemo_qoyod.config import (
    ENTRY_TYPE_JOURNAL,
    Config,
    PemoConfig,
    QoyodConfig,
)

PEMO_URL = "https://pemo.test/v1"
QOYOD_URL = "https://qoyod.test/api/2.0"

CONFIG_ENV_VARS = [
    "PEMO_API_KEY",
    "PEMO_BASE_URL",
    "QOYOD_API_KEY",
    "QOYOD_BASE_URL",
    "QOYOD_ENTRY_TYPE",
    "QOYOD_CONTACT_ID",
    "QOYOD_INVENTORY_ID",
    "QOYOD_PRODUCT_ID",
    "QOYOD_INVOICE_STATUS",
    "QOYOD_DEBIT_ACCOUNT_ID",
    "QOYOD_CREDIT_ACCOUNT_ID",
    "SYNC_HTTP_TIMEOUT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of config loading."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def sync_env(monkeypatch):
    """Complete invoice-variant environment pointing at the test hosts."""
    values = {
        "PEMO_API_KEY": "pemo-key",
        "PEMO_BASE_URL": PEMO_URL,
        "QOYOD_API_KEY": "qoyod-key",
        "QOYOD_BASE_URL": QOYOD_URL,
        "QOYOD_CONTACT_ID": "11",
        "QOYOD_INVENTORY_ID": "22",
        "QOYOD_PRODUCT_ID": "33",
    }
    for name, value in values.items():
        monkeypatch.setenv(name, value)
    return values


@pytest.fixture
def invoice_config() -> Config:
    """Complete invoice-variant configuration."""
    return Config(
        pemo=PemoConfig(api_key="pemo-key", base_url=PEMO_URL),
        qoyod=QoyodConfig(
            api_key="qoyod-key",
            base_url=QOYOD_URL,
            contact_id="11",
            inventory_id="22",
            product_id="33",
        ),
    )


@pytest.fixture
def journal_config() -> Config:
    """Complete journal-entry-variant configuration."""
    return Config(
        pemo=PemoConfig(api_key="pemo-key", base_url=PEMO_URL),
        qoyod=QoyodConfig(
            api_key="qoyod-key",
            base_url=QOYOD_URL,
            entry_type=ENTRY_TYPE_JOURNAL,
            debit_account_id="501",
            credit_account_id="102",
        ),
    )


@pytest.fixture
def sample_transactions() -> list[dict]:
    """Three valid Pemo transactions (amounts in halalas)."""
    return [
        {
            "id": "txn_001",
            "totalAmount": 4550,
            "date": "2024-01-15T10:30:00Z",
            "merchant": "ستاربكس - الرياض",
        },
        {
            "id": "txn_002",
            "totalAmount": 12000,
            "date": "2024-01-16T14:20:00Z",
            "merchant": "أوبر",
        },
        {
            "id": "txn_003",
            "totalAmount": 8500,
            "date": "2024-01-17T19:45:00Z",
            "merchant": "مطعم النخيل",
        },
    ]
