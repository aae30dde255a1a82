"""
Configuration management (SSOT).

All configuration for the Pemo → Qoyod sync is defined here; no other module
should invent config keys.

Key invariants:
- Values are read once per run and passed explicitly into the job
- Environment variables override config.yaml
- Validation reports every missing value at once, using env var names
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_PEMO_BASE_URL = "https://external-api.pemo.io/v1"
DEFAULT_QOYOD_BASE_URL = "https://www.qoyod.com/api/2.0"

ENTRY_TYPE_INVOICE = "invoice"
ENTRY_TYPE_JOURNAL = "journal_entry"
ENTRY_TYPES = (ENTRY_TYPE_INVOICE, ENTRY_TYPE_JOURNAL)


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    def __init__(self, missing: list[str], invalid: list[str] | None = None):
        self.missing = missing
        self.invalid = invalid or []
        parts = []
        if missing:
            parts.append(f"Missing required environment variables: {', '.join(missing)}")
        parts.extend(self.invalid)
        super().__init__("; ".join(parts))


@dataclass
class PemoConfig:
    """Pemo (source system) configuration."""

    api_key: str = ""
    base_url: str = DEFAULT_PEMO_BASE_URL


@dataclass
class QoyodConfig:
    """Qoyod (target system) configuration.

    Reference ids are kept as the raw strings they were configured with and
    converted to integers when a payload is built. Which ones are required
    depends on entry_type:
    - invoice: contact_id, inventory_id, product_id
    - journal_entry: debit_account_id, credit_account_id
    """

    api_key: str = ""
    base_url: str = DEFAULT_QOYOD_BASE_URL
    entry_type: str = ENTRY_TYPE_INVOICE

    # Invoice variant
    contact_id: str | None = None
    inventory_id: str | None = None
    product_id: str | None = None
    # "Approved" auto-approves; use "Draft" to review invoices in Qoyod first
    invoice_status: str = "Approved"

    # Journal-entry variant
    debit_account_id: str | None = None
    credit_account_id: str | None = None


@dataclass
class Config:
    """Application configuration (SSOT)."""

    pemo: PemoConfig = field(default_factory=PemoConfig)
    qoyod: QoyodConfig = field(default_factory=QoyodConfig)
    # None means no explicit timeout (HTTP library default)
    http_timeout: float | None = None

    def required_values(self) -> dict[str, str | None]:
        """Map env var name → configured value for every required setting."""
        required: dict[str, str | None] = {
            "PEMO_API_KEY": self.pemo.api_key,
            "QOYOD_API_KEY": self.qoyod.api_key,
        }
        if self.qoyod.entry_type == ENTRY_TYPE_JOURNAL:
            required["QOYOD_DEBIT_ACCOUNT_ID"] = self.qoyod.debit_account_id
            required["QOYOD_CREDIT_ACCOUNT_ID"] = self.qoyod.credit_account_id
        elif self.qoyod.entry_type == ENTRY_TYPE_INVOICE:
            required["QOYOD_CONTACT_ID"] = self.qoyod.contact_id
            required["QOYOD_INVENTORY_ID"] = self.qoyod.inventory_id
            required["QOYOD_PRODUCT_ID"] = self.qoyod.product_id
        return required

    def missing_values(self) -> list[str]:
        """Return env var names of required settings that are unset or empty."""
        return [name for name, value in self.required_values().items() if not value]

    def invalid_values(self) -> list[str]:
        """Return problems with settings that are present but unusable.

        Checks the entry type and that every configured Qoyod reference id
        is an integer.
        """
        problems: list[str] = []

        if self.qoyod.entry_type not in ENTRY_TYPES:
            problems.append(
                f"QOYOD_ENTRY_TYPE must be one of {', '.join(ENTRY_TYPES)}, "
                f"got '{self.qoyod.entry_type}'"
            )

        for name, value in self.required_values().items():
            if not name.endswith("_ID") or not value:
                continue
            try:
                int(value)
            except ValueError:
                problems.append(f"{name} must be an integer, got '{value}'")

        return problems

    def validate(self) -> list[str]:
        """Validate configuration completeness and consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        missing = self.missing_values()
        if missing:
            errors.append(f"Missing required environment variables: {', '.join(missing)}")

        errors.extend(self.invalid_values())

        if self.http_timeout is not None and self.http_timeout <= 0:
            errors.append("http_timeout must be positive when set")

        return errors

    def ensure_complete(self) -> None:
        """Raise ConfigValidationError naming every missing or unusable value."""
        missing = self.missing_values()
        invalid = self.invalid_values()
        if missing or invalid:
            raise ConfigValidationError(missing, invalid)


def _env_or(name: str, fallback):
    """Environment value if set and non-empty, otherwise fallback."""
    value = os.environ.get(name)
    return value if value else fallback


def _as_str(value) -> str | None:
    """Normalize YAML scalars (ints for ids) to strings."""
    if value is None:
        return None
    return str(value)


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from an optional YAML file.

    Environment variables override config values:
    - PEMO_API_KEY, PEMO_BASE_URL
    - QOYOD_API_KEY, QOYOD_BASE_URL, QOYOD_ENTRY_TYPE
    - QOYOD_CONTACT_ID, QOYOD_INVENTORY_ID, QOYOD_PRODUCT_ID, QOYOD_INVOICE_STATUS
    - QOYOD_DEBIT_ACCOUNT_ID, QOYOD_CREDIT_ACCOUNT_ID
    - SYNC_HTTP_TIMEOUT (seconds)
    """
    if config_path is not None and Path(config_path).exists():
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_path}: top level must be a mapping, got {type(data).__name__}")
    for section in ("pemo", "qoyod"):
        if not isinstance(data.get(section) or {}, dict):
            raise ValueError(f"{config_path}: '{section}' must be a mapping")

    pemo_data = data.get("pemo", {}) or {}
    pemo = PemoConfig(
        api_key=_env_or("PEMO_API_KEY", pemo_data.get("api_key", "")),
        base_url=_env_or("PEMO_BASE_URL", pemo_data.get("base_url", DEFAULT_PEMO_BASE_URL)),
    )

    qoyod_data = data.get("qoyod", {}) or {}
    qoyod = QoyodConfig(
        api_key=_env_or("QOYOD_API_KEY", qoyod_data.get("api_key", "")),
        base_url=_env_or(
            "QOYOD_BASE_URL", qoyod_data.get("base_url", DEFAULT_QOYOD_BASE_URL)
        ),
        entry_type=_env_or(
            "QOYOD_ENTRY_TYPE", qoyod_data.get("entry_type", ENTRY_TYPE_INVOICE)
        ),
        contact_id=_env_or("QOYOD_CONTACT_ID", _as_str(qoyod_data.get("contact_id"))),
        inventory_id=_env_or("QOYOD_INVENTORY_ID", _as_str(qoyod_data.get("inventory_id"))),
        product_id=_env_or("QOYOD_PRODUCT_ID", _as_str(qoyod_data.get("product_id"))),
        invoice_status=_env_or(
            "QOYOD_INVOICE_STATUS", qoyod_data.get("invoice_status", "Approved")
        ),
        debit_account_id=_env_or(
            "QOYOD_DEBIT_ACCOUNT_ID", _as_str(qoyod_data.get("debit_account_id"))
        ),
        credit_account_id=_env_or(
            "QOYOD_CREDIT_ACCOUNT_ID", _as_str(qoyod_data.get("credit_account_id"))
        ),
    )

    timeout = _env_or("SYNC_HTTP_TIMEOUT", data.get("http_timeout"))

    return Config(
        pemo=pemo,
        qoyod=qoyod,
        http_timeout=float(timeout) if timeout not in (None, "") else None,
    )


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Pemo → Qoyod Sync Configuration
#
# Every value can be overridden by an environment variable
# (PEMO_API_KEY, QOYOD_API_KEY, QOYOD_CONTACT_ID, ...).
# Prefer environment variables for API keys.

pemo:
  api_key: ""                                   # PEMO_API_KEY
  base_url: "https://external-api.pemo.io/v1"

qoyod:
  api_key: ""                                   # QOYOD_API_KEY
  base_url: "https://www.qoyod.com/api/2.0"
  entry_type: "invoice"                         # invoice | journal_entry

  # invoice variant
  contact_id: null                              # QOYOD_CONTACT_ID
  inventory_id: null                            # QOYOD_INVENTORY_ID
  product_id: null                              # QOYOD_PRODUCT_ID
  invoice_status: "Approved"                    # or "Draft"

  # journal_entry variant
  debit_account_id: null                        # QOYOD_DEBIT_ACCOUNT_ID
  credit_account_id: null                       # QOYOD_CREDIT_ACCOUNT_ID

# Request timeout in seconds (unset = no explicit timeout)
http_timeout: null
"""

    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w") as f:
        f.write(default_config)
