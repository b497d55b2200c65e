"""
Finance Configuration Module

Loads reference data (departments, ledger categories, currency) and
disbursement options from finance_config.yaml.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config"

DEFAULT_FINANCE_CONFIG: dict[str, Any] = {
    "app_name": "TRH Finance",
    "currency": {"code": "NGN", "symbol": "₦"},
    "departments": [
        "Operations",
        "Admin",
        "Technical",
        "Sanctuary",
        "Music",
        "Media",
        "Protocol",
        "Medical",
        "Hospitality",
        "Drama",
        "Innovation & Technology",
        "Finance",
        "Information Desk",
        "Office of the Senior Pastor",
        "Church Secretary",
        "Children's Department",
        "Others",
    ],
    "expense_categories": [
        "Honorarium",
        "Welfare",
        "Fuel & Diesel",
        "Equipment Maintenance",
        "Evangelism & Missions",
        "Office Supplies",
        "Salaries & Stipends",
        "Capital Projects",
        "Utility Bills",
        "Miscellaneous",
    ],
    "income_categories": [
        "Tithes",
        "Offering",
        "Thanksgiving",
        "Seed Faith",
        "First Fruit",
        "Project Offering",
        "Donations",
        "Other",
    ],
    "disbursement": {
        "post_to_ledger": False,
        "ledger_category": "Miscellaneous",
        "signature_max_bytes": 512000,
    },
    "reports": {
        "output_dir": "output",
    },
}


class FinanceConfig:
    """Finance configuration loaded from finance_config.yaml."""

    def __init__(self, config_dir: Path | str | None = None):
        """Initialize finance config.

        Args:
            config_dir: Path to configuration directory
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML, filling gaps from defaults."""
        config_file = self.config_dir / "finance_config.yaml"
        loaded: dict[str, Any] = {}
        if config_file.exists():
            with open(config_file) as f:
                loaded = yaml.safe_load(f) or {}
        else:
            logger.debug(f"{config_file} not found, using built-in defaults")

        self.config = {**DEFAULT_FINANCE_CONFIG, **loaded}
        self.config["disbursement"] = {
            **DEFAULT_FINANCE_CONFIG["disbursement"],
            **(loaded.get("disbursement") or {}),
        }

    @property
    def app_name(self) -> str:
        return self.config["app_name"]

    @property
    def currency_symbol(self) -> str:
        return self.config.get("currency", {}).get("symbol", "")

    @property
    def currency_code(self) -> str:
        return self.config.get("currency", {}).get("code", "")

    @property
    def departments(self) -> list[str]:
        return list(self.config["departments"])

    @property
    def income_categories(self) -> list[str]:
        return list(self.config["income_categories"])

    @property
    def expense_categories(self) -> list[str]:
        return list(self.config["expense_categories"])

    @property
    def post_disbursements_to_ledger(self) -> bool:
        return bool(self.config["disbursement"]["post_to_ledger"])

    @property
    def disbursement_ledger_category(self) -> str:
        return self.config["disbursement"]["ledger_category"]

    @property
    def signature_max_bytes(self) -> int:
        return int(self.config["disbursement"]["signature_max_bytes"])

    @property
    def report_output_dir(self) -> Path:
        output_dir = Path(self.config.get("reports", {}).get("output_dir", "output"))
        if not output_dir.is_absolute():
            output_dir = self.config_dir.parent / output_dir
        return output_dir

    def format_amount(self, amount: Decimal | float) -> str:
        """Format an amount with the configured currency symbol."""
        return f"{self.currency_symbol}{Decimal(str(amount)):,.2f}"
