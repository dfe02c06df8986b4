"""Configuration for the finance tracker.

Paths, storage key and display defaults live here, each with an
environment variable override.
"""

import logging
import os
from pathlib import Path

_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

DATA_DIR = Path(os.getenv("MONEYWISE_DATA_DIR", _PROJECT_ROOT / "data")).resolve()

# name of the single persisted document
STORAGE_KEY = "finance_data"

CURRENCY_SYMBOL = os.getenv("MONEYWISE_CURRENCY", "₹")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def ensure_data_directories() -> None:
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def configure_logging(level: str = LOG_LEVEL) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format=LOG_FORMAT,
    )


def format_currency(amount: float, symbol: str = CURRENCY_SYMBOL) -> str:
    """Whole units with thousands separators, e.g. ₹8,000."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.0f}"
