"""Configuration management for the household ledger.

This module centralizes all configuration values including paths,
engine limits, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in household_ledger/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("LEDGER_DATA_DIR", _PROJECT_ROOT / "data"))
BACKUP_DIR = Path(os.getenv("LEDGER_BACKUP_DIR", DATA_DIR / "backups"))

# Ledger store (assets + transactions snapshot)
STORE_PATH = Path(
    os.getenv("LEDGER_STORE_PATH", DATA_DIR / "ledger.json")
).resolve()

# Recurrence expansion stops after this many occurrences, even when the
# end date lies further out (e.g. the form default of 2099-12-31).
MAX_OCCURRENCES = 500

# Asset (account) count accepted by ``ledger.add_asset``.
MAX_ASSETS = 10

BACKUP_VERSION = "1.0"
BACKUP_FILENAME_PREFIX = "lovely-ledger-backup"

# Realized expenses in these categories always land in the event budget.
EVENT_CATEGORIES = frozenset({"경조사"})

# Impulse ratio (%) boundaries between the calm/tempted/dancing/overdrive moods.
IMPULSE_MOOD_THRESHOLDS = (20.0, 50.0)

# Snapshot used by ``ledger.reset_ledger``.
DEFAULT_CASH_ASSET = {
    "id": "1",
    "name": "현금",
    "category": "CASH",
    "balance": 0,
    "color": "bg-lovely-400",
}

LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"


def ensure_data_directories() -> None:
    """Create all required data directories if they don't exist."""
    for directory in [DATA_DIR, BACKUP_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)


def get_store_path() -> str:
    """Get the ledger store path as a string."""
    return str(STORE_PATH)
