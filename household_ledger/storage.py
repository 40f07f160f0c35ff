"""Persistence helpers for the ledger snapshot and its JSON backups."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from .config import BACKUP_DIR, BACKUP_FILENAME_PREFIX, BACKUP_VERSION, STORE_PATH
from .ledger import reset_ledger
from .logging_setup import get_logger
from .models import (
    LedgerState,
    asset_from_dict,
    asset_to_dict,
    transaction_from_dict,
    transaction_to_dict,
)

logger = get_logger(__name__)


class BackupFormatError(ValueError):
    pass


def state_to_payload(state: LedgerState) -> Dict[str, Any]:
    return {
        'assets': [asset_to_dict(asset) for asset in state.assets],
        'transactions': [transaction_to_dict(txn) for txn in state.transactions],
    }


def state_from_payload(payload: Any) -> LedgerState:
    """Validate and normalize a decoded store/backup document.

    Raises:
        BackupFormatError: Missing arrays or a record that cannot be normalized
    """
    if not isinstance(payload, Mapping):
        raise BackupFormatError("Backup must be a JSON object")
    assets = payload.get('assets')
    transactions = payload.get('transactions')
    if not isinstance(assets, list) or not isinstance(transactions, list):
        raise BackupFormatError("Backup must contain 'assets' and 'transactions' arrays")

    try:
        parsed_assets = tuple(asset_from_dict(item) for item in assets)
    except (KeyError, TypeError, ValueError) as exc:
        raise BackupFormatError(f"Invalid asset record: {exc}") from exc
    try:
        parsed_transactions = tuple(transaction_from_dict(item) for item in transactions)
    except (KeyError, TypeError, ValueError) as exc:
        raise BackupFormatError(f"Invalid transaction record: {exc}") from exc
    return LedgerState(assets=parsed_assets, transactions=parsed_transactions)


def load_ledger(path: Optional[Path] = None) -> LedgerState:
    """Load the working snapshot; a missing or unreadable store yields the default ledger."""
    target = Path(path) if path else STORE_PATH
    if not target.exists():
        return reset_ledger()
    try:
        with target.open('r', encoding='utf-8') as handle:
            data = json.load(handle)
        return state_from_payload(data)
    except (json.JSONDecodeError, UnicodeDecodeError, OSError, BackupFormatError) as exc:
        logger.warning("Ignoring unreadable ledger store %s: %s", target, exc)
        return reset_ledger()


def save_ledger(state: LedgerState, path: Optional[Path] = None) -> Path:
    target = Path(path) if path else STORE_PATH
    target.parent.mkdir(parents=True, exist_ok=True)
    with target.open('w', encoding='utf-8') as handle:
        json.dump(state_to_payload(state), handle, indent=2, ensure_ascii=False)
    return target


def export_backup(
    state: LedgerState,
    directory: Optional[Path] = None,
    *,
    exported_at: Optional[datetime] = None,
) -> Path:
    """Write a dated backup file and return its path."""
    moment = exported_at or datetime.now()
    target_dir = Path(directory) if directory else BACKUP_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / f"{BACKUP_FILENAME_PREFIX}-{moment.date().isoformat()}.json"

    payload = state_to_payload(state)
    payload['version'] = BACKUP_VERSION
    payload['exportedAt'] = moment.isoformat(timespec='seconds')
    with target.open('w', encoding='utf-8') as handle:
        json.dump(payload, handle, indent=2, ensure_ascii=False)
    logger.info(
        "Exported %d assets and %d transactions to %s",
        len(state.assets), len(state.transactions), target,
    )
    return target


def restore_backup(path: Path) -> LedgerState:
    """Read a backup file into a snapshot that replaces the current one.

    Raises:
        BackupFormatError: The file is not valid JSON or lacks the arrays
    """
    try:
        with Path(path).open('r', encoding='utf-8') as handle:
            data = json.load(handle)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise BackupFormatError(f"Backup is not valid UTF-8 JSON: {exc}") from exc
    state = state_from_payload(data)
    logger.info(
        "Restored %d assets and %d transactions from %s",
        len(state.assets), len(state.transactions), path,
    )
    return state
