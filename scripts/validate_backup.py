#!/usr/bin/env python3
"""Lightweight validator for ledger backup files."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from household_ledger import config
from household_ledger.storage import BackupFormatError, state_from_payload


def validate_backup(path: Path) -> Dict[str, str]:
    errors = []
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
    except json.JSONDecodeError as exc:
        return {"name": path.name, "errors": f"invalid JSON ({exc.msg})"}
    except UnicodeDecodeError as exc:
        return {"name": path.name, "errors": f"not UTF-8 ({exc.reason})"}

    if isinstance(data, dict) and "version" not in data:
        errors.append("missing 'version'")
    try:
        state_from_payload(data)
    except BackupFormatError as exc:
        errors.append(str(exc))

    if errors:
        return {"name": path.name, "errors": "; ".join(errors)}
    return {}


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    backup_dir = Path(args[0]) if args else config.BACKUP_DIR
    if not backup_dir.exists():
        print(f"Backup directory not found: {backup_dir}")
        return 1

    issues = []
    for path in sorted(backup_dir.glob('*.json')):
        result = validate_backup(path)
        if result:
            issues.append((path.name, result['errors']))

    if issues:
        print("Backup validation failed:")
        for filename, message in issues:
            print(f"  - {filename}: {message}")
        return 1

    print("All backups validated successfully.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
