#!/usr/bin/env python3
"""Print the monthly budget report for a ledger store."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from household_ledger import config
from household_ledger.analytics import impulse_mood, nature_breakdown
from household_ledger.assets import net_worth, totals_by_category
from household_ledger.budget_calculations import PeriodStats, monthly_budget_report
from household_ledger.formatting import format_won, number_to_korean
from household_ledger.frames import transactions_frame
from household_ledger.logging_setup import configure_logging, get_logger
from household_ledger.models import ASSET_CATEGORY_LABELS, LedgerState
from household_ledger.storage import load_ledger

logger = get_logger(__name__)


def _stats_line(label: str, stats: PeriodStats) -> str:
    status = "OVER" if stats.over_budget else "ok"
    return (
        f"{label}: budget {format_won(stats.budget, True)}"
        f" | spent {format_won(stats.spent, True)}"
        f" | expected {format_won(stats.expected, True)}"
        f" | remaining {format_won(stats.remaining, True)}"
        f" | {stats.usage_percent:.1f}% [{status}]"
    )


def build_report(state: LedgerState, year: int, month: int) -> List[str]:
    """Render the report as a list of lines."""
    frame = transactions_frame(state.transactions)
    report = monthly_budget_report(frame, year, month)

    lines = [f"=== Budget report {report.month} ===", ""]
    lines.append(_stats_line("Living", report.living))
    lines.append(_stats_line("Event", report.event))

    lines.append("")
    lines.append("Weekly (living):")
    for row in report.weekly.itertuples(index=False):
        lines.append(
            f"  Week {row.Week}: budget {format_won(row.Budget)}"
            f" / used {format_won(row.Used)}"
        )

    impulse = report.impulse
    lines.append("")
    lines.append(
        f"Impulse spending: {format_won(impulse.total, True)}"
        f" (ratio {impulse.ratio:.1f}%, {impulse_mood(impulse.ratio).value.lower()})"
    )
    for category, amount in impulse.by_category:
        lines.append(f"  - {category}: {format_won(amount, True)}")

    natures = nature_breakdown(frame, report.month)
    if not natures.empty:
        lines.append("")
        lines.append("By nature:")
        for row in natures.itertuples(index=False):
            lines.append(f"  {row.Label}: {format_won(row.Amount, True)} ({row.Percent:.1f}%)")

    lines.append("")
    lines.append("Assets:")
    for category, total in totals_by_category(state.assets).items():
        lines.append(f"  {ASSET_CATEGORY_LABELS[category]}: {format_won(total, True)}")
    worth = net_worth(state.assets)
    spelled = number_to_korean(worth)
    lines.append(f"Net worth: {format_won(worth, True)}" + (f" ({spelled})" if spelled else ""))
    return lines


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Print the monthly budget report.')
    parser.add_argument('--store', type=Path, default=config.STORE_PATH, help='Ledger store JSON file')
    parser.add_argument('--month', required=True, help='Month to report, as YYYY-MM')
    parser.add_argument('--log-level', default=None, help='Logging level (default: LEDGER_LOG_LEVEL or INFO)')
    args = parser.parse_args(argv)

    configure_logging(args.log_level)
    try:
        year_text, month_text = args.month.split('-')
        year, month = int(year_text), int(month_text)
        if not 1 <= month <= 12:
            raise ValueError(args.month)
    except ValueError:
        parser.error(f"--month must look like YYYY-MM, got {args.month!r}")

    if not args.store.exists():
        logger.info("Store %s not found; reporting on an empty ledger", args.store)
    state = load_ledger(args.store)
    print("\n".join(build_report(state, year, month)))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
