"""Budget-versus-actual calculations.

This module provides the single period reduce used by the budget views
(``summarize``) and the helpers that apply it at month, calendar-week and
category granularity, plus the monthly budget report that combines them.

Row semantics:

* ``Budget Amount`` is the planned ceiling (missing counts as 0);
* ``Amount`` is what was actually spent;
* a row with ``Amount == 0`` and a positive budget is a planned entry that has
  not happened yet, so its budget also counts as *expected* spending.
  Realized rows never add to expected, even when they carry a budget.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Iterable, Optional, Union

import pandas as pd

from .analytics import ImpulseSummary, aggregate_impulse
from .calendar_utils import month_key, weeks_in_month
from .frames import as_frame
from .models import Partition, TransactionType

STAT_COLUMNS = ['Budget', 'Spent', 'Expected', 'Used', 'Remaining', 'Usage %', 'Over Budget']


@dataclass(frozen=True)
class PeriodStats:
    budget: float = 0.0
    spent: float = 0.0
    expected: float = 0.0
    used: float = 0.0
    remaining: float = 0.0
    usage_percent: float = 0.0
    over_budget: bool = False

    @classmethod
    def from_totals(cls, budget: float, spent: float, expected: float) -> 'PeriodStats':
        used = spent + expected
        return cls(
            budget=budget,
            spent=spent,
            expected=expected,
            used=used,
            remaining=budget - used,
            usage_percent=(used / budget * 100.0) if budget > 0 else 0.0,
            over_budget=used > budget,
        )

    def as_row(self) -> Dict[str, Any]:
        return dict(zip(STAT_COLUMNS, [
            self.budget,
            self.spent,
            self.expected,
            self.used,
            self.remaining,
            self.usage_percent,
            self.over_budget,
        ]))


def _total(values: Iterable[float]) -> float:
    # fsum keeps the result independent of row order.
    return math.fsum(float(v) for v in values)


def summarize(rows: Union[pd.DataFrame, Iterable]) -> PeriodStats:
    """Reduce a pre-filtered set of rows to budget statistics.

    Example:
        >>> summarize([planned_50000, spent_30000])
        PeriodStats(budget=50000.0, spent=30000.0, expected=50000.0, used=80000.0,
                    remaining=-30000.0, usage_percent=160.0, over_budget=True)
    """
    frame = as_frame(rows)
    if frame.empty:
        return PeriodStats()
    planned = (frame['Amount'] == 0) & (frame['Budget Amount'] > 0)
    return PeriodStats.from_totals(
        budget=_total(frame['Budget Amount']),
        spent=_total(frame['Amount']),
        expected=_total(frame.loc[planned, 'Budget Amount']),
    )


def _month_filter(month: Union[str, date]) -> str:
    return month_key(month) if isinstance(month, date) else str(month)


def budget_rows(
    transactions: Union[pd.DataFrame, Iterable],
    partition: Optional[Union[Partition, str]] = Partition.LIVING,
    *,
    month: Optional[Union[str, date]] = None,
    week: Optional[int] = None,
    category: Optional[str] = None,
) -> pd.DataFrame:
    """Expense rows narrowed to a partition and optional month/week/category.

    Args:
        transactions: Snapshot or prepared frame
        partition: LIVING or EVENT; ``None`` keeps both
        month: ``YYYY-MM`` key (or any date inside the month)
        week: Calendar-grid week of month (1-based)
        category: Exact category label
    """
    frame = as_frame(transactions)
    mask = frame['Type'] == TransactionType.EXPENSE.value
    if partition is not None:
        mask &= frame['Partition'] == Partition.parse(partition).value
    if month is not None:
        mask &= frame['Month'] == _month_filter(month)
    if week is not None:
        mask &= frame['Week'] == int(week)
    if category is not None:
        mask &= frame['Category'] == category
    return frame[mask]


def aggregate_period(
    transactions: Union[pd.DataFrame, Iterable],
    partition: Optional[Union[Partition, str]] = Partition.LIVING,
    *,
    month: Optional[Union[str, date]] = None,
    week: Optional[int] = None,
    category: Optional[str] = None,
) -> PeriodStats:
    """Budget statistics for one partition at month, week or category scope.

    The three granularities are the same reduce over narrower filters:

        >>> aggregate_period(txns, Partition.LIVING, month='2024-03')
        >>> aggregate_period(txns, Partition.LIVING, month='2024-03', week=2)
        >>> aggregate_period(txns, Partition.LIVING, month='2024-03', week=2, category='식비')
    """
    return summarize(budget_rows(
        transactions, partition, month=month, week=week, category=category,
    ))


def weekly_budget_frame(
    transactions: Union[pd.DataFrame, Iterable],
    year: int,
    month: int,
    partition: Union[Partition, str] = Partition.LIVING,
) -> pd.DataFrame:
    """One row per calendar-grid week of the month, empty weeks included.

    Returns:
        DataFrame with columns: Week, Budget, Spent, Expected, Used,
        Remaining, Usage %, Over Budget
    """
    scoped = budget_rows(transactions, partition, month=month_key(year, month))
    rows = []
    for week in range(1, weeks_in_month(year, month) + 1):
        stats = summarize(scoped[scoped['Week'] == week])
        rows.append({'Week': week, **stats.as_row()})
    return pd.DataFrame(rows, columns=['Week', *STAT_COLUMNS])


def category_budget_frame(
    transactions: Union[pd.DataFrame, Iterable],
    year: int,
    month: int,
    week: Optional[int] = None,
    partition: Union[Partition, str] = Partition.LIVING,
) -> pd.DataFrame:
    """Per-category statistics within a month (or one week of it).

    Categories keep the order in which they first appear in the snapshot.
    """
    scoped = budget_rows(transactions, partition, month=month_key(year, month), week=week)
    rows = [
        {'Category': category, **summarize(group).as_row()}
        for category, group in scoped.groupby('Category', sort=False)
    ]
    return pd.DataFrame(rows, columns=['Category', *STAT_COLUMNS])


@dataclass(frozen=True, eq=False)
class MonthlyBudgetReport:
    month: str
    living: PeriodStats
    event: PeriodStats
    weekly: pd.DataFrame
    impulse: ImpulseSummary


def monthly_budget_report(
    transactions: Union[pd.DataFrame, Iterable],
    year: int,
    month: int,
) -> MonthlyBudgetReport:
    """Everything the monthly budget screen shows for ``year``/``month``."""
    frame = as_frame(transactions)
    key = month_key(year, month)
    return MonthlyBudgetReport(
        month=key,
        living=aggregate_period(frame, Partition.LIVING, month=key),
        event=aggregate_period(frame, Partition.EVENT, month=key),
        weekly=weekly_budget_frame(frame, year, month, Partition.LIVING),
        impulse=aggregate_impulse(frame, month=key),
    )
