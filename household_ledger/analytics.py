"""Spending analytics over a transaction snapshot.

Covers the impulse-spending indicators, the nature/category breakdowns of the
analysis screen and the per-day markers of the calendar. Only EXPENSE rows are
considered except for the calendar markers, which also flag income days.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

import pandas as pd

from .calendar_utils import days_in_month, month_key
from .config import IMPULSE_MOOD_THRESHOLDS
from .frames import as_frame
from .models import NATURE_LABELS, Nature, TransactionType


class ImpulseMood(str, Enum):
    CALM = 'CALM'
    TEMPTED = 'TEMPTED'
    DANCING = 'DANCING'
    OVERDRIVE = 'OVERDRIVE'


@dataclass(frozen=True)
class ImpulseSummary:
    total: float
    by_category: Tuple[Tuple[str, float], ...]
    ratio: float


def _expenses(frame: pd.DataFrame) -> pd.DataFrame:
    return frame[frame['Type'] == TransactionType.EXPENSE.value]


def _in_period(frame: pd.DataFrame, period: Optional[str]) -> pd.DataFrame:
    """Keep rows of a ``YYYY`` year or ``YYYY-MM`` month (all rows for None)."""
    if period is None:
        return frame
    column = 'Year' if len(period) == 4 else 'Month'
    return frame[frame[column] == period]


def impulse_ratio(transactions: Union[pd.DataFrame, Iterable]) -> float:
    """Share (%) of all expense spending flagged as impulse.

    Deliberately not period-scoped: the indicator reflects the whole ledger.
    Returns 0 when there is no expense spending at all.
    """
    expenses = _expenses(as_frame(transactions))
    total = math.fsum(expenses['Amount'])
    if total == 0:
        return 0.0
    impulse = math.fsum(expenses.loc[expenses['Is Impulse'], 'Amount'])
    return impulse / total * 100.0


def aggregate_impulse(
    transactions: Union[pd.DataFrame, Iterable],
    month: Optional[str] = None,
) -> ImpulseSummary:
    """Impulse total and per-category amounts for a month.

    ``total`` and ``by_category`` are limited to ``month`` (``YYYY-MM``) when
    given; ``ratio`` always uses every expense in the snapshot.
    """
    frame = as_frame(transactions)
    scoped = _in_period(_expenses(frame), month)
    impulse = scoped[scoped['Is Impulse']]
    by_category = (
        impulse.groupby('Category', sort=False)['Amount']
        .sum()
        .sort_values(ascending=False, kind='stable')
    )
    return ImpulseSummary(
        total=math.fsum(impulse['Amount']),
        by_category=tuple((str(cat), float(amount)) for cat, amount in by_category.items()),
        ratio=impulse_ratio(frame),
    )


def impulse_mood(ratio: float) -> ImpulseMood:
    """Mood of the impulse character for an impulse ratio."""
    tempted_below, dancing_below = IMPULSE_MOOD_THRESHOLDS
    if ratio == 0:
        return ImpulseMood.CALM
    if ratio < tempted_below:
        return ImpulseMood.TEMPTED
    if ratio < dancing_below:
        return ImpulseMood.DANCING
    return ImpulseMood.OVERDRIVE


def _breakdown(expenses: pd.DataFrame, column: str) -> pd.DataFrame:
    total = math.fsum(expenses['Amount'])
    result = expenses.groupby(column, sort=False)['Amount'].sum().reset_index()
    result['Percent'] = (result['Amount'] / total * 100.0) if total > 0 else 0.0
    return result.sort_values('Amount', ascending=False, kind='stable').reset_index(drop=True)


def nature_breakdown(
    transactions: Union[pd.DataFrame, Iterable],
    period: Optional[str] = None,
) -> pd.DataFrame:
    """Expense amount per nature for a month (``YYYY-MM``) or year (``YYYY``).

    Returns:
        DataFrame with columns: Nature, Label, Amount, Percent (of the period
        total), largest first
    """
    expenses = _in_period(_expenses(as_frame(transactions)), period)
    result = _breakdown(expenses, 'Nature')
    result['Label'] = result['Nature'].map(lambda value: NATURE_LABELS[Nature(value)])
    return result[['Nature', 'Label', 'Amount', 'Percent']]


def category_breakdown(
    transactions: Union[pd.DataFrame, Iterable],
    period: Optional[str] = None,
) -> pd.DataFrame:
    """Expense amount per category; columns Category, Amount, Percent."""
    expenses = _in_period(_expenses(as_frame(transactions)), period)
    return _breakdown(expenses, 'Category')[['Category', 'Amount', 'Percent']]


def calendar_markers(
    transactions: Union[pd.DataFrame, Iterable],
    year: int,
    month: int,
) -> pd.DataFrame:
    """Per-day flags for the month calendar, indexed by day 1..N.

    Has Income: any income entry; Has Expense: a realized expense;
    Has Budget: a planned (not yet realized) expense.
    """
    frame = as_frame(transactions)
    scoped = frame[frame['Month'] == month_key(year, month)]
    is_expense = scoped['Type'] == TransactionType.EXPENSE.value
    flags = pd.DataFrame({
        'Day': scoped['Date'].dt.day,
        'Has Income': scoped['Type'] == TransactionType.INCOME.value,
        'Has Expense': is_expense & (scoped['Amount'] > 0),
        'Has Budget': is_expense & (scoped['Amount'] == 0) & (scoped['Budget Amount'] > 0),
    })
    days = range(1, days_in_month(year, month) + 1)
    markers = flags.groupby('Day').any().reindex(days, fill_value=False).astype(bool)
    markers.index.name = 'Day'
    return markers
