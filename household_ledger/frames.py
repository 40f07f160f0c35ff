"""Tabular view of a transaction snapshot.

The budget and analytics helpers work on a pandas DataFrame built once from
the snapshot, with the derived period and classification columns the
reports filter on (``Month``, ``Year``, ``Week``, ``Nature``, ``Partition``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Union

import numpy as np
import pandas as pd

from .allocation import classify_natures
from .calendar_utils import week_of_month
from .models import AllocationType, Partition

TRANSACTION_COLUMNS = [
    'id',
    'Type',
    'Amount',
    'Budget Amount',
    'Category',
    'Description',
    'Date',
    'Is Impulse',
    'Allocation Type',
    'Recurrence Id',
]


def _tag(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def transactions_frame(transactions: Iterable) -> pd.DataFrame:
    """Build the analysis frame for transactions (or drafts).

    Missing budget amounts become 0, dates become timestamps, and each row
    gets its month key, year, calendar-grid week, nature and budget partition.
    """
    rows = [
        {
            'id': getattr(txn, 'id', None),
            'Type': _tag(txn.type),
            'Amount': txn.amount,
            'Budget Amount': txn.budget_amount,
            'Category': txn.category,
            'Description': txn.description,
            'Date': txn.date,
            'Is Impulse': txn.is_impulse,
            'Allocation Type': _tag(txn.allocation_type),
            'Recurrence Id': txn.recurrence_id,
        }
        for txn in transactions
    ]
    frame = pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)

    frame['Amount'] = pd.to_numeric(frame['Amount'], errors='coerce').fillna(0.0).astype(float)
    frame['Budget Amount'] = (
        pd.to_numeric(frame['Budget Amount'], errors='coerce').fillna(0.0).astype(float)
    )
    frame['Is Impulse'] = frame['Is Impulse'].fillna(False).astype(bool)
    frame['Date'] = pd.to_datetime(frame['Date'], format='%Y-%m-%d')

    frame['Month'] = frame['Date'].dt.strftime('%Y-%m')
    frame['Year'] = frame['Date'].dt.strftime('%Y')
    frame['Week'] = pd.Series(
        [week_of_month(ts.date()) for ts in frame['Date']],
        index=frame.index,
        dtype='int64',
    )
    frame['Nature'] = classify_natures(frame)
    frame['Partition'] = np.where(
        frame['Allocation Type'] == AllocationType.EVENT.value,
        Partition.EVENT.value,
        Partition.LIVING.value,
    )
    return frame


def as_frame(transactions: Union[pd.DataFrame, Iterable]) -> pd.DataFrame:
    """Accept either a prepared frame or an iterable of transactions."""
    if isinstance(transactions, pd.DataFrame):
        return transactions
    return transactions_frame(transactions)
