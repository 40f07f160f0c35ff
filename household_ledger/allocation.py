"""Allocation and nature classification.

Two partitions of the same transactions are used by the views:

* the *nature* (living / event / invest / impulse) drives the spending
  analysis, where the impulse flag beats every allocation type;
* the *budget partition* (living vs. event) drives budget tracking and only
  looks at whether the allocation type is EVENT.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from .config import EVENT_CATEGORIES
from .models import AllocationType, Nature, Partition

INVEST_ALLOCATIONS = frozenset({AllocationType.INVEST_STABLE, AllocationType.INVEST_RISK})


def classify_nature(txn) -> Nature:
    """Classify a transaction for the spending analysis.

    Example:
        >>> classify_nature(Transaction(..., is_impulse=True, allocation_type=AllocationType.EVENT))
        <Nature.IMPULSE: 'IMPULSE'>
    """
    if txn.is_impulse:
        return Nature.IMPULSE
    if txn.allocation_type in INVEST_ALLOCATIONS:
        return Nature.INVEST
    if txn.allocation_type is AllocationType.EVENT:
        return Nature.EVENT
    return Nature.LIVING


def budget_partition(txn) -> Partition:
    if txn.allocation_type is AllocationType.EVENT:
        return Partition.EVENT
    return Partition.LIVING


def classify_natures(frame: pd.DataFrame) -> pd.Series:
    """Vectorised ``classify_nature`` over a transactions frame.

    Reads the ``Is Impulse`` and ``Allocation Type`` columns and returns the
    nature values as strings aligned with ``frame.index``.
    """
    allocation = frame['Allocation Type']
    conditions = [
        frame['Is Impulse'].astype(bool).to_numpy(),
        allocation.isin([a.value for a in INVEST_ALLOCATIONS]).to_numpy(),
        (allocation == AllocationType.EVENT.value).to_numpy(),
    ]
    choices = [Nature.IMPULSE.value, Nature.INVEST.value, Nature.EVENT.value]
    values = np.select(conditions, choices, default=Nature.LIVING.value)
    return pd.Series(values, index=frame.index, dtype=object)


def resolve_allocation(
    category: str,
    allocation: Union[AllocationType, str],
    *,
    planned: bool,
) -> AllocationType:
    """Allocation type to store for a new entry.

    Realized spending in an event category (``경조사``) always lands in the
    event budget; planned entries keep what the user picked.
    """
    allocation = AllocationType.parse(allocation)
    if not planned and category in EVENT_CATEGORIES:
        return AllocationType.EVENT
    return allocation
