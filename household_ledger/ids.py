"""Identifier providers for transactions, assets and recurrence groups.

Every id in the ledger comes from a zero-argument callable returning a string.
The default draws a UUID4; tests pass a ``CounterIdProvider`` to get stable,
predictable ids.
"""

from __future__ import annotations

import itertools
import uuid
from typing import Callable

IdProvider = Callable[[], str]


def uuid_provider() -> str:
    return str(uuid.uuid4())


class CounterIdProvider:
    """Deterministic ids: ``prefix-1``, ``prefix-2``, ..."""

    def __init__(self, prefix: str = "id", start: int = 1):
        self.prefix = prefix
        self._counter = itertools.count(start)

    def __call__(self) -> str:
        return f"{self.prefix}-{next(self._counter)}"


default_id_provider: IdProvider = uuid_provider
