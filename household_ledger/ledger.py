"""Snapshot operations on the ledger.

Each function takes a ``LedgerState`` and returns a new one; nothing is
mutated in place. The caller decides when a returned snapshot is committed
to storage, so multi-step changes such as confirming a planned budget are a
single replace from the caller's point of view.
"""

from __future__ import annotations

from dataclasses import fields, replace
from typing import Iterable, Optional, Tuple, Union

from . import ids
from .allocation import resolve_allocation
from .config import DEFAULT_CASH_ASSET, MAX_ASSETS, MAX_OCCURRENCES
from .logging_setup import get_logger
from .models import (
    AllocationType,
    Asset,
    AssetCategory,
    LedgerState,
    LoanDetails,
    RecurrenceRule,
    Transaction,
    TransactionDraft,
    TransactionType,
    asset_from_dict,
    normalize_date_string,
)
from .recurrence import RecurrenceExpansion, expand_recurrence

logger = get_logger(__name__)

_EDITABLE_FIELDS = frozenset(f.name for f in fields(Transaction)) - {'id'}
_FIELD_PARSERS = {
    'type': TransactionType.parse,
    'allocation_type': AllocationType.parse,
    'date': normalize_date_string,
}


class TransactionNotFoundError(LookupError):
    pass


class AssetNotFoundError(LookupError):
    pass


class AssetLimitError(ValueError):
    pass


class NotPlannedError(ValueError):
    pass


def find_transaction(state: LedgerState, txn_id: str) -> Transaction:
    for txn in state.transactions:
        if txn.id == txn_id:
            return txn
    raise TransactionNotFoundError(f"Transaction '{txn_id}' not found")


def _stored(draft: TransactionDraft, provider: ids.IdProvider) -> Transaction:
    allocation = resolve_allocation(draft.category, draft.allocation_type, planned=draft.is_planned)
    return replace(draft, allocation_type=allocation).with_id(provider())


def add_transaction(
    state: LedgerState,
    draft: TransactionDraft,
    *,
    id_provider: Optional[ids.IdProvider] = None,
) -> Tuple[LedgerState, Transaction]:
    """Store a new entry; newest entries come first."""
    txn = _stored(draft, id_provider or ids.default_id_provider)
    logger.debug("Added %s %s on %s", txn.type.value, txn.id, txn.date)
    return replace(state, transactions=(txn,) + state.transactions), txn


def add_transactions(
    state: LedgerState,
    drafts: Iterable[TransactionDraft],
    *,
    id_provider: Optional[ids.IdProvider] = None,
) -> Tuple[LedgerState, Tuple[Transaction, ...]]:
    provider = id_provider or ids.default_id_provider
    added = tuple(_stored(draft, provider) for draft in drafts)
    return replace(state, transactions=tuple(reversed(added)) + state.transactions), added


def add_recurring_budget(
    state: LedgerState,
    template: TransactionDraft,
    rule: RecurrenceRule,
    *,
    id_provider: Optional[ids.IdProvider] = None,
    max_occurrences: int = MAX_OCCURRENCES,
) -> Tuple[LedgerState, RecurrenceExpansion]:
    """Expand a planned budget over ``rule`` and store every occurrence.

    Raises:
        NotPlannedError: If ``template`` is not a planned budget entry
    """
    if not template.is_planned:
        raise NotPlannedError("Only planned budget entries can recur")
    provider = id_provider or ids.default_id_provider
    expansion = expand_recurrence(template, rule, id_provider=provider, max_occurrences=max_occurrences)
    state, _ = add_transactions(state, expansion, id_provider=provider)
    logger.info("Created %d recurring budget entries (%s)", len(expansion), expansion.recurrence_id)
    return state, expansion


def update_transaction(state: LedgerState, txn_id: str, **changes) -> LedgerState:
    """Replace some fields of one entry; the id cannot change.

    Tags and dates go through the same normalization as loaded records, so
    ``allocation_type='event'`` is stored as ``AllocationType.EVENT``.
    """
    unknown = set(changes) - _EDITABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot update fields: {sorted(unknown)}")
    for name, parse in _FIELD_PARSERS.items():
        if name in changes:
            changes[name] = parse(changes[name])
    current = find_transaction(state, txn_id)
    updated = replace(current, **changes)
    return replace(state, transactions=tuple(
        updated if txn.id == txn_id else txn for txn in state.transactions
    ))


def remove_transaction(state: LedgerState, txn_id: str) -> LedgerState:
    """Delete one entry. Other members of its recurrence group stay."""
    find_transaction(state, txn_id)
    return replace(state, transactions=tuple(
        txn for txn in state.transactions if txn.id != txn_id
    ))


def confirm_budget(
    state: LedgerState,
    planned_id: str,
    amount: float,
    *,
    is_impulse: bool = False,
    allocation_type: Optional[Union[AllocationType, str]] = None,
    description: Optional[str] = None,
    date: Optional[str] = None,
    id_provider: Optional[ids.IdProvider] = None,
) -> Tuple[LedgerState, Transaction]:
    """Turn a planned budget entry into a realized expense.

    The planned entry is removed and the realized one inserted in the same
    returned snapshot. Category, description, date, allocation and the
    planned budget amount carry over unless overridden.

    Raises:
        TransactionNotFoundError: Unknown ``planned_id``
        NotPlannedError: The entry is not a planned budget
        ValueError: ``amount`` is not positive
    """
    planned = find_transaction(state, planned_id)
    if not planned.is_planned:
        raise NotPlannedError(f"Transaction '{planned_id}' is not a planned budget entry")
    if amount <= 0:
        raise ValueError(f"Confirmed amount must be positive, got {amount}")

    draft = TransactionDraft(
        type=TransactionType.EXPENSE,
        amount=amount,
        category=planned.category,
        date=date or planned.date,
        description=planned.description if description is None else description,
        budget_amount=planned.budget_amount,
        is_impulse=is_impulse,
        allocation_type=AllocationType.parse(allocation_type or planned.allocation_type),
    )
    realized = _stored(draft, id_provider or ids.default_id_provider)
    remaining = tuple(txn for txn in state.transactions if txn.id != planned_id)
    logger.debug("Confirmed budget %s as %s (%s)", planned_id, realized.id, amount)
    return replace(state, transactions=(realized,) + remaining), realized


def add_asset(
    state: LedgerState,
    name: str,
    category: Union[AssetCategory, str],
    balance: float,
    color: str = '',
    loan_details: Optional[LoanDetails] = None,
    *,
    id_provider: Optional[ids.IdProvider] = None,
) -> Tuple[LedgerState, Asset]:
    """Register an account or liability.

    Raises:
        AssetLimitError: The ledger already holds ``MAX_ASSETS`` assets
        ValueError: Negative balance, or loan details on a non-loan asset
    """
    if len(state.assets) >= MAX_ASSETS:
        raise AssetLimitError(f"At most {MAX_ASSETS} assets can be registered")
    category = AssetCategory.parse(category)
    if balance < 0:
        raise ValueError("Asset balance is a magnitude and cannot be negative")
    if loan_details is not None and category is not AssetCategory.LOAN:
        raise ValueError("Loan details are only valid for LOAN assets")

    provider = id_provider or ids.default_id_provider
    asset = Asset(
        id=provider(),
        name=name,
        category=category,
        balance=balance,
        color=color,
        loan_details=loan_details,
    )
    return replace(state, assets=state.assets + (asset,)), asset


def delete_asset(state: LedgerState, asset_id: str) -> LedgerState:
    if not any(asset.id == asset_id for asset in state.assets):
        raise AssetNotFoundError(f"Asset '{asset_id}' not found")
    return replace(state, assets=tuple(a for a in state.assets if a.id != asset_id))


def reset_ledger() -> LedgerState:
    """Empty ledger holding only the default cash account."""
    return LedgerState(assets=(asset_from_dict(DEFAULT_CASH_ASSET),), transactions=())
