"""Domain model for the household ledger.

Records are frozen dataclasses; every tag is a ``str``-valued enum with a
single canonical upper-case spelling. Persisted JSON (camelCase keys, as
written by the backup files) passes through ``transaction_from_dict`` /
``asset_from_dict`` exactly once on load. That is the only place where legacy
spellings (``'income'``, ``'INVEST_SAFE'``, ``'BULK'``, timestamp dates) are
accepted; the rest of the package compares enum members only.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from .calendar_utils import format_date, parse_date

_LEGACY_ALIASES = {
    'INVEST_SAFE': 'INVEST_STABLE',
    'INVEST_AGGRESSIVE': 'INVEST_RISK',
    'BULK': 'BULLET',
}


class _CanonicalEnum(str, Enum):

    @classmethod
    def parse(cls, value: Any):
        """Normalize a persisted or user-supplied tag into a member."""
        if isinstance(value, cls):
            return value
        if value is None:
            raise ValueError(f"Missing {cls.__name__} value")
        token = str(value).strip().upper().replace('-', '_').replace(' ', '_')
        token = _LEGACY_ALIASES.get(token, token)
        try:
            return cls(token)
        except ValueError:
            raise ValueError(f"Unknown {cls.__name__} value: {value!r}") from None


class TransactionType(_CanonicalEnum):
    INCOME = 'INCOME'
    EXPENSE = 'EXPENSE'


class AllocationType(_CanonicalEnum):
    LIVING = 'LIVING'
    INVEST_STABLE = 'INVEST_STABLE'
    INVEST_RISK = 'INVEST_RISK'
    EVENT = 'EVENT'


class AssetCategory(_CanonicalEnum):
    REAL_ESTATE = 'REAL_ESTATE'
    FINANCE = 'FINANCE'
    CASH = 'CASH'
    LOAN = 'LOAN'


class RecurrenceFrequency(_CanonicalEnum):
    WEEKLY = 'WEEKLY'
    BIWEEKLY = 'BIWEEKLY'
    MONTHLY = 'MONTHLY'
    QUARTERLY = 'QUARTERLY'
    SEMIANNUAL = 'SEMIANNUAL'
    ANNUAL = 'ANNUAL'


class RepaymentMethod(_CanonicalEnum):
    EQUAL_PAYMENT = 'EQUAL_PAYMENT'
    EQUAL_PRINCIPAL = 'EQUAL_PRINCIPAL'
    BULLET = 'BULLET'


class Nature(_CanonicalEnum):
    """Four-way spending classification used by the analysis views."""
    LIVING = 'LIVING'
    EVENT = 'EVENT'
    INVEST = 'INVEST'
    IMPULSE = 'IMPULSE'


class Partition(_CanonicalEnum):
    """Budget-tracking bucket: everything that is not EVENT is LIVING."""
    LIVING = 'LIVING'
    EVENT = 'EVENT'


NATURE_LABELS: Dict[Nature, str] = {
    Nature.LIVING: '생활비 (계획)',
    Nature.EVENT: '경조사/이벤트',
    Nature.INVEST: '저축/투자',
    Nature.IMPULSE: '돌발 비용 (지름신)',
}

ASSET_CATEGORY_LABELS: Dict[AssetCategory, str] = {
    AssetCategory.REAL_ESTATE: '부동산',
    AssetCategory.FINANCE: '예적금/투자',
    AssetCategory.CASH: '현금',
    AssetCategory.LOAN: '대출/부채',
}


class _TransactionFields:
    """State predicates shared by drafts and stored transactions."""

    @property
    def is_planned(self) -> bool:
        return self.amount == 0 and (self.budget_amount or 0) > 0

    @property
    def is_realized(self) -> bool:
        return self.amount > 0

    @property
    def is_expense(self) -> bool:
        return self.type is TransactionType.EXPENSE


@dataclass(frozen=True)
class TransactionDraft(_TransactionFields):
    """A transaction that has not been assigned an id yet.

    Recurrence templates are drafts with an empty ``date``; the expander
    stamps a date and a recurrence id on each copy.
    """
    type: TransactionType
    amount: float
    category: str
    date: str = ''
    description: str = ''
    budget_amount: Optional[float] = None
    is_impulse: bool = False
    allocation_type: AllocationType = AllocationType.LIVING
    recurrence_id: Optional[str] = None

    def with_id(self, txn_id: str) -> 'Transaction':
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        return Transaction(id=txn_id, **values)


@dataclass(frozen=True)
class Transaction(_TransactionFields):
    id: str
    type: TransactionType
    amount: float
    category: str
    date: str
    description: str = ''
    budget_amount: Optional[float] = None
    is_impulse: bool = False
    allocation_type: AllocationType = AllocationType.LIVING
    recurrence_id: Optional[str] = None


@dataclass(frozen=True)
class LoanDetails:
    interest_rate: str  # annual %, kept as typed by the user
    duration_months: int
    grace_period_months: int = 0
    method: RepaymentMethod = RepaymentMethod.EQUAL_PAYMENT

    @property
    def annual_rate_percent(self) -> float:
        return float(self.interest_rate or 0)


@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    category: AssetCategory
    balance: float
    color: str = ''
    loan_details: Optional[LoanDetails] = None


@dataclass(frozen=True)
class RecurrenceRule:
    """Expansion template; consumed once by ``recurrence.expand_recurrence``."""
    frequency: RecurrenceFrequency
    start_date: str
    end_date: str
    week_numbers: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        weeks = tuple(sorted({int(w) for w in (self.week_numbers or ())}))
        invalid = [w for w in weeks if not 1 <= w <= 5]
        if invalid:
            raise ValueError(f"Week numbers must be between 1 and 5, got {invalid}")
        object.__setattr__(self, 'frequency', RecurrenceFrequency.parse(self.frequency))
        object.__setattr__(self, 'week_numbers', weeks)


@dataclass(frozen=True)
class LedgerState:
    """Immutable snapshot of the two persisted collections."""
    assets: Tuple[Asset, ...] = field(default_factory=tuple)
    transactions: Tuple[Transaction, ...] = field(default_factory=tuple)


# ---------------------------------------------------------------------------
# Boundary conversion
# ---------------------------------------------------------------------------


def _as_number(value: Any, default: float = 0) -> float:
    if value is None or value == '':
        return default
    if isinstance(value, bool):
        raise ValueError(f"Expected a number, got {value!r}")
    if isinstance(value, (int, float)):
        return value
    number = float(str(value).replace(',', '').strip())
    return int(number) if number.is_integer() else number


def _optional_number(value: Any) -> Optional[float]:
    if value is None or value == '':
        return None
    return _as_number(value)


_TRUE_STRINGS = frozenset({'true', '1', 'yes'})
_FALSE_STRINGS = frozenset({'false', '0', 'no', ''})


def _as_flag(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        token = value.strip().lower()
        if token in _TRUE_STRINGS:
            return True
        if token in _FALSE_STRINGS:
            return False
    raise ValueError(f"Expected a boolean flag, got {value!r}")


def normalize_date_string(value: Any) -> str:
    """Reduce a stored date (possibly a full ISO timestamp) to ``YYYY-MM-DD``."""
    if value is None:
        raise ValueError("Missing transaction date")
    return format_date(parse_date(str(value).strip()[:10]))


def transaction_from_dict(data: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(data['id']),
        type=TransactionType.parse(data.get('type')),
        amount=_as_number(data.get('amount')),
        category=str(data.get('category') or ''),
        date=normalize_date_string(data.get('date')),
        description=str(data.get('description') or ''),
        budget_amount=_optional_number(data.get('budgetAmount')),
        is_impulse=_as_flag(data.get('isImpulse')),
        allocation_type=AllocationType.parse(data.get('allocationType') or AllocationType.LIVING),
        recurrence_id=data.get('recurrenceId') or None,
    )


def transaction_to_dict(txn: Transaction) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        'id': txn.id,
        'type': txn.type.value,
        'amount': txn.amount,
        'category': txn.category,
        'description': txn.description,
        'date': txn.date,
        'isImpulse': txn.is_impulse,
        'allocationType': txn.allocation_type.value,
    }
    if txn.budget_amount is not None:
        payload['budgetAmount'] = txn.budget_amount
    if txn.recurrence_id is not None:
        payload['recurrenceId'] = txn.recurrence_id
    return payload


def loan_details_from_dict(data: Mapping[str, Any]) -> LoanDetails:
    duration = data.get('durationMonths', data.get('duration'))
    grace = data.get('gracePeriodMonths', data.get('gracePeriod'))
    rate = str(data.get('interestRate') or '0').strip()
    try:
        float(rate)
    except ValueError:
        raise ValueError(f"Interest rate must be a number, got {rate!r}") from None
    return LoanDetails(
        interest_rate=rate,
        duration_months=int(_as_number(duration)),
        grace_period_months=int(_as_number(grace)),
        method=RepaymentMethod.parse(data.get('method') or RepaymentMethod.EQUAL_PAYMENT),
    )


def asset_from_dict(data: Mapping[str, Any]) -> Asset:
    loan = data.get('loanDetails')
    return Asset(
        id=str(data['id']),
        name=str(data.get('name') or ''),
        category=AssetCategory.parse(data.get('category')),
        balance=_as_number(data.get('balance')),
        color=str(data.get('color') or ''),
        loan_details=loan_details_from_dict(loan) if loan else None,
    )


def asset_to_dict(asset: Asset) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        'id': asset.id,
        'name': asset.name,
        'category': asset.category.value,
        'balance': asset.balance,
        'color': asset.color,
    }
    if asset.loan_details is not None:
        loan = asset.loan_details
        payload['loanDetails'] = {
            'interestRate': loan.interest_rate,
            'durationMonths': loan.duration_months,
            'gracePeriodMonths': loan.grace_period_months,
            'method': loan.method.value,
        }
    return payload
