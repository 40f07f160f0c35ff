"""Expansion of recurring budget plans into dated ledger entries."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Dict, Iterator, Optional, Tuple

from . import ids
from .calendar_utils import add_months, format_date, nth_weekday_of_month, parse_date
from .config import MAX_OCCURRENCES
from .logging_setup import get_logger
from .models import RecurrenceFrequency, RecurrenceRule, TransactionDraft

logger = get_logger(__name__)

DAY_STEPS: Dict[RecurrenceFrequency, int] = {
    RecurrenceFrequency.WEEKLY: 7,
    RecurrenceFrequency.BIWEEKLY: 14,
}
MONTH_STEPS: Dict[RecurrenceFrequency, int] = {
    RecurrenceFrequency.MONTHLY: 1,
    RecurrenceFrequency.QUARTERLY: 3,
    RecurrenceFrequency.SEMIANNUAL: 6,
    RecurrenceFrequency.ANNUAL: 12,
}


@dataclass(frozen=True)
class RecurrenceExpansion:
    """Drafts generated from one rule, sharing ``recurrence_id``.

    ``truncated`` is set when the occurrence cap stopped generation while
    further occurrences were still due before the rule's end date.
    """
    transactions: Tuple[TransactionDraft, ...]
    recurrence_id: str
    truncated: bool = False

    def __len__(self) -> int:
        return len(self.transactions)

    def __iter__(self) -> Iterator[TransactionDraft]:
        return iter(self.transactions)

    def __getitem__(self, index):
        return self.transactions[index]

    @property
    def dates(self) -> Tuple[str, ...]:
        return tuple(draft.date for draft in self.transactions)


def _uses_week_numbers(rule: RecurrenceRule) -> bool:
    return rule.frequency is RecurrenceFrequency.MONTHLY and bool(rule.week_numbers)


def _should_emit(rule: RecurrenceRule, cursor: date) -> bool:
    if _uses_week_numbers(rule):
        return nth_weekday_of_month(cursor) in rule.week_numbers
    return True


def _cursor_at(rule: RecurrenceRule, start: date, step: int) -> date:
    # Month-based steps are measured from the start date so a 31st start
    # clamps in short months and returns to the 31st afterwards.
    if _uses_week_numbers(rule):
        return start + timedelta(days=7 * step)
    if rule.frequency in DAY_STEPS:
        return start + timedelta(days=DAY_STEPS[rule.frequency] * step)
    return add_months(start, MONTH_STEPS[rule.frequency] * step)


def expand_recurrence(
    template: TransactionDraft,
    rule: RecurrenceRule,
    *,
    id_provider: Optional[ids.IdProvider] = None,
    max_occurrences: int = MAX_OCCURRENCES,
) -> RecurrenceExpansion:
    """Generate one draft per occurrence of ``rule``.

    Args:
        template: Draft copied for every occurrence; its date and
            recurrence id are overwritten.
        rule: Frequency, inclusive date bounds and optional week numbers.
        id_provider: Source of the shared recurrence id (defaults to UUID4).
        max_occurrences: Hard cap on emitted occurrences.

    Returns:
        RecurrenceExpansion with drafts in date order.

    Example:
        >>> rule = RecurrenceRule(RecurrenceFrequency.WEEKLY, '2024-01-01', '2024-01-22')
        >>> expand_recurrence(template, rule).dates
        ('2024-01-01', '2024-01-08', '2024-01-15', '2024-01-22')
    """
    provider = id_provider or ids.default_id_provider
    recurrence_id = provider()
    start = parse_date(rule.start_date)
    end = parse_date(rule.end_date)

    drafts = []
    step = 0
    cursor = start
    while cursor <= end and len(drafts) < max_occurrences:
        if _should_emit(rule, cursor):
            drafts.append(replace(template, date=format_date(cursor), recurrence_id=recurrence_id))
        step += 1
        cursor = _cursor_at(rule, start, step)

    truncated = False
    if len(drafts) >= max_occurrences:
        while cursor <= end:
            if _should_emit(rule, cursor):
                truncated = True
                break
            step += 1
            cursor = _cursor_at(rule, start, step)

    if truncated:
        logger.warning(
            "Recurrence %s stopped at %d occurrences before reaching %s",
            recurrence_id, len(drafts), rule.end_date,
        )
    logger.debug(
        "Expanded %s rule %s..%s into %d entries",
        rule.frequency.value, rule.start_date, rule.end_date, len(drafts),
    )
    return RecurrenceExpansion(tuple(drafts), recurrence_id, truncated)
