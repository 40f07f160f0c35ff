from datetime import date

import pytest

from household_ledger.calendar_utils import (
    add_months,
    days_in_month,
    format_date,
    month_key,
    nth_weekday_of_month,
    parse_date,
    week_of_month,
    weekday_of_first,
    weeks_in_month,
)


def test_parse_and_format_are_local_dates():
    parsed = parse_date('2024-02-29')

    assert parsed == date(2024, 2, 29)
    assert format_date(parsed) == '2024-02-29'
    assert parse_date(parsed) is parsed


@pytest.mark.parametrize('value', ['2024/01/01', '2023-02-29', 'yesterday', '2024-1'])
def test_parse_date_rejects_malformed_values(value):
    with pytest.raises(ValueError):
        parse_date(value)


def test_days_in_month_handles_leap_years():
    assert days_in_month(2024, 2) == 29
    assert days_in_month(2023, 2) == 28
    assert days_in_month(2024, 4) == 30


def test_weekday_of_first_is_sunday_based():
    # 2024-09-01 is a Sunday, 2024-03-01 a Friday, 2024-01-01 a Monday
    assert weekday_of_first(2024, 9) == 0
    assert weekday_of_first(2024, 3) == 5
    assert weekday_of_first(2024, 1) == 1


def test_nth_weekday_counts_occurrences():
    assert nth_weekday_of_month(date(2024, 1, 1)) == 1
    assert nth_weekday_of_month(date(2024, 1, 15)) == 3
    assert nth_weekday_of_month(date(2024, 1, 29)) == 5


def test_week_of_month_follows_the_calendar_grid():
    # March 2024 starts on a Friday: the 1st and 2nd share the first row
    assert week_of_month(date(2024, 3, 1)) == 1
    assert week_of_month(date(2024, 3, 2)) == 1
    assert week_of_month(date(2024, 3, 3)) == 2
    assert week_of_month(date(2024, 3, 31)) == 6
    # differs from the weekday-occurrence count
    assert nth_weekday_of_month(date(2024, 3, 3)) == 1


def test_weeks_in_month():
    assert weeks_in_month(2024, 3) == 6
    assert weeks_in_month(2015, 2) == 4
    assert weeks_in_month(2024, 1) == 5


def test_month_key_accepts_date_or_pair():
    assert month_key(date(2024, 3, 5)) == '2024-03'
    assert month_key(2024, 11) == '2024-11'
    with pytest.raises(ValueError):
        month_key(2024)


def test_add_months_clamps_to_month_end():
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)
    assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)
    assert add_months(date(2024, 1, 31), 2) == date(2024, 3, 31)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
