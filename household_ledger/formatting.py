"""Formatting utilities for won amounts."""

from __future__ import annotations

from typing import Union

_KOREAN_UNITS = ['', '만', '억', '조', '경']
_UNIT_SIZE = 10000


def format_won(amount: Union[float, int], include_unit: bool = False) -> str:
    """Format an amount with thousands separators.

    Example:
        >>> format_won(1234567)
        '1,234,567'
        >>> format_won(-30000, include_unit=True)
        '-30,000원'
    """
    if float(amount).is_integer():
        formatted = f"{int(amount):,}"
    else:
        formatted = f"{amount:,.2f}"
    return f"{formatted}원" if include_unit else formatted


def number_to_korean(amount: Union[float, int]) -> str:
    """Spell an amount with Korean myriad units.

    Example:
        >>> number_to_korean(12345678)
        '1234만5678원'
        >>> number_to_korean(0)
        ''
    """
    remaining = int(abs(amount))
    if remaining == 0:
        return ''

    result = ''
    for unit in _KOREAN_UNITS:
        chunk = remaining % _UNIT_SIZE
        remaining //= _UNIT_SIZE
        if chunk > 0:
            result = f"{chunk}{unit}{result}"
        if remaining == 0:
            break
    return result + '원'
