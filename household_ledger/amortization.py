"""Loan repayment calculations.

``amortization_payment`` returns the first-period payment estimate shown next
to a loan asset. ``amortization_schedule`` expands the same methods into a
month-by-month table. The grace period stored on a loan is not applied by
either function.
"""

from __future__ import annotations

from typing import Union

import numpy as np
import pandas as pd

from .models import RepaymentMethod


def monthly_rate(annual_rate_percent: float) -> float:
    return annual_rate_percent / 100 / 12


def _check_terms(principal: float, term_months: int) -> None:
    if term_months <= 0:
        raise ValueError(f"term_months must be positive, got {term_months}")
    if principal < 0:
        raise ValueError(f"principal must not be negative, got {principal}")


def amortization_payment(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    method: Union[RepaymentMethod, str] = RepaymentMethod.EQUAL_PAYMENT,
) -> float:
    """Payment due in the first month of the loan.

    Args:
        principal: Outstanding amount
        annual_rate_percent: Nominal annual interest rate in percent (6 = 6%)
        term_months: Repayment term in months
        method: EQUAL_PAYMENT (annuity), EQUAL_PRINCIPAL or BULLET

    Returns:
        EQUAL_PAYMENT: the constant annuity payment (P/n at 0%)
        EQUAL_PRINCIPAL: P/n plus interest on the full balance
        BULLET: interest only

    Example:
        >>> round(amortization_payment(12_000_000, 6, 12))
        1032797
    """
    _check_terms(principal, term_months)
    method = RepaymentMethod.parse(method)
    rate = monthly_rate(annual_rate_percent)

    if method is RepaymentMethod.EQUAL_PAYMENT:
        if rate == 0:
            return principal / term_months
        growth = (1 + rate) ** term_months
        return principal * rate * growth / (growth - 1)
    if method is RepaymentMethod.EQUAL_PRINCIPAL:
        return principal / term_months + principal * rate
    return principal * rate


def amortization_schedule(
    principal: float,
    annual_rate_percent: float,
    term_months: int,
    method: Union[RepaymentMethod, str] = RepaymentMethod.EQUAL_PAYMENT,
) -> pd.DataFrame:
    """Month-by-month repayment table.

    Returns:
        DataFrame with columns: Month, Payment, Principal, Interest, Balance
        (balance after the month's payment)
    """
    _check_terms(principal, term_months)
    method = RepaymentMethod.parse(method)
    rate = monthly_rate(annual_rate_percent)
    months = np.arange(1, term_months + 1)

    if method is RepaymentMethod.EQUAL_PAYMENT:
        payment = amortization_payment(principal, annual_rate_percent, term_months, method)
        if rate == 0:
            opening = principal - payment * (months - 1)
        else:
            growth = (1 + rate) ** (months - 1)
            opening = principal * growth - payment * (growth - 1) / rate
        interest = opening * rate
        principal_part = payment - interest
    elif method is RepaymentMethod.EQUAL_PRINCIPAL:
        principal_part = np.full(term_months, principal / term_months)
        opening = principal - principal_part * (months - 1)
        interest = opening * rate
    else:
        opening = np.full(term_months, float(principal))
        interest = opening * rate
        principal_part = np.zeros(term_months)
        principal_part[-1] = principal

    balance = opening - principal_part
    balance = np.where(np.isclose(balance, 0.0, atol=1e-6 * max(principal, 1.0)), 0.0, balance)
    return pd.DataFrame({
        'Month': months,
        'Payment': principal_part + interest,
        'Principal': principal_part,
        'Interest': interest,
        'Balance': balance,
    })
