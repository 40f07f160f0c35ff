"""Asset summaries: net worth, per-category totals and loan payments."""

from __future__ import annotations

import math
from typing import Dict, Iterable, Optional

from .amortization import amortization_payment
from .models import Asset, AssetCategory


def net_worth(assets: Iterable[Asset]) -> float:
    """Sum of non-loan balances minus the sum of loan balances.

    Balances are stored as magnitudes; whether a balance is owed is decided
    by the LOAN category only.
    """
    return math.fsum(
        -asset.balance if asset.category is AssetCategory.LOAN else asset.balance
        for asset in assets
    )


def totals_by_category(assets: Iterable[Asset]) -> Dict[AssetCategory, float]:
    totals = {category: 0.0 for category in AssetCategory}
    for asset in assets:
        totals[asset.category] += asset.balance
    return totals


def loan_payment(asset: Asset) -> Optional[float]:
    """First-month payment for a loan asset, or None when not applicable."""
    details = asset.loan_details
    if asset.category is not AssetCategory.LOAN or details is None:
        return None
    if details.duration_months <= 0:
        return None
    return amortization_payment(
        asset.balance,
        details.annual_rate_percent,
        details.duration_months,
        details.method,
    )
