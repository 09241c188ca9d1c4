"""Tier allocation: split a sales amount across contiguous tier bands."""

from decimal import Decimal
from typing import List, Sequence

from app.schemas.commission import (
    CommissionTierConfig,
    TierAllocation,
    TierCommissionBreakdown,
)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


def allocate_tiers(sales_amount: Decimal, tiers: Sequence[CommissionTierConfig]) -> TierAllocation:
    """
    Price each band of `sales_amount` at its own tier rate.

    Tiers are walked in the given (ascending) order and must already be
    contiguous and non-overlapping; malformed tiers are rejected by the
    structure validator before they reach this point.
    """
    total_commission = ZERO
    breakdown: List[TierCommissionBreakdown] = []
    remaining_sales = sales_amount

    for level, tier in enumerate(tiers, start=1):
        if remaining_sales <= 0 or sales_amount <= tier.min_amount:
            break

        applicable_amount = min(
            sales_amount - tier.min_amount,
            tier.max_amount - tier.min_amount,
            remaining_sales,
        )
        if applicable_amount <= 0:
            continue

        commission_amount = applicable_amount * tier.rate / HUNDRED
        total_commission += commission_amount
        breakdown.append(
            TierCommissionBreakdown(
                tier_level=level,
                min_amount=tier.min_amount,
                max_amount=tier.max_amount,
                rate=tier.rate,
                applicable_amount=applicable_amount,
                commission_amount=commission_amount,
            )
        )
        remaining_sales -= applicable_amount

    return TierAllocation(total_commission=total_commission, breakdown=breakdown)
