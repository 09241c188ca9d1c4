"""Tests for tier allocation."""

from decimal import Decimal

import pytest

from app.services.commission import allocate_tiers

from factories import STANDARD_TIERS, tier


def test_sales_spanning_three_tiers():
    allocation = allocate_tiers(Decimal("6000"), STANDARD_TIERS)

    assert [b.commission_amount for b in allocation.breakdown] == [
        Decimal("50"),
        Decimal("320"),
        Decimal("100"),
    ]
    assert [b.applicable_amount for b in allocation.breakdown] == [
        Decimal("1000"),
        Decimal("4000"),
        Decimal("1000"),
    ]
    assert [b.tier_level for b in allocation.breakdown] == [1, 2, 3]
    assert allocation.total_commission == Decimal("470")


def test_empty_tiers_yield_nothing():
    allocation = allocate_tiers(Decimal("6000"), [])
    assert allocation.total_commission == Decimal("0")
    assert allocation.breakdown == []


def test_zero_sales_touch_no_tier():
    allocation = allocate_tiers(Decimal("0"), STANDARD_TIERS)
    assert allocation.breakdown == []
    assert allocation.total_commission == Decimal("0")


def test_sales_inside_first_tier():
    allocation = allocate_tiers(Decimal("600"), STANDARD_TIERS)
    assert len(allocation.breakdown) == 1
    assert allocation.breakdown[0].applicable_amount == Decimal("600")
    assert allocation.total_commission == Decimal("30")


def test_sales_on_tier_boundary_stop_at_that_tier():
    allocation = allocate_tiers(Decimal("1000"), STANDARD_TIERS)
    assert [b.tier_level for b in allocation.breakdown] == [1]
    assert allocation.total_commission == Decimal("50")


def test_sales_beyond_last_tier_are_capped():
    tiers = [tier(0, 1000, 5), tier(1000, 5000, 8)]
    allocation = allocate_tiers(Decimal("8000"), tiers)

    applied = sum(b.applicable_amount for b in allocation.breakdown)
    assert applied == Decimal("5000")
    assert allocation.total_commission == Decimal("370")


@pytest.mark.parametrize("sales", ["0.01", "999.99", "1000", "1000.01", "4999", "5000", "123456.78"])
def test_partition_is_complete_and_priced_per_band(sales):
    sales = Decimal(sales)
    allocation = allocate_tiers(sales, STANDARD_TIERS)

    applied = sum((b.applicable_amount for b in allocation.breakdown), Decimal("0"))
    assert applied == min(sales, STANDARD_TIERS[-1].max_amount)
    for entry in allocation.breakdown:
        assert entry.commission_amount == entry.applicable_amount * entry.rate / 100
    assert allocation.total_commission == sum(
        (b.commission_amount for b in allocation.breakdown), Decimal("0")
    )
