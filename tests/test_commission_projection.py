"""Tests for what-if commission projections."""

from decimal import Decimal

from factories import (
    PERIOD,
    build_calculator,
    financial_period,
    flat,
    make_employee,
    profit_sharing,
    target_based,
    tiered,
)


async def test_projection_is_tagged_and_uses_projected_sales():
    employee = make_employee("e1", flat("5"), sales="10000")
    calculator = build_calculator([employee])

    result = await calculator.project_commission("e1", PERIOD, Decimal("20000"))

    assert result.period == "2025-06-projected"
    assert result.base_commission == Decimal("1000")
    assert result.final_commission == Decimal("1000")
    assert result.calculation_details.sales_amount == Decimal("20000")


async def test_projection_leaves_recorded_performance_untouched():
    employee = make_employee("e1", flat("5"), sales="10000", target="12000")
    calculator = build_calculator([employee])

    await calculator.project_commission("e1", PERIOD, Decimal("50000"))

    assert employee.performance_metrics.current_period_sales == Decimal("10000")
    assert employee.performance_metrics.achievement_percentage == Decimal("10000") / Decimal("12000") * 100


async def test_projection_recomputes_achievement_against_real_target():
    employee = make_employee("e1", target_based("4"), sales="3000", target="10000")
    calculator = build_calculator([employee])

    result = await calculator.project_commission("e1", PERIOD, 12000)

    assert result.base_commission == Decimal("520")
    assert result.calculation_details.achievement_percentage == Decimal("120")
    assert result.calculation_details.target_amount == Decimal("10000")


async def test_projection_never_includes_adjustments():
    employee = make_employee("e1", tiered(), sales="100")
    result = await build_calculator([employee]).project_commission("e1", PERIOD, Decimal("6000"))

    assert result.bonuses == Decimal("0")
    assert result.deductions == Decimal("0")
    assert result.adjustments == Decimal("0")
    assert result.final_commission == result.base_commission == Decimal("470")
    assert len(result.calculation_details.tier_breakdown) == 3


async def test_profit_sharing_projection_reads_current_period():
    calculator = build_calculator(
        [make_employee("e1", profit_sharing("2"))],
        periods=[financial_period(net_profit="10000")],
    )

    result = await calculator.project_commission("e1", PERIOD, Decimal("1"))

    assert result.base_commission == Decimal("200")
    assert calculator.financials.requested == [PERIOD]


async def test_unknown_employee_projects_zero():
    result = await build_calculator([]).project_commission("ghost", PERIOD, Decimal("5000"))

    assert result.period == "2025-06-projected"
    assert result.final_commission == Decimal("0")


async def test_failed_ledger_lookup_projects_zero():
    calculator = build_calculator([make_employee("e1", profit_sharing("2"))], periods=[])

    outcome = await calculator.evaluate_projection("e1", PERIOD, Decimal("5000"))

    assert outcome.failed
    assert outcome.result.period == "2025-06-projected"
    assert outcome.result.final_commission == Decimal("0")
