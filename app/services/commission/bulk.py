"""Organization-wide commission runs and the period's commission pool."""

import asyncio
import logging
from decimal import Decimal
from typing import List, Optional

from app.core.config import get_settings
from app.schemas.commission import (
    BulkCommissionCalculation,
    BulkCommissionSummary,
    CommissionCalculationResult,
    CommissionPool,
    EmployeeSnapshot,
    TopPerformer,
)
from app.services.commission.calculator import (
    CommissionCalculator,
    CommissionOutcome,
    to_decimal,
)

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")


class BulkCommissionCalculator:
    """Runs the commission calculator over every commission-eligible employee."""

    def __init__(
        self,
        calculator: CommissionCalculator,
        top_performers_limit: Optional[int] = None,
        concurrency: Optional[int] = None,
    ):
        settings = get_settings()
        self.calculator = calculator
        self.top_performers_limit = (
            top_performers_limit
            if top_performers_limit is not None
            else settings.commission_top_performers_limit
        )
        self.concurrency = max(1, concurrency or settings.commission_bulk_concurrency)

    async def calculate_bulk(self, period: str) -> BulkCommissionCalculation:
        """
        Calculate every eligible employee's commission for `period`.

        Results keep the directory's eligibility order. If the eligible
        employees cannot be listed, an empty run is returned rather than a
        partial one.
        """
        try:
            employees = await self.calculator.directory.get_commission_eligible_employees(period)
        except Exception as exc:
            logger.error(
                f"[BULK] Could not list commission-eligible employees for {period}: {exc}",
                exc_info=exc,
            )
            return BulkCommissionCalculation.empty(period)

        employee_results = await self._calculate_all(employees, period)

        total_commissions = sum((r.final_commission for r in employee_results), ZERO)
        total_sales = sum((r.calculation_details.sales_amount for r in employee_results), ZERO)
        average_rate = total_commissions / total_sales * HUNDRED if total_sales > 0 else ZERO

        # sorted() is stable, so ties keep eligibility order
        ranked = sorted(employee_results, key=lambda r: r.final_commission, reverse=True)
        top_performers = [
            TopPerformer(employee_id=r.employee_id, amount=r.final_commission)
            for r in ranked[: self.top_performers_limit]
        ]

        logger.info(
            f"[BULK] {period}: {len(employees)} employees, "
            f"total commissions {total_commissions}"
        )

        return BulkCommissionCalculation(
            period=period,
            total_employees=len(employees),
            total_commissions=total_commissions,
            employee_results=employee_results,
            summary=BulkCommissionSummary(
                total_sales=total_sales,
                average_commission_rate=average_rate,
                top_performers=top_performers,
            ),
        )

    async def _calculate_all(
        self, employees: List[EmployeeSnapshot], period: str
    ) -> List[CommissionCalculationResult]:
        semaphore = asyncio.Semaphore(self.concurrency)

        async def _one(employee: EmployeeSnapshot) -> CommissionOutcome:
            async with semaphore:
                return await self.calculator.evaluate_employee(employee, period)

        outcomes = await asyncio.gather(*(_one(e) for e in employees))

        for employee, outcome in zip(employees, outcomes):
            if outcome.failed:
                logger.warning(
                    f"[BULK] Employee {employee.id} fell back to zero for {period}: {outcome.error}"
                )
        return [outcome.result for outcome in outcomes]

    async def calculate_commission_pool(
        self,
        period: str,
        pool_percentage: Optional[Decimal] = None,
    ) -> CommissionPool:
        """
        Size the period's commission pool from net profit and compare it with
        what the bulk run allocates.
        """
        if pool_percentage is None:
            pool_percentage = get_settings().commission_pool_percentage
        pool_percentage = to_decimal(pool_percentage)

        try:
            financial_data = await self.calculator.financials.get_financial_data_for_period(period)
        except Exception as exc:
            logger.warning(f"[BULK] Commission pool for {period} unavailable: {exc}", exc_info=exc)
            return CommissionPool(period=period)

        total_pool = max(ZERO, financial_data.net_profit * pool_percentage / HUNDRED)
        allocated = (await self.calculate_bulk(period)).total_commissions
        revenue = financial_data.total_revenue
        actual_rate = allocated / revenue * HUNDRED if revenue > 0 else ZERO

        return CommissionPool(
            period=period,
            total_pool=total_pool,
            allocated_amount=allocated,
            remaining_pool=max(ZERO, total_pool - allocated),
            pool_percentage=pool_percentage,
            target_commission_rate=pool_percentage,
            actual_commission_rate=actual_rate,
        )
