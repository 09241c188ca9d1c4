"""
Commission calculator - converts an employee's period performance into a
commission payout under the employee's commission structure.

Four structure variants are supported:

    flat-rate       sales × base_rate
    tiered          each sales band priced at its tier's rate
    target-based    full rate up to target, 1.5× rate on the excess;
                    below target the rate is prorated by achievement
    profit-sharing  organization net profit × base_rate, never negative

    final = max(0, base + bonuses - deductions + adjustments)

Missing or ineligible employees and inactive structures are owed nothing.
Upstream lookup failures are recorded on the internal CommissionOutcome and
surface to callers as the same zero result.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Union

from app.schemas.commission import (
    CalculationDetails,
    CommissionCalculationResult,
    EmployeeSnapshot,
    FinancialPeriodData,
    FlatRateStructure,
    PerformanceMetrics,
    ProfitSharingStructure,
    TargetBasedStructure,
    TierCommissionBreakdown,
    TieredStructure,
)
from app.services.commission.providers import (
    EmployeeDirectory,
    FinancialPeriods,
    ProviderError,
)
from app.services.commission.tiers import allocate_tiers

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")
ONE = Decimal("1")

# Sales above target earn 1.5× the base rate
EXCESS_RATE_MULTIPLIER = Decimal("1.5")

PROJECTED_PERIOD_SUFFIX = "-projected"

Amount = Union[Decimal, int, float, str]


def to_decimal(value: Amount) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def flat_rate_commission(sales_amount: Decimal, base_rate: Decimal) -> Decimal:
    return sales_amount * base_rate / HUNDRED


def target_based_commission(metrics: PerformanceMetrics, base_rate: Decimal) -> Decimal:
    """Commission against a sales target.

    At or above target the target itself is paid at the base rate and the
    excess at EXCESS_RATE_MULTIPLIER × base rate. Below target the effective
    rate shrinks linearly with achievement.
    """
    if metrics.target_sales <= 0:
        return ZERO

    achievement_ratio = metrics.current_period_sales / metrics.target_sales

    if achievement_ratio >= ONE:
        commission = metrics.target_sales * base_rate / HUNDRED
        excess_sales = metrics.current_period_sales - metrics.target_sales
        if excess_sales > 0:
            commission += excess_sales * (base_rate * EXCESS_RATE_MULTIPLIER) / HUNDRED
        return commission

    partial_rate = base_rate * achievement_ratio
    return metrics.current_period_sales * partial_rate / HUNDRED


def profit_sharing_commission(net_profit: Decimal, share_percentage: Decimal) -> Decimal:
    return max(ZERO, net_profit * share_percentage / HUNDRED)


@dataclass(frozen=True)
class BaseCommission:
    amount: Decimal
    tier_breakdown: Optional[List[TierCommissionBreakdown]] = None


@dataclass(frozen=True)
class CommissionOutcome:
    """A calculation result, plus the upstream error if one forced it to zero."""

    result: CommissionCalculationResult
    error: Optional[ProviderError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class CommissionCalculator:
    """
    Calculates commissions from the employee directory and financial ledger.

    Usage:
        calculator = CommissionCalculator(directory, financials)
        result = await calculator.calculate("emp-1", "2025-06", bonuses=Decimal("50"))
    """

    def __init__(self, directory: EmployeeDirectory, financials: FinancialPeriods):
        self.directory = directory
        self.financials = financials

    # =========================================================================
    # Period calculation
    # =========================================================================

    async def calculate(
        self,
        employee_id: str,
        period: str,
        bonuses: Amount = ZERO,
        deductions: Amount = ZERO,
        adjustments: Amount = ZERO,
    ) -> CommissionCalculationResult:
        """Calculate the payable commission for one employee and period."""
        outcome = await self.evaluate(employee_id, period, bonuses, deductions, adjustments)
        if outcome.failed:
            logger.warning(
                f"[COMMISSION] Upstream data unavailable for employee {employee_id} "
                f"period {period}, no commission owed: {outcome.error}",
                exc_info=outcome.error,
            )
        return outcome.result

    async def evaluate(
        self,
        employee_id: str,
        period: str,
        bonuses: Amount = ZERO,
        deductions: Amount = ZERO,
        adjustments: Amount = ZERO,
    ) -> CommissionOutcome:
        """Like calculate(), but keeps upstream failures distinguishable."""
        try:
            employee = await self._get_employee(employee_id, period)
        except ProviderError as exc:
            return CommissionOutcome(CommissionCalculationResult.zero(employee_id, period), exc)

        if employee is None:
            logger.debug(f"[COMMISSION] Employee {employee_id} not found")
            return CommissionOutcome(CommissionCalculationResult.zero(employee_id, period))

        return await self.evaluate_employee(employee, period, bonuses, deductions, adjustments)

    async def evaluate_employee(
        self,
        employee: EmployeeSnapshot,
        period: str,
        bonuses: Amount = ZERO,
        deductions: Amount = ZERO,
        adjustments: Amount = ZERO,
    ) -> CommissionOutcome:
        """Calculate for an employee snapshot already read from the directory."""
        structure = employee.commission_structure
        if not employee.commission_eligible or not structure.is_active:
            logger.debug(f"[COMMISSION] Employee {employee.id} not eligible for {period}")
            return CommissionOutcome(CommissionCalculationResult.zero(employee.id, period))

        metrics = employee.performance_metrics or PerformanceMetrics()
        try:
            base = await self._base_commission(structure, metrics, period)
        except ProviderError as exc:
            return CommissionOutcome(CommissionCalculationResult.zero(employee.id, period), exc)

        bonuses = to_decimal(bonuses)
        deductions = to_decimal(deductions)
        adjustments = to_decimal(adjustments)
        final_commission = max(ZERO, base.amount + bonuses - deductions + adjustments)

        result = CommissionCalculationResult(
            employee_id=employee.id,
            period=period,
            base_commission=base.amount,
            bonuses=bonuses,
            deductions=deductions,
            adjustments=adjustments,
            final_commission=final_commission,
            calculation_details=self._details(metrics, structure.base_rate, base),
        )
        return CommissionOutcome(result)

    # =========================================================================
    # Projections
    # =========================================================================

    async def project_commission(
        self,
        employee_id: str,
        current_period: str,
        projected_sales: Amount,
    ) -> CommissionCalculationResult:
        """Estimate base commission if the employee closed `projected_sales` this period."""
        outcome = await self.evaluate_projection(employee_id, current_period, projected_sales)
        if outcome.failed:
            logger.warning(
                f"[COMMISSION] Projection for employee {employee_id} period {current_period} "
                f"fell back to zero: {outcome.error}",
                exc_info=outcome.error,
            )
        return outcome.result

    async def evaluate_projection(
        self,
        employee_id: str,
        current_period: str,
        projected_sales: Amount,
    ) -> CommissionOutcome:
        period = f"{current_period}{PROJECTED_PERIOD_SUFFIX}"
        try:
            employee = await self._get_employee(employee_id, current_period)
        except ProviderError as exc:
            return CommissionOutcome(CommissionCalculationResult.zero(employee_id, period), exc)

        if employee is None:
            return CommissionOutcome(CommissionCalculationResult.zero(employee_id, period))

        # A copy: the directory's performance record is never touched
        metrics = (employee.performance_metrics or PerformanceMetrics()).model_copy(
            update={"current_period_sales": to_decimal(projected_sales)}
        )
        structure = employee.commission_structure
        try:
            base = await self._base_commission(structure, metrics, current_period)
        except ProviderError as exc:
            return CommissionOutcome(CommissionCalculationResult.zero(employee_id, period), exc)

        result = CommissionCalculationResult(
            employee_id=employee_id,
            period=period,
            base_commission=base.amount,
            final_commission=max(ZERO, base.amount),
            calculation_details=self._details(metrics, structure.base_rate, base),
        )
        return CommissionOutcome(result)

    # =========================================================================
    # Dispatch
    # =========================================================================

    async def _base_commission(
        self,
        structure,
        metrics: PerformanceMetrics,
        period: str,
    ) -> BaseCommission:
        sales = metrics.current_period_sales

        match structure:
            case FlatRateStructure():
                return BaseCommission(flat_rate_commission(sales, structure.base_rate))
            case TieredStructure():
                allocation = allocate_tiers(sales, structure.tiers)
                return BaseCommission(allocation.total_commission, list(allocation.breakdown))
            case TargetBasedStructure():
                return BaseCommission(target_based_commission(metrics, structure.base_rate))
            case ProfitSharingStructure():
                financial_data = await self._get_financial_data(period)
                return BaseCommission(
                    profit_sharing_commission(financial_data.net_profit, structure.base_rate)
                )
            case _:
                raise TypeError(f"Unsupported commission structure: {type(structure).__name__}")

    def _details(
        self,
        metrics: PerformanceMetrics,
        commission_rate: Decimal,
        base: BaseCommission,
    ) -> CalculationDetails:
        return CalculationDetails(
            sales_amount=metrics.current_period_sales,
            target_amount=metrics.target_sales,
            achievement_percentage=metrics.achievement_percentage,
            commission_rate=commission_rate,
            tier_breakdown=base.tier_breakdown,
        )

    # =========================================================================
    # Provider boundary
    # =========================================================================

    async def _get_employee(self, employee_id: str, period: str) -> Optional[EmployeeSnapshot]:
        try:
            return await self.directory.get_employee_by_id(employee_id, period)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(f"Employee lookup failed for {employee_id}: {exc}") from exc

    async def _get_financial_data(self, period: str) -> FinancialPeriodData:
        try:
            return await self.financials.get_financial_data_for_period(period)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(f"Financial data lookup failed for {period}: {exc}") from exc
