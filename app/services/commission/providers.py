"""
Read-only providers the commission engine consumes.

The employee directory and the financial period ledger belong to other
subsystems. The engine talks to them through the two interfaces below; the
SQL implementations read the shared relational store.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.commission import (
    CommissionStructure,
    CommissionType,
    Employee,
    EmployeePerformance,
    EmployeeStatus,
    FinancialPeriod,
)
from app.schemas.commission import (
    CommissionTierConfig,
    EmployeeSnapshot,
    FinancialPeriodData,
    FlatRateStructure,
    PerformanceMetrics,
    ProfitSharingStructure,
    TargetBasedStructure,
    TieredStructure,
)


class ProviderError(Exception):
    """Raised when an upstream directory or ledger lookup fails."""


class EmployeeDirectory(ABC):
    """Employee directory as seen by the commission engine."""

    @abstractmethod
    async def get_employee_by_id(
        self, employee_id: str, period: Optional[str] = None
    ) -> Optional[EmployeeSnapshot]:
        """
        Return the employee with the performance snapshot for `period`
        (latest recorded period when omitted), or None if unknown.
        """

    @abstractmethod
    async def get_commission_eligible_employees(
        self, period: Optional[str] = None
    ) -> List[EmployeeSnapshot]:
        """Return commission-eligible employees in a stable order."""


class FinancialPeriods(ABC):
    """Financial period ledger as seen by the commission engine."""

    @abstractmethod
    async def get_financial_data_for_period(self, period: str) -> FinancialPeriodData:
        """Return organization-wide totals for `period`."""


def structure_to_config(structure: Optional[CommissionStructure]):
    """Map a structure row onto its variant config."""
    if structure is None:
        return FlatRateStructure(name="No commission", base_rate=Decimal("0"), is_active=False)

    common = {
        "id": structure.id,
        "name": structure.name,
        "base_rate": structure.base_rate,
        "is_active": structure.is_active,
        "effective_date": structure.effective_date,
        "description": structure.description,
    }
    if structure.type == CommissionType.TIERED:
        tiers = [
            CommissionTierConfig(
                id=tier.id,
                min_amount=tier.min_amount,
                max_amount=tier.max_amount,
                rate=tier.rate,
                description=tier.description,
            )
            for tier in structure.tiers
        ]
        return TieredStructure(tiers=tiers, **common)
    if structure.type == CommissionType.TARGET_BASED:
        return TargetBasedStructure(target_amount=structure.target_amount, **common)
    if structure.type == CommissionType.PROFIT_SHARING:
        return ProfitSharingStructure(**common)
    return FlatRateStructure(**common)


class SQLEmployeeDirectory(EmployeeDirectory):
    """Employee directory backed by the HR tables."""

    def __init__(self, db: AsyncSession):
        self.db = db

    def _employee_query(self):
        return select(Employee).options(
            selectinload(Employee.commission_structure).selectinload(CommissionStructure.tiers)
        )

    async def get_employee_by_id(
        self, employee_id: str, period: Optional[str] = None
    ) -> Optional[EmployeeSnapshot]:
        result = await self.db.execute(
            self._employee_query().where(Employee.id == employee_id)
        )
        employee = result.scalar_one_or_none()
        if not employee:
            return None
        return await self._to_snapshot(employee, period)

    async def get_commission_eligible_employees(
        self, period: Optional[str] = None
    ) -> List[EmployeeSnapshot]:
        result = await self.db.execute(
            self._employee_query()
            .where(
                and_(
                    Employee.commission_eligible.is_(True),
                    Employee.status == EmployeeStatus.ACTIVE,
                )
            )
            .order_by(Employee.employee_number)
        )
        employees = result.scalars().all()
        return [await self._to_snapshot(e, period) for e in employees]

    async def _to_snapshot(self, employee: Employee, period: Optional[str]) -> EmployeeSnapshot:
        status = employee.status.value if isinstance(employee.status, EmployeeStatus) else employee.status
        return EmployeeSnapshot(
            id=employee.id,
            employee_number=employee.employee_number,
            full_name=employee.full_name,
            department=employee.department,
            status=status,
            commission_eligible=bool(employee.commission_eligible),
            commission_structure=structure_to_config(employee.commission_structure),
            performance_metrics=await self._performance_metrics(employee.id, period),
        )

    async def _performance_metrics(
        self, employee_id: str, period: Optional[str]
    ) -> Optional[PerformanceMetrics]:
        query = select(EmployeePerformance).where(EmployeePerformance.employee_id == employee_id)
        if period:
            query = query.where(EmployeePerformance.period <= period)
        rows = (
            await self.db.execute(query.order_by(EmployeePerformance.period.desc()).limit(2))
        ).scalars().all()
        if not rows or (period and rows[0].period != period):
            return None

        current = rows[0]
        previous = rows[1] if len(rows) > 1 else None

        # Year to date: same calendar year, up to and including the period
        year = current.period[:4]
        ytd_result = await self.db.execute(
            select(func.coalesce(func.sum(EmployeePerformance.total_sales), 0)).where(
                and_(
                    EmployeePerformance.employee_id == employee_id,
                    EmployeePerformance.period >= f"{year}-01",
                    EmployeePerformance.period <= current.period,
                )
            )
        )

        return PerformanceMetrics(
            current_period_sales=current.total_sales,
            target_sales=current.target_sales,
            previous_period_sales=previous.total_sales if previous else Decimal("0"),
            ytd_sales=Decimal(str(ytd_result.scalar_one())),
            deals_count=current.deals_count,
        )


class SQLFinancialPeriods(FinancialPeriods):
    """Financial periods backed by the closed ledger totals."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_financial_data_for_period(self, period: str) -> FinancialPeriodData:
        row = await self.db.get(FinancialPeriod, period)
        if not row:
            raise ProviderError(f"No financial data recorded for period {period}")

        revenue = Decimal(row.total_revenue)
        expenses = Decimal(row.total_expenses)
        cogs = Decimal(row.cost_of_goods_sold)
        gross_margin = (revenue - cogs) / revenue * 100 if revenue > 0 else Decimal("0")

        return FinancialPeriodData(
            period=period,
            total_revenue=revenue,
            total_expenses=expenses,
            net_profit=revenue - expenses,
            gross_margin=gross_margin,
        )
