"""Commission engine schemas.

Structure configs carry types only, no range constraints: a structure with
a 150% rate must still parse so the validator can report every defect.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

ZERO = Decimal("0")
HUNDRED = Decimal("100")


# Commission structure configs
class CommissionTierConfig(BaseModel):
    id: Optional[str] = None
    min_amount: Decimal
    max_amount: Decimal
    rate: Decimal
    description: Optional[str] = None


class _StructureBase(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[str] = None
    name: str = ""
    base_rate: Decimal = ZERO
    is_active: bool = True
    effective_date: Optional[date] = None
    description: Optional[str] = None


class FlatRateStructure(_StructureBase):
    type: Literal["flat-rate"] = "flat-rate"


class TieredStructure(_StructureBase):
    type: Literal["tiered"] = "tiered"
    tiers: List[CommissionTierConfig] = Field(default_factory=list)


class TargetBasedStructure(_StructureBase):
    type: Literal["target-based"] = "target-based"
    target_amount: Optional[Decimal] = None


class ProfitSharingStructure(_StructureBase):
    type: Literal["profit-sharing"] = "profit-sharing"


CommissionStructureConfig = Annotated[
    Union[FlatRateStructure, TieredStructure, TargetBasedStructure, ProfitSharingStructure],
    Field(discriminator="type"),
]


# Provider snapshots
class PerformanceMetrics(BaseModel):
    current_period_sales: Decimal = ZERO
    target_sales: Decimal = ZERO
    previous_period_sales: Decimal = ZERO
    ytd_sales: Decimal = ZERO
    deals_count: int = 0

    @computed_field
    @property
    def achievement_percentage(self) -> Decimal:
        if self.target_sales > 0:
            return self.current_period_sales / self.target_sales * HUNDRED
        return ZERO


class EmployeeSnapshot(BaseModel):
    id: str
    employee_number: Optional[str] = None
    full_name: str = ""
    department: Optional[str] = None
    status: str = "active"
    commission_eligible: bool = False
    commission_structure: CommissionStructureConfig
    performance_metrics: Optional[PerformanceMetrics] = None


class FinancialPeriodData(BaseModel):
    period: str
    total_revenue: Decimal = ZERO
    total_expenses: Decimal = ZERO
    net_profit: Decimal = ZERO
    gross_margin: Decimal = ZERO


# Results
class TierCommissionBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier_level: int
    min_amount: Decimal
    max_amount: Decimal
    rate: Decimal
    applicable_amount: Decimal
    commission_amount: Decimal


class TierAllocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_commission: Decimal = ZERO
    breakdown: List[TierCommissionBreakdown] = Field(default_factory=list)


class CalculationDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    sales_amount: Decimal = ZERO
    target_amount: Decimal = ZERO
    achievement_percentage: Decimal = ZERO
    commission_rate: Decimal = ZERO
    tier_breakdown: Optional[List[TierCommissionBreakdown]] = None


class CommissionCalculationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    employee_id: str
    period: str
    base_commission: Decimal = ZERO
    bonuses: Decimal = ZERO
    deductions: Decimal = ZERO
    adjustments: Decimal = ZERO
    final_commission: Decimal = ZERO
    calculation_details: CalculationDetails = Field(default_factory=CalculationDetails)

    @classmethod
    def zero(cls, employee_id: str, period: str) -> "CommissionCalculationResult":
        """Result owed to an ineligible employee, or when upstream data is unavailable."""
        return cls(employee_id=employee_id, period=period)


class TopPerformer(BaseModel):
    model_config = ConfigDict(frozen=True)

    employee_id: str
    amount: Decimal


class BulkCommissionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_sales: Decimal = ZERO
    average_commission_rate: Decimal = ZERO
    top_performers: List[TopPerformer] = Field(default_factory=list)


class BulkCommissionCalculation(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str
    total_employees: int = 0
    total_commissions: Decimal = ZERO
    employee_results: List[CommissionCalculationResult] = Field(default_factory=list)
    summary: BulkCommissionSummary = Field(default_factory=BulkCommissionSummary)

    @classmethod
    def empty(cls, period: str) -> "BulkCommissionCalculation":
        return cls(period=period)


class CommissionPool(BaseModel):
    model_config = ConfigDict(frozen=True)

    period: str
    total_pool: Decimal = ZERO
    allocated_amount: Decimal = ZERO
    remaining_pool: Decimal = ZERO
    pool_percentage: Decimal = ZERO
    target_commission_rate: Decimal = ZERO
    actual_commission_rate: Decimal = ZERO


class StructureValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    valid: bool
    errors: List[str] = Field(default_factory=list)


# Requests
class CommissionCalculateRequest(BaseModel):
    employee_id: str
    period: str
    bonuses: Decimal = ZERO
    deductions: Decimal = ZERO
    adjustments: Decimal = ZERO


class CommissionProjectionRequest(BaseModel):
    employee_id: str
    current_period: str
    projected_sales: Decimal


class BulkCommissionRequest(BaseModel):
    period: str
