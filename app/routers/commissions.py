"""Commission calculation endpoints."""

from decimal import Decimal
from typing import Optional

from fastapi import APIRouter, Body, Depends, Query

from app.api import deps
from app.schemas.commission import (
    BulkCommissionCalculation,
    BulkCommissionRequest,
    CommissionCalculateRequest,
    CommissionCalculationResult,
    CommissionPool,
    CommissionProjectionRequest,
    CommissionStructureConfig,
    StructureValidationResult,
)
from app.services.commission import (
    BulkCommissionCalculator,
    CommissionCalculator,
    validate_commission_structure,
)

router = APIRouter()


@router.post("/calculate", response_model=CommissionCalculationResult)
async def calculate_commission(
    payload: CommissionCalculateRequest,
    calculator: CommissionCalculator = Depends(deps.get_commission_calculator),
) -> CommissionCalculationResult:
    """Calculate one employee's commission for a period."""
    return await calculator.calculate(
        payload.employee_id,
        payload.period,
        bonuses=payload.bonuses,
        deductions=payload.deductions,
        adjustments=payload.adjustments,
    )


@router.post("/bulk", response_model=BulkCommissionCalculation)
async def calculate_bulk_commissions(
    payload: BulkCommissionRequest,
    bulk: BulkCommissionCalculator = Depends(deps.get_bulk_calculator),
) -> BulkCommissionCalculation:
    """Calculate commissions for every commission-eligible employee."""
    return await bulk.calculate_bulk(payload.period)


@router.post("/projections", response_model=CommissionCalculationResult)
async def project_commission(
    payload: CommissionProjectionRequest,
    calculator: CommissionCalculator = Depends(deps.get_commission_calculator),
) -> CommissionCalculationResult:
    """Estimate base commission against a hypothetical sales figure."""
    return await calculator.project_commission(
        payload.employee_id,
        payload.current_period,
        payload.projected_sales,
    )


@router.post("/structures/validate", response_model=StructureValidationResult)
async def validate_structure(
    structure: CommissionStructureConfig = Body(...),
) -> StructureValidationResult:
    """Check a commission structure before it is saved."""
    return validate_commission_structure(structure)


@router.get("/pool", response_model=CommissionPool)
async def get_commission_pool(
    period: str = Query(..., description="Period in YYYY-MM format"),
    pool_percentage: Optional[Decimal] = Query(None, ge=0, le=100),
    bulk: BulkCommissionCalculator = Depends(deps.get_bulk_calculator),
) -> CommissionPool:
    """Commission pool for a period against what has been allocated."""
    return await bulk.calculate_commission_pool(period, pool_percentage)
