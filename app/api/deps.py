from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.db import get_db
from app.services.commission import (
    BulkCommissionCalculator,
    CommissionCalculator,
    SQLEmployeeDirectory,
    SQLFinancialPeriods,
)


async def get_commission_calculator(
    db: AsyncSession = Depends(get_db),
) -> CommissionCalculator:
    """
    FastAPI dependency wiring the calculator to the HR directory and the
    financial period ledger over the request's database session.
    """
    return CommissionCalculator(SQLEmployeeDirectory(db), SQLFinancialPeriods(db))


async def get_bulk_calculator(
    calculator: CommissionCalculator = Depends(get_commission_calculator),
) -> BulkCommissionCalculator:
    return BulkCommissionCalculator(calculator)
