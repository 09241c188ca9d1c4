"""Pydantic schemas."""

from app.schemas.commission import (  # noqa: F401
    BulkCommissionCalculation,
    CommissionCalculationResult,
    CommissionPool,
    CommissionStructureConfig,
    EmployeeSnapshot,
    FinancialPeriodData,
    PerformanceMetrics,
    StructureValidationResult,
    TierCommissionBreakdown,
)
