"""SQLAlchemy models read by the commission engine."""

from app.models.commission import (  # noqa: F401
    CommissionStructure,
    CommissionTier,
    CommissionType,
    Employee,
    EmployeePerformance,
    EmployeeStatus,
    FinancialPeriod,
)
