"""
Commission Services - turn sales and financial performance into commission
payouts.

Supports four structure variants (flat-rate, tiered, target-based,
profit-sharing), organization-wide bulk runs, what-if projections, the
period's commission pool, and structural validation of structures before
they are used for payroll.
"""

from app.services.commission.bulk import BulkCommissionCalculator
from app.services.commission.calculator import (
    CommissionCalculator,
    CommissionOutcome,
    EXCESS_RATE_MULTIPLIER,
)
from app.services.commission.providers import (
    EmployeeDirectory,
    FinancialPeriods,
    ProviderError,
    SQLEmployeeDirectory,
    SQLFinancialPeriods,
)
from app.services.commission.tiers import allocate_tiers
from app.services.commission.validation import validate_commission_structure

__all__ = [
    # Calculation
    "CommissionCalculator",
    "CommissionOutcome",
    "EXCESS_RATE_MULTIPLIER",
    "BulkCommissionCalculator",
    "allocate_tiers",
    # Validation
    "validate_commission_structure",
    # Providers
    "EmployeeDirectory",
    "FinancialPeriods",
    "ProviderError",
    "SQLEmployeeDirectory",
    "SQLFinancialPeriods",
]
