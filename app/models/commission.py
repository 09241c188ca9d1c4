"""Read-model tables for commission calculation.

Structures and tiers are maintained by the HR configuration workflow,
employees and performance rows by the HR directory, financial periods by the
ledger's period close. The commission engine only reads them.
"""

import enum

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship

from app.models.base import Base


class CommissionType(str, enum.Enum):
    FLAT_RATE = "flat-rate"
    TIERED = "tiered"
    TARGET_BASED = "target-based"
    PROFIT_SHARING = "profit-sharing"


class EmployeeStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    TERMINATED = "terminated"


class CommissionStructure(Base):
    """How one employee's commission is computed."""

    __tablename__ = "commission_structure"

    id = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    type = Column(
        Enum(CommissionType, values_callable=lambda enum_class: [e.value for e in enum_class]),
        nullable=False,
        default=CommissionType.FLAT_RATE,
    )

    # Percentages, e.g. 5.00 for 5%
    base_rate = Column(Numeric(5, 2), nullable=False, default=0)
    # Only used by target-based structures
    target_amount = Column(Numeric(14, 2), nullable=True)

    is_active = Column(Boolean, nullable=False, default=True)
    effective_date = Column(Date, nullable=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    tiers = relationship(
        "CommissionTier",
        back_populates="structure",
        order_by="CommissionTier.min_amount",
        cascade="all, delete-orphan",
    )


class CommissionTier(Base):
    """A sales band of a tiered structure."""

    __tablename__ = "commission_tier"

    id = Column(String, primary_key=True)
    structure_id = Column(String, ForeignKey("commission_structure.id"), nullable=False, index=True)
    min_amount = Column(Numeric(14, 2), nullable=False)
    max_amount = Column(Numeric(14, 2), nullable=False)
    rate = Column(Numeric(5, 2), nullable=False)
    description = Column(String, nullable=True)

    structure = relationship("CommissionStructure", back_populates="tiers")


class Employee(Base):
    __tablename__ = "employee"

    id = Column(String, primary_key=True)
    employee_number = Column(String, unique=True, nullable=False, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    department = Column(String, nullable=True)
    position = Column(String, nullable=True)
    status = Column(
        Enum(EmployeeStatus, values_callable=lambda enum_class: [e.value for e in enum_class]),
        nullable=False,
        default=EmployeeStatus.ACTIVE,
    )
    hire_date = Column(Date, nullable=True)

    commission_eligible = Column(Boolean, nullable=False, default=False)
    commission_structure_id = Column(String, ForeignKey("commission_structure.id"), nullable=True)

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    commission_structure = relationship("CommissionStructure")
    performance = relationship(
        "EmployeePerformance",
        back_populates="employee",
        order_by="EmployeePerformance.period",
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class EmployeePerformance(Base):
    """Realized and target sales of one employee for one period (YYYY-MM)."""

    __tablename__ = "employee_performance"
    __table_args__ = (UniqueConstraint("employee_id", "period"),)

    id = Column(String, primary_key=True)
    employee_id = Column(String, ForeignKey("employee.id"), nullable=False, index=True)
    period = Column(String(7), nullable=False, index=True)
    total_sales = Column(Numeric(14, 2), nullable=False, default=0)
    target_sales = Column(Numeric(14, 2), nullable=False, default=0)
    deals_count = Column(Integer, nullable=False, default=0)

    employee = relationship("Employee", back_populates="performance")


class FinancialPeriod(Base):
    """Closed ledger totals for one period (YYYY-MM)."""

    __tablename__ = "financial_period"

    period = Column(String(7), primary_key=True)
    total_revenue = Column(Numeric(14, 2), nullable=False, default=0)
    total_expenses = Column(Numeric(14, 2), nullable=False, default=0)
    cost_of_goods_sold = Column(Numeric(14, 2), nullable=False, default=0)
    closed_at = Column(DateTime, nullable=True)
