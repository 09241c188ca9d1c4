"""Commission read-model tables

Revision ID: 20250601_000001
Revises:
Create Date: 2025-06-01 09:00:00

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20250601_000001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

commission_type = sa.Enum(
    "flat-rate", "tiered", "target-based", "profit-sharing", name="commissiontype"
)
employee_status = sa.Enum("active", "inactive", "terminated", name="employeestatus")


def upgrade() -> None:
    op.create_table(
        "commission_structure",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("type", commission_type, nullable=False),
        sa.Column("base_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("target_amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("effective_date", sa.Date(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.PrimaryKeyConstraint("id", name="pk_commission_structure"),
    )

    op.create_table(
        "commission_tier",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("structure_id", sa.String(), nullable=False),
        sa.Column("min_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("max_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["structure_id"],
            ["commission_structure.id"],
            name="fk_commission_tier_structure_id_commission_structure",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_commission_tier"),
    )
    op.create_index("ix_commission_tier_structure_id", "commission_tier", ["structure_id"])

    op.create_table(
        "employee",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("employee_number", sa.String(), nullable=False),
        sa.Column("first_name", sa.String(), nullable=False),
        sa.Column("last_name", sa.String(), nullable=False),
        sa.Column("email", sa.String(), nullable=True),
        sa.Column("department", sa.String(), nullable=True),
        sa.Column("position", sa.String(), nullable=True),
        sa.Column("status", employee_status, nullable=False),
        sa.Column("hire_date", sa.Date(), nullable=True),
        sa.Column("commission_eligible", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("commission_structure_id", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.ForeignKeyConstraint(
            ["commission_structure_id"],
            ["commission_structure.id"],
            name="fk_employee_commission_structure_id_commission_structure",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_employee"),
    )
    op.create_index("ix_employee_employee_number", "employee", ["employee_number"], unique=True)

    op.create_table(
        "employee_performance",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("employee_id", sa.String(), nullable=False),
        sa.Column("period", sa.String(7), nullable=False),
        sa.Column("total_sales", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("target_sales", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("deals_count", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(
            ["employee_id"],
            ["employee.id"],
            name="fk_employee_performance_employee_id_employee",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_employee_performance"),
        sa.UniqueConstraint("employee_id", "period", name="uq_employee_performance_employee_id"),
    )
    op.create_index("ix_employee_performance_employee_id", "employee_performance", ["employee_id"])
    op.create_index("ix_employee_performance_period", "employee_performance", ["period"])

    op.create_table(
        "financial_period",
        sa.Column("period", sa.String(7), nullable=False),
        sa.Column("total_revenue", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("total_expenses", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("cost_of_goods_sold", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("closed_at", sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint("period", name="pk_financial_period"),
    )


def downgrade() -> None:
    op.drop_table("financial_period")
    op.drop_index("ix_employee_performance_period", table_name="employee_performance")
    op.drop_index("ix_employee_performance_employee_id", table_name="employee_performance")
    op.drop_table("employee_performance")
    op.drop_index("ix_employee_employee_number", table_name="employee")
    op.drop_table("employee")
    op.drop_index("ix_commission_tier_structure_id", table_name="commission_tier")
    op.drop_table("commission_tier")
    op.drop_table("commission_structure")
    employee_status.drop(op.get_bind(), checkfirst=True)
    commission_type.drop(op.get_bind(), checkfirst=True)
