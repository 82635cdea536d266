"""salary_records：单人单月工资记录

Revision ID: 001
Revises:
Create Date: 2025-03-01

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY_COLUMNS = [
    ("position_salary", "岗位工资"),
    ("base_salary", "基本工资"),
    ("retention_allowance", "保留津贴"),
    ("performance_salary", "绩效工资"),
    ("internal_audit_fee", "内审费"),
    ("certificate_subsidy", "职业资格证书补贴"),
    ("annual_leave_pay", "未休年假工资"),
    ("publicity_performance", "宣传绩效"),
    ("branch_audit_fee", "分院内审费"),
    ("research_performance", "科研绩效"),
    ("other_performance_accounting", "其他绩效（走账）"),
    ("other", "其他"),
    ("total", "合计"),
    ("net_total", "实发合计"),
]


def upgrade() -> None:
    op.create_table(
        "salary_records",
        sa.Column("id", sa.String(36), nullable=False, comment="记录 id（uuid）"),
        sa.Column("sequence", sa.Integer(), nullable=False, server_default="0", comment="导入批次内序号"),
        sa.Column("employee_name", sa.String(100), nullable=False, comment="姓名"),
        sa.Column("department", sa.String(100), nullable=False, comment="部门"),
        sa.Column("month", sa.Text(), nullable=False, comment="月份 YYYY-MM（无法解析时为原值）"),
        *[
            sa.Column(name, sa.Numeric(14, 2), nullable=False, server_default="0", comment=comment)
            for name, comment in MONEY_COLUMNS
        ],
        sa.Column("created_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(), nullable=True, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_salary_records_employee_name"), "salary_records", ["employee_name"], unique=False)
    op.create_index(op.f("ix_salary_records_department"), "salary_records", ["department"], unique=False)
    op.create_index(op.f("ix_salary_records_month"), "salary_records", ["month"], unique=False)


def downgrade() -> None:
    op.drop_index(op.f("ix_salary_records_month"), table_name="salary_records")
    op.drop_index(op.f("ix_salary_records_department"), table_name="salary_records")
    op.drop_index(op.f("ix_salary_records_employee_name"), table_name="salary_records")
    op.drop_table("salary_records")
