"""数据库模型 - 工资记录。id 为 uuid 字符串，是更新/删除的唯一依据（不可用姓名当 key）。"""
from datetime import datetime

from sqlalchemy import DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from payroll.database import Base


def _money(comment: str) -> Mapped[float]:
    return mapped_column(Numeric(14, 2, asdecimal=False), default=0, nullable=False, comment=comment)


class SalaryRecordRow(Base):
    """单人单月工资。total / net_total 由应用层重算后写入，不单独修改。"""
    __tablename__ = "salary_records"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, comment="记录 id（uuid）")
    sequence: Mapped[int] = mapped_column(Integer, default=0, comment="导入批次内序号")
    employee_name: Mapped[str] = mapped_column(String(100), index=True, comment="姓名")
    department: Mapped[str] = mapped_column(String(100), index=True, comment="部门")
    month: Mapped[str] = mapped_column(Text, index=True, comment="月份 YYYY-MM（无法解析时为原值）")

    position_salary: Mapped[float] = _money("岗位工资")
    base_salary: Mapped[float] = _money("基本工资")
    retention_allowance: Mapped[float] = _money("保留津贴")
    performance_salary: Mapped[float] = _money("绩效工资")
    internal_audit_fee: Mapped[float] = _money("内审费")
    certificate_subsidy: Mapped[float] = _money("职业资格证书补贴")
    annual_leave_pay: Mapped[float] = _money("未休年假工资")
    publicity_performance: Mapped[float] = _money("宣传绩效")
    branch_audit_fee: Mapped[float] = _money("分院内审费")
    research_performance: Mapped[float] = _money("科研绩效")
    other_performance_accounting: Mapped[float] = _money("其他绩效（走账）")
    other: Mapped[float] = _money("其他")
    total: Mapped[float] = _money("合计")
    net_total: Mapped[float] = _money("实发合计")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
