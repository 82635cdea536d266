"""工资记录与汇总结构 - Pydantic。

对外 JSON（API、本地 JSON 文件、远程 API）一律使用驼峰字段名（employeeName、netTotal…），
程序内使用蛇形属性。合计/实发合计只由十二项构成推算，传入值一律覆盖。
"""
import uuid
from enum import Enum
from typing import Dict, List

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    FieldSerializationInfo,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from payroll.fields import COMPONENT_FIELDS, DEFAULT_DEPARTMENT, PASS_THROUGH_FIELD, YEAR_MONTH_PATTERN


def new_record_id() -> str:
    return str(uuid.uuid4())


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class SalaryComponents(_CamelModel):
    """十二项工资构成 + 基本信息（编辑表单提交的内容，不含 id 与合计）。"""

    sequence: int = 0
    employee_name: str = Field(..., min_length=1, description="姓名")
    department: str = Field(DEFAULT_DEPARTMENT, description="部门")
    month: str = Field(..., description="月份 YYYY-MM")

    position_salary: float = 0
    base_salary: float = 0
    retention_allowance: float = 0
    performance_salary: float = 0
    internal_audit_fee: float = 0
    certificate_subsidy: float = 0
    annual_leave_pay: float = 0
    publicity_performance: float = 0
    branch_audit_fee: float = 0
    research_performance: float = 0
    other_performance_accounting: float = 0
    other: float = 0

    @field_validator("employee_name")
    @classmethod
    def strip_employee_name(cls, v: str) -> str:
        name = v.strip()
        if not name:
            raise ValueError("姓名不可为空")
        return name


class SalaryRecordUpdate(SalaryComponents):
    """手动修改：月份须为可辨识的年月（2025-03、2025-3、2025年3月），统一存成 YYYY-MM。"""

    @field_validator("month")
    @classmethod
    def normalize_month(cls, v: str) -> str:
        m = YEAR_MONTH_PATTERN.fullmatch(v.strip().rstrip("月").strip())
        if not m or not 1 <= int(m.group(2)) <= 12:
            raise ValueError("月份格式须为 YYYY-MM")
        return f"{m.group(1)}-{m.group(2).zfill(2)}"


class SalaryRecord(SalaryComponents):
    """单人单月工资记录。"""

    id: str = Field(default_factory=new_record_id)
    total: float = 0
    net_total: float = 0

    @model_validator(mode="after")
    def derive_totals(self) -> "SalaryRecord":
        total = sum(getattr(self, f) for f in COMPONENT_FIELDS)
        self.total = total
        self.net_total = total - getattr(self, PASS_THROUGH_FIELD)
        return self

    @classmethod
    def from_components(cls, record_id: str, body: SalaryComponents) -> "SalaryRecord":
        return cls.model_validate({**body.model_dump(), "id": record_id})


# ---------- 汇总（只读，不回写） ----------


class _SummaryModel(_CamelModel):
    """sums 在程序内以字段名为键；依别名输出时（API）键也改为驼峰，与记录 JSON 一致。"""

    count: int = 0
    sums: Dict[str, float] = Field(default_factory=dict)

    @field_serializer("sums")
    def serialize_sums(self, sums: Dict[str, float], info: FieldSerializationInfo) -> Dict[str, float]:
        if info.by_alias:
            return {to_camel(k): v for k, v in sums.items()}
        return sums


class PersonSummary(_SummaryModel):
    employee_name: str
    department: str


class DepartmentSummary(_SummaryModel):
    department: str


class DirectoryEntry(_CamelModel):
    employee_name: str
    department: str
    net_total: float = 0
    count: int = 0


class TrendPoint(_CamelModel):
    month: int
    label: str
    total: float = 0


class SalaryStats(_CamelModel):
    gross_total: float = 0
    net_total: float = 0
    headcount: int = 0
    record_count: int = 0
    stat_field: str
    stat_value: float = 0


class ImportResult(_CamelModel):
    count: int
    message: str
    warnings: List[str] = Field(default_factory=list)


class ExportMode(str, Enum):
    detail = "detail"
    by_person = "by_person"
    by_department = "by_department"


class ViewMode(str, Enum):
    monthly = "monthly"
    summary = "summary"
