"""工资记录字段表：十二项工资构成、显示/导出标签、表头同义词、默认值。

新增同义表头只需在 HEADER_SYNONYMS 对应字段的列表末尾追加，不需改解析流程。
"""
import re
from typing import Dict, List, Optional, Tuple

from pydantic.alias_generators import to_camel

# 十二项工资构成（顺序即表格/导出的列顺序）
COMPONENT_FIELDS: List[str] = [
    "position_salary",
    "base_salary",
    "retention_allowance",
    "performance_salary",
    "internal_audit_fee",
    "certificate_subsidy",
    "annual_leave_pay",
    "publicity_performance",
    "branch_audit_fee",
    "research_performance",
    "other_performance_accounting",
    "other",
]

# 走账绩效：计入合计，但不计入实发合计
PASS_THROUGH_FIELD = "other_performance_accounting"

TOTAL_FIELDS: List[str] = ["total", "net_total"]

# 可汇总的全部数值字段
NUMERIC_FIELDS: List[str] = COMPONENT_FIELDS + TOTAL_FIELDS

# 页面与导出使用的简短标签
FIELD_LABELS: Dict[str, str] = {
    "position_salary": "岗位工资",
    "base_salary": "基本工资",
    "retention_allowance": "保留津贴",
    "performance_salary": "绩效工资",
    "internal_audit_fee": "内审费",
    "certificate_subsidy": "证书补贴",
    "annual_leave_pay": "未休年假",
    "publicity_performance": "宣传绩效",
    "branch_audit_fee": "分院内审",
    "research_performance": "科研绩效",
    "other_performance_accounting": "走账绩效",
    "other": "其他",
    "total": "合计",
    "net_total": "实发合计",
}

# 表头识别：出现其一即视为表头行
HEADER_TOKENS: Tuple[str, ...] = ("姓名", "部门")

NAME_HEADER = "姓名"
DEPARTMENT_HEADER = "部门"
MONTH_HEADER = "月份"

# 字段 → 可接受的表头（依序尝试，第一个存在于表头的列生效）
HEADER_SYNONYMS: Dict[str, List[str]] = {
    "position_salary": ["岗位工资"],
    "base_salary": ["基本工资"],
    "retention_allowance": ["保留津贴"],
    "performance_salary": ["绩效工资"],
    "internal_audit_fee": ["内审费"],
    "certificate_subsidy": ["职业资格证书补贴", "证书补贴"],
    "annual_leave_pay": ["未休年假工资", "年假工资", "未休年假"],
    "publicity_performance": ["宣传绩效"],
    "branch_audit_fee": ["分院内审费", "分院内审"],
    "research_performance": ["科研绩效"],
    "other_performance_accounting": ["其他绩效（走账）", "其他绩效(走账)", "走账绩效"],
    "other": ["其他"],
}

# 缺部门时的归类
DEFAULT_DEPARTMENT = "其他"

# 全部门通配
ALL = "all"

# 院内部门（侧栏顺序）；数据中出现的其他部门会追加在后
DEPARTMENTS: List[str] = ["基础地质所", "规划所", "储量所", "绿色矿山所", "矿业经济所", "遥感所", "办公室"]

# 2025-3 / 2025.03 / 2025/3 / 2025年3月
YEAR_MONTH_PATTERN = re.compile(r"(\d{4})\s*[-./年]\s*(\d{1,2})")

# 对外 JSON 的驼峰名 → 字段名
_FIELD_BY_ALIAS: Dict[str, str] = {to_camel(f): f for f in NUMERIC_FIELDS}


def resolve_numeric_field(name: str) -> Optional[str]:
    """数值栏位名可用蛇形（net_total）或驼峰（netTotal）；不认得回传 None。"""
    key = (name or "").strip()
    if key in NUMERIC_FIELDS:
        return key
    return _FIELD_BY_ALIAS.get(key)
