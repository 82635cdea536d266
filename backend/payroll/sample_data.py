"""示范资料：新环境没有任何工资记录时可写入的三笔样例。"""
from typing import List

from payroll.schemas import SalaryRecord

_SAMPLES = [
    {
        "id": "sample-1",
        "sequence": 1,
        "employeeName": "张三",
        "department": "基础地质所",
        "month": "2025-01",
        "positionSalary": 5200,
        "baseSalary": 3500,
        "retentionAllowance": 1200,
        "performanceSalary": 4800,
        "certificateSubsidy": 500,
        "publicityPerformance": 200,
        "researchPerformance": 1500,
    },
    {
        "id": "sample-2",
        "sequence": 2,
        "employeeName": "李四",
        "department": "规划所",
        "month": "2025-01",
        "positionSalary": 5500,
        "baseSalary": 3800,
        "retentionAllowance": 1200,
        "performanceSalary": 5200,
        "internalAuditFee": 500,
        "branchAuditFee": 300,
        "researchPerformance": 2000,
        "otherPerformanceAccounting": 5000,
    },
    {
        "id": "sample-3",
        "sequence": 3,
        "employeeName": "王五",
        "department": "储量所",
        "month": "2025-02",
        "positionSalary": 4800,
        "baseSalary": 3200,
        "retentionAllowance": 1000,
        "performanceSalary": 4500,
        "certificateSubsidy": 500,
        "annualLeavePay": 2000,
        "publicityPerformance": 100,
        "researchPerformance": 1000,
        "other": 200,
    },
]


def sample_salary_records() -> List[SalaryRecord]:
    """合计：张三 16900、李四 23500（实发 18500）、王五 17300。"""
    return [SalaryRecord.model_validate(s) for s in _SAMPLES]
