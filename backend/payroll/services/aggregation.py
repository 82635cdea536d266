"""工资记录筛选与汇总：按人员、按部门、按月份（12 个月趋势）、看板统计、人员名录。

汇总列每次请求时重新计算，只用于显示与导出，绝不回写存储。
"""
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from payroll.fields import ALL, NUMERIC_FIELDS
from payroll.schemas import (
    DepartmentSummary,
    DirectoryEntry,
    PersonSummary,
    SalaryRecord,
    SalaryStats,
)


def _is_all(value: Optional[str]) -> bool:
    return value is None or value.strip() == "" or value.strip().lower() == ALL


def month_key(year: Optional[str], month: Optional[str]) -> Optional[str]:
    """月份筛选值转成 YYYY-MM：可传完整 YYYY-MM，或搭配 year 只传 1~2 位月份；all/空回传 None。"""
    if _is_all(month):
        return None
    m = month.strip()
    if "-" in m:
        return m
    if not year or not m.isdigit():
        return m
    return f"{year.strip()}-{m.zfill(2)}"


def filter_records(
    records: Iterable[SalaryRecord],
    *,
    department: Optional[str] = ALL,
    year: Optional[str] = None,
    month: Optional[str] = None,
    search: Optional[str] = None,
) -> List[SalaryRecord]:
    """部门（精确或 all）、年份（月份前缀）、月份（精确 YYYY-MM）、关键字（姓名或部门包含），条件全部 AND。"""
    result = list(records)
    if not _is_all(department):
        result = [r for r in result if r.department == department]
    if year and year.strip():
        y = year.strip()
        result = [r for r in result if r.month.startswith(y)]
    key = month_key(year, month)
    if key:
        result = [r for r in result if r.month == key]
    if search and search.strip():
        term = search.strip()
        result = [r for r in result if term in r.employee_name or term in r.department]
    return result


def _add_sums(sums: Dict[str, float], record: SalaryRecord, fields: Sequence[str]) -> None:
    for f in fields:
        sums[f] = sums.get(f, 0) + (getattr(record, f) or 0)


def aggregate_by_person(
    records: Iterable[SalaryRecord], fields: Sequence[str] = NUMERIC_FIELDS
) -> List[PersonSummary]:
    """同一姓名 + 部门合并为一列（首次出现的顺序），count 为参与的记录数（月份数）。"""
    groups: Dict[Tuple[str, str], PersonSummary] = {}
    for r in records:
        key = (r.employee_name, r.department)
        entry = groups.get(key)
        if entry is None:
            entry = PersonSummary(
                employee_name=r.employee_name,
                department=r.department,
                sums={f: 0 for f in fields},
            )
            groups[key] = entry
        entry.count += 1
        _add_sums(entry.sums, r, fields)
    return list(groups.values())


def aggregate_by_department(
    records: Iterable[SalaryRecord], fields: Sequence[str] = NUMERIC_FIELDS
) -> List[DepartmentSummary]:
    """按部门合并，count 为总人次。"""
    groups: Dict[str, DepartmentSummary] = {}
    for r in records:
        entry = groups.get(r.department)
        if entry is None:
            entry = DepartmentSummary(department=r.department, sums={f: 0 for f in fields})
            groups[r.department] = entry
        entry.count += 1
        _add_sums(entry.sums, r, fields)
    return list(groups.values())


def monthly_trend(
    records: Iterable[SalaryRecord], year: str, department: Optional[str] = ALL
) -> List[float]:
    """固定 12 个桶（1~12 月）累计实发合计；月份后缀无法解析或超出范围的记录略过。"""
    buckets = [0.0] * 12
    y = (year or "").strip()
    for r in records:
        if not r.month.startswith(y):
            continue
        if not _is_all(department) and r.department != department:
            continue
        parts = r.month.split("-")
        if len(parts) < 2:
            continue
        try:
            idx = int(parts[1]) - 1
        except ValueError:
            continue
        if 0 <= idx < 12:
            buckets[idx] += r.net_total
    return buckets


def summarize(records: Sequence[SalaryRecord], stat_field: str = "performance_salary") -> SalaryStats:
    """看板数字：合计总额、实发合计总额、发放人数（不重复姓名）、自选统计项。"""
    return SalaryStats(
        gross_total=sum(r.total for r in records),
        net_total=sum(r.net_total for r in records),
        headcount=len({r.employee_name for r in records}),
        record_count=len(records),
        stat_field=stat_field,
        stat_value=sum((getattr(r, stat_field, 0) or 0) for r in records),
    )


def employee_directory(
    records: Iterable[SalaryRecord],
    *,
    year: Optional[str],
    department: Optional[str] = ALL,
    search: Optional[str] = None,
) -> List[DirectoryEntry]:
    """全年人员名录：按实发合计由高到低。关键字在汇总后才过滤（比对姓名或部门）。"""
    base = filter_records(records, department=department, year=year)
    entries: Dict[Tuple[str, str], DirectoryEntry] = {}
    for r in base:
        key = (r.employee_name, r.department)
        entry = entries.get(key)
        if entry is None:
            entry = DirectoryEntry(employee_name=r.employee_name, department=r.department)
            entries[key] = entry
        entry.net_total += r.net_total
        entry.count += 1
    result = list(entries.values())
    if search and search.strip():
        term = search.strip()
        result = [e for e in result if term in e.employee_name or term in e.department]
    return sorted(result, key=lambda e: e.net_total, reverse=True)


def available_years(records: Iterable[SalaryRecord], always_include: Optional[int] = None) -> List[str]:
    years = {r.month.split("-")[0] for r in records}
    if always_include is not None:
        years.add(str(always_include))
    return sorted(years, reverse=True)


def known_departments(records: Iterable[SalaryRecord], configured: Sequence[str]) -> List[str]:
    """院内部门在前，数据中出现但不在清单内的部门依出现顺序追加。"""
    result = list(configured)
    for r in records:
        if r.department not in result:
            result.append(r.department)
    return result
