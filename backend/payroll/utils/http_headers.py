"""
Content-Disposition 中文档名（RFC 5987）。
Starlette 的 header 只能是 latin-1：filename 放 ASCII 档名，filename*=UTF-8''... 放编码后的中文档名，浏览器优先取后者。
"""
from urllib.parse import quote


def build_content_disposition(ascii_filename: str, unicode_filename: str) -> str:
    """
    例：
        build_content_disposition("salary_export_2025_by_person.xlsx", "工资导出_全院_2025_by_person.xlsx")
    """
    safe_ascii = ascii_filename.replace("\\", "_").replace('"', "_")
    encoded = quote(unicode_filename, safe="")
    return f"attachment; filename=\"{safe_ascii}\"; filename*=UTF-8''{encoded}"
