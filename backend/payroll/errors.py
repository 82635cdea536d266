"""工资系统例外阶层。message 直接回给前端显示，需可据以操作。"""


class PayrollError(Exception):
    """所有业务例外的基底；status_code 供 API 层转换。"""

    status_code = 500
    default_message = "系统错误"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# ---------- 导入 ----------


class SalaryImportError(PayrollError):
    """导入失败：整批不写入。"""

    status_code = 400
    default_message = "解析文件失败。"


class UnsupportedFileTypeError(SalaryImportError):
    default_message = "请上传 Excel (.xlsx 或 .xls) 格式文件。"


class UnreadableWorkbookError(SalaryImportError):
    default_message = "无法读取 Excel 文件，请确认文件未损坏且未加密。"


class EmptyWorkbookError(SalaryImportError):
    default_message = "Excel 文件为空或无法读取。"


class HeaderNotFoundError(SalaryImportError):
    default_message = "找不到表头行。请确保第一行或前几行包含 '姓名'、'部门' 等列名。"


class NoValidRowsError(SalaryImportError):
    default_message = "未能识别任何有效数据行。请检查 Excel 内容（姓名列不可为空）。"


class ImportInProgressError(PayrollError):
    status_code = 409
    default_message = "已有导入正在处理，请稍候再试。"


# ---------- 记录 ----------


class RecordNotFoundError(PayrollError):
    status_code = 404
    default_message = "记录不存在"

    def __init__(self, record_id: str) -> None:
        self.record_id = record_id
        super().__init__(f"记录不存在：{record_id}")


# ---------- 存储 ----------


class StoreError(PayrollError):
    """存储后端 I/O 失败，不自动重试。"""

    status_code = 502
    default_message = "数据存储服务暂时不可用，请刷新后重试。"


class StoreReadError(StoreError):
    default_message = "读取工资数据失败，请稍后刷新重试。"


class StoreWriteError(StoreError):
    default_message = "保存工资数据失败，请刷新后确认数据并重试。"


# ---------- 查询参数 ----------


class UnknownFieldError(PayrollError):
    status_code = 400
    default_message = "不支持的数值栏位"

    def __init__(self, names) -> None:
        self.names = list(names)
        super().__init__(f"不支持的数值栏位：{'、'.join(self.names)}")
