"""
业务异常定义

核心层只抛出这里的异常，不依赖任何HTTP类型；
main.py 中的异常处理器负责把它们转换成响应信封。
"""
from typing import Optional, Dict, Any


class NoteTreeError(Exception):
    """基础业务异常"""

    status_code: int = 500
    error_code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ValidationError(NoteTreeError):
    """输入校验失败（名称为空、超长、缺少必填字段等）"""

    status_code = 400
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        super().__init__(message, details={"field": field})
        self.field = field


class AuthError(NoteTreeError):
    """访问码缺失、无效或已停用"""

    status_code = 401
    error_code = "AUTH_ERROR"

    def __init__(self, message: str = "Invalid or inactive access code"):
        super().__init__(message)


class NotFoundError(NoteTreeError):
    """资源在当前所有者下不存在（跨账户访问同样表现为不存在）"""

    status_code = 404
    error_code = "NOT_FOUND"

    def __init__(self, resource_type: str, resource_id: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"{resource_type} not found"
        super().__init__(
            message,
            details={"resource_type": resource_type, "resource_id": resource_id}
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(NoteTreeError):
    """唯一性冲突（目前只用于访问码）"""

    status_code = 409
    error_code = "CONFLICT"


class StorageError(NoteTreeError):
    """持久化层失败，原始异常保存在 __cause__ 中"""

    status_code = 500
    error_code = "STORAGE_ERROR"

    def __init__(self, operation: str, message: Optional[str] = None):
        if message is None:
            message = f"Storage failure during {operation}"
        super().__init__(message, details={"operation": operation})
        self.operation = operation
