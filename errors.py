"""
Unix风格文件系统模拟器 - 错误类型
所有核心操作都返回显式的结果对象，不向调用方抛出异常
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class ErrorKind(Enum):
    """错误类别"""
    PERMISSION_DENIED = "PermissionDenied"
    AUTHENTICATION_FAILED = "AuthenticationFailed"
    NOT_FOUND = "NotFound"
    INVALID_OPERATION = "InvalidOperation"
    INVALID_FORMAT = "InvalidFormat"
    OUT_OF_SPACE = "OutOfSpace"


@dataclass
class OpResult:
    """
    操作结果
    ok为True时value携带返回值；否则error给出错误类别，message给出提示
    """
    ok: bool
    message: str = ""
    error: Optional[ErrorKind] = None
    value: Any = None

    @classmethod
    def success(cls, message: str = "", value: Any = None) -> 'OpResult':
        return cls(ok=True, message=message, value=value)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> 'OpResult':
        return cls(ok=False, message=message, error=error)
