"""统一错误类型定义。"""

from __future__ import annotations

import os
from typing import Any


class SockPollError(Exception):
    """sockpoll 基础错误类。"""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "UNKNOWN_ERROR"

    def to_dict(self) -> dict[str, Any]:
        """转换为字典格式。"""
        return {"error": self.message, "code": self.code}


class ConfigurationError(SockPollError, ValueError):
    """构造参数校验错误（端口、超时等）。"""

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"Invalid {field}: {message}", "CONFIGURATION_ERROR")

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["field"] = self.field
        return result


class UnexpectedSocketError(SockPollError, OSError):
    """connect 返回了未分类的错误码。"""

    def __init__(self, host: str, port: int, errno: int) -> None:
        self.host = host
        self.port = port
        reason = os.strerror(errno)
        SockPollError.__init__(
            self,
            f"Unexpected error connecting to {host}:{port}: [Errno {errno}] {reason}",
            "UNEXPECTED_SOCKET_ERROR",
        )
        # OSError attributes, so callers matching on errno keep working
        self.errno = errno
        self.strerror = reason
        self.filename = None

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        result["errno"] = self.errno
        return result
