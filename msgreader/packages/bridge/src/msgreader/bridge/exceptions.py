"""Bridge 异常体系"""


class BridgeError(Exception):
    """宿主桥基础异常"""

    def __init__(self, message: str, recoverable: bool = True) -> None:
        """
        Args:
            message: 错误描述
            recoverable: 是否可通过重新打开文件恢复
        """
        super().__init__(message)
        self.recoverable = recoverable


class HostReadError(BridgeError):
    """宿主读取文件失败（不存在、无权限、超时等）"""

    def __init__(self, path: str, original_error: Exception) -> None:
        """
        Args:
            path: 尝试读取的路径
            original_error: 原始异常
        """
        super().__init__(f"无法读取文件: {path} -- {original_error}", recoverable=True)
        self.path = path
        self.original_error = original_error


class FileTooLargeError(HostReadError):
    """文件超过大小上限"""

    def __init__(self, path: str, size: int, limit: int) -> None:
        super().__init__(path, ValueError(f"{size} bytes exceeds limit {limit}"))
        self.size = size
        self.limit = limit
