"""Core 异常体系

IntakeError 只在单个文件的摄入边界内抛出和捕获，不会越过该文件向上传播。
"""


class IntakeError(Exception):
    """单文件摄入失败基础异常"""

    stage = "ingest"

    def __init__(self, path: str, message: str) -> None:
        """
        Args:
            path: 失败文件的标识
            message: 错误描述
        """
        super().__init__(message)
        self.path = path


class FileReadError(IntakeError):
    """宿主读取失败或未返回内容"""

    stage = "read"

    def __init__(self, path: str, original_error: Exception | None = None) -> None:
        if original_error is not None:
            detail = f"{type(original_error).__name__}: {original_error}"
        else:
            detail = "empty result"
        super().__init__(path, f"读取文件失败: {path} -- {detail}")
        self.original_error = original_error


class MessageParseError(IntakeError):
    """无对应解析器、解析器抛错或未返回结构"""

    stage = "parse"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, f"解析文件失败: {path} -- {reason}")
        self.reason = reason


class MessageNotFoundError(IndexError):
    """UI 操作使用的下标超出当前显示顺序"""

    def __init__(self, index: int, size: int) -> None:
        super().__init__(f"Message index {index} out of range (size={size})")
        self.index = index
        self.size = size


class InvalidHandshakeTransitionError(ValueError):
    """非法的握手状态流转"""
