"""msgreader Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    HandshakeState,
    HostEventType,
    IntakeSource,
    ReadyReason,
    validate_transition,
)
from .message import Message, MessageSummary
from .notification import HostNotification
from .request import (
    FilePathRequest,
    IntakeBatch,
    final_segment,
    infer_extension,
    normalize_identifier,
)

__all__ = [
    # 枚举
    "HandshakeState",
    "IntakeSource",
    "HostEventType",
    "ReadyReason",
    # 状态机
    "VALID_TRANSITIONS",
    "TERMINAL_STATES",
    "validate_transition",
    # 请求
    "FilePathRequest",
    "IntakeBatch",
    "normalize_identifier",
    "final_segment",
    "infer_extension",
    # Message
    "Message",
    "MessageSummary",
    # 通知
    "HostNotification",
]
