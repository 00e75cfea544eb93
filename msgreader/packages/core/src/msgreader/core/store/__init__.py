"""msgreader Core Store -- 进程内存中的消息集合

不持有任何磁盘状态，所有状态随进程生命周期存在。
"""

from .message_store import MessageStore

__all__ = [
    "MessageStore",
]
