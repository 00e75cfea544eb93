"""协作方 Protocol 接口定义

HostBridge：宿主进程能力（读写文件、对话框、待处理文件、就绪通知）。
Presenter：展示层（列表刷新、展示消息、欢迎页）。
MessageParser：按扩展名选择的纯函数 bytes -> 结构 | None。
使用 Python Protocol 实现结构化子类型（duck typing）。
"""

from collections.abc import Callable, Sequence
from typing import Any, Protocol

from .models.message import Message

MessageParser = Callable[[bytes], Any]


class HostBridge(Protocol):
    """宿主桥接口 -- 每个操作都可能失败，由调用方捕获并隔离"""

    async def read_file(self, path: str) -> bytes:
        """读取文件字节"""
        ...

    async def write_file(self, path: str, data: bytes) -> None:
        """写入文件"""
        ...

    async def show_open_dialog(self) -> list[str]:
        """打开文件对话框，返回所选路径（可能为空）"""
        ...

    async def show_save_dialog(self, suggested_name: str) -> str | None:
        """保存文件对话框，返回目标路径或 None"""
        ...

    async def register_file_associations(self) -> bool:
        """注册文件类型关联"""
        ...

    async def list_pending_files(self) -> list[str]:
        """取出宿主侧积压的待打开文件"""
        ...

    async def notify_frontend_ready(self) -> None:
        """UI -> Host: 前端已就绪"""
        ...


class Presenter(Protocol):
    """展示层接口"""

    def message_list_changed(self, messages: Sequence[Message]) -> None:
        """消息列表变化"""
        ...

    def show_message(self, message: Message) -> None:
        """展示指定消息"""
        ...

    def show_welcome(self) -> None:
        """无消息时回到欢迎页"""
        ...
