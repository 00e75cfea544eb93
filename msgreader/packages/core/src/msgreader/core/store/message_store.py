"""MessageStore 内存实现

持有按显示顺序排列的消息（最新在前）。
下标是当前显示顺序中的位置而非稳定标识，任何修改后调用方需重新获取再按下标访问。
"""

from typing import Any

from ulid import ULID

from ..exceptions import MessageNotFoundError
from ..models.message import Message


class MessageStore:
    """消息集合 -- 唯一写入方为 FileDispatcher（置顶/删除由 UI 操作触发）"""

    def __init__(self) -> None:
        self._messages: list[Message] = []
        self._seq = 0

    def __len__(self) -> int:
        return len(self._messages)

    def add_message(
        self,
        parsed: Any,
        display_name: str,
        *,
        extension: str = "",
        source_path: str | None = None,
        content: bytes = b"",
    ) -> Message:
        """在显示顺序头部插入新消息并分配 ID

        Args:
            parsed: 解析器产出的结构
            display_name: 显示名

        Returns:
            新建的 Message
        """
        self._seq += 1
        message = Message(
            message_id=str(ULID()),
            seq=self._seq,
            display_name=display_name,
            extension=extension,
            payload=parsed,
            source_path=source_path,
            content=content,
        )
        self._messages.insert(0, message)
        return message

    def get_messages(self) -> tuple[Message, ...]:
        """返回当前显示顺序的只读视图"""
        return tuple(self._messages)

    def get_message(self, index: int) -> Message:
        """按当前下标取消息"""
        self._check_index(index)
        return self._messages[index]

    def index_of(self, message_id: str) -> int | None:
        """查询消息当前下标，不存在返回 None"""
        for i, message in enumerate(self._messages):
            if message.message_id == message_id:
                return i
        return None

    def toggle_pin(self, index: int) -> Message:
        """切换置顶标记，不改变显示顺序"""
        self._check_index(index)
        message = self._messages[index]
        message.pinned = not message.pinned
        return message

    def delete_message(self, index: int) -> Message | None:
        """删除消息

        Returns:
            删除后应展示的消息（原位置上的下一条，删除的是最后一条时取新的最后一条），
            集合为空时返回 None
        """
        self._check_index(index)
        del self._messages[index]
        if not self._messages:
            return None
        return self._messages[min(index, len(self._messages) - 1)]

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._messages):
            raise MessageNotFoundError(index, len(self._messages))
