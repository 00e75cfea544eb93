"""Message Domain Model

可展示的已摄入消息。由 MessageStore 独占持有；
FileDispatcher 创建，UI 操作修改（置顶切换、删除）。
"""

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, Field


class Message(BaseModel):
    """已摄入消息"""

    message_id: str = Field(description="唯一标识，ULID 格式")
    seq: int = Field(ge=1, description="插入序号，严格单调递增")
    display_name: str = Field(description="显示名（文件名）")
    extension: str = Field(default="", description="来源文件扩展名")
    payload: Any = Field(default=None, description="解析器产出的结构（不透明）")
    pinned: bool = Field(default=False, description="是否置顶")
    source_path: str | None = Field(default=None, description="来源路径，字节请求时为 None")
    added_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="加入时间",
    )
    content: bytes = Field(
        default=b"",
        repr=False,
        exclude=True,
        description="原始字节，用于导出",
    )


class MessageSummary(BaseModel):
    """消息列表项"""

    index: int = Field(description="当前显示顺序中的位置")
    message_id: str
    display_name: str
    extension: str
    pinned: bool
    added_at: datetime
    current: bool = Field(default=False, description="是否为当前展示的消息")

    @classmethod
    def from_message(
        cls, index: int, message: Message, current_id: str | None = None
    ) -> "MessageSummary":
        return cls(
            index=index,
            message_id=message.message_id,
            display_name=message.display_name,
            extension=message.extension,
            pinned=message.pinned,
            added_at=message.added_at,
            current=message.message_id == current_id,
        )
