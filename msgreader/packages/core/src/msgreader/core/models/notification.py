"""HostNotification Domain Model

Host -> UI 的即发即弃通知，可能到达零次、一次或多次，与 UI 生命周期无固定先后。
"""

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from .enums import HostEventType


class HostNotification(BaseModel):
    """宿主通知"""

    type: HostEventType = Field(description="通知类型")
    paths: list[str] = Field(
        default_factory=list,
        description="路径列表（files-to-open / open-file-now 携带）",
    )
    ts: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="通知时间",
    )
