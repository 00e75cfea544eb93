"""ViewEventHub -- 内存中展示事件广播器

每个订阅者持有一个 asyncio.Queue，支持 subscribe/unsubscribe/publish。
"""

import asyncio
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field
from ulid import ULID


class ViewEventType(StrEnum):
    """展示事件类型"""

    MESSAGE_LIST_CHANGED = "MESSAGE_LIST_CHANGED"
    MESSAGE_SHOWN = "MESSAGE_SHOWN"
    WELCOME_SHOWN = "WELCOME_SHOWN"


class ViewEvent(BaseModel):
    """展示事件"""

    event_id: str = Field(default_factory=lambda: str(ULID()), description="ULID")
    ts: datetime = Field(default_factory=lambda: datetime.now(UTC), description="时间戳")
    type: ViewEventType = Field(description="事件类型")
    payload: dict[str, Any] = Field(default_factory=dict, description="结构化 payload")


class ViewEventHub:
    """展示事件广播器 -- 基于 asyncio.Queue 的发布/订阅模式"""

    def __init__(self, queue_maxsize: int = 100) -> None:
        self._subscribers: set[asyncio.Queue] = set()
        self._queue_maxsize = queue_maxsize

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def subscribe(self) -> asyncio.Queue:
        """订阅展示事件流

        Returns:
            asyncio.Queue 实例，新事件会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    async def unsubscribe(self, queue: asyncio.Queue) -> None:
        """取消订阅

        Args:
            queue: 之前订阅时返回的队列
        """
        self._subscribers.discard(queue)

    def publish(self, event: ViewEvent) -> None:
        """向所有订阅者广播事件（同步，供 Presenter 回调直接调用）

        Args:
            event: 要广播的事件
        """
        dead_queues = []
        for queue in self._subscribers:
            try:
                queue.put_nowait(event)
            except asyncio.QueueFull:
                dead_queues.append(queue)

        # 清理已满的队列
        for q in dead_queues:
            self._subscribers.discard(q)
