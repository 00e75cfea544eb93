"""HostEventPump -- 把宿主通知队列接到 AppContext

后台协程逐条消费 LocalHostBridge 的通知并交给 AppContext 路由。
单条通知处理失败只记录日志，不影响后续通知。
"""

import asyncio

import structlog
from msgreader.bridge import LocalHostBridge
from msgreader.core.context import AppContext
from msgreader.core.models import HostNotification

log = structlog.get_logger()


class HostEventPump:
    """宿主通知泵"""

    def __init__(self, bridge: LocalHostBridge, context: AppContext) -> None:
        self._bridge = bridge
        self._context = context
        self._queue: asyncio.Queue | None = None
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """订阅通知并启动后台协程（必须在 UI 发出就绪信号之前调用）"""
        if self.running:
            return
        self._queue = self._bridge.subscribe()
        self._task = asyncio.get_running_loop().create_task(
            self._run(self._queue), name="msgreader-host-events"
        )

    async def stop(self) -> None:
        if self._queue is not None:
            self._bridge.unsubscribe(self._queue)
            self._queue = None
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self, queue: asyncio.Queue) -> None:
        while True:
            notification: HostNotification = await queue.get()
            try:
                await self._context.handle_notification(notification)
            except Exception as e:
                log.error(
                    "host_notification_failed",
                    type=notification.type.value,
                    error_type=type(e).__name__,
                    error=str(e),
                )
