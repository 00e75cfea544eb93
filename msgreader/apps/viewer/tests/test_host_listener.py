"""HostEventPump 测试 -- 宿主通知泵的启动、路由与错误隔离"""

import asyncio
from unittest.mock import AsyncMock

from msgreader.bridge import LocalHostBridge
from msgreader.core.models import HostEventType, HostNotification
from msgreader.viewer.services.host_listener import HostEventPump


class TestHostEventPump:
    async def test_routes_notifications(self):
        bridge = LocalHostBridge()
        context = AsyncMock()
        pump = HostEventPump(bridge, context)
        pump.start()
        assert pump.running is True

        bridge.push_files(["/m/a.msg"])
        await asyncio.wait_for(_wait_calls(context.handle_notification, 1), timeout=1.0)

        notification = context.handle_notification.await_args.args[0]
        assert notification.type == HostEventType.FILES_READY
        assert notification.paths == ["/m/a.msg"]

        await pump.stop()
        assert pump.running is False

    async def test_failure_does_not_stop_pump(self):
        bridge = LocalHostBridge()
        context = AsyncMock()
        context.handle_notification = AsyncMock(side_effect=[RuntimeError("boom"), None])
        pump = HostEventPump(bridge, context)
        pump.start()

        bridge.emit(HostNotification(type=HostEventType.BACKEND_READY))
        bridge.emit(HostNotification(type=HostEventType.NEW_FILES_AVAILABLE))
        await asyncio.wait_for(_wait_calls(context.handle_notification, 2), timeout=1.0)

        assert pump.running is True
        await pump.stop()

    async def test_stop_unsubscribes(self):
        bridge = LocalHostBridge()
        pump = HostEventPump(bridge, AsyncMock())
        pump.start()
        await pump.stop()

        assert bridge.emit(HostNotification(type=HostEventType.BACKEND_READY)) == 0

    async def test_start_twice_keeps_single_subscription(self):
        bridge = LocalHostBridge()
        pump = HostEventPump(bridge, AsyncMock())
        pump.start()
        pump.start()

        assert bridge.emit(HostNotification(type=HostEventType.BACKEND_READY)) == 1
        await pump.stop()


async def _wait_calls(mock: AsyncMock, count: int) -> None:
    while mock.await_count < count:
        await asyncio.sleep(0.01)
