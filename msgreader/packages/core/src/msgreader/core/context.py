"""AppContext -- 进程级应用上下文

进程启动时构造一次，按引用传给需要的组件，替代全局的 app 实例、
就绪标记和"待处理文件"槽位。同时承载 UI 触发的消息操作和宿主通知路由。
"""

from collections.abc import Mapping
from typing import Any

import structlog

from .config import (
    DISPATCH_CONCURRENCY,
    DISPATCH_PACING_S,
    READY_RETRY_DELAY_S,
    READY_SIGNAL_ATTEMPTS,
    get_supported_extensions,
)
from .dispatcher import FileDispatcher
from .handshake import ReadinessHandshake
from .intake import FileIntakeQueue
from .models.enums import HostEventType, IntakeSource, ReadyReason
from .models.message import Message
from .models.notification import HostNotification
from .models.request import IntakeBatch
from .protocols import HostBridge, MessageParser, Presenter
from .store.message_store import MessageStore

log = structlog.get_logger()


class AppContext:
    """应用上下文 -- 持有握手、队列、分发器与消息集合"""

    def __init__(
        self,
        bridge: HostBridge,
        parsers: Mapping[str, MessageParser],
        presenter: Presenter | None = None,
        *,
        supported_extensions: Mapping[str, str] | None = None,
        ready_attempts: int = READY_SIGNAL_ATTEMPTS,
        ready_retry_delay_s: float = READY_RETRY_DELAY_S,
        concurrency: int = DISPATCH_CONCURRENCY,
        pacing_s: float = DISPATCH_PACING_S,
    ) -> None:
        extensions = dict(supported_extensions or get_supported_extensions())
        self.bridge = bridge
        self.presenter = presenter
        self.store = MessageStore()
        self.handshake = ReadinessHandshake(
            bridge,
            attempts=ready_attempts,
            retry_delay_s=ready_retry_delay_s,
        )
        self.dispatcher = FileDispatcher(
            bridge,
            self.store,
            parsers,
            presenter,
            supported_extensions=extensions,
            concurrency=concurrency,
            pacing_s=pacing_s,
        )
        self.intake = FileIntakeQueue(
            self.handshake,
            self.dispatcher.enqueue,
            supported_extensions=extensions,
        )

    # ---- 生命周期 ----

    async def startup(self) -> None:
        """发出有界就绪信号；无论宿主是否确认，本地初始化完成后都进入 READY，
        然后拉取一次宿主积压的启动文件"""
        await self.handshake.start()
        self.handshake.mark_ready(ReadyReason.LOCAL_INIT)
        await self.pull_pending_files(IntakeSource.STARTUP_SCAN)

    async def drain(self) -> None:
        """等待所有已释放的批次处理完毕"""
        await self.dispatcher.join()

    async def aclose(self) -> None:
        await self.dispatcher.aclose()

    # ---- 文件入口 ----

    def submit(
        self,
        paths: Any,
        source: IntakeSource | str = IntakeSource.LIVE_NOTIFICATION,
    ) -> IntakeBatch | None:
        return self.intake.submit(paths, source)

    async def pull_pending_files(
        self, source: IntakeSource = IntakeSource.LIVE_NOTIFICATION
    ) -> IntakeBatch | None:
        """从宿主拉取积压文件并提交"""
        try:
            paths = await self.bridge.list_pending_files()
        except Exception as e:
            log.warning(
                "pending_files_pull_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return None
        if not paths:
            log.debug("no_pending_files", source=source.value)
            return None
        return self.intake.submit(list(paths), source)

    async def open_with_dialog(self) -> IntakeBatch | None:
        """通过宿主打开文件对话框选择文件"""
        try:
            paths = await self.bridge.show_open_dialog()
        except Exception as e:
            log.warning(
                "open_dialog_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return None
        if not paths:
            return None
        return self.intake.submit(list(paths), IntakeSource.DRAG_DROP)

    async def register_file_associations(self) -> bool:
        try:
            return bool(await self.bridge.register_file_associations())
        except Exception as e:
            log.warning(
                "file_association_failed",
                error_type=type(e).__name__,
                error=str(e),
            )
            return False

    # ---- 宿主通知 ----

    async def handle_notification(self, notification: HostNotification) -> None:
        """路由一条 Host -> UI 通知"""
        log.info(
            "host_notification_received",
            type=notification.type.value,
            count=len(notification.paths),
        )
        match notification.type:
            case HostEventType.FILES_READY:
                self.intake.submit(notification.paths, IntakeSource.LIVE_NOTIFICATION)
            case HostEventType.FORCE_OPEN:
                # 必须立即处理：UI 就地判定就绪
                self.handshake.mark_ready(ReadyReason.FORCE_OPEN)
                self.intake.submit(notification.paths, IntakeSource.FORCED_OPEN)
            case HostEventType.BACKEND_READY:
                self.handshake.acknowledge()
            case HostEventType.NEW_FILES_AVAILABLE:
                await self.pull_pending_files(IntakeSource.LIVE_NOTIFICATION)

    # ---- UI 消息操作 ----

    def show_message(self, index: int) -> Message:
        message = self.store.get_message(index)
        if self.presenter is not None:
            self.presenter.show_message(message)
        return message

    def toggle_pin(self, index: int) -> Message:
        message = self.store.toggle_pin(index)
        if self.presenter is not None:
            self.presenter.message_list_changed(self.store.get_messages())
            self.presenter.show_message(message)
        return message

    def delete_message(self, index: int) -> Message | None:
        next_message = self.store.delete_message(index)
        if self.presenter is not None:
            self.presenter.message_list_changed(self.store.get_messages())
            if next_message is not None:
                self.presenter.show_message(next_message)
            else:
                self.presenter.show_welcome()
        return next_message

    async def export_message(self, index: int) -> str | None:
        """通过保存对话框导出原始文件

        Returns:
            写入的路径；用户取消或宿主失败时返回 None
        """
        message = self.store.get_message(index)
        try:
            path = await self.bridge.show_save_dialog(message.display_name)
            if not path:
                return None
            await self.bridge.write_file(path, message.content)
        except Exception as e:
            log.warning(
                "message_export_failed",
                message_id=message.message_id,
                error_type=type(e).__name__,
                error=str(e),
            )
            return None
        log.info("message_exported", message_id=message.message_id, path=path)
        return path
