"""LocalHostBridge -- 基于本地文件系统的进程内宿主

实现 HostBridge 全部操作：
- 读写文件（读取带大小上限与可选超时）
- 取出积压文件（先启动文件，后运行期到达的文件），取出即清空
- 无界面环境下的打开/保存对话框（返回空）
- 文件类型关联注册不在本项目范围内，返回 False
- 收到"前端已就绪"后按配置回发 backend-ready

宿主通知通过每个订阅者持有的 asyncio.Queue 扇出。
"""

import asyncio
from collections.abc import Sequence
from pathlib import Path

import structlog
from msgreader.core.models import HostEventType, HostNotification

from .config import BridgeConfig
from .exceptions import FileTooLargeError, HostReadError

log = structlog.get_logger()


class LocalHostBridge:
    """进程内宿主桥"""

    def __init__(
        self,
        startup_files: Sequence[str] = (),
        config: BridgeConfig | None = None,
        queue_maxsize: int = 100,
    ) -> None:
        self._config = config or BridgeConfig()
        self._startup_files: list[str] = list(startup_files)
        self._pending_files: list[str] = []
        self._subscribers: set[asyncio.Queue] = set()
        self._queue_maxsize = queue_maxsize
        self.ready_signals_received = 0

    @property
    def config(self) -> BridgeConfig:
        return self._config

    # ---- 通知订阅 ----

    def subscribe(self) -> asyncio.Queue:
        """订阅宿主通知

        Returns:
            asyncio.Queue 实例，新通知会被推送到此队列
        """
        queue: asyncio.Queue = asyncio.Queue(maxsize=self._queue_maxsize)
        self._subscribers.add(queue)
        return queue

    def unsubscribe(self, queue: asyncio.Queue) -> None:
        self._subscribers.discard(queue)

    def emit(self, notification: HostNotification) -> int:
        """即发即弃：没有订阅者时通知直接丢失

        Returns:
            成功投递的订阅者数量
        """
        if not self._subscribers:
            log.debug("host_notification_dropped", type=notification.type.value)
            return 0

        delivered = 0
        dead_queues = []
        for queue in self._subscribers:
            try:
                queue.put_nowait(notification)
                delivered += 1
            except asyncio.QueueFull:
                dead_queues.append(queue)

        # 清理已满的队列
        for q in dead_queues:
            self._subscribers.discard(q)
        return delivered

    # ---- OS 事件 ----

    def handle_file_open(self, file_path: str) -> str | None:
        """OS "打开文件"事件（双击 / 打开方式）

        发出 open-file-now，UI 必须立即处理；没有订阅者收到时记录为积压文件，
        等 UI 启动后拉取，避免同一文件被摄入两次。

        Returns:
            绝对路径；文件不可访问时返回 None
        """
        path = Path(file_path).expanduser()
        try:
            abs_path = str(path.resolve())
        except OSError as e:
            log.warning("file_open_resolve_failed", path=file_path, error=str(e))
            abs_path = str(path)

        if not Path(abs_path).exists():
            log.warning("file_open_not_accessible", path=abs_path)
            return None

        notification = HostNotification(type=HostEventType.FORCE_OPEN, paths=[abs_path])
        if not self.emit(notification):
            self._pending_files.append(abs_path)
        return abs_path

    def announce_files(self, paths: Sequence[str]) -> None:
        """运行期新到达文件：加入积压并发出 new-files-available（不携带路径）"""
        if not paths:
            return
        self._pending_files.extend(paths)
        self.emit(HostNotification(type=HostEventType.NEW_FILES_AVAILABLE))

    def push_files(self, paths: Sequence[str]) -> None:
        """直接推送 files-to-open（携带路径，不进入积压）"""
        self.emit(HostNotification(type=HostEventType.FILES_READY, paths=list(paths)))

    # ---- HostBridge ----

    async def read_file(self, path: str) -> bytes:
        try:
            if self._config.read_timeout_s is None:
                return await asyncio.to_thread(self._read_bytes, path)
            return await asyncio.wait_for(
                asyncio.to_thread(self._read_bytes, path),
                timeout=self._config.read_timeout_s,
            )
        except HostReadError:
            raise
        except (OSError, TimeoutError) as e:
            log.warning("host_read_failed", path=path, error_type=type(e).__name__)
            raise HostReadError(path, e) from e

    def _read_bytes(self, path: str) -> bytes:
        file_path = Path(path)
        size = file_path.stat().st_size
        if size > self._config.max_file_bytes:
            raise FileTooLargeError(path, size, self._config.max_file_bytes)
        data = file_path.read_bytes()
        log.debug("host_file_read", path=path, size=len(data))
        return data

    async def write_file(self, path: str, data: bytes) -> None:
        def _write() -> None:
            file_path = Path(path)
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_bytes(data)

        await asyncio.to_thread(_write)
        log.info("host_file_written", path=path, size=len(data))

    async def show_open_dialog(self) -> list[str]:
        log.info("open_dialog_unavailable", reason="headless host")
        return []

    async def show_save_dialog(self, suggested_name: str) -> str | None:
        log.info(
            "save_dialog_unavailable",
            reason="headless host",
            suggested_name=suggested_name,
        )
        return None

    async def register_file_associations(self) -> bool:
        log.info("file_associations_not_supported", reason="registration is platform setup")
        return False

    async def list_pending_files(self) -> list[str]:
        files = [*self._startup_files, *self._pending_files]
        self._startup_files = []
        self._pending_files = []
        log.info("pending_files_listed", count=len(files))
        return files

    async def notify_frontend_ready(self) -> None:
        self.ready_signals_received += 1
        log.info("frontend_ready_received", count=self.ready_signals_received)
        if self._config.auto_ack:
            self.emit(HostNotification(type=HostEventType.BACKEND_READY))
