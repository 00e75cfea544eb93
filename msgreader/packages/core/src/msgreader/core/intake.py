"""FileIntakeQueue -- 文件请求的规范化、过滤与缓冲

submit 总是接受、从不抛出：
1. 单个路径字符串被包装为单元素批次
2. 每条请求规范化（解码百分号编码、统一分隔符）并推断扩展名
3. 丢弃空条目与白名单之外的扩展名
4. 握手未 READY 时追加到待处理缓冲区（追加而非替换，按到达顺序累积）
5. 已 READY 时立即转交 FileDispatcher
进入 READY 时，缓冲区按顺序拼接为一个序列只释放一次，随后清空。
不对历史提交去重：每次被接受的提交都会产生一次摄入尝试。
"""

from collections.abc import Callable, Iterable, Mapping
from typing import Any

import structlog

from .config import get_supported_extensions
from .handshake import ReadinessHandshake
from .models.enums import IntakeSource
from .models.request import FilePathRequest, IntakeBatch

log = structlog.get_logger()

# (有序请求, 是否交互式打开)
ReleaseCallback = Callable[[list[FilePathRequest], bool], None]


class FileIntakeQueue:
    """文件请求队列 -- 独占持有尚未释放的批次"""

    def __init__(
        self,
        handshake: ReadinessHandshake,
        release: ReleaseCallback,
        supported_extensions: Mapping[str, str] | None = None,
    ) -> None:
        """
        Args:
            handshake: 就绪握手，READY 时触发缓冲区释放
            release: 释放回调（通常为 FileDispatcher.enqueue）
            supported_extensions: 扩展名白名单，默认读取配置
        """
        self._handshake = handshake
        self._release = release
        self._supported = {
            ext.lower(): key
            for ext, key in (supported_extensions or get_supported_extensions()).items()
        }
        self._pending: list[IntakeBatch] = []
        self._flushed = False
        handshake.on_ready(self._flush)

    @property
    def pending_batches(self) -> tuple[IntakeBatch, ...]:
        return tuple(self._pending)

    @property
    def pending_count(self) -> int:
        """缓冲区中的请求总数"""
        return sum(len(batch.requests) for batch in self._pending)

    def is_supported(self, extension: str) -> bool:
        return extension.lower() in self._supported

    def submit(
        self,
        batch: Any,
        source: IntakeSource | str = IntakeSource.LIVE_NOTIFICATION,
    ) -> IntakeBatch | None:
        """提交一个批次（或单个路径 / 路径列表）

        Returns:
            规范化后被接受的批次；空批次或全部被过滤时返回 None
        """
        try:
            normalized = self._normalize(batch, source)
        except Exception as e:
            log.error(
                "intake_submit_rejected",
                error_type=type(e).__name__,
                error=str(e),
            )
            return None

        if normalized is None:
            log.debug("intake_batch_dropped", source=str(source))
            return None

        if not self._handshake.is_ready:
            self._pending.append(normalized)
            log.info(
                "intake_batch_buffered",
                batch_id=normalized.batch_id,
                source=normalized.source.value,
                count=len(normalized.requests),
                pending=self.pending_count,
                state=self._handshake.state.value,
            )
            return normalized

        log.info(
            "intake_batch_released",
            batch_id=normalized.batch_id,
            source=normalized.source.value,
            count=len(normalized.requests),
        )
        if not self._safe_release(list(normalized.requests), normalized.is_interactive):
            return None
        return normalized

    def _flush(self) -> None:
        """READY 回调：按到达顺序拼接缓冲区并只释放一次"""
        if self._flushed:
            return
        self._flushed = True

        pending, self._pending = self._pending, []
        requests = [request for batch in pending for request in batch.requests]
        log.info(
            "intake_pending_flushed",
            batches=len(pending),
            count=len(requests),
        )
        if requests:
            self._safe_release(requests, False)

    def _safe_release(self, requests: list[FilePathRequest], interactive: bool) -> bool:
        try:
            self._release(requests, interactive)
        except Exception as e:
            log.error(
                "intake_release_failed",
                count=len(requests),
                error_type=type(e).__name__,
                error=str(e),
            )
            return False
        return True

    def _normalize(self, batch: Any, source: IntakeSource | str) -> IntakeBatch | None:
        if batch is None:
            return None

        if isinstance(batch, IntakeBatch):
            items: Iterable[Any] = batch.requests
            source = batch.source
            arrived_at = batch.arrived_at
        else:
            arrived_at = None
            if isinstance(batch, str | bytes | bytearray | FilePathRequest | tuple):
                items = [batch]
            else:
                items = batch

        requests: list[FilePathRequest] = []
        for item in items:
            request = self._coerce(item)
            if request is None:
                continue
            if not self.is_supported(request.extension):
                log.debug(
                    "intake_unsupported_file_skipped",
                    name=request.display_name,
                    extension=request.extension,
                )
                continue
            requests.append(request)

        if not requests:
            return None

        fields: dict[str, Any] = {"requests": requests, "source": IntakeSource(source)}
        if arrived_at is not None:
            fields["arrived_at"] = arrived_at
        return IntakeBatch(**fields)

    @staticmethod
    def _coerce(item: Any) -> FilePathRequest | None:
        """单个条目 -> FilePathRequest；无法识别的条目视为空条目"""
        if item is None:
            return None
        if isinstance(item, FilePathRequest):
            # 重新规范化保证幂等
            if item.is_buffer:
                return FilePathRequest.from_buffer(item.content, item.display_name)
            return FilePathRequest.from_path(item.identifier, item.display_name)
        if isinstance(item, str):
            return FilePathRequest.from_path(item)
        if isinstance(item, tuple) and len(item) == 2:
            content, name = item
            if isinstance(content, bytes | bytearray):
                return FilePathRequest.from_buffer(bytes(content), name)
        log.debug("intake_item_unrecognized", item_type=type(item).__name__)
        return None
