"""FileDispatcher -- 逐文件驱动摄入流水线

每个文件按顺序：
1. 以路径最后一段作为显示名
2. 调用宿主读取（字节请求跳过）
3. 按扩展名选择解析器
4. 解析成功后插入 MessageStore 头部（最新在前）
2-4 任一步失败只记录日志并继续下一个文件，单个文件失败不会中断批次。
展示层通知失败只记录日志，不影响文件本身的摄入结果。

展示策略：批次完成后，展示提交顺序中最后一个成功处理的文件；全部失败时不改变展示。
交互式打开单个文件时，只有该消息是唯一消息时才展示。

批次通过内部 asyncio.Queue 串行消费，跨批次保持提交顺序。
"""

import asyncio
from collections.abc import Mapping

import structlog

from .config import (
    DISPATCH_CONCURRENCY,
    DISPATCH_DRAIN_TIMEOUT_S,
    DISPATCH_PACING_S,
    get_supported_extensions,
)
from .exceptions import FileReadError, IntakeError, MessageParseError
from .models.message import Message
from .models.request import FilePathRequest
from .protocols import HostBridge, MessageParser, Presenter
from .store.message_store import MessageStore

log = structlog.get_logger()


class FileDispatcher:
    """文件分发器 -- MessageStore 的唯一写入方"""

    def __init__(
        self,
        bridge: HostBridge,
        store: MessageStore,
        parsers: Mapping[str, MessageParser],
        presenter: Presenter | None = None,
        *,
        supported_extensions: Mapping[str, str] | None = None,
        concurrency: int = DISPATCH_CONCURRENCY,
        pacing_s: float = DISPATCH_PACING_S,
    ) -> None:
        """
        Args:
            bridge: 宿主桥（读取文件）
            store: 消息集合
            parsers: 解析器 key -> 解析函数
            presenter: 展示层，None 表示无界面（仅写入 store）
            supported_extensions: 扩展名 -> 解析器 key
            concurrency: 单批次并发读取数，1 为严格顺序
            pacing_s: 文件之间的节流延迟（秒）
        """
        self._bridge = bridge
        self._store = store
        self._parsers = dict(parsers)
        self._presenter = presenter
        self._extensions = {
            ext.lower(): key
            for ext, key in (supported_extensions or get_supported_extensions()).items()
        }
        self._concurrency = max(1, concurrency)
        self._pacing_s = max(0.0, pacing_s)
        self._jobs: asyncio.Queue[tuple[list[FilePathRequest], bool]] = asyncio.Queue()
        self._worker: asyncio.Task | None = None

    @property
    def store(self) -> MessageStore:
        return self._store

    def enqueue(self, requests: list[FilePathRequest], interactive: bool = False) -> None:
        """投递一个批次到串行工作队列（必须在事件循环内调用）"""
        if not requests:
            return
        self._jobs.put_nowait((list(requests), interactive))
        self._ensure_worker()

    async def join(self) -> None:
        """等待所有已投递批次处理完毕"""
        await self._jobs.join()

    async def aclose(self, drain_timeout_s: float = DISPATCH_DRAIN_TIMEOUT_S) -> None:
        """停止工作协程

        先在 drain_timeout_s 内等待已投递批次处理完毕，超时后才取消；
        取消后仍在队列中的批次被丢弃并标记完成，之后的 join() 不会挂起。
        """
        if self._worker is None:
            return
        if not self._worker.done():
            try:
                await asyncio.wait_for(self._jobs.join(), timeout=drain_timeout_s)
            except TimeoutError:
                log.warning(
                    "dispatch_drain_timeout",
                    timeout_s=drain_timeout_s,
                    queued=self._jobs.qsize(),
                )
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

        dropped = 0
        while not self._jobs.empty():
            requests, _ = self._jobs.get_nowait()
            dropped += len(requests)
            self._jobs.task_done()
        if dropped:
            log.warning("dispatch_queue_dropped", count=dropped)

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(
                self._run(), name="msgreader-dispatch"
            )

    async def _run(self) -> None:
        while True:
            requests, interactive = await self._jobs.get()
            try:
                await self.dispatch(requests, interactive=interactive)
            except Exception as e:
                log.error(
                    "dispatch_batch_crashed",
                    count=len(requests),
                    error_type=type(e).__name__,
                    error=str(e),
                )
            finally:
                self._jobs.task_done()

    async def dispatch(
        self,
        requests: list[FilePathRequest],
        *,
        interactive: bool = False,
    ) -> list[Message]:
        """对一个有序批次执行摄入

        Returns:
            按提交顺序排列的成功消息
        """
        if self._concurrency > 1 and len(requests) > 1:
            results = await self._dispatch_concurrent(requests, interactive)
        else:
            results = await self._dispatch_sequential(requests, interactive)

        succeeded = [message for message in results if message is not None]
        log.info(
            "dispatch_completed",
            attempted=len(requests),
            succeeded=len(succeeded),
            failed=len(requests) - len(succeeded),
            interactive=interactive,
        )

        if succeeded and not interactive:
            self._notify_presenter("show_message", succeeded[-1])
        return succeeded

    async def _dispatch_sequential(
        self, requests: list[FilePathRequest], interactive: bool
    ) -> list[Message | None]:
        results: list[Message | None] = []
        for i, request in enumerate(requests):
            if i and self._pacing_s:
                await asyncio.sleep(self._pacing_s)
            try:
                data = await self._read(request)
                message = self._ingest(request, data, interactive)
            except IntakeError as e:
                self._log_failure(e)
                message = None
            except Exception as e:
                self._log_unexpected(request, e)
                message = None
            results.append(message)
        return results

    async def _dispatch_concurrent(
        self, requests: list[FilePathRequest], interactive: bool
    ) -> list[Message | None]:
        # 读取并发执行；解析与插入仍按提交顺序进行
        semaphore = asyncio.Semaphore(self._concurrency)

        async def fetch(request: FilePathRequest) -> bytes:
            async with semaphore:
                return await self._read(request)

        payloads = await asyncio.gather(
            *(fetch(request) for request in requests),
            return_exceptions=True,
        )

        results: list[Message | None] = []
        for request, data in zip(requests, payloads, strict=True):
            if isinstance(data, IntakeError):
                self._log_failure(data)
                results.append(None)
                continue
            if isinstance(data, BaseException):
                raise data
            try:
                message = self._ingest(request, data, interactive)
            except IntakeError as e:
                self._log_failure(e)
                message = None
            except Exception as e:
                self._log_unexpected(request, e)
                message = None
            results.append(message)
        return results

    async def _read(self, request: FilePathRequest) -> bytes:
        if request.content is not None:
            return request.content
        try:
            data = await self._bridge.read_file(request.identifier)
        except Exception as e:
            raise FileReadError(request.identifier, e) from e
        if data is None:
            raise FileReadError(request.identifier)
        return bytes(data)

    def _parse(self, request: FilePathRequest, data: bytes):
        parser_key = self._extensions.get(request.extension)
        parser = self._parsers.get(parser_key) if parser_key else None
        if parser is None:
            raise MessageParseError(
                request.identifier, f"no parser for extension '{request.extension}'"
            )
        try:
            parsed = parser(data)
        except Exception as e:
            raise MessageParseError(
                request.identifier, f"{type(e).__name__}: {e}"
            ) from e
        if parsed is None:
            raise MessageParseError(request.identifier, "parser returned no structure")
        return parsed

    def _ingest(
        self, request: FilePathRequest, data: bytes, interactive: bool
    ) -> Message:
        parsed = self._parse(request, data)
        message = self._store.add_message(
            parsed,
            request.display_name,
            extension=request.extension,
            source_path=None if request.is_buffer else request.identifier,
            content=data,
        )
        log.info(
            "message_ingested",
            message_id=message.message_id,
            name=message.display_name,
            size=len(data),
        )

        self._notify_presenter("message_list_changed", self._store.get_messages())
        if interactive and len(self._store) == 1:
            self._notify_presenter("show_message", message)
        return message

    def _notify_presenter(self, method: str, *args) -> None:
        """调用展示层；失败只记录日志，消息已入库不回滚"""
        if self._presenter is None:
            return
        try:
            getattr(self._presenter, method)(*args)
        except Exception as e:
            log.warning(
                "presenter_update_failed",
                method=method,
                error_type=type(e).__name__,
                error=str(e),
            )

    @staticmethod
    def _log_unexpected(request: FilePathRequest, error: Exception) -> None:
        log.error(
            "file_ingest_failed",
            stage=IntakeError.stage,
            path=request.identifier,
            error_type=type(error).__name__,
            error=str(error),
        )

    @staticmethod
    def _log_failure(error: IntakeError) -> None:
        log.warning(
            "file_ingest_failed",
            stage=error.stage,
            path=error.path,
            error=str(error),
        )
