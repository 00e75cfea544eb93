"""packages/core 测试配置 -- 宿主桥 / 展示层替身与 AppContext 工厂"""

import asyncio
from collections.abc import Callable

import pytest
import pytest_asyncio
from msgreader.core.context import AppContext

TEST_EXTENSIONS = {"msg": "msg", "eml": "eml"}


class FakeHostBridge:
    """内存宿主桥

    files: 路径 -> 字节；值为异常时读取抛出该异常，值为 None 时读取返回 None。
    """

    def __init__(
        self,
        files: dict | None = None,
        pending: list[str] | None = None,
        delays: dict[str, float] | None = None,
    ) -> None:
        self.files = dict(files or {})
        self.pending = list(pending or [])
        self.delays = dict(delays or {})
        self.read_calls: list[str] = []
        self.ready_signals = 0
        self.on_ready_signal: Callable[[int], None] | None = None
        self.fail_ready_signal = False
        self.dialog_paths: list[str] = []
        self.save_path: str | None = None
        self.written: dict[str, bytes] = {}
        self.fail_write = False
        self.fail_pending = False
        self.associations_error: Exception | None = None

    async def read_file(self, path: str) -> bytes:
        self.read_calls.append(path)
        if path in self.delays:
            await asyncio.sleep(self.delays[path])
        if path not in self.files:
            raise FileNotFoundError(path)
        value = self.files[path]
        if isinstance(value, Exception):
            raise value
        return value

    async def write_file(self, path: str, data: bytes) -> None:
        if self.fail_write:
            raise PermissionError(path)
        self.written[path] = data

    async def show_open_dialog(self) -> list[str]:
        return list(self.dialog_paths)

    async def show_save_dialog(self, suggested_name: str) -> str | None:
        return self.save_path

    async def register_file_associations(self) -> bool:
        if self.associations_error is not None:
            raise self.associations_error
        return True

    async def list_pending_files(self) -> list[str]:
        if self.fail_pending:
            raise ConnectionError("host unavailable")
        files, self.pending = self.pending, []
        return files

    async def notify_frontend_ready(self) -> None:
        self.ready_signals += 1
        if self.fail_ready_signal:
            raise ConnectionError("host not listening")
        if self.on_ready_signal is not None:
            self.on_ready_signal(self.ready_signals)


class RecordingPresenter:
    """记录展示调用"""

    def __init__(self) -> None:
        self.lists: list[list[str]] = []
        self.shown: list[str] = []
        self.welcome_count = 0

    def message_list_changed(self, messages) -> None:
        self.lists.append([m.display_name for m in messages])

    def show_message(self, message) -> None:
        self.shown.append(message.display_name)

    def show_welcome(self) -> None:
        self.welcome_count += 1


def fake_parse(data: bytes):
    """测试解析器：b"corrupt" 返回 None，b"boom" 抛错，其余返回文本"""
    if data == b"corrupt":
        return None
    if data == b"boom":
        raise ValueError("malformed header")
    return {"text": data.decode()}


TEST_PARSERS = {"msg": fake_parse, "eml": fake_parse}


@pytest.fixture
def parsers() -> dict:
    return dict(TEST_PARSERS)


@pytest.fixture
def bridge() -> FakeHostBridge:
    return FakeHostBridge()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest_asyncio.fixture
async def make_context(bridge: FakeHostBridge, presenter: RecordingPresenter):
    """AppContext 工厂（零延迟重试）"""
    contexts: list[AppContext] = []

    def factory(**kwargs) -> AppContext:
        kwargs.setdefault("supported_extensions", TEST_EXTENSIONS)
        kwargs.setdefault("ready_retry_delay_s", 0)
        context = AppContext(bridge, TEST_PARSERS, presenter, **kwargs)
        contexts.append(context)
        return context

    yield factory

    for context in contexts:
        await context.aclose()
