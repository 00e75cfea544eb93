"""集成测试共享 fixture -- 走完整 lifespan 的 viewer 应用"""

import asyncio
from collections.abc import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture(autouse=True)
def host_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("MSGREADER_HOST_AUTO_ACK", raising=False)
    monkeypatch.delenv("MSGREADER_MAX_FILE_BYTES", raising=False)
    monkeypatch.delenv("MSGREADER_HOST_READ_TIMEOUT_S", raising=False)


@pytest_asyncio.fixture
async def run_viewer():
    """启动 viewer（执行 lifespan），返回 (app, client)"""
    from msgreader.viewer.main import create_app

    stack: list = []

    async def start(startup_files: list[str] | None = None):
        app = create_app(startup_files)
        lifespan = app.router.lifespan_context(app)
        await lifespan.__aenter__()
        client = AsyncClient(transport=ASGITransport(app=app), base_url="http://test")
        stack.append((lifespan, client))
        return app, client

    yield start

    for lifespan, client in reversed(stack):
        await client.aclose()
        await lifespan.__aexit__(None, None, None)


@pytest.fixture
def wait_until() -> Callable:
    async def wait(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        async def poll() -> None:
            while not predicate():
                await asyncio.sleep(0.01)

        await asyncio.wait_for(poll(), timeout=timeout)

    return wait
