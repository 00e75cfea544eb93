"""apps/viewer 测试配置 -- FastAPI app（绕过 lifespan）+ httpx AsyncClient"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from msgreader.bridge import BridgeConfig, LocalHostBridge, default_parsers
from msgreader.core.context import AppContext
from msgreader.viewer.services.view_hub import ViewEventHub
from msgreader.viewer.services.view_state import ViewState


@pytest_asyncio.fixture
async def test_app():
    """创建测试用 FastAPI app，手动初始化 app.state"""
    from msgreader.viewer.main import create_app

    app = create_app()

    bridge = LocalHostBridge(config=BridgeConfig(auto_ack=False))
    view_hub = ViewEventHub()
    view_state = ViewState(view_hub)
    context = AppContext(
        bridge,
        default_parsers(),
        view_state,
        supported_extensions={"msg": "msg", "eml": "eml"},
        ready_retry_delay_s=0,
    )
    app.state.bridge = bridge
    app.state.view_hub = view_hub
    app.state.view_state = view_state
    app.state.context = context

    yield app

    await context.aclose()


@pytest_asyncio.fixture
async def context(test_app) -> AppContext:
    return test_app.state.context


@pytest_asyncio.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    ) as ac:
        yield ac
