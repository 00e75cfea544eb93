"""FastAPI 应用主文件

app 创建 + lifespan 管理：宿主桥、展示状态、AppContext 初始化，
通知泵先于就绪握手启动，关闭时停止通知泵并回收分发器。
"""

from collections.abc import AsyncGenerator, Sequence
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from msgreader.bridge import LocalHostBridge, default_parsers, load_bridge_config
from msgreader.core.context import AppContext

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .routes import files, health, host, messages, stream
from .services.host_listener import HostEventPump
from .services.view_hub import ViewEventHub
from .services.view_state import ViewState

log = structlog.get_logger()


def _build_lifespan(startup_files: Sequence[str]):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """应用生命周期管理"""
        bridge_config = load_bridge_config()
        bridge = LocalHostBridge(startup_files=startup_files, config=bridge_config)
        app.state.bridge = bridge

        view_hub = ViewEventHub()
        view_state = ViewState(view_hub)
        app.state.view_hub = view_hub
        app.state.view_state = view_state

        context = AppContext(bridge, default_parsers(), view_state)
        app.state.context = context

        # 通知泵必须先于就绪信号订阅，否则 backend-ready 会丢失
        pump = HostEventPump(bridge, context)
        pump.start()
        app.state.host_pump = pump

        await context.startup()
        log.info(
            "viewer_started",
            handshake_state=context.handshake.state.value,
            ready_reason=context.handshake.ready_reason,
            startup_files=len(startup_files),
        )

        yield

        await pump.stop()
        await context.aclose()
        log.info("viewer_stopped", messages=len(context.store))

    return lifespan


def create_app(startup_files: Sequence[str] | None = None) -> FastAPI:
    """创建 FastAPI 应用实例

    Args:
        startup_files: 启动参数中扫描出的文件，作为宿主积压文件在启动时拉取
    """
    app = FastAPI(
        title="msgreader Viewer",
        version="0.1.0",
        description="Outlook .msg / RFC 822 .eml 阅读器",
        lifespan=_build_lifespan(list(startup_files or [])),
    )

    app.add_middleware(LoggingMiddleware)

    setup_logging()

    app.include_router(files.router, tags=["files"])
    app.include_router(host.router, tags=["host"])
    app.include_router(messages.router, tags=["messages"])
    app.include_router(stream.router, tags=["stream"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
