"""依赖注入模块 -- 通过 FastAPI Depends 注入 AppContext 等实例

实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Request
from msgreader.core.context import AppContext

from .services.view_hub import ViewEventHub
from .services.view_state import ViewState


def get_context(request: Request) -> AppContext:
    """从 app.state 获取 AppContext 实例"""
    return request.app.state.context


def get_view_state(request: Request) -> ViewState:
    """从 app.state 获取 ViewState 实例"""
    return request.app.state.view_state


def get_view_hub(request: Request) -> ViewEventHub:
    """从 app.state 获取 ViewEventHub 实例"""
    return request.app.state.view_hub
