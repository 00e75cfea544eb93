"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，握手到达 Ready 时返回 200，否则 503。
"""

from fastapi import APIRouter, Depends
from msgreader.core.context import AppContext
from starlette.responses import JSONResponse

from ..deps import get_context

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(context: AppContext = Depends(get_context)):
    """Readiness 检查

    检查项：
    1. handshake: 握手状态与进入 Ready 的原因
    2. ready_signals_sent: 已发出的就绪信号次数
    3. pending_files: 仍在缓冲区中的文件数
    """
    handshake = context.handshake
    checks = {
        "handshake": handshake.state.value,
        "ready_reason": handshake.ready_reason.value if handshake.ready_reason else None,
        "ready_signals_sent": handshake.signals_sent,
        "pending_files": context.intake.pending_count,
    }
    is_ready = handshake.is_ready
    return JSONResponse(
        status_code=200 if is_ready else 503,
        content={
            "status": "ready" if is_ready else "not_ready",
            "checks": checks,
        },
    )
