"""宿主通知路由

POST /api/host/events: 进程外宿主投递 Host -> UI 通知。
通知直接交给 AppContext 路由，与进程内通知泵走同一条路径。
"""

import structlog
from fastapi import APIRouter, Depends
from msgreader.core.context import AppContext
from msgreader.core.models import HostNotification
from starlette.responses import JSONResponse

from ..deps import get_context

log = structlog.get_logger()

router = APIRouter()


@router.post("/api/host/events")
async def post_host_event(
    notification: HostNotification,
    context: AppContext = Depends(get_context),
):
    await context.handle_notification(notification)
    return JSONResponse(
        status_code=202,
        content={
            "type": notification.type.value,
            "handshake_state": context.handshake.state.value,
        },
    )
