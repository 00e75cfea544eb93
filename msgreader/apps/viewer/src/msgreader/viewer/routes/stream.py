"""SSE 展示事件流路由

GET /api/stream: 实时推送展示事件（列表变化、展示消息、回到欢迎页）。
新连接先收到一条当前列表快照，随后推送新事件，空闲时发送心跳保活。
"""

import asyncio
import json

from fastapi import APIRouter, Depends
from msgreader.core.config import VIEW_HEARTBEAT_INTERVAL
from msgreader.core.context import AppContext
from sse_starlette.sse import EventSourceResponse

from ..deps import get_context, get_view_hub, get_view_state
from ..services.view_hub import ViewEvent, ViewEventHub, ViewEventType
from ..services.view_state import ViewState

router = APIRouter()


def _event_to_sse(event: ViewEvent) -> dict:
    """将 ViewEvent 转换为 SSE 消息"""
    data = {
        "event_id": event.event_id,
        "ts": event.ts.isoformat(),
        "type": event.type.value,
        "payload": event.payload,
    }
    return {
        "id": event.event_id,
        "event": event.type.value,
        "data": json.dumps(data, ensure_ascii=False),
    }


async def view_event_stream(
    hub: ViewEventHub,
    queue: asyncio.Queue,
    snapshot: ViewEvent,
    heartbeat_interval: float = VIEW_HEARTBEAT_INTERVAL,
):
    """SSE 消息生成器：快照 -> 实时事件，空闲时心跳，结束时取消订阅"""
    try:
        yield _event_to_sse(snapshot)
        while True:
            try:
                event = await asyncio.wait_for(queue.get(), timeout=heartbeat_interval)
                yield _event_to_sse(event)
            except TimeoutError:
                yield {"comment": "heartbeat"}
    finally:
        await hub.unsubscribe(queue)


@router.get("/api/stream")
async def stream_view_events(
    context: AppContext = Depends(get_context),
    view: ViewState = Depends(get_view_state),
    hub: ViewEventHub = Depends(get_view_hub),
):
    # 先注册订阅，保证快照与后续事件之间不丢事件
    queue = await hub.subscribe()
    snapshot = ViewEvent(
        type=ViewEventType.MESSAGE_LIST_CHANGED,
        payload={
            "count": len(context.store),
            "message_ids": [m.message_id for m in context.store.get_messages()],
            "current_message_id": view.current_message_id,
        },
    )

    return EventSourceResponse(view_event_stream(hub, queue, snapshot))
