"""消息路由

GET    /api/messages: 按显示顺序列出消息摘要
GET    /api/messages/{index}: 消息详情（含解析结构）
POST   /api/messages/{index}/show: 展示消息
POST   /api/messages/{index}/pin: 切换置顶
DELETE /api/messages/{index}: 删除消息，返回删除后展示的消息
POST   /api/messages/{index}/export: 通过保存对话框导出原始文件
下标是当前显示顺序中的位置，任何修改后需重新获取列表。
"""

from fastapi import APIRouter, Depends
from msgreader.core.context import AppContext
from msgreader.core.exceptions import MessageNotFoundError
from msgreader.core.models import Message, MessageSummary
from starlette.responses import JSONResponse

from ..deps import get_context, get_view_state
from ..services.view_state import ViewState

router = APIRouter()


def _not_found(error: MessageNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": {
                "code": "MESSAGE_NOT_FOUND",
                "message": str(error),
            }
        },
    )


def _summary(context: AppContext, view: ViewState, message: Message | None) -> dict | None:
    if message is None:
        return None
    index = context.store.index_of(message.message_id)
    return MessageSummary.from_message(
        index if index is not None else -1,
        message,
        view.current_message_id,
    ).model_dump(mode="json")


@router.get("/api/messages")
async def list_messages(
    context: AppContext = Depends(get_context),
    view: ViewState = Depends(get_view_state),
):
    """消息列表（最新在前）"""
    messages = context.store.get_messages()
    return {
        "messages": [
            MessageSummary.from_message(i, m, view.current_message_id).model_dump(mode="json")
            for i, m in enumerate(messages)
        ],
        "current_message_id": view.current_message_id,
        "handshake_state": context.handshake.state.value,
    }


@router.get("/api/messages/{index}")
async def get_message(index: int, context: AppContext = Depends(get_context)):
    """消息详情"""
    try:
        message = context.store.get_message(index)
    except MessageNotFoundError as e:
        return _not_found(e)
    return {
        "index": index,
        "message": message.model_dump(mode="json"),
    }


@router.post("/api/messages/{index}/show")
async def show_message(
    index: int,
    context: AppContext = Depends(get_context),
    view: ViewState = Depends(get_view_state),
):
    try:
        message = context.show_message(index)
    except MessageNotFoundError as e:
        return _not_found(e)
    return {"message": _summary(context, view, message)}


@router.post("/api/messages/{index}/pin")
async def toggle_pin(
    index: int,
    context: AppContext = Depends(get_context),
    view: ViewState = Depends(get_view_state),
):
    try:
        message = context.toggle_pin(index)
    except MessageNotFoundError as e:
        return _not_found(e)
    return {"message": _summary(context, view, message)}


@router.delete("/api/messages/{index}")
async def delete_message(
    index: int,
    context: AppContext = Depends(get_context),
    view: ViewState = Depends(get_view_state),
):
    """删除消息，集合为空时 next 为 null（回到欢迎页）"""
    try:
        next_message = context.delete_message(index)
    except MessageNotFoundError as e:
        return _not_found(e)
    return {
        "next": _summary(context, view, next_message),
        "remaining": len(context.store),
    }


@router.post("/api/messages/{index}/export")
async def export_message(index: int, context: AppContext = Depends(get_context)):
    try:
        path = await context.export_message(index)
    except MessageNotFoundError as e:
        return _not_found(e)
    return {"exported": path is not None, "path": path}
