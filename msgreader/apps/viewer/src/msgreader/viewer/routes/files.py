"""文件入口路由

POST /api/files/open: 提交路径列表（拖放、命令行、宿主转发）。
POST /api/files/drop: 提交内存文件（base64 内容 + 文件名）。
POST /api/files/dialog: 通过宿主打开文件对话框选择文件。
POST /api/files/associations: 注册文件类型关联。
被过滤或为空的提交返回 202 + accepted=0，不视为错误。
"""

import base64
import binascii

from fastapi import APIRouter, Depends
from msgreader.core.context import AppContext
from msgreader.core.models import IntakeBatch, IntakeSource
from pydantic import BaseModel, Field
from starlette.responses import JSONResponse

from ..deps import get_context

router = APIRouter()


class OpenFilesRequest(BaseModel):
    """路径提交请求体"""

    paths: list[str | None] = Field(default_factory=list, description="路径列表")
    source: IntakeSource = Field(default=IntakeSource.DRAG_DROP, description="来源标签")


class DropFileRequest(BaseModel):
    """内存文件提交请求体"""

    name: str = Field(description="文件名")
    content_b64: str = Field(description="base64 编码内容")


class IntakeResponse(BaseModel):
    """提交响应"""

    accepted: int
    buffered: bool
    batch_id: str | None = None


def _intake_response(context: AppContext, batch: IntakeBatch | None) -> JSONResponse:
    return JSONResponse(
        status_code=202,
        content=IntakeResponse(
            accepted=len(batch.requests) if batch else 0,
            buffered=batch is not None and not context.handshake.is_ready,
            batch_id=batch.batch_id if batch else None,
        ).model_dump(),
    )


@router.post("/api/files/open")
async def open_files(body: OpenFilesRequest, context: AppContext = Depends(get_context)):
    """提交路径列表，握手未完成时进入待处理缓冲区"""
    batch = context.submit(body.paths, body.source)
    return _intake_response(context, batch)


@router.post("/api/files/drop")
async def drop_file(body: DropFileRequest, context: AppContext = Depends(get_context)):
    """提交拖放的内存文件"""
    try:
        content = base64.b64decode(body.content_b64, validate=True)
    except (binascii.Error, ValueError):
        return JSONResponse(
            status_code=400,
            content={
                "error": {
                    "code": "INVALID_CONTENT",
                    "message": "content_b64 is not valid base64",
                }
            },
        )
    batch = context.submit([(content, body.name)], IntakeSource.DRAG_DROP)
    return _intake_response(context, batch)


@router.post("/api/files/dialog")
async def open_dialog(context: AppContext = Depends(get_context)):
    """宿主文件对话框"""
    batch = await context.open_with_dialog()
    return _intake_response(context, batch)


@router.post("/api/files/associations")
async def register_associations(context: AppContext = Depends(get_context)):
    """注册为 .msg / .eml 的默认打开程序"""
    registered = await context.register_file_associations()
    return {"registered": registered}
