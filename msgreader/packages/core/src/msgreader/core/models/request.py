"""FilePathRequest / IntakeBatch Domain Model

FilePathRequest 是一次文件打开请求：路径字符串，或字节内容 + 显示名。
IntakeBatch 是同一来源一次到达的有序请求组。
规范化后的标识对再次规范化幂等。
"""

import re
from datetime import UTC, datetime
from urllib.parse import unquote

from pydantic import BaseModel, Field
from ulid import ULID

from .enums import IntakeSource

_ESCAPE_RE = re.compile(r"%[0-9A-Fa-f]{2}")
_DRIVE_RE = re.compile(r"^/[A-Za-z]:/")
_FILE_URI_PREFIX = "file://"


def normalize_identifier(raw: str) -> str:
    """规范化路径标识

    1. 解码百分号编码（解码结果仍含编码序列时保持原样，保证幂等）
    2. 去除 file:// 前缀，以及 Windows 盘符前多余的斜杠
    3. 统一路径分隔符为 "/"
    """
    text = raw.strip()
    stripped_uri = False

    if _ESCAPE_RE.search(text):
        decoded = unquote(text)
        if not _ESCAPE_RE.search(decoded):
            text = decoded

    text = text.replace("\\", "/")
    while True:
        text = text.strip()
        if not text.lower().startswith(_FILE_URI_PREFIX):
            break
        text = text[len(_FILE_URI_PREFIX) :]
        stripped_uri = True

    if stripped_uri and _DRIVE_RE.match(text):
        text = text[1:]
    return text


def final_segment(identifier: str) -> str:
    """取路径最后一段作为显示名"""
    return identifier.rstrip("/").rsplit("/", 1)[-1]


def infer_extension(name: str) -> str:
    """取最后一个 "." 之后的子串（小写），无 "." 时返回空串"""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


class FilePathRequest(BaseModel):
    """单个文件打开请求

    raw_identifier 保留原始输入；identifier 为规范化后的路径。
    content 不为 None 时为字节请求（拖放的内存文件），分发时跳过宿主读取。
    """

    raw_identifier: str = Field(description="原始标识")
    identifier: str = Field(description="规范化标识（已解码、分隔符统一）")
    display_name: str = Field(description="显示名，默认为路径最后一段")
    extension: str = Field(description="小写扩展名，无扩展名时为空串")
    content: bytes | None = Field(default=None, repr=False, description="字节内容")

    @property
    def is_buffer(self) -> bool:
        return self.content is not None

    @classmethod
    def from_path(cls, raw: str, display_name: str | None = None) -> "FilePathRequest | None":
        """从路径字符串构建，空路径返回 None"""
        if not raw or not raw.strip():
            return None
        identifier = normalize_identifier(raw)
        if not identifier:
            return None
        name = display_name or final_segment(identifier)
        return cls(
            raw_identifier=raw,
            identifier=identifier,
            display_name=name,
            extension=infer_extension(name),
        )

    @classmethod
    def from_buffer(cls, content: bytes, display_name: str | None) -> "FilePathRequest | None":
        """从字节内容构建，缺少显示名时无法推断扩展名，返回 None"""
        if content is None or not display_name or not display_name.strip():
            return None
        name = final_segment(normalize_identifier(display_name))
        if not name:
            return None
        return cls(
            raw_identifier=display_name,
            identifier=name,
            display_name=name,
            extension=infer_extension(name),
            content=bytes(content),
        )


class IntakeBatch(BaseModel):
    """同一来源一次到达的有序请求组

    空批次（或全部为空条目的批次）在进入队列前被丢弃。
    """

    batch_id: str = Field(default_factory=lambda: str(ULID()), description="批次 ID")
    requests: list[FilePathRequest] = Field(default_factory=list, description="有序请求")
    source: IntakeSource = Field(description="来源标签")
    arrived_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="到达时间",
    )

    @property
    def is_empty(self) -> bool:
        return not self.requests

    @property
    def is_interactive(self) -> bool:
        """用户交互式打开单个文件（拖放/选择一个文件）"""
        return self.source == IntakeSource.DRAG_DROP and len(self.requests) == 1
