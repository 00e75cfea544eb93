"""解析器适配 -- bytes -> 结构 | None

eml: 基于标准库 email 包读取头部、正文预览和附件名。
msg: 校验 OLE 复合文档签名后交给 extract-msg 提取主题、发件人、正文和附件；
     签名正确但字段提取失败时仍返回基础元数据（格式、大小、摘要）。
解析失败返回 None（或抛出异常），由 FileDispatcher 在单文件边界内隔离。
"""

import hashlib
from email import policy
from email.message import EmailMessage
from email.parser import BytesParser
from typing import Any

import extract_msg
import structlog
from msgreader.core.config import MESSAGE_PREVIEW_LENGTH
from msgreader.core.protocols import MessageParser

log = structlog.get_logger()

# OLE2 复合文档文件头
OLE_SIGNATURE = bytes.fromhex("D0CF11E0A1B11AE1")


def _preview(text: Any) -> str:
    if not text:
        return ""
    return " ".join(str(text).split())[:MESSAGE_PREVIEW_LENGTH]


def _body_preview(message: EmailMessage) -> str:
    body = message.get_body(preferencelist=("plain", "html"))
    if body is None:
        return ""
    try:
        text = body.get_content()
    except (LookupError, ValueError) as e:
        log.debug("eml_body_decode_failed", error=str(e))
        return ""
    return _preview(text)


def parse_eml(data: bytes) -> dict[str, Any] | None:
    """解析 RFC 822 邮件，没有任何头部时返回 None"""
    if not data or not data.strip():
        return None

    message = BytesParser(policy=policy.default).parsebytes(data)
    if not message.keys():
        return None

    attachments = [
        part.get_filename() or "(unnamed)"
        for part in message.iter_attachments()
    ]
    return {
        "format": "eml",
        "subject": str(message.get("Subject", "")),
        "from": str(message.get("From", "")),
        "to": str(message.get("To", "")),
        "cc": str(message.get("Cc", "")),
        "date": str(message.get("Date", "")),
        "message_id": str(message.get("Message-ID", "")),
        "body_preview": _body_preview(message),
        "attachments": attachments,
        "size": len(data),
    }


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _msg_fields(data: bytes) -> dict[str, Any]:
    """用 extract-msg 读取 Outlook 消息字段"""
    with extract_msg.openMsg(data) as msg:
        attachments = [
            getattr(att, "longFilename", None)
            or getattr(att, "shortFilename", None)
            or "(unnamed)"
            for att in getattr(msg, "attachments", [])
        ]
        return {
            "subject": _text(getattr(msg, "subject", None)),
            "from": _text(getattr(msg, "sender", None)),
            "to": _text(getattr(msg, "to", None)),
            "cc": _text(getattr(msg, "cc", None)),
            "date": _text(getattr(msg, "date", None)),
            "message_id": _text(getattr(msg, "messageId", None)),
            "body_preview": _preview(getattr(msg, "body", None)),
            "attachments": attachments,
        }


def parse_msg(data: bytes) -> dict[str, Any] | None:
    """解析 Outlook .msg（OLE 复合文档），签名不符返回 None"""
    if len(data) < len(OLE_SIGNATURE) or not data.startswith(OLE_SIGNATURE):
        return None

    result: dict[str, Any] = {
        "format": "msg",
        "subject": "",
        "from": "",
        "to": "",
        "cc": "",
        "date": "",
        "message_id": "",
        "body_preview": "",
        "attachments": [],
        "size": len(data),
        "sha256": hashlib.sha256(data).hexdigest(),
        "fields_extracted": False,
    }
    try:
        fields = _msg_fields(data)
    except Exception as e:
        # 损坏或非邮件类的复合文档：保留基础元数据
        log.warning(
            "msg_field_extraction_failed",
            size=len(data),
            error_type=type(e).__name__,
            error=str(e),
        )
        return result

    result.update(fields)
    result["fields_extracted"] = True
    return result


def default_parsers() -> dict[str, MessageParser]:
    """解析器 key -> 解析函数"""
    return {
        "eml": parse_eml,
        "msg": parse_msg,
    }
