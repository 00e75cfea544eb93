"""全局 pytest 配置 -- 邮件样本构造 fixture"""

from collections.abc import Callable
from pathlib import Path

import pytest

OLE_HEADER = bytes.fromhex("D0CF11E0A1B11AE1")


def _build_eml(subject: str = "Hello", body: str = "Body text", sender: str = "alice@example.com") -> bytes:
    return (
        f"From: {sender}\r\n"
        f"To: bob@example.com\r\n"
        f"Subject: {subject}\r\n"
        f"Date: Mon, 19 Oct 2026 09:00:00 +0000\r\n"
        f"Message-ID: <{subject.replace(' ', '-')}@example.com>\r\n"
        f"Content-Type: text/plain; charset=utf-8\r\n"
        f"\r\n"
        f"{body}\r\n"
    ).encode()


@pytest.fixture
def eml_bytes() -> Callable[..., bytes]:
    """构造最小 RFC 822 邮件"""
    return _build_eml


@pytest.fixture
def msg_bytes() -> bytes:
    """OLE 复合文档签名开头的 .msg 样本"""
    return OLE_HEADER + b"\x00" * 504


@pytest.fixture
def mail_dir(tmp_path: Path, msg_bytes: bytes) -> Callable[..., Path]:
    """在临时目录写入邮件文件，.msg 写入 OLE 样本，其余按 eml 构造"""
    mail_root = tmp_path / "mail"
    mail_root.mkdir(parents=True, exist_ok=True)

    def write(name: str, content: bytes | None = None) -> Path:
        path = mail_root / name
        if content is None:
            content = msg_bytes if name.lower().endswith(".msg") else _build_eml(subject=name)
        path.write_bytes(content)
        return path

    return write
