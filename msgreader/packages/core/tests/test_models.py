"""Domain Model 单元测试

测试内容：
1. 路径规范化（百分号解码、file URI、分隔符）及其幂等性
2. 扩展名推断
3. FilePathRequest / IntakeBatch 构建
4. Message 序列化
"""

import pytest
from msgreader.core.models import (
    FilePathRequest,
    IntakeBatch,
    IntakeSource,
    Message,
    MessageSummary,
    final_segment,
    infer_extension,
    normalize_identifier,
)
from pydantic import ValidationError


class TestNormalizeIdentifier:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("C:\\Users\\ann\\Mail%20One.msg", "C:/Users/ann/Mail One.msg"),
            ("file:///C:/inbox/a.eml", "C:/inbox/a.eml"),
            ("file:///home/ann/a.eml", "/home/ann/a.eml"),
            ("FILE:///tmp/x.msg", "/tmp/x.msg"),
            ("  /tmp/report.msg  ", "/tmp/report.msg"),
            ("/tmp/%E6%8A%A5%E5%91%8A.eml", "/tmp/报告.eml"),
            ("/tmp/plain.msg", "/tmp/plain.msg"),
        ],
    )
    def test_normalize(self, raw: str, expected: str):
        assert normalize_identifier(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "C:\\Users\\ann\\Mail%20One.msg",
            "file:///C:/inbox/a.eml",
            "/tmp/100%2525.msg",
            "/tmp/a%20b%2520c.eml",
            " file:// file:///tmp/x.msg ",
            "\\\\server\\share\\x.msg",
        ],
    )
    def test_normalize_is_idempotent(self, raw: str):
        """规范化两次与一次结果相同"""
        once = normalize_identifier(raw)
        assert normalize_identifier(once) == once

    def test_double_encoded_sequence_kept(self):
        """解码后仍含编码序列时不解码"""
        assert normalize_identifier("/tmp/%2541.msg") == "/tmp/%2541.msg"


class TestExtension:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("a.msg", "msg"),
            ("Quarterly.Report.EML", "eml"),
            ("noext", ""),
            ("trailing.", ""),
            (".eml", "eml"),
        ],
    )
    def test_infer_extension(self, name: str, expected: str):
        assert infer_extension(name) == expected

    def test_final_segment(self):
        assert final_segment("C:/inbox/a.eml") == "a.eml"
        assert final_segment("a.eml") == "a.eml"


class TestFilePathRequest:
    def test_from_path(self):
        request = FilePathRequest.from_path("C:\\inbox\\Status%20Update.MSG")
        assert request is not None
        assert request.raw_identifier == "C:\\inbox\\Status%20Update.MSG"
        assert request.identifier == "C:/inbox/Status Update.MSG"
        assert request.display_name == "Status Update.MSG"
        assert request.extension == "msg"
        assert request.is_buffer is False

    @pytest.mark.parametrize("raw", ["", "   ", "\t"])
    def test_empty_path_rejected(self, raw: str):
        assert FilePathRequest.from_path(raw) is None

    def test_from_buffer(self):
        request = FilePathRequest.from_buffer(b"data", "C:\\drop\\note.eml")
        assert request is not None
        assert request.display_name == "note.eml"
        assert request.extension == "eml"
        assert request.is_buffer is True
        assert request.content == b"data"

    def test_buffer_without_name_rejected(self):
        assert FilePathRequest.from_buffer(b"data", None) is None
        assert FilePathRequest.from_buffer(b"data", "  ") is None

    def test_renormalizing_request_is_stable(self):
        request = FilePathRequest.from_path("file:///C:/a%20b.eml")
        again = FilePathRequest.from_path(request.identifier)
        assert again.identifier == request.identifier
        assert again.extension == request.extension


class TestIntakeBatch:
    def test_interactive_single_drag_drop(self):
        batch = IntakeBatch(
            requests=[FilePathRequest.from_path("a.msg")],
            source=IntakeSource.DRAG_DROP,
        )
        assert batch.is_interactive is True
        assert batch.is_empty is False

    def test_multi_file_drag_drop_not_interactive(self):
        batch = IntakeBatch(
            requests=[FilePathRequest.from_path("a.msg"), FilePathRequest.from_path("b.eml")],
            source=IntakeSource.DRAG_DROP,
        )
        assert batch.is_interactive is False

    def test_startup_scan_not_interactive(self):
        batch = IntakeBatch(
            requests=[FilePathRequest.from_path("a.msg")],
            source=IntakeSource.STARTUP_SCAN,
        )
        assert batch.is_interactive is False

    def test_batch_id_generated(self):
        a = IntakeBatch(source=IntakeSource.LIVE_NOTIFICATION)
        b = IntakeBatch(source=IntakeSource.LIVE_NOTIFICATION)
        assert a.batch_id != b.batch_id
        assert a.is_empty is True


class TestMessage:
    def test_seq_must_be_positive(self):
        with pytest.raises(ValidationError):
            Message(message_id="m", seq=0, display_name="a.msg")

    def test_content_excluded_from_dump(self):
        message = Message(message_id="m", seq=1, display_name="a.eml", content=b"raw")
        dumped = message.model_dump(mode="json")
        assert "content" not in dumped
        assert dumped["display_name"] == "a.eml"
        assert message.content == b"raw"

    def test_summary_marks_current(self):
        message = Message(message_id="m1", seq=1, display_name="a.eml", extension="eml")
        summary = MessageSummary.from_message(0, message, "m1")
        assert summary.current is True
        assert MessageSummary.from_message(0, message, "other").current is False
