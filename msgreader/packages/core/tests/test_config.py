"""配置常量单元测试 -- 环境变量解析与回退"""

import pytest
from msgreader.core.config import (
    DEFAULT_SUPPORTED_EXTENSIONS,
    _env_float,
    _env_int,
    get_supported_extensions,
)


class TestSupportedExtensions:
    def test_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("MSGREADER_SUPPORTED_EXTENSIONS", raising=False)
        assert get_supported_extensions() == DEFAULT_SUPPORTED_EXTENSIONS

    def test_mapping_format(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_SUPPORTED_EXTENSIONS", "msg=msg, .EML=eml, emlx=eml")
        assert get_supported_extensions() == {"msg": "msg", "eml": "eml", "emlx": "eml"}

    def test_bare_extensions(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_SUPPORTED_EXTENSIONS", "msg,eml")
        assert get_supported_extensions() == {"msg": "msg", "eml": "eml"}

    def test_invalid_falls_back(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_SUPPORTED_EXTENSIONS", " , ,")
        assert get_supported_extensions() == DEFAULT_SUPPORTED_EXTENSIONS

    def test_returns_copy(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("MSGREADER_SUPPORTED_EXTENSIONS", raising=False)
        get_supported_extensions()["txt"] = "txt"
        assert "txt" not in DEFAULT_SUPPORTED_EXTENSIONS


class TestEnvNumbers:
    def test_env_int(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_TEST_INT", "7")
        assert _env_int("MSGREADER_TEST_INT", 3) == 7

    def test_env_int_invalid_falls_back(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_TEST_INT", "seven")
        assert _env_int("MSGREADER_TEST_INT", 3) == 3

    def test_env_float(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("MSGREADER_TEST_FLOAT", "0.25")
        assert _env_float("MSGREADER_TEST_FLOAT", 1.0) == 0.25

    def test_env_float_missing(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("MSGREADER_TEST_FLOAT", raising=False)
        assert _env_float("MSGREADER_TEST_FLOAT", 1.5) == 1.5
