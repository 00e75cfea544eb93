"""BridgeConfig -- 宿主桥配置加载

从环境变量加载配置。
"""

import os

import structlog
from pydantic import BaseModel, Field

log = structlog.get_logger()


class BridgeConfig(BaseModel):
    """宿主桥配置 -- 从环境变量加载

    环境变量:
        MSGREADER_HOST_AUTO_ACK: 收到"前端已就绪"后是否回发 backend-ready（默认 true）
        MSGREADER_MAX_FILE_BYTES: 单文件读取上限（默认 64 MiB）
        MSGREADER_HOST_READ_TIMEOUT_S: 读取超时（秒，默认不限时）
    """

    auto_ack: bool = Field(
        default=True,
        description="是否自动确认前端就绪信号",
    )
    max_file_bytes: int = Field(
        default=64 * 1024 * 1024,
        ge=1,
        description="单文件读取上限（字节）",
    )
    read_timeout_s: float | None = Field(
        default=None,
        gt=0,
        description="读取超时（秒），None 表示不限时",
    )


def load_bridge_config() -> BridgeConfig:
    """从环境变量加载宿主桥配置

    环境变量映射:
        MSGREADER_HOST_AUTO_ACK -> auto_ack (默认 True)
        MSGREADER_MAX_FILE_BYTES -> max_file_bytes (默认 64 MiB)
        MSGREADER_HOST_READ_TIMEOUT_S -> read_timeout_s (默认 None)

    Returns:
        BridgeConfig 实例
    """
    kwargs: dict = {}

    if val := os.environ.get("MSGREADER_HOST_AUTO_ACK"):
        kwargs["auto_ack"] = val.strip().lower() not in ("0", "false", "no", "off")

    if val := os.environ.get("MSGREADER_MAX_FILE_BYTES"):
        try:
            kwargs["max_file_bytes"] = int(val)
        except ValueError:
            log.warning(
                "invalid_max_file_bytes_config",
                env_var="MSGREADER_MAX_FILE_BYTES",
                value=val,
            )

    if val := os.environ.get("MSGREADER_HOST_READ_TIMEOUT_S"):
        try:
            kwargs["read_timeout_s"] = float(val)
        except ValueError:
            log.warning(
                "invalid_read_timeout_config",
                env_var="MSGREADER_HOST_READ_TIMEOUT_S",
                value=val,
            )

    return BridgeConfig(**kwargs)
