"""配置常量模块 -- 可通过环境变量覆盖

包含支持的扩展名白名单、就绪握手重试参数、分发并发/节流参数等可配置常量。
"""

import os

import structlog

log = structlog.get_logger()

# 默认白名单：扩展名 -> 解析器 key
DEFAULT_SUPPORTED_EXTENSIONS: dict[str, str] = {
    "msg": "msg",
    "eml": "eml",
}


def _env_int(name: str, default: int) -> int:
    """读取整数环境变量，格式错误时回退默认值（不阻塞启动）"""
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return int(val)
    except ValueError:
        log.warning("invalid_int_config", env_var=name, value=val, fallback=default)
        return default


def _env_float(name: str, default: float) -> float:
    """读取浮点环境变量，格式错误时回退默认值"""
    val = os.environ.get(name)
    if val is None:
        return default
    try:
        return float(val)
    except ValueError:
        log.warning("invalid_float_config", env_var=name, value=val, fallback=default)
        return default


def get_supported_extensions() -> dict[str, str]:
    """获取扩展名白名单

    MSGREADER_SUPPORTED_EXTENSIONS 格式: "msg=msg,eml=eml"
    只写扩展名（如 "msg,eml"）时解析器 key 与扩展名相同。
    """
    raw = os.environ.get("MSGREADER_SUPPORTED_EXTENSIONS")
    if not raw:
        return dict(DEFAULT_SUPPORTED_EXTENSIONS)

    mapping: dict[str, str] = {}
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        ext, _, parser_key = item.partition("=")
        ext = ext.strip().lstrip(".").lower()
        if ext:
            mapping[ext] = parser_key.strip() or ext

    if not mapping:
        log.warning(
            "invalid_extensions_config",
            env_var="MSGREADER_SUPPORTED_EXTENSIONS",
            value=raw,
        )
        return dict(DEFAULT_SUPPORTED_EXTENSIONS)
    return mapping


# 就绪信号总次数（立即 / 下一个调度点 / 固定延迟后）
READY_SIGNAL_ATTEMPTS: int = max(1, _env_int("MSGREADER_READY_SIGNAL_ATTEMPTS", 3))

# 最后一次就绪信号前的固定延迟（秒）
READY_RETRY_DELAY_S: float = _env_float("MSGREADER_READY_RETRY_DELAY_S", 0.5)

# 单批次内并发读取数，1 表示严格顺序
DISPATCH_CONCURRENCY: int = max(1, _env_int("MSGREADER_DISPATCH_CONCURRENCY", 1))

# 文件之间的节流延迟（秒），0 表示不延迟
DISPATCH_PACING_S: float = _env_float("MSGREADER_DISPATCH_PACING_S", 0.0)

# 关闭时等待已投递批次处理完毕的上限（秒），超时后取消工作协程
DISPATCH_DRAIN_TIMEOUT_S: float = _env_float("MSGREADER_DISPATCH_DRAIN_TIMEOUT_S", 5.0)

# SSE 心跳间隔（秒）
VIEW_HEARTBEAT_INTERVAL: int = _env_int("MSGREADER_VIEW_HEARTBEAT_INTERVAL", 15)

# 正文预览截断长度
MESSAGE_PREVIEW_LENGTH: int = 200
