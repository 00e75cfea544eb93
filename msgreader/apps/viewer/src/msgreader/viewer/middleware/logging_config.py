"""structlog 配置模块

dev 模式：彩色控制台输出，便于本地查看握手与摄入过程
json 模式：每行一条 JSON，异常栈展开为字段
标准库 logging（uvicorn、extract-msg）通过 ProcessorFormatter 汇入同一渲染器。
"""

import logging
import os

import structlog

LOG_FORMATS = ("dev", "json")

# 请求日志由 LoggingMiddleware 输出；extract-msg 对损坏文件的逐条告警由解析器汇总
QUIET_LOGGERS: dict[str, int] = {
    "uvicorn.access": logging.WARNING,
    "extract_msg": logging.ERROR,
    "olefile": logging.ERROR,
}


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> str:
    """初始化 structlog 与标准库 logging

    Args:
        log_format: "dev" | "json"，None 时读取 MSGREADER_LOG_FORMAT（默认 dev）
        log_level: 日志级别名，None 时读取 MSGREADER_LOG_LEVEL（默认 INFO）

    Returns:
        实际生效的渲染模式
    """
    requested = (log_format or os.environ.get("MSGREADER_LOG_FORMAT", "dev")).lower()
    level_name = (log_level or os.environ.get("MSGREADER_LOG_LEVEL", "INFO")).upper()
    fmt = requested if requested in LOG_FORMATS else "dev"
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if fmt == "json":
        render_chain: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ]
    else:
        render_chain = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                *render_chain,
            ],
            foreign_pre_chain=shared_processors,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)
    for name, quiet_level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(max(level, quiet_level))

    if fmt != requested:
        structlog.get_logger().warning(
            "invalid_log_format_config",
            env_var="MSGREADER_LOG_FORMAT",
            value=requested,
            fallback=fmt,
        )
    return fmt
